[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "picosynth"
version = "0.1.0"
description = "Fixed-point wavetable synthesizer: oscillators, ADSR envelopes, MIDI note handling and a voice-stealing polyphonic synth"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "synthesizer",
    "wavetable",
    "fixed-point",
    "adsr",
    "midi",
    "audio",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["picosynth"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
