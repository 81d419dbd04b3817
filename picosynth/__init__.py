"""Fixed-point wavetable synthesizer: tables, oscillators, ADSR envelopes, MIDI and a voice-stealing synth."""

__version__ = "0.1.0"

__all__ = [
    "envelope",
    "fixed_point",
    "midi",
    "oscillator",
    "voice_stealing",
    "wavetable",
]