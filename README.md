# picosynth

A small polyphonic wavetable synthesizer whose signal path runs in
integer fixed-point arithmetic, so every sample it produces is exactly
reproducible. It uses only the standard library.

## What is inside

- `picosynth.fixed_point`: Q16.16, Q8.24, Q1.15, Q2.14 and Q8.8 helpers
  (`q24_mul`, `q24_div`, `q16_from_float`, `float_to_q1_15`,
  `wrap_i16`, `wrap_i32`, ...). Results wrap on overflow the way 16- and
  32-bit integers do, and float inputs are rounded to single precision
  first.
- `picosynth.wavetable`: 512-entry lookup tables for sine, square,
  triangle, sawtooth and sinc waves, chosen with `WaveType` and
  `wavetable_for` (unknown types fall back to sine), plus cosine, tangent,
  sinh, cosh, a windowed-sinc table and a 33-point Hanning window, and
  `lookup_table_interpolate` for linear interpolation into a table.
- `picosynth.oscillator`: `Oscillator`, a Q16.16 phase-accumulating table
  oscillator. `out()` renders a block of 1156 samples at 44100 Hz;
  `set_freq()` changes the frequency and restarts the phase.
- `picosynth.envelope`: `ADSREnvelope`, an attack/decay/sustain/release
  gain (`EnvelopeState`) applied to an input buffer once per block. A
  trigger above 4.5 (`set_trigger`) starts a note, one below releases it;
  `set_idle()` forces the idle state.
- `picosynth.midi`: `midi_to_freq` (0.0 outside notes 0..127) and
  `MidiHandler`, which hands received packets to a synth and, every
  286 ms, returns note-on/note-off messages for the next note of a demo
  sequence.
- `picosynth.voice_stealing`: `VoiceStealingSynth`, eight square-wave
  voices built on `FastOscillator` and `FastEnvelope` (a per-sample
  envelope that changes stage inside a block). Only active voices are
  rendered and the mix is averaged over them and clipped to 16 bits.
  Voices stay allocated after note-off; when all eight are taken, a new
  note takes over a voice chosen by age.

## Install

```
pip install .
pip install ".[test]"   # to run the tests
```

## Using the synthesizer

```python
from picosynth.voice_stealing import VoiceStealingSynth

synth = VoiceStealingSynth()
synth.process_midi_packet(bytes([0x09, 0x90, 69, 127]))  # note on, A4
block = synth.out()                                      # 1156 samples
synth.process_midi_packet(bytes([0x08, 0x80, 69, 0]))    # note off
```

Packets use the USB-MIDI four-byte layout: cable/code byte, status,
note, velocity. Note-on with velocity 0 counts as note-off; other
message types are ignored.

A single voice can be built by hand:

```python
from picosynth.oscillator import Oscillator
from picosynth.envelope import ADSREnvelope
from picosynth.wavetable import WaveType

osc = Oscillator(WaveType.TRIANGLE, 440.0)
env = ADSREnvelope(0.1, 0.2, 0.5, 0.3, osc.output, 5.0)
osc.out()
samples = env.out()
```

`MidiHandler(synth).midi_task(packets, current_ms)` passes each packet
to `synth.process_midi_packet` and returns the list of 3-byte messages
due at `current_ms`.

## What it does not do

- There is no low-pass filtering: the synth output is the raw averaged
  mix of its voices.
- There is no command-line tool and no audio output: blocks are returned
  as lists of integers for the caller to write or play.
- There is no MIDI device input: packets must be supplied by the caller.

## Tests

```
pytest
```