"""Wavetable oscillator with a Q16.16 phase accumulator."""

from picosynth.fixed_point import _f32
from picosynth.wavetable import WAVE_TABLE_LEN, WaveType, wavetable_for

BUFFER_SIZE = 1156
SAMPLE_RATE = 44100


class Oscillator:
    """Reads a wavetable at a fixed step, one buffer of samples at a time.

    ``output`` is the same list object for the oscillator's lifetime, so
    other stages may hold a reference to it.
    """

    def __init__(self, wave_type=WaveType.SINE, freq=440.0):
        self.wave_type = wave_type
        self.wavetable = wavetable_for(wave_type)
        self.output = [0] * BUFFER_SIZE
        self.pos = 0
        self.step = 0
        self.freq = freq
        self.set_freq(freq)

    def out(self):
        """Fill the output buffer with the next block of samples and return it."""
        pos_mask = (WAVE_TABLE_LEN << 16) - 1
        table = self.wavetable
        pos, step = self.pos, self.step
        samples = []
        for _ in range(BUFFER_SIZE):
            samples.append(table[pos >> 16])
            pos = (pos + step) & pos_mask
        self.pos = pos
        self.output[:] = samples
        return self.output

    def set_freq(self, new_freq):
        """Set the playing frequency in Hz and restart the phase."""
        per_sample = _f32(_f32(WAVE_TABLE_LEN * _f32(new_freq)) / float(SAMPLE_RATE))
        self.step = int(_f32(per_sample * 65536.0)) & 0xFFFFFFFF
        self.freq = new_freq
        self.pos = 0