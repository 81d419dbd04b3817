"""Block-optimised oscillator, envelope and a synth that steals voices.

The envelope works in unsigned 32-bit Q8.24 arithmetic: every product and
sum wraps modulo 2**32 exactly as it does on the target, so large
intermediate values overflow instead of growing.
"""

import enum

from picosynth.envelope import SAMPLE_DELTA, TRIGGER_THRESHOLD
from picosynth.fixed_point import Q24_ONE, _f32, wrap_i16
from picosynth.midi import midi_to_freq
from picosynth.oscillator import BUFFER_SIZE, SAMPLE_RATE
from picosynth.wavetable import (
    SAWTOOTH_WAVE_TABLE,
    SINE_WAVE_TABLE,
    SQUARE_WAVE_TABLE,
    TRIANGLE_WAVE_TABLE,
    WAVE_TABLE_LEN,
    WaveType,
)

NUM_OSC = 8

NOTE_ON = 0x90
NOTE_OFF = 0x80
CONTROL_CHANGE = 0xB0

TRIGGER_ON = 5.0
TRIGGER_OFF = 0.0

_FAST_TABLES = {
    WaveType.SINE: SINE_WAVE_TABLE,
    WaveType.SQUARE: SQUARE_WAVE_TABLE,
    WaveType.TRIANGLE: TRIANGLE_WAVE_TABLE,
    WaveType.SAWTOOTH: SAWTOOTH_WAVE_TABLE,
}

_DEFAULT_A = 8388608
_DEFAULT_D = 1677722
_DEFAULT_S = 6710886
_DEFAULT_R = 16777216


def _u32(x):
    return int(x) & 0xFFFFFFFF


def _to_fixed(value):
    return _u32(int(_f32(_f32(value) * Q24_ONE)))


class FastOscillator:
    """Wavetable oscillator whose frequency changes keep the current phase.

    Sinc is not offered here; it and unknown types play a sine.
    """

    def __init__(self, wave_type=WaveType.SINE, freq=0.0):
        self.wave_type = wave_type
        self.wavetable = _FAST_TABLES.get(wave_type, SINE_WAVE_TABLE)
        self.output = [0] * BUFFER_SIZE
        self.pos = 0
        self.step = 0
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
        """Set the playing frequency in Hz without restarting the phase."""
        per_sample = _f32(_f32(WAVE_TABLE_LEN * _f32(new_freq)) / float(SAMPLE_RATE))
        self.step = _u32(int(_f32(per_sample * 65536.0)))


class FastEnvelopeState(enum.Enum):
    IDLE = 0
    ATTACK = 1
    DECAY = 2
    SUSTAIN = 3
    RELEASE = 4


class FastEnvelope:
    """ADSR envelope evaluated per sample, with phase changes inside a buffer.

    Times are in seconds, the sustain level a fraction of full scale. Any
    parameter left as None takes the built-in default (0.5 s attack,
    about 0.1 s decay, 0.4 sustain, 1 s release).
    """

    def __init__(self, a=None, d=None, s=None, r=None, in_signal=None, trigger=0.0):
        self.a = _DEFAULT_A if a is None else _to_fixed(a)
        self.d = _DEFAULT_D if d is None else _to_fixed(d)
        self.s = _DEFAULT_S if s is None else _to_fixed(s)
        self.r = _DEFAULT_R if r is None else _to_fixed(r)
        self.in_signal = in_signal
        self.triggered = trigger > TRIGGER_THRESHOLD
        self.state = FastEnvelopeState.IDLE
        self.t = 0
        self.current_scale = 0
        self.release_start = 0
        self.output = [0] * BUFFER_SIZE

    def set_trigger(self, trig):
        self.triggered = trig > TRIGGER_THRESHOLD

    def _scale(self, state):
        if state is FastEnvelopeState.ATTACK:
            return _u32(self.t * Q24_ONE) // self.a
        if state is FastEnvelopeState.DECAY:
            one_minus_s = _u32(Q24_ONE - self.s)
            return _u32(Q24_ONE - _u32(one_minus_s * self.t) // self.d)
        if state is FastEnvelopeState.RELEASE:
            return _u32(self.release_start * _u32(Q24_ONE - self.t // self.r))
        return self.s

    def _fill(self, state, start, stop, track=True):
        if start >= stop:
            return
        if self.in_signal is None:
            raise ValueError("envelope has no input signal")
        if len(self.in_signal) != BUFFER_SIZE:
            raise ValueError(
                f"input signal must hold {BUFFER_SIZE} samples, got {len(self.in_signal)}"
            )
        advances = state is not FastEnvelopeState.SUSTAIN
        for i in range(start, stop):
            scale = self._scale(state)
            if track:
                self.current_scale = scale
            self.output[i] = wrap_i16(_u32(_u32(self.in_signal[i]) * scale) >> 24)
            if advances:
                self.t = _u32(self.t + SAMPLE_DELTA)

    def _silence(self, start=0):
        self.output[start:] = [0] * (BUFFER_SIZE - start)

    def _samples_until(self, limit):
        return (limit - self.t) // SAMPLE_DELTA

    def _ends_within_buffer(self, limit):
        return _u32(self.t + BUFFER_SIZE * SAMPLE_DELTA) >= limit

    def out(self):
        """Advance the envelope by one buffer and return the scaled input."""
        S = FastEnvelopeState
        if not self.triggered and self.state not in (S.RELEASE, S.IDLE):
            self.release_start = self.current_scale
            self.t = 0
            self.state = S.RELEASE

        state = self.state
        if state is S.ATTACK:
            if self.t >= self.a:
                self.state = S.DECAY
                self.t = 0
                self._fill(S.DECAY, 0, BUFFER_SIZE)
            elif self._ends_within_buffer(self.a):
                split = self._samples_until(self.a)
                self._fill(S.ATTACK, 0, split)
                self.state = S.DECAY
                self.t = 0
                self._fill(S.DECAY, split, BUFFER_SIZE)
            else:
                self._fill(S.ATTACK, 0, BUFFER_SIZE)
        elif state is S.DECAY:
            if self.t >= self.d:
                self.state = S.SUSTAIN
                self.t = 0
                self._fill(S.SUSTAIN, 0, BUFFER_SIZE)
            elif self._ends_within_buffer(self.d):
                split = self._samples_until(self.d)
                self._fill(S.DECAY, 0, split)
                self.state = S.SUSTAIN
                self._fill(S.SUSTAIN, split, BUFFER_SIZE, track=False)
            else:
                self._fill(S.DECAY, 0, BUFFER_SIZE)
        elif state is S.SUSTAIN:
            self._fill(S.SUSTAIN, 0, BUFFER_SIZE)
        elif state is S.RELEASE:
            if self.triggered:
                self.state = S.ATTACK
                self.t = 0
                self._fill(S.ATTACK, 0, BUFFER_SIZE)
            elif self.t >= self.r:
                self.state = S.IDLE
                self._silence()
            elif self._ends_within_buffer(self.r):
                split = self._samples_until(self.r)
                self._fill(S.RELEASE, 0, split)
                self.state = S.IDLE
                self._silence(split)
            else:
                self._fill(S.RELEASE, 0, BUFFER_SIZE)
        else:
            if self.triggered:
                self.state = S.ATTACK
                self.t = 0
                self._fill(S.ATTACK, 0, BUFFER_SIZE)
            else:
                self._silence()
        return self.output


class VoiceStealingSynth:
    """Eight-voice synth that renders only active voices and reuses the oldest.

    Voices stay allocated after note-off; once all are taken a new note
    takes over a voice chosen by age.
    """

    def __init__(self):
        self.oscillators = [FastOscillator(WaveType.SQUARE, 440.0) for _ in range(NUM_OSC)]
        self.envelopes = [
            FastEnvelope(0.5, 0.1, 0.4, 1.0, osc.output, 0.0) for osc in self.oscillators
        ]
        self.output = [0] * BUFFER_SIZE
        self.osc_midi_note = [0] * NUM_OSC
        self.osc_playing = [False] * NUM_OSC
        self.osc_age = [0] * NUM_OSC
        self.voice_counter = 0

    def out(self):
        """Render the next buffer, averaged over the active voices, and return it."""
        mix = [0] * BUFFER_SIZE
        active = 0
        for osc, env, playing in zip(self.oscillators, self.envelopes, self.osc_playing):
            if not playing:
                continue
            active += 1
            osc.out()
            env.out()
            mix = [acc + sample for acc, sample in zip(mix, env.output)]
        divisor = max(active, 1)
        self.output[:] = [
            max(-32768, min(32767, int(total / divisor))) for total in mix
        ]
        return self.output

    def process_midi_packet(self, packet):
        """Handle one 4-byte USB-MIDI event packet."""
        if len(packet) < 4:
            raise ValueError(f"MIDI packet must hold 4 bytes, got {len(packet)}")
        msg_type = packet[1] & 0xF0
        note = packet[2]
        velocity = packet[3]
        if msg_type == NOTE_ON:
            if velocity > 0:
                self.note_on(note, velocity)
            else:
                self.note_off(note, velocity)
        elif msg_type == NOTE_OFF:
            self.note_off(note, velocity)

    def _next_age(self):
        age = self.voice_counter
        self.voice_counter = (self.voice_counter + 1) & 0xFF
        return age

    def _voice_playing(self, note):
        for i, (voice_note, playing) in enumerate(zip(self.osc_midi_note, self.osc_playing)):
            if playing and voice_note == note:
                return i
        return None

    def _find_voice_to_steal(self):
        oldest = 255
        oldest_index = 0
        for i, age in enumerate(self.osc_age):
            age_diff = (self.voice_counter - age) & 0xFF
            if age_diff > oldest:
                oldest = age_diff
                oldest_index = i
        return oldest_index

    def note_on(self, note, velocity):
        """Retrigger a playing note, or give it a free or stolen voice."""
        playing = self._voice_playing(note)
        if playing is not None:
            self.envelopes[playing].set_trigger(TRIGGER_ON)
            self.osc_age[playing] = self._next_age()
            return
        voice = next(
            (i for i, busy in enumerate(self.osc_playing) if not busy), None
        )
        if voice is None:
            voice = self._find_voice_to_steal()
        self.osc_playing[voice] = True
        self.osc_midi_note[voice] = note
        self.osc_age[voice] = self._next_age()
        self.oscillators[voice].set_freq(midi_to_freq(note))
        self.envelopes[voice].set_trigger(TRIGGER_ON)

    def note_off(self, note, velocity):
        """Release the envelope of the voice playing ``note``; the voice stays allocated."""
        voice = self._voice_playing(note)
        if voice is not None:
            self.envelopes[voice].set_trigger(TRIGGER_OFF)