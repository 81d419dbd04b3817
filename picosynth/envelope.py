"""ADSR envelope applied block-wise in Q8.24 fixed point."""

import enum

from picosynth.fixed_point import (
    Q24_ONE,
    _f32,
    q24_div,
    q24_from_float,
    q24_mul,
    q24_sub,
    wrap_i16,
    wrap_i32,
)
from picosynth.oscillator import BUFFER_SIZE, SAMPLE_RATE

TRIGGER_THRESHOLD = 4.5
SAMPLE_DELTA = int(_f32(1.0 / SAMPLE_RATE) * Q24_ONE)


class EnvelopeState(enum.Enum):
    ATTACK = 0
    DECAY = 1
    SUSTAIN = 2
    RELEASE = 3
    IDLE = 4


class ADSREnvelope:
    """Scales an input buffer by an attack/decay/sustain/release curve.

    Times are in seconds and the sustain level is a fraction of full scale.
    A trigger above 4.5 starts the note, one below 4.5 releases it. The
    gain is evaluated once per buffer.
    """

    def __init__(self, a=0.0, d=1.0, s=0.4, r=1.0, in_signal=None, trigger=0.0):
        self.a = q24_from_float(a)
        self.d = q24_from_float(d)
        self.s = q24_from_float(s)
        self.r = q24_from_float(r)
        self.in_signal = in_signal
        self.trigger = trigger
        self.state = EnvelopeState.IDLE
        self.current_scale = 0
        self.release_start_level = 0
        self.t = 0
        self.output = [0] * BUFFER_SIZE

    def _next_scale(self):
        state = self.state
        if state is EnvelopeState.ATTACK:
            scale = q24_div(self.t, self.a)
            if self.t >= self.a:
                self.state = EnvelopeState.DECAY
                self.t = 0
                scale = Q24_ONE
        elif state is EnvelopeState.DECAY:
            one_minus_s = q24_sub(Q24_ONE, self.s)
            scale = Q24_ONE - q24_mul(one_minus_s, q24_div(self.t, self.d))
            if self.t >= self.d:
                self.state = EnvelopeState.SUSTAIN
                self.t = 0
                scale = self.s
        elif state is EnvelopeState.SUSTAIN:
            scale = self.s
        elif state is EnvelopeState.RELEASE:
            if self.trigger > TRIGGER_THRESHOLD:
                self.state = EnvelopeState.ATTACK
                self.t = 0
            scale = q24_mul(self.release_start_level, Q24_ONE - q24_div(self.t, self.r))
            if self.t >= self.r:
                scale = 0
                self.state = EnvelopeState.IDLE
        else:
            if self.trigger > TRIGGER_THRESHOLD:
                self.state = EnvelopeState.ATTACK
                self.t = 0
            scale = 0
        return scale & 0xFFFFFFFF

    def out(self):
        """Advance the envelope by one buffer and return the scaled input."""
        if self.in_signal is None:
            raise ValueError("envelope has no input signal")
        if len(self.in_signal) != BUFFER_SIZE:
            raise ValueError(
                f"input signal must hold {BUFFER_SIZE} samples, got {len(self.in_signal)}"
            )

        if self.trigger < TRIGGER_THRESHOLD and self.state not in (
            EnvelopeState.RELEASE,
            EnvelopeState.IDLE,
        ):
            self.release_start_level = self.current_scale
            self.t = 0
            self.state = EnvelopeState.RELEASE

        scale = self._next_scale()
        self.current_scale = wrap_i32(scale)
        gain_q2_14 = wrap_i16(scale >> 10)
        self.output[:] = [wrap_i16((sample * gain_q2_14) >> 14) for sample in self.in_signal]
        self.t = wrap_i32(self.t + SAMPLE_DELTA * BUFFER_SIZE)
        return self.output

    def set_trigger(self, trig):
        self.trigger = trig

    def set_idle(self):
        self.state = EnvelopeState.IDLE