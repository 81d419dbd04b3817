"""Precomputed wave, window and function lookup tables."""

import enum
import math

from picosynth.fixed_point import Q24_ONE, _f32, q24_from_float, wrap_i16, wrap_i32

WAVE_TABLE_LEN = 512
FILTER_ORDER = 33

Q15_MAX = 32767
Q14_MAX = 16384


class WaveType(enum.Enum):
    """Waveforms an oscillator can play."""

    SINE = 0
    SQUARE = 1
    TRIANGLE = 2
    SAWTOOTH = 3
    SINC = 4


def _i16(value):
    """Truncate a float toward zero and wrap it to int16."""
    return wrap_i16(int(value))


def _indices():
    return range(WAVE_TABLE_LEN)


SINE_WAVE_TABLE = tuple(
    _i16(Q15_MAX * math.sin(i * 2 * math.pi / WAVE_TABLE_LEN)) for i in _indices()
)

COS_WAVE_TABLE = tuple(
    _i16(Q15_MAX * math.cos(i * 2 * math.pi / WAVE_TABLE_LEN)) for i in _indices()
)


def _sinc_sample(i, width=32):
    if i == 0:
        return Q15_MAX
    x = i / width
    return _i16(Q15_MAX * math.sin(math.pi * x) / (math.pi * x))


SINC_TABLE = tuple(_sinc_sample(i) for i in _indices())

SQUARE_WAVE_TABLE = tuple(
    Q15_MAX if i < WAVE_TABLE_LEN // 2 else -Q15_MAX for i in _indices()
)


def _triangle_sample(i):
    phase = i / WAVE_TABLE_LEN
    if phase < 0.5:
        return _i16(4 * Q15_MAX * phase - Q15_MAX)
    return _i16(-4 * Q15_MAX * (phase - 0.5) + Q15_MAX)


TRIANGLE_WAVE_TABLE = tuple(_triangle_sample(i) for i in _indices())

SAWTOOTH_WAVE_TABLE = tuple(
    _i16(2 * Q15_MAX * (i / WAVE_TABLE_LEN) - Q15_MAX) for i in _indices()
)


def _sinc_fp_sample(i, width=32):
    if i == 0:
        return Q24_ONE
    x = i * width / WAVE_TABLE_LEN
    return q24_from_float(_f32(math.sin(math.pi * x) / (math.pi * x)))


SINC_TABLE_FP = tuple(_sinc_fp_sample(i) for i in _indices())

HANNING_WINDOW_TABLE_FP = tuple(
    q24_from_float(
        _f32(0.5 * (1.0 - math.cos(2.0 * math.pi * i / (FILTER_ORDER - 1.0))))
    )
    for i in range(FILTER_ORDER)
)

# Covers tan over [0, pi/4), i.e. values from 0 up to just below 1.
TAN_WAVE_TABLE = tuple(
    _i16(Q15_MAX * math.tan(i * 0.25 * math.pi / WAVE_TABLE_LEN)) for i in _indices()
)

SINH_WAVE_TABLE = tuple(
    _i16(Q14_MAX * math.sinh(1.0 * i / WAVE_TABLE_LEN)) for i in _indices()
)

COSH_WAVE_TABLE = tuple(
    _i16(Q14_MAX * math.cosh(1.0 * i / WAVE_TABLE_LEN)) for i in _indices()
)


def _u_sample(i):
    x = 1.0 * i / WAVE_TABLE_LEN
    return _i16(Q14_MAX * math.log((1.0 + math.sqrt(1.0 + x * x)) / x))


_u_tail = [_u_sample(i) for i in range(1, WAVE_TABLE_LEN)]
U_WAVE_TABLE = tuple([_u_tail[0], *_u_tail])
del _u_tail

_TABLES_BY_TYPE = {
    WaveType.SINE: SINE_WAVE_TABLE,
    WaveType.SQUARE: SQUARE_WAVE_TABLE,
    WaveType.TRIANGLE: TRIANGLE_WAVE_TABLE,
    WaveType.SAWTOOTH: SAWTOOTH_WAVE_TABLE,
    WaveType.SINC: SINC_TABLE,
}


def wavetable_for(wave_type):
    """Return the table for a wave type; unknown types fall back to sine."""
    return _TABLES_BY_TYPE.get(wave_type, SINE_WAVE_TABLE)


def lookup_table_interpolate(table, x, q):
    """Linearly interpolate a table at x, a fraction of its length with q fractional bits."""
    x = wrap_i16(x)
    scaled = x * WAVE_TABLE_LEN
    index = wrap_i16(scaled >> q)
    if index < 0 or index + 1 >= len(table):
        raise IndexError(f"table position {index} out of range")
    low, high = table[index], table[index + 1]
    frac = wrap_i16(wrap_i16(scaled) - (index << q))
    return wrap_i16(wrap_i32(low * ((1 << q) - frac) + high * frac) >> q)