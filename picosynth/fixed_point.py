"""Fixed-point arithmetic in Q16.16, Q8.24, Q1.15, Q2.14 and Q8.8 formats.

Values are plain Python integers. Results are wrapped to the width of the
target type with two's complement semantics, and float inputs are rounded
to single precision first, so results match 32-bit embedded arithmetic.
"""

import struct

Q16_FRAC_BITS = 16
Q16_ONE = 1 << Q16_FRAC_BITS
Q16_HALF = Q16_ONE >> 1

Q24_FRAC_BITS = 24
Q24_ONE = 1 << Q24_FRAC_BITS
Q24_HALF = Q24_ONE >> 1

_FLOAT32 = struct.Struct("<f")


def _f32(x):
    """Round a number to the nearest single-precision float."""
    return _FLOAT32.unpack(_FLOAT32.pack(x))[0]


def _trunc_div(a, b):
    """Integer division truncating toward zero."""
    if b == 0:
        raise ZeroDivisionError("fixed-point division by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def wrap_i16(x):
    """Wrap an integer to the signed 16-bit range."""
    return ((int(x) + 0x8000) & 0xFFFF) - 0x8000


def wrap_i32(x):
    """Wrap an integer to the signed 32-bit range."""
    return ((int(x) + 0x80000000) & 0xFFFFFFFF) - 0x80000000


# Q16.16


def q16_from_int(x):
    return wrap_i32(x << Q16_FRAC_BITS)


def q16_to_int(x):
    return x >> Q16_FRAC_BITS


def q16_from_float(x):
    return wrap_i32(int(_f32(x) * Q16_ONE))


def q16_to_float(x):
    return _f32(x) / Q16_ONE


def q16_add(a, b):
    return wrap_i32(a + b)


def q16_sub(a, b):
    return wrap_i32(a - b)


def q16_mul(a, b):
    return wrap_i32((a * b) >> Q16_FRAC_BITS)


def q16_div(a, b):
    return wrap_i32(_trunc_div(a << Q16_FRAC_BITS, b))


# Q8.24


def q24_from_int(x):
    return wrap_i32(x << Q24_FRAC_BITS)


def q24_to_int(x):
    return x >> Q24_FRAC_BITS


def q24_from_float(x):
    return wrap_i32(int(_f32(x) * Q24_ONE))


def q24_to_float(x):
    return _f32(x) / Q24_ONE


def q24_add(a, b):
    return wrap_i32(a + b)


def q24_sub(a, b):
    return wrap_i32(a - b)


def q24_mul(a, b):
    return wrap_i32((a * b) >> Q24_FRAC_BITS)


def q24_div(a, b):
    return wrap_i32(_trunc_div(a << Q24_FRAC_BITS, b))


# Conversion between formats


def q16_to_q24(x):
    return wrap_i32(x << (Q24_FRAC_BITS - Q16_FRAC_BITS))


def q24_to_q16(x):
    return x >> (Q24_FRAC_BITS - Q16_FRAC_BITS)


# 16-bit formats


def float_to_q2_14(value):
    """Convert to Q2.14, truncating toward zero."""
    return wrap_i16(int(_f32(value) * (1 << 14)))


def float_to_q1_15(value):
    """Convert to Q1.15, truncating toward zero."""
    return wrap_i16(int(_f32(value) * (1 << 15)))


def float_to_q8_8(value):
    """Convert to Q8.8, truncating toward zero."""
    return wrap_i16(int(_f32(value) * (1 << 8)))


def q2_14_to_float(value):
    return value / (1 << 14)


def q1_15_to_float(value):
    return value / (1 << 15)


def q8_8_to_float(value):
    return value / (1 << 8)