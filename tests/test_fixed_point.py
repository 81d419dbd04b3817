import pytest

from picosynth.fixed_point import (
    Q16_ONE,
    Q24_HALF,
    Q24_ONE,
    float_to_q1_15,
    float_to_q2_14,
    float_to_q8_8,
    q1_15_to_float,
    q2_14_to_float,
    q8_8_to_float,
    q16_add,
    q16_div,
    q16_from_float,
    q16_from_int,
    q16_mul,
    q16_sub,
    q16_to_float,
    q16_to_int,
    q16_to_q24,
    q24_add,
    q24_div,
    q24_from_float,
    q24_from_int,
    q24_mul,
    q24_sub,
    q24_to_float,
    q24_to_int,
    q24_to_q16,
    wrap_i16,
    wrap_i32,
)


def test_wrap_i16_two_complement():
    assert wrap_i16(32768) == -32768
    assert wrap_i16(-32769) == 32767
    assert wrap_i16(1234) == 1234


def test_wrap_i32_two_complement():
    assert wrap_i32(2**31) == -(2**31)
    assert wrap_i32(2**32 + 5) == 5


@pytest.mark.parametrize("value", [-100, -1, 0, 1, 7, 32767])
def test_q16_int_round_trip(value):
    assert q16_to_int(q16_from_int(value)) == value


@pytest.mark.parametrize("value", [-100, -1, 0, 1, 7, 127])
def test_q24_int_round_trip(value):
    assert q24_to_int(q24_from_int(value)) == value


def test_float_conversion_of_one():
    assert q16_from_float(1.0) == Q16_ONE
    assert q24_from_float(1.0) == Q24_ONE
    assert q16_to_float(Q16_ONE) == 1.0
    assert q24_to_float(Q24_ONE) == 1.0


def test_q24_from_float_matches_sustain_default():
    assert q24_from_float(0.4) == 6710886


def test_q24_to_int_shifts_arithmetically():
    assert q24_to_int(-1) == -1


def test_mul_by_one_is_identity():
    for value in (q24_from_float(0.25), q24_from_float(-3.5), 12345):
        assert q24_mul(value, Q24_ONE) == value
    assert q16_mul(q16_from_float(-2.75), Q16_ONE) == q16_from_float(-2.75)


def test_mul_and_div_agree():
    assert q16_mul(q16_from_float(1.5), q16_from_int(2)) == q16_from_int(3)
    assert q24_div(q24_from_int(1), q24_from_int(2)) == Q24_HALF
    assert q16_div(q16_from_int(3), q16_from_float(1.5)) == q16_from_int(2)


def test_div_truncates_toward_zero():
    positive = q16_div(q16_from_int(1), q16_from_int(3))
    negative = q16_div(q16_from_int(-1), q16_from_int(3))
    assert negative == -positive


@pytest.mark.parametrize("divide", [q16_div, q24_div])
def test_div_by_zero_raises(divide):
    with pytest.raises(ZeroDivisionError):
        divide(Q24_ONE, 0)


def test_add_and_sub_wrap():
    assert q16_add(2**31 - 1, 1) == -(2**31)
    assert q24_sub(-(2**31), 1) == 2**31 - 1
    assert q24_add(q24_from_int(2), q24_from_int(3)) == q24_from_int(5)
    assert q16_sub(q16_from_int(2), q16_from_int(3)) == q16_from_int(-1)


def test_q16_q24_conversion_round_trip():
    for value in (q24_from_float(0.5), q24_from_int(-3), 256 * 17):
        assert q16_to_q24(q24_to_q16(value)) == value
    assert q16_to_q24(Q16_ONE) == Q24_ONE


def test_sixteen_bit_formats_of_one():
    assert float_to_q2_14(1.0) == 1 << 14
    assert float_to_q1_15(0.5) == 1 << 14
    assert float_to_q8_8(1.0) == 1 << 8


def test_q1_15_of_one_wraps():
    assert float_to_q1_15(1.0) == -32768


def test_sixteen_bit_truncation_toward_zero():
    assert float_to_q8_8(-0.001) == 0


@pytest.mark.parametrize("value", [-0.9, -0.3, 0.0, 0.1234, 0.75])
def test_sixteen_bit_round_trips(value):
    assert abs(q1_15_to_float(float_to_q1_15(value)) - value) <= 2**-15
    assert abs(q2_14_to_float(float_to_q2_14(value)) - value) <= 2**-14
    assert abs(q8_8_to_float(float_to_q8_8(value)) - value) <= 2**-8