"""
Tests for the storage and display timestamp formats.
"""

import pytest

from mpvmarkers.timecode import (
    decode_storage,
    encode_display,
    encode_storage,
    try_decode_storage,
)


class TestEncodeStorage:
    """Test H:MM:SS.CC encoding."""

    def test_zero(self):
        assert encode_storage(0) == "0:00:00.00"

    def test_truncates_to_centiseconds(self):
        assert encode_storage(12.345) == "0:00:12.34"
        assert encode_storage(12.349) == "0:00:12.34"
        assert encode_storage(59.999) == "0:00:59.99"

    def test_float_noise_does_not_drop_a_centisecond(self):
        """12.34 * 100 is 1233.999... in binary floating point."""
        assert encode_storage(12.34) == "0:00:12.34"
        assert encode_storage(0.29) == "0:00:00.29"

    def test_hours_unbounded(self):
        assert encode_storage(3661.5) == "1:01:01.50"
        assert encode_storage(100 * 3600 + 5) == "100:00:05.00"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            encode_storage(-0.01)

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            encode_storage(float("inf"))
        with pytest.raises(ValueError):
            encode_display(float("nan"))


class TestEncodeDisplay:
    """Test millisecond display encoding."""

    def test_without_hours(self):
        assert encode_display(12.345) == "00:12.345"
        assert encode_display(75.5) == "01:15.500"

    def test_with_hours(self):
        assert encode_display(3723.004) == "1:02:03.004"

    def test_truncates_to_milliseconds(self):
        assert encode_display(1.0009) == "00:01.000"


class TestDecodeStorage:
    """Test parsing H:MM:SS.CC back to seconds."""

    def test_decode(self):
        assert decode_storage("0:00:12.34") == pytest.approx(12.34)
        assert decode_storage("1:01:01.50") == pytest.approx(3661.5)

    def test_decode_of_encode_truncates(self):
        assert decode_storage(encode_storage(12.345)) == pytest.approx(12.34)

    def test_malformed_falls_back_to_zero(self):
        assert decode_storage("garbage") == 0.0
        assert decode_storage("0:0:12.34") == 0.0
        assert decode_storage("") == 0.0

    def test_strict_variant_returns_none(self):
        assert try_decode_storage("12.34") is None
        assert try_decode_storage(None) is None
        assert try_decode_storage(" 0:00:01.00 ") == pytest.approx(1.0)
