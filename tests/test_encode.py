"""Tests for kalenuxer.ledger.encode."""
import pytest

from kalenuxer.ledger.encode import encode_time, fingerprint, mtime_ms


class TestEncodeTime:
    """Tests for encode_time function."""

    def test_digits_substituted(self):
        """Each digit d maps to TIME_ENCODER[d]."""
        assert encode_time(1234567890) == "mirbaycn1e"

    def test_decimal_point_dropped(self):
        """Fractional digits are concatenated after the integer digits."""
        assert encode_time(1000.5) == "meeea"
        assert encode_time(12.25) == "miia"

    def test_integral_float_has_no_fraction(self):
        """1000.0 renders as 1000, not 1000.0."""
        assert encode_time(1000.0) == "meee"
        assert encode_time(1000.0) == encode_time(1000)

    def test_deterministic(self):
        """Same input always produces the same fingerprint."""
        t = 1697040000123.25
        assert encode_time(t) == encode_time(t)

    def test_distinct_times_distinct_fingerprints(self):
        """A one millisecond difference changes the fingerprint."""
        assert encode_time(1500000000123.0) != encode_time(1500000000124.0)

    def test_negative_rejected(self):
        """A rendering with a sign cannot be encoded."""
        with pytest.raises(ValueError):
            encode_time(-5.0)


class TestMtime:
    """Tests for mtime_ms and fingerprint."""

    def test_mtime_ms_from_stat(self, source_file):
        """mtime_ms is the pinned mtime in milliseconds."""
        assert mtime_ms(source_file) == 1500000000123.0

    def test_fingerprint_of_file(self, source_file):
        """fingerprint(path) == encode_time(mtime_ms(path))."""
        assert fingerprint(source_file) == "maeeeeeeeemir"
        assert fingerprint(source_file) == encode_time(mtime_ms(source_file))

    def test_fingerprint_follows_mtime(self, source_file, mtime):
        """Changing the mtime changes the fingerprint."""
        before = fingerprint(source_file)
        mtime(source_file, 60)
        assert fingerprint(source_file) != before
