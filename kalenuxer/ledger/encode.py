"""Time-key encoding for change fingerprints.

A fingerprint is the millisecond modification time rendered as text, the
decimal point dropped and every digit substituted through TIME_ENCODER.
Fingerprints are compared as strings, never as numbers.
"""
import os
from pathlib import Path

from ..core.constants import TIME_ENCODER


def _number_text(value: float) -> str:
    """Render a number the way ledgers written by earlier runs expect.

    Shortest round-trip decimal; integral values carry no fractional part.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def encode_time(time_ms: float) -> str:
    """Encode a millisecond timestamp into a fingerprint string.

    Pure function: the same input always yields the same output.

    Args:
        time_ms: Modification time in milliseconds

    Returns:
        Fingerprint string

    Raises:
        ValueError: If the rendered number holds anything but digits and '.'
    """
    digits = _number_text(time_ms).replace(".", "")
    if not digits.isdigit():
        raise ValueError(f"Cannot encode time value {time_ms!r}")
    return "".join(TIME_ENCODER[int(d)] for d in digits)


def mtime_ms(file_path: str | os.PathLike) -> float:
    """Modification time of file_path in milliseconds.

    Built from the nanosecond stat field as seconds * 1e3 + nanoseconds / 1e6
    so the float matches the value earlier ledgers were encoded from.
    """
    ns = Path(file_path).stat().st_mtime_ns
    seconds, nanos = divmod(ns, 1_000_000_000)
    return seconds * 1e3 + nanos / 1e6


def fingerprint(file_path: str | os.PathLike) -> str:
    """Fingerprint of the file currently at file_path."""
    return encode_time(mtime_ms(file_path))
