"""Ledger subpackage for change fingerprints.

Provides the time-key encoder, the FileRecord type and the Ledger store.
"""
from .encode import encode_time, fingerprint, mtime_ms
from .record import FileRecord
from .store import Ledger, times_path

__all__ = [
    "encode_time",
    "fingerprint",
    "mtime_ms",
    "FileRecord",
    "Ledger",
    "times_path",
]
