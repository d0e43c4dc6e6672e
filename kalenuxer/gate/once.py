"""Change-detection gate.

Each operation answers "should downstream work run for this file?" and
records the answer in the Ledger. processed_at and uploaded_at are tracked
independently so a file can be rebuilt locally without being re-uploaded.
"""
import logging
import os

from ..ledger.encode import fingerprint as file_fingerprint
from ..ledger.store import Ledger
from .propagate import propagate_template_change

logger = logging.getLogger("kalenuxer.gate")


def _mark_processed(ledger: Ledger, category: str, file_key: str, file_path) -> str | None:
    """Record a new processed_at fingerprint.

    Returns:
        The new fingerprint, or None when the file is missing or unchanged
    """
    ledger.load(category)
    if not os.path.exists(file_path):
        return None

    file_time = file_fingerprint(file_path)
    record = ledger.record(category, file_key)
    if record.processed_at == file_time:
        return None

    record.processed_at = file_time
    return file_time


def once_processed(ledger: Ledger, category: str, file_key: str, file_path: str | os.PathLike) -> bool:
    """True once per distinct modification time of file_path.

    A missing file is reported as unchanged and leaves the ledger alone.

    Args:
        ledger: Ledger holding the category
        category: Ledger category, e.g. "css"
        file_key: Key of the file within the category
        file_path: File on disk

    Returns:
        True if the caller should (re)process the file
    """
    with ledger.lock:
        file_time = _mark_processed(ledger, category, file_key, file_path)
        if file_time is None:
            return False
        ledger.save(category)
    return True


def once_template_processed(ledger: Ledger, category: str, file_key: str, file_path: str | os.PathLike) -> bool:
    """Like once_processed, and on change invalidates related html entries."""
    with ledger.lock:
        file_time = _mark_processed(ledger, category, file_key, file_path)
        if file_time is None:
            return False
        touched = propagate_template_change(ledger, file_key, file_time)
        if touched:
            logger.debug("Template %s invalidated %d html entries", file_key, len(touched))
        ledger.save(category)
    return True


def release_key(category: str, file_key: str) -> str:
    """Strip a leading "<category>/" so release keys match source keys."""
    prefix = category + "/"
    if file_key.startswith(prefix) and file_key[len(prefix):]:
        return file_key[len(prefix):]
    return file_key


def once_released(ledger: Ledger, category: str, file_key: str, file_path: str | os.PathLike) -> bool:
    """True once per distinct modification time of an uploaded file.

    A key rooted at the category ("css/a.css") is normalized to "a.css".
    A missing file is logged as an error and reported as unchanged.

    Returns:
        True if the caller should upload the file
    """
    file_key = release_key(category, file_key)

    with ledger.lock:
        ledger.load(category)
        if not os.path.exists(file_path):
            logger.error("%s %s %s", category, file_key, os.fspath(file_path))
            return False

        file_time = file_fingerprint(file_path)
        record = ledger.record(category, file_key)
        if record.uploaded_at == file_time:
            return False

        record.uploaded_at = file_time
        ledger.save(category)
    return True
