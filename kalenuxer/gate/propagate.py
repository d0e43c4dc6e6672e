"""Template change propagation.

A shared template feeds every HTML page below its directory, so a changed
template must invalidate those pages even though their own bytes did not
change. Matching is a plain string prefix over html keys, not a path-aware
match: "en" also reaches "english-extra/...".
"""
from ..core.constants import CATEGORY_HTML, GENERAL_MARKER
from ..ledger.store import Ledger


def template_directory(file_key: str) -> str:
    """Directory prefix whose html entries a template key invalidates.

    - Keys containing "general": everything before the first "/general"
    - Otherwise: the key without its last path segment

    Args:
        file_key: Template ledger key, e.g. "en/general/header"

    Returns:
        Prefix string, e.g. "en"
    """
    if GENERAL_MARKER in file_key:
        return file_key.split("/" + GENERAL_MARKER)[0]
    return "/".join(file_key.split("/")[:-1])


def propagate_template_change(ledger: Ledger, file_key: str, fingerprint: str) -> list[str]:
    """Force processed_at of every html key under the template's directory.

    Only updates memory; the html ledger is flushed by the next html save.

    Args:
        ledger: Ledger to update
        file_key: Template key that changed
        fingerprint: Fingerprint just recorded for the template

    Returns:
        Html keys that were invalidated
    """
    directory = template_directory(file_key)
    with ledger.lock:
        html_times = ledger.load(CATEGORY_HTML)
        touched = [key for key in html_times if key.startswith(directory)]
        for html_key in touched:
            ledger.record(CATEGORY_HTML, html_key).processed_at = fingerprint
    return touched
