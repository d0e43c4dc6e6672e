"""Core receipt primitives used by every Kalenuxer operation.

Functions:
    content_hash: SHA256 hex digest of bytes, str or dict
    emit_receipt: Emit receipt with required fields to stdout
    StopRule: Exception for fatal build conditions
"""
import hashlib
import json
from datetime import datetime, timezone


class StopRule(Exception):
    """Raised when the build cannot continue. Never catch silently."""
    pass


def content_hash(data: bytes | str | dict) -> str:
    """Compute SHA256 hex digest.

    Dicts are serialized as compact JSON with sorted keys first.

    Args:
        data: Bytes, string, or dict to hash

    Returns:
        64 character hex digest
    """
    if isinstance(data, dict):
        data = json.dumps(data, sort_keys=True, separators=(",", ":"))
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def emit_receipt(receipt_type: str, data: dict, project: str = "default") -> dict:
    """Emit a receipt with standard required fields.

    Prints JSON to stdout with flush=True.

    Args:
        receipt_type: Type of receipt (prepare, release, backup, times_reset)
        data: Receipt payload data
        project: Project name (default: "default")

    Returns:
        Complete receipt dict with receipt_type, ts, project, payload_hash
    """
    project = data.get("project", project)

    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "project": project,
        "payload_hash": content_hash(data),
        **data
    }

    print(json.dumps(receipt, sort_keys=True), flush=True)

    return receipt
