"""Kalenuxer: incremental static-site build pipeline.

Public API:
- Core: emit_receipt, StopRule
- Ledger: Ledger, FileRecord, encode_time
- Gate: once_processed, once_template_processed, once_released
- Build: open_project, process_project, release_project
"""
__version__ = "1.0.0"

from .build import backup_project, process_project, release_project
from .config import BuildContext, open_project
from .core import StopRule, emit_receipt
from .gate import once_processed, once_released, once_template_processed
from .ledger import FileRecord, Ledger, encode_time

__all__ = [
    "__version__",
    # Core
    "emit_receipt",
    "StopRule",
    # Ledger
    "Ledger",
    "FileRecord",
    "encode_time",
    # Gate
    "once_processed",
    "once_template_processed",
    "once_released",
    # Build
    "BuildContext",
    "open_project",
    "process_project",
    "release_project",
    "backup_project",
]
