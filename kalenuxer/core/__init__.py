"""Core subpackage for Kalenuxer primitives.

Exports all from receipt.py and constants.py.
"""
from .receipt import content_hash, emit_receipt, StopRule
from .constants import (
    ALL_CATEGORIES,
    RESET_CATEGORIES,
    PROCESS_ORDER,
    CATEGORY_HTML,
    CATEGORY_TEMPLATE,
    DEFAULT_BASE,
    TIME_ENCODER,
)

__all__ = [
    # Receipt primitives
    "content_hash",
    "emit_receipt",
    "StopRule",
    # Constants
    "ALL_CATEGORIES",
    "RESET_CATEGORIES",
    "PROCESS_ORDER",
    "CATEGORY_HTML",
    "CATEGORY_TEMPLATE",
    "DEFAULT_BASE",
    "TIME_ENCODER",
]
