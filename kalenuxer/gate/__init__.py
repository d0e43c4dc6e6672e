"""Change-detection gating.

Decides, per file, whether processing or upload should run.
"""
from .once import once_processed, once_released, once_template_processed, release_key
from .propagate import propagate_template_change, template_directory

__all__ = [
    "once_processed",
    "once_template_processed",
    "once_released",
    "release_key",
    "propagate_template_change",
    "template_directory",
]
