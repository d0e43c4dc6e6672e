"""Build driver: prepare, release and backup steps."""
from .backup import backup_project
from .prepare import (
    DEFAULT_PROCESSORS,
    PrepareResult,
    Processor,
    copy_asset,
    iter_sources,
    output_path,
    process_file,
    process_project,
)
from .release import (
    DirectoryUploader,
    ReleaseResult,
    Uploader,
    release_category,
    release_project,
)

__all__ = [
    "backup_project",
    "DEFAULT_PROCESSORS",
    "PrepareResult",
    "Processor",
    "copy_asset",
    "iter_sources",
    "output_path",
    "process_file",
    "process_project",
    "DirectoryUploader",
    "ReleaseResult",
    "Uploader",
    "release_category",
    "release_project",
]
