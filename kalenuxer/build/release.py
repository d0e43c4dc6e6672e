"""Release step: gate every file under dist/release and upload the changed ones.

Files under dist/release/<category>/ belong to that category's upload
ledger; everything else is an html page.
"""
import logging
import os
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from ..config.project import BuildContext
from ..core.constants import ALL_CATEGORIES, CATEGORY_HTML
from ..core.receipt import StopRule, emit_receipt
from ..gate.once import once_released, release_key

logger = logging.getLogger("kalenuxer.release")

# (context, path relative to dist/release, file) -> None
Uploader = Callable[[BuildContext, str, Path], None]


class DirectoryUploader:
    """Copies released files into a target directory, keeping relative paths."""

    def __init__(self, target: str | os.PathLike):
        self.target = Path(target)

    def __call__(self, ctx: BuildContext, rel_path: str, source: Path) -> None:
        dest = self.target / rel_path
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)


def default_uploader(ctx: BuildContext) -> Uploader:
    """Uploader for the project's upload_dir setting.

    Raises:
        StopRule: If settings.json has no upload_dir
    """
    if not ctx.settings.upload_dir:
        raise StopRule("No upload_dir configured in settings.json")
    target = Path(ctx.settings.upload_dir)
    if not target.is_absolute():
        target = ctx.project_dir / target
    return DirectoryUploader(target)


def release_category(rel_path: str) -> str:
    """Upload ledger category of a path relative to dist/release."""
    head = rel_path.split("/", 1)[0]
    if head != rel_path and head in ALL_CATEGORIES and head != CATEGORY_HTML:
        return head
    return CATEGORY_HTML


def iter_release(ctx: BuildContext) -> Iterator[tuple[str, Path]]:
    """Yield (relative path, file) for everything under dist/release, sorted."""
    root = ctx.output_dir
    if not root.is_dir():
        return
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        yield path.relative_to(root).as_posix(), path


@dataclass
class ReleaseResult:
    """Outcome of one release run."""
    uploaded: list[str] = field(default_factory=list)
    skipped: int = 0
    elapsed_ms: int = 0


def _forget_uploaded(ctx: BuildContext, category: str, file_key: str) -> None:
    with ctx.ledger.lock:
        record = ctx.ledger.get(category, file_key)
        if record is not None:
            record.uploaded_at = None
            ctx.ledger.save(category)


def release_project(ctx: BuildContext, uploader: Uploader | None = None) -> ReleaseResult:
    """Upload every file in dist/release whose fingerprint changed since its last upload.

    A failed upload rolls back its ledger mark and the error propagates.

    Args:
        ctx: Build context
        uploader: Upload callable (default: copy into settings upload_dir)

    Returns:
        ReleaseResult
    """
    t0 = time.perf_counter()
    if uploader is None:
        uploader = default_uploader(ctx)
    result = ReleaseResult()

    for rel_path, path in iter_release(ctx):
        category = release_category(rel_path)
        if not once_released(ctx.ledger, category, rel_path, path):
            result.skipped += 1
            continue
        try:
            uploader(ctx, rel_path, path)
        except Exception:
            _forget_uploaded(ctx, category, release_key(category, rel_path))
            raise
        logger.info("Uploaded %s", rel_path)
        result.uploaded.append(rel_path)

    result.elapsed_ms = int((time.perf_counter() - t0) * 1000)

    emit_receipt("release", {
        "project": ctx.project,
        "base": ctx.base,
        "uploaded": len(result.uploaded),
        "skipped": result.skipped,
        "elapsed_ms": result.elapsed_ms,
    })

    return result
