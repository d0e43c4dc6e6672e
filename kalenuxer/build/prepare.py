"""Prepare step: gate every source file and run its category processor.

Compilation itself is pluggable. The default processors copy sources into
dist/release unchanged; templates produce no output of their own and only
invalidate the html pages that depend on them.
"""
import logging
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from ..config.project import BuildContext
from ..core.constants import CATEGORY_HTML, CATEGORY_TEMPLATE, PROCESS_ORDER
from ..core.receipt import emit_receipt
from ..gate.once import once_processed, once_template_processed

logger = logging.getLogger("kalenuxer.prepare")

# (context, category, file key, source path) -> None
Processor = Callable[[BuildContext, str, str, Path], None]


def output_path(ctx: BuildContext, category: str, file_key: str) -> Path:
    """Where a processed source lands: html at the release root, others under their category."""
    if category == CATEGORY_HTML:
        return ctx.output_dir / file_key
    return ctx.output_dir / category / file_key


def copy_asset(ctx: BuildContext, category: str, file_key: str, source: Path) -> None:
    target = output_path(ctx, category, file_key)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)


def skip_output(ctx: BuildContext, category: str, file_key: str, source: Path) -> None:
    pass


DEFAULT_PROCESSORS: dict[str, Processor] = {
    CATEGORY_TEMPLATE: skip_output,
}


def iter_sources(ctx: BuildContext, category: str) -> Iterator[tuple[str, Path]]:
    """Yield (file key, path) for every file under the category's source dir, sorted."""
    root = ctx.source_dir(category)
    if not root.is_dir():
        return
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        yield path.relative_to(root).as_posix(), path


@dataclass
class PrepareResult:
    """Outcome of one prepare run."""
    processed: dict[str, list[str]] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)
    elapsed_ms: int = 0

    @property
    def total_processed(self) -> int:
        return sum(len(keys) for keys in self.processed.values())

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())


def _forget_processed(ctx: BuildContext, category: str, file_key: str) -> None:
    """Undo a processed_at mark so the next run retries the file."""
    with ctx.ledger.lock:
        record = ctx.ledger.get(category, file_key)
        if record is not None:
            record.processed_at = None
            ctx.ledger.save(category)


def process_file(
    ctx: BuildContext,
    category: str,
    file_key: str,
    source: Path,
    processors: dict[str, Processor] | None = None,
) -> bool:
    """Gate one source file and process it if it changed.

    If the processor raises, the ledger mark is rolled back and the error
    propagates.

    Returns:
        True if the file was processed
    """
    processors = {**DEFAULT_PROCESSORS, **(processors or {})}
    gate = once_template_processed if category == CATEGORY_TEMPLATE else once_processed
    if not gate(ctx.ledger, category, file_key, source):
        return False

    processor = processors.get(category, copy_asset)
    try:
        processor(ctx, category, file_key, source)
    except Exception:
        _forget_processed(ctx, category, file_key)
        raise
    logger.info("Processed %s %s", category, file_key)
    return True


def process_project(
    ctx: BuildContext,
    processors: dict[str, Processor] | None = None,
    categories: tuple[str, ...] = PROCESS_ORDER,
) -> PrepareResult:
    """Run the prepare step over every category of the project.

    Html is flushed last, also on failure, so entries invalidated by
    templates reach disk.

    Args:
        ctx: Build context
        processors: Category -> processor overrides, merged over DEFAULT_PROCESSORS
        categories: Categories to walk, in order

    Returns:
        PrepareResult
    """
    t0 = time.perf_counter()
    result = PrepareResult()

    try:
        for category in categories:
            processed = []
            skipped = 0
            for file_key, source in iter_sources(ctx, category):
                if process_file(ctx, category, file_key, source, processors):
                    processed.append(file_key)
                else:
                    skipped += 1
            result.processed[category] = processed
            result.skipped[category] = skipped
    finally:
        # Template invalidations must reach disk even when a later processor fails
        ctx.ledger.save(CATEGORY_HTML)

    result.elapsed_ms = int((time.perf_counter() - t0) * 1000)

    emit_receipt("prepare", {
        "project": ctx.project,
        "base": ctx.base,
        "processed": {c: len(keys) for c, keys in result.processed.items()},
        "skipped": result.skipped,
        "elapsed_ms": result.elapsed_ms,
    })

    return result
