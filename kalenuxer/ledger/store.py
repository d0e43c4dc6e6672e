"""Per-category change ledger backed by one JSON file per category.

The Ledger owns both the category -> backing path table and the in-memory
maps. Every save writes the complete map for a category, never a delta.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable

from ..core.constants import TIMES_DIR
from ..core.receipt import StopRule
from .record import FileRecord

logger = logging.getLogger("kalenuxer.ledger")


def times_path(project_dir: str | os.PathLike, base: str, category: str) -> Path:
    """Backing file for category: <project>/store/times/<base>/<category>.json."""
    return Path(project_dir).joinpath(*TIMES_DIR, base, f"{category}.json")


class Ledger:
    """Process-wide fingerprint store, keyed by category.

    Attributes:
        paths: Category -> backing JSON file
        times: Category -> (file key -> FileRecord)
        lock: Re-entrant lock held by gate operations while they mutate
    """

    def __init__(self, paths: dict[str, str | os.PathLike] | None = None):
        """Initialize Ledger.

        Args:
            paths: Optional category -> backing file mapping to register
        """
        self.paths: dict[str, Path] = {}
        self.times: dict[str, dict[str, FileRecord]] = {}
        self.lock = threading.RLock()
        for category, path in (paths or {}).items():
            self.register(category, path)

    @classmethod
    def for_project(
        cls,
        project_dir: str | os.PathLike,
        base: str,
        categories: Iterable[str],
        reset: Iterable[str] = (),
    ) -> "Ledger":
        """Register and populate every category of a project.

        Categories listed in reset are emptied on disk instead of read, so a
        malformed ledger file can always be recovered by resetting it.

        Args:
            project_dir: Project root
            base: Ledger namespace ("test" or "release")
            categories: Categories to register
            reset: Categories to overwrite with an empty ledger

        Returns:
            Populated Ledger
        """
        reset = set(reset)
        ledger = cls()
        for category in categories:
            ledger.register(category, times_path(project_dir, base, category))
            if category in reset:
                ledger.reset(category)
            else:
                ledger.populate(category)
        return ledger

    def register(self, category: str, path: str | os.PathLike) -> None:
        """Set the backing file for category."""
        self.paths[category] = Path(path)

    def load(self, category: str) -> dict[str, FileRecord]:
        """Return the in-memory map for category, creating it empty if absent.

        Never touches disk.
        """
        with self.lock:
            return self.times.setdefault(category, {})

    def populate(self, category: str) -> dict[str, FileRecord]:
        """Replace the in-memory map for category with its backing file contents.

        A missing backing file yields an empty map.

        Raises:
            StopRule: If the backing file is not a JSON object
        """
        path = self.paths.get(category)
        entries: dict[str, FileRecord] = {}
        if path is not None and path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise StopRule(f"Ledger {path} is not valid JSON: {e}") from e
            if not isinstance(data, dict):
                raise StopRule(f"Ledger {path} must hold a JSON object")
            entries = {
                key: FileRecord.from_dict(value if isinstance(value, dict) else {})
                for key, value in data.items()
            }
        with self.lock:
            self.times[category] = entries
        logger.debug("Loaded %d %s entries from %s", len(entries), category, path)
        return entries

    def record(self, category: str, file_key: str) -> FileRecord:
        """Return the record for file_key, creating an empty one if absent."""
        with self.lock:
            return self.load(category).setdefault(file_key, FileRecord())

    def get(self, category: str, file_key: str) -> FileRecord | None:
        """Return the record for file_key without creating it."""
        return self.times.get(category, {}).get(file_key)

    def snapshot(self, category: str) -> dict:
        """JSON form of the map for category."""
        with self.lock:
            return {
                key: rec.to_dict()
                for key, rec in self.times.get(category, {}).items()
            }

    def save(self, category: str) -> bool:
        """Overwrite the backing file for category with the full in-memory map.

        The snapshot is written to a sibling temp file and renamed into place.

        Returns:
            False without writing if no backing path is registered, else True
        """
        path = self.paths.get(category)
        if path is None:
            logger.warning("No ledger file registered for %s, not saved", category)
            return False

        with self.lock:
            payload = json.dumps(self.snapshot(category))
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        return True

    def reset(self, category: str) -> bool:
        """Forget every record of category and write an empty ledger.

        Returns:
            Same contract as save()
        """
        with self.lock:
            self.times[category] = {}
            return self.save(category)
