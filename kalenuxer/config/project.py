"""Project resolution and the build context shared by every command."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..core.constants import (
    ALL_CATEGORIES,
    DATAS_DIR,
    DEFAULT_BASE,
    MAIN_PROJECT,
    MAIN_PROJECT_DIR,
    OUTPUT_DIR,
    SITE_DIR,
    WEBSITES_DIR,
)
from ..core.receipt import StopRule
from ..ledger.store import Ledger
from .settings import Settings, load_settings

logger = logging.getLogger("kalenuxer.config")


def resolve_project_dir(project: str, root: str | os.PathLike | None = None) -> Path:
    """Locate a project: websites/<project>, or controller/ for "main".

    Raises:
        StopRule: If no project name is given or the directory is missing
    """
    if not project:
        raise StopRule("Project is not defined")
    root = Path(root) if root is not None else Path.cwd()
    if project == MAIN_PROJECT:
        project_dir = root / MAIN_PROJECT_DIR
    else:
        project_dir = root / WEBSITES_DIR / project
    if not project_dir.is_dir():
        raise StopRule(f"Project directory not found: {project_dir}")
    return project_dir


@dataclass
class BuildContext:
    """Everything a build, upload or dev-server run needs.

    Attributes:
        project: Project name
        project_dir: Project root
        base: Ledger namespace ("test" or "release")
        settings: Parsed settings.json
        ledger: Populated Ledger for base
        obfuscate: Passed through to processors
    """
    project: str
    project_dir: Path
    base: str
    settings: Settings
    ledger: Ledger
    obfuscate: bool = False

    @property
    def site_dir(self) -> Path:
        return self.project_dir / SITE_DIR

    @property
    def datas_dir(self) -> Path:
        return self.project_dir / DATAS_DIR

    @property
    def output_dir(self) -> Path:
        return self.project_dir.joinpath(*OUTPUT_DIR)

    @property
    def languages(self) -> list[str]:
        return self.settings.languages

    def source_dir(self, category: str) -> Path:
        return self.site_dir / self.settings.source_dir(category)


def open_project(
    project: str,
    base: str = DEFAULT_BASE,
    root: str | os.PathLike | None = None,
    obfuscate: bool = False,
    reset: Iterable[str] = (),
) -> BuildContext:
    """Resolve a project, load its settings and populate its ledger.

    Categories in reset start from an empty ledger written to disk.
    """
    project_dir = resolve_project_dir(project, root)
    settings = load_settings(project_dir)
    ledger = Ledger.for_project(project_dir, base, ALL_CATEGORIES, reset=reset)
    logger.info("Opened project %s (base=%s) at %s", project, base, project_dir)
    return BuildContext(
        project=project,
        project_dir=project_dir,
        base=base,
        settings=settings,
        ledger=ledger,
        obfuscate=obfuscate,
    )
