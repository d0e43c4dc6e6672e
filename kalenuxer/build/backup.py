"""Backup step: timestamped copy of a whole project directory."""
import logging
import os
import shutil
import time
from pathlib import Path

from ..core.constants import BACKUP_DIR
from ..core.receipt import emit_receipt

logger = logging.getLogger("kalenuxer.backup")


def backup_project(project: str, project_dir: str | os.PathLike, root: str | os.PathLike | None = None) -> Path:
    """Copy project_dir to <root>/backups/all/<project>/<epoch ms>/.

    Returns:
        The backup directory
    """
    root = Path(root) if root is not None else Path.cwd()
    dest = root.joinpath(*BACKUP_DIR, project, str(int(time.time() * 1000)))
    shutil.copytree(project_dir, dest)
    logger.info("Backed up %s to %s", project, dest)

    emit_receipt("backup", {
        "project": project,
        "source": str(project_dir),
        "destination": str(dest),
    })
    return dest
