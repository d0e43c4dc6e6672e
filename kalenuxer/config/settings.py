"""Per-project settings loaded from settings.json.

settings.json keys:
    languages: list of language codes the site is built for
    home_page: page served at "/" by the dev server (default tr/anasayfa.html)
    upload_dir: directory release uploads are copied into
    sources: category -> directory under site/ (default: the category name)
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..core.constants import ALL_CATEGORIES, DEFAULT_HOME_PAGE, SETTINGS_FILE
from ..core.receipt import StopRule


@dataclass
class Settings:
    """Parsed settings.json."""
    languages: list[str] = field(default_factory=list)
    home_page: str = DEFAULT_HOME_PAGE
    upload_dir: str | None = None
    sources: dict[str, str] = field(default_factory=dict)
    raw: dict = field(default_factory=dict)

    def source_dir(self, category: str) -> str:
        """Directory under site/ holding the sources of category."""
        return self.sources.get(category, category)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        sources = data.get("sources") or {}
        unknown = set(sources) - set(ALL_CATEGORIES)
        if unknown:
            raise StopRule(f"Unknown categories in sources: {', '.join(sorted(unknown))}")
        return cls(
            languages=list(data.get("languages") or []),
            home_page=data.get("home_page") or DEFAULT_HOME_PAGE,
            upload_dir=data.get("upload_dir"),
            sources=dict(sources),
            raw=data,
        )


def load_settings(project_dir: str | os.PathLike) -> Settings:
    """Read <project>/settings.json.

    Raises:
        StopRule: If the file is missing or is not a JSON object
    """
    path = Path(project_dir) / SETTINGS_FILE
    if not path.exists():
        raise StopRule(f"Settings file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise StopRule(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise StopRule(f"{path} must hold a JSON object")
    return Settings.from_dict(data)
