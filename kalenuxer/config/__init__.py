"""Project configuration: settings.json and the build context."""
from .project import BuildContext, open_project, resolve_project_dir
from .settings import Settings, load_settings

__all__ = [
    "BuildContext",
    "open_project",
    "resolve_project_dir",
    "Settings",
    "load_settings",
]
