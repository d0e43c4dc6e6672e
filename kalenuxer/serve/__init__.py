"""Development server and source watcher."""
from .dev_server import DevServer, resolve_request, start_dev_server
from .watcher import SourceWatcher

__all__ = [
    "DevServer",
    "resolve_request",
    "start_dev_server",
    "SourceWatcher",
]
