"""Kalenuxer constants and defaults.

All magic numbers and fixed names live here. No exceptions.
"""

# Fingerprint alphabet: digit d encodes as TIME_ENCODER[d]
TIME_ENCODER = "emirbaycn140598EMIRBAYCN"

# Ledger categories
CATEGORY_CSS = "css"
CATEGORY_JS = "js"
CATEGORY_HTML = "html"
CATEGORY_TEMPLATE = "template"
CATEGORY_SCHEMES = "schemes"
CATEGORY_API = "api"
CATEGORY_PLUGINS = "plugins"
CATEGORY_IMG = "img"

# Every category that owns a backing file
ALL_CATEGORIES = (
    CATEGORY_CSS,
    CATEGORY_JS,
    CATEGORY_HTML,
    CATEGORY_SCHEMES,
    CATEGORY_TEMPLATE,
    CATEGORY_API,
    CATEGORY_PLUGINS,
    CATEGORY_IMG,
)

# Categories wiped by the bare --new flag
RESET_CATEGORIES = (
    CATEGORY_CSS,
    CATEGORY_JS,
    CATEGORY_HTML,
    CATEGORY_SCHEMES,
    CATEGORY_TEMPLATE,
    CATEGORY_API,
)

# Templates are gated first so their propagation reaches html in the same run
PROCESS_ORDER = (
    CATEGORY_TEMPLATE,
    CATEGORY_SCHEMES,
    CATEGORY_API,
    CATEGORY_CSS,
    CATEGORY_JS,
    CATEGORY_PLUGINS,
    CATEGORY_IMG,
    CATEGORY_HTML,
)

# Marker that makes a template key propagate to its parent directory
GENERAL_MARKER = "general"

# Bases (ledger namespaces under store/times/)
BASE_TEST = "test"
BASE_RELEASE = "release"
DEFAULT_BASE = BASE_RELEASE

# Project layout
WEBSITES_DIR = "websites"
MAIN_PROJECT = "main"
MAIN_PROJECT_DIR = "controller"
SETTINGS_FILE = "settings.json"
SITE_DIR = "site"
DATAS_DIR = "datas"
TIMES_DIR = ("store", "times")
OUTPUT_DIR = ("dist", "release")
BACKUP_DIR = ("backups", "all")

# Dev server
DEV_SERVER_PORT = 3000
DEV_SERVER_HOST = "127.0.0.1"
DEFAULT_HOME_PAGE = "tr/anasayfa.html"
NOT_FOUND_PAGE = "404.html"
DIRECTORY_INDEX = "index.html"
REBUILD_DEBOUNCE_MS = 300
WATCH_POLL_INTERVAL_S = 0.5
LIVE_RELOAD_PATH = "/__kalenuxer/build"
LIVE_RELOAD_POLL_MS = 1000
