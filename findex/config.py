"""
Configuration constants for findex.
"""
from pathlib import Path

# --- Catalog Location ---
DEFAULT_DB_PATH = Path("~/.findex/index.db")
LOG_FILENAME = "findex.log"

# --- SQLite Tuning ---
# WAL lets queries read the last committed snapshot while a pass is writing
BUSY_TIMEOUT_MS = 5000
SQLITE_PRAGMAS = [
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA temp_store=MEMORY;",
    "PRAGMA foreign_keys=ON;",
]

# --- Indexing Policy ---
DEFAULT_ROOTS = ["~"]
DEFAULT_IGNORE_DIRS = frozenset({
    ".git", "node_modules", "Library", "Caches",
    ".Trash", ".Trash-1000", ".DS_Store",
})
DEFAULT_BATCH_SIZE = 1000

# --- Extension Shorthands ---
PDF_EXTS = frozenset({"pdf"})
IMAGE_EXTS = frozenset({"png", "jpg", "jpeg", "heic", "webp", "gif", "tiff"})

# --- Tokenizer ---
STOP_WORDS = frozenset({"the", "a", "an", "and", "or", "of", "to"})

# --- Ranking ---
DEFAULT_LIMIT = 30
DEFAULT_SHORTLIST = 800  # 200-2000 depending on disk size
DEFAULT_PICK_LIMIT = 80

WEIGHT_SUBSTRING = 6.0
WEIGHT_TOKEN = 2.2
WEIGHT_PREFIX = 2.5
WEIGHT_TRIGRAM = 4.0
WEIGHT_RECENCY = 1.5
WEIGHT_LENGTH = 0.15
LENGTH_HALF_POINT = 40.0
SECONDS_PER_DAY = 86400.0

# --- Time Windows (--since) ---
SINCE_UNITS = {
    "h": 3600,
    "d": 24 * 3600,
    "w": 7 * 24 * 3600,
}

# --- Picker ---
FZF_BINARY = "fzf"
FZF_ARGS = ["--prompt", "findex > ", "--height", "40%", "--reverse"]
# fzf exit codes: 1 = no match, 130 = interrupted (Esc / Ctrl-C)
FZF_NO_SELECTION_CODES = {1, 130}
