from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

from . import config


@dataclass
class FileRecord:
    """
    One filesystem entry as stored in the catalog.
    """
    path: str               # absolute, cleaned; identity key
    filename: str
    filename_norm: str
    ext: str                # lowercase, no leading dot
    mtime: int              # seconds since epoch
    size: int
    is_dir: bool = False    # directories are traversal nodes only
    seen_gen: int = 0


@dataclass
class IndexOptions:
    roots: List[str]
    include_hidden: bool = False
    follow_symlinks: bool = False
    ignore_dirs: FrozenSet[str] = config.DEFAULT_IGNORE_DIRS
    only_extensions: Optional[FrozenSet[str]] = None
    batch_size: int = config.DEFAULT_BATCH_SIZE

    def __post_init__(self):
        if not self.ignore_dirs:
            self.ignore_dirs = config.DEFAULT_IGNORE_DIRS
        self.ignore_dirs = frozenset(self.ignore_dirs)
        self.only_extensions = normalize_ext_set(self.only_extensions)
        if self.batch_size <= 0:
            self.batch_size = config.DEFAULT_BATCH_SIZE


@dataclass
class QueryOptions:
    limit: int = config.DEFAULT_LIMIT
    shortlist: int = config.DEFAULT_SHORTLIST
    ext_filter: Optional[FrozenSet[str]] = None

    def __post_init__(self):
        # Non-positive sizes fall back to defaults rather than failing
        if self.limit <= 0:
            self.limit = config.DEFAULT_LIMIT
        if self.shortlist <= 0:
            self.shortlist = config.DEFAULT_SHORTLIST
        self.ext_filter = normalize_ext_set(self.ext_filter)


@dataclass
class SearchResult:
    path: str
    filename: str
    ext: str
    mtime: int
    size: int
    score: float = 0.0


@dataclass
class IndexSummary:
    """Outcome of one reconciliation pass."""
    generation: int
    indexed: int = 0
    swept: int = 0
    roots_scanned: List[Path] = field(default_factory=list)
    roots_skipped: List[Path] = field(default_factory=list)
    elapsed_sec: float = 0.0


def normalize_ext_set(exts: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    """Lowercases and strips leading dots; an empty set means 'no filter'."""
    if not exts:
        return None
    cleaned = frozenset(e.strip().lstrip(".").lower() for e in exts if e and e.strip())
    return cleaned or None
