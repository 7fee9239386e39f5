"""
Post-filters and option shorthands used by the command line.
"""
import time
from typing import Iterable, List, Optional, FrozenSet

from . import config
from .exceptions import ConfigurationError
from .models import SearchResult, normalize_ext_set


def parse_since(window: Optional[str], now: Optional[float] = None) -> Optional[int]:
    """
    Converts a relative window such as "24h", "7d" or "2w" into an absolute
    cutoff timestamp. An empty window means no cutoff.
    """
    if not window:
        return None
    window = window.strip().lower()
    value, unit = window[:-1], window[-1:]

    if not value.isdecimal():
        raise ConfigurationError(f"invalid --since format {window!r} (use 24h, 7d, 2w)")
    if unit not in config.SINCE_UNITS:
        raise ConfigurationError(f"invalid --since unit {unit!r} (use h, d, or w)")

    now = time.time() if now is None else now
    return int(now - int(value) * config.SINCE_UNITS[unit])


def apply_since(results: List[SearchResult], cutoff: Optional[int]) -> List[SearchResult]:
    """Keeps results modified at or after the cutoff; order is preserved."""
    if cutoff is None:
        return results
    return [r for r in results if r.mtime >= cutoff]


def build_ext_filter(pdf: bool = False, img: bool = False,
                     extra: Iterable[str] = ()) -> Optional[FrozenSet[str]]:
    exts = set()
    if pdf:
        exts |= config.PDF_EXTS
    if img:
        exts |= config.IMAGE_EXTS
    exts.update(extra or ())
    return normalize_ext_set(exts)
