"""
Shortlist-and-rank search over the filename catalog.

Two tiers:
1. Shortlist: a cheap SQL pre-filter (normalized filename contains the whole
   query or any query token), newest first, capped at `shortlist`.
2. Rank: score every candidate with a weighted sum of text and recency
   signals, then order by mtime first and score second.

The mtime-primary order is intentional: a newer file always ranks above an
older one, and the relevance score only breaks ties between files with the
same modification time. Candidates that share no literal substring with the
query never reach the scoring tier, even if their trigram similarity would
be non-zero.
"""
import math
import time
from typing import List, Optional, Sequence

from .. import config
from ..database.ops import CatalogOperations
from ..models import FileRecord, QueryOptions, SearchResult
from .normalize import normalize, tokenize, trigrams, jaccard


class Ranker:
    def __init__(self, db_ops: CatalogOperations):
        self.db = db_ops

    def search(self, query: str, options: Optional[QueryOptions] = None,
               now: Optional[float] = None) -> List[SearchResult]:
        """
        Returns at most `options.limit` results for the query.
        An empty or blank query yields an empty list.
        """
        options = options or QueryOptions()
        q_norm = normalize(query)
        if not q_norm:
            return []
        q_tokens = tokenize(q_norm)

        # 1. Shortlist
        patterns = list(dict.fromkeys([q_norm] + q_tokens))
        candidates = self.db.shortlist_by_substring(patterns, options.ext_filter, options.shortlist)

        # 2. Score
        now = time.time() if now is None else now
        q_tri = trigrams(q_norm)
        results = [
            self._to_result(c, score_candidate(q_norm, q_tokens, q_tri, c.filename_norm, c.mtime, now))
            for c in candidates
        ]

        # 3. Order: newest first, relevance breaks mtime ties (stable sort)
        results.sort(key=lambda r: (-r.mtime, -r.score))
        return results[:options.limit]

    @staticmethod
    def _to_result(rec: FileRecord, score: float) -> SearchResult:
        return SearchResult(
            path=rec.path, filename=rec.filename, ext=rec.ext,
            mtime=rec.mtime, size=rec.size, score=score
        )


def score_candidate(q_norm: str, q_tokens: Sequence[str], q_tri: set,
                    fn_norm: str, mtime: int, now: float) -> float:
    score = 0.0

    # substring match
    if q_norm in fn_norm:
        score += config.WEIGHT_SUBSTRING

    # token overlap
    score += config.WEIGHT_TOKEN * token_overlap(q_tokens, tokenize(fn_norm))

    # prefix bonus (good for live typing)
    if fn_norm.startswith(q_norm):
        score += config.WEIGHT_PREFIX

    # trigram similarity (typo tolerance)
    score += config.WEIGHT_TRIGRAM * jaccard(q_tri, trigrams(fn_norm))

    score += config.WEIGHT_RECENCY * recency(mtime, now)

    # tiny bonus for shorter filenames
    score += config.WEIGHT_LENGTH * (1.0 / (1.0 + len(fn_norm) / config.LENGTH_HALF_POINT))
    return score


def recency(mtime: int, now: float) -> float:
    """Log-scaled freshness: 1.0 for brand new files, tending to 0 with age."""
    age_days = max(0.0, now - mtime) / config.SECONDS_PER_DAY
    return 1.0 / (1.0 + math.log1p(age_days))


def token_overlap(query_tokens: Sequence[str], name_tokens: Sequence[str]) -> int:
    """Counts query tokens present among the filename's tokens."""
    if not query_tokens or not name_tokens:
        return 0
    name_set = set(name_tokens)
    return sum(1 for t in query_tokens if t in name_set)
