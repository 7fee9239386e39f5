"""
Text utilities shared by the indexer and the ranker.

Every matching signal is computed on normalized filenames, so the indexer
stores normalize(filename) and the ranker normalizes the query the same way.
"""
import os
import re
from typing import List, Set

from .. import config

SEPARATOR_RUN = re.compile(r"[\s_\-.]+")
WHITESPACE_RUN = re.compile(r"\s+")


def normalize(s: str) -> str:
    """Lowercase, turn separator runs into one space, trim."""
    s = s.lower()
    s = SEPARATOR_RUN.sub(" ", s)
    s = s.strip()
    # Collapse any odd unicode spacing left over
    return WHITESPACE_RUN.sub(" ", s)


def tokenize(norm: str) -> List[str]:
    """Splits a normalized string into tokens, dropping stop words."""
    if not norm:
        return []
    return [p for p in norm.split(" ") if p and p not in config.STOP_WORDS]


def trigrams(s: str) -> Set[str]:
    """
    Trigram set for typo-tolerant matching.
    Strings shorter than three characters yield themselves as a single
    (degenerate) trigram.
    """
    s = s.replace(" ", "")
    if len(s) < 3:
        return {s}
    return {s[i:i + 3] for i in range(len(s) - 2)}


def jaccard(a: Set[str], b: Set[str]) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    inter = len(a & b)
    return inter / (len(a) + len(b) - inter)


def ext_lower(name: str) -> str:
    """Lowercase text after the last dot, so ".bashrc" -> "bashrc"."""
    dot = os.path.basename(name).rfind(".")
    if dot < 0:
        return ""
    return os.path.basename(name)[dot + 1:].lower()
