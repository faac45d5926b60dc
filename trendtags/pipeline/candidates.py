from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List, Sequence

from ..utils.text import strip_hash

WS_RE = re.compile(r"\s+")
VARIATION_SUFFIXES = ("", "tok", "tiktok")


class CandidateSet:
    """Unique candidates that iterate in first-insertion order."""

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._order: Dict[str, int] = {}
        for value in values:
            self.add(value)

    def add(self, value: str) -> bool:
        if value in self._order:
            return False
        self._order[value] = len(self._order)
        return True

    def position(self, value: str) -> int:
        return self._order[value]

    def __contains__(self, value: object) -> bool:
        return value in self._order

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        return f"CandidateSet({list(self._order)!r})"

    def to_list(self) -> List[str]:
        return list(self._order)


def keyword_variations(keyword: str) -> List[str]:
    base = WS_RE.sub("", keyword)
    return [base + suffix for suffix in VARIATION_SUFFIXES]


def generate_candidates(keywords: Sequence[str], trend_tags: Sequence[str], limit: int) -> CandidateSet:
    """Build the candidate hashtags for a request.

    Three rules feed one ordered set: trend tags containing a keyword, the
    ``tok``/``tiktok`` variations of every keyword, then the remaining trend
    tags in rank order until ``limit`` candidates are collected. Only the
    last rule checks ``limit``, so the result can be larger than ``limit``.
    """

    candidates = CandidateSet()

    for keyword in keywords:
        for tag in trend_tags:
            if keyword in tag:
                candidates.add(strip_hash(tag))

    for keyword in keywords:
        for variation in keyword_variations(keyword):
            candidates.add(variation)

    for tag in trend_tags:
        if len(candidates) >= limit:
            break
        candidates.add(strip_hash(tag))

    return candidates
