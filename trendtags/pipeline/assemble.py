from __future__ import annotations

from itertools import islice
from typing import Iterable, List


def as_hashtag(value: str) -> str:
    return value if value.startswith("#") else f"#{value}"


def assemble(candidates: Iterable[str], limit: int) -> List[str]:
    """Keep the first ``limit`` candidates and prefix each with ``#``."""

    if limit <= 0:
        return []
    return [as_hashtag(candidate) for candidate in islice(candidates, limit)]
