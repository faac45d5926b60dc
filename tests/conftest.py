from datetime import datetime, timezone
from typing import Dict, List

import pytest

from trendtags.errors import TrendStoreError
from trendtags.models import HashtagScore, TrendSnapshot


class MemoryTrendStore:
    def __init__(self) -> None:
        self.snapshots: Dict[str, TrendSnapshot] = {}
        self.reads: List[str] = []

    def get(self, country: str) -> TrendSnapshot:
        key = country.lower()
        self.reads.append(key)
        return self.snapshots.get(key, TrendSnapshot.empty(key))

    def put(self, country: str, snapshot: TrendSnapshot) -> TrendSnapshot:
        key = country.lower()
        stored = snapshot.model_copy(update={"country": key, "count": len(snapshot.hashtags)})
        self.snapshots[key] = stored
        return stored

    def countries(self) -> List[str]:
        return sorted(self.snapshots)


class FailingTrendStore:
    def get(self, country: str) -> TrendSnapshot:
        raise TrendStoreError("store unreachable")

    def put(self, country: str, snapshot: TrendSnapshot) -> TrendSnapshot:
        raise TrendStoreError("store unreachable")

    def countries(self) -> List[str]:
        raise TrendStoreError("store unreachable")


def make_snapshot(*tags, country: str = "global") -> TrendSnapshot:
    """Build a snapshot from (tag, score) pairs."""
    return TrendSnapshot(
        country=country,
        updated_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        hashtags=[HashtagScore(tag=tag, score=score) for tag, score in tags],
        count=len(tags),
        source="tiktok",
    )


@pytest.fixture
def store() -> MemoryTrendStore:
    store = MemoryTrendStore()
    store.put("global", make_snapshot(("#dance", 10), ("#music", 8)))
    return store
