from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import duckdb
import pandas as pd

from ..errors import TrendStoreError
from ..models import HashtagScore, StorageSettings, TrendSnapshot
from ..utils.logging import get_logger


class TrendStore(Protocol):
    def get(self, country: str) -> TrendSnapshot:
        ...

    def put(self, country: str, snapshot: TrendSnapshot) -> TrendSnapshot:
        ...

    def countries(self) -> List[str]:
        ...


def ensure_schema(conn: duckdb.DuckDBPyConnection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS trending (
            country TEXT NOT NULL,
            updated_at TIMESTAMP,
            hashtags TEXT,
            tag_count INTEGER,
            source TEXT
        )
        """
    )


def _to_db_timestamp(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


class DuckDBTrendStore:
    """Country snapshots kept in a single DuckDB table, one row per country."""

    def __init__(self, settings: StorageSettings):
        self.settings = settings

    @property
    def path(self) -> Path:
        return Path(self.settings.path)

    def _connect(self) -> duckdb.DuckDBPyConnection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = duckdb.connect(str(self.path))
        ensure_schema(conn)
        return conn

    def _read(self, sql: str, params: Optional[List[Any]] = None) -> List[Any]:
        """Run a query on a read-only connection so the writer keeps the file lock."""
        if not self.path.exists():
            return []
        conn = duckdb.connect(str(self.path), read_only=True)
        try:
            return conn.execute(sql, params or []).fetchall()
        except duckdb.CatalogException:
            # File exists but nothing has been stored yet.
            return []
        finally:
            conn.close()

    def get(self, country: str) -> TrendSnapshot:
        key = country.lower()
        try:
            rows = self._read(
                "SELECT updated_at, hashtags, tag_count, source FROM trending WHERE country = ?",
                [key],
            )
        except duckdb.Error as exc:
            raise TrendStoreError(f"Could not read trends for {key}") from exc
        if not rows:
            return TrendSnapshot.empty(key)
        updated_at, hashtags, count, source = rows[0]
        tags = [HashtagScore(**entry) for entry in json.loads(hashtags or "[]")]
        return TrendSnapshot(
            country=key,
            updated_at=_from_db_timestamp(updated_at),
            hashtags=tags,
            count=count if count is not None else len(tags),
            source=source,
        )

    def put(self, country: str, snapshot: TrendSnapshot) -> TrendSnapshot:
        key = country.lower()
        stored = snapshot.model_copy(
            update={
                "country": key,
                "updated_at": snapshot.updated_at or datetime.now(timezone.utc),
                "count": len(snapshot.hashtags),
            }
        )
        payload = json.dumps([tag.model_dump() for tag in stored.hashtags])
        try:
            conn = self._connect()
            try:
                conn.execute("BEGIN TRANSACTION")
                try:
                    conn.execute("DELETE FROM trending WHERE country = ?", [key])
                    conn.execute(
                        "INSERT INTO trending VALUES (?, ?, ?, ?, ?)",
                        [key, _to_db_timestamp(stored.updated_at), payload, stored.count, stored.source],
                    )
                    conn.execute("COMMIT")
                except duckdb.Error:
                    conn.execute("ROLLBACK")
                    raise
            finally:
                conn.close()
        except duckdb.Error as exc:
            raise TrendStoreError(f"Could not write trends for {key}") from exc
        get_logger(__name__).info("Stored trend snapshot", extra={"country": key, "count": stored.count})
        return stored

    def countries(self) -> List[str]:
        try:
            rows = self._read("SELECT country FROM trending ORDER BY country")
        except duckdb.Error as exc:
            raise TrendStoreError("Could not list stored countries") from exc
        return [row[0] for row in rows]


def snapshots_dataframe(store: TrendStore, countries: Optional[List[str]] = None) -> pd.DataFrame:
    """Flatten snapshots to one row per hashtag."""

    rows: List[Dict[str, Any]] = []
    for country in countries or store.countries():
        snapshot = store.get(country)
        for rank, entry in enumerate(snapshot.hashtags, start=1):
            rows.append(
                {
                    "country": snapshot.country,
                    "updated_at": snapshot.updated_at,
                    "rank": rank,
                    "tag": entry.tag,
                    "score": entry.score,
                    "source": snapshot.source,
                }
            )
    return pd.DataFrame(rows, columns=["country", "updated_at", "rank", "tag", "score", "source"])


def export_snapshots(store: TrendStore, out_path: Path, countries: Optional[List[str]] = None) -> int:
    df = snapshots_dataframe(store, countries)
    if out_path.suffix not in {".csv", ".json", ".parquet", ".pq"}:
        raise ValueError("Unsupported export format")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if out_path.suffix == ".csv":
        df.to_csv(out_path, index=False)
    elif out_path.suffix == ".json":
        df.to_json(out_path, orient="records", date_format="iso")
    else:
        df.to_parquet(out_path, index=False)
    get_logger(__name__).info("Exported trend snapshots", extra={"rows": len(df), "path": str(out_path)})
    return len(df)
