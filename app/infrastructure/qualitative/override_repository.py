"""
Adapter: Qualitative override repository.

Implements QualitativeOverrideRepository port.
Persists one row per ticker in the ``qualitative_overrides`` table.
Writes are upserts keyed on ticker (last write wins).
"""

import logging
from datetime import timezone
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, bindparam, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.domain.qualitative.entities import QualitativeOverride, Segment
from app.domain.qualitative.errors import OverrideStoreError
from app.domain.qualitative.ports import QualitativeOverrideRepository

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS qualitative_overrides (
        ticker        VARCHAR(16) PRIMARY KEY,
        segments      JSON NOT NULL,
        total_revenue DOUBLE PRECISION,
        year          INTEGER,
        source        VARCHAR(255) NOT NULL,
        notes         TEXT,
        locked        BOOLEAN NOT NULL DEFAULT TRUE,
        updated_at    TIMESTAMP WITH TIME ZONE NOT NULL
    )
"""

_COLUMNS = "ticker, segments, total_revenue, year, source, notes, locked, updated_at"

_RESULT_TYPES = {
    "segments": JSON,
    "locked": Boolean,
    "updated_at": DateTime(timezone=True),
}


def create_schema(engine: Engine) -> None:
    """Create the overrides table if it does not exist."""
    with engine.begin() as conn:
        conn.execute(text(CREATE_TABLE_SQL))


def _row_to_entity(row: Any) -> QualitativeOverride:
    updated_at = row.updated_at
    if updated_at is not None and updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)
    return QualitativeOverride(
        ticker=row.ticker,
        segments=[
            Segment(name=str(item.get("name", "")), value=float(item.get("value", 0)))
            for item in (row.segments or [])
        ],
        total_revenue=float(row.total_revenue) if row.total_revenue is not None else None,
        year=int(row.year) if row.year is not None else None,
        source=row.source,
        notes=row.notes,
        locked=bool(row.locked),
        updated_at=updated_at,
    )


class SqlQualitativeOverrideRepository(QualitativeOverrideRepository):
    """SQL implementation of the override store.

    Uses portable ``INSERT ... ON CONFLICT (ticker) DO UPDATE`` so the same
    statements run on PostgreSQL and SQLite.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_all(self) -> list[QualitativeOverride]:
        """Return every override ordered by ticker ascending."""
        query = text(
            f"SELECT {_COLUMNS} FROM qualitative_overrides ORDER BY ticker ASC"
        ).columns(**_RESULT_TYPES)
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(query).fetchall()
        except SQLAlchemyError as exc:
            logger.error("Failed to list qualitative overrides: %s", type(exc).__name__)
            raise OverrideStoreError(_reason(exc)) from exc
        return [_row_to_entity(row) for row in rows]

    def get(self, ticker: str) -> Optional[QualitativeOverride]:
        """Return the override for a ticker, or None."""
        query = text(
            f"SELECT {_COLUMNS} FROM qualitative_overrides WHERE ticker = :ticker"
        ).columns(**_RESULT_TYPES)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(query, {"ticker": ticker.upper()}).first()
        except SQLAlchemyError as exc:
            logger.error("Failed to read override for %s: %s", ticker, type(exc).__name__)
            raise OverrideStoreError(_reason(exc)) from exc
        return _row_to_entity(row) if row is not None else None

    def upsert(self, override: QualitativeOverride) -> None:
        """Insert or replace the override row keyed by ticker.

        Args:
            override: The override to persist. Its ticker is stored uppercased.
        """
        query = text(
            f"""
            INSERT INTO qualitative_overrides ({_COLUMNS})
            VALUES
                (:ticker, :segments, :total_revenue, :year, :source, :notes,
                 :locked, :updated_at)
            ON CONFLICT (ticker) DO UPDATE SET
                segments = excluded.segments,
                total_revenue = excluded.total_revenue,
                year = excluded.year,
                source = excluded.source,
                notes = excluded.notes,
                locked = excluded.locked,
                updated_at = excluded.updated_at
            """
        ).bindparams(
            bindparam("segments", type_=JSON),
            bindparam("locked", type_=Boolean),
            bindparam("updated_at", type_=DateTime(timezone=True)),
        )
        params = {
            "ticker": override.ticker.upper(),
            "segments": [{"name": s.name, "value": s.value} for s in override.segments],
            "total_revenue": override.total_revenue,
            "year": override.year,
            "source": override.source,
            "notes": override.notes,
            "locked": override.locked,
            "updated_at": override.updated_at,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(query, params)
        except SQLAlchemyError as exc:
            logger.error(
                "Failed to upsert override for %s: %s", override.ticker, type(exc).__name__
            )
            raise OverrideStoreError(_reason(exc)) from exc

        logger.debug("Upserted qualitative override for ticker=%s.", override.ticker)


def _reason(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)
