from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import text
from sqlalchemy.orm import Session

from leora.db.session import SessionLocal
from leora.models.investor_positions import InvestorPosition
from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource
from leora.models.snapshots import Snapshot

DEFAULT_LIST_LIMIT = 50

# Read-only Postgres functions. Nothing in this package writes.
LIST_SNAPSHOTS_SQL = text(
    "SELECT * FROM rpc_list_snapshots("
    "p_snapshot_kind => :p_snapshot_kind, "
    "p_snapshot_month => :p_snapshot_month, "
    "p_project_key => :p_project_key, "
    "p_limit => :p_limit)"
)
LIST_METRIC_VALUES_SQL = text("SELECT * FROM rpc_list_metric_values(p_snapshot_id => :p_snapshot_id)")
GET_INVESTOR_POSITION_SQL = text("SELECT * FROM rpc_get_investor_position(p_snapshot_id => :p_snapshot_id)")
LIST_SNAPSHOT_SOURCES_SQL = text("SELECT * FROM rpc_list_snapshot_sources(p_snapshot_id => :p_snapshot_id)")


class SnapshotReader(Protocol):
    def list_snapshots(
        self,
        kind: Optional[str] = None,
        month: Optional[str] = None,
        project_key: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[Snapshot]: ...

    def list_metric_values(self, snapshot_id: str) -> List[MetricValue]: ...

    def get_investor_position(self, snapshot_id: str) -> Optional[InvestorPosition]: ...

    def list_snapshot_sources(self, snapshot_id: str) -> List[SnapshotSource]: ...


def _as_text(v: Any) -> Optional[str]:
    """
    Dates and timestamps become ISO strings so ordering is plain string comparison.
    """
    if v is None:
        return None
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    return str(v)


def _row_dict(row: Mapping[str, Any], fields: List[str]) -> Dict[str, Optional[str]]:
    return {f: _as_text(row.get(f)) for f in fields}


def row_to_snapshot(row: Mapping[str, Any]) -> Snapshot:
    return Snapshot(
        **_row_dict(
            row,
            ["id", "investor_id", "snapshot_kind", "snapshot_month", "project_key", "created_at", "label"],
        )
    )


def row_to_metric_value(row: Mapping[str, Any]) -> MetricValue:
    d = _row_dict(row, ["snapshot_id", "metric_key", "value_text", "source_page", "created_at"])
    d["metric_key"] = d["metric_key"] or ""
    return MetricValue(**d)


def row_to_investor_position(row: Mapping[str, Any]) -> InvestorPosition:
    return InvestorPosition(
        **_row_dict(
            row,
            ["investor_id", "snapshot_id", "summary_text", "narrative_text", "created_at", "updated_at"],
        )
    )


def row_to_snapshot_source(row: Mapping[str, Any]) -> SnapshotSource:
    return SnapshotSource(**_row_dict(row, ["source_type", "title", "url", "note"]))


class RpcSnapshotReader:
    """
    SnapshotReader backed by the Supabase Postgres RPC functions.

    Opens one session per call so the loader can run reads on separate
    threads. Database errors propagate; callers decide how to degrade.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def _fetch(self, stmt, params: Dict[str, Any]) -> List[Mapping[str, Any]]:
        db: Session = self._session_factory()
        try:
            return list(db.execute(stmt, params).mappings().all())
        finally:
            db.close()

    def list_snapshots(
        self,
        kind: Optional[str] = None,
        month: Optional[str] = None,
        project_key: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[Snapshot]:
        rows = self._fetch(
            LIST_SNAPSHOTS_SQL,
            {
                "p_snapshot_kind": kind,
                "p_snapshot_month": month,
                "p_project_key": project_key,
                "p_limit": limit,
            },
        )
        return [row_to_snapshot(r) for r in rows]

    def list_metric_values(self, snapshot_id: str) -> List[MetricValue]:
        rows = self._fetch(LIST_METRIC_VALUES_SQL, {"p_snapshot_id": snapshot_id})
        return [row_to_metric_value(r) for r in rows]

    def get_investor_position(self, snapshot_id: str) -> Optional[InvestorPosition]:
        rows = self._fetch(GET_INVESTOR_POSITION_SQL, {"p_snapshot_id": snapshot_id})
        return row_to_investor_position(rows[0]) if rows else None

    def list_snapshot_sources(self, snapshot_id: str) -> List[SnapshotSource]:
        rows = self._fetch(LIST_SNAPSHOT_SOURCES_SQL, {"p_snapshot_id": snapshot_id})
        return [row_to_snapshot_source(r) for r in rows]
