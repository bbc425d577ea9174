from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from leora.api.state import LeoraState, get_state
from leora.api.utils.guardrails import sort_metrics, sort_sources
from leora.api.utils.rpc import DEFAULT_LIST_LIMIT
from leora.api.utils.snapshot_loader import find_previous_snapshot, load_snapshot_data

router = APIRouter()

ALLOWED_KINDS = {"monthly", "project"}


@router.get("/snapshots")
def list_snapshots(
    kind: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    project_key: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=500),
    state: LeoraState = Depends(get_state),
) -> List[Dict[str, Any]]:
    if kind is not None and kind not in ALLOWED_KINDS:
        raise HTTPException(400, f"Invalid kind. Allowed: {sorted(ALLOWED_KINDS)}")

    snapshots = state.list_snapshots_soft(kind=kind, month=month, project_key=project_key, limit=limit)
    return [s.model_dump() for s in snapshots]


@router.get("/snapshots/{snapshot_id}")
def get_snapshot_detail(snapshot_id: str, state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    """
    Stored narrative, metric values and sources for one snapshot, verbatim.

    Only the newest 500 snapshots resolve by id; older ids return 404.
    503 when the snapshot listing itself fails.
    """
    snapshot = state.resolve_snapshot(snapshot_id)
    loaded = load_snapshot_data(state.reader, snapshot)

    state.audit_log.log("VIEW_SNAPSHOT", snapshot=snapshot)

    return {
        "snapshot": snapshot.model_dump(),
        "position": loaded.position.model_dump() if loaded and loaded.position else None,
        "metrics": [m.model_dump() for m in sort_metrics(loaded.metrics if loaded else [])],
        "sources": [s.model_dump() for s in sort_sources(loaded.sources if loaded else [])],
    }


@router.get("/snapshots/{snapshot_id}/sources")
def list_snapshot_sources(snapshot_id: str, state: LeoraState = Depends(get_state)) -> List[Dict[str, Any]]:
    snapshot = state.resolve_snapshot(snapshot_id)
    loaded = load_snapshot_data(state.reader, snapshot)

    state.audit_log.log("OPEN_SOURCES", snapshot=snapshot)
    return [s.model_dump() for s in sort_sources(loaded.sources if loaded else [])]


@router.get("/snapshots/{snapshot_id}/previous")
def get_previous_snapshot(snapshot_id: str, state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    snapshot = state.resolve_snapshot(snapshot_id)
    prev = find_previous_snapshot(state.reader, snapshot)
    return {"previous": prev.model_dump() if prev else None}
