from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from leora.api.state import LeoraState, get_state
from leora.api.utils.leo_vision import ShellRoute, build_context_pack, route_title
from leora.api.utils.snapshot_loader import load_snapshot_data

router = APIRouter()


@router.get("/snapshots/{snapshot_id}/export_pack")
def export_pack(snapshot_id: str, state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    """
    Plain-text Investor Pack for copy/share. Display-only, no calculations.
    """
    snapshot = state.resolve_snapshot(snapshot_id)
    loaded = load_snapshot_data(state.reader, snapshot)

    pack = build_context_pack(
        screen_title=route_title(ShellRoute.EXPORT_PACK),
        route=ShellRoute.EXPORT_PACK,
        snapshot=snapshot,
        position=loaded.position if loaded else None,
        metrics=loaded.metrics if loaded else [],
        sources=loaded.sources if loaded else [],
    )

    state.audit_log.log("EXPORT_PACK", snapshot=snapshot)
    return {"snapshot_id": snapshot.id, "text": pack.export_pack_text}
