from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from leora.api.state import LeoraState, get_state
from leora.api.utils.audit_log import event_type_to_label, sorted_for_display

router = APIRouter()


@router.get("/audit/events")
def list_audit_events(state: LeoraState = Depends(get_state)) -> List[Dict[str, Any]]:
    """
    Local activity records, newest occurred_at first.
    """
    return [
        {**e.model_dump(), "label": event_type_to_label(e.event_type)}
        for e in sorted_for_display(state.audit_log.get_events())
    ]


@router.post("/session/actor")
def set_session_actor(body: dict, state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise HTTPException(400, "Body must be a JSON object")

    user_id = body.get("user_id")
    if user_id is not None and not isinstance(user_id, str):
        raise HTTPException(400, "user_id must be a string or null")

    state.set_session_user(user_id)
    return {"user_id": state.user_id, "actor": state.audit_log.actor}
