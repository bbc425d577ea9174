from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from leora.api.state import LeoraState, get_state

router = APIRouter()


def _demo_status(state: LeoraState) -> Dict[str, Any]:
    return {"available": state.demo_mode.available, "enabled": state.demo_mode.enabled}


@router.get("/demo_mode")
def get_demo_mode(state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    return _demo_status(state)


@router.post("/demo_mode")
def set_demo_mode(body: dict, state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise HTTPException(400, "Body must be a JSON object")

    enabled = body.get("enabled")
    if not isinstance(enabled, bool):
        raise HTTPException(400, "enabled must be a boolean")

    state.demo_mode.set_enabled(enabled)
    return _demo_status(state)
