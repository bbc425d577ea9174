from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from leora.api.state import LeoraState, get_state
from leora.api.utils.agent_registry import AGENTS, get_agent
from leora.api.utils.ask_leo_client import NOT_AVAILABLE_SECTIONS, ask_leo
from leora.api.utils.demo_data import most_recent_demo_snapshot
from leora.api.utils.leo_vision import (
    ContextPack,
    QuickAction,
    ShellRoute,
    build_context_pack,
    infer_quick_action,
    render_answer,
    route_title,
)
from leora.api.utils.snapshot_context import active_snapshot_payload, build_snapshot_context
from leora.api.utils.snapshot_loader import find_previous_snapshot, load_snapshot_data
from leora.models.ask_leo import AskLeoSections
from leora.models.snapshots import Snapshot

router = APIRouter()


def _parse_route(body: Dict[str, Any]) -> ShellRoute:
    raw = body.get("route") or ShellRoute.COCKPIT.value
    try:
        return ShellRoute(str(raw))
    except ValueError:
        raise HTTPException(400, f"Invalid route. Allowed: {[r.value for r in ShellRoute]}")


def _optional_snapshot(state: LeoraState, body: Dict[str, Any]) -> Optional[Snapshot]:
    sid = body.get("snapshot_id")
    if sid is None or (isinstance(sid, str) and not sid.strip()):
        return None
    if not isinstance(sid, str):
        raise HTTPException(400, "snapshot_id must be a string")
    return state.resolve_snapshot(sid)


def run_quick_action(
    state: LeoraState,
    action: QuickAction,
    route: ShellRoute,
    snapshot: Optional[Snapshot],
) -> str:
    """
    Pack the active snapshot (and, for "what changed", the previous one)
    and render the template answer.
    """
    screen_title = route_title(route)
    reader = state.reader

    loaded = state.snapshot_cache.ensure_loaded(reader, snapshot)
    current = build_context_pack(
        screen_title=screen_title,
        route=route,
        snapshot=snapshot,
        position=loaded.position if loaded else None,
        metrics=loaded.metrics if loaded else [],
        sources=loaded.sources if loaded else [],
    )

    previous: Optional[ContextPack] = None
    if action is QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT and snapshot is not None:
        prev_snapshot = find_previous_snapshot(reader, snapshot)
        if prev_snapshot is not None:
            prev_loaded = load_snapshot_data(reader, prev_snapshot)
            previous = build_context_pack(
                screen_title=screen_title,
                route=route,
                snapshot=prev_snapshot,
                position=prev_loaded.position if prev_loaded else None,
                metrics=prev_loaded.metrics if prev_loaded else [],
                sources=prev_loaded.sources if prev_loaded else [],
            )

    return render_answer(action, current, previous)


@router.post("/leo/quick_action")
def leo_quick_action(body: dict, state: LeoraState = Depends(get_state)) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise HTTPException(400, "Body must be a JSON object")

    try:
        action = QuickAction(str(body.get("action", "")))
    except ValueError:
        raise HTTPException(400, f"Invalid action. Allowed: {[a.value for a in QuickAction]}")

    route = _parse_route(body)
    snapshot = _optional_snapshot(state, body)
    if snapshot is None and state.demo_mode.enabled:
        snapshot = most_recent_demo_snapshot()

    return {"action": action.value, "answer": run_quick_action(state, action, route, snapshot)}


@router.post("/leo/ask")
def leo_ask(body: dict, state: LeoraState = Depends(get_state)) -> AskLeoSections:
    """
    Free-text question scoped to one snapshot.

    Demo mode answers from the templates and never calls out. Locked agents
    and missing snapshots get the not-available phrase.
    """
    if not isinstance(body, dict):
        raise HTTPException(400, "Body must be a JSON object")

    question = str(body.get("question", "")).strip()
    if not question:
        raise HTTPException(400, "Missing question")

    agent = get_agent(body.get("agent_id"))
    if not agent.enabled:
        return NOT_AVAILABLE_SECTIONS

    route = _parse_route(body)
    snapshot = _optional_snapshot(state, body)
    if snapshot is None:
        return NOT_AVAILABLE_SECTIONS

    if state.demo_mode.enabled:
        answer = run_quick_action(state, infer_quick_action(question), route, snapshot)
        return AskLeoSections(summary=answer)

    snapshot_context = build_snapshot_context(state.reader, snapshot)
    try:
        return ask_leo(question, snapshot_context, active_snapshot_payload(snapshot), state.settings)
    except RuntimeError as e:
        raise HTTPException(503, str(e))


@router.get("/leo/agents")
def list_agents() -> List[Dict[str, Any]]:
    return [asdict(a) for a in AGENTS]
