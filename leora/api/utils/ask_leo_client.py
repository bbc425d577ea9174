from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from leora.api.utils.guardrails import NOT_AVAILABLE_IN_SNAPSHOT
from leora.config import Settings, get_settings, require_supabase_env
from leora.models.ask_leo import AskLeoCitation, AskLeoSections

logger = logging.getLogger(__name__)

NOT_AVAILABLE_SECTIONS = AskLeoSections(summary=NOT_AVAILABLE_IN_SNAPSHOT)


def _debug(s: Settings, message: str, *args: Any) -> None:
    if s.leo_diagnostics:
        logger.debug("[AskLeoV2] " + message, *args)


def _text(v: Any) -> str:
    return v.strip() if isinstance(v, str) and v.strip() else ""


def _normalize_citation(v: Any) -> Optional[AskLeoCitation]:
    if not isinstance(v, dict):
        return None
    title = _text(v.get("title"))
    if not title:
        return None
    return AskLeoCitation(
        title=title,
        type=_text(v.get("type")) or "—",
        date=_text(v.get("date")) or "—",
        url=_text(v.get("url")) or "—",
    )


def normalize_sections(data: Any) -> AskLeoSections:
    """
    Accepts {summary, what_changed, context, citations}, the same wrapped in
    {response: ...}, or {answerText, citations}. Anything without usable
    text collapses to the not-available phrase.
    """
    rec: Dict[str, Any] = data if isinstance(data, dict) else {}
    inner = rec["response"] if isinstance(rec.get("response"), dict) else rec

    summary = _text(inner.get("summary")) or _text(inner.get("answerText"))
    what_changed = _text(inner.get("what_changed")) or _text(inner.get("whatChanged"))
    context = _text(inner.get("context")) or _text(inner.get("context_text"))

    raw_citations = inner.get("citations")
    citations: List[AskLeoCitation] = []
    if isinstance(raw_citations, list):
        for c in raw_citations:
            norm = _normalize_citation(c)
            if norm is not None:
                citations.append(norm)

    if not (summary or what_changed or context or citations):
        return NOT_AVAILABLE_SECTIONS

    # The model returned the fallback phrase itself: keep it exact, drop the rest.
    if summary == NOT_AVAILABLE_IN_SNAPSHOT:
        return NOT_AVAILABLE_SECTIONS

    return AskLeoSections(summary=summary, what_changed=what_changed, context=context, citations=citations)


def invoke_edge_function(name: str, body: Dict[str, Any], s: Optional[Settings] = None) -> Any:
    """
    POST to a Supabase Edge Function and return the decoded JSON body.
    Raises RuntimeError on transport errors, non-2xx or non-JSON responses.
    """
    s = s or get_settings()
    url, anon_key = require_supabase_env(s)

    try:
        resp = requests.post(
            f"{url.rstrip('/')}/functions/v1/{name}",
            json=body,
            headers={
                "apikey": anon_key,
                "Authorization": f"Bearer {anon_key}",
                "Content-Type": "application/json",
            },
            timeout=s.ask_leo_timeout,
        )
    except requests.RequestException as e:
        raise RuntimeError(f"Edge function {name} unreachable: {e}") from e

    if resp.status_code >= 400:
        raise RuntimeError(f"Edge function {name} returned {resp.status_code}: {resp.text[:500]}")

    try:
        return resp.json()
    except ValueError:
        raise RuntimeError(f"Edge function {name} returned non-JSON content: {resp.text[:2000]}")


def ask_leo(
    question: str,
    snapshot_context: Dict[str, Any],
    active_snapshot: Optional[Dict[str, Any]] = None,
    s: Optional[Settings] = None,
) -> AskLeoSections:
    """
    Ask the remote assistant one snapshot-scoped question.

    Every failure after configuration is checked comes back as the
    not-available phrase; raw errors are only logged.
    """
    s = s or get_settings()
    require_supabase_env(s)

    q = (question or "").strip()
    if not q:
        return NOT_AVAILABLE_SECTIONS

    _debug(s, "invoke %s: start snapshot_id=%s", s.ask_leo_function, snapshot_context.get("snapshot_id"))
    try:
        data = invoke_edge_function(
            s.ask_leo_function,
            {
                "question": q,
                "snapshot_id": snapshot_context.get("snapshot_id"),
                "snapshotContext": snapshot_context,
                "activeSnapshot": active_snapshot,
            },
            s,
        )
    except RuntimeError as e:
        logger.warning("ask_leo failed: %s", e)
        return NOT_AVAILABLE_SECTIONS

    _debug(s, "invoke %s: success keys=%s", s.ask_leo_function, list(data) if isinstance(data, dict) else [])
    return normalize_sections(data)
