from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

from leora.api.utils.guardrails import DASH, non_empty_or_dash
from leora.models.audit_events import AuditEvent
from leora.models.snapshots import Snapshot

logger = logging.getLogger(__name__)

MAX_EVENTS = 300

EVENT_TYPE_LABELS = {
    "VIEW_SNAPSHOT": "View snapshot",
    "EXPORT_PACK": "Export pack",
    "OPEN_SOURCES": "View documents & sources",
    "OPEN_DOCUMENT": "Open document",
}

Listener = Callable[[List[AuditEvent]], None]


def _trimmed_or_none(v: Optional[str]) -> Optional[str]:
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def snapshot_to_label(snapshot: Optional[Snapshot]) -> Optional[str]:
    if snapshot is None:
        return None
    month = non_empty_or_dash(snapshot.snapshot_month)
    kind = non_empty_or_dash(snapshot.snapshot_kind)
    if _trimmed_or_none(snapshot.project_key):
        return f"{month} · {kind} · {snapshot.project_key}"
    return f"{month} · {kind}"


def event_type_to_label(event_type: Optional[str]) -> str:
    t = _trimmed_or_none(event_type) or DASH
    return EVENT_TYPE_LABELS.get(t, t)


def sorted_for_display(events: List[AuditEvent]) -> List[AuditEvent]:
    # ISO strings sort lexicographically; newest first.
    return sorted(events, key=lambda e: e.occurred_at or "", reverse=True)


class AuditLog:
    """
    Local, append-only activity log for one actor.

    Nothing here is written to durable storage. Changing the actor (user id,
    "demo", or None when signed out) starts a new, empty log.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._actor: Optional[str] = None
        self._events: List[AuditEvent] = []
        self._seq = 0
        self._listeners: List[Listener] = []

    @property
    def actor(self) -> Optional[str]:
        return self._actor

    def set_actor(self, next_actor: Optional[str]) -> None:
        normalized = _trimmed_or_none(next_actor)
        with self._lock:
            if normalized == self._actor:
                return
            self._actor = normalized
            self._events = []
            self._seq = 0
            events = self._events
        self._notify(events)

    def get_events(self) -> List[AuditEvent]:
        return self._events

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def log(
        self,
        event_type: Optional[str],
        *,
        occurred_at: Optional[str] = None,
        snapshot: Optional[Snapshot] = None,
        snapshot_id: Optional[str] = None,
        snapshot_label: Optional[str] = None,
        note: Optional[str] = None,
    ) -> AuditEvent:
        occurred = occurred_at if occurred_at is not None else _now_iso()

        if snapshot is not None and snapshot.id:
            sid = snapshot.id
        else:
            sid = _trimmed_or_none(snapshot_id)

        label = snapshot_to_label(snapshot) or _trimmed_or_none(snapshot_label)

        with self._lock:
            ev = AuditEvent(
                id=f"{occurred}:{self._seq}",
                event_type=_trimmed_or_none(event_type) or DASH,
                snapshot_id=sid,
                snapshot_label=label,
                occurred_at=occurred,
                note=_trimmed_or_none(note),
            )
            self._seq += 1

            # Newest-first by insertion; readers sort by occurred_at for display.
            self._events = [ev, *self._events][:MAX_EVENTS]
            events = self._events
        self._notify(events)
        return ev

    def _notify(self, events: List[AuditEvent]) -> None:
        for listener in list(self._listeners):
            try:
                listener(events)
            except Exception:
                logger.exception("audit log listener failed")
