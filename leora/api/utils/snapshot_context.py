from __future__ import annotations

from typing import Any, Dict, Optional

from leora.api.utils.guardrails import non_empty_or_dash, sort_metrics, sort_sources
from leora.api.utils.rpc import SnapshotReader
from leora.api.utils.snapshot_loader import load_snapshot_data
from leora.models.snapshots import Snapshot


def build_snapshot_context(reader: SnapshotReader, snapshot: Snapshot) -> Dict[str, Any]:
    """
    Strings-only, snapshot-scoped payload sent to the assistant.
    Forbidden operational KPIs never leave the process.
    """
    loaded = load_snapshot_data(reader, snapshot)
    position = loaded.position if loaded else None
    metrics = sort_metrics(loaded.metrics) if loaded else []
    sources = sort_sources(loaded.sources) if loaded else []

    return {
        "snapshot_id": non_empty_or_dash(snapshot.id),
        "snapshot_month": non_empty_or_dash(snapshot.snapshot_month),
        "snapshot_kind": non_empty_or_dash(snapshot.snapshot_kind),
        "project_key": non_empty_or_dash(snapshot.project_key),
        "created_at": non_empty_or_dash(snapshot.created_at),
        "label": non_empty_or_dash(snapshot.label),
        "investor_position": {
            "summary_text": non_empty_or_dash(position.summary_text if position else None),
            "narrative_text": non_empty_or_dash(position.narrative_text if position else None),
        },
        "metric_values": [
            {
                "metric_key": non_empty_or_dash(m.metric_key),
                "value_text": non_empty_or_dash(m.value_text),
                "source_page": non_empty_or_dash(m.source_page),
                "created_at": non_empty_or_dash(m.created_at),
            }
            for m in metrics
        ],
        "snapshot_sources": [
            {
                "source_type": non_empty_or_dash(s.source_type),
                "title": non_empty_or_dash(s.title),
                "url": non_empty_or_dash(s.url),
                "note": non_empty_or_dash(s.note),
            }
            for s in sources
        ],
    }


def active_snapshot_payload(snapshot: Optional[Snapshot]) -> Optional[Dict[str, Optional[str]]]:
    if snapshot is None:
        return None
    return {
        "snapshot_month": snapshot.snapshot_month,
        "snapshot_kind": snapshot.snapshot_kind,
        "project_key": snapshot.project_key,
        "created_at": snapshot.created_at,
        "label": snapshot.label,
    }
