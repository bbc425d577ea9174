from __future__ import annotations

from typing import Iterable, List, Optional

from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource

DASH = "—"

NOT_AVAILABLE_IN_SNAPSHOT = "Not available in this snapshot."

# Operational KPIs that are never shown as tiles, lists, exports or context.
FORBIDDEN_METRIC_SUBSTRINGS = [
    "error",
    "rework",
    "design_to_production",
    "design-to-production",
    "design_speed",
    "design-speed",
]


def is_forbidden_metric_key(metric_key: Optional[str]) -> bool:
    """
    Substring match against the forbidden operational KPI list (case-insensitive).
    """
    k = (metric_key or "").lower()
    return any(t in k for t in FORBIDDEN_METRIC_SUBSTRINGS)


def non_empty_or_dash(v: Optional[str]) -> str:
    if isinstance(v, str) and v.strip():
        return v
    return DASH


def sort_metrics(metrics: Iterable[MetricValue]) -> List[MetricValue]:
    """
    Drop forbidden keys, then order by metric_key.

    Remaining fields break ties so duplicate keys come out the same way
    regardless of input order.
    """
    kept = [m for m in metrics if not is_forbidden_metric_key(m.metric_key)]
    return sorted(
        kept,
        key=lambda m: (
            m.metric_key,
            m.value_text or "",
            m.source_page or "",
            m.created_at or "",
        ),
    )


def sort_sources(sources: Iterable[SnapshotSource]) -> List[SnapshotSource]:
    return sorted(
        sources,
        key=lambda s: (
            (s.source_type or "").lower(),
            (s.title or "").lower(),
            s.url or "",
            s.note or "",
        ),
    )
