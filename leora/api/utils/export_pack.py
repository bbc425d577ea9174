from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from leora.api.utils.guardrails import DASH, non_empty_or_dash
from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource

logger = logging.getLogger(__name__)

COPIED = "Copied."


def build_investor_pack_text(
    month: str,
    kind: str,
    project_key: str,
    summary_text: str,
    narrative_text: str,
    metrics: Sequence[MetricValue],
    sources: Sequence[SnapshotSource],
) -> str:
    """
    Plain-text Investor Pack. Stored strings only; no calculations.

    Metrics and sources are written in the order given, so callers pass them
    through sort_metrics / sort_sources first.
    """
    lines: List[str] = []

    lines.append("LEORA — Investor Pack")
    lines.append(f"{month} · {kind} · {project_key}")
    lines.append("")

    lines.append("My Position")
    lines.append(f"- summary_text: {non_empty_or_dash(summary_text)}")
    lines.append(f"- narrative_text: {non_empty_or_dash(narrative_text)}")
    lines.append("")

    lines.append("Value")
    if not metrics:
        lines.append(f"- {DASH}")
    else:
        for m in metrics:
            lines.append(f"- {m.metric_key}: {non_empty_or_dash(m.value_text)}")
    lines.append("")

    lines.append("Documents & Sources")
    if not sources:
        lines.append(f"- {DASH}")
    else:
        for s in sources:
            source_type = non_empty_or_dash(s.source_type)
            title = non_empty_or_dash(s.title)
            url = non_empty_or_dash(s.url)
            lines.append(f"- [{source_type}] {title} — {url}")
            if s.note and s.note.strip():
                lines.append(f"  - note: {s.note}")

    return "\n".join(lines)


def deliver_pack(sink: Callable[[str], object], text: str) -> str:
    """
    Hand the pack to a clipboard/share sink. Returns the status line shown to the user.
    """
    try:
        sink(text)
    except Exception:
        logger.warning("export sink failed", exc_info=True)
        return DASH
    return COPIED
