from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from leora.api.utils.export_pack import build_investor_pack_text
from leora.api.utils.guardrails import DASH, non_empty_or_dash, sort_metrics, sort_sources
from leora.models.investor_positions import InvestorPosition
from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource
from leora.models.snapshots import Snapshot

# Leo Vision answers are template-only: no external calls, no derived
# metrics, no deltas. Every value shown is a stored snapshot string.


class ShellRoute(str, Enum):
    ORBIT = "orbit"
    VALUE_MULTI = "value_multi"
    SNAPSHOT_DETAIL = "snapshot_detail"
    AGENTS = "agents"
    ASK_AGENT = "ask_agent"
    AUDIT = "audit"
    ACCOUNT = "account"
    EXPORT_PACK = "export_pack"
    SNAPSHOT_TIMELINE = "snapshot_timeline"
    DOCUMENTS_SOURCES = "documents_sources"
    COCKPIT = "cockpit"


class QuickAction(str, Enum):
    EXPLAIN_SCREEN = "explain_screen"
    WHAT_CHANGED_SINCE_LAST_SNAPSHOT = "what_changed_since_last_snapshot"
    WHAT_SHOULD_I_CHECK_NEXT = "what_should_i_check_next"
    CREATE_INVESTOR_BRIEF = "create_investor_brief"


ROUTE_TITLES: Dict[ShellRoute, str] = {
    ShellRoute.ORBIT: "Orbit",
    ShellRoute.VALUE_MULTI: "Value",
    ShellRoute.SNAPSHOT_DETAIL: "Snapshot Detail",
    ShellRoute.AGENTS: "Agents",
    ShellRoute.ASK_AGENT: "Ask Agent",
    ShellRoute.AUDIT: "Audit Log",
    ShellRoute.ACCOUNT: "Account",
    ShellRoute.EXPORT_PACK: "Export",
    ShellRoute.SNAPSHOT_TIMELINE: "Snapshot Timeline",
    ShellRoute.DOCUMENTS_SOURCES: "Documents & Sources",
    ShellRoute.COCKPIT: "Cockpit",
}

QUICK_ACTION_LABELS: Dict[QuickAction, str] = {
    QuickAction.EXPLAIN_SCREEN: "Explain this screen",
    QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT: "What changed since last snapshot?",
    QuickAction.WHAT_SHOULD_I_CHECK_NEXT: "What should I check next?",
    QuickAction.CREATE_INVESTOR_BRIEF: "Create Investor Brief (from Export Pack)",
}

QUICK_ACTION_HEADERS: Dict[QuickAction, str] = {
    QuickAction.EXPLAIN_SCREEN: "Ask Leo — Explain this screen",
    QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT: "Ask Leo — What changed since last snapshot?",
    QuickAction.WHAT_SHOULD_I_CHECK_NEXT: "Ask Leo — What should I check next?",
    QuickAction.CREATE_INVESTOR_BRIEF: "Ask Leo — Investor Brief (template)",
}

# Purely descriptive; routes without an entry use the cockpit text.
EXPLAIN_SCREEN_BULLETS: Dict[ShellRoute, List[str]] = {
    ShellRoute.ORBIT: [
        "- Orbit is the entry point to select a snapshot and enter the read-only investor view.",
        "- Use the snapshot selector to pick the active snapshot.",
    ],
    ShellRoute.VALUE_MULTI: [
        "- Value is a display-only view of stored metric values (metric_key + value_text).",
        "- No calculations or derived metrics are performed in-app.",
    ],
    ShellRoute.SNAPSHOT_DETAIL: [
        "- Snapshot Detail shows the selected snapshot’s stored narrative and metric values.",
        "- Text is displayed verbatim; missing fields show “—”.",
    ],
    ShellRoute.DOCUMENTS_SOURCES: [
        "- Documents & Sources lists snapshot-linked source documents (titles/urls/notes).",
        "- Links open externally; there are no uploads or edits.",
    ],
    ShellRoute.EXPORT_PACK: [
        "- Export generates a deterministic plain-text Investor Pack for the active snapshot.",
        "- It supports Copy and Share without adding any calculations.",
    ],
    ShellRoute.AUDIT: [
        "- Audit Log shows local, read-only activity records (no analytics, no backend writes).",
        "- It’s chronological truth only (what/when/on which snapshot).",
    ],
    ShellRoute.ACCOUNT: [
        "- Account shows your identity/build info and provides Sign out.",
        "- The app is read-only (other than auth sign-out).",
    ],
    ShellRoute.SNAPSHOT_TIMELINE: [
        "- Snapshot Timeline lists snapshots chronologically and lets you jump into details.",
        "- Timeline items are metadata only (no trends, charts, or deltas).",
    ],
}

COCKPIT_BULLETS = [
    "- Cockpit is the read-only landing view for the active snapshot.",
    "- Use navigation to open Detail, Value, Sources, Export, and Audit Log.",
]

NEXT_CHECKS = [
    "- Review summary_text and narrative_text (verbatim).",
    "- Review metric values (metric_key + value_text).",
    "- Open Documents & Sources for supporting links.",
    "- Create / copy an Investor Pack (Export).",
    "- Use Audit Log for a chronological record of actions.",
]

MODE_LINE = "Mode: deterministic template (no external calls; no calculations)."

META_FIELDS = [
    "snapshot_id",
    "snapshot_id_short",
    "snapshot_month",
    "snapshot_kind",
    "project_key",
    "created_at",
    "label",
]


@dataclass(frozen=True)
class ContextPack:
    screen_title: str
    route: ShellRoute
    snapshot: Optional[Snapshot]
    export_pack_text: str
    context_pack_text: str


def route_title(route: ShellRoute) -> str:
    return ROUTE_TITLES[route]


def quick_action_label(action: QuickAction) -> str:
    return QUICK_ACTION_LABELS[action]


def _snapshot_field(snapshot: Optional[Snapshot], name: str) -> str:
    return non_empty_or_dash(getattr(snapshot, name, None) if snapshot else None)


def build_snapshot_display_label(snapshot: Optional[Snapshot]) -> str:
    month = _snapshot_field(snapshot, "snapshot_month")
    kind = _snapshot_field(snapshot, "snapshot_kind")
    project_key = _snapshot_field(snapshot, "project_key")
    return f"{month} · {kind} · {project_key}"


def build_snapshot_meta_lines(snapshot: Optional[Snapshot]) -> List[str]:
    snapshot_id = _snapshot_field(snapshot, "id")
    id_short = snapshot_id[-6:] if snapshot_id != DASH else DASH
    return [
        f"- snapshot_id: {snapshot_id}",
        f"- snapshot_id_short: {id_short}",
        f"- snapshot_month: {_snapshot_field(snapshot, 'snapshot_month')}",
        f"- snapshot_kind: {_snapshot_field(snapshot, 'snapshot_kind')}",
        f"- project_key: {_snapshot_field(snapshot, 'project_key')}",
        f"- created_at: {_snapshot_field(snapshot, 'created_at')}",
        f"- label: {_snapshot_field(snapshot, 'label')}",
    ]


def build_context_pack(
    *,
    screen_title: str,
    route: ShellRoute,
    snapshot: Optional[Snapshot],
    position: Optional[InvestorPosition],
    metrics: Sequence[MetricValue],
    sources: Sequence[SnapshotSource],
) -> ContextPack:
    """
    Project one snapshot's loaded rows into the export text plus the
    metadata-wrapped context text. Same inputs, same bytes.
    """
    month = _snapshot_field(snapshot, "snapshot_month")
    kind = _snapshot_field(snapshot, "snapshot_kind")
    project_key = _snapshot_field(snapshot, "project_key")

    export_pack_text = build_investor_pack_text(
        month=month,
        kind=kind,
        project_key=project_key,
        summary_text=non_empty_or_dash(position.summary_text if position else None),
        narrative_text=non_empty_or_dash(position.narrative_text if position else None),
        metrics=sort_metrics(metrics),
        sources=sort_sources(sources),
    )

    lines: List[str] = []
    lines.append("LEO VISION — Context Pack")
    lines.append(f"Screen: {screen_title} ({route.value})")
    lines.append(f"Snapshot: {build_snapshot_display_label(snapshot)}")
    lines.extend(build_snapshot_meta_lines(snapshot))
    lines.append("")
    lines.append(export_pack_text)

    return ContextPack(
        screen_title=screen_title,
        route=route,
        snapshot=snapshot,
        export_pack_text=export_pack_text,
        context_pack_text="\n".join(lines),
    )


def _explain_screen_bullets(route: ShellRoute) -> List[str]:
    return EXPLAIN_SCREEN_BULLETS.get(route, COCKPIT_BULLETS)


def render_answer(
    action: QuickAction,
    current: ContextPack,
    previous: Optional[ContextPack] = None,
) -> str:
    """
    Deterministic quick-action answer built only from the packs passed in.
    """
    lines: List[str] = [QUICK_ACTION_HEADERS[action], "", MODE_LINE, ""]

    if action is QuickAction.EXPLAIN_SCREEN:
        lines.append(f"Screen: {current.screen_title}")
        lines.append(f"Snapshot: {build_snapshot_display_label(current.snapshot)}")
        lines.append("")
        lines.append("What this screen does:")
        lines.extend(_explain_screen_bullets(current.route))
        lines.append("")
        lines.append("Context pack:")
        lines.append(current.context_pack_text)
        return "\n".join(lines)

    if action is QuickAction.WHAT_SHOULD_I_CHECK_NEXT:
        lines.append(f"Screen: {current.screen_title}")
        lines.append(f"Snapshot: {build_snapshot_display_label(current.snapshot)}")
        lines.append("")
        lines.append("Next checks (read-only):")
        lines.extend(NEXT_CHECKS)
        lines.append("")
        lines.append("Context pack:")
        lines.append(current.context_pack_text)
        return "\n".join(lines)

    if action is QuickAction.CREATE_INVESTOR_BRIEF:
        lines.append("Investor brief source: Export Pack builder (verbatim; display-only).")
        lines.append("")
        lines.append(current.export_pack_text)
        return "\n".join(lines)

    if action is not QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT:
        raise ValueError(f"Unknown quick action: {action!r}")

    # Side-by-side stored text only; the comparison is left to the reader.
    lines.append("Guardrail note: no deltas, comparisons, or derived metrics are computed here.")
    lines.append("This view shows stored text for the current snapshot and the previous snapshot.")
    lines.append("")

    lines.append("Current snapshot")
    lines.extend(build_snapshot_meta_lines(current.snapshot))
    lines.append("")
    lines.append("Current context pack:")
    lines.append(current.context_pack_text)
    lines.append("")

    lines.append("Previous snapshot")
    if previous is not None:
        lines.extend(build_snapshot_meta_lines(previous.snapshot))
        lines.append("")
        lines.append("Previous context pack:")
        lines.append(previous.context_pack_text)
    else:
        lines.extend(f"- {name}: {DASH}" for name in META_FIELDS)
        lines.append("")
        lines.append("Previous context pack:")
        lines.append(DASH)

    return "\n".join(lines)


def infer_quick_action(question: str) -> QuickAction:
    """
    Map a free-text question onto a quick action. Used when demo mode
    answers locally instead of calling the assistant.
    """
    q = (question or "").lower()
    if "change" in q or "since last" in q:
        return QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT
    if "brief" in q or "pack" in q:
        return QuickAction.CREATE_INVESTOR_BRIEF
    if "check" in q and "next" in q:
        return QuickAction.WHAT_SHOULD_I_CHECK_NEXT
    if "explain" in q:
        return QuickAction.EXPLAIN_SCREEN
    return QuickAction.WHAT_SHOULD_I_CHECK_NEXT
