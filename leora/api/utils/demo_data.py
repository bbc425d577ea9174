from __future__ import annotations

from typing import Dict, List, Optional

from leora.api.utils.rpc import DEFAULT_LIST_LIMIT
from leora.models.investor_positions import InvestorPosition
from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource
from leora.models.snapshots import Snapshot

# Local seed data for demo mode. Display-only placeholder strings; unknown
# values are "—". Never sent anywhere.

DEMO_INVESTOR_ID = "11111111-1111-4111-8111-111111111111"

SEEDED_AT = "2026-02-09T00:00:00.000Z"

DEMO_SNAPSHOTS: List[Snapshot] = [
    Snapshot(
        id="00000000-0000-4000-8000-000000000001",
        investor_id=DEMO_INVESTOR_ID,
        snapshot_kind="monthly",
        snapshot_month="2026-01-01",
        project_key=None,
        created_at="2026-01-10T12:00:00.000Z",
        label="Demo seed snapshot (display-only).",
    ),
    Snapshot(
        id="00000000-0000-4000-8000-000000000002",
        investor_id=DEMO_INVESTOR_ID,
        snapshot_kind="monthly",
        snapshot_month="2026-02-01",
        project_key=None,
        created_at="2026-02-10T12:00:00.000Z",
        label="Demo seed snapshot (display-only).",
    ),
    Snapshot(
        id="00000000-0000-4000-8000-000000000003",
        investor_id=DEMO_INVESTOR_ID,
        snapshot_kind="project",
        snapshot_month="2026-02-01",
        project_key="DEMO-PROJECT",
        created_at="2026-02-12T12:00:00.000Z",
        label="Demo project snapshot (display-only).",
    ),
]

_SNAPSHOT_IDS = [s.id for s in DEMO_SNAPSHOTS]

DEMO_METRIC_KEYS: Dict[str, List[str]] = {
    _SNAPSHOT_IDS[0]: [
        "value.enterprise_value",
        "value.post_money",
        "cap_table.ownership_percent",
        "company.stage",
    ],
    _SNAPSHOT_IDS[1]: [
        "value.enterprise_value",
        "value.post_money",
        "revenue.mrr",
        "company.stage",
    ],
    _SNAPSHOT_IDS[2]: [
        "project.status",
        "project.milestone",
    ],
}

DEMO_SUMMARY_TEXT = "Demo seed position summary (display-only)."
DEMO_NARRATIVE_TEXT = "Demo seed narrative text (display-only)."

DEMO_SOURCE = SnapshotSource(
    source_type="Notion (demo)",
    title="Source document (demo)",
    url=None,
    note="—",
)


def most_recent_demo_snapshot() -> Snapshot:
    ordered = sorted(
        DEMO_SNAPSHOTS,
        key=lambda s: (s.snapshot_month or "", s.created_at or ""),
        reverse=True,
    )
    return ordered[0]


class DemoSnapshotReader:
    """
    SnapshotReader over the fixed seed data. Makes no network calls.
    """

    def list_snapshots(
        self,
        kind: Optional[str] = None,
        month: Optional[str] = None,
        project_key: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[Snapshot]:
        out = [
            s
            for s in DEMO_SNAPSHOTS
            if (kind is None or s.snapshot_kind == kind)
            and (month is None or s.snapshot_month == month)
            and (project_key is None or s.project_key == project_key)
        ]
        return out[:limit]

    def list_metric_values(self, snapshot_id: str) -> List[MetricValue]:
        return [
            MetricValue(
                snapshot_id=snapshot_id,
                metric_key=key,
                value_text="—",
                source_page="—",
                created_at=SEEDED_AT,
            )
            for key in DEMO_METRIC_KEYS.get(snapshot_id, [])
        ]

    def get_investor_position(self, snapshot_id: str) -> Optional[InvestorPosition]:
        if snapshot_id not in _SNAPSHOT_IDS:
            return None
        return InvestorPosition(
            investor_id=DEMO_INVESTOR_ID,
            snapshot_id=snapshot_id,
            summary_text=DEMO_SUMMARY_TEXT,
            narrative_text=DEMO_NARRATIVE_TEXT,
            created_at=SEEDED_AT,
            updated_at=SEEDED_AT,
        )

    def list_snapshot_sources(self, snapshot_id: str) -> List[SnapshotSource]:
        if snapshot_id not in _SNAPSHOT_IDS:
            return []
        return [DEMO_SOURCE]
