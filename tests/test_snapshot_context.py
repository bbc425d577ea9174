"""Tests for the assistant payload builder and the non-demo ask route."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from conftest import make_metric, make_position, make_settings, make_snapshot, make_source
from leora.api.utils.snapshot_context import active_snapshot_payload, build_snapshot_context
from leora.main import create_app


def live_reader() -> MagicMock:
    reader = MagicMock()
    reader.list_snapshots.return_value = [make_snapshot()]
    reader.get_investor_position.return_value = make_position(summary_text="Held", narrative_text=" ")
    reader.list_metric_values.return_value = [
        make_metric("value.post_money", "$10M", source_page="p3"),
        make_metric("ops.error_rate", "4%"),
    ]
    reader.list_snapshot_sources.return_value = [make_source(title="Deck", url="https://x")]
    return reader


class TestBuildSnapshotContext:
    def test_strings_only_with_forbidden_metrics_removed(self):
        ctx = build_snapshot_context(live_reader(), make_snapshot())
        assert ctx["snapshot_id"] == "snap-0000-abcdef"
        assert ctx["project_key"] == "—"
        assert ctx["investor_position"] == {"summary_text": "Held", "narrative_text": "—"}
        assert ctx["metric_values"] == [
            {"metric_key": "value.post_money", "value_text": "$10M", "source_page": "p3", "created_at": "—"}
        ]
        assert ctx["snapshot_sources"] == [
            {"source_type": "—", "title": "Deck", "url": "https://x", "note": "—"}
        ]

    def test_failed_reads_still_produce_payload(self):
        reader = MagicMock()
        reader.get_investor_position.side_effect = RuntimeError("x")
        reader.list_metric_values.side_effect = RuntimeError("x")
        reader.list_snapshot_sources.side_effect = RuntimeError("x")
        ctx = build_snapshot_context(reader, make_snapshot())
        assert ctx["metric_values"] == []
        assert ctx["investor_position"]["summary_text"] == "—"

    def test_active_snapshot_payload(self):
        assert active_snapshot_payload(None) is None
        assert active_snapshot_payload(make_snapshot())["snapshot_month"] == "2026-02-01"


class TestAskRoute:
    def test_forwards_context_to_edge_function(self):
        client = TestClient(create_app(make_settings(), rpc_reader=live_reader()))
        resp = MagicMock(status_code=200)
        resp.json.return_value = {"summary": "Post-money is stored as $10M."}
        with patch("leora.api.utils.ask_leo_client.requests.post", return_value=resp) as post:
            out = client.post("/api/leo/ask", json={"question": "Post-money?", "snapshot_id": "snap-0000-abcdef"})
        assert out.json()["summary"] == "Post-money is stored as $10M."
        sent = post.call_args.kwargs["json"]["snapshotContext"]
        assert all("error" not in m["metric_key"] for m in sent["metric_values"])

    def test_missing_supabase_env_is_503(self):
        client = TestClient(create_app(make_settings(supabase_url=None), rpc_reader=live_reader()))
        out = client.post("/api/leo/ask", json={"question": "q", "snapshot_id": "snap-0000-abcdef"})
        assert out.status_code == 503
