"""Shared fixtures: settings, row factories, a demo-capable TestClient."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from leora.config import Settings
from leora.main import create_app
from leora.models.investor_positions import InvestorPosition
from leora.models.metric_values import MetricValue
from leora.models.snapshot_sources import SnapshotSource
from leora.models.snapshots import Snapshot


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "database_url": None,
        "supabase_url": "https://example.supabase.co",
        "supabase_anon_key": "anon-key",
        "ask_leo_function": "ask_leo_v2",
        "ask_leo_timeout": 5.0,
        "leo_diagnostics": False,
        "demo_mode_available": True,
    }
    values.update(overrides)
    return Settings(**values)


def make_snapshot(**overrides: Any) -> Snapshot:
    values: dict[str, Any] = {
        "id": "snap-0000-abcdef",
        "investor_id": "inv-1",
        "snapshot_kind": "monthly",
        "snapshot_month": "2026-02-01",
        "project_key": None,
        "created_at": "2026-02-10T12:00:00.000Z",
        "label": None,
    }
    values.update(overrides)
    return Snapshot(**values)


def make_metric(metric_key: str, value_text: str | None = "—", **overrides: Any) -> MetricValue:
    return MetricValue(metric_key=metric_key, value_text=value_text, **overrides)


def make_source(**overrides: Any) -> SnapshotSource:
    return SnapshotSource(**overrides)


def make_position(**overrides: Any) -> InvestorPosition:
    return InvestorPosition(**overrides)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def failing_rpc_reader() -> MagicMock:
    reader = MagicMock()
    for name in ("list_snapshots", "list_metric_values", "get_investor_position", "list_snapshot_sources"):
        getattr(reader, name).side_effect = RuntimeError("database unavailable")
    return reader


@pytest.fixture
def app(settings: Settings, failing_rpc_reader: MagicMock):
    return create_app(settings, rpc_reader=failing_rpc_reader)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def demo_client(client: TestClient) -> TestClient:
    resp = client.post("/api/demo_mode", json={"enabled": True})
    assert resp.status_code == 200
    assert resp.json()["enabled"] is True
    return client
