"""Tests for leora.api.utils.leo_vision."""

from __future__ import annotations

import pytest

from conftest import make_metric, make_position, make_snapshot, make_source
from leora.api.utils.leo_vision import (
    COCKPIT_BULLETS,
    EXPLAIN_SCREEN_BULLETS,
    NEXT_CHECKS,
    QuickAction,
    ShellRoute,
    build_context_pack,
    build_snapshot_display_label,
    build_snapshot_meta_lines,
    infer_quick_action,
    quick_action_label,
    render_answer,
    route_title,
)
from test_export_pack import SCENARIO_PACK


def scenario_pack(**overrides):
    kwargs = dict(
        screen_title="Cockpit",
        route=ShellRoute.COCKPIT,
        snapshot=make_snapshot(),
        position=make_position(summary_text="", narrative_text="ok"),
        metrics=[make_metric("value.post_money", "$10M")],
        sources=[],
    )
    kwargs.update(overrides)
    return build_context_pack(**kwargs)


# ---------------------------------------------------------------------------
# Snapshot labels and meta lines
# ---------------------------------------------------------------------------


class TestSnapshotMeta:
    def test_display_label_uses_dash_for_missing_project(self):
        assert build_snapshot_display_label(make_snapshot()) == "2026-02-01 · monthly · —"

    def test_display_label_for_no_snapshot(self):
        assert build_snapshot_display_label(None) == "— · — · —"

    def test_meta_lines_order_and_short_id(self):
        lines = build_snapshot_meta_lines(make_snapshot(label="Feb"))
        assert lines == [
            "- snapshot_id: snap-0000-abcdef",
            "- snapshot_id_short: abcdef",
            "- snapshot_month: 2026-02-01",
            "- snapshot_kind: monthly",
            "- project_key: —",
            "- created_at: 2026-02-10T12:00:00.000Z",
            "- label: Feb",
        ]

    def test_short_id_is_dash_when_id_is_blank(self):
        lines = build_snapshot_meta_lines(make_snapshot(id="   "))
        assert lines[0] == "- snapshot_id: —"
        assert lines[1] == "- snapshot_id_short: —"

    def test_short_id_of_short_id_is_whole_id(self):
        assert build_snapshot_meta_lines(make_snapshot(id="abc"))[1] == "- snapshot_id_short: abc"

    def test_all_dashes_without_snapshot(self):
        assert all(line.endswith(": —") for line in build_snapshot_meta_lines(None))


# ---------------------------------------------------------------------------
# build_context_pack
# ---------------------------------------------------------------------------


class TestBuildContextPack:
    def test_export_text_matches_scenario(self):
        assert scenario_pack().export_pack_text == SCENARIO_PACK

    def test_context_text_layout(self):
        pack = scenario_pack()
        head = pack.context_pack_text.split("\n")[:11]
        assert head == [
            "LEO VISION — Context Pack",
            "Screen: Cockpit (cockpit)",
            "Snapshot: 2026-02-01 · monthly · —",
            "- snapshot_id: snap-0000-abcdef",
            "- snapshot_id_short: abcdef",
            "- snapshot_month: 2026-02-01",
            "- snapshot_kind: monthly",
            "- project_key: —",
            "- created_at: 2026-02-10T12:00:00.000Z",
            "- label: —",
            "",
        ]
        assert pack.context_pack_text.endswith("\n" + SCENARIO_PACK)

    def test_idempotent(self):
        a = scenario_pack()
        b = scenario_pack()
        assert a.context_pack_text == b.context_pack_text
        assert a.export_pack_text == b.export_pack_text

    def test_sorts_and_filters_rows(self):
        pack = scenario_pack(
            metrics=[
                make_metric("value.post_money", "$10M"),
                make_metric("ops.error_rate", "3%"),
                make_metric("company.stage", "Seed"),
            ],
            sources=[
                make_source(source_type="pdf", title="b", url="u2"),
                make_source(source_type="PDF", title="a", url="u1"),
            ],
        )
        text = pack.export_pack_text
        assert "error_rate" not in text
        assert text.index("company.stage") < text.index("value.post_money")
        assert text.index("[PDF] a") < text.index("[pdf] b")

    def test_no_snapshot_no_position(self):
        pack = build_context_pack(
            screen_title="Orbit",
            route=ShellRoute.ORBIT,
            snapshot=None,
            position=None,
            metrics=[],
            sources=[],
        )
        assert "— · — · —" in pack.export_pack_text
        assert "- summary_text: —" in pack.export_pack_text
        assert pack.snapshot is None


# ---------------------------------------------------------------------------
# render_answer
# ---------------------------------------------------------------------------


class TestRenderAnswer:
    def test_investor_brief_wraps_export_text_verbatim(self):
        pack = scenario_pack()
        answer = render_answer(QuickAction.CREATE_INVESTOR_BRIEF, pack, None)
        assert SCENARIO_PACK in answer
        assert answer == "\n".join(
            [
                "Ask Leo — Investor Brief (template)",
                "",
                "Mode: deterministic template (no external calls; no calculations).",
                "",
                "Investor brief source: Export Pack builder (verbatim; display-only).",
                "",
                SCENARIO_PACK,
            ]
        )
        assert "LEO VISION — Context Pack" not in answer

    @pytest.mark.parametrize("route", list(EXPLAIN_SCREEN_BULLETS))
    def test_explain_screen_uses_route_bullets(self, route):
        pack = scenario_pack(route=route, screen_title=route_title(route))
        answer = render_answer(QuickAction.EXPLAIN_SCREEN, pack)
        assert answer.startswith("Ask Leo — Explain this screen\n\nMode: deterministic template")
        for bullet in EXPLAIN_SCREEN_BULLETS[route]:
            assert bullet in answer
        assert answer.endswith("Context pack:\n" + pack.context_pack_text)

    @pytest.mark.parametrize("route", [ShellRoute.COCKPIT, ShellRoute.AGENTS, ShellRoute.ASK_AGENT])
    def test_explain_screen_falls_back_to_cockpit(self, route):
        answer = render_answer(QuickAction.EXPLAIN_SCREEN, scenario_pack(route=route))
        for bullet in COCKPIT_BULLETS:
            assert bullet in answer

    def test_check_next_lists_five_checks(self):
        pack = scenario_pack()
        answer = render_answer(QuickAction.WHAT_SHOULD_I_CHECK_NEXT, pack)
        assert "Next checks (read-only):\n" + "\n".join(NEXT_CHECKS) in answer
        assert len(NEXT_CHECKS) == 5
        assert answer.endswith(pack.context_pack_text)

    def test_what_changed_without_previous_renders_dashes(self):
        pack = scenario_pack()
        answer = render_answer(QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT, pack, None)
        assert "Guardrail note: no deltas, comparisons, or derived metrics are computed here." in answer
        previous_part = answer.split("Previous snapshot\n", 1)[1]
        assert previous_part == "\n".join(
            [
                "- snapshot_id: —",
                "- snapshot_id_short: —",
                "- snapshot_month: —",
                "- snapshot_kind: —",
                "- project_key: —",
                "- created_at: —",
                "- label: —",
                "",
                "Previous context pack:",
                "—",
            ]
        )

    def test_what_changed_with_previous_shows_both_packs(self):
        current = scenario_pack()
        previous = scenario_pack(
            snapshot=make_snapshot(id="snap-prev-123456", snapshot_month="2026-01-01"),
            position=make_position(summary_text="earlier"),
        )
        answer = render_answer(QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT, current, previous)
        current_part, previous_part = answer.split("\nPrevious snapshot\n", 1)
        assert "Current context pack:\n" + current.context_pack_text in current_part
        assert previous_part.startswith("- snapshot_id: snap-prev-123456\n- snapshot_id_short: 123456")
        assert previous_part.endswith("Previous context pack:\n" + previous.context_pack_text)

    def test_deterministic(self):
        pack = scenario_pack()
        for action in QuickAction:
            assert render_answer(action, pack) == render_answer(action, pack)


# ---------------------------------------------------------------------------
# Labels and demo question routing
# ---------------------------------------------------------------------------


class TestLabels:
    def test_every_route_has_a_title(self):
        assert {route_title(r) for r in ShellRoute} >= {"Orbit", "Cockpit", "Documents & Sources"}

    def test_every_action_has_a_label(self):
        assert quick_action_label(QuickAction.CREATE_INVESTOR_BRIEF) == "Create Investor Brief (from Export Pack)"
        assert all(quick_action_label(a) for a in QuickAction)


class TestInferQuickAction:
    @pytest.mark.parametrize(
        "question, expected",
        [
            ("What changed?", QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT),
            ("anything new since last month", QuickAction.WHAT_CHANGED_SINCE_LAST_SNAPSHOT),
            ("Give me a brief", QuickAction.CREATE_INVESTOR_BRIEF),
            ("export the pack", QuickAction.CREATE_INVESTOR_BRIEF),
            ("What should I check next?", QuickAction.WHAT_SHOULD_I_CHECK_NEXT),
            ("Explain this", QuickAction.EXPLAIN_SCREEN),
            ("hello", QuickAction.WHAT_SHOULD_I_CHECK_NEXT),
        ],
    )
    def test_routing(self, question, expected):
        assert infer_quick_action(question) is expected
