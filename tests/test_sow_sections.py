"""Tests for proposal sectioning and SOW drafting."""

from datetime import date

import pytest

from sow_engine.core.service_catalog import build_catalog_map
from sow_engine.core.sow_sections import (
    build_preview_sections,
    draft_grouped_sections,
    draft_item_sections,
    draft_sow,
    generate_executive_summary,
    group_items,
    should_use_item_sections,
)
from tests.fixtures_sow import make_process


class TestGroupItems:
    def test_groups_by_function_in_first_seen_order(self):
        items = [
            make_process(function="Sales", name="A"),
            make_process(function="Marketing", name="B"),
            make_process(function="Sales", name="C"),
        ]
        groups = group_items(items)
        assert list(groups) == ["Sales", "Marketing"]
        assert len(groups["Sales"]) == 2

    def test_groups_by_outcome(self):
        items = [make_process(outcome="Pipeline", name="A"), make_process(outcome="Revenue", name="B")]
        assert list(group_items(items, "outcome")) == ["Pipeline", "Revenue"]

    def test_missing_key_goes_to_other(self):
        items = [make_process(function=None, name="A"), make_process(function="  ", name="B")]
        groups = group_items(items)
        assert [i["name"] for i in groups["Other"]] == ["A", "B"]

    def test_most_severe_first_within_group(self):
        items = [
            make_process(status="warning", name="W"),
            make_process(status="healthy", name="H", addToEngagement=True),
            make_process(status="unable", name="U"),
        ]
        assert [i["name"] for i in group_items(items)["Sales"]] == ["U", "W", "H"]

    def test_does_not_reorder_input(self):
        items = [make_process(status="warning", name="W"), make_process(status="unable", name="U")]
        group_items(items)
        assert [i["name"] for i in items] == ["W", "U"]


class TestShouldUseItemSections:
    def test_at_or_below_threshold(self):
        assert should_use_item_sections([{}] * 8) is True
        assert should_use_item_sections([{}]) is True

    def test_above_threshold(self):
        assert should_use_item_sections([{}] * 9) is False


class TestBuildPreviewSections:
    def test_one_section_per_item(self):
        items = [make_process(name="A"), make_process(name="B", function=None)]
        sections = build_preview_sections(items)
        assert sections == [
            {"title": "A", "item_count": 1, "function": "Sales"},
            {"title": "B", "item_count": 1, "function": "Other"},
        ]

    def test_blank_function_is_other(self):
        sections = build_preview_sections([make_process(name="X", function="   ")])
        assert sections == [{"title": "X", "item_count": 1, "function": "Other"}]

    def test_grouped_titles(self):
        items = [make_process(name=f"S{i}") for i in range(6)] + [
            make_process(name=f"M{i}", function="Marketing") for i in range(3)
        ]
        sections = build_preview_sections(items)
        assert sections == [
            {"title": "Sales — GTM Operations", "item_count": 6, "function": "Sales"},
            {"title": "Marketing — GTM Operations", "item_count": 3, "function": "Marketing"},
        ]


class TestDraftItemSections:
    def test_uses_catalog_estimates_and_steps(self, mock_catalog):
        items = [
            make_process(name="Lead Routing", serviceId="lead-routing"),
            make_process(name="Pipeline", serviceId="cat-2"),
        ]
        sections = draft_item_sections(items, build_catalog_map(mock_catalog))
        assert len(sections) == 2
        assert sections[0]["title"] == "Lead Routing"
        assert sections[0]["hours"] == 40
        assert sections[0]["rate"] == 225.0
        assert sections[0]["deliverables"] == ["Map rules", "Configure CRM"]
        assert sections[1]["hours"] == 60
        assert [s["sort_order"] for s in sections] == [0, 1]

    def test_unmatched_item_uses_default_rate_and_no_hours(self):
        sections = draft_item_sections([make_process(name="Unknown", serviceId="no-match")], {}, 150)
        assert sections[0]["rate"] == 150
        assert sections[0]["hours"] is None
        assert sections[0]["deliverables"] == ["Unknown"]

    def test_blank_function_is_other(self):
        sections = draft_item_sections([make_process(name="X", function=" \t")], {})
        assert sections[0]["function"] == "Other"

    def test_no_dates_without_start_date(self, mock_catalog):
        sections = draft_item_sections([make_process(serviceId="lead-routing")], build_catalog_map(mock_catalog))
        assert sections[0]["start_date"] is None
        assert sections[0]["end_date"] is None

    def test_sections_scheduled_back_to_back(self, mock_catalog):
        items = [
            make_process(name="Lead Routing", serviceId="lead-routing"),
            make_process(name="Pipeline", serviceId="cat-2"),
        ]
        sections = draft_item_sections(
            items, build_catalog_map(mock_catalog), sow_start_date="2025-03-01"
        )
        # 40h is 2 weeks, 60h is 3 weeks at 20h/week
        assert [(s["start_date"], s["end_date"]) for s in sections] == [
            ("2025-03-01", "2025-03-14"),
            ("2025-03-15", "2025-04-04"),
        ]

    def test_section_without_hours_gets_minimum_duration(self):
        sections = draft_item_sections(
            [make_process(serviceId="no-match")], {}, sow_start_date=date(2025, 1, 6)
        )
        assert sections[0]["start_date"] == "2025-01-06"
        assert sections[0]["end_date"] == "2025-01-19"

    def test_invalid_start_date_raises(self):
        with pytest.raises(ValueError):
            draft_item_sections([make_process()], {}, sow_start_date="next monday")


class TestDraftGroupedSections:
    def test_function_order_and_aggregation(self, mock_catalog):
        grouped = {
            "Sales": [
                make_process(name="A", serviceId="lead-routing"),
                make_process(name="B", serviceId="cat-2"),
            ],
            "Marketing": [make_process(name="C", serviceId="lead-routing", function="Marketing")],
        }
        sections = draft_grouped_sections(grouped, build_catalog_map(mock_catalog))
        assert [s["function"] for s in sections] == ["Marketing", "Sales"]
        sales = sections[1]
        # (70 + 130) / 2
        assert sales["hours"] == 100
        assert sales["rate"] == 213
        assert sales["deliverables"] == ["Map rules", "Configure CRM", "Audit stages"]
        assert sales["diagnostic_items"] == ["A", "B"]
        assert "Covers 2 diagnostic items." in sales["description"]

    def test_unknown_functions_after_known_and_other_last(self):
        grouped = {
            "Other": [make_process(name="O")],
            "RevOps": [make_process(name="R")],
            "Partnerships": [make_process(name="P")],
        }
        sections = draft_grouped_sections(grouped, {})
        assert [s["function"] for s in sections] == ["Partnerships", "RevOps", "Other"]

    def test_caps_deliverables(self, mock_catalog):
        big = dict(mock_catalog[0], key_steps=[f"Step {i}" for i in range(20)])
        sections = draft_grouped_sections(
            {"Sales": [make_process(serviceId="lead-routing")]}, build_catalog_map([big])
        )
        assert len(sections[0]["deliverables"]) == 15


class TestExecutiveSummary:
    def test_includes_customer_and_stats(self):
        items = [
            make_process(status="warning"),
            make_process(status="unable"),
            make_process(status="healthy"),
        ]
        summary = generate_executive_summary(items, "Acme Corp", "gtm")
        assert "Acme Corp" in summary
        assert "GTM Operations" in summary
        assert "3 processes evaluated" in summary
        assert "67%" in summary

    def test_empty_items(self):
        assert "healthy operational state" in generate_executive_summary([], None, "gtm", {})

    def test_default_organization_name(self):
        assert "your organization" in generate_executive_summary([make_process()], None, "gtm")

    def test_clay_label(self):
        assert "Clay Enrichment" in generate_executive_summary([make_process()], "Test", "clay")

    def test_majority_critical_needs_immediate_attention(self):
        items = [make_process(status="unable") for _ in range(6)] + [make_process(status="healthy")]
        assert "immediate attention" in generate_executive_summary(items, "X", "gtm")


class TestDraftSow:
    def test_no_priority_items(self):
        result = draft_sow([make_process(status="healthy"), make_process(status="careful")])
        assert result["sections"] == []
        assert result["priority_items"] == []
        assert result["executive_summary"]

    def test_sections_for_priority_items(self, mock_catalog):
        result = draft_sow(
            [
                make_process(status="warning", name="A", serviceId="lead-routing"),
                make_process(status="unable", name="B", serviceId="cat-2"),
            ],
            mock_catalog,
            customer_name="Acme",
        )
        assert len(result["priority_items"]) == 2
        assert [s["title"] for s in result["sections"]] == ["A", "B"]
        assert result["status_counts"] == {"warning": 1, "unable": 1, "careful": 0, "healthy": 0}

    def test_grouped_above_threshold(self):
        items = [make_process(name=f"P{i}", function="Sales" if i % 2 else "Marketing") for i in range(10)]
        result = draft_sow(items)
        assert [s["function"] for s in result["sections"]] == ["Marketing", "Sales"]

    @pytest.mark.parametrize("items", [[], None])
    def test_empty_input(self, items):
        result = draft_sow(items)
        assert result["sections"] == []
        assert "healthy operational state" in result["executive_summary"]

    def test_start_date_schedules_grouped_sections(self):
        items = [make_process(name=f"P{i}", function="Sales" if i % 2 else "Marketing") for i in range(10)]
        result = draft_sow(items, sow_start_date="2025-03-03")
        sections = result["sections"]
        assert sections[0]["start_date"] == "2025-03-03"
        assert sections[1]["start_date"] > sections[0]["end_date"]

    def test_no_start_date_leaves_dates_empty(self, mock_catalog):
        result = draft_sow([make_process(serviceId="cat-1")], mock_catalog)
        assert result["sections"][0]["start_date"] is None
        assert result["sections"][0]["end_date"] is None
