"""Tests for SOW and service catalog endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from sow_engine.main import app
from tests.fixtures_sow import MOCK_CATALOG, make_process

LIVE_PRICING = "sow_engine.db.service_catalog.list_active_services_for_pricing"


@pytest.fixture
def client():
    """Test client for the app."""
    return TestClient(app)


class TestPreviewEndpoint:
    def test_preview_with_live_catalog(self, client):
        processes = [
            make_process(name="A", serviceId="lead-routing"),
            make_process(name="B", status="unable", serviceId="cat-2"),
            make_process(name="C", status="healthy"),
        ]

        with patch(LIVE_PRICING, return_value=MOCK_CATALOG) as mock_pricing:
            response = client.post("/v1/sow/preview", json={"processes": processes})

        assert response.status_code == 200
        data = response.json()
        assert data["catalog_source"] == "live"
        assert data["item_count"] == 2
        assert data["section_count"] == 2
        assert data["total_hours_low"] == 70
        assert data["total_hours_high"] == 130
        assert data["estimated_investment_low"] == 14875
        assert data["recommended_tier"]["id"] == "starter"
        assert len(data["tier_options"]) == 3
        mock_pricing.assert_called_once()

    def test_falls_back_to_static_when_db_fails(self, client):
        processes = [make_process(name="Lead Routing", serviceId="lead-routing")]

        with patch(LIVE_PRICING, side_effect=RuntimeError("db down")):
            response = client.post("/v1/sow/preview", json={"processes": processes})

        assert response.status_code == 200
        data = response.json()
        assert data["catalog_source"] == "static"
        assert data["total_hours_low"] == 30
        assert data["total_hours_high"] == 60
        assert data["estimated_investment_high"] == 12000

    def test_static_only_skips_db(self, client):
        with patch(LIVE_PRICING) as mock_pricing:
            response = client.post(
                "/v1/sow/preview",
                json={"processes": [make_process()], "use_live_catalog": False},
            )

        assert response.status_code == 200
        assert response.json()["catalog_source"] == "static"
        mock_pricing.assert_not_called()

    def test_empty_processes(self, client):
        with patch(LIVE_PRICING, return_value=[]):
            response = client.post("/v1/sow/preview", json={"processes": []})

        assert response.status_code == 200
        data = response.json()
        assert data["item_count"] == 0
        assert data["recommended_tier"]["id"] == "starter"

    def test_accepts_snake_case_fields(self, client):
        process = {"name": "Market Map", "status": "healthy", "add_to_engagement": True}

        with patch(LIVE_PRICING, return_value=[]):
            response = client.post("/v1/sow/preview", json={"processes": [process]})

        assert response.status_code == 200
        assert response.json()["item_count"] == 1

    def test_invalid_payload_is_rejected(self, client):
        response = client.post("/v1/sow/preview", json={"processes": [{"status": "warning"}]})
        assert response.status_code == 422


class TestDraftEndpoint:
    def test_drafts_sections(self, client):
        processes = [
            make_process(name="A", serviceId="lead-routing"),
            make_process(name="B", status="careful"),
        ]

        with patch(LIVE_PRICING, return_value=MOCK_CATALOG):
            response = client.post(
                "/v1/sow/draft",
                json={"processes": processes, "customer_name": "Acme", "diagnostic_type": "gtm"},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["priority_item_count"] == 1
        assert data["sections"][0]["title"] == "A"
        assert data["sections"][0]["hours"] == 40
        assert data["status_counts"]["careful"] == 1
        assert "Acme" in data["executive_summary"]

    def test_unknown_diagnostic_type_rejected(self, client):
        response = client.post("/v1/sow/draft", json={"processes": [], "diagnostic_type": "nope"})
        assert response.status_code == 422

    def test_start_date_schedules_sections(self, client):
        processes = [make_process(name="A", serviceId="lead-routing")]

        with patch(LIVE_PRICING, return_value=MOCK_CATALOG):
            response = client.post(
                "/v1/sow/draft", json={"processes": processes, "sow_start_date": "2025-03-01"}
            )

        assert response.status_code == 200
        section = response.json()["sections"][0]
        assert section["start_date"] == "2025-03-01"
        assert section["end_date"] == "2025-03-14"

    def test_dates_empty_without_start_date(self, client):
        with patch(LIVE_PRICING, return_value=MOCK_CATALOG):
            response = client.post("/v1/sow/draft", json={"processes": [make_process()]})

        section = response.json()["sections"][0]
        assert section["start_date"] is None
        assert section["end_date"] is None

    def test_logs_draft_with_diagnostic_context(self, client):
        with (
            patch(LIVE_PRICING, return_value=[]),
            patch("sow_engine.api.sow.log_with_context") as mock_log,
        ):
            response = client.post(
                "/v1/sow/draft",
                json={"processes": [make_process()], "customer_name": "Acme", "diagnostic_type": "cpq"},
            )

        assert response.status_code == 200
        kwargs = mock_log.call_args.kwargs
        assert kwargs["customer_name"] == "Acme"
        assert kwargs["catalog_source"] == "static"
        assert kwargs["diagnostic_type"] == "cpq"
        assert kwargs["section_count"] == 1


class TestRecommendationEndpoint:
    def test_recommends_with_managed_services(self, client):
        payload = {
            "diagnostic_result_id": "diag-1",
            "customer_id": "cust-1",
            "processes": [
                make_process(name="A", addToEngagement=True, serviceId="lead-routing"),
                make_process(name="B", status="unable", addToEngagement=True, serviceId="cat-2"),
                make_process(name="C", addToEngagement=True, serviceType="managed"),
            ],
            "managed_services": [{"name": "RevOps Admin", "addToEngagement": True, "hoursPerMonth": 40}],
        }

        with patch(LIVE_PRICING, return_value=MOCK_CATALOG):
            response = client.post("/v1/sow/recommendation", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["customer_id"] == "cust-1"
        assert data["diagnostic_result_id"] == "diag-1"
        assert data["catalog_source"] == "live"
        assert data["generated_at"]
        assert data["summary"]["project_count"] == 2
        assert data["summary"]["managed_hours_per_month"] == 40
        # avg 100h with 40h/month reserved: 10 months on starter, under 2 on growth
        assert data["summary"]["recommended_tier"]["id"] == "growth"
        assert [p["name"] for p in data["project_sequence"]] == ["B", "A"]
        assert data["project_sequence"][0]["start_week"] == 1
        assert [t["is_recommended"] for t in data["tiers"]] == [False, True, False]

    def test_empty_diagnostic(self, client):
        response = client.post(
            "/v1/sow/recommendation", json={"processes": [], "use_live_catalog": False}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["project_count"] == 0
        assert data["project_sequence"] == []
        assert data["summary"]["recommended_tier"]["id"] == "starter"

    def test_negative_managed_hours_rejected(self, client):
        response = client.post(
            "/v1/sow/recommendation",
            json={"managed_services": [{"addToEngagement": True, "hoursPerMonth": -5}]},
        )
        assert response.status_code == 422


def test_list_tiers(client):
    response = client.get("/v1/sow/tiers")
    assert response.status_code == 200
    assert [t["hours"] for t in response.json()] == [50, 100, 225]


class TestServiceCatalogEndpoints:
    def test_list_services(self, client):
        with patch("sow_engine.db.service_catalog.list_services") as mock_list:
            mock_list.return_value = MOCK_CATALOG
            response = client.get("/v1/service-catalog", params={"category": "Strategic"})

        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == ["Lead Routing", "Pipeline Management"]
        mock_list.assert_called_once_with(category="Strategic", active=None, search=None)

    def test_get_service_not_found(self, client):
        with patch("sow_engine.db.service_catalog.get_service", return_value=None):
            response = client.get("/v1/service-catalog/missing")

        assert response.status_code == 404

    def test_get_service(self, client):
        with patch("sow_engine.db.service_catalog.get_service", return_value=MOCK_CATALOG[0]):
            response = client.get("/v1/service-catalog/cat-1")

        assert response.status_code == 200
        assert response.json()["hours_low"] == 30

    def test_seed_from_static(self, client):
        with patch("sow_engine.db.service_catalog.upsert_services_by_slug") as mock_upsert:
            mock_upsert.side_effect = lambda rows, clear=False: [{"slug": r["slug"]} for r in rows]
            response = client.post("/v1/service-catalog/seed-from-static", json={"clear": True})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == data["requested"]
        assert mock_upsert.call_args.kwargs["clear"] is True
