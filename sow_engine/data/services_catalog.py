"""Static strategic-project catalog used when the live catalog is unavailable."""

from typing import Any

from sow_engine.core.service_catalog import build_static_catalog

FUNCTION_LABELS = {
    "crossFunctional": "Cross Functional",
    "marketing": "Marketing",
    "sales": "Sales",
    "customerSuccess": "Customer Success",
    "partnerships": "Partnerships",
}

STRATEGIC_PROJECTS = {
    "crossFunctional": [
        {
            "id": "activity-capture",
            "name": "Activity Capture",
            "description": "Automatically log emails, meetings and calls against CRM records.",
        },
        {
            "id": "arr-reporting",
            "name": "ARR Reporting",
            "description": "Build a trusted ARR waterfall from CRM and billing data.",
        },
        {
            "id": "crm-deduplication",
            "name": "CRM Deduplication",
            "description": "Merge duplicate accounts, contacts and leads and set matching rules.",
        },
        {
            "id": "executive-reporting-suite",
            "name": "Executive Reporting Suite",
            "description": "Board-ready dashboards for pipeline, bookings and retention.",
        },
        {
            "id": "growth-model",
            "name": "Growth Model",
            "description": "Bottoms-up capacity and funnel model tied to revenue targets.",
        },
        {
            "id": "gtm-lifecycle",
            "name": "GTM Lifecycle",
            "description": "Define lifecycle stages from lead through renewal.",
        },
        {
            "id": "marketing-to-sales-handoff-and-sla-tracking",
            "name": "Marketing-to-Sales Handoff & SLA Tracking",
            "description": "Handoff rules with SLA timers and breach reporting.",
        },
        {
            "id": "revenue-recognition",
            "name": "Revenue Recognition",
            "description": "Align booking data with revenue recognition schedules.",
        },
    ],
    "marketing": [
        {
            "id": "automated-inbound-data-enrichment",
            "name": "Automated Inbound Data Enrichment",
            "description": "Enrich inbound leads with firmographics at capture time.",
        },
        {
            "id": "lead-and-opportunity-attribution",
            "name": "Lead & Opportunity Attribution",
            "description": "Multi-touch attribution from first touch to closed won.",
        },
        {
            "id": "lead-lifecycle",
            "name": "Lead Lifecycle (GTM Lifecycle)",
            "description": "Lead statuses, recycling rules and MQL definitions.",
        },
        {
            "id": "lead-scoring-model-sales-led",
            "name": "Lead Scoring Model Design (Sales-Led)",
            "description": "Fit and engagement scoring for sales-led motions.",
        },
        {
            "id": "market-map",
            "name": "Market Map",
            "description": "Size and segment the addressable market by account.",
        },
        {
            "id": "marketing-automation-platform-implementation",
            "name": "Marketing Automation Platform Implementation",
            "description": "Stand up the MAP with CRM sync and core programs.",
        },
        {
            "id": "speed-to-lead",
            "name": "Speed-to-Lead",
            "description": "Cut response times on inbound requests with routing and alerts.",
        },
    ],
    "sales": [
        {
            "id": "forecasting-process-implementation",
            "name": "Forecasting Process Implementation",
            "description": "Forecast categories, cadence and roll-up reporting.",
        },
        {
            "id": "lead-routing",
            "name": "Lead Routing",
            "description": "Route leads and accounts to the right owner automatically.",
        },
        {
            "id": "sales-lifecycle",
            "name": "Sales Lifecycle (GTM Lifecycle)",
            "description": "Opportunity stages with entry and exit criteria.",
        },
        {
            "id": "sales-territory-design",
            "name": "Sales Territory Design and System Implementation",
            "description": "Territory carving and assignment rules in the CRM.",
        },
        {
            "id": "cpq-implementation",
            "name": "CPQ Implementation",
            "description": "Configure products, pricing and quote approvals.",
        },
        {
            "id": "quotas-and-target-setting",
            "name": "Quotas and Target Setting",
            "description": "Quota methodology tied to capacity and the growth model.",
        },
        {
            "id": "quote-to-cash",
            "name": "Quote to Cash",
            "description": "Connect quoting, contracting, billing and collections.",
        },
    ],
    "customerSuccess": [
        {
            "id": "customer-lifecycle",
            "name": "Customer Lifecycle (GTM Lifecycle)",
            "description": "Onboarding, adoption and renewal stages for customers.",
        },
        {
            "id": "customer-health-model",
            "name": "Customer Health Model",
            "description": "Health scoring from usage, support and sentiment signals.",
        },
        {
            "id": "renewal-management",
            "name": "Renewal Management",
            "description": "Renewal opportunities, forecasting and playbooks.",
        },
        {
            "id": "nps-and-voice-of-customer-launch",
            "name": "NPS and Voice of Customer Launch",
            "description": "Survey program with closed-loop follow up.",
        },
    ],
    "partnerships": [
        {
            "id": "partnership-success-platform-implementation",
            "name": "Partnership Success Platform Implementation",
            "description": "Partner portal, deal registration and partner reporting.",
        },
    ],
}

STATIC_CATALOG = build_static_catalog(STRATEGIC_PROJECTS, FUNCTION_LABELS)


def static_catalog_rows(category: str = "Strategic") -> list[dict[str, Any]]:
    """Static catalog as service_catalog rows; the slug bridges diagnostic serviceIds."""
    rows = []
    for entry in STATIC_CATALOG:
        row = {k: v for k, v in entry.items() if k != "id"}
        row["category"] = category
        row["active"] = True
        rows.append(row)
    return rows
