"""Pydantic schemas for SOW previews, drafts and the service catalog."""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# =======================
# Shared types
# =======================

DiagnosticTypeLiteral = Literal["gtm", "clay", "cpq"]

# =======================
# Inputs
# =======================


class DiagnosticItem(BaseModel):
    """A single assessed GTM process, as stored by the diagnostic subsystem."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., description="Process name, unique within one diagnostic")
    function: str | None = Field(None, description="GTM function, e.g. Marketing")
    status: str | None = Field(None, description="Health status: healthy, careful, warning or unable")
    add_to_engagement: bool = Field(
        default=False,
        alias="addToEngagement",
        description="User override to include the item regardless of status",
    )
    outcome: str | None = Field(None, description="Desired improvement")
    service_id: str | None = Field(None, alias="serviceId", description="Linked catalog slug or id")
    service_type: str | None = Field(None, alias="serviceType", description="strategic or managed")

    def to_process(self) -> dict[str, Any]:
        """Dict in the stored (camelCase) shape the engines consume."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CatalogEntry(BaseModel):
    """Service catalog row."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    slug: str | None = None
    name: str
    description: str | None = None
    category: str | None = None
    primary_function: str | None = None
    hours_low: float | None = None
    hours_high: float | None = None
    default_rate: float | str | None = None
    key_steps: list[Any] = Field(default_factory=list)
    active: bool | None = None


class Tier(BaseModel):
    """Monthly-hours commitment level."""

    id: str
    label: str
    hours: int = Field(..., gt=0, description="Committed hours per month")
    price: int | None = Field(None, description="Monthly price in USD")


class TierOption(Tier):
    """Tier with delivery estimate for the comparison table."""

    estimated_months: int | None = None
    is_recommended: bool = False


# =======================
# Preview
# =======================


class SowPreviewRequest(BaseModel):
    """Request to preview a SOW from current diagnostic processes."""

    processes: list[DiagnosticItem] = Field(default_factory=list)
    use_live_catalog: bool = Field(
        default=True, description="Load the catalog from the database before falling back"
    )


class PreviewSection(BaseModel):
    """One row of the generated proposal outline."""

    title: str | None
    item_count: int
    function: str


class SowPreviewResponse(BaseModel):
    """Priced SOW outline."""

    sections: list[PreviewSection]
    total_hours_low: float
    total_hours_high: float
    estimated_investment_low: int
    estimated_investment_high: int
    recommended_tier: Tier
    tier_options: list[TierOption]
    item_count: int
    section_count: int
    catalog_source: Literal["live", "static"] = "static"


# =======================
# Draft
# =======================


class SowDraftRequest(BaseModel):
    """Request to draft SOW sections from a diagnostic."""

    processes: list[DiagnosticItem] = Field(default_factory=list)
    customer_name: str | None = None
    diagnostic_type: DiagnosticTypeLiteral = "gtm"
    use_live_catalog: bool = True
    sow_start_date: date | None = Field(
        None, description="First day of the engagement; sections are scheduled from it"
    )


class DraftSection(BaseModel):
    """Drafted SOW section ready to be saved by the caller."""

    title: str | None
    description: str
    function: str
    deliverables: list[str | None]
    hours: int | None
    rate: float
    diagnostic_items: list[str | None]
    sort_order: int
    start_date: str | None = None
    end_date: str | None = None


class SowDraftResponse(BaseModel):
    """Drafted SOW content."""

    executive_summary: str
    status_counts: dict[str, int]
    priority_item_count: int
    sections: list[DraftSection]
    catalog_source: Literal["live", "static"] = "static"


# =======================
# Engagement recommendation
# =======================


class ManagedService(BaseModel):
    """Recurring managed service the customer may add on top of projects."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str | None = None
    add_to_engagement: bool = Field(default=False, alias="addToEngagement")
    hours_per_month: float | None = Field(None, alias="hoursPerMonth", ge=0)

    def to_service(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class EngagementRecommendationRequest(BaseModel):
    """Request to recommend an engagement for a saved diagnostic result."""

    diagnostic_result_id: str | None = None
    customer_id: str | None = None
    diagnostic_type: DiagnosticTypeLiteral = "gtm"
    processes: list[DiagnosticItem] = Field(default_factory=list)
    managed_services: list[ManagedService] = Field(default_factory=list)
    use_live_catalog: bool = True


class RoadmapProject(BaseModel):
    """Project placed on the engagement roadmap."""

    model_config = ConfigDict(extra="allow")

    name: str
    function: str
    status: str | None = None
    priority_score: int
    priority_label: Literal["High", "Medium"]
    hours_low: float
    hours_high: float
    rate: float
    catalog_id: str | None = None
    start_week: int
    duration_weeks: int


class RecommendationSummary(BaseModel):
    project_count: int
    high_priority_count: int
    total_hours_low: float
    total_hours_high: float
    avg_project_hours: int
    managed_hours_per_month: float
    managed_service_count: int
    recommended_tier: TierOption
    total_weeks: int


class EngagementRecommendationResponse(BaseModel):
    """Scored, sequenced projects and the tier that fits them."""

    customer_id: str | None
    diagnostic_result_id: str | None
    diagnostic_type: str | None
    generated_at: str
    summary: RecommendationSummary
    project_sequence: list[RoadmapProject]
    tiers: list[TierOption]
    catalog_source: Literal["live", "static"] = "static"


# =======================
# Catalog
# =======================


class SeedFromStaticRequest(BaseModel):
    """Request to seed the catalog table from the static table."""

    clear: bool = False
