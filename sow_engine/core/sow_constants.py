"""Fixed business constants for engagement and SOW recommendations."""

from typing import Any

# =========================
# Diagnostic health states
# =========================

STATUS_HEALTHY = "healthy"
STATUS_CAREFUL = "careful"
STATUS_WARNING = "warning"
STATUS_UNABLE = "unable"

HEALTH_STATUSES = (STATUS_HEALTHY, STATUS_CAREFUL, STATUS_WARNING, STATUS_UNABLE)

# The two most severe states; always selected for a proposal
NEEDS_ATTENTION_STATUSES = frozenset({STATUS_WARNING, STATUS_UNABLE})

# Lower rank sorts first
SEVERITY_RANK = {
    STATUS_UNABLE: 0,
    STATUS_WARNING: 1,
    STATUS_CAREFUL: 2,
    STATUS_HEALTHY: 3,
}
UNKNOWN_SEVERITY_RANK = 4

# =========================
# Engagement tiers
# =========================

# Monthly committed hours, ascending
TIERS: tuple[dict[str, Any], ...] = (
    {"id": "starter", "label": "Starter", "hours": 50, "price": 15000},
    {"id": "growth", "label": "Growth", "hours": 100, "price": 25000},
    {"id": "scale", "label": "Scale", "hours": 225, "price": 50000},
)

# A tier qualifies if it can burn down the backlog within this many months
MAX_DELIVERY_MONTHS = 6

# =========================
# Estimates
# =========================

DEFAULT_HOURS_LOW = 30
DEFAULT_HOURS_HIGH = 60
DEFAULT_RATE = 200.0

# Documented default table for parse-or-default lookups
ESTIMATE_DEFAULTS = {
    "hours_low": DEFAULT_HOURS_LOW,
    "hours_high": DEFAULT_HOURS_HIGH,
    "default_rate": DEFAULT_RATE,
}

# =========================
# Sectioning
# =========================

# At or below this many priority items, each item gets its own section
ITEM_SECTION_THRESHOLD = 8

OTHER_GROUP = "Other"
GROUPED_SECTION_SUFFIX = " — GTM Operations"

MAX_SECTION_DELIVERABLES = 15

FUNCTION_ORDER = (
    "Cross Functional",
    "Marketing",
    "Sales",
    "Customer Success",
    "Partnerships",
)

DIAGNOSTIC_TYPE_LABELS = {
    "gtm": "GTM Operations",
    "clay": "Clay Enrichment & Automation",
    "cpq": "Quote-to-Cash",
}

# =========================
# Engagement roadmap
# =========================

PRIORITY_SCORES = {
    STATUS_UNABLE: 4,
    STATUS_WARNING: 3,
    STATUS_CAREFUL: 2,
    STATUS_HEALTHY: 1,
}
DEFAULT_PRIORITY_SCORE = 1

# Scores at or above this are labelled High, everything else Medium
HIGH_PRIORITY_MIN_SCORE = 3

SERVICE_TYPE_MANAGED = "managed"

# Delivery pace assumed when laying projects on a roadmap
WEEKLY_DELIVERY_HOURS = 20
MIN_PROJECT_WEEKS = 2

# Name fallback matching compares whole slug tokens; a one-word name is too
# generic to link on its own
MIN_NAME_MATCH_TOKENS = 2
