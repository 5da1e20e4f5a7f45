"""
Budget Domain Models - Ledger rows and their derived rollups

BudgetEntry is the only persisted shape; CategoryBudget, BudgetSummary and
CostDriver are derived per call and never stored.

Key concepts:
- Planned: what the couple intended to spend in a category
- Committed: what vendors have been contracted for
- Paid: what has actually left the account
- Pending: committed but not yet paid (never negative)

All amounts are integer paise.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class BudgetCategory(str, Enum):
    """
    Closed set of budget buckets

    MISCELLANEOUS is the fallback variant: any unknown, blank or missing
    category resolves to it instead of being dropped.
    """

    VENUE = "venue"
    CATERING = "catering"
    DECORATIONS = "decorations"
    PHOTOGRAPHY = "photography"
    VIDEOGRAPHY = "videography"
    ENTERTAINMENT = "entertainment"
    FLOWERS = "flowers"
    TRANSPORTATION = "transportation"
    ACCOMMODATION = "accommodation"
    INVITATIONS = "invitations"
    GIFTS = "gifts"
    RENTALS = "rentals"
    STAFF = "staff"
    MAKEUP = "makeup"
    JEWELRY = "jewelry"
    MISCELLANEOUS = "miscellaneous"

    @classmethod
    def _missing_(cls, value: object) -> "BudgetCategory":
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.MISCELLANEOUS

    @classmethod
    def parse(cls, value: Any) -> "BudgetCategory":
        """Resolve a raw store value, falling back to MISCELLANEOUS"""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.MISCELLANEOUS
        return cls(value)

    def label(self) -> str:
        """Human-readable name, e.g. 'Photography'"""
        return self.value.replace("_", " ").capitalize()


# Categories whose cost scales with headcount
GUEST_DRIVEN_CATEGORIES = (
    BudgetCategory.CATERING,
    BudgetCategory.TRANSPORTATION,
    BudgetCategory.ACCOMMODATION,
)


class BudgetHealth(str, Enum):
    """
    Whole-event budget status

    ON_TRACK: committed within ceiling, no category overruns
    AT_RISK: category overruns or utilization past the risk threshold
    OVER_BUDGET: committed exceeds the total budget ceiling
    """

    ON_TRACK = "on-track"
    AT_RISK = "at-risk"
    OVER_BUDGET = "over-budget"


class BudgetEntry(BaseModel):
    """
    One planned or committed financial obligation, usually one vendor

    Store rows may carry NULL amounts; they default to zero here so the
    aggregator never has to guard for missing values.
    """

    entry_id: str | None = None
    event_id: str | None = None
    category: BudgetCategory = BudgetCategory.MISCELLANEOUS
    planned_amount: int = Field(default=0, ge=0)
    committed_amount: int = Field(default=0, ge=0)
    paid_amount: int = Field(default=0, ge=0)
    vendor_id: str | None = None
    description: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _resolve_category(cls, value: Any) -> BudgetCategory:
        return BudgetCategory.parse(value)

    @field_validator("planned_amount", "committed_amount", "paid_amount", mode="before")
    @classmethod
    def _default_amount(cls, value: Any) -> Any:
        return 0 if value is None else value

    def pending_amount(self) -> int:
        """Committed but unpaid; overpayment reads as zero, not negative"""
        return max(0, self.committed_amount - self.paid_amount)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "entry_id": "bud-001",
                    "event_id": "evt-001",
                    "category": "venue",
                    "planned_amount": 100000,
                    "committed_amount": 120000,
                    "paid_amount": 50000,
                    "vendor_id": "vendor-palace-grounds",
                }
            ]
        }
    }


class CategoryBudget(BaseModel):
    """Rollup of every entry sharing a category within one event"""

    category: BudgetCategory
    planned: int = 0
    committed: int = 0
    paid: int = 0
    pending: int = Field(default=0, ge=0)
    delta: int = 0
    delta_percentage: float = 0.0
    is_over_budget: bool = False


class BudgetSummary(BaseModel):
    """
    Whole-event rollup against the user-set total budget ceiling

    total_budget is configured independently of the category sums;
    0 means no ceiling has been set.
    """

    total_budget: int = Field(default=0, ge=0)
    planned: int = 0
    committed: int = 0
    paid: int = 0
    pending: int = Field(default=0, ge=0)
    overrun: int = Field(default=0, ge=0)
    utilization: float = 0.0
    health: BudgetHealth = BudgetHealth.ON_TRACK


class CostDriver(BaseModel):
    """A category ranked by committed spend"""

    name: BudgetCategory
    planned: int
    current: int
    delta: int


class ChangeImpact(BaseModel):
    """Preview of how a proposed change moves the budget"""

    change_type: str  # "add_guests", "add_vendor"
    total_impact: int
    affected_categories: list[BudgetCategory] = Field(default_factory=list)
    description: str = ""
