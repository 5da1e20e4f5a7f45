"""
Feedback Models - Alerts and the combined planning dashboard

Alerts are computed per call and point back at the view that resolves them;
nothing here is persisted.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from wedding_ledger.budget.models import BudgetSummary, CategoryBudget, CostDriver
from wedding_ledger.guests.models import (
    ConfirmationRate,
    CostImpact,
    GuestStats,
    HouseholdCompleteness,
    OutstationStats,
    VIPStats,
)


class AlertSeverity(str, Enum):
    """
    RED: needs action now (money already lost or about to be)
    AMBER: needs attention before the event
    """

    AMBER = "amber"
    RED = "red"


class Alert(BaseModel):
    """A warning surfaced to the organizer"""

    alert_id: str
    severity: AlertSeverity
    message: str
    link: str
    impact: str | None = None


# Both aggregators emit the same shape
BudgetAlert = Alert
GuestAlert = Alert


class RiskLevel(str, Enum):
    """
    Overall planning risk

    GREEN: no alerts
    AMBER: only amber alerts
    RED: at least one red alert
    """

    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class BudgetReport(BaseModel):
    event_id: str
    categories: list[CategoryBudget] = Field(default_factory=list)
    summary: BudgetSummary
    cost_drivers: list[CostDriver] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)


class GuestReport(BaseModel):
    event_id: str
    stats: GuestStats
    outstation: OutstationStats
    vip: VIPStats
    confirmation: ConfirmationRate
    cost_impact: CostImpact
    household: HouseholdCompleteness
    alerts: list[Alert] = Field(default_factory=list)


class DashboardSnapshot(BaseModel):
    """Everything the organizer's dashboard shows for one event"""

    event_id: str
    event_name: str
    days_until_event: int | None = None
    risk_level: RiskLevel
    budget: BudgetReport
    guests: GuestReport
    alerts: list[Alert] = Field(default_factory=list)
    computed_at: datetime
