"""
Planning Policy - Tunable thresholds for budget health and guest alerts

The aggregation core reads every threshold from a PlanningPolicy instead of
inline numbers, so each one can be tested and tuned on its own. The defaults
below are the values the planning dashboards shipped with; none of them is a
confirmed business rule yet.
"""

from pydantic import BaseModel, Field, model_validator

from wedding_ledger.guests.models import RateConfig

# Budget health
AT_RISK_UTILIZATION_THRESHOLD = 0.9
CATEGORY_OVERRUN_NOISE_THRESHOLD = 0

# Confirmation-rate color bands (percent, inclusive lower bounds)
CONFIRMATION_GREEN_THRESHOLD = 70
CONFIRMATION_AMBER_THRESHOLD = 40

# Alert windows (days before the event)
CONFIRMATION_ALERT_WINDOW_DAYS = 14
UNPAID_VENDOR_ALERT_DAYS = 7

MAX_IMPORT_BYTES = 5 * 1024 * 1024


class PlanningPolicy(BaseModel):
    """
    Thresholds and fallback rates for one deployment

    Per-event rates always win over default_rates; the defaults only apply
    to events created without a rate configuration.
    """

    policy_version: str = Field(default="1.0")

    at_risk_utilization: float = Field(
        default=AT_RISK_UTILIZATION_THRESHOLD,
        gt=0.0,
        le=1.0,
        description="Committed/total ratio at which an event becomes at-risk",
    )

    category_overrun_noise_threshold: int = Field(
        default=CATEGORY_OVERRUN_NOISE_THRESHOLD,
        ge=0,
        description="Category overruns at or below this amount raise no alert",
    )

    confirmation_green_threshold: int = Field(
        default=CONFIRMATION_GREEN_THRESHOLD, ge=0, le=100
    )

    confirmation_amber_threshold: int = Field(
        default=CONFIRMATION_AMBER_THRESHOLD, ge=0, le=100
    )

    confirmation_alert_window_days: int = Field(
        default=CONFIRMATION_ALERT_WINDOW_DAYS,
        ge=0,
        description="Red-band confirmation rate alerts only inside this window",
    )

    unpaid_vendor_alert_days: int = Field(
        default=UNPAID_VENDOR_ALERT_DAYS,
        ge=0,
        description="Unpaid vendor balances alert inside this many days",
    )

    default_rates: RateConfig = Field(
        default_factory=lambda: RateConfig(
            catering_per_head=150_000,
            room_cost_per_night=400_000,
            transport_cost_per_seat=50_000,
            guests_per_room=2,
        ),
    )

    default_cost_per_guest: int = Field(
        default=284_000,
        ge=0,
        description="Catering + transport + accommodation estimate per added guest",
    )

    cost_driver_limit: int = Field(default=4, ge=0)

    max_import_bytes: int = Field(default=MAX_IMPORT_BYTES, ge=1)

    @model_validator(mode="after")
    def _check_bands(self) -> "PlanningPolicy":
        if self.confirmation_amber_threshold > self.confirmation_green_threshold:
            raise ValueError(
                "confirmation_amber_threshold must not exceed confirmation_green_threshold"
            )
        return self


default_planning_policy = PlanningPolicy()
