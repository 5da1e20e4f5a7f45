"""
Tests for PlanningPolicy defaults and validation
"""

import pytest
from pydantic import ValidationError

from wedding_ledger.kernel.planning_policy import (
    AT_RISK_UTILIZATION_THRESHOLD,
    CONFIRMATION_AMBER_THRESHOLD,
    CONFIRMATION_GREEN_THRESHOLD,
    PlanningPolicy,
    default_planning_policy,
)


def test_default_thresholds(planning_policy: PlanningPolicy) -> None:
    assert planning_policy.at_risk_utilization == AT_RISK_UTILIZATION_THRESHOLD == 0.9
    assert planning_policy.confirmation_green_threshold == CONFIRMATION_GREEN_THRESHOLD == 70
    assert planning_policy.confirmation_amber_threshold == CONFIRMATION_AMBER_THRESHOLD == 40
    assert planning_policy.confirmation_alert_window_days == 14
    assert planning_policy.unpaid_vendor_alert_days == 7
    assert planning_policy.cost_driver_limit == 4
    assert planning_policy.max_import_bytes == 5 * 1024 * 1024


def test_default_rates_are_per_policy_instance() -> None:
    first = PlanningPolicy()
    second = PlanningPolicy()

    assert first.default_rates == second.default_rates
    assert first.default_rates is not second.default_rates
    assert default_planning_policy.default_rates.guests_per_room == 2


def test_amber_band_cannot_exceed_green() -> None:
    with pytest.raises(ValidationError):
        PlanningPolicy(confirmation_green_threshold=40, confirmation_amber_threshold=70)


@pytest.mark.parametrize("utilization", [0.0, 1.5, -0.1])
def test_utilization_threshold_must_be_a_ratio(utilization: float) -> None:
    with pytest.raises(ValidationError):
        PlanningPolicy(at_risk_utilization=utilization)


def test_policy_round_trips_through_json() -> None:
    policy = PlanningPolicy(unpaid_vendor_alert_days=10, category_overrun_noise_threshold=500)

    assert PlanningPolicy.model_validate_json(policy.model_dump_json()) == policy
