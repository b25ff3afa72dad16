"""
Aging classification — isolated, testable, reusable.

Determines how old a batch is and whether it is still healthy, based on
two day thresholds (at risk, dead).

Examples (defaults 60/90):
    - entered 59 days ago: healthy
    - entered 60 days ago: at risk
    - entered 90 days ago: dead
"""

from dataclasses import dataclass
from datetime import date, datetime

from stockwatch.exceptions import AgingError
from stockwatch.models.enums import HealthStatus


@dataclass(frozen=True)
class AgingThresholds:
    """Day thresholds for one batch. dead_days must exceed at_risk_days."""

    at_risk_days: int
    dead_days: int

    def __post_init__(self):
        if self.at_risk_days < 0 or self.dead_days <= self.at_risk_days:
            raise AgingError(
                'INVALID_THRESHOLDS',
                at_risk_days=self.at_risk_days,
                dead_days=self.dead_days,
            )


def age_in_days(entry_date: datetime, now: datetime) -> int:
    """
    Whole days elapsed between entry and now (floor).

    Raises:
        AgingError('FUTURE_ENTRY_DATE'): If entry_date is after now
    """
    if entry_date > now:
        raise AgingError('FUTURE_ENTRY_DATE', entry_date=str(entry_date), now=str(now))
    return (now - entry_date).days


def status_for_age(age: int, thresholds: AgingThresholds) -> HealthStatus:
    """Map an age in days to its health status."""
    if age >= thresholds.dead_days:
        return HealthStatus.DEAD
    if age >= thresholds.at_risk_days:
        return HealthStatus.AT_RISK
    return HealthStatus.HEALTHY


def classify(entry_date: datetime, now: datetime,
             thresholds: AgingThresholds) -> tuple[int, HealthStatus]:
    """
    Compute (age_in_days, status) for a batch entered at entry_date.

    Pure function: no queries, no clock reads. `now` is always passed in.
    """
    age = age_in_days(entry_date, now)
    return age, status_for_age(age, thresholds)


def days_until(target: date, now: datetime) -> int:
    """Days from now's date to target (negative when already past)."""
    return (target - now.date()).days
