"""Budget cycle derivation from a configurable cycle start day"""

from datetime import date, datetime, timedelta
from typing import Dict

from dateutil.relativedelta import relativedelta

from budget_engine.domain.models import BudgetCycle
from budget_engine.domain.validation import require_int_range
from budget_engine.utils.date_utils import as_date, inclusive_days

MIN_CYCLE_START_DAY = 1
MAX_CYCLE_START_DAY = 28


def compute_cycle(cycle_start_day: int, reference_date: date | datetime) -> BudgetCycle:
    """
    Derive the budget cycle containing `reference_date`.

    The cycle starts on `cycle_start_day` of the reference month when the
    reference day has reached it, otherwise on that day of the previous month.
    It ends the day before the next cycle starts, so a start day of 1 yields a
    full calendar month.

    Args:
        cycle_start_day: Day of month the cycle starts on (1-28)
        reference_date: "Today" as seen by the caller; time of day is ignored

    Raises:
        InvalidArgumentError: cycle_start_day outside 1-28

    Example:
        cycle_start_day=15, reference 2024-03-10 -> 2024-02-15 .. 2024-03-14
    """
    require_int_range("cycle_start_day", cycle_start_day, MIN_CYCLE_START_DAY, MAX_CYCLE_START_DAY)
    today = as_date(reference_date)

    start_date = today.replace(day=cycle_start_day)
    if today.day < cycle_start_day:
        start_date -= relativedelta(months=1)

    # Start day <= 28 always exists in the following month
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)

    total_days = inclusive_days(start_date, end_date)
    days_elapsed = inclusive_days(start_date, today)
    days_remaining = max(0, total_days - days_elapsed)
    progress_percentage = min(100.0, 100 * days_elapsed / total_days)

    return BudgetCycle(
        start_date=start_date,
        end_date=end_date,
        total_days=total_days,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        progress_percentage=progress_percentage,
    )


def is_date_in_cycle(value: date | datetime, cycle: BudgetCycle) -> bool:
    """Whole-day comparison, inclusive on both ends"""
    day = as_date(value)
    return cycle.start_date <= day <= cycle.end_date


def cycle_date_strings(cycle: BudgetCycle) -> Dict[str, str]:
    """ISO date bounds for collaborator queries"""
    return {
        "start_date": cycle.start_date.isoformat(),
        "end_date": cycle.end_date.isoformat(),
    }
