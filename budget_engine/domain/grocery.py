"""Grocery budget tracking for the current cycle"""

from typing import Iterable

from budget_engine.domain.exceptions import InvalidArgumentError
from budget_engine.domain.models import AlertLevel, GrocerySummary
from budget_engine.domain.validation import require_non_negative

DEFAULT_WARNING_PERCENT = 70.0
DEFAULT_DANGER_PERCENT = 90.0


def alert_level_for(
    percentage_used: float,
    warning_percent: float = DEFAULT_WARNING_PERCENT,
    danger_percent: float = DEFAULT_DANGER_PERCENT,
) -> AlertLevel:
    """
    Map budget usage to an alert level.

    Bands:
    - >= 100:              exceeded
    - >= danger_percent:   danger
    - >= warning_percent:  warning
    - otherwise:           safe
    """
    if percentage_used >= 100:
        return AlertLevel.EXCEEDED
    elif percentage_used >= danger_percent:
        return AlertLevel.DANGER
    elif percentage_used >= warning_percent:
        return AlertLevel.WARNING
    else:
        return AlertLevel.SAFE


def summarize_grocery(
    budget_amount: float,
    purchase_amounts: Iterable[float],
    warning_percent: float = DEFAULT_WARNING_PERCENT,
    danger_percent: float = DEFAULT_DANGER_PERCENT,
) -> GrocerySummary:
    """Spent, remaining and usage against a grocery budget; no budget means 0% used"""
    require_non_negative("budget_amount", budget_amount)
    require_non_negative("warning_percent", warning_percent)
    require_non_negative("danger_percent", danger_percent)
    if warning_percent > danger_percent:
        raise InvalidArgumentError(
            f"warning_percent ({warning_percent}) must not exceed danger_percent ({danger_percent})"
        )

    total_spent = 0.0
    for amount in purchase_amounts:
        total_spent += require_non_negative("purchase amount", amount)

    percentage_used = (total_spent / budget_amount) * 100 if budget_amount > 0 else 0.0

    return GrocerySummary(
        budget_amount=budget_amount,
        total_spent=total_spent,
        remaining=budget_amount - total_spent,
        percentage_used=percentage_used,
        alert_level=alert_level_for(percentage_used, warning_percent, danger_percent),
    )
