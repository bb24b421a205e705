"""Net income deductions by income type"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable

from budget_engine.domain.exceptions import InvalidArgumentError
from budget_engine.domain.models import DeductionBreakdown, IncomeTotals, IncomeType
from budget_engine.domain.validation import require_non_negative

# Labor contract: employee share, both on full gross
LABOR_HEALTH_RATE = 0.04
LABOR_PENSION_RATE = 0.04
LABOR_DEDUCTION_RATE = LABOR_HEALTH_RATE + LABOR_PENSION_RATE

# Service contract: contributor pays the full rate on a reduced base
SERVICE_CONTRIBUTION_BASE = 0.40
SERVICE_HEALTH_RATE = 0.125
SERVICE_PENSION_RATE = 0.16


def resolve_income_type(value: IncomeType | str, strict: bool = False) -> IncomeType:
    """
    Map a raw income type to IncomeType.

    Unknown values fall back to EXEMPT (no deductions) and log a warning.
    With strict=True they raise InvalidArgumentError instead.
    """
    if isinstance(value, IncomeType):
        return value
    try:
        return IncomeType(value)
    except ValueError:
        if strict:
            raise InvalidArgumentError(f"Unknown income type: {value!r}") from None
        logging.warning(
            "Unknown income type, treating as exempt",
            extra={"income_type": repr(value), "fallback": IncomeType.EXEMPT.value},
        )
        return IncomeType.EXEMPT


def compute_net_income(gross_amount: float, income_type: IncomeType | str, strict: bool = False) -> float:
    """
    Net income after health and pension deductions.

    - labor_contract: gross x (1 - 0.08)
    - service_contract: health 12.5% + pension 16% of a 40% contribution base
    - exempt: no deduction

    Example:
        1,000,000 service_contract -> base 400,000; health 50,000;
        pension 64,000; net 886,000
    """
    require_non_negative("gross_amount", gross_amount)
    kind = resolve_income_type(income_type, strict=strict)

    if kind is IncomeType.LABOR_CONTRACT:
        return gross_amount * (1 - LABOR_DEDUCTION_RATE)
    elif kind is IncomeType.SERVICE_CONTRACT:
        base = gross_amount * SERVICE_CONTRIBUTION_BASE
        health = base * SERVICE_HEALTH_RATE
        pension = base * SERVICE_PENSION_RATE
        return gross_amount - health - pension
    else:
        return gross_amount


def deduction_breakdown(
    gross_amount: float, income_type: IncomeType | str, strict: bool = False
) -> DeductionBreakdown:
    """Same rules as compute_net_income, exposing each deduction"""
    require_non_negative("gross_amount", gross_amount)
    kind = resolve_income_type(income_type, strict=strict)

    if kind is IncomeType.LABOR_CONTRACT:
        health = gross_amount * LABOR_HEALTH_RATE
        pension = gross_amount * LABOR_PENSION_RATE
    elif kind is IncomeType.SERVICE_CONTRACT:
        base = gross_amount * SERVICE_CONTRIBUTION_BASE
        health = base * SERVICE_HEALTH_RATE
        pension = base * SERVICE_PENSION_RATE
    else:
        health = 0.0
        pension = 0.0

    total = health + pension
    return DeductionBreakdown(
        health=health,
        pension=pension,
        total=total,
        net_amount=gross_amount - total,
    )


@dataclass(frozen=True)
class IncomeRecord:
    """Gross income entry; net_amount is always derived from gross and type"""

    user_id: str
    gross_amount: float
    income_type: IncomeType
    source: str = ""

    @property
    def net_amount(self) -> float:
        return compute_net_income(self.gross_amount, self.income_type)


def income_totals(records: Iterable[IncomeRecord]) -> IncomeTotals:
    gross = 0.0
    net = 0.0
    for record in records:
        gross += record.gross_amount
        net += record.net_amount
    return IncomeTotals(gross=gross, net=net)


def net_income_by_user(records: Iterable[IncomeRecord]) -> Dict[str, float]:
    """Sum of net income per user, in first-seen order"""
    totals: Dict[str, float] = defaultdict(float)
    for record in records:
        totals[record.user_id] += record.net_amount
    return dict(totals)
