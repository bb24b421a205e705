"""Fixed-payment amortization for interest-bearing loans"""

from typing import List, Optional

from budget_engine.domain.models import InstallmentBreakdown, ScheduleRow
from budget_engine.domain.validation import (
    require_int_range,
    require_non_negative,
    require_positive,
)


def monthly_rate(annual_rate_percent: float) -> float:
    """Nominal annual percentage rate -> periodic monthly rate"""
    return annual_rate_percent / 100 / 12


def compute_installment(total: float, annual_rate_percent: float, months: int) -> float:
    """
    Fixed monthly payment that retires `total` over `months` installments.

    Zero rate is a plain division. Otherwise the standard annuity formula:
        installment = total * r * (1+r)^n / ((1+r)^n - 1),  r = rate / 100 / 12

    Example:
        compute_installment(1_200_000, 0, 12) -> 100,000
        compute_installment(10_000_000, 24, 12) -> ~945,596 (r = 0.02)
    """
    require_positive("total", total)
    require_non_negative("annual_rate_percent", annual_rate_percent)
    require_int_range("months", months, 1)

    if annual_rate_percent == 0:
        return total / months

    r = monthly_rate(annual_rate_percent)
    growth = (1 + r) ** months
    return total * r * growth / (growth - 1)


def breakdown_at_installment(
    total: float,
    annual_rate_percent: float,
    months: int,
    installment_amount: float,
    installment_index: int,
) -> InstallmentBreakdown:
    """
    Principal/interest split of installment `installment_index` (0-based).

    Only an installments-paid counter is stored for a loan, so the balance is
    rebuilt by replaying the diminishing-balance schedule from origination.
    Both outputs are clamped at zero to absorb floating-point drift near
    payoff; inputs are never clamped.
    """
    require_positive("total", total)
    require_non_negative("annual_rate_percent", annual_rate_percent)
    require_int_range("months", months, 1)
    require_non_negative("installment_amount", installment_amount)
    require_int_range("installment_index", installment_index, 0)

    if annual_rate_percent == 0:
        return InstallmentBreakdown(principal=installment_amount, interest=0.0)

    rate = monthly_rate(annual_rate_percent)
    balance = total
    for _ in range(installment_index):
        interest_for_installment = balance * rate
        principal_for_installment = installment_amount - interest_for_installment
        balance -= principal_for_installment

    interest = balance * rate
    principal = installment_amount - interest

    return InstallmentBreakdown(principal=max(0.0, principal), interest=max(0.0, interest))


def amortization_schedule(
    total: float,
    annual_rate_percent: float,
    months: int,
    installment_amount: Optional[float] = None,
) -> List[ScheduleRow]:
    """
    Full schedule, one row per installment, in a single pass.

    Each row's split equals breakdown_at_installment for the same index: the
    unclamped running balance drives the interest, and only reported values
    are clamped at zero.
    """
    if installment_amount is None:
        installment_amount = compute_installment(total, annual_rate_percent, months)
    require_positive("total", total)
    require_non_negative("annual_rate_percent", annual_rate_percent)
    require_int_range("months", months, 1)
    require_non_negative("installment_amount", installment_amount)

    rate = monthly_rate(annual_rate_percent)
    rows = []
    running = total
    balance = total
    for index in range(months):
        interest = running * rate
        principal = installment_amount - interest
        running -= principal

        principal, interest = max(0.0, principal), max(0.0, interest)
        balance = max(0.0, balance - principal)
        rows.append(
            ScheduleRow(
                number=index + 1,
                payment=installment_amount,
                principal=principal,
                interest=interest,
                balance=balance,
            )
        )

    return rows
