"""Loan lifecycle: origination, payments, edits and portfolio totals"""

from dataclasses import replace
from datetime import date
from typing import Iterable

from budget_engine.domain.amortization import compute_installment
from budget_engine.domain.exceptions import InvalidArgumentError
from budget_engine.domain.models import Loan, LoanStatus
from budget_engine.domain.validation import require_int_range


def open_loan(
    loan_id: str,
    total_amount: float,
    annual_interest_rate_percent: float,
    installments_total: int,
    start_date: date,
    name: str = "",
) -> Loan:
    """New active loan with nothing paid and a derived installment amount"""
    installment = compute_installment(total_amount, annual_interest_rate_percent, installments_total)
    return Loan(
        id=loan_id,
        total_amount=total_amount,
        annual_interest_rate_percent=annual_interest_rate_percent,
        installments_total=installments_total,
        installments_paid=0,
        installment_amount=installment,
        start_date=start_date,
        status=LoanStatus.ACTIVE,
        name=name,
    )


def record_loan_payment(loan: Loan) -> Loan:
    """
    Apply exactly one installment payment.

    Status becomes PAID once every installment is paid, ACTIVE otherwise
    (a payment on a defaulted loan reactivates it).
    """
    if loan.installments_paid >= loan.installments_total:
        raise InvalidArgumentError(f"Loan {loan.id} is already fully paid")

    paid = loan.installments_paid + 1
    status = LoanStatus.PAID if paid >= loan.installments_total else LoanStatus.ACTIVE
    return replace(loan, installments_paid=paid, status=status)


def revise_loan(
    loan: Loan,
    total_amount: float,
    annual_interest_rate_percent: float,
    installments_total: int,
) -> Loan:
    """Edit amount/rate/term; recomputes the installment, keeps installments_paid"""
    require_int_range("installments_total", installments_total, 1)
    if installments_total < loan.installments_paid:
        raise InvalidArgumentError(
            f"installments_total {installments_total} is below installments already paid "
            f"({loan.installments_paid})"
        )

    installment = compute_installment(total_amount, annual_interest_rate_percent, installments_total)

    if loan.installments_paid >= installments_total:
        status = LoanStatus.PAID
    elif loan.status is LoanStatus.PAID:
        status = LoanStatus.ACTIVE
    else:
        status = loan.status

    return replace(
        loan,
        total_amount=total_amount,
        annual_interest_rate_percent=annual_interest_rate_percent,
        installments_total=installments_total,
        installment_amount=installment,
        status=status,
    )


def is_payable(loan: Loan) -> bool:
    """Active and with at least one unpaid installment"""
    return loan.status is LoanStatus.ACTIVE and loan.installments_paid < loan.installments_total


def remaining_loan_debt(loans: Iterable[Loan]) -> float:
    return sum(
        (loan.installment_amount * loan.remaining_installments for loan in loans if loan.status is LoanStatus.ACTIVE),
        0.0,
    )


def monthly_loan_payment(loans: Iterable[Loan]) -> float:
    return sum((loan.installment_amount for loan in loans if loan.status is LoanStatus.ACTIVE), 0.0)
