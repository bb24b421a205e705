"""Debt aggregation - upcoming loan and credit card obligations for one budget cycle"""

from datetime import date, datetime
from typing import Iterable, List, Optional

from budget_engine.domain.amortization import breakdown_at_installment
from budget_engine.domain.cards import active_purchases, card_monthly_payment, card_remaining_balance
from budget_engine.domain.cycle import is_date_in_cycle
from budget_engine.domain.loans import is_payable
from budget_engine.domain.models import (
    BudgetCycle,
    CardAccount,
    CreditCard,
    DebtExpense,
    DebtOrigin,
    DebtTotals,
    Loan,
)
from budget_engine.domain.validation import require_int_range
from budget_engine.utils.date_utils import add_months, as_date, day_in_month

AGGREGATED_INSTALLMENT = 0


def loan_due_date(loan: Loan, installment_number: int) -> date:
    """Due date of a 1-based installment: start date plus that many months"""
    return add_months(loan.start_date, installment_number)


def card_due_date(payment_due_day: int, reference_date: date | datetime) -> date:
    """
    Next payment due date for a card as seen from `reference_date`.

    Once the reference day reaches the due day the payment rolls to next
    month. Due days past a month's end clamp to its last day.
    """
    require_int_range("payment_due_day", payment_due_day, 1, 31)
    today = as_date(reference_date)

    if today.day >= payment_due_day:
        next_month = add_months(today.replace(day=1), 1)
        return day_in_month(next_month.year, next_month.month, payment_due_day)
    return day_in_month(today.year, today.month, payment_due_day)


def _loan_expense(loan: Loan, cycle: BudgetCycle) -> Optional[DebtExpense]:
    if not is_payable(loan):
        return None

    installment_number = loan.installments_paid + 1
    due_date = loan_due_date(loan, installment_number)
    if not is_date_in_cycle(due_date, cycle):
        return None

    split = breakdown_at_installment(
        loan.total_amount,
        loan.annual_interest_rate_percent,
        loan.installments_total,
        loan.installment_amount,
        loan.installments_paid,
    )

    return DebtExpense(
        origin=DebtOrigin.LOAN,
        source_id=loan.id,
        total_amount=loan.installment_amount,
        principal_amount=split.principal,
        interest_amount=split.interest,
        due_date=due_date,
        installment_number=installment_number,
        installments_total=loan.installments_total,
        source_name=loan.name,
    )


def _card_expense(account: CardAccount, cycle: BudgetCycle, reference_date: date) -> Optional[DebtExpense]:
    card: CreditCard = account.card
    pending = active_purchases(account.purchases)
    if not pending:
        return None

    due_date = card_due_date(card.payment_due_day, reference_date)
    if not is_date_in_cycle(due_date, cycle):
        return None

    monthly_payment = card_monthly_payment(pending)
    remaining_balance = card_remaining_balance(pending)
    # Notional interest on the card's aggregate balance, not per purchase
    monthly_interest = remaining_balance * (card.annual_interest_rate_percent / 100) / 12

    return DebtExpense(
        origin=DebtOrigin.CREDIT_CARD,
        source_id=card.id,
        total_amount=monthly_payment + monthly_interest,
        principal_amount=monthly_payment,
        interest_amount=monthly_interest,
        due_date=due_date,
        installment_number=AGGREGATED_INSTALLMENT,
        installments_total=0,
        source_name=card.name,
    )


def sort_debt_expenses(expenses: Iterable[DebtExpense]) -> List[DebtExpense]:
    """Ascending due date, undated last; ties keep input order"""
    return sorted(expenses, key=lambda e: (e.due_date is None, e.due_date or date.min))


def aggregate_debt_expenses(
    active_loans: Iterable[Loan],
    card_accounts: Iterable[CardAccount],
    current_cycle: BudgetCycle,
    reference_date: date | datetime,
) -> List[DebtExpense]:
    """
    Upcoming obligations due inside `current_cycle`.

    - One expense per payable loan: its next unpaid installment, split into
      principal and interest by replaying the amortization schedule.
    - One aggregated expense per card with active purchases: the sum of their
      installments plus a month of interest on the card's remaining balance
      (installment_number 0).

    Loans that are fully paid or not active, and cards without active
    purchases, are skipped rather than rejected.
    """
    today = as_date(reference_date)
    expenses: List[DebtExpense] = []

    for loan in active_loans:
        expense = _loan_expense(loan, current_cycle)
        if expense is not None:
            expenses.append(expense)

    for account in card_accounts:
        expense = _card_expense(account, current_cycle, today)
        if expense is not None:
            expenses.append(expense)

    return sort_debt_expenses(expenses)


def debt_totals(expenses: Iterable[DebtExpense]) -> DebtTotals:
    total = principal = interest = loans = cards = 0.0
    for expense in expenses:
        total += expense.total_amount
        principal += expense.principal_amount
        interest += expense.interest_amount
        if expense.origin is DebtOrigin.LOAN:
            loans += expense.total_amount
        elif expense.origin is DebtOrigin.CREDIT_CARD:
            cards += expense.total_amount

    return DebtTotals(
        total=total,
        principal=principal,
        interest=interest,
        loans_subtotal=loans,
        cards_subtotal=cards,
    )
