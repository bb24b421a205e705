"""Report builders - parse persistence rows, run the calculators, log and record metrics"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from budget_engine.config import settings
from budget_engine.domain.cycle import compute_cycle, is_date_in_cycle
from budget_engine.domain.debts import aggregate_debt_expenses, debt_totals
from budget_engine.domain.expenses import expense_totals, expenses_in_cycle
from budget_engine.domain.exceptions import InvalidArgumentError, InvalidRecordError
from budget_engine.domain.grocery import summarize_grocery
from budget_engine.domain.income import IncomeRecord, income_totals, net_income_by_user
from budget_engine.domain.loans import monthly_loan_payment, remaining_loan_debt
from budget_engine.domain.models import (
    BudgetCycle,
    DebtExpense,
    DebtTotals,
    Expense,
    ExpenseTotals,
    GrocerySummary,
    IncomeTotals,
    LoanStatus,
    SharedBudgetSummary,
)
from budget_engine.domain.sharing import shared_debt_expenses, summarize_shared_budget
from budget_engine.infrastructure.observability.logging import log_report
from budget_engine.infrastructure.observability.metrics import (
    record_debt_expenses,
    record_failure,
    record_report,
)
from budget_engine.infrastructure.records import (
    parse_card_accounts,
    parse_expenses,
    parse_grocery_purchases,
    parse_incomes,
    parse_loans,
    parse_members,
    parse_shared_expenses,
)

Rows = Iterable[Mapping[str, Any]]


@dataclass(frozen=True)
class DebtReport:
    cycle: BudgetCycle
    expenses: List[DebtExpense]
    totals: DebtTotals
    remaining_loan_debt: float
    monthly_loan_payment: float


@dataclass(frozen=True)
class IncomeReport:
    records: List[IncomeRecord]
    totals: IncomeTotals
    net_by_user: Dict[str, float]


@dataclass(frozen=True)
class ExpenseReport:
    cycle: BudgetCycle
    expenses: List[Expense]
    totals: ExpenseTotals


@dataclass(frozen=True)
class GroceryReport:
    cycle: BudgetCycle
    summary: GrocerySummary
    purchases_in_cycle: int


@contextmanager
def _report_scope(report: str) -> Iterator[None]:
    """Time a report and count rejected inputs; errors always propagate"""
    start_time = time.time()
    try:
        yield
    except InvalidRecordError as e:
        record_failure(report, "invalid_record")
        logging.warning(f"Invalid record: {e}", extra={"report": report})
        raise
    except InvalidArgumentError as e:
        record_failure(report, "invalid_argument")
        logging.warning(f"Invalid argument: {e}", extra={"report": report})
        raise
    record_report(report, time.time() - start_time)


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


def _cycle_for(cycle_start_day: Optional[int], reference_date: date | datetime) -> BudgetCycle:
    if cycle_start_day is None:
        cycle_start_day = settings.default_cycle_start_day
    return compute_cycle(cycle_start_day, reference_date)


def build_debt_report(
    loan_rows: Rows,
    card_rows: Rows,
    purchase_rows: Rows,
    reference_date: date | datetime,
    cycle_start_day: Optional[int] = None,
) -> DebtReport:
    """
    Upcoming loan and credit card obligations for the cycle containing
    `reference_date`.

    Flow:
    1. Derive the budget cycle
    2. Parse loans, cards and purchases
    3. Aggregate debt expenses due in the cycle and total them
    4. Record metrics and log the outcome
    """
    start_time = time.time()
    with _report_scope("debts"):
        cycle = _cycle_for(cycle_start_day, reference_date)
        loans = parse_loans(loan_rows)
        accounts = parse_card_accounts(card_rows, purchase_rows)

        active_loans = [loan for loan in loans if loan.status is LoanStatus.ACTIVE]
        expenses = aggregate_debt_expenses(active_loans, accounts, cycle, reference_date)
        totals = debt_totals(expenses)

    record_debt_expenses(expenses)
    log_report(
        "debts",
        _elapsed_ms(start_time),
        cycle_start=cycle.start_date.isoformat(),
        expense_count=len(expenses),
        total=totals.total,
    )

    return DebtReport(
        cycle=cycle,
        expenses=expenses,
        totals=totals,
        remaining_loan_debt=remaining_loan_debt(loans),
        monthly_loan_payment=monthly_loan_payment(loans),
    )


def build_income_report(income_rows: Rows, strict: Optional[bool] = None) -> IncomeReport:
    """Net incomes per record and per user; strict defaults to settings.strict_income_types"""
    if strict is None:
        strict = settings.strict_income_types

    start_time = time.time()
    with _report_scope("income"):
        records = parse_incomes(income_rows, strict=strict)
        totals = income_totals(records)
        by_user = net_income_by_user(records)

    log_report("income", _elapsed_ms(start_time), record_count=len(records), net_total=totals.net)

    return IncomeReport(records=records, totals=totals, net_by_user=by_user)


def build_shared_budget_report(
    member_rows: Rows,
    income_rows: Rows,
    expense_rows: Rows,
    strict: Optional[bool] = None,
    loan_rows: Rows = (),
    card_rows: Rows = (),
    purchase_rows: Rows = (),
) -> SharedBudgetSummary:
    """
    Income-proportional contributions for a shared budget.

    Member net income is the sum of that member's income records; members
    without income records count as zero income. Loans and cards shared with
    the budget add their current installments to the manual expenses.
    """
    if strict is None:
        strict = settings.strict_income_types

    start_time = time.time()
    with _report_scope("shared_budget"):
        incomes = parse_incomes(income_rows, strict=strict)
        members = parse_members(member_rows, net_income_by_user(incomes))
        expenses = parse_shared_expenses(expense_rows)
        expenses += shared_debt_expenses(parse_loans(loan_rows), parse_card_accounts(card_rows, purchase_rows))
        summary = summarize_shared_budget(members, expenses)

    log_report(
        "shared_budget",
        _elapsed_ms(start_time),
        member_count=len(summary.members),
        total_income=summary.total_income,
        total_expenses=summary.total_expenses,
    )

    return summary


def build_grocery_report(
    budget_amount: float,
    purchase_rows: Rows,
    reference_date: date | datetime,
    cycle_start_day: Optional[int] = None,
) -> GroceryReport:
    """Grocery spending for the current cycle; purchases outside it are ignored"""
    start_time = time.time()
    with _report_scope("grocery"):
        cycle = _cycle_for(cycle_start_day, reference_date)
        purchases = [p for p in parse_grocery_purchases(purchase_rows) if is_date_in_cycle(p.purchase_date, cycle)]
        summary = summarize_grocery(
            budget_amount,
            (p.amount for p in purchases),
            warning_percent=settings.grocery_warning_percent,
            danger_percent=settings.grocery_danger_percent,
        )

    log_report(
        "grocery",
        _elapsed_ms(start_time),
        alert_level=summary.alert_level.value,
        percentage_used=summary.percentage_used,
    )

    return GroceryReport(cycle=cycle, summary=summary, purchases_in_cycle=len(purchases))


def build_expense_report(
    expense_rows: Rows,
    reference_date: date | datetime,
    cycle_start_day: Optional[int] = None,
) -> ExpenseReport:
    """Fixed/variable totals and pending count for expenses dated in the current cycle"""
    start_time = time.time()
    with _report_scope("expenses"):
        cycle = _cycle_for(cycle_start_day, reference_date)
        expenses = expenses_in_cycle(parse_expenses(expense_rows), cycle)
        totals = expense_totals(expenses)

    log_report(
        "expenses",
        _elapsed_ms(start_time),
        cycle_start=cycle.start_date.isoformat(),
        expense_count=len(expenses),
        pending=totals.pending,
        total=totals.total,
    )

    return ExpenseReport(cycle=cycle, expenses=expenses, totals=totals)
