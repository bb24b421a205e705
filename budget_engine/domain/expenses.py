"""Fixed and variable expenses within a budget cycle"""

from datetime import date
from typing import Iterable, List, Optional

from budget_engine.domain.cycle import is_date_in_cycle
from budget_engine.domain.models import BudgetCycle, Expense, ExpenseTotals, ExpenseType
from budget_engine.domain.validation import require_non_negative


def effective_date(expense: Expense) -> Optional[date]:
    return expense.expense_date or expense.due_date


def expenses_in_cycle(expenses: Iterable[Expense], cycle: BudgetCycle) -> List[Expense]:
    """Expenses whose expense date (or due date when undated) falls in the cycle; undated ones are left out"""
    in_cycle = []
    for expense in expenses:
        when = effective_date(expense)
        if when is not None and is_date_in_cycle(when, cycle):
            in_cycle.append(expense)
    return in_cycle


def expense_totals(expenses: Iterable[Expense]) -> ExpenseTotals:
    """
    Sum expenses by type and count the unpaid ones.

    Example:
        fixed 500,000 (paid) + variable 120,000 (unpaid)
        -> fixed 500,000, variable 120,000, pending 1, total 620,000
    """
    fixed = 0.0
    variable = 0.0
    pending = 0
    for expense in expenses:
        require_non_negative("amount", expense.amount)
        if expense.type is ExpenseType.FIXED:
            fixed += expense.amount
        else:
            variable += expense.amount
        if not expense.is_paid:
            pending += 1

    return ExpenseTotals(fixed=fixed, variable=variable, pending=pending, total=fixed + variable)
