"""Proportional cost sharing across shared budget members"""

from typing import Iterable, List

from budget_engine.domain.models import (
    CardAccount,
    DebtOrigin,
    Loan,
    MemberIncome,
    MemberSummary,
    SharedBudgetSummary,
    SharedExpense,
)
from budget_engine.domain.validation import require_non_negative


def shared_debt_expenses(loans: Iterable[Loan], card_accounts: Iterable[CardAccount]) -> List[SharedExpense]:
    """
    This month's installments of debts shared with the budget, as unpaid expenses.

    Every loan with installments left contributes its installment, split evenly
    into principal (total / term) and whatever exceeds it as interest. Every
    active purchase on a shared card contributes its installment as principal.
    The debt owner is recorded as the payer.
    """
    expenses = []
    for loan in loans:
        if loan.remaining_installments <= 0:
            continue
        principal = loan.total_amount / loan.installments_total
        expenses.append(
            SharedExpense(
                amount=loan.installment_amount,
                paid_by=loan.owner_id,
                is_paid=False,
                debt_origin=DebtOrigin.LOAN,
                principal=principal,
                interest=max(0.0, loan.installment_amount - principal),
                description=loan.name,
            )
        )

    for account in card_accounts:
        for purchase in account.purchases:
            if not purchase.is_active:
                continue
            expenses.append(
                SharedExpense(
                    amount=purchase.installment_amount,
                    paid_by=account.card.owner_id,
                    is_paid=False,
                    debt_origin=DebtOrigin.CREDIT_CARD,
                    principal=purchase.installment_amount,
                    description=f"{account.card.name}: {purchase.description}",
                )
            )

    return expenses


def compute_member_summaries(
    members: Iterable[MemberIncome],
    expenses: Iterable[SharedExpense],
) -> List[MemberSummary]:
    """
    Each member's income-weighted share of the shared expenses.

    Expected contribution is the member's share of combined net income applied
    to all expenses (paid or not). Actual contribution counts only paid
    expenses settled by that member.

    With zero combined income every percentage and expected contribution is 0
    while actual contributions are still reported.

    Example:
        incomes 3,000,000 / 2,000,000, expenses 1,000,000
        -> 60% / 40%, expected 600,000 / 400,000
    """
    members = list(members)
    expenses = list(expenses)
    for member in members:
        require_non_negative("net_income", member.net_income)
    for expense in expenses:
        require_non_negative("amount", expense.amount)

    total_income = sum((m.net_income for m in members), 0.0)
    total_expenses = sum((e.amount for e in expenses), 0.0)

    summaries = []
    for member in members:
        percentage = (member.net_income / total_income) * 100 if total_income > 0 else 0.0
        expected = total_expenses * (percentage / 100)
        actual = sum((e.amount for e in expenses if e.paid_by == member.user_id and e.is_paid), 0.0)

        summaries.append(
            MemberSummary(
                user_id=member.user_id,
                net_income=member.net_income,
                income_percentage=percentage,
                expected_contribution=expected,
                actual_contribution=actual,
                difference=actual - expected,
            )
        )

    return summaries


def summarize_shared_budget(
    members: Iterable[MemberIncome],
    expenses: Iterable[SharedExpense],
) -> SharedBudgetSummary:
    members = list(members)
    expenses = list(expenses)
    summaries = compute_member_summaries(members, expenses)

    total_income = sum((m.net_income for m in members), 0.0)
    total_expenses = sum((e.amount for e in expenses), 0.0)

    return SharedBudgetSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        members=summaries,
    )
