"""Unit tests for debt aggregation across loans and credit cards"""

import pytest
from dataclasses import replace
from datetime import date

from budget_engine.domain.amortization import breakdown_at_installment
from budget_engine.domain.cycle import compute_cycle
from budget_engine.domain.debts import (
    aggregate_debt_expenses,
    card_due_date,
    debt_totals,
    loan_due_date,
    sort_debt_expenses,
)
from budget_engine.domain.exceptions import InvalidArgumentError
from budget_engine.domain.loans import open_loan
from budget_engine.domain.models import CardAccount, DebtExpense, DebtOrigin, LoanStatus


def test_zero_rate_loan_next_installment(zero_rate_loan, may_cycle, reference_date):
    """Installment 4 of a 10-month interest-free loan falls in May"""
    expenses = aggregate_debt_expenses([zero_rate_loan], [], may_cycle, reference_date)

    assert len(expenses) == 1
    expense = expenses[0]
    assert expense.origin is DebtOrigin.LOAN
    assert expense.source_id == "loan-1"
    assert expense.installment_number == 4
    assert expense.installments_total == 10
    assert expense.due_date == date(2024, 5, 15)
    assert expense.principal_amount == 100_000
    assert expense.interest_amount == 0
    assert expense.total_amount == 100_000


def test_loan_due_date_month_arithmetic():
    loan = open_loan("l1", 1_000, 0, 12, date(2024, 1, 31))

    assert loan_due_date(loan, 1) == date(2024, 2, 29)  # clamped to month end
    assert loan_due_date(loan, 2) == date(2024, 3, 31)
    assert loan_due_date(loan, 12) == date(2025, 1, 31)


def test_loan_outside_cycle_is_skipped(zero_rate_loan, may_cycle, reference_date):
    next_month = replace(zero_rate_loan, installments_paid=4)  # installment 5 due 2024-06-15

    assert aggregate_debt_expenses([next_month], [], may_cycle, reference_date) == []


def test_paid_and_defaulted_loans_are_skipped(zero_rate_loan, may_cycle, reference_date):
    paid = replace(zero_rate_loan, installments_paid=10, status=LoanStatus.PAID)
    defaulted = replace(zero_rate_loan, status=LoanStatus.DEFAULTED)

    assert aggregate_debt_expenses([paid, defaulted], [], may_cycle, reference_date) == []


def test_interest_bearing_loan_split(may_cycle, reference_date):
    """Breakdown replays the schedule using installments paid as the index"""
    loan = replace(open_loan("l2", 10_000_000, 24, 12, date(2024, 1, 20)), installments_paid=3)

    expenses = aggregate_debt_expenses([loan], [], may_cycle, reference_date)

    assert len(expenses) == 1
    expense = expenses[0]
    expected = breakdown_at_installment(10_000_000, 24, 12, loan.installment_amount, 3)
    assert expense.due_date == date(2024, 5, 20)
    assert expense.principal_amount == expected.principal
    assert expense.interest_amount == expected.interest
    assert expense.principal_amount + expense.interest_amount == pytest.approx(expense.total_amount)


def test_card_aggregated_obligation(card_account, may_cycle, reference_date):
    """Active purchases summed, plus a month of interest on the remaining balance"""
    expenses = aggregate_debt_expenses([], [card_account], may_cycle, reference_date)

    assert len(expenses) == 1
    expense = expenses[0]
    assert expense.origin is DebtOrigin.CREDIT_CARD
    assert expense.source_id == "card-1"
    assert expense.installment_number == 0
    assert expense.due_date == date(2024, 5, 20)
    assert expense.principal_amount == pytest.approx(200_000)
    assert expense.interest_amount == pytest.approx(700_000 * 0.24 / 12)
    assert expense.total_amount == pytest.approx(214_000)


def test_card_without_active_purchases_is_skipped(card_account, may_cycle, reference_date):
    settled = CardAccount(card=card_account.card, purchases=[card_account.purchases[2]])
    empty = CardAccount(card=card_account.card, purchases=[])

    assert aggregate_debt_expenses([], [settled, empty], may_cycle, reference_date) == []


def test_card_due_date_rolls_on_due_day(card_account, may_cycle):
    """On the due day itself the payment rolls to next month, out of the May cycle"""
    assert card_due_date(20, date(2024, 5, 20)) == date(2024, 6, 20)
    assert aggregate_debt_expenses([], [card_account], may_cycle, date(2024, 5, 20)) == []


def test_card_due_date_edges():
    assert card_due_date(20, date(2024, 5, 19)) == date(2024, 5, 20)
    assert card_due_date(10, date(2024, 12, 25)) == date(2025, 1, 10)
    assert card_due_date(31, date(2024, 2, 10)) == date(2024, 2, 29)


@pytest.mark.parametrize("payment_due_day", [0, 32])
def test_card_due_date_rejects_invalid_day(payment_due_day):
    with pytest.raises(InvalidArgumentError):
        card_due_date(payment_due_day, date(2024, 5, 10))


def test_expenses_sorted_by_due_date(zero_rate_loan, card_account, may_cycle, reference_date):
    early_loan = replace(zero_rate_loan, id="loan-2", start_date=date(2024, 2, 5), installments_paid=2)

    expenses = aggregate_debt_expenses([zero_rate_loan, early_loan], [card_account], may_cycle, reference_date)

    assert [e.source_id for e in expenses] == ["loan-2", "loan-1", "card-1"]
    assert [e.due_date for e in expenses] == [date(2024, 5, 5), date(2024, 5, 15), date(2024, 5, 20)]


def test_sort_puts_undated_last_and_keeps_ties_stable():
    def expense(source_id, due_date):
        return DebtExpense(
            origin=DebtOrigin.LOAN,
            source_id=source_id,
            total_amount=1,
            principal_amount=1,
            interest_amount=0,
            due_date=due_date,
            installment_number=1,
            installments_total=1,
        )

    ordered = sort_debt_expenses(
        [
            expense("undated", None),
            expense("b", date(2024, 5, 9)),
            expense("a", date(2024, 5, 2)),
            expense("c", date(2024, 5, 9)),
        ]
    )

    assert [e.source_id for e in ordered] == ["a", "b", "c", "undated"]


def test_debt_totals(zero_rate_loan, card_account, may_cycle, reference_date):
    expenses = aggregate_debt_expenses([zero_rate_loan], [card_account], may_cycle, reference_date)
    totals = debt_totals(expenses)

    assert totals.total == pytest.approx(314_000)
    assert totals.principal == pytest.approx(300_000)
    assert totals.interest == pytest.approx(14_000)
    assert totals.loans_subtotal == pytest.approx(100_000)
    assert totals.cards_subtotal == pytest.approx(214_000)


def test_empty_inputs_give_empty_results(may_cycle, reference_date):
    expenses = aggregate_debt_expenses([], [], may_cycle, reference_date)

    assert expenses == []
    assert debt_totals(expenses).total == 0


def test_aggregation_is_repeatable(zero_rate_loan, card_account, reference_date):
    cycle = compute_cycle(1, reference_date)

    first = aggregate_debt_expenses([zero_rate_loan], [card_account], cycle, reference_date)
    second = aggregate_debt_expenses([zero_rate_loan], [card_account], cycle, reference_date)

    assert first == second
