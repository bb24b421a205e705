"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import List

from budget_engine.domain.cycle import compute_cycle
from budget_engine.domain.models import BudgetCycle, CardAccount, CardPurchase, CreditCard, Loan, LoanStatus


@pytest.fixture
def reference_date() -> date:
    """Fixed "today" so every calculation is reproducible"""
    return date(2024, 5, 10)


@pytest.fixture
def may_cycle(reference_date: date) -> BudgetCycle:
    """Calendar-month cycle: 2024-05-01 .. 2024-05-31"""
    return compute_cycle(1, reference_date)


@pytest.fixture
def zero_rate_loan() -> Loan:
    """1,000,000 over 10 interest-free installments, 3 already paid"""
    return Loan(
        id="loan-1",
        total_amount=1_000_000,
        annual_interest_rate_percent=0,
        installments_total=10,
        installments_paid=3,
        installment_amount=100_000,
        start_date=date(2024, 1, 15),
        status=LoanStatus.ACTIVE,
        name="Laptop",
    )


@pytest.fixture
def card_account() -> CardAccount:
    """Card due on the 20th with two active purchases and one settled"""
    card = CreditCard(
        id="card-1",
        credit_limit=5_000_000,
        cut_off_day=5,
        payment_due_day=20,
        annual_interest_rate_percent=24,
        name="Visa",
    )
    purchases: List[CardPurchase] = [
        CardPurchase(
            id="p-1",
            credit_card_id="card-1",
            total_amount=600_000,
            installments_total=6,
            installments_paid=2,
            installment_amount=100_000,
            purchase_date=date(2024, 2, 3),
        ),
        CardPurchase(
            id="p-2",
            credit_card_id="card-1",
            total_amount=300_000,
            installments_total=3,
            installments_paid=0,
            installment_amount=100_000,
            purchase_date=date(2024, 5, 1),
        ),
        CardPurchase(
            id="p-3",
            credit_card_id="card-1",
            total_amount=200_000,
            installments_total=2,
            installments_paid=2,
            installment_amount=100_000,
            purchase_date=date(2023, 12, 1),
        ),
    ]
    return CardAccount(card=card, purchases=purchases)
