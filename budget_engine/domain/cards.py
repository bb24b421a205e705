"""Credit card purchases and per-card balances"""

from dataclasses import replace
from datetime import date
from typing import Iterable, List

from budget_engine.domain.exceptions import InvalidArgumentError
from budget_engine.domain.models import CardPurchase, CreditCard
from budget_engine.domain.validation import require_int_range, require_positive


def open_card_purchase(
    purchase_id: str,
    credit_card_id: str,
    total_amount: float,
    installments_total: int,
    purchase_date: date,
    description: str = "",
) -> CardPurchase:
    """New purchase split into equal zero-interest installments"""
    require_positive("total_amount", total_amount)
    require_int_range("installments_total", installments_total, 1)

    return CardPurchase(
        id=purchase_id,
        credit_card_id=credit_card_id,
        total_amount=total_amount,
        installments_total=installments_total,
        installments_paid=0,
        installment_amount=total_amount / installments_total,
        purchase_date=purchase_date,
        description=description,
    )


def record_purchase_payment(purchase: CardPurchase) -> CardPurchase:
    if not purchase.is_active:
        raise InvalidArgumentError(f"Card purchase {purchase.id} is already settled")
    return replace(purchase, installments_paid=purchase.installments_paid + 1)


def active_purchases(purchases: Iterable[CardPurchase]) -> List[CardPurchase]:
    return [p for p in purchases if p.is_active]


def card_monthly_payment(purchases: Iterable[CardPurchase]) -> float:
    """Sum of one installment of every active purchase"""
    return sum((p.installment_amount for p in purchases if p.is_active), 0.0)


def card_remaining_balance(purchases: Iterable[CardPurchase]) -> float:
    """Sum of all unpaid installments of active purchases"""
    return sum((p.installment_amount * p.remaining_installments for p in purchases if p.is_active), 0.0)


def available_credit(card: CreditCard, purchases: Iterable[CardPurchase]) -> float:
    """Unused credit line; never below zero"""
    own = [p for p in purchases if p.credit_card_id == card.id]
    return max(0.0, card.credit_limit - card_remaining_balance(own))
