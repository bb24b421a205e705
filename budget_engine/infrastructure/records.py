"""Pydantic schemas validating persistence rows before they reach the calculators"""

import logging
from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from budget_engine.domain.amortization import compute_installment
from budget_engine.domain.exceptions import InvalidRecordError
from budget_engine.domain.income import IncomeRecord, resolve_income_type
from budget_engine.domain.models import (
    CardAccount,
    CardPurchase,
    CreditCard,
    Expense,
    ExpenseType,
    Loan,
    LoanStatus,
    MemberIncome,
    SharedExpense,
)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _Row(BaseModel):
    """Rows carry collaborator-owned columns we do not use; ignore them"""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)


class LoanRecord(_Row):
    """Row from the loans table"""

    id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    name: str = ""
    total_amount: float = Field(..., gt=0)
    interest_rate: float = Field(0.0, ge=0, description="Annual rate, percent")
    installments_total: int = Field(..., ge=1)
    installments_paid: int = Field(0, ge=0)
    installment_amount: Optional[float] = Field(None, ge=0)
    start_date: date
    status: LoanStatus = LoanStatus.ACTIVE

    @model_validator(mode="after")
    def paid_within_term(self) -> "LoanRecord":
        if self.installments_paid > self.installments_total:
            raise ValueError("installments_paid exceeds installments_total")
        settled = self.installments_paid == self.installments_total
        if self.status is LoanStatus.PAID and not settled:
            raise ValueError(
                f"status is paid with {self.installments_total - self.installments_paid} installments outstanding"
            )
        if self.status is LoanStatus.ACTIVE and settled:
            raise ValueError("status is active but every installment is paid")
        return self

    def to_domain(self) -> Loan:
        installment = self.installment_amount
        if installment is None:
            installment = compute_installment(self.total_amount, self.interest_rate, self.installments_total)

        return Loan(
            id=self.id,
            total_amount=self.total_amount,
            annual_interest_rate_percent=self.interest_rate,
            installments_total=self.installments_total,
            installments_paid=self.installments_paid,
            installment_amount=installment,
            start_date=self.start_date,
            status=self.status,
            name=self.name,
            owner_id=self.user_id,
        )


class CreditCardRecord(_Row):
    """Row from the credit_cards table"""

    id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    name: str = ""
    credit_limit: float = Field(0.0, ge=0)
    cut_off_day: int = Field(..., ge=1, le=31)
    payment_due_day: int = Field(..., ge=1, le=31)
    interest_rate: Optional[float] = Field(None, ge=0, description="Annual rate, percent; null means 0")

    def to_domain(self) -> CreditCard:
        return CreditCard(
            id=self.id,
            credit_limit=self.credit_limit,
            cut_off_day=self.cut_off_day,
            payment_due_day=self.payment_due_day,
            annual_interest_rate_percent=self.interest_rate or 0.0,
            name=self.name,
            owner_id=self.user_id,
        )


class CardPurchaseRecord(_Row):
    """Row from the card_purchases table"""

    id: str = Field(..., min_length=1)
    credit_card_id: str = Field(..., min_length=1)
    description: str = ""
    total_amount: float = Field(..., gt=0)
    installments_total: int = Field(..., ge=1)
    installments_paid: int = Field(0, ge=0)
    installment_amount: Optional[float] = Field(None, ge=0)
    purchase_date: date

    @model_validator(mode="after")
    def paid_within_term(self) -> "CardPurchaseRecord":
        if self.installments_paid > self.installments_total:
            raise ValueError("installments_paid exceeds installments_total")
        return self

    def to_domain(self) -> CardPurchase:
        installment = self.installment_amount
        if installment is None:
            installment = self.total_amount / self.installments_total

        return CardPurchase(
            id=self.id,
            credit_card_id=self.credit_card_id,
            total_amount=self.total_amount,
            installments_total=self.installments_total,
            installments_paid=self.installments_paid,
            installment_amount=installment,
            purchase_date=self.purchase_date,
            description=self.description,
        )


class IncomeRow(_Row):
    """Row from the incomes table; income_type is resolved by the domain"""

    user_id: str = Field(..., min_length=1)
    source: str = ""
    gross_amount: float = Field(..., gt=0)
    income_type: str = "exempt"


class MemberRow(_Row):
    """Shared budget member; invitations not yet accepted have no user_id"""

    user_id: Optional[str] = None
    invitation_status: str = "accepted"


class SharedExpenseRow(_Row):
    amount: float = Field(..., ge=0)
    paid_by: Optional[str] = None
    is_paid: bool = False

    def to_domain(self) -> SharedExpense:
        return SharedExpense(amount=self.amount, paid_by=self.paid_by, is_paid=self.is_paid)


class ExpenseRow(_Row):
    """Row from the expenses table"""

    type: ExpenseType
    category: str = ""
    description: Optional[str] = None
    amount: float = Field(..., ge=0)
    expense_date: Optional[date] = None
    due_date: Optional[date] = None
    is_paid: bool = False

    def to_domain(self) -> Expense:
        return Expense(
            amount=self.amount,
            type=self.type,
            is_paid=self.is_paid,
            expense_date=self.expense_date,
            due_date=self.due_date,
            category=self.category,
            description=self.description or "",
        )


class GroceryPurchaseRow(_Row):
    description: str = ""
    amount: float = Field(..., ge=0)
    purchase_date: date


def parse_records(model: Type[RecordT], rows: Iterable[Mapping[str, Any]]) -> List[RecordT]:
    """
    Validate raw rows against a record schema.

    Raises:
        InvalidRecordError: first row failing validation, with its index
    """
    parsed = []
    for index, row in enumerate(rows):
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logging.warning(
                f"Invalid {model.__name__} row",
                extra={"record_type": model.__name__, "row_index": index, "error_count": e.error_count()},
            )
            raise InvalidRecordError(f"{model.__name__} row {index}: {e}") from e
    return parsed


def parse_loans(rows: Iterable[Mapping[str, Any]]) -> List[Loan]:
    return [record.to_domain() for record in parse_records(LoanRecord, rows)]


def parse_card_accounts(
    card_rows: Iterable[Mapping[str, Any]],
    purchase_rows: Iterable[Mapping[str, Any]],
) -> List[CardAccount]:
    """Group purchases under their cards; purchases of unknown cards are dropped"""
    cards = [record.to_domain() for record in parse_records(CreditCardRecord, card_rows)]
    purchases = [record.to_domain() for record in parse_records(CardPurchaseRecord, purchase_rows)]

    by_card: Dict[str, List[CardPurchase]] = defaultdict(list)
    for purchase in purchases:
        by_card[purchase.credit_card_id].append(purchase)

    known = {card.id for card in cards}
    orphaned = [p.id for p in purchases if p.credit_card_id not in known]
    if orphaned:
        logging.warning("Card purchases without a matching card", extra={"purchase_ids": orphaned})

    return [CardAccount(card=card, purchases=by_card.get(card.id, [])) for card in cards]


def parse_incomes(rows: Iterable[Mapping[str, Any]], strict: bool = False) -> List[IncomeRecord]:
    return [
        IncomeRecord(
            user_id=row.user_id,
            gross_amount=row.gross_amount,
            income_type=resolve_income_type(row.income_type, strict=strict),
            source=row.source,
        )
        for row in parse_records(IncomeRow, rows)
    ]


def parse_members(rows: Iterable[Mapping[str, Any]], net_income_by_user: Mapping[str, float]) -> List[MemberIncome]:
    """
    Accepted members with an account; a member without incomes has 0 net income.

    Raises:
        InvalidRecordError: the same user appears more than once
    """
    members = []
    seen = set()
    for index, row in enumerate(parse_records(MemberRow, rows)):
        if not row.user_id or row.invitation_status != "accepted":
            continue
        if row.user_id in seen:
            logging.warning("Duplicate shared budget member", extra={"user_id": row.user_id, "row_index": index})
            raise InvalidRecordError(f"MemberRow row {index}: user {row.user_id} is already a member")
        seen.add(row.user_id)
        members.append(MemberIncome(user_id=row.user_id, net_income=net_income_by_user.get(row.user_id, 0.0)))
    return members


def parse_shared_expenses(rows: Iterable[Mapping[str, Any]]) -> List[SharedExpense]:
    return [record.to_domain() for record in parse_records(SharedExpenseRow, rows)]


def parse_expenses(rows: Iterable[Mapping[str, Any]]) -> List[Expense]:
    return [record.to_domain() for record in parse_records(ExpenseRow, rows)]


def parse_grocery_purchases(rows: Iterable[Mapping[str, Any]]) -> List[GroceryPurchaseRow]:
    return parse_records(GroceryPurchaseRow, rows)
