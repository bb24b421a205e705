"""Domain models - pure Python dataclasses representing budgeting records and derived values"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional


class LoanStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"
    DEFAULTED = "defaulted"


class DebtOrigin(str, Enum):
    LOAN = "loan"
    CREDIT_CARD = "credit_card"


class IncomeType(str, Enum):
    LABOR_CONTRACT = "labor_contract"
    SERVICE_CONTRACT = "service_contract"
    EXEMPT = "exempt"


class ExpenseType(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


class AlertLevel(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class BudgetCycle:
    """Active budgeting period derived from a cycle start day"""

    start_date: date
    end_date: date  # inclusive
    total_days: int
    days_elapsed: int
    days_remaining: int
    progress_percentage: float  # 0-100, capped


@dataclass(frozen=True)
class Loan:
    """Fixed-rate, fixed-term installment loan"""

    id: str
    total_amount: float
    annual_interest_rate_percent: float
    installments_total: int
    installments_paid: int
    installment_amount: float
    start_date: date
    status: LoanStatus = LoanStatus.ACTIVE
    name: str = ""
    owner_id: Optional[str] = None

    @property
    def remaining_installments(self) -> int:
        return max(0, self.installments_total - self.installments_paid)


@dataclass(frozen=True)
class CreditCard:
    """Revolving credit card; interest applies to the aggregate remaining balance"""

    id: str
    credit_limit: float
    cut_off_day: int
    payment_due_day: int
    annual_interest_rate_percent: float = 0.0
    name: str = ""
    owner_id: Optional[str] = None


@dataclass(frozen=True)
class CardPurchase:
    """Zero-interest installment purchase charged to a credit card"""

    id: str
    credit_card_id: str
    total_amount: float
    installments_total: int
    installments_paid: int
    installment_amount: float
    purchase_date: date
    description: str = ""

    @property
    def is_active(self) -> bool:
        return self.installments_paid < self.installments_total

    @property
    def remaining_installments(self) -> int:
        return max(0, self.installments_total - self.installments_paid)


@dataclass(frozen=True)
class CardAccount:
    """A credit card together with all of its purchases"""

    card: CreditCard
    purchases: List[CardPurchase]


@dataclass(frozen=True)
class InstallmentBreakdown:
    """Principal/interest split of a single installment"""

    principal: float
    interest: float


@dataclass(frozen=True)
class ScheduleRow:
    """One row of an amortization schedule"""

    number: int  # 1-based installment number
    payment: float
    principal: float
    interest: float
    balance: float  # balance after this installment


@dataclass(frozen=True)
class DebtExpense:
    """Upcoming debt obligation normalized across loans and credit cards"""

    origin: DebtOrigin
    source_id: str
    total_amount: float
    principal_amount: float
    interest_amount: float
    due_date: Optional[date]
    installment_number: int  # 0 = aggregated card obligation
    installments_total: int
    source_name: str = ""


@dataclass(frozen=True)
class DebtTotals:
    """Summed view over a list of debt expenses"""

    total: float
    principal: float
    interest: float
    loans_subtotal: float
    cards_subtotal: float


@dataclass(frozen=True)
class DeductionBreakdown:
    """Payroll-style deductions for one gross income amount"""

    health: float
    pension: float
    total: float
    net_amount: float


@dataclass(frozen=True)
class IncomeTotals:
    gross: float
    net: float


@dataclass(frozen=True)
class MemberIncome:
    """Shared budget member with aggregated net income"""

    user_id: str
    net_income: float


@dataclass(frozen=True)
class SharedExpense:
    """Expense recorded against a shared budget"""

    amount: float
    paid_by: Optional[str]
    is_paid: bool
    debt_origin: Optional[DebtOrigin] = None  # set for installments of shared loans and cards
    principal: float = 0.0
    interest: float = 0.0
    description: str = ""


@dataclass(frozen=True)
class MemberSummary:
    """Income-weighted contribution summary for one member"""

    user_id: str
    net_income: float
    income_percentage: float
    expected_contribution: float
    actual_contribution: float
    difference: float  # actual - expected


@dataclass(frozen=True)
class SharedBudgetSummary:
    total_income: float
    total_expenses: float
    balance: float
    members: List[MemberSummary]


@dataclass(frozen=True)
class GrocerySummary:
    """Spending against one cycle's grocery budget"""

    budget_amount: float
    total_spent: float
    remaining: float
    percentage_used: float
    alert_level: AlertLevel


@dataclass(frozen=True)
class Expense:
    """Personal expense; dated by when it happened or, failing that, when it is due"""

    amount: float
    type: ExpenseType
    is_paid: bool
    expense_date: Optional[date] = None
    due_date: Optional[date] = None
    category: str = ""
    description: str = ""


@dataclass(frozen=True)
class ExpenseTotals:
    fixed: float
    variable: float
    pending: int  # unpaid expense count
    total: float
