"""Prometheus metrics for report volume, failures and debt obligations"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from budget_engine.domain.models import DebtExpense

# Report metrics
report_counter = Counter(
    "budget_report_total",
    "Total budget reports built",
    ["report"],  # debts | income | shared_budget | grocery | expenses
)

report_failure_counter = Counter(
    "budget_report_failures_total",
    "Reports rejected before completion",
    ["report", "reason"],  # invalid_argument | invalid_record
)

report_duration_histogram = Histogram(
    "budget_report_duration_seconds",
    "Time spent building a report",
    ["report"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Debt metrics
debt_expense_counter = Counter(
    "budget_debt_expenses_total",
    "Debt expenses emitted for the current cycle",
    ["origin"],  # loan | credit_card
)


def record_report(report: str, duration_seconds: float) -> None:
    report_counter.labels(report=report).inc()
    report_duration_histogram.labels(report=report).observe(duration_seconds)


def record_failure(report: str, reason: str) -> None:
    report_failure_counter.labels(report=report, reason=reason).inc()


def record_debt_expenses(expenses: Iterable[DebtExpense]) -> None:
    for expense in expenses:
        debt_expense_counter.labels(origin=expense.origin.value).inc()
