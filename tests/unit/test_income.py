"""Unit tests for income deductions"""

import logging
import math
import pytest
from dataclasses import replace

from budget_engine.domain.exceptions import InvalidArgumentError
from budget_engine.domain.income import (
    IncomeRecord,
    compute_net_income,
    deduction_breakdown,
    income_totals,
    net_income_by_user,
    resolve_income_type,
)
from budget_engine.domain.models import IncomeType


def test_labor_contract_deducts_eight_percent():
    assert compute_net_income(1_000_000, IncomeType.LABOR_CONTRACT) == pytest.approx(920_000)


def test_service_contract_uses_contribution_base():
    """Base 40%: health 12.5% and pension 16% of the base"""
    assert compute_net_income(1_000_000, "service_contract") == pytest.approx(886_000)

    breakdown = deduction_breakdown(1_000_000, IncomeType.SERVICE_CONTRACT)
    assert breakdown.health == pytest.approx(50_000)
    assert breakdown.pension == pytest.approx(64_000)
    assert breakdown.total == pytest.approx(114_000)
    assert breakdown.net_amount == pytest.approx(886_000)


def test_labor_contract_breakdown():
    breakdown = deduction_breakdown(2_500_000, IncomeType.LABOR_CONTRACT)

    assert breakdown.health == pytest.approx(100_000)
    assert breakdown.pension == pytest.approx(100_000)
    assert breakdown.total == breakdown.health + breakdown.pension
    assert breakdown.net_amount == pytest.approx(compute_net_income(2_500_000, IncomeType.LABOR_CONTRACT))


def test_exempt_has_no_deduction():
    assert compute_net_income(750_000, IncomeType.EXEMPT) == 750_000

    breakdown = deduction_breakdown(750_000, "exempt")
    assert breakdown.total == 0
    assert breakdown.net_amount == 750_000


def test_zero_gross_is_allowed():
    assert compute_net_income(0, IncomeType.SERVICE_CONTRACT) == 0


def test_unknown_income_type_falls_back_to_exempt(caplog):
    with caplog.at_level(logging.WARNING):
        net = compute_net_income(500_000, "dividends")

    assert net == 500_000
    assert "Unknown income type" in caplog.text


def test_unknown_income_type_strict_raises():
    with pytest.raises(InvalidArgumentError):
        resolve_income_type("dividends", strict=True)

    with pytest.raises(InvalidArgumentError):
        deduction_breakdown(500_000, "dividends", strict=True)


@pytest.mark.parametrize("gross", [-1, math.nan, math.inf])
def test_invalid_gross_rejected(gross):
    with pytest.raises(InvalidArgumentError):
        compute_net_income(gross, IncomeType.LABOR_CONTRACT)

    with pytest.raises(InvalidArgumentError):
        deduction_breakdown(gross, IncomeType.LABOR_CONTRACT)


def test_income_record_net_amount_follows_edits():
    """net_amount is derived, so changing gross or type recomputes it"""
    record = IncomeRecord(user_id="u1", gross_amount=1_000_000, income_type=IncomeType.EXEMPT)
    assert record.net_amount == 1_000_000

    relabelled = replace(record, income_type=IncomeType.LABOR_CONTRACT)
    assert relabelled.net_amount == pytest.approx(920_000)

    raised = replace(relabelled, gross_amount=2_000_000)
    assert raised.net_amount == pytest.approx(1_840_000)


def test_income_totals_and_per_user_net():
    records = [
        IncomeRecord(user_id="ana", gross_amount=1_000_000, income_type=IncomeType.LABOR_CONTRACT),
        IncomeRecord(user_id="ana", gross_amount=500_000, income_type=IncomeType.EXEMPT),
        IncomeRecord(user_id="luis", gross_amount=1_000_000, income_type=IncomeType.SERVICE_CONTRACT),
    ]

    totals = income_totals(records)
    assert totals.gross == pytest.approx(2_500_000)
    assert totals.net == pytest.approx(920_000 + 500_000 + 886_000)

    by_user = net_income_by_user(records)
    assert list(by_user) == ["ana", "luis"]
    assert by_user["ana"] == pytest.approx(1_420_000)
    assert by_user["luis"] == pytest.approx(886_000)
