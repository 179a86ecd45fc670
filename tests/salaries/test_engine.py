from datetime import date
from decimal import Decimal

import pytest

from salary_tracker.exceptions import InvalidInputError
from salary_tracker.salaries.engine import MAX_AMOUNT, calculate_net_salary, first_last_day, shift_month, to_money


def test_documented_example():
    result = calculate_net_salary(7500, 500, 200, 15)

    assert result.gross_salary == Decimal("7800.00")
    assert result.tax_amount == Decimal("1170.00")
    assert result.net_salary == Decimal("6630.00")


def test_net_and_tax_follow_formula_for_many_inputs():
    bases = [0, 1, 999.99, 2500, 7500.5, 123456.78]
    bonuses = [0, 0.01, 500, 1333.33]
    rates = [0, 0.5, 7.25, 15, 33.33, 100]

    for base in bases:
        for bonus in bonuses:
            for rate in rates:
                deductions = Decimal(str(base)) / 3
                r = calculate_net_salary(base, bonus, deductions, rate)
                gross = r.base_salary + r.bonus - r.deductions
                exact_tax = gross * r.tax_percentage / Decimal(100)

                assert r.gross_salary == gross
                assert r.net_salary == r.base_salary + r.bonus - r.deductions - r.tax_amount
                assert abs(r.tax_amount - exact_tax) <= Decimal("0.005")


def test_tax_rounds_half_up_to_cents():
    # 333.33 * 10% = 33.333 -> 33.33 ; 0.05 * 50% = 0.025 -> 0.03
    assert calculate_net_salary("333.33", 0, 0, 10).tax_amount == Decimal("33.33")
    assert calculate_net_salary("0.05", 0, 0, 50).tax_amount == Decimal("0.03")
    assert calculate_net_salary("0.05", 0, 0, 50).net_salary == Decimal("0.02")


def test_zero_and_full_tax():
    assert calculate_net_salary(1000, 0, 0, 0).net_salary == Decimal("1000.00")
    full = calculate_net_salary(1000, 200, 200, 100)
    assert full.tax_amount == Decimal("1000.00")
    assert full.net_salary == Decimal("0.00")


@pytest.mark.parametrize(
    "args",
    [
        (-1, 0, 0, 0),
        (100, -5, 0, 0),
        (100, 0, -5, 0),
        (100, 0, 0, -1),
        (100, 0, 0, 100.01),
        (100, 0, 150, 10),
        ("abc", 0, 0, 0),
    ],
)
def test_invalid_inputs_are_rejected(args):
    with pytest.raises(InvalidInputError):
        calculate_net_salary(*args)


def test_to_money_treats_blank_as_zero():
    assert to_money(None) == Decimal("0.00")
    assert to_money("") == Decimal("0.00")
    assert to_money(1.005) == Decimal("1.01")
    assert to_money("12.345") == Decimal("12.35")


def test_first_last_day_handles_leap_years():
    assert first_last_day(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert first_last_day(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))
    assert first_last_day(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))
    with pytest.raises(InvalidInputError):
        first_last_day(2023, 13)


def test_shift_month_crosses_year_boundaries():
    assert shift_month(2024, 3, -11) == (2023, 4)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2023, 12, 1) == (2024, 1)
    assert shift_month(2024, 6, 0) == (2024, 6)


def test_amounts_beyond_column_precision_are_rejected():
    with pytest.raises(InvalidInputError):
        to_money("1e30")
    with pytest.raises(InvalidInputError):
        calculate_net_salary("1e30")
    with pytest.raises(InvalidInputError):
        calculate_net_salary(MAX_AMOUNT, "0.01")

    assert calculate_net_salary(MAX_AMOUNT).net_salary == MAX_AMOUNT
