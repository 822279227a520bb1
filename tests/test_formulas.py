"""Tests for the closed-form EMI helpers."""
import math
from decimal import Decimal

import pytest

from emi_calc.formulas import emi, monthly_rate, remaining_months


def test_monthly_rate_divides_annual_percent():
    assert monthly_rate(Decimal("12")) == Decimal("0.01")


def test_emi_known_value():
    # 10 lakh at 10% over 12 months ≈ 87,916
    payment = emi(Decimal("1000000"), Decimal("10"), 12)
    assert abs(float(payment) - 87916) < 1.0


def test_emi_zero_rate_is_exact_division():
    assert emi(Decimal("1000000"), Decimal("0"), 10) == Decimal("100000")
    assert emi(Decimal("1000"), Decimal("0"), 3) == Decimal("1000") / Decimal("3")


def test_emi_rejects_non_positive_tenure():
    with pytest.raises(ValueError):
        emi(Decimal("1000"), Decimal("10"), 0)


# --- Inverse amortization ---


def test_remaining_months_inverts_emi():
    rate = monthly_rate(Decimal("10"))
    payment = emi(Decimal("1000000"), Decimal("10"), 12)
    assert remaining_months(Decimal("1000000"), rate, payment) == 12


def test_remaining_months_rounds_partial_month_up():
    rate = monthly_rate(Decimal("10"))
    payment = emi(Decimal("1000000"), Decimal("10"), 12)
    assert remaining_months(Decimal("500000"), rate, payment) == 6


def test_remaining_months_zero_rate_uses_ceiling():
    assert remaining_months(Decimal("1000"), Decimal("0"), Decimal("300")) == 4
    assert remaining_months(Decimal("900"), Decimal("0"), Decimal("300")) == 3


def test_remaining_months_paid_off_balance():
    assert remaining_months(Decimal("0"), Decimal("0.01"), Decimal("100")) == 0


def test_remaining_months_never_amortizes():
    # installment equals the first month's interest
    assert remaining_months(Decimal("100000"), Decimal("0.01"), Decimal("1000")) == math.inf
    assert remaining_months(Decimal("100000"), Decimal("0.01"), Decimal("500")) == math.inf


# --- Numeric limits ---


def test_emi_long_tenure_tends_to_interest_only():
    # (1 + i)^n is past the Decimal exponent limit here
    payment = emi(Decimal("100000"), Decimal("10"), 10**9)
    assert payment == Decimal("100000") * monthly_rate(Decimal("10"))


def test_emi_negligible_rate_is_exact_division():
    # 1 + i rounds to exactly 1 at 28 digits
    assert emi(Decimal("1200"), Decimal("1e-26"), 12) == Decimal("100")


def test_remaining_months_negligible_rate_uses_ceiling():
    assert remaining_months(Decimal("1000"), Decimal("1e-30"), Decimal("300")) == 4
