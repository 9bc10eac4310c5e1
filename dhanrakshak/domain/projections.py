"""Compound-interest projections for SIP, PPF, FD, RD, lump-sum and loan EMI

Rates are annual percentages (12 means 12%). Every formula that divides by the rate
falls back to its linear form when the rate is zero.
"""

import functools
import math
from datetime import date

from dhanrakshak.domain.exceptions import InvalidInputError

COMPOUNDING_PERIODS = {
    "MONTHLY": 12,
    "QUARTERLY": 4,
    "HALF_YEARLY": 2,
    "YEARLY": 1,
}

DAYS_PER_YEAR = 365


def _require_finite(**values: float) -> None:
    for name, value in values.items():
        if value is None or not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value!r}")


def _finite_projection(formula):
    """Report results too large to represent as InvalidInputError instead of inf or OverflowError"""

    @functools.wraps(formula)
    def wrapper(*args, **kwargs):
        try:
            result = formula(*args, **kwargs)
        except OverflowError as e:
            raise InvalidInputError(f"{formula.__name__}: result too large ({e})") from e
        if not math.isfinite(result):
            raise InvalidInputError(f"{formula.__name__}: result too large")
        return result

    return wrapper


@_finite_projection
def sip_future_value(monthly_amount: float, annual_rate: float, years: float) -> float:
    """
    Future value of a monthly SIP paid at the start of each month.

    FV = P * ((1+r)^n - 1) / r * (1+r), r = annual_rate/100/12, n = years*12
    """
    _require_finite(monthly_amount=monthly_amount, annual_rate=annual_rate, years=years)
    monthly_rate = annual_rate / 100 / 12
    total_months = years * 12
    if monthly_rate == 0:
        return monthly_amount * total_months
    return monthly_amount * ((1 + monthly_rate) ** total_months - 1) / monthly_rate * (1 + monthly_rate)


@_finite_projection
def ppf_future_value(yearly_amount: float, years: float, annual_rate: float) -> float:
    """
    Future value of a constant yearly contribution with annual compounding.

    FV = Y * ((1+r)^years - 1) / r * (1+r), r = annual_rate/100
    """
    _require_finite(yearly_amount=yearly_amount, years=years, annual_rate=annual_rate)
    rate = annual_rate / 100
    if rate == 0:
        return yearly_amount * years
    return yearly_amount * ((1 + rate) ** years - 1) / rate * (1 + rate)


@_finite_projection
def lumpsum_future_value(principal: float, annual_rate: float, years: float) -> float:
    """P * (1+r)^years"""
    _require_finite(principal=principal, annual_rate=annual_rate, years=years)
    return principal * (1 + annual_rate / 100) ** years


@_finite_projection
def fd_maturity_amount(
    principal: float,
    annual_rate: float,
    years: float,
    compounding: str = "QUARTERLY",
) -> float:
    """A = P * (1 + r/n)^(n*t); quarterly compounding is the Indian bank default"""
    _require_finite(principal=principal, annual_rate=annual_rate, years=years)
    periods = COMPOUNDING_PERIODS.get(compounding.upper(), 4)
    rate = annual_rate / 100
    return principal * (1 + rate / periods) ** (periods * years)


@_finite_projection
def rd_maturity_amount(monthly_amount: float, annual_rate: float, years: float) -> float:
    """Recurring deposit maturity using the monthly annuity-due formula"""
    _require_finite(monthly_amount=monthly_amount, annual_rate=annual_rate, years=years)
    months = int(years * 12)
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return monthly_amount * months
    return monthly_amount * ((1 + monthly_rate) ** months - 1) / monthly_rate * (1 + monthly_rate)


@_finite_projection
def loan_emi(principal: float, annual_rate: float, tenure_months: int) -> float:
    """EMI = P * r * (1+r)^n / ((1+r)^n - 1); P/n at zero interest"""
    _require_finite(principal=principal, annual_rate=annual_rate)
    if tenure_months <= 0:
        raise InvalidInputError(f"tenure_months must be positive, got {tenure_months}")
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return principal / tenure_months
    factor = (1 + monthly_rate) ** tenure_months
    return principal * monthly_rate * factor / (factor - 1)


def deposit_value_on(
    principal: float,
    maturity_amount: float,
    start_date: date,
    maturity_date: date,
    as_of: date,
) -> float:
    """
    Current value of a time deposit, interpolated linearly between start and maturity.

    Before the start the deposit is worth its principal; from maturity on, its maturity amount.
    """
    if as_of >= maturity_date:
        return maturity_amount
    if as_of <= start_date:
        return principal

    progress = (as_of - start_date).days / (maturity_date - start_date).days
    return principal + (maturity_amount - principal) * progress


def fixed_deposit_value_on(
    principal: float,
    annual_rate: float,
    start_date: date,
    maturity_date: date,
    as_of: date,
    compounding: str = "QUARTERLY",
) -> float:
    """Value of a fixed deposit on ``as_of`` from its terms, for deposits recorded without a current value"""
    if maturity_date <= start_date:
        raise InvalidInputError(f"maturity_date {maturity_date} must be after start_date {start_date}")
    years = (maturity_date - start_date).days / DAYS_PER_YEAR
    maturity_amount = fd_maturity_amount(principal, annual_rate, years, compounding)
    return deposit_value_on(principal, maturity_amount, start_date, maturity_date, as_of)
