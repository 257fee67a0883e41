"""Compounding engine - lump-sum and recurring-contribution growth"""

import math
from typing import List, Optional
from money_math.domain.models import (
    CompoundingInput,
    CompoundingMode,
    CompoundingResult,
    GrowthPoint,
    SimpleInterestResult,
    SavingsGoalResult,
)
from money_math.domain.exceptions import InvalidInputError

# Tolerates float noise in periods_per_year * years (e.g. 12 * 0.25)
_PERIOD_EPSILON = 1e-9


def validate_compounding(inp: CompoundingInput) -> None:
    if inp.principal < 0:
        raise InvalidInputError("principal", "must not be negative")
    if inp.annual_rate_percent < 0:
        raise InvalidInputError("annual_rate_percent", "must not be negative")
    if inp.periods_per_year <= 0:
        raise InvalidInputError("periods_per_year", "must be greater than zero")
    if inp.years <= 0:
        raise InvalidInputError("years", "must be greater than zero")


def whole_periods(periods_per_year: int, years: float) -> int:
    return int(math.floor(periods_per_year * years + _PERIOD_EPSILON))


def lump_sum_value(principal: float, periodic_rate: float, periods: float) -> float:
    """P * (1 + i)^k"""
    return principal * (1 + periodic_rate) ** periods


def annuity_due_value(contribution: float, periodic_rate: float, periods: int) -> float:
    """
    Future value of a contribution made at the start of each period.

    C * [((1+i)^m - 1) / i] * (1+i); at zero rate simply C * m.
    """
    if periodic_rate == 0:
        return contribution * periods
    return contribution * (((1 + periodic_rate) ** periods - 1) / periodic_rate) * (1 + periodic_rate)


def ordinary_annuity_value(contribution: float, periodic_rate: float, periods: int) -> float:
    """Future value of a contribution made at the end of each period"""
    if periodic_rate == 0:
        return contribution * periods
    return contribution * ((1 + periodic_rate) ** periods - 1) / periodic_rate


def compute_compounding(inp: CompoundingInput) -> CompoundingResult:
    """
    Future value plus a per-period growth series.

    Each series point is evaluated independently from the closed form rather
    than by stepping a running total, so no rounding error accumulates.

    Modes:
    - LUMP_SUM: FV = P * (1 + r/n)^(n*t); contributed is always P
    - PERIODIC: annuity due over m = n*t whole periods; contributed is C * k

    Raises:
        InvalidInputError: negative amount or rate, non-positive frequency or duration
    """
    validate_compounding(inp)

    i = inp.annual_rate_percent / 100 / inp.periods_per_year
    m = whole_periods(inp.periods_per_year, inp.years)

    if inp.mode is CompoundingMode.LUMP_SUM:
        def value_at(k: float) -> float:
            return lump_sum_value(inp.principal, i, k)

        def contributed_at(k: float) -> float:
            return float(inp.principal)

        # Fractional durations still compound to the exact end date
        final_periods: float = inp.periods_per_year * inp.years
    elif inp.mode is CompoundingMode.PERIODIC:
        if m == 0:
            raise InvalidInputError("years", "must span at least one contribution period")

        def value_at(k: float) -> float:
            return annuity_due_value(inp.principal, i, int(k))

        def contributed_at(k: float) -> float:
            return inp.principal * k

        final_periods = m
    else:
        raise InvalidInputError("mode", f"unsupported compounding mode {inp.mode!r}")

    series: List[Optional[GrowthPoint]] = [None] * m
    for idx in range(m):
        k = idx + 1
        value = value_at(k)
        contributed = contributed_at(k)
        series[idx] = GrowthPoint(period=k, value=value, contributed=contributed, gained=value - contributed)

    future_value = value_at(final_periods)
    total_contributed = contributed_at(final_periods)
    return CompoundingResult(
        future_value=future_value,
        total_contributed=total_contributed,
        total_gain=future_value - total_contributed,
        series=tuple(series),
    )


def compute_simple_interest(principal: float, annual_rate_percent: float, years: float) -> SimpleInterestResult:
    """SI = P * r * t / 100, with one cumulative point per whole year"""
    validate_compounding(CompoundingInput(principal, annual_rate_percent, 1, years))

    yearly_interest = principal * annual_rate_percent / 100
    series = tuple(
        GrowthPoint(
            period=year,
            value=principal + yearly_interest * year,
            contributed=float(principal),
            gained=yearly_interest * year,
        )
        for year in range(1, whole_periods(1, years) + 1)
    )
    interest = yearly_interest * years
    return SimpleInterestResult(interest=interest, total_amount=principal + interest, series=series)


def required_contribution(
    goal: float,
    current_savings: float,
    annual_rate_percent: float,
    years: float,
) -> SavingsGoalResult:
    """
    Monthly contribution (start of month) needed to reach a savings goal.

    Current savings compound monthly toward the goal; only the remaining gap
    is funded by contributions. Returns a zero contribution when savings alone
    already reach the goal.
    """
    if goal < 0:
        raise InvalidInputError("goal", "must not be negative")
    if current_savings < 0:
        raise InvalidInputError("current_savings", "must not be negative")
    validate_compounding(CompoundingInput(current_savings, annual_rate_percent, 12, years))

    i = annual_rate_percent / 100 / 12
    m = whole_periods(12, years)
    if m == 0:
        raise InvalidInputError("years", "must span at least one month")

    savings_value = lump_sum_value(current_savings, i, m)
    gap = max(0.0, goal - savings_value)

    contribution = 0.0
    if gap > 0:
        contribution = gap / annuity_due_value(1.0, i, m)

    total_invested = current_savings + contribution * m
    final_value = max(goal, savings_value)
    return SavingsGoalResult(
        required_contribution=contribution,
        future_value_of_savings=savings_value,
        total_invested=total_invested,
        total_returns=final_value - total_invested,
    )


def post_tax_maturity(result: CompoundingResult, withholding_rate: float) -> float:
    """Maturity amount after tax deducted at source on the interest earned"""
    if not 0 <= withholding_rate <= 1:
        raise InvalidInputError("withholding_rate", "must be between 0 and 1")
    return result.future_value - result.total_gain * withholding_rate
