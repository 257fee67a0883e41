"""Amortization engine - fixed-payment loan schedules (EMI)"""

from itertools import groupby
from typing import List, Optional, Sequence
from money_math.domain.models import (
    LoanInput,
    PeriodEntry,
    AmortizationResult,
    MoratoriumResult,
    YearSummary,
)
from money_math.domain.exceptions import InvalidInputError

MONTHS_PER_YEAR = 12


def validate_loan(loan: LoanInput) -> None:
    """Reject inputs that would produce NaN/Infinity or a meaningless schedule"""
    if loan.term_months <= 0:
        raise InvalidInputError("term_months", "must be greater than zero")
    if loan.principal < 0:
        raise InvalidInputError("principal", "must not be negative")
    if loan.annual_rate_percent < 0:
        raise InvalidInputError("annual_rate_percent", "must not be negative")


def monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 100 / MONTHS_PER_YEAR


def periodic_payment(principal: float, annual_rate_percent: float, term_months: int) -> float:
    """
    Fixed monthly installment for an amortizing loan.

    Standard annuity formula: P * r * (1+r)^n / ((1+r)^n - 1).
    At zero interest the formula divides by zero, so the principal is split evenly.
    """
    validate_loan(LoanInput(principal, annual_rate_percent, term_months))

    r = monthly_rate(annual_rate_percent)
    if r == 0:
        return principal / term_months

    growth = (1 + r) ** term_months
    return principal * r * growth / (growth - 1)


def compute_amortization(loan: LoanInput) -> AmortizationResult:
    """
    Compute the EMI and full month-by-month schedule.

    Requirements:
    - Iteration keeps full float precision; rounding is left to presentation
    - Balance is clamped to 0 on the final period to absorb float drift
    - Zero rate: equal principal installments, every interest portion is 0

    Raises:
        InvalidInputError: term_months <= 0, negative principal or rate

    Example:
        LoanInput(1_000_000, 8.5, 240) → periodic_payment ≈ 8678.23
    """
    payment = periodic_payment(loan.principal, loan.annual_rate_percent, loan.term_months)
    r = monthly_rate(loan.annual_rate_percent)
    n = loan.term_months

    schedule: List[Optional[PeriodEntry]] = [None] * n
    balance = float(loan.principal)
    for i in range(n):
        interest = balance * r
        principal_portion = payment - interest

        # Final period absorbs whatever drift is left in the running balance
        if i == n - 1:
            balance = 0.0
        else:
            balance = max(0.0, balance - principal_portion)

        schedule[i] = PeriodEntry(
            period=i + 1,
            payment=payment,
            principal_portion=principal_portion,
            interest_portion=interest,
            remaining_balance=balance,
        )

    total_payment = payment * n
    return AmortizationResult(
        periodic_payment=payment,
        total_payment=total_payment,
        total_interest=total_payment - loan.principal,
        schedule=tuple(schedule),
    )


def compute_interest_only(loan: LoanInput) -> AmortizationResult:
    """
    Working-capital repayment: interest every month, principal in one go at the end.

    The periodic payment reported is the recurring interest installment; the
    balloon principal appears only on the final schedule entry.
    """
    validate_loan(loan)

    r = monthly_rate(loan.annual_rate_percent)
    n = loan.term_months
    interest = loan.principal * r

    schedule: List[Optional[PeriodEntry]] = [None] * n
    for i in range(n):
        last = i == n - 1
        principal_portion = float(loan.principal) if last else 0.0
        schedule[i] = PeriodEntry(
            period=i + 1,
            payment=interest + principal_portion,
            principal_portion=principal_portion,
            interest_portion=interest,
            remaining_balance=0.0 if last else float(loan.principal),
        )

    total_interest = interest * n
    return AmortizationResult(
        periodic_payment=interest,
        total_payment=total_interest + loan.principal,
        total_interest=total_interest,
        schedule=tuple(schedule),
    )


def compute_moratorium_loan(loan: LoanInput, moratorium_months: int) -> MoratoriumResult:
    """
    Education loan with a repayment holiday.

    Simple interest accrues on the disbursed amount during the moratorium and is
    capitalized; the capitalized principal then amortizes over loan.term_months.
    """
    validate_loan(loan)
    if moratorium_months < 0:
        raise InvalidInputError("moratorium_months", "must not be negative")

    accrued = loan.principal * monthly_rate(loan.annual_rate_percent) * moratorium_months
    capitalized = loan.principal + accrued
    repayment = compute_amortization(
        LoanInput(capitalized, loan.annual_rate_percent, loan.term_months)
    )

    return MoratoriumResult(
        moratorium_months=moratorium_months,
        accrued_interest=accrued,
        capitalized_principal=capitalized,
        repayment=repayment,
        total_interest=repayment.total_payment - loan.principal,
    )


def financed_amount(price: float, down_payment: float) -> float:
    """Loan principal after the down payment (home and vehicle loans)"""
    if down_payment < 0:
        raise InvalidInputError("down_payment", "must not be negative")
    if down_payment > price:
        raise InvalidInputError("down_payment", "cannot exceed the purchase price")
    return price - down_payment


def total_cost(result: AmortizationResult, processing_fee: float = 0.0) -> float:
    if processing_fee < 0:
        raise InvalidInputError("processing_fee", "must not be negative")
    return result.total_payment + processing_fee


def yearly_breakdown(schedule: Sequence[PeriodEntry]) -> List[YearSummary]:
    """
    Roll a monthly schedule up into calendar-agnostic loan years.

    Years follow the entry periods (1-12 is year 1), so a schedule whose
    periods start after a moratorium rolls up into the matching later years.
    """
    years: List[YearSummary] = []
    for year, entries in groupby(schedule, key=lambda e: (e.period - 1) // MONTHS_PER_YEAR + 1):
        chunk = list(entries)
        years.append(
            YearSummary(
                year=year,
                principal=sum(e.principal_portion for e in chunk),
                interest=sum(e.interest_portion for e in chunk),
                balance=chunk[-1].remaining_balance,
            )
        )
    return years
