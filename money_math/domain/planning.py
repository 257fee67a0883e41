"""Household planning calculators built on the compounding and tax engines"""

import math
from typing import List, Sequence, Tuple
from money_math.domain.models import (
    BudgetAnalysis,
    BudgetExpense,
    EmergencyFundInput,
    EmergencyFundPlan,
    ExpenseKind,
    GstMode,
    GstResult,
    RetirementInput,
    RetirementPlan,
    RetirementYear,
    RiskProfile,
    SalaryBreakdown,
    SalaryInput,
)
from money_math.domain.compounding import lump_sum_value, ordinary_annuity_value
from money_math.domain.tax import DEFAULT_CESS_RATE, compute_progressive_tax, slabs_for
from money_math.domain.exceptions import InvalidInputError

# Months of expenses to keep aside, by income risk
RECOMMENDED_COVERAGE = {
    RiskProfile.LOW: 3,  # Stable job, dual income
    RiskProfile.MODERATE: 6,
    RiskProfile.HIGH: 9,  # Unstable or single income
}

# 50/30/20 rule
NEEDS_SHARE = 0.5
WANTS_SHARE = 0.3
SAVINGS_SHARE = 0.2

SALARY_STANDARD_DEDUCTION = 50_000

DEFAULT_RETIREMENT_YEARS = 25  # Required corpus = annual expenses x this
DEFAULT_EMERGENCY_HORIZON_MONTHS = 60


def _require_non_negative(**values: float) -> None:
    for field, value in values.items():
        if value < 0:
            raise InvalidInputError(field, "must not be negative")


def plan_retirement(inp: RetirementInput, retirement_years: int = DEFAULT_RETIREMENT_YEARS) -> RetirementPlan:
    """
    Project the retirement corpus against what inflation-adjusted expenses need.

    Requirements:
    - Current savings compound annually at the expected return
    - Monthly savings are an ordinary annuity at the monthly rate
    - Required corpus = inflated annual expenses x retirement_years
    - On a shortfall, the extra monthly saving that closes it by retirement
    """
    years = inp.retirement_age - inp.current_age
    if inp.current_age < 0:
        raise InvalidInputError("current_age", "must not be negative")
    if years <= 0:
        raise InvalidInputError("retirement_age", "must be after current age")
    _require_non_negative(
        monthly_expenses=inp.monthly_expenses,
        current_savings=inp.current_savings,
        monthly_savings=inp.monthly_savings,
        expected_return_percent=inp.expected_return_percent,
        inflation_percent=inp.inflation_percent,
    )

    annual_return = inp.expected_return_percent / 100
    monthly_return = annual_return / 12
    inflation = inp.inflation_percent / 100
    months = years * 12

    savings_growth = lump_sum_value(inp.current_savings, annual_return, years)
    contribution_growth = ordinary_annuity_value(inp.monthly_savings, monthly_return, months)
    total_corpus = savings_growth + contribution_growth

    future_expenses = inp.monthly_expenses * (1 + inflation) ** years
    required = future_expenses * 12 * retirement_years
    surplus = total_corpus - required

    additional = 0.0
    if surplus < 0:
        additional = -surplus / ordinary_annuity_value(1.0, monthly_return, months)

    projection: List[RetirementYear] = []
    corpus = float(inp.current_savings)
    for year in range(years + 1):
        if year > 0:
            corpus = (corpus + inp.monthly_savings * 12) * (1 + annual_return)
        projection.append(
            RetirementYear(
                year=year,
                age=inp.current_age + year,
                corpus=corpus,
                monthly_expenses=inp.monthly_expenses * (1 + inflation) ** year,
            )
        )

    return RetirementPlan(
        years_to_retirement=years,
        savings_growth=savings_growth,
        contribution_growth=contribution_growth,
        total_corpus=total_corpus,
        future_monthly_expenses=future_expenses,
        required_corpus=required,
        surplus=surplus,
        additional_monthly_savings=additional,
        projection=tuple(projection),
    )


def plan_emergency_fund(
    inp: EmergencyFundInput, horizon_months: int = DEFAULT_EMERGENCY_HORIZON_MONTHS
) -> EmergencyFundPlan:
    """Months of contributions needed to build an emergency reserve"""
    _require_non_negative(
        monthly_expenses=inp.monthly_expenses,
        current_savings=inp.current_savings,
        monthly_contribution=inp.monthly_contribution,
    )
    if inp.target_months <= 0:
        raise InvalidInputError("target_months", "must be greater than zero")

    target = inp.monthly_expenses * inp.target_months
    remaining = max(0.0, target - inp.current_savings)

    if remaining == 0:
        months_to_target = 0
    elif inp.monthly_contribution > 0:
        months_to_target = math.ceil(remaining / inp.monthly_contribution)
    else:
        months_to_target = None

    recommended_months = RECOMMENDED_COVERAGE[inp.risk_profile]
    recommended = inp.monthly_expenses * recommended_months

    # Savings curve, running a year past the target where the horizon allows
    last_month = horizon_months if months_to_target is None else min(months_to_target + 12, horizon_months)
    timeline: List[Tuple[int, float]] = []
    saved = float(inp.current_savings)
    for month in range(last_month + 1):
        if month > 0:
            saved += inp.monthly_contribution
        timeline.append((month, saved))

    return EmergencyFundPlan(
        target_amount=target,
        remaining_amount=remaining,
        months_to_target=months_to_target,
        recommended_months=recommended_months,
        recommended_amount=recommended,
        current_coverage_months=inp.current_savings / inp.monthly_expenses if inp.monthly_expenses > 0 else 0.0,
        completion_percent=inp.current_savings / target * 100 if target > 0 else 100.0,
        on_track=inp.current_savings >= recommended,
        timeline=tuple(timeline),
    )


def _health(spent: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(100.0, spent / target * 100)


def analyze_budget(monthly_income: float, expenses: Sequence[BudgetExpense]) -> BudgetAnalysis:
    """Compare spending against the 50/30/20 needs/wants/savings split"""
    _require_non_negative(monthly_income=monthly_income)
    for expense in expenses:
        if expense.amount < 0:
            raise InvalidInputError("expenses", f"{expense.name!r} amount must not be negative")

    needs = sum(e.amount for e in expenses if e.kind is ExpenseKind.NEED)
    wants = sum(e.amount for e in expenses if e.kind is ExpenseKind.WANT)
    total = needs + wants
    savings = monthly_income - total

    needs_target = monthly_income * NEEDS_SHARE
    wants_target = monthly_income * WANTS_SHARE
    savings_target = monthly_income * SAVINGS_SHARE

    return BudgetAnalysis(
        total_expenses=total,
        savings=savings,
        savings_rate_percent=savings / monthly_income * 100 if monthly_income > 0 else 0.0,
        needs_target=needs_target,
        wants_target=wants_target,
        savings_target=savings_target,
        needs_health_percent=_health(needs, needs_target),
        wants_health_percent=_health(wants, wants_target),
        savings_health_percent=max(0.0, _health(savings, savings_target)),
    )


def compute_gst(amount: float, rate_percent: float, mode: GstMode) -> GstResult:
    """
    Split an amount into base and GST.

    Intra-state supplies split GST equally into CGST and SGST; inter-state
    supplies charge the whole amount as IGST.
    """
    _require_non_negative(amount=amount, rate_percent=rate_percent)

    if mode is GstMode.EXCLUSIVE:
        base = float(amount)
        gst = amount * rate_percent / 100
        total = base + gst
    elif mode is GstMode.INCLUSIVE:
        total = float(amount)
        base = amount * 100 / (100 + rate_percent)
        gst = total - base
    else:
        raise InvalidInputError("mode", f"unsupported GST mode {mode!r}")

    return GstResult(
        base_amount=base,
        gst_amount=gst,
        total_amount=total,
        cgst=gst / 2,
        sgst=gst / 2,
        igst=gst,
    )


def compute_salary(inp: SalaryInput, cess_rate: float = DEFAULT_CESS_RATE) -> SalaryBreakdown:
    """Monthly take-home pay from gross salary, PF, professional tax and income tax"""
    _require_non_negative(
        monthly_gross=inp.monthly_gross,
        monthly_pf=inp.monthly_pf,
        annual_professional_tax=inp.annual_professional_tax,
    )
    if not 0 <= inp.basic_percent <= 100:
        raise InvalidInputError("basic_percent", "must be between 0 and 100")
    if not 0 <= inp.hra_percent <= 100:
        raise InvalidInputError("hra_percent", "must be between 0 and 100")

    basic = inp.monthly_gross * inp.basic_percent / 100
    hra = basic * inp.hra_percent / 100
    allowances = inp.monthly_gross - basic - hra

    annual_gross = inp.monthly_gross * 12
    taxable = max(0.0, annual_gross - inp.monthly_pf * 12 - SALARY_STANDARD_DEDUCTION)
    annual_tax = compute_progressive_tax(taxable, slabs_for(inp.regime), cess_rate=cess_rate).total_tax

    monthly_tax = annual_tax / 12
    deductions = monthly_tax + inp.monthly_pf + inp.annual_professional_tax / 12

    return SalaryBreakdown(
        basic=basic,
        hra=hra,
        allowances=allowances,
        annual_gross=annual_gross,
        taxable_income=taxable,
        annual_tax=annual_tax,
        monthly_tax=monthly_tax,
        monthly_deductions=deductions,
        monthly_net=inp.monthly_gross - deductions,
    )
