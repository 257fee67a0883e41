"""Calculator entry points - one per calculator page

Every entry point takes a validated request schema, runs the (memoized) domain
engine and returns a response with amounts rounded for display. Engine results
are cached per unique input; cached results are immutable and shared.

Logging is configured by the embedding application, e.g. by calling
setup_logging(settings.log_level) from money_math.infrastructure.observability.logging
at startup. Importing this module leaves the root logger untouched.
"""

import functools
import time
from dataclasses import replace
from functools import lru_cache
from typing import Callable, List, TypeVar

from money_math.calculators.schemas import (
    BudgetRequest,
    BudgetResponse,
    EmergencyFundRequest,
    EmergencyFundResponse,
    GrowthRow,
    GstRequest,
    GstResponse,
    InvestmentRequest,
    InvestmentResponse,
    LoanRequest,
    LoanResponse,
    PayoffRequest,
    PayoffResponse,
    PayoffRow,
    RetirementRequest,
    RetirementResponse,
    RetirementYearRow,
    SalaryRequest,
    SalaryResponse,
    SavingsGoalRequest,
    SavingsGoalResponse,
    SavingsRow,
    ScheduleRow,
    SimpleInterestRequest,
    SimpleInterestResponse,
    SlabRow,
    TaxRequest,
    TaxResponse,
    TimelineRow,
    YearRow,
)
from money_math.config import settings
from money_math.domain.amortization import (
    compute_amortization,
    compute_interest_only,
    compute_moratorium_loan,
    financed_amount,
    total_cost,
    yearly_breakdown,
)
from money_math.domain.compounding import (
    compute_compounding,
    compute_simple_interest,
    post_tax_maturity,
    required_contribution,
)
from money_math.domain.exceptions import InvalidInputError
from money_math.domain.models import (
    BudgetExpense,
    CompoundingInput,
    Debt,
    EmergencyFundInput,
    IncomeTaxResult,
    LoanInput,
    LoanRepayment,
    RetirementInput,
    SalaryInput,
    TaxProfile,
    TaxRegime,
)
from money_math.domain.payoff import compare_with_baseline
from money_math.domain.planning import (
    analyze_budget,
    compute_gst,
    compute_salary,
    plan_emergency_fund,
    plan_retirement,
)
from money_math.domain.tax import compute_income_tax
from money_math.infrastructure.observability.logging import (
    log_calculation,
    log_invalid_input,
    log_non_convergence,
)
from money_math.infrastructure.observability.metrics import (
    invalid_input_counter,
    payoff_non_convergence_counter,
    record_calculation,
)
from money_math.utils.rounding import every_nth, round_currency

F = TypeVar("F", bound=Callable)

_memoize = lru_cache(maxsize=settings.cache_size)

_amortize = _memoize(compute_amortization)
_amortize_interest_only = _memoize(compute_interest_only)
_amortize_with_moratorium = _memoize(compute_moratorium_loan)
_compound = _memoize(compute_compounding)
_simple_interest = _memoize(compute_simple_interest)
_savings_goal = _memoize(required_contribution)
_income_tax = _memoize(compute_income_tax)
_payoff = _memoize(compare_with_baseline)
_retirement = _memoize(plan_retirement)
_emergency_fund = _memoize(plan_emergency_fund)
_budget = _memoize(analyze_budget)
_gst = _memoize(compute_gst)
_salary = _memoize(compute_salary)

MEMOIZED = (
    _amortize,
    _amortize_interest_only,
    _amortize_with_moratorium,
    _compound,
    _simple_interest,
    _savings_goal,
    _income_tax,
    _payoff,
    _retirement,
    _emergency_fund,
    _budget,
    _gst,
    _salary,
)


def clear_caches() -> None:
    """Drop every memoized result"""
    for cached in MEMOIZED:
        cached.cache_clear()


def instrumented(calculator: str) -> Callable[[F], F]:
    """Record metrics and logs for a calculator entry point"""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except InvalidInputError as e:
                invalid_input_counter.labels(calculator=calculator).inc()
                log_invalid_input(calculator, e.field, str(e))
                raise

            duration = time.perf_counter() - start_time
            record_calculation(calculator, duration)
            log_calculation(calculator, duration * 1000)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def _money(amount: float) -> float:
    return round_currency(amount)


def _growth_rows(points) -> List[GrowthRow]:
    return [
        GrowthRow(
            period=p.period,
            value=_money(p.value),
            contributed=_money(p.contributed),
            gained=_money(p.gained),
        )
        for p in points
    ]


@instrumented("loan")
def calculate_loan(request: LoanRequest) -> LoanResponse:
    """
    EMI and repayment schedule for every loan page.

    The repayment variant is picked once from the request:
    - moratorium_months > 0: education loan, interest capitalized first
    - INTEREST_ONLY: working-capital loan, principal repaid at the end
    - otherwise a standard amortizing loan
    """
    principal = financed_amount(request.principal, request.down_payment)
    loan = LoanInput(principal, request.annual_rate_percent, request.tenure_months)

    accrued = None
    capitalized = None
    period_offset = 0
    if request.moratorium_months:
        moratorium = _amortize_with_moratorium(loan, request.moratorium_months)
        result = moratorium.repayment
        total_interest = moratorium.total_interest
        accrued = _money(moratorium.accrued_interest)
        capitalized = _money(moratorium.capitalized_principal)
        period_offset = request.moratorium_months
    elif request.repayment is LoanRepayment.INTEREST_ONLY:
        result = _amortize_interest_only(loan)
        total_interest = result.total_interest
    else:
        result = _amortize(loan)
        total_interest = result.total_interest

    # Repayment periods continue the loan timeline after any moratorium
    schedule = [replace(entry, period=entry.period + period_offset) for entry in result.schedule]

    return LoanResponse(
        financed_amount=_money(principal),
        periodic_payment=_money(result.periodic_payment),
        total_payment=_money(result.total_payment),
        total_interest=_money(total_interest),
        total_cost=_money(total_cost(result, request.processing_fee)),
        accrued_interest=accrued,
        capitalized_principal=capitalized,
        schedule=[
            ScheduleRow(
                period=entry.period,
                payment=_money(entry.payment),
                principal=_money(entry.principal_portion),
                interest=_money(entry.interest_portion),
                balance=_money(entry.remaining_balance),
            )
            for entry in schedule
        ],
        yearly=[
            YearRow(
                year=year.year,
                principal=_money(year.principal),
                interest=_money(year.interest),
                balance=_money(year.balance),
            )
            for year in yearly_breakdown(schedule)
        ],
    )


@instrumented("investment")
def calculate_investment(request: InvestmentRequest) -> InvestmentResponse:
    """Lump-sum (compound interest, FD, lumpsum) or recurring (SIP) growth"""
    periods_per_year = int(request.frequency)
    result = _compound(
        CompoundingInput(
            principal=request.amount,
            annual_rate_percent=request.annual_rate_percent,
            periods_per_year=periods_per_year,
            years=request.years,
            mode=request.mode,
        )
    )

    post_tax = None
    if request.apply_withholding:
        post_tax = _money(post_tax_maturity(result, settings.fd_withholding_rate))

    return InvestmentResponse(
        future_value=_money(result.future_value),
        total_contributed=_money(result.total_contributed),
        total_gain=_money(result.total_gain),
        post_tax_value=post_tax,
        series=_growth_rows(result.series),
        yearly=_growth_rows(
            replace(p, period=p.period // periods_per_year)
            for p in every_nth(result.series, periods_per_year)
        ),
    )


@instrumented("simple_interest")
def calculate_simple_interest(request: SimpleInterestRequest) -> SimpleInterestResponse:
    result = _simple_interest(request.principal, request.annual_rate_percent, request.years)
    return SimpleInterestResponse(
        interest=_money(result.interest),
        total_amount=_money(result.total_amount),
        yearly=_growth_rows(result.series),
    )


@instrumented("savings_goal")
def calculate_savings_goal(request: SavingsGoalRequest) -> SavingsGoalResponse:
    result = _savings_goal(
        request.goal_amount,
        request.current_savings,
        request.annual_rate_percent,
        request.years,
    )
    return SavingsGoalResponse(
        required_monthly_contribution=_money(result.required_contribution),
        future_value_of_savings=_money(result.future_value_of_savings),
        total_invested=_money(result.total_invested),
        total_returns=_money(result.total_returns),
    )


def _tax_profile(request: TaxRequest) -> TaxProfile:
    return TaxProfile(
        annual_income=request.annual_income,
        regime=request.regime,
        age=request.age,
        section_80c=request.section_80c,
        other_deductions=request.other_deductions,
    )


def _run_income_tax(profile: TaxProfile) -> IncomeTaxResult:
    return _income_tax(
        profile,
        cess_rate=settings.cess_rate,
        rebate_threshold=settings.rebate_threshold,
        section_80c_cap=settings.section_80c_cap,
    )


def _tax_response(result: IncomeTaxResult) -> TaxResponse:
    breakdown = result.breakdown
    return TaxResponse(
        regime=result.regime,
        gross_income=_money(result.gross_income),
        deductions=_money(result.deductions),
        taxable_income=_money(breakdown.taxable_income),
        income_tax=_money(breakdown.slab_tax),
        cess=_money(breakdown.cess),
        rebate=_money(breakdown.rebate),
        total_tax=_money(breakdown.total_tax),
        net_income=_money(result.net_income),
        effective_rate_percent=round_currency(result.effective_rate_percent, 2),
        slabs=[
            SlabRow(
                lower_bound=item.slab.lower_bound,
                upper_bound=None if item.slab.is_open else item.slab.upper_bound,
                rate_percent=item.slab.rate_percent,
                taxable_amount=_money(item.taxable_amount),
                tax=_money(item.tax),
            )
            for item in breakdown.per_slab
        ],
    )


@instrumented("income_tax")
def calculate_income_tax(request: TaxRequest) -> TaxResponse:
    return _tax_response(_run_income_tax(_tax_profile(request)))


@instrumented("income_tax_comparison")
def compare_tax_regimes(request: TaxRequest) -> List[TaxResponse]:
    """The same income under every regime, in regime declaration order"""
    profile = _tax_profile(request)
    return [_tax_response(_run_income_tax(replace(profile, regime=regime))) for regime in TaxRegime]


@instrumented("debt_payoff")
def calculate_debt_payoff(request: PayoffRequest) -> PayoffResponse:
    """
    Payoff plan for the chosen strategy, compared against minimum payments only.

    A simulation that hits the month cap is returned with converged=False and
    logged as a warning so the page can tell the user their minimums do not
    cover the interest.
    """
    debts = tuple(
        Debt(
            id=d.id,
            balance=d.balance,
            annual_rate_percent=d.annual_rate_percent,
            minimum_payment=d.minimum_payment,
            name=d.name,
        )
        for d in request.debts
    )
    comparison = _payoff(
        debts,
        request.extra_monthly_payment,
        request.strategy,
        settings.payoff_month_cap,
    )
    result = comparison.with_extra

    if not result.converged:
        payoff_non_convergence_counter.labels(strategy=result.strategy.value).inc()
        log_non_convergence(result.strategy.value, settings.payoff_month_cap, len(debts))

    names = {d.id: d.name or d.id for d in debts}
    total_debt = sum(d.balance for d in debts)
    return PayoffResponse(
        strategy=result.strategy,
        converged=result.converged,
        months_to_payoff=result.months_to_payoff,
        years_to_payoff=round_currency(result.months_to_payoff / 12, 1),
        total_debt=_money(total_debt),
        total_interest_paid=_money(result.total_interest_paid),
        total_payments=_money(total_debt + result.total_interest_paid),
        months_saved=comparison.months_saved,
        interest_saved=_money(comparison.interest_saved),
        payoff_order=[
            PayoffRow(debt_id=event.debt_id, name=names[event.debt_id], month_paid_off=event.month_paid_off)
            for event in result.payoff_order
        ],
        timeline=[
            TimelineRow(month=point.month, total_remaining_balance=_money(point.total_remaining_balance))
            for point in result.timeline
        ],
    )


@instrumented("retirement")
def calculate_retirement(request: RetirementRequest) -> RetirementResponse:
    plan = _retirement(
        RetirementInput(
            current_age=request.current_age,
            retirement_age=request.retirement_age,
            monthly_expenses=request.monthly_expenses,
            current_savings=request.current_savings,
            monthly_savings=request.monthly_savings,
            expected_return_percent=request.expected_return_percent,
            inflation_percent=request.inflation_percent,
        ),
        retirement_years=settings.retirement_years,
    )
    return RetirementResponse(
        years_to_retirement=plan.years_to_retirement,
        total_corpus=_money(plan.total_corpus),
        savings_growth=_money(plan.savings_growth),
        contribution_growth=_money(plan.contribution_growth),
        required_corpus=_money(plan.required_corpus),
        future_monthly_expenses=_money(plan.future_monthly_expenses),
        is_shortfall=plan.is_shortfall,
        gap=_money(abs(plan.surplus)),
        additional_monthly_savings=_money(plan.additional_monthly_savings),
        projection=[
            RetirementYearRow(
                year=row.year,
                age=row.age,
                corpus=_money(row.corpus),
                monthly_expenses=_money(row.monthly_expenses),
            )
            for row in plan.projection
        ],
    )


@instrumented("emergency_fund")
def calculate_emergency_fund(request: EmergencyFundRequest) -> EmergencyFundResponse:
    plan = _emergency_fund(
        EmergencyFundInput(
            monthly_expenses=request.monthly_expenses,
            current_savings=request.current_savings,
            target_months=request.target_months,
            monthly_contribution=request.monthly_contribution,
            risk_profile=request.risk_profile,
        ),
        horizon_months=settings.emergency_fund_horizon_months,
    )
    return EmergencyFundResponse(
        target_amount=_money(plan.target_amount),
        remaining_amount=_money(plan.remaining_amount),
        months_to_target=plan.months_to_target,
        recommended_months=plan.recommended_months,
        recommended_amount=_money(plan.recommended_amount),
        current_coverage_months=round_currency(plan.current_coverage_months, 1),
        completion_percent=_money(plan.completion_percent),
        on_track=plan.on_track,
        timeline=[SavingsRow(month=month, savings=_money(saved)) for month, saved in plan.timeline],
    )


@instrumented("budget")
def calculate_budget(request: BudgetRequest) -> BudgetResponse:
    expenses = tuple(BudgetExpense(name=e.name, amount=e.amount, kind=e.kind) for e in request.expenses)
    analysis = _budget(request.monthly_income, expenses)
    return BudgetResponse(
        total_expenses=_money(analysis.total_expenses),
        savings=_money(analysis.savings),
        savings_rate_percent=round_currency(analysis.savings_rate_percent, 1),
        is_deficit=analysis.is_deficit,
        needs_target=_money(analysis.needs_target),
        wants_target=_money(analysis.wants_target),
        savings_target=_money(analysis.savings_target),
        needs_health_percent=round_currency(analysis.needs_health_percent, 1),
        wants_health_percent=round_currency(analysis.wants_health_percent, 1),
        savings_health_percent=round_currency(analysis.savings_health_percent, 1),
    )


@instrumented("gst")
def calculate_gst(request: GstRequest) -> GstResponse:
    # GST invoices are shown to the paisa
    result = _gst(request.amount, request.rate_percent, request.mode)
    return GstResponse(
        base_amount=round_currency(result.base_amount, 2),
        gst_amount=round_currency(result.gst_amount, 2),
        total_amount=round_currency(result.total_amount, 2),
        cgst=round_currency(result.cgst, 2),
        sgst=round_currency(result.sgst, 2),
        igst=round_currency(result.igst, 2),
    )


@instrumented("salary")
def calculate_salary(request: SalaryRequest) -> SalaryResponse:
    salary = _salary(
        SalaryInput(
            monthly_gross=request.monthly_gross,
            basic_percent=request.basic_percent,
            hra_percent=request.hra_percent,
            monthly_pf=request.monthly_pf,
            annual_professional_tax=request.annual_professional_tax,
            regime=request.regime,
        ),
        cess_rate=settings.cess_rate,
    )
    return SalaryResponse(
        basic=_money(salary.basic),
        hra=_money(salary.hra),
        allowances=_money(salary.allowances),
        annual_gross=_money(salary.annual_gross),
        taxable_income=_money(salary.taxable_income),
        annual_tax=_money(salary.annual_tax),
        monthly_tax=_money(salary.monthly_tax),
        monthly_deductions=_money(salary.monthly_deductions),
        monthly_net=_money(salary.monthly_net),
        annual_net=_money(salary.monthly_net * 12),
        take_home_percent=_money(salary.take_home_percent),
    )
