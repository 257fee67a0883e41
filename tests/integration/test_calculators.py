"""Integration tests for calculator entry points"""

import logging
import pytest
from prometheus_client import REGISTRY
from pydantic import ValidationError

from money_math.calculators import service
from money_math.calculators.schemas import (
    BudgetRequest,
    DebtSchema,
    EmergencyFundRequest,
    GstRequest,
    InvestmentRequest,
    LoanRequest,
    PayoffRequest,
    RetirementRequest,
    SalaryRequest,
    SavingsGoalRequest,
    SimpleInterestRequest,
    TaxRequest,
)
from money_math.domain.exceptions import InvalidInputError
from money_math.domain.models import (
    CompoundingFrequency,
    CompoundingMode,
    ExpenseKind,
    GstMode,
    LoanRepayment,
    PayoffStrategy,
    TaxRegime,
)


def _sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_calculate_loan(fresh_caches):
    """Test the EMI page for a 10 lakh, 20 year home loan"""
    response = service.calculate_loan(
        LoanRequest(principal=1_000_000, annual_rate_percent=8.5, tenure_months=240)
    )

    assert response.periodic_payment == 8678
    assert response.financed_amount == 1_000_000
    assert len(response.schedule) == 240
    assert response.schedule[0].period == 1
    assert response.schedule[-1].balance == 0
    assert len(response.yearly) == 20
    assert response.accrued_interest is None


def test_calculate_loan_with_down_payment_and_fee(fresh_caches):
    """Test car loan financing price minus down payment"""
    response = service.calculate_loan(
        LoanRequest(
            principal=800_000,
            down_payment=200_000,
            annual_rate_percent=9,
            tenure_months=60,
            processing_fee=5_000,
        )
    )

    assert response.financed_amount == 600_000
    assert response.total_cost == pytest.approx(response.total_payment + 5_000, abs=1)


def test_calculate_loan_with_moratorium(fresh_caches):
    """Test education loan repayment starts after the moratorium"""
    response = service.calculate_loan(
        LoanRequest(principal=500_000, annual_rate_percent=12, tenure_months=60, moratorium_months=12)
    )

    assert response.accrued_interest == 60_000
    assert response.capitalized_principal == 560_000
    assert response.schedule[0].period == 13
    assert response.schedule[-1].period == 72
    # Yearly rows line up with the shifted schedule
    assert [row.year for row in response.yearly] == [2, 3, 4, 5, 6]
    assert response.yearly[-1].balance == 0


def test_calculate_loan_with_partial_year_moratorium(fresh_caches):
    response = service.calculate_loan(
        LoanRequest(principal=500_000, annual_rate_percent=12, tenure_months=24, moratorium_months=6)
    )

    # Periods 7-30: six months in year 1, twelve in year 2, six in year 3
    assert response.schedule[0].period == 7
    assert [row.year for row in response.yearly] == [1, 2, 3]


def test_calculate_loan_interest_only(fresh_caches):
    response = service.calculate_loan(
        LoanRequest(
            principal=1_000_000,
            annual_rate_percent=12,
            tenure_months=12,
            repayment=LoanRepayment.INTEREST_ONLY,
        )
    )

    assert response.periodic_payment == 10_000
    assert response.total_interest == 120_000
    assert response.schedule[-1].principal == 1_000_000


@pytest.mark.parametrize(
    "payload",
    [
        {"principal": 100_000, "annual_rate_percent": 10, "tenure_months": 0},
        {"principal": -1, "annual_rate_percent": 10, "tenure_months": 12},
        {"principal": 100_000, "annual_rate_percent": 150, "tenure_months": 12},
        {"principal": 100_000, "annual_rate_percent": 10, "tenure_months": 12, "down_payment": 200_000},
        {
            "principal": 100_000,
            "annual_rate_percent": 10,
            "tenure_months": 12,
            "moratorium_months": 6,
            "repayment": "interest_only",
        },
    ],
)
def test_loan_request_validation(payload):
    """Test invalid loan input is rejected at the schema"""
    with pytest.raises(ValidationError):
        LoanRequest(**payload)


def test_calculate_investment_lump_sum(fresh_caches):
    response = service.calculate_investment(
        InvestmentRequest(amount=100_000, annual_rate_percent=8, years=2, frequency=CompoundingFrequency.QUARTERLY)
    )

    assert len(response.series) == 8
    assert [row.period for row in response.yearly] == [1, 2]
    assert response.yearly[-1].value == response.future_value
    assert response.post_tax_value is None


def test_calculate_investment_sip(fresh_caches):
    """Test 5000/month SIP at 12% for 10 years"""
    response = service.calculate_investment(
        InvestmentRequest(
            amount=5_000,
            annual_rate_percent=12,
            years=10,
            frequency=CompoundingFrequency.MONTHLY,
            mode=CompoundingMode.PERIODIC,
        )
    )

    assert response.future_value == 1_161_695
    assert response.total_contributed == 600_000
    assert len(response.yearly) == 10


def test_calculate_investment_fd_withholding(fresh_caches):
    response = service.calculate_investment(
        InvestmentRequest(amount=100_000, annual_rate_percent=10, years=10, apply_withholding=True)
    )

    # 10% TDS on 159374 interest
    assert response.future_value == 259_374
    assert response.post_tax_value == pytest.approx(259_374 - 15_937, abs=1)


def test_calculate_simple_interest_and_savings_goal(fresh_caches):
    simple = service.calculate_simple_interest(
        SimpleInterestRequest(principal=100_000, annual_rate_percent=10, years=5)
    )
    goal = service.calculate_savings_goal(
        SavingsGoalRequest(goal_amount=120_000, annual_rate_percent=0, years=1)
    )

    assert simple.total_amount == 150_000
    assert len(simple.yearly) == 5
    assert goal.required_monthly_contribution == 10_000


def test_calculate_income_tax(fresh_caches):
    """Test 12.75 lakh salary pays nothing under FY2025-26 after the standard deduction"""
    response = service.calculate_income_tax(TaxRequest(annual_income=1_275_000))

    assert response.regime is TaxRegime.NEW_2025
    assert response.taxable_income == 1_200_000
    assert response.income_tax == 60_000
    assert response.total_tax == 0
    assert response.rebate == 62_400
    assert [row.rate_percent for row in response.slabs] == [5, 10]


def test_calculate_income_tax_open_slab(fresh_caches):
    response = service.calculate_income_tax(TaxRequest(annual_income=3_000_000))

    assert response.slabs[-1].upper_bound is None
    assert response.slabs[-1].rate_percent == 30


def test_compare_tax_regimes(fresh_caches):
    responses = service.compare_tax_regimes(TaxRequest(annual_income=1_500_000, section_80c=150_000))

    assert [r.regime for r in responses] == list(TaxRegime)
    assert all(r.gross_income == 1_500_000 for r in responses)


def test_calculate_debt_payoff(fresh_caches, sample_debts):
    request = PayoffRequest(
        debts=[DebtSchema(**vars(d)) for d in sample_debts],
        extra_monthly_payment=5_000,
        strategy=PayoffStrategy.AVALANCHE,
    )
    response = service.calculate_debt_payoff(request)

    assert response.converged
    assert response.total_debt == 280_000
    assert response.payoff_order[0].name == "Credit Card 2"  # 28% first
    assert response.months_saved > 0
    assert response.timeline[-1].total_remaining_balance == 0
    assert response.years_to_payoff == pytest.approx(response.months_to_payoff / 12, abs=0.05)


def test_calculate_debt_payoff_non_convergence(fresh_caches, caplog):
    """Test a capped simulation is reported, counted and logged"""
    before = _sample("money_math_payoff_non_convergence_total", {"strategy": "snowball"})
    request = PayoffRequest(
        debts=[DebtSchema(id="card", balance=100_000, annual_rate_percent=24, minimum_payment=1_000)],
        strategy=PayoffStrategy.SNOWBALL,
    )

    with caplog.at_level(logging.WARNING):
        response = service.calculate_debt_payoff(request)

    assert response.converged is False
    assert response.months_to_payoff == 360
    assert response.payoff_order == []
    assert _sample("money_math_payoff_non_convergence_total", {"strategy": "snowball"}) == before + 1
    assert any(r.getMessage() == "Debt payoff did not converge" for r in caplog.records)


def test_payoff_request_rejects_duplicate_ids():
    debt = {"id": "a", "balance": 1_000, "annual_rate_percent": 10, "minimum_payment": 100}

    with pytest.raises(ValidationError):
        PayoffRequest(debts=[debt, debt])


def test_calculate_retirement(fresh_caches):
    response = service.calculate_retirement(
        RetirementRequest(
            current_age=30,
            retirement_age=60,
            monthly_expenses=10_000,
            monthly_savings=5_000,
            expected_return_percent=0,
            inflation_percent=0,
        )
    )

    assert response.is_shortfall
    assert response.gap == 1_200_000
    assert response.additional_monthly_savings == 3_333
    assert len(response.projection) == 31


def test_retirement_request_rejects_past_retirement():
    with pytest.raises(ValidationError):
        RetirementRequest(current_age=60, retirement_age=55, monthly_expenses=10_000, expected_return_percent=8)


def test_calculate_emergency_fund(fresh_caches):
    response = service.calculate_emergency_fund(
        EmergencyFundRequest(monthly_expenses=50_000, current_savings=100_000, monthly_contribution=10_000)
    )

    assert response.target_amount == 300_000
    assert response.months_to_target == 20
    assert response.current_coverage_months == 2.0
    assert response.timeline[20].savings == 300_000
    assert len(response.timeline) == 33


def test_calculate_budget(fresh_caches):
    response = service.calculate_budget(
        BudgetRequest(
            monthly_income=75_000,
            expenses=[
                {"name": "Rent", "amount": 30_000, "kind": ExpenseKind.NEED},
                {"name": "Travel", "amount": 15_000, "kind": ExpenseKind.WANT},
            ],
        )
    )

    assert response.savings == 30_000
    assert response.savings_rate_percent == 40
    assert response.wants_health_percent == 66.7
    assert not response.is_deficit


def test_calculate_gst(fresh_caches):
    response = service.calculate_gst(GstRequest(amount=11_800, rate_percent=18, mode=GstMode.INCLUSIVE))

    assert response.base_amount == 10_000
    assert response.gst_amount == 1_800
    assert response.cgst == 900


def test_calculate_salary(fresh_caches):
    response = service.calculate_salary(SalaryRequest(monthly_gross=100_000))

    assert response.taxable_income == 1_128_400
    assert response.annual_tax == 82_430
    assert response.monthly_net == 91_131


def test_results_are_memoized(fresh_caches):
    """Test repeated identical input is served from the cache"""
    request = LoanRequest(principal=250_000, annual_rate_percent=10.5, tenure_months=36)

    first = service.calculate_loan(request)
    second = service.calculate_loan(request)

    info = service._amortize.cache_info()
    assert info.misses == 1
    assert info.hits == 1
    assert first == second


def test_clear_caches(fresh_caches):
    service.calculate_gst(GstRequest(amount=1_000))
    service.clear_caches()

    assert service._gst.cache_info().currsize == 0


def test_calculation_metrics_recorded(fresh_caches):
    before = _sample("money_math_calculations_total", {"calculator": "gst"})

    service.calculate_gst(GstRequest(amount=1_000))
    service.calculate_gst(GstRequest(amount=1_000))

    assert _sample("money_math_calculations_total", {"calculator": "gst"}) == before + 2
    assert _sample("money_math_calculation_duration_seconds_count", {"calculator": "gst"}) >= 2


def test_invalid_input_is_counted_and_reraised(fresh_caches, caplog):
    """Test engine-level rejection surfaces as InvalidInputError and is counted"""
    before = _sample("money_math_invalid_input_total", {"calculator": "loan"})
    # Skip schema validation so the engine sees the bad tenure
    request = LoanRequest.model_construct(principal=100_000, annual_rate_percent=10, tenure_months=0)

    with caplog.at_level(logging.INFO):
        with pytest.raises(InvalidInputError) as exc_info:
            service.calculate_loan(request)

    assert exc_info.value.field == "term_months"
    assert _sample("money_math_invalid_input_total", {"calculator": "loan"}) == before + 1
    assert any(r.getMessage() == "Invalid calculator input" for r in caplog.records)
