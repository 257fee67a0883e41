"""Unit tests for the compounding engine"""

import pytest
from money_math.domain.models import CompoundingInput, CompoundingMode
from money_math.domain.compounding import (
    annuity_due_value,
    compute_compounding,
    compute_simple_interest,
    lump_sum_value,
    post_tax_maturity,
    required_contribution,
)
from money_math.domain.exceptions import InvalidInputError

PERIODIC = CompoundingMode.PERIODIC


def test_lump_sum_annual_scenario():
    """Test 1 lakh at 10% compounded annually for 10 years"""
    result = compute_compounding(CompoundingInput(100_000, 10, 1, 10))

    assert result.future_value == pytest.approx(259_374.246, abs=0.01)
    assert result.total_contributed == 100_000
    assert result.total_gain == pytest.approx(159_374.246, abs=0.01)
    assert len(result.series) == 10
    assert result.series[-1].value == pytest.approx(result.future_value)


def test_lump_sum_quarterly():
    """Test 8% compounded quarterly for a year"""
    result = compute_compounding(CompoundingInput(100_000, 8, 4, 1))

    assert result.future_value == pytest.approx(108_243.216, abs=0.001)
    assert [p.period for p in result.series] == [1, 2, 3, 4]


def test_lump_sum_fractional_years():
    """Test partial periods still compound to the exact end date"""
    result = compute_compounding(CompoundingInput(100_000, 10, 1, 0.5))

    assert result.future_value == pytest.approx(100_000 * 1.1 ** 0.5)
    assert result.series == ()


def test_periodic_contribution_sip():
    """Test 5000/month SIP at 12% for 10 years (annuity due)"""
    result = compute_compounding(CompoundingInput(5_000, 12, 12, 10, PERIODIC))

    assert result.future_value == pytest.approx(1_161_695.38, abs=1)
    assert result.total_contributed == 600_000
    assert len(result.series) == 120
    assert result.series[0].value == pytest.approx(5_050)  # First contribution grows one month


@pytest.mark.parametrize(
    "inp, expected",
    [
        (CompoundingInput(100_000, 0, 4, 5), 100_000),
        (CompoundingInput(5_000, 0, 12, 10, PERIODIC), 600_000),
    ],
)
def test_zero_rate_means_zero_growth(inp, expected):
    result = compute_compounding(inp)

    assert result.future_value == expected
    assert result.total_gain == 0


@pytest.mark.parametrize(
    "inp",
    [
        CompoundingInput(100_000, 7.5, 4, 5),
        CompoundingInput(2_500, 9, 12, 3, PERIODIC),
    ],
)
def test_series_strictly_increasing_and_consistent(inp):
    """Test every point grows and value == contributed + gained"""
    series = compute_compounding(inp).series

    assert all(a.value < b.value for a, b in zip(series, series[1:]))
    for point in series:
        assert point.value == pytest.approx(point.contributed + point.gained)


def test_series_points_evaluated_from_closed_form():
    """Test intermediate points match the formula at that period"""
    series = compute_compounding(CompoundingInput(50_000, 6, 12, 2)).series

    assert series[17].value == pytest.approx(lump_sum_value(50_000, 0.005, 18))


def test_periodic_contributed_is_cumulative():
    series = compute_compounding(CompoundingInput(1_000, 12, 12, 1, PERIODIC)).series

    assert [p.contributed for p in series[:3]] == [1_000, 2_000, 3_000]
    assert series[5].value == pytest.approx(annuity_due_value(1_000, 0.01, 6))


@pytest.mark.parametrize(
    "inp, field",
    [
        (CompoundingInput(-1, 10, 1, 10), "principal"),
        (CompoundingInput(100, -1, 1, 10), "annual_rate_percent"),
        (CompoundingInput(100, 10, 0, 10), "periods_per_year"),
        (CompoundingInput(100, 10, 1, 0), "years"),
        (CompoundingInput(100, 10, 1, 0.5, PERIODIC), "years"),
    ],
)
def test_compute_compounding_rejects_invalid_input(inp, field):
    with pytest.raises(InvalidInputError) as exc_info:
        compute_compounding(inp)

    assert exc_info.value.field == field


def test_compute_simple_interest():
    """Test SI = P * r * t / 100 with cumulative yearly points"""
    result = compute_simple_interest(100_000, 10, 5)

    assert result.interest == pytest.approx(50_000)
    assert result.total_amount == pytest.approx(150_000)
    assert [p.gained for p in result.series] == pytest.approx([10_000, 20_000, 30_000, 40_000, 50_000])
    assert result.series[-1].value == pytest.approx(150_000)


def test_required_contribution_closes_gap():
    """Test the solved contribution reaches the goal exactly"""
    result = required_contribution(goal=1_000_000, current_savings=100_000, annual_rate_percent=12, years=5)
    i, m = 0.01, 60

    reached = result.future_value_of_savings + annuity_due_value(result.required_contribution, i, m)
    assert reached == pytest.approx(1_000_000)
    assert result.total_invested == pytest.approx(100_000 + result.required_contribution * m)
    assert result.total_returns == pytest.approx(1_000_000 - result.total_invested)


def test_required_contribution_zero_rate():
    result = required_contribution(goal=120_000, current_savings=0, annual_rate_percent=0, years=1)

    assert result.required_contribution == pytest.approx(10_000)
    assert result.total_returns == pytest.approx(0)


def test_required_contribution_already_covered():
    """Test savings that already outgrow the goal need no contribution"""
    result = required_contribution(goal=100_000, current_savings=200_000, annual_rate_percent=10, years=5)

    assert result.required_contribution == 0
    assert result.total_invested == 200_000
    assert result.total_returns == pytest.approx(result.future_value_of_savings - 200_000)


def test_required_contribution_rejects_negative_goal():
    with pytest.raises(InvalidInputError):
        required_contribution(goal=-1, current_savings=0, annual_rate_percent=10, years=5)


def test_post_tax_maturity():
    """Test TDS is deducted from interest only"""
    result = compute_compounding(CompoundingInput(100_000, 10, 1, 10))

    assert post_tax_maturity(result, 0.10) == pytest.approx(result.future_value - result.total_gain * 0.10)
    assert post_tax_maturity(result, 0) == result.future_value
    with pytest.raises(InvalidInputError):
        post_tax_maturity(result, 1.5)
