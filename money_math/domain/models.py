"""Domain models - pure Python dataclasses for calculator inputs and results"""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple


class CompoundingFrequency(IntEnum):
    """Compounding periods per year"""

    ANNUALLY = 1
    SEMIANNUALLY = 2
    QUARTERLY = 4
    MONTHLY = 12


class CompoundingMode(str, Enum):
    LUMP_SUM = "lump_sum"
    PERIODIC = "periodic"  # Fixed contribution at the start of every period


class LoanRepayment(str, Enum):
    AMORTIZING = "amortizing"
    INTEREST_ONLY = "interest_only"  # Working-capital loans, principal due at the end


class PayoffStrategy(str, Enum):
    AVALANCHE = "avalanche"  # Highest rate first
    SNOWBALL = "snowball"  # Smallest balance first


class TaxRegime(str, Enum):
    OLD = "old"
    NEW = "new"  # FY2023-24 new regime
    NEW_2025 = "new2025"  # FY2025-26 new regime


class AgeBracket(str, Enum):
    BELOW_60 = "below60"
    ABOVE_60 = "above60"
    ABOVE_80 = "above80"


class GstMode(str, Enum):
    EXCLUSIVE = "exclusive"  # GST added on top of the amount
    INCLUSIVE = "inclusive"  # Amount already contains GST


class RiskProfile(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class ExpenseKind(str, Enum):
    NEED = "need"
    WANT = "want"


# --- Amortization ---


@dataclass(frozen=True)
class LoanInput:
    """Amortizing loan parameters (monthly periods)"""

    principal: float
    annual_rate_percent: float
    term_months: int


@dataclass(frozen=True)
class PeriodEntry:
    """Single row of an amortization schedule"""

    period: int
    payment: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float


@dataclass(frozen=True)
class AmortizationResult:
    periodic_payment: float
    total_payment: float
    total_interest: float
    schedule: Tuple[PeriodEntry, ...]


@dataclass(frozen=True)
class MoratoriumResult:
    """Education loan: interest capitalized during the moratorium, then amortized"""

    moratorium_months: int
    accrued_interest: float
    capitalized_principal: float
    repayment: AmortizationResult
    total_interest: float  # Measured against the original principal


@dataclass(frozen=True)
class YearSummary:
    year: int
    principal: float
    interest: float
    balance: float


# --- Compounding ---


@dataclass(frozen=True)
class CompoundingInput:
    """
    Compounding parameters.

    In PERIODIC mode `principal` is the contribution made every period.
    """

    principal: float
    annual_rate_percent: float
    periods_per_year: int
    years: float
    mode: CompoundingMode = CompoundingMode.LUMP_SUM


@dataclass(frozen=True)
class GrowthPoint:
    period: int
    value: float
    contributed: float
    gained: float


@dataclass(frozen=True)
class CompoundingResult:
    future_value: float
    total_contributed: float
    total_gain: float
    series: Tuple[GrowthPoint, ...]


@dataclass(frozen=True)
class SimpleInterestResult:
    interest: float
    total_amount: float
    series: Tuple[GrowthPoint, ...]  # One point per whole year


@dataclass(frozen=True)
class SavingsGoalResult:
    required_contribution: float  # Per month
    future_value_of_savings: float
    total_invested: float
    total_returns: float


# --- Tax ---


@dataclass(frozen=True)
class TaxSlab:
    """Income in (lower_bound, upper_bound] is taxed at rate_percent"""

    lower_bound: float
    upper_bound: float
    rate_percent: float

    @property
    def width(self) -> float:
        return self.upper_bound - self.lower_bound

    @property
    def is_open(self) -> bool:
        return math.isinf(self.upper_bound)


@dataclass(frozen=True)
class SlabTax:
    slab: TaxSlab
    taxable_amount: float
    tax: float


@dataclass(frozen=True)
class RebateRule:
    """Full rebate of tax when taxable income does not exceed threshold"""

    threshold: float

    def applies(self, taxable_income: float) -> bool:
        return taxable_income <= self.threshold


@dataclass(frozen=True)
class TaxBreakdown:
    taxable_income: float
    slab_tax: float
    cess: float
    rebate: float
    total_tax: float
    per_slab: Tuple[SlabTax, ...]  # Taxed slabs only
    exempt_amount: float = 0.0  # Income that fell into zero-rate slabs


@dataclass(frozen=True)
class TaxProfile:
    """Salaried individual's annual figures for a regime"""

    annual_income: float
    regime: TaxRegime = TaxRegime.NEW_2025
    age: AgeBracket = AgeBracket.BELOW_60
    section_80c: float = 0.0  # Old regime only
    other_deductions: float = 0.0  # Old regime only


@dataclass(frozen=True)
class IncomeTaxResult:
    regime: TaxRegime
    gross_income: float
    deductions: float
    breakdown: TaxBreakdown
    net_income: float
    effective_rate_percent: float


# --- Debt payoff ---


@dataclass(frozen=True)
class Debt:
    id: str
    balance: float
    annual_rate_percent: float
    minimum_payment: float
    name: str = ""


@dataclass(frozen=True)
class PayoffEvent:
    debt_id: str
    month_paid_off: int


@dataclass(frozen=True)
class TimelinePoint:
    month: int
    total_remaining_balance: float


@dataclass(frozen=True)
class PayoffResult:
    strategy: PayoffStrategy
    months_to_payoff: int
    total_interest_paid: float
    payoff_order: Tuple[PayoffEvent, ...]
    timeline: Tuple[TimelinePoint, ...]
    converged: bool  # False when the month cap was hit with debt remaining


@dataclass(frozen=True)
class PayoffComparison:
    """Simulation with extra payment vs. minimum payments only"""

    with_extra: PayoffResult
    baseline: PayoffResult
    months_saved: int
    interest_saved: float


# --- Planning ---


@dataclass(frozen=True)
class RetirementInput:
    current_age: int
    retirement_age: int
    monthly_expenses: float
    current_savings: float
    monthly_savings: float
    expected_return_percent: float
    inflation_percent: float


@dataclass(frozen=True)
class RetirementYear:
    year: int
    age: int
    corpus: float
    monthly_expenses: float


@dataclass(frozen=True)
class RetirementPlan:
    years_to_retirement: int
    savings_growth: float
    contribution_growth: float
    total_corpus: float
    future_monthly_expenses: float
    required_corpus: float
    surplus: float  # Negative means shortfall
    additional_monthly_savings: float
    projection: Tuple[RetirementYear, ...]

    @property
    def is_shortfall(self) -> bool:
        return self.surplus < 0


@dataclass(frozen=True)
class EmergencyFundInput:
    monthly_expenses: float
    current_savings: float
    target_months: int
    monthly_contribution: float
    risk_profile: RiskProfile = RiskProfile.MODERATE


@dataclass(frozen=True)
class EmergencyFundPlan:
    target_amount: float
    remaining_amount: float
    months_to_target: Optional[int]  # None when no contribution closes the gap
    recommended_months: int
    recommended_amount: float
    current_coverage_months: float
    completion_percent: float
    on_track: bool  # Current savings already cover the recommended amount
    timeline: Tuple[Tuple[int, float], ...]  # (month, savings)


@dataclass(frozen=True)
class BudgetExpense:
    name: str
    amount: float
    kind: ExpenseKind


@dataclass(frozen=True)
class BudgetAnalysis:
    total_expenses: float
    savings: float
    savings_rate_percent: float
    needs_target: float
    wants_target: float
    savings_target: float
    needs_health_percent: float
    wants_health_percent: float
    savings_health_percent: float

    @property
    def is_deficit(self) -> bool:
        return self.savings < 0


@dataclass(frozen=True)
class GstResult:
    base_amount: float
    gst_amount: float
    total_amount: float
    cgst: float
    sgst: float
    igst: float


@dataclass(frozen=True)
class SalaryInput:
    monthly_gross: float
    basic_percent: float = 40.0
    hra_percent: float = 50.0  # Of basic
    monthly_pf: float = 1800.0
    annual_professional_tax: float = 2400.0
    regime: TaxRegime = TaxRegime.NEW


@dataclass(frozen=True)
class SalaryBreakdown:
    basic: float
    hra: float
    allowances: float
    annual_gross: float
    taxable_income: float
    annual_tax: float
    monthly_tax: float
    monthly_deductions: float
    monthly_net: float

    @property
    def take_home_percent(self) -> float:
        if self.annual_gross <= 0:
            return 0.0
        return self.monthly_net * 12 / self.annual_gross * 100
