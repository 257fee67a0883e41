"""Pydantic schemas for calculator input validation and presentation payloads"""

from pydantic import BaseModel, Field, model_validator
from typing import Annotated, List, Optional

from money_math.domain.models import (
    AgeBracket,
    CompoundingFrequency,
    CompoundingMode,
    ExpenseKind,
    GstMode,
    LoanRepayment,
    PayoffStrategy,
    RiskProfile,
    TaxRegime,
)

Rate = Annotated[float, Field(ge=0, le=100, description="Annual rate in percent")]


# --- Loans ---


class LoanRequest(BaseModel):
    """EMI, home, car, bike, personal, business and education loan pages"""

    principal: float = Field(..., ge=0, description="Loan amount, or purchase price when a down payment is given")
    annual_rate_percent: Rate
    tenure_months: int = Field(..., gt=0, le=600)
    down_payment: float = Field(0, ge=0)
    processing_fee: float = Field(0, ge=0)
    repayment: LoanRepayment = LoanRepayment.AMORTIZING
    moratorium_months: int = Field(0, ge=0, le=120, description="Education loans: months before repayment starts")

    @model_validator(mode="after")
    def check_loan_shape(self) -> "LoanRequest":
        if self.down_payment > self.principal:
            raise ValueError("down_payment cannot exceed principal")
        if self.moratorium_months and self.repayment is LoanRepayment.INTEREST_ONLY:
            raise ValueError("moratorium applies to amortizing loans only")
        return self


class ScheduleRow(BaseModel):
    period: int
    payment: float
    principal: float
    interest: float
    balance: float


class YearRow(BaseModel):
    year: int
    principal: float
    interest: float
    balance: float


class LoanResponse(BaseModel):
    financed_amount: float
    periodic_payment: float
    total_payment: float
    total_interest: float
    total_cost: float
    accrued_interest: Optional[float] = None
    capitalized_principal: Optional[float] = None
    schedule: List[ScheduleRow]
    yearly: List[YearRow]


# --- Investments ---


class InvestmentRequest(BaseModel):
    """Compound interest, FD, SIP and lump-sum pages"""

    amount: float = Field(..., ge=0, description="Principal, or the contribution per period for SIPs")
    annual_rate_percent: Rate
    years: float = Field(..., gt=0, le=100)
    frequency: CompoundingFrequency = CompoundingFrequency.ANNUALLY
    mode: CompoundingMode = CompoundingMode.LUMP_SUM
    apply_withholding: bool = False  # FD: deduct TDS on interest


class GrowthRow(BaseModel):
    period: int
    value: float
    contributed: float
    gained: float


class InvestmentResponse(BaseModel):
    future_value: float
    total_contributed: float
    total_gain: float
    post_tax_value: Optional[float] = None
    series: List[GrowthRow]
    yearly: List[GrowthRow]


class SimpleInterestRequest(BaseModel):
    principal: float = Field(..., ge=0)
    annual_rate_percent: Rate
    years: float = Field(..., gt=0, le=100)


class SimpleInterestResponse(BaseModel):
    interest: float
    total_amount: float
    yearly: List[GrowthRow]


class SavingsGoalRequest(BaseModel):
    goal_amount: float = Field(..., ge=0)
    current_savings: float = Field(0, ge=0)
    annual_rate_percent: Rate
    years: float = Field(..., gt=0, le=100)


class SavingsGoalResponse(BaseModel):
    required_monthly_contribution: float
    future_value_of_savings: float
    total_invested: float
    total_returns: float


# --- Tax ---


class TaxRequest(BaseModel):
    annual_income: float = Field(..., ge=0)
    regime: TaxRegime = TaxRegime.NEW_2025
    age: AgeBracket = AgeBracket.BELOW_60
    section_80c: float = Field(0, ge=0)
    other_deductions: float = Field(0, ge=0)


class SlabRow(BaseModel):
    lower_bound: float
    upper_bound: Optional[float] = None  # None for the open top slab
    rate_percent: float
    taxable_amount: float
    tax: float


class TaxResponse(BaseModel):
    regime: TaxRegime
    gross_income: float
    deductions: float
    taxable_income: float
    income_tax: float
    cess: float
    rebate: float
    total_tax: float
    net_income: float
    effective_rate_percent: float
    slabs: List[SlabRow]


# --- Debt payoff ---


class DebtSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    balance: float = Field(..., ge=0)
    annual_rate_percent: Rate
    minimum_payment: float = Field(..., gt=0)


class PayoffRequest(BaseModel):
    debts: List[DebtSchema]
    extra_monthly_payment: float = Field(0, ge=0)
    strategy: PayoffStrategy = PayoffStrategy.AVALANCHE

    @model_validator(mode="after")
    def check_unique_ids(self) -> "PayoffRequest":
        ids = [d.id for d in self.debts]
        if len(ids) != len(set(ids)):
            raise ValueError("debt ids must be unique")
        return self


class PayoffRow(BaseModel):
    debt_id: str
    name: str
    month_paid_off: int


class TimelineRow(BaseModel):
    month: int
    total_remaining_balance: float


class PayoffResponse(BaseModel):
    strategy: PayoffStrategy
    converged: bool
    months_to_payoff: int
    years_to_payoff: float
    total_debt: float
    total_interest_paid: float
    total_payments: float
    months_saved: int
    interest_saved: float
    payoff_order: List[PayoffRow]
    timeline: List[TimelineRow]


# --- Planning ---


class RetirementRequest(BaseModel):
    current_age: int = Field(..., ge=0, le=100)
    retirement_age: int = Field(..., gt=0, le=100)
    monthly_expenses: float = Field(..., ge=0)
    current_savings: float = Field(0, ge=0)
    monthly_savings: float = Field(0, ge=0)
    expected_return_percent: Rate
    inflation_percent: float = Field(6, ge=0, le=100)

    @model_validator(mode="after")
    def check_ages(self) -> "RetirementRequest":
        if self.retirement_age <= self.current_age:
            raise ValueError("retirement_age must be after current_age")
        return self


class RetirementYearRow(BaseModel):
    year: int
    age: int
    corpus: float
    monthly_expenses: float


class RetirementResponse(BaseModel):
    years_to_retirement: int
    total_corpus: float
    savings_growth: float
    contribution_growth: float
    required_corpus: float
    future_monthly_expenses: float
    is_shortfall: bool
    gap: float  # Absolute surplus or shortfall
    additional_monthly_savings: float
    projection: List[RetirementYearRow]


class EmergencyFundRequest(BaseModel):
    monthly_expenses: float = Field(..., ge=0)
    current_savings: float = Field(0, ge=0)
    target_months: int = Field(6, gt=0, le=36)
    monthly_contribution: float = Field(0, ge=0)
    risk_profile: RiskProfile = RiskProfile.MODERATE


class SavingsRow(BaseModel):
    month: int
    savings: float


class EmergencyFundResponse(BaseModel):
    target_amount: float
    remaining_amount: float
    months_to_target: Optional[int] = None
    recommended_months: int
    recommended_amount: float
    current_coverage_months: float
    completion_percent: float
    on_track: bool
    timeline: List[SavingsRow]


class ExpenseSchema(BaseModel):
    name: str
    amount: float = Field(..., ge=0)
    kind: ExpenseKind


class BudgetRequest(BaseModel):
    monthly_income: float = Field(..., ge=0)
    expenses: List[ExpenseSchema] = []


class BudgetResponse(BaseModel):
    total_expenses: float
    savings: float
    savings_rate_percent: float
    is_deficit: bool
    needs_target: float
    wants_target: float
    savings_target: float
    needs_health_percent: float
    wants_health_percent: float
    savings_health_percent: float


class GstRequest(BaseModel):
    amount: float = Field(..., ge=0)
    rate_percent: float = Field(18, ge=0, le=100)
    mode: GstMode = GstMode.EXCLUSIVE


class GstResponse(BaseModel):
    base_amount: float
    gst_amount: float
    total_amount: float
    cgst: float
    sgst: float
    igst: float


class SalaryRequest(BaseModel):
    monthly_gross: float = Field(..., ge=0)
    basic_percent: float = Field(40, ge=0, le=100)
    hra_percent: float = Field(50, ge=0, le=100)
    monthly_pf: float = Field(1800, ge=0)
    annual_professional_tax: float = Field(2400, ge=0)
    regime: TaxRegime = TaxRegime.NEW


class SalaryResponse(BaseModel):
    basic: float
    hra: float
    allowances: float
    annual_gross: float
    taxable_income: float
    annual_tax: float
    monthly_tax: float
    monthly_deductions: float
    monthly_net: float
    annual_net: float
    take_home_percent: float
