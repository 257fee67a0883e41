"""Progressive income tax - slab computation, cess, rebate and regime rules"""

import math
from dataclasses import replace
from typing import Dict, List, Optional, Sequence
from money_math.domain.models import (
    AgeBracket,
    IncomeTaxResult,
    RebateRule,
    SlabTax,
    TaxBreakdown,
    TaxProfile,
    TaxRegime,
    TaxSlab,
)
from money_math.domain.exceptions import InvalidInputError, InvalidSlabTableError

INF = math.inf

DEFAULT_CESS_RATE = 0.04
SECTION_87A_THRESHOLD = 1_200_000
SECTION_80C_CAP = 150_000

# Income in (lower, upper] is taxed at the slab rate
OLD_REGIME_SLABS = (
    TaxSlab(0, 250_000, 0),
    TaxSlab(250_000, 500_000, 5),
    TaxSlab(500_000, 1_000_000, 20),
    TaxSlab(1_000_000, INF, 30),
)

NEW_REGIME_SLABS = (  # FY2023-24
    TaxSlab(0, 300_000, 0),
    TaxSlab(300_000, 600_000, 5),
    TaxSlab(600_000, 900_000, 10),
    TaxSlab(900_000, 1_200_000, 15),
    TaxSlab(1_200_000, 1_500_000, 20),
    TaxSlab(1_500_000, INF, 30),
)

NEW_2025_REGIME_SLABS = (  # FY2025-26
    TaxSlab(0, 400_000, 0),
    TaxSlab(400_000, 800_000, 5),
    TaxSlab(800_000, 1_200_000, 10),
    TaxSlab(1_200_000, 1_600_000, 15),
    TaxSlab(1_600_000, 2_000_000, 20),
    TaxSlab(2_000_000, 2_400_000, 25),
    TaxSlab(2_400_000, INF, 30),
)

# Old regime basic exemption limit by age
OLD_REGIME_EXEMPTIONS = {
    AgeBracket.BELOW_60: 250_000,
    AgeBracket.ABOVE_60: 300_000,
    AgeBracket.ABOVE_80: 500_000,
}


def validate_slab_table(slabs: Sequence[TaxSlab]) -> None:
    """
    Check a slab table covers [0, inf) without gaps or overlaps.

    Tables are validated once where they are built; compute_progressive_tax
    trusts its input.
    """
    if not slabs:
        raise InvalidSlabTableError("table is empty")
    if slabs[0].lower_bound != 0:
        raise InvalidSlabTableError("first slab must start at 0")

    for idx, slab in enumerate(slabs):
        if not 0 <= slab.rate_percent <= 100:
            raise InvalidSlabTableError(f"slab {idx} rate must be between 0 and 100")
        if slab.upper_bound <= slab.lower_bound:
            raise InvalidSlabTableError(f"slab {idx} upper bound must exceed its lower bound")
        if idx > 0 and slab.lower_bound != slabs[idx - 1].upper_bound:
            raise InvalidSlabTableError(f"slab {idx} does not start where slab {idx - 1} ends")
        if slab.is_open and idx != len(slabs) - 1:
            raise InvalidSlabTableError(f"slab {idx} is open-ended but not last")

    if not slabs[-1].is_open:
        raise InvalidSlabTableError("last slab must be open-ended")


def compute_progressive_tax(
    taxable_income: float,
    slabs: Sequence[TaxSlab],
    cess_rate: float = 0.0,
    rebate: Optional[RebateRule] = None,
) -> TaxBreakdown:
    """
    Sum the marginal tax contribution of every slab.

    Requirements:
    - Amount in a slab = clamp(income - lower, 0, upper - lower)
    - Zero-rate slabs consume income but are left out of per_slab
    - Cess is charged on the slab tax afterwards
    - A rebate rule, when it applies, overrides the whole computation to zero

    Example:
        1_200_000 over [0-4L: 0%, 4-8L: 5%, 8-12L: 10%]
        → 0 + 20_000 + 40_000 = 60_000 slab tax
        → 0 once the 1_200_000 rebate is applied
    """
    if taxable_income <= 0:
        return TaxBreakdown(
            taxable_income=taxable_income,
            slab_tax=0.0,
            cess=0.0,
            rebate=0.0,
            total_tax=0.0,
            per_slab=(),
        )

    slab_tax = 0.0
    exempt = 0.0
    per_slab: List[SlabTax] = []
    for slab in slabs:
        amount = min(max(0.0, taxable_income - slab.lower_bound), slab.width)
        if amount <= 0:
            continue

        tax = amount * slab.rate_percent / 100
        slab_tax += tax
        if slab.rate_percent == 0:
            exempt += amount
        else:
            per_slab.append(SlabTax(slab=slab, taxable_amount=amount, tax=tax))

    cess = slab_tax * cess_rate
    total = slab_tax + cess

    rebated = 0.0
    if rebate is not None and rebate.applies(taxable_income):
        rebated = total
        total = 0.0

    return TaxBreakdown(
        taxable_income=taxable_income,
        slab_tax=slab_tax,
        cess=cess,
        rebate=rebated,
        total_tax=total,
        per_slab=tuple(per_slab),
        exempt_amount=exempt,
    )


def old_regime_slabs(exemption: float) -> tuple:
    """Old regime table with the zero-rate band widened to the age exemption"""
    slabs = [TaxSlab(0, exemption, 0)]
    for slab in OLD_REGIME_SLABS[1:]:
        if slab.upper_bound <= exemption:
            continue
        slabs.append(replace(slab, lower_bound=max(slab.lower_bound, exemption)))
    return tuple(slabs)


def slabs_for(regime: TaxRegime, age: AgeBracket = AgeBracket.BELOW_60) -> tuple:
    if regime is TaxRegime.OLD:
        return old_regime_slabs(OLD_REGIME_EXEMPTIONS[age])
    elif regime is TaxRegime.NEW:
        return NEW_REGIME_SLABS
    elif regime is TaxRegime.NEW_2025:
        return NEW_2025_REGIME_SLABS
    raise InvalidInputError("regime", f"unsupported tax regime {regime!r}")


def standard_deduction(regime: TaxRegime) -> float:
    # Raised from 50,000 for FY2025-26
    return 75_000 if regime is TaxRegime.NEW_2025 else 50_000


def compute_income_tax(
    profile: TaxProfile,
    cess_rate: float = DEFAULT_CESS_RATE,
    rebate_threshold: float = SECTION_87A_THRESHOLD,
    section_80c_cap: float = SECTION_80C_CAP,
) -> IncomeTaxResult:
    """
    Annual income tax for a salaried individual under one regime.

    Old regime: standard deduction + 80C (capped) + other deductions, age-based
    exemption. New regimes: standard deduction only. The Section 87A full
    rebate is a separate rule that applies to the FY2025-26 regime only.
    """
    if profile.annual_income < 0:
        raise InvalidInputError("annual_income", "must not be negative")
    if profile.section_80c < 0:
        raise InvalidInputError("section_80c", "must not be negative")
    if profile.other_deductions < 0:
        raise InvalidInputError("other_deductions", "must not be negative")

    deductions = standard_deduction(profile.regime)
    if profile.regime is TaxRegime.OLD:
        deductions += min(profile.section_80c, section_80c_cap) + profile.other_deductions

    taxable = max(0.0, profile.annual_income - deductions)
    rebate = RebateRule(rebate_threshold) if profile.regime is TaxRegime.NEW_2025 else None
    breakdown = compute_progressive_tax(
        taxable, slabs_for(profile.regime, profile.age), cess_rate=cess_rate, rebate=rebate
    )

    income = profile.annual_income
    return IncomeTaxResult(
        regime=profile.regime,
        gross_income=income,
        deductions=deductions,
        breakdown=breakdown,
        net_income=income - breakdown.total_tax,
        effective_rate_percent=breakdown.total_tax / income * 100 if income > 0 else 0.0,
    )


def compare_regimes(profile: TaxProfile, **kwargs) -> Dict[TaxRegime, IncomeTaxResult]:
    """Evaluate the same income under every regime"""
    return {
        regime: compute_income_tax(replace(profile, regime=regime), **kwargs)
        for regime in TaxRegime
    }
