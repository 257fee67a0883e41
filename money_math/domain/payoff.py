"""Debt payoff simulation - avalanche and snowball strategies"""

from typing import Dict, List, Sequence
from money_math.domain.models import (
    Debt,
    PayoffComparison,
    PayoffEvent,
    PayoffResult,
    PayoffStrategy,
    TimelinePoint,
)
from money_math.domain.exceptions import InvalidInputError

DEFAULT_MONTH_CAP = 360  # 30 years


def validate_debts(debts: Sequence[Debt], extra_monthly_payment: float) -> None:
    if extra_monthly_payment < 0:
        raise InvalidInputError("extra_monthly_payment", "must not be negative")

    seen = set()
    for debt in debts:
        if debt.id in seen:
            raise InvalidInputError("debts", f"duplicate debt id {debt.id!r}")
        seen.add(debt.id)
        if debt.balance < 0:
            raise InvalidInputError("balance", f"debt {debt.id!r} balance must not be negative")
        if debt.annual_rate_percent < 0:
            raise InvalidInputError("annual_rate_percent", f"debt {debt.id!r} rate must not be negative")
        if debt.minimum_payment <= 0:
            raise InvalidInputError("minimum_payment", f"debt {debt.id!r} minimum payment must be positive")


def prioritize(debts: Sequence[Debt], strategy: PayoffStrategy) -> List[Debt]:
    """
    Order debts for extra payments. Sorting is stable, so ties keep input order.

    - snowball: smallest balance first
    - avalanche: highest interest rate first
    """
    if strategy is PayoffStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.balance)
    elif strategy is PayoffStrategy.AVALANCHE:
        return sorted(debts, key=lambda d: d.annual_rate_percent, reverse=True)
    raise InvalidInputError("strategy", f"unsupported payoff strategy {strategy!r}")


def simulate_payoff(
    debts: Sequence[Debt],
    extra_monthly_payment: float,
    strategy: PayoffStrategy,
    month_cap: int = DEFAULT_MONTH_CAP,
) -> PayoffResult:
    """
    Simulate month-by-month repayment until every debt is cleared.

    Each month:
    1. Interest accrues on every active balance at rate/12
    2. Each active debt gets its minimum payment, capped at balance + interest;
       the principal part is minimum - interest, floored at 0 (unpaid interest
       is not capitalized)
    3. The pool (all original minimums + extra - minimum payments made) goes
       to the active debts in priority order, so minimums freed by cleared or
       nearly cleared debts roll into the pool and nothing is left unspent
       while debt remains
    4. Debts at <= 0 are removed and their payoff month recorded

    Stops when no debt is active or month_cap is reached. Hitting the cap with
    debt left is reported via converged=False, never silently truncated.
    """
    validate_debts(debts, extra_monthly_payment)
    if month_cap <= 0:
        raise InvalidInputError("month_cap", "must be greater than zero")

    ordered = prioritize(debts, strategy)
    balances: Dict[str, float] = {d.id: float(d.balance) for d in ordered}
    active = [d for d in ordered if balances[d.id] > 0]
    budget = sum(d.minimum_payment for d in debts) + extra_monthly_payment

    payoff_order: List[PayoffEvent] = []
    timeline: List[TimelinePoint] = []
    total_interest = 0.0
    month = 0

    while active and month < month_cap:
        month += 1
        pool = budget

        # Minimum payments on every active debt
        for debt in active:
            before = balances[debt.id]
            interest = before * debt.annual_rate_percent / 100 / 12
            total_interest += interest
            principal = max(0.0, debt.minimum_payment - interest)
            balances[debt.id] = max(0.0, before - principal)
            # A minimum larger than what is owed only pays what is owed
            pool -= min(debt.minimum_payment, before + interest)

        # Whatever is left goes to the highest-priority debt still owing,
        # spilling over to the next one when that debt is cleared
        for debt in active:
            if pool <= 0:
                break
            applied = min(pool, balances[debt.id])
            balances[debt.id] -= applied
            pool -= applied

        for debt in active:
            if balances[debt.id] <= 0:
                payoff_order.append(PayoffEvent(debt_id=debt.id, month_paid_off=month))
        active = [d for d in active if balances[d.id] > 0]

        timeline.append(
            TimelinePoint(
                month=month,
                total_remaining_balance=sum(balances[d.id] for d in active),
            )
        )

    return PayoffResult(
        strategy=strategy,
        months_to_payoff=month,
        total_interest_paid=total_interest,
        payoff_order=tuple(payoff_order),
        timeline=tuple(timeline),
        converged=not active,
    )


def compare_with_baseline(
    debts: Sequence[Debt],
    extra_monthly_payment: float,
    strategy: PayoffStrategy,
    month_cap: int = DEFAULT_MONTH_CAP,
) -> PayoffComparison:
    """
    Time and interest saved by the extra payment.

    The baseline is the same simulation with zero extra payment, so both runs
    share identical accrual timing.
    """
    with_extra = simulate_payoff(debts, extra_monthly_payment, strategy, month_cap)
    baseline = simulate_payoff(debts, 0.0, strategy, month_cap)

    return PayoffComparison(
        with_extra=with_extra,
        baseline=baseline,
        months_saved=max(0, baseline.months_to_payoff - with_extra.months_to_payoff),
        interest_saved=max(0.0, baseline.total_interest_paid - with_extra.total_interest_paid),
    )
