"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from money_math.domain.models import Debt, TaxSlab
from money_math.calculators import service


@pytest.fixture
def fresh_caches() -> Generator[None, None, None]:
    """Start each calculator test with empty memoization caches"""
    service.clear_caches()
    yield
    service.clear_caches()


@pytest.fixture
def sample_debts() -> list[Debt]:
    """Two credit cards and a personal loan, as pre-filled on the payoff page"""
    return [
        Debt(id="1", name="Credit Card 1", balance=50_000, annual_rate_percent=24, minimum_payment=2_500),
        Debt(id="2", name="Personal Loan", balance=200_000, annual_rate_percent=15, minimum_payment=8_000),
        Debt(id="3", name="Credit Card 2", balance=30_000, annual_rate_percent=28, minimum_payment=1_500),
    ]


@pytest.fixture
def diverging_debts() -> list[Debt]:
    """Snowball and avalanche pick different targets for these"""
    return [
        Debt(id="card", name="Store Card", balance=20_000, annual_rate_percent=12, minimum_payment=1_000),
        Debt(id="loan", name="Payday Loan", balance=100_000, annual_rate_percent=30, minimum_payment=3_000),
    ]


@pytest.fixture
def three_slab_table() -> list[TaxSlab]:
    """First three FY2025-26 new regime slabs"""
    return [
        TaxSlab(0, 400_000, 0),
        TaxSlab(400_000, 800_000, 5),
        TaxSlab(800_000, 1_200_000, 10),
    ]
