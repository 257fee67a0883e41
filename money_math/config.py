"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from money_math.domain.payoff import DEFAULT_MONTH_CAP
from money_math.domain.planning import DEFAULT_EMERGENCY_HORIZON_MONTHS, DEFAULT_RETIREMENT_YEARS
from money_math.domain.tax import DEFAULT_CESS_RATE, SECTION_80C_CAP, SECTION_87A_THRESHOLD


class Settings(BaseSettings):
    """Calculator configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="MONEY_MATH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "money-math"
    log_level: str = "INFO"

    # Memoization (entries per calculator)
    cache_size: int = 256

    # Debt payoff
    payoff_month_cap: int = DEFAULT_MONTH_CAP

    # Income tax, defaulting to the statutory values the engines use
    cess_rate: float = DEFAULT_CESS_RATE
    rebate_threshold: float = SECTION_87A_THRESHOLD
    section_80c_cap: float = SECTION_80C_CAP

    # Deposits
    fd_withholding_rate: float = 0.10  # TDS on FD interest

    # Planning
    retirement_years: int = DEFAULT_RETIREMENT_YEARS
    emergency_fund_horizon_months: int = DEFAULT_EMERGENCY_HORIZON_MONTHS


settings = Settings()
