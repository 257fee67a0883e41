"""Prometheus metrics for calculator usage, rejected input and payoff non-convergence"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "money_math_calculations_total",
    "Total calculations served",
    ["calculator"],
)

invalid_input_counter = Counter(
    "money_math_invalid_input_total",
    "Calculations rejected for invalid input",
    ["calculator"],
)

calculation_duration_histogram = Histogram(
    "money_math_calculation_duration_seconds",
    "Calculation latency including memoized hits",
    ["calculator"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)

# Debt payoff metrics
payoff_non_convergence_counter = Counter(
    "money_math_payoff_non_convergence_total",
    "Payoff simulations that hit the month cap",
    ["strategy"],  # avalanche | snowball
)


def record_calculation(calculator: str, duration_seconds: float) -> None:
    """Record a served calculation and its latency"""
    calculation_counter.labels(calculator=calculator).inc()
    calculation_duration_histogram.labels(calculator=calculator).observe(duration_seconds)
