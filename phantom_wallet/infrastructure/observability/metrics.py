"""Prometheus metrics for monitoring lending, savings, and ledger webhook performance"""

from decimal import Decimal
from prometheus_client import Counter, Histogram

# Loan metrics
eligibility_counter = Counter(
    "phantom_loan_eligibility_total",
    "Loan eligibility checks",
    ["outcome"],  # eligible | ineligible
)

loan_disbursed_counter = Counter(
    "phantom_loan_disbursed_total",
    "Loans disbursed",
    ["tier"],  # basic | plus | vip
)

loan_amount_histogram = Histogram(
    "phantom_loan_amount",
    "Principal of disbursed loans",
    buckets=[1_000, 5_000, 10_000, 25_000, 50_000, 100_000, 250_000],
)

loan_repayment_counter = Counter(
    "phantom_loan_repayment_total",
    "Loan repayments applied",
    ["outcome"],  # partial | repaid
)

# Savings metrics
savings_opened_counter = Counter(
    "phantom_savings_opened_total",
    "Savings accounts opened",
    ["lock_period"],  # 1 | 3 | 6 | 12
)

savings_withdrawal_counter = Counter(
    "phantom_savings_withdrawal_total",
    "Savings withdrawals",
    ["kind"],  # matured | early | recovery
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Revenue ledger webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

revenue_dropped_counter = Counter(
    "phantom_revenue_events_dropped_total",
    "Revenue events abandoned after ledger delivery failed",
    ["category"],
)

# Wallet API metrics
wallet_failures_counter = Counter(
    "wallet_api_failures_total",
    "Failed wallet API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_eligibility(eligible: bool) -> None:
    eligibility_counter.labels(outcome="eligible" if eligible else "ineligible").inc()


def record_disbursement(tier: str, amount: Decimal) -> None:
    """Record loan issuance for monitoring tier mix and principal distribution"""
    loan_disbursed_counter.labels(tier=tier).inc()
    loan_amount_histogram.observe(float(amount))
