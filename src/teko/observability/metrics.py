"""Prometheus metrics for the Teko faucet client.

Metrics:
- teko_mint_requests_total: Counter of mint requests by token and status
- teko_transactions_total: Counter of confirmed transactions by receipt status
- teko_retry_attempts_total: Counter of failed attempts seen by the retry policy
- teko_faucet_runs_total: Counter of orchestrated faucet runs by result
- teko_transaction_duration_seconds: Histogram of submit-to-receipt duration
"""

from prometheus_client import Counter, Histogram

# Counters
MINT_REQUESTS = Counter(
    "teko_mint_requests_total",
    "Total number of faucet mint requests",
    ["token", "status"],
)

TRANSACTIONS = Counter(
    "teko_transactions_total",
    "Total number of confirmed transactions",
    ["status"],
)

RETRY_ATTEMPTS = Counter(
    "teko_retry_attempts_total",
    "Failed attempts observed by the retry policy",
    ["outcome"],
)

FAUCET_RUNS = Counter(
    "teko_faucet_runs_total",
    "Total number of faucet runs",
    ["result"],
)

# Histograms
TRANSACTION_DURATION = Histogram(
    "teko_transaction_duration_seconds",
    "Blockchain transaction duration",
    ["operation"],
    buckets=(1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)
