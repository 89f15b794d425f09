"""Prometheus metrics for the invoicing core.

Exposes:
- Derived field writes and skipped writes during recompute
- Statement generation outcomes
- Rows per generated statement

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import Counter, Histogram

# Recompute metrics
recompute_writes_total = Counter(
    "invoicing_recompute_writes_total",
    "Derived field writes performed by recompute",
    ["field"],  # extra_vat, line_vat, line_total, sub_total, total_amount, total_in_words
)

recompute_skips_total = Counter(
    "invoicing_recompute_skips_total",
    "Derived field writes skipped because the value was unchanged",
    ["field"],
)

# Statement metrics
statements_generated_total = Counter(
    "invoicing_statements_generated_total",
    "Statement generation requests",
    ["status"],  # success, rejected
)

statement_rows = Histogram(
    "invoicing_statement_rows",
    "Passenger rows per generated statement",
    buckets=(1, 5, 10, 25, 50, 100, 250, 500),
)
