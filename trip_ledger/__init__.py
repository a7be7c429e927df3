"""
Trip Ledger

Multi-currency trip expense balances, settlements and category breakdowns.
"""

from trip_ledger.analytics import aggregate_by_category, pie_slices
from trip_ledger.currency import REPORTING_CURRENCY, normalize, to_reporting, trip_total
from trip_ledger.settlement import compute_settlements
from trip_ledger.splitter import compute_balances, equal_share

__all__ = [
    "REPORTING_CURRENCY",
    "aggregate_by_category",
    "compute_balances",
    "compute_settlements",
    "equal_share",
    "normalize",
    "pie_slices",
    "to_reporting",
    "trip_total",
]
