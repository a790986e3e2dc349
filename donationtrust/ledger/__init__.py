"""Mini README: Ledger records and the statistics built from them.

``records`` defines the detached record types handed out by the store and
``aggregation`` turns the stored amounts into the public totals.
"""

from .aggregation import LedgerStats, ProjectSummary, compute_stats
from .records import (
    ANONYMOUS_DONOR,
    MAX_AMOUNT,
    MAX_RECORD_ID,
    Category,
    Expense,
    Income,
    Project,
    parse_date,
)

__all__ = [
    "ANONYMOUS_DONOR",
    "MAX_AMOUNT",
    "MAX_RECORD_ID",
    "Category",
    "Expense",
    "Income",
    "LedgerStats",
    "Project",
    "ProjectSummary",
    "compute_stats",
    "parse_date",
]
