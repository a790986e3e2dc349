"""Mini README: Public statistics computed from the record store.

Structure:
    * ProjectSummary - income, expense and net for one project.
    * LedgerStats - overall totals plus the per-project breakdown.
    * compute_stats - read-only aggregation over an injected store.

Totals come from grouped sums in the store, one query per direction, so the
cost does not grow with an extra query per project. ``balance`` and ``net``
are derived here and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ProjectSummary:
    """Money raised and spent for a single project."""

    id: int
    name: str
    income: float = 0.0
    expense: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expense

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "income": self.income,
            "expense": self.expense,
        }


@dataclass(slots=True)
class LedgerStats:
    """Snapshot of the ledger totals shown on the transparency page."""

    total_income: float = 0.0
    total_expense: float = 0.0
    projects: List[ProjectSummary] = field(default_factory=list)

    @property
    def balance(self) -> float:
        return self.total_income - self.total_expense

    def as_dict(self) -> Dict[str, object]:
        """Export using the camelCase keys of the public stats endpoint."""

        return {
            "totalIncome": self.total_income,
            "totalExpense": self.total_expense,
            "balance": self.balance,
            "projects": [project.as_dict() for project in self.projects],
        }


def compute_stats(store) -> LedgerStats:
    """Aggregate the store's current incomes and expenses.

    ``store`` needs ``total_amount(kind)`` and ``project_rollup()``; the
    ``RecordStore`` raises ``StoreUnavailable`` when either query fails and
    the error is left to propagate.
    """

    total_income = store.total_amount("income")
    total_expense = store.total_amount("expense")
    projects = [
        ProjectSummary(id=project_id, name=name, income=income, expense=expense)
        for project_id, name, income, expense in store.project_rollup()
    ]
    stats = LedgerStats(total_income=total_income, total_expense=total_expense, projects=projects)
    LOGGER.debug(
        "Stats -> income: %.2f expense: %.2f balance: %.2f projects: %s",
        stats.total_income,
        stats.total_expense,
        stats.balance,
        len(stats.projects),
    )
    return stats
