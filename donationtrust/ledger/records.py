"""Mini README: Plain record types handed out by the record store.

Structure:
    * Category, Project, Income, Expense - dataclasses mirroring stored rows,
      with the related display name resolved where the listing embeds it.
    * parse_date - ISO date coercion shared by the store and the web schemas.

Records are detached snapshots: the store builds them from ORM rows inside a
session and returns them after the session closes, so callers never hold
live database objects. ``as_dict`` produces the JSON shape of the HTTP API.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional

ANONYMOUS_DONOR = "Anonymous"
# Largest single amount accepted; keeps every SUM finite.
MAX_AMOUNT = 1e12
# SQLite INTEGER range.
MAX_RECORD_ID = 2**63 - 1


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")


@dataclass(slots=True)
class Category:
    """Grouping label for projects."""

    id: int
    name: str

    def as_dict(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name}


@dataclass(slots=True)
class Project:
    """Fundraising project belonging to a category."""

    id: int
    name: str
    category_id: int
    description: Optional[str] = None
    category_name: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "category_id": self.category_id,
            "description": self.description,
            "category_name": self.category_name,
        }


@dataclass(slots=True)
class Income:
    """A donation received for a project, identified publicly by its receipt."""

    id: int
    receipt_number: str
    amount: float
    project_id: int
    date: date
    donor_name: Optional[str] = None
    notes: Optional[str] = None
    project_name: Optional[str] = None

    @property
    def donor_display(self) -> str:
        """Donor name as shown publicly; blank names read as anonymous."""

        return self.donor_name or ANONYMOUS_DONOR

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "receipt_number": self.receipt_number,
            "amount": self.amount,
            "project_id": self.project_id,
            "project_name": self.project_name,
            "donor_name": self.donor_name,
            "date": self.date.isoformat(),
            "notes": self.notes,
        }


@dataclass(slots=True)
class Expense:
    """Money spent on a project."""

    id: int
    amount: float
    project_id: int
    description: str
    date: date
    project_name: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "amount": self.amount,
            "project_id": self.project_id,
            "project_name": self.project_name,
            "description": self.description,
            "date": self.date.isoformat(),
        }
