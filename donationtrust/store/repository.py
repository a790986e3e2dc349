"""Mini README: Repository over the ledger tables.

Structure:
    * AdminAccount - detached view of an admin row, including its hash.
    * RecordStore - list/create/update per entity plus the grouped sums used
      by the stats aggregation and the admin lookups used by the gate.

Each public method runs in its own session opened from the injected
factory. Joins that resolve display names (category for projects, project
for incomes and expenses) live here and nowhere else. Write failures are
translated into the ledger error taxonomy:

    * uniqueness or foreign-key failures -> ``ConstraintViolation``
    * unknown id on update -> ``NotFound``
    * driver or connection failures -> ``StoreUnavailable``

The session is rolled back on every failure, so a rejected write leaves the
stored data as it was.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..errors import ConstraintViolation, NotFound, StoreUnavailable
from ..ledger.records import MAX_AMOUNT, MAX_RECORD_ID, Category, Expense, Income, Project, parse_date
from ..logging_utils import get_logger
from .database import create_database_engine, create_session_factory, init_database
from .schema import AdminRow, CategoryRow, ExpenseRow, IncomeRow, ProjectRow

LOGGER = get_logger(__name__)

ProjectTotals = Tuple[int, str, float, float]


@dataclass(slots=True)
class AdminAccount:
    """Admin identity as stored, password hash included."""

    id: int
    username: str
    password_hash: str


def _income_record(row: IncomeRow, project_name: Optional[str]) -> Income:
    return Income(
        id=row.id,
        receipt_number=row.receipt_number,
        amount=row.amount,
        project_id=row.project_id,
        date=row.date,
        donor_name=row.donor_name,
        notes=row.notes,
        project_name=project_name,
    )


def _expense_record(row: ExpenseRow, project_name: Optional[str]) -> Expense:
    return Expense(
        id=row.id,
        amount=row.amount,
        project_id=row.project_id,
        description=row.description,
        date=row.date,
        project_name=project_name,
    )


def _project_record(row: ProjectRow, category_name: Optional[str]) -> Project:
    return Project(
        id=row.id,
        name=row.name,
        category_id=row.category_id,
        description=row.description,
        category_name=category_name,
    )


def _non_negative(amount: object) -> float:
    value = float(amount)
    if not math.isfinite(value) or value < 0:
        raise ConstraintViolation("Amount must be zero or greater.")
    if value > MAX_AMOUNT:
        raise ConstraintViolation(f"Amount must not exceed {MAX_AMOUNT:,.0f}.")
    return value


class RecordStore:
    """Repository handing out detached ledger records."""

    _AMOUNT_TABLES: Dict[str, Type] = {"income": IncomeRow, "expense": ExpenseRow}

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str) -> "RecordStore":
        """Build a store for ``database_url``, creating missing tables."""

        engine = create_database_engine(database_url)
        init_database(engine)
        return cls(create_session_factory(engine))

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as error:
            session.rollback()
            LOGGER.warning("Write rejected by constraint: %s", error.orig)
            raise ConstraintViolation(str(error.orig)) from error
        except SQLAlchemyError as error:
            session.rollback()
            LOGGER.error("Store failure: %s", error)
            raise StoreUnavailable(f"Record store failure: {error}") from error
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _require(session: Session, model: Type, record_id: int, label: str):
        """Return the row being updated or raise ``NotFound``."""

        row = session.get(model, record_id) if 1 <= record_id <= MAX_RECORD_ID else None
        if row is None:
            raise NotFound(f"{label} {record_id} not found")
        return row

    @staticmethod
    def _require_reference(session: Session, model: Type, record_id: int, label: str):
        """Return the row a foreign key points at or raise ``ConstraintViolation``."""

        row = session.get(model, record_id) if 1 <= record_id <= MAX_RECORD_ID else None
        if row is None:
            raise ConstraintViolation(f"{label} {record_id} does not exist")
        return row

    # Categories -----------------------------------------------------------

    def list_categories(self) -> List[Category]:
        with self._transaction() as session:
            rows = session.scalars(select(CategoryRow).order_by(CategoryRow.id)).all()
            LOGGER.debug("Listing %s categories", len(rows))
            return [Category(id=row.id, name=row.name) for row in rows]

    def create_category(self, name: str) -> Category:
        with self._transaction() as session:
            row = CategoryRow(name=name)
            session.add(row)
            session.flush()
            LOGGER.info("Created category %s (%s)", row.id, name)
            return Category(id=row.id, name=row.name)

    def update_category(self, category_id: int, name: str) -> Category:
        with self._transaction() as session:
            row = self._require(session, CategoryRow, category_id, "Category")
            row.name = name
            session.flush()
            LOGGER.info("Renamed category %s to %s", category_id, name)
            return Category(id=row.id, name=row.name)

    # Projects -------------------------------------------------------------

    def list_projects(self) -> List[Project]:
        """Return projects with their category name resolved."""

        statement = (
            select(ProjectRow, CategoryRow.name)
            .join(CategoryRow, ProjectRow.category_id == CategoryRow.id)
            .order_by(ProjectRow.id)
        )
        with self._transaction() as session:
            return [_project_record(row, category_name) for row, category_name in session.execute(statement)]

    def create_project(self, name: str, category_id: int, description: Optional[str] = None) -> Project:
        with self._transaction() as session:
            category = self._require_reference(session, CategoryRow, category_id, "Category")
            row = ProjectRow(name=name, category_id=category.id, description=description)
            session.add(row)
            session.flush()
            LOGGER.info("Created project %s (%s) in category %s", row.id, name, category.name)
            return _project_record(row, category.name)

    def update_project(
        self,
        project_id: int,
        name: str,
        category_id: int,
        description: Optional[str] = None,
    ) -> Project:
        with self._transaction() as session:
            row = self._require(session, ProjectRow, project_id, "Project")
            category = self._require_reference(session, CategoryRow, category_id, "Category")
            row.name = name
            row.category_id = category.id
            row.description = description
            session.flush()
            LOGGER.info("Updated project %s", project_id)
            return _project_record(row, category.name)

    # Incomes --------------------------------------------------------------

    def list_incomes(self) -> List[Income]:
        """Return incomes, newest first, with their project name resolved."""

        statement = (
            select(IncomeRow, ProjectRow.name)
            .join(ProjectRow, IncomeRow.project_id == ProjectRow.id)
            .order_by(IncomeRow.date.desc(), IncomeRow.id.desc())
        )
        with self._transaction() as session:
            return [_income_record(row, project_name) for row, project_name in session.execute(statement)]

    def create_income(
        self,
        receipt_number: str,
        amount: float,
        project_id: int,
        date: object,
        donor_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Income:
        amount = _non_negative(amount)
        occurred_on = parse_date(date)
        with self._transaction() as session:
            project = self._require_reference(session, ProjectRow, project_id, "Project")
            row = IncomeRow(
                receipt_number=receipt_number,
                amount=amount,
                project_id=project.id,
                donor_name=donor_name,
                date=occurred_on,
                notes=notes,
            )
            session.add(row)
            session.flush()
            LOGGER.info("Recorded income %s (%s) for project %s", receipt_number, amount, project.id)
            return _income_record(row, project.name)

    def update_income(
        self,
        income_id: int,
        receipt_number: str,
        amount: float,
        project_id: int,
        date: object,
        donor_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Income:
        amount = _non_negative(amount)
        occurred_on = parse_date(date)
        with self._transaction() as session:
            row = self._require(session, IncomeRow, income_id, "Income")
            project = self._require_reference(session, ProjectRow, project_id, "Project")
            row.receipt_number = receipt_number
            row.amount = amount
            row.project_id = project.id
            row.donor_name = donor_name
            row.date = occurred_on
            row.notes = notes
            session.flush()
            LOGGER.info("Updated income %s", income_id)
            return _income_record(row, project.name)

    # Expenses -------------------------------------------------------------

    def list_expenses(self) -> List[Expense]:
        """Return expenses, newest first, with their project name resolved."""

        statement = (
            select(ExpenseRow, ProjectRow.name)
            .join(ProjectRow, ExpenseRow.project_id == ProjectRow.id)
            .order_by(ExpenseRow.date.desc(), ExpenseRow.id.desc())
        )
        with self._transaction() as session:
            return [_expense_record(row, project_name) for row, project_name in session.execute(statement)]

    def create_expense(self, amount: float, project_id: int, description: str, date: object) -> Expense:
        amount = _non_negative(amount)
        occurred_on = parse_date(date)
        with self._transaction() as session:
            project = self._require_reference(session, ProjectRow, project_id, "Project")
            row = ExpenseRow(
                amount=amount,
                project_id=project.id,
                description=description,
                date=occurred_on,
            )
            session.add(row)
            session.flush()
            LOGGER.info("Recorded expense %s (%s) for project %s", row.id, amount, project.id)
            return _expense_record(row, project.name)

    def update_expense(
        self,
        expense_id: int,
        amount: float,
        project_id: int,
        description: str,
        date: object,
    ) -> Expense:
        amount = _non_negative(amount)
        occurred_on = parse_date(date)
        with self._transaction() as session:
            row = self._require(session, ExpenseRow, expense_id, "Expense")
            project = self._require_reference(session, ProjectRow, project_id, "Project")
            row.amount = amount
            row.project_id = project.id
            row.description = description
            row.date = occurred_on
            session.flush()
            LOGGER.info("Updated expense %s", expense_id)
            return _expense_record(row, project.name)

    # Aggregates -----------------------------------------------------------

    def total_amount(self, kind: str) -> float:
        """Sum every ``amount`` of the income or expense table; 0 when empty."""

        model = self._AMOUNT_TABLES.get(kind)
        if model is None:
            raise ValueError(f"Unsupported amount table: {kind}")
        with self._transaction() as session:
            total = session.execute(select(func.coalesce(func.sum(model.amount), 0.0))).scalar_one()
            return float(total)

    def project_rollup(self) -> List[ProjectTotals]:
        """Return ``(id, name, income, expense)`` for every project.

        Income and expense are summed in separate grouped subqueries before
        the outer join, so a project with several incomes and several
        expenses is not double counted.
        """

        income_totals = (
            select(IncomeRow.project_id, func.sum(IncomeRow.amount).label("total"))
            .group_by(IncomeRow.project_id)
            .subquery()
        )
        expense_totals = (
            select(ExpenseRow.project_id, func.sum(ExpenseRow.amount).label("total"))
            .group_by(ExpenseRow.project_id)
            .subquery()
        )
        statement = (
            select(
                ProjectRow.id,
                ProjectRow.name,
                func.coalesce(income_totals.c.total, 0.0),
                func.coalesce(expense_totals.c.total, 0.0),
            )
            .select_from(ProjectRow)
            .outerjoin(income_totals, income_totals.c.project_id == ProjectRow.id)
            .outerjoin(expense_totals, expense_totals.c.project_id == ProjectRow.id)
            .order_by(ProjectRow.id)
        )
        with self._transaction() as session:
            return [
                (project_id, name, float(income), float(expense))
                for project_id, name, income, expense in session.execute(statement)
            ]

    # Admin accounts -------------------------------------------------------

    def get_admin_by_username(self, username: str) -> Optional[AdminAccount]:
        with self._transaction() as session:
            row = session.scalars(select(AdminRow).where(AdminRow.username == username)).first()
            if row is None:
                return None
            return AdminAccount(id=row.id, username=row.username, password_hash=row.password)

    def add_admin(self, username: str, password_hash: str) -> AdminAccount:
        with self._transaction() as session:
            row = AdminRow(username=username, password=password_hash)
            session.add(row)
            session.flush()
            LOGGER.info("Created admin account %s", username)
            return AdminAccount(id=row.id, username=row.username, password_hash=row.password)
