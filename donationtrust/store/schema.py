"""Mini README: SQLAlchemy table mappings for the donation ledger.

Structure:
    * Base - declarative base shared by every mapped table.
    * AdminRow, CategoryRow, ProjectRow, IncomeRow, ExpenseRow - one class per table.

Table and column names match the historical SQLite layout (``admin``,
``categories``, ``projects``, ``incomes``, ``expenses``) so an existing
``donations.db`` can be opened in place.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class AdminRow(Base):
    """Administrative account allowed to edit ledger records."""

    __tablename__ = "admin"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash

    def __repr__(self) -> str:
        return f"<AdminRow {self.username}>"


class CategoryRow(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<CategoryRow {self.name}>"


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    description = Column(Text)

    category = relationship("CategoryRow")

    def __repr__(self) -> str:
        return f"<ProjectRow {self.name}>"


class IncomeRow(Base):
    __tablename__ = "incomes"
    __table_args__ = (CheckConstraint("amount >= 0", name="ck_incomes_amount_non_negative"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    receipt_number = Column(String(100), unique=True, nullable=False)
    amount = Column(Float, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    donor_name = Column(String(200))
    date = Column(Date, nullable=False)
    notes = Column(Text)

    project = relationship("ProjectRow")

    def __repr__(self) -> str:
        return f"<IncomeRow {self.receipt_number} {self.amount}>"


class ExpenseRow(Base):
    __tablename__ = "expenses"
    __table_args__ = (CheckConstraint("amount >= 0", name="ck_expenses_amount_non_negative"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Float, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False)

    project = relationship("ProjectRow")

    def __repr__(self) -> str:
        return f"<ExpenseRow {self.description} {self.amount}>"
