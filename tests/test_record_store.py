"""Mini README: Tests for the SQLAlchemy-backed record store.

Structure:
    * test_projects_embed_category_name - listings carry the category name.
    * test_incomes_listed_newest_first_with_project_name - date-descending incomes with project and donor display.
    * test_expenses_listed_newest_first - date-descending expenses with ISO dates.
    * test_duplicate_receipt_number_is_rejected_without_changes - unique receipts, nothing written on failure.
    * test_update_to_existing_receipt_number_is_rejected - updates respect receipt uniqueness.
    * test_duplicate_category_name_is_rejected - unique category names.
    * test_foreign_keys_must_exist - projects and transactions need existing parents.
    * test_negative_amounts_are_rejected - amounts below zero are refused.
    * test_updates_replace_fields_and_resolve_names - full-record updates with resolved names.
    * test_updating_unknown_ids_raises_not_found - unknown ids raise NotFound.
    * test_amounts_must_be_finite_and_within_ceiling - infinite and oversized amounts are refused.
    * test_ids_outside_the_integer_range_are_treated_as_missing - oversized ids never reach the driver.

Covers the list-with-relations joins, date ordering, and the translation of
unique, foreign-key and missing-id failures into ledger errors.
"""

from __future__ import annotations

from datetime import date

import pytest

from donationtrust.errors import ConstraintViolation, NotFound
from donationtrust.ledger import MAX_AMOUNT
from donationtrust.store import RecordStore


def _seed_project(store: RecordStore, name: str = "Flood Relief") -> int:
    category = store.create_category("Relief")
    return store.create_project(name, category.id, "Emergency supplies").id


def test_projects_embed_category_name(store: RecordStore) -> None:
    """Project listings should carry the name of their category."""

    category = store.create_category("Education")
    created = store.create_project("School Books", category.id, "Books for pupils")

    projects = store.list_projects()
    assert [project.id for project in projects] == [created.id]
    assert projects[0].category_name == "Education"
    assert projects[0].description == "Books for pupils"


def test_incomes_listed_newest_first_with_project_name(store: RecordStore) -> None:
    """Incomes come back by date descending with project and donor display resolved."""

    project_id = _seed_project(store)
    store.create_income("R-001", 100, project_id, date(2024, 1, 1))
    store.create_income("R-002", 50, project_id, "2024-03-01", donor_name="Amina")
    store.create_income("R-003", 75, project_id, date(2024, 2, 1))

    incomes = store.list_incomes()
    assert [income.receipt_number for income in incomes] == ["R-002", "R-003", "R-001"]
    assert {income.project_name for income in incomes} == {"Flood Relief"}
    assert incomes[0].donor_display == "Amina"
    assert incomes[1].donor_display == "Anonymous"


def test_expenses_listed_newest_first(store: RecordStore) -> None:
    """Expenses come back by date descending with ISO dates in their JSON shape."""

    project_id = _seed_project(store)
    store.create_expense(20, project_id, "Tarps", date(2024, 1, 5))
    store.create_expense(30, project_id, "Water", date(2024, 1, 9))

    expenses = store.list_expenses()
    assert [expense.description for expense in expenses] == ["Water", "Tarps"]
    assert expenses[0].as_dict()["date"] == "2024-01-09"


def test_duplicate_receipt_number_is_rejected_without_changes(store: RecordStore) -> None:
    """A second income with the same receipt must fail and leave data intact."""

    project_id = _seed_project(store)
    store.create_income("R-001", 500, project_id, date(2024, 1, 1))

    with pytest.raises(ConstraintViolation):
        store.create_income("R-001", 900, project_id, date(2024, 1, 2))

    incomes = store.list_incomes()
    assert len(incomes) == 1
    assert incomes[0].amount == pytest.approx(500)


def test_update_to_existing_receipt_number_is_rejected(store: RecordStore) -> None:
    """Renaming a receipt onto an existing one fails and leaves both rows intact."""

    project_id = _seed_project(store)
    store.create_income("R-001", 10, project_id, date(2024, 1, 1))
    second = store.create_income("R-002", 20, project_id, date(2024, 1, 2))

    with pytest.raises(ConstraintViolation):
        store.update_income(second.id, "R-001", 20, project_id, date(2024, 1, 2))

    assert sorted(income.receipt_number for income in store.list_incomes()) == ["R-001", "R-002"]


def test_duplicate_category_name_is_rejected(store: RecordStore) -> None:
    """Category names are unique."""

    store.create_category("Relief")

    with pytest.raises(ConstraintViolation):
        store.create_category("Relief")
    assert len(store.list_categories()) == 1


def test_foreign_keys_must_exist(store: RecordStore) -> None:
    """Projects need a category and transactions need a project."""

    with pytest.raises(ConstraintViolation):
        store.create_project("Orphan", 999, None)
    with pytest.raises(ConstraintViolation):
        store.create_income("R-404", 10, 999, date(2024, 1, 1))
    with pytest.raises(ConstraintViolation):
        store.create_expense(10, 999, "Nothing", date(2024, 1, 1))
    assert store.list_projects() == []


def test_negative_amounts_are_rejected(store: RecordStore) -> None:
    """Incomes and expenses below zero never reach the table."""

    project_id = _seed_project(store)

    with pytest.raises(ConstraintViolation):
        store.create_income("R-NEG", -1, project_id, date(2024, 1, 1))
    with pytest.raises(ConstraintViolation):
        store.create_expense(-5, project_id, "Refund", date(2024, 1, 1))


def test_updates_replace_fields_and_resolve_names(store: RecordStore) -> None:
    """Updates overwrite every field and return the freshly resolved names."""

    relief = store.create_category("Relief")
    health = store.create_category("Health")
    project = store.create_project("Clinic", relief.id, None)
    expense = store.create_expense(40, project.id, "Bandages", date(2024, 4, 1))

    moved = store.update_project(project.id, "Mobile Clinic", health.id, "On wheels")
    renamed = store.update_category(relief.id, "Disaster Relief")
    changed = store.update_expense(expense.id, 45, project.id, "Bandages and gauze", date(2024, 4, 2))

    assert moved.category_name == "Health"
    assert renamed.name == "Disaster Relief"
    assert changed.project_name == "Mobile Clinic"
    assert changed.amount == pytest.approx(45)


def test_updating_unknown_ids_raises_not_found(store: RecordStore) -> None:
    """Updating an id that was never stored raises NotFound."""

    project_id = _seed_project(store)

    with pytest.raises(NotFound):
        store.update_category(42, "Ghost")
    with pytest.raises(NotFound):
        store.update_income(42, "R-042", 1, project_id, date(2024, 1, 1))
    with pytest.raises(NotFound):
        store.update_expense(42, 1, project_id, "Ghost", date(2024, 1, 1))


def test_amounts_must_be_finite_and_within_ceiling(store: RecordStore) -> None:
    """Infinite, NaN or oversized amounts are refused so the stored sums stay finite."""

    project_id = _seed_project(store)

    for amount in (float("inf"), float("nan"), MAX_AMOUNT * 10):
        with pytest.raises(ConstraintViolation):
            store.create_income(f"R-{amount}", amount, project_id, date(2024, 1, 1))
        with pytest.raises(ConstraintViolation):
            store.create_expense(amount, project_id, "Too much", date(2024, 1, 1))
    store.create_income("R-MAX", MAX_AMOUNT, project_id, date(2024, 1, 1))

    assert [income.receipt_number for income in store.list_incomes()] == ["R-MAX"]
    assert store.list_expenses() == []


def test_ids_outside_the_integer_range_are_treated_as_missing(store: RecordStore) -> None:
    """Ids too large for the database report NotFound or a missing reference."""

    project_id = _seed_project(store)
    huge = 2**70

    with pytest.raises(NotFound):
        store.update_category(huge, "Ghost")
    with pytest.raises(NotFound):
        store.update_expense(0, 1, project_id, "Ghost", date(2024, 1, 1))
    with pytest.raises(ConstraintViolation):
        store.create_project("Orphan", huge, None)
    with pytest.raises(ConstraintViolation):
        store.create_income("R-HUGE", 1, huge, date(2024, 1, 1))
