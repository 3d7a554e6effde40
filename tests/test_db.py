import sqlite3
from datetime import date, datetime

import pytest

from expense_tracker.core.models import EXPENSE, INCOME, MAX_AMOUNT
from expense_tracker.database import (
    add_transaction,
    delete_transaction,
    find_transaction,
    find_user_by_id,
    insert_user,
    list_transactions,
)
from expense_tracker.errors import Forbidden, NotFound, ValidationError


def _seed_users(db_path):
    alice = insert_user(db_path, "Alice", "alice@example.com", "hash")
    bob = insert_user(db_path, "Bob", "bob@example.com", "hash")
    return alice, bob


def test_add_and_list_sorted_newest_first(tmp_path):
    db_path = str(tmp_path / "txs.db")
    alice, bob = _seed_users(db_path)

    add_transaction(db_path, EXPENSE, alice.id, "Rent", 900, "2024-01-01")
    add_transaction(db_path, EXPENSE, alice.id, "Food", 50, date(2024, 3, 1))
    add_transaction(db_path, EXPENSE, alice.id, "Coffee", 4.5, datetime(2024, 3, 1))
    add_transaction(db_path, EXPENSE, alice.id, "Fuel", 60, "2024-02-10T08:30:00")
    add_transaction(db_path, EXPENSE, bob.id, "Books", 30, "2024-05-01")
    add_transaction(db_path, INCOME, alice.id, "Salary", 3000, "2024-03-31")

    expenses = list_transactions(db_path, EXPENSE, alice.id)
    # equal dates keep insertion order
    assert [tx.label for tx in expenses] == ["Food", "Coffee", "Fuel", "Rent"]
    assert all(tx.user_id == alice.id for tx in expenses)
    assert all(tx.kind is EXPENSE for tx in expenses)

    incomes = list_transactions(db_path, INCOME, alice.id)
    assert [(tx.label, tx.amount) for tx in incomes] == [("Salary", 3000.0)]


def test_add_generates_id_and_timestamps(tmp_path):
    db_path = str(tmp_path / "txs.db")
    alice, _ = _seed_users(db_path)

    tx = add_transaction(db_path, INCOME, alice.id, "  Freelance ", 0, "2024-01-01", icon="laptop")

    assert tx.id is not None
    assert tx.label == "Freelance"
    assert tx.amount == 0.0
    assert tx.icon == "laptop"
    assert tx.date == datetime(2024, 1, 1)
    assert tx.created_at is not None and tx.updated_at is not None
    assert find_transaction(db_path, INCOME, tx.id) == tx
    assert find_transaction(db_path, EXPENSE, tx.id) is None


@pytest.mark.parametrize(
    "label, amount, when",
    [
        ("", 10, "2024-01-01"),
        ("Food", None, "2024-01-01"),
        ("Food", 10, None),
        ("Food", -1, "2024-01-01"),
        ("Food", float("nan"), "2024-01-01"),
        ("Food", "ten", "2024-01-01"),
        ("Food", True, "2024-01-01"),
        ("Food", 1e308, "2024-01-01"),
        ("Food", 10, "not-a-date"),
    ],
)
def test_add_rejects_invalid_input(tmp_path, label, amount, when):
    db_path = str(tmp_path / "txs.db")
    alice, _ = _seed_users(db_path)

    with pytest.raises(ValidationError):
        add_transaction(db_path, EXPENSE, alice.id, label, amount, when)
    assert list_transactions(db_path, EXPENSE, alice.id) == []


def test_add_requires_existing_owner(tmp_path):
    db_path = str(tmp_path / "txs.db")

    with pytest.raises(sqlite3.IntegrityError):
        add_transaction(db_path, EXPENSE, 999, "Food", 10, "2024-01-01")


def test_delete_checks_existence_then_ownership(tmp_path):
    db_path = str(tmp_path / "txs.db")
    alice, bob = _seed_users(db_path)
    tx = add_transaction(db_path, EXPENSE, alice.id, "Food", 50, "2024-01-01")

    with pytest.raises(NotFound):
        delete_transaction(db_path, EXPENSE, tx.id + 100, bob.id)
    with pytest.raises(Forbidden):
        delete_transaction(db_path, EXPENSE, tx.id, bob.id)
    # wrong kind behaves like a missing id
    with pytest.raises(NotFound):
        delete_transaction(db_path, INCOME, tx.id, alice.id)
    assert find_transaction(db_path, EXPENSE, tx.id) is not None

    deleted = delete_transaction(db_path, EXPENSE, tx.id, alice.id)
    assert deleted.id == tx.id
    assert find_transaction(db_path, EXPENSE, tx.id) is None
    with pytest.raises(NotFound):
        delete_transaction(db_path, EXPENSE, tx.id, alice.id)


def test_ids_beyond_sqlite_range_are_missing(tmp_path):
    db_path = str(tmp_path / "txs.db")
    alice, _ = _seed_users(db_path)
    huge = 10 ** 20

    assert find_transaction(db_path, EXPENSE, huge) is None
    assert find_transaction(db_path, EXPENSE, -huge) is None
    assert find_user_by_id(db_path, huge) is None
    with pytest.raises(NotFound):
        delete_transaction(db_path, EXPENSE, huge, alice.id)


def test_amount_upper_bound(tmp_path):
    db_path = str(tmp_path / "txs.db")
    alice, _ = _seed_users(db_path)

    tx = add_transaction(db_path, EXPENSE, alice.id, "House", MAX_AMOUNT, "2024-01-01")
    assert tx.amount == MAX_AMOUNT
    with pytest.raises(ValidationError, match="must not exceed"):
        add_transaction(db_path, EXPENSE, alice.id, "House", MAX_AMOUNT + 1, "2024-01-01")
