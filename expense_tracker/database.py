from __future__ import annotations

import math
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from expense_tracker.core.models import KINDS, MAX_AMOUNT, Transaction, TransactionKind, User
from expense_tracker.errors import Forbidden, NotFound, ValidationError
from expense_tracker.utils import normalize_email, parse_date

# SQLite INTEGER is a signed 64-bit value
MAX_ROW_ID = 2 ** 63 - 1


def _init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            full_name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            profile_image_url TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id),
            kind TEXT NOT NULL CHECK (kind IN ('income', 'expense')),
            label TEXT NOT NULL,
            icon TEXT,
            amount REAL NOT NULL CHECK (amount >= 0),
            date TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_transactions_owner
            ON transactions (user_id, kind, date);
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    _init_db(conn)
    return conn


def _fits_row_id(value: int) -> bool:
    return -MAX_ROW_ID - 1 <= value <= MAX_ROW_ID


def _stamp(value: datetime) -> str:
    # fixed width so that text ordering matches chronological ordering
    return value.isoformat(timespec="microseconds")


def _now() -> str:
    return _stamp(datetime.now())


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        profile_image_url=row["profile_image_url"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=row["id"],
        user_id=row["user_id"],
        kind=KINDS[row["kind"]],
        label=row["label"],
        icon=row["icon"],
        amount=float(row["amount"]),
        date=datetime.fromisoformat(row["date"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def insert_user(
    db_path: str,
    full_name: str,
    email: str,
    password_hash: str,
    profile_image_url: str | None = None,
) -> User:
    """Persist a user row. The email must already be normalized.

    Raises ``sqlite3.IntegrityError`` when the email is taken.
    """
    conn = _connect(db_path)
    try:
        stamp = _now()
        cur = conn.execute(
            """
            INSERT INTO users
            (full_name, email, password_hash, profile_image_url, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (full_name, email, password_hash, profile_image_url, stamp, stamp),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM users WHERE id = ?", (cur.lastrowid,)).fetchone()
        return _row_to_user(row)
    finally:
        conn.close()


def find_user_by_email(db_path: str, email: str) -> Optional[User]:
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT * FROM users WHERE email = ?", (normalize_email(email),)
        ).fetchone()
        return _row_to_user(row) if row else None
    finally:
        conn.close()


def find_user_by_id(db_path: str, user_id: int) -> Optional[User]:
    if not _fits_row_id(user_id):
        return None
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row_to_user(row) if row else None
    finally:
        conn.close()


def _validate_amount(amount) -> float:
    if amount is None or amount == "":
        raise ValidationError("All fields are required")
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a number")
    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Amount must be a number") from exc
    if not math.isfinite(value) or value < 0:
        raise ValidationError("Amount must be a non-negative number")
    if value > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT:,}")
    return value


def add_transaction(
    db_path: str,
    kind: TransactionKind,
    user_id: int,
    label: str,
    amount,
    date,
    icon: str | None = None,
) -> Transaction:
    """Record an income or expense for ``user_id``.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    kind:
        ``INCOME`` or ``EXPENSE``.
    label:
        Income source or expense category.
    amount:
        Non-negative amount.
    date:
        Occurrence date as a ``datetime``, ``date`` or ISO string.
    icon:
        Optional icon label shown by the UI.
    """
    label = (label or "").strip()
    if not label or date is None or date == "":
        raise ValidationError("All fields are required")
    value = _validate_amount(amount)
    try:
        when = parse_date(date)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    conn = _connect(db_path)
    try:
        stamp = _now()
        cur = conn.execute(
            """
            INSERT INTO transactions
            (user_id, kind, label, icon, amount, date, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, kind.name, label, icon, value, _stamp(when), stamp, stamp),
        )
        conn.commit()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (cur.lastrowid,)
        ).fetchone()
        return _row_to_transaction(row)
    finally:
        conn.close()


def list_transactions(db_path: str, kind: TransactionKind, user_id: int) -> List[Transaction]:
    """Return the user's transactions of one kind, newest first.

    Transactions sharing a date keep their insertion order.
    """
    conn = _connect(db_path)
    try:
        rows = conn.execute(
            """
            SELECT * FROM transactions
            WHERE kind = ? AND user_id = ?
            ORDER BY date DESC, id ASC
            """,
            (kind.name, user_id),
        ).fetchall()
        return [_row_to_transaction(r) for r in rows]
    finally:
        conn.close()


def find_transaction(db_path: str, kind: TransactionKind, transaction_id: int) -> Optional[Transaction]:
    if not _fits_row_id(transaction_id):
        return None
    conn = _connect(db_path)
    try:
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ? AND kind = ?",
            (transaction_id, kind.name),
        ).fetchone()
        return _row_to_transaction(row) if row else None
    finally:
        conn.close()


def delete_transaction(
    db_path: str,
    kind: TransactionKind,
    transaction_id: int,
    requesting_user_id: int,
) -> Transaction:
    """Delete a transaction on behalf of its owner and return it.

    Raises ``NotFound`` when no such transaction exists and ``Forbidden`` when
    it belongs to another user. The row is only removed after both checks.
    """
    tx = find_transaction(db_path, kind, transaction_id)
    if tx is None:
        raise NotFound(f"{kind.title} not found")
    if tx.user_id != requesting_user_id:
        raise Forbidden(f"Not authorized to delete this {kind.name}")

    conn = _connect(db_path)
    try:
        conn.execute(
            "DELETE FROM transactions WHERE id = ? AND user_id = ?",
            (transaction_id, requesting_user_id),
        )
        conn.commit()
    finally:
        conn.close()
    return tx
