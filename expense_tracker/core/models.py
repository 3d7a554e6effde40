# expense_tracker/core/models.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional


@dataclass(frozen=True)
class TransactionKind:
    """Describes one of the two transaction streams (income or expense)."""

    name: str
    label_field: str
    title: str
    plural: str
    sheet_name: str

    @property
    def report_filename(self) -> str:
        return f"{self.name}_report.xlsx"


INCOME = TransactionKind("income", "source", "Income", "incomes", "Income")
EXPENSE = TransactionKind("expense", "category", "Expense", "expenses", "Expenses")

KINDS: Dict[str, TransactionKind] = {k.name: k for k in (INCOME, EXPENSE)}

# largest accepted single amount
MAX_AMOUNT = 1_000_000_000_000


@dataclass
class User:
    id: int
    full_name: str
    email: str
    password_hash: str
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self, with_timestamps: bool = False) -> dict:
        # password_hash is never serialized
        data = {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "profileImageUrl": self.profile_image_url,
        }
        if with_timestamps:
            data["createdAt"] = _iso(self.created_at)
            data["updatedAt"] = _iso(self.updated_at)
        return data


@dataclass
class Transaction:
    id: int
    user_id: int
    kind: TransactionKind
    label: str
    amount: float
    date: datetime
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self, tagged: bool = False) -> dict:
        """Serialize for the API, optionally with the ``type`` discriminator."""
        data = {
            "id": self.id,
            "userId": self.user_id,
            "icon": self.icon,
            self.kind.label_field: self.label,
            "amount": self.amount,
            "date": _iso(self.date),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if tagged:
            data["type"] = self.kind.name
        return data


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
