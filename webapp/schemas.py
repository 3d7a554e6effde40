from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_tracker.core.models import MAX_AMOUNT
from expense_tracker.utils import is_valid_email, normalize_email, parse_date

MIN_PASSWORD_LENGTH = 8
MISSING_FIELDS_MESSAGE = "All fields are required"


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(MISSING_FIELDS_MESSAGE)
    return value


class RequestBody(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RegisterRequest(RequestBody):
    full_name: str = Field(alias="fullName")
    email: str
    password: str
    profile_image_url: Optional[str] = Field(default=None, alias="profileImageUrl")

    @field_validator("full_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = _required_text(value)
        if not is_valid_email(value):
            raise ValueError("Please enter a valid email address")
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if not value:
            raise ValueError(MISSING_FIELDS_MESSAGE)
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return value


class LoginRequest(RequestBody):
    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def _check_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(MISSING_FIELDS_MESSAGE)
        return value


class TransactionRequest(RequestBody):
    amount: float = Field(allow_inf_nan=False)
    date: datetime
    icon: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _reject_bool_amount(cls, value):
        # JSON true/false would otherwise coerce to 1.0/0.0
        if isinstance(value, bool):
            raise ValueError("Amount must be a number")
        return value

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Amount must be a non-negative number")
        if value > MAX_AMOUNT:
            raise ValueError(f"Amount must not exceed {MAX_AMOUNT:,}")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        if value is None or value == "":
            raise ValueError(MISSING_FIELDS_MESSAGE)
        return parse_date(value)


class IncomeRequest(TransactionRequest):
    source: str

    @field_validator("source")
    @classmethod
    def _check_source(cls, value: str) -> str:
        return _required_text(value)

    @property
    def label(self) -> str:
        return self.source


class ExpenseRequest(TransactionRequest):
    category: str

    @field_validator("category")
    @classmethod
    def _check_category(cls, value: str) -> str:
        return _required_text(value)

    @property
    def label(self) -> str:
        return self.category


def validation_message(errors: List[dict]) -> str:
    """Collapse pydantic validation errors into one client-facing message."""
    if not errors or any(err.get("type") == "missing" for err in errors):
        return MISSING_FIELDS_MESSAGE
    first = errors[0]
    if first.get("type") == "extra_forbidden":
        return f"Unexpected field: {first['loc'][-1]}"
    message = str(first.get("msg", "Invalid request"))
    return message.removeprefix("Value error, ")
