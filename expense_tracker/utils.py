import re
from datetime import date, datetime, time

_EMAIL_RX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def parse_date(value):
    """
    Parse an ISO 8601 date or date-time into a naive local datetime.
    Offset-aware values (including a trailing ``Z``) are converted to local time.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
    else:
        raise ValueError(f"Invalid date: {value!r}")

    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def format_date(value):
    """
    Render a date the way the spreadsheet reports show it, e.g. ``1/5/2024``.
    """
    return f"{value.month}/{value.day}/{value.year}"


def is_valid_email(email):
    return bool(_EMAIL_RX.match(email or ""))


def normalize_email(email):
    return (email or "").strip().lower()
