"""Shared utilities for the chat agent modes: coercion and display formatting."""

import math
import re
from datetime import date, datetime, time, timezone
from typing import Any, Optional

CURRENCY_SYMBOL = "₹"

# Leading decimal number, the way JavaScript's parseFloat reads "12.5abc"
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def to_amount(value: Any) -> float:
    """
    Coerce a stored money field to float, never raising.

    None, blanks, non-numeric text, NaN and infinities all read as 0.0.
    Strings with a leading number keep that number ("12.5abc" -> 12.5).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        out = float(value)
    else:
        text = str(value).strip().replace(",", "")
        try:
            out = float(text)
        except ValueError:
            m = _LEADING_NUMBER.match(text)
            out = float(m.group(0)) if m else 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def to_datetime(value: Any) -> Optional[datetime]:
    """Parse a date-ish value into an aware UTC datetime; None when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt_ = value
    elif isinstance(value, date):
        dt_ = datetime.combine(value, time.min)
    else:
        s = str(value).strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt_ = datetime.fromisoformat(s)
        except ValueError:
            return None
    if dt_.tzinfo is None:
        dt_ = dt_.replace(tzinfo=timezone.utc)
    return dt_.astimezone(timezone.utc)


def month_key(value: datetime) -> str:
    """YYYY-MM for a datetime (UTC)."""
    return value.astimezone(timezone.utc).strftime("%Y-%m")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_currency(value: float, decimals: int = 2) -> str:
    """₹-prefixed amount with a fixed number of decimals and no grouping."""
    return f"{CURRENCY_SYMBOL}{value:.{decimals}f}"


def safe_pct(part: float, whole: float) -> float:
    """part / whole * 100, or 0.0 when whole is zero."""
    if not whole:
        return 0.0
    return part / whole * 100
