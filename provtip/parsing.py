from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .formats import HUNDRED, PERCENT_STEP, to_cents
from .rates import region_index, tip_index

ZERO = Decimal("0")


def parse_money(
    text: str,
    *,
    min_value: Decimal = Decimal("0.00"),
    strict: bool = False,
) -> Decimal:
    s = text.strip()
    if strict:
        money_strict_re = re.compile(r"^\s*\$?(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?\s*$")
        if not money_strict_re.match(s):
            raise ValueError("Enter a valid dollar amount like $1,234.56")
    raw = re.sub(r"\s+", "", s).replace(",", "").replace("$", "")
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError("Enter a valid dollar amount (e.g., 12.34)") from exc
    if not value.is_finite():
        raise ValueError("Enter a valid dollar amount (e.g., 12.34)")
    if value < min_value:
        raise ValueError(f"Amount must be >= ${to_cents(min_value)}")
    try:
        return to_cents(value)
    except InvalidOperation as exc:
        raise ValueError("Enter a valid dollar amount (e.g., 12.34)") from exc


def parse_percentage(
    text: str,
    *,
    min_value: Decimal = Decimal("0"),
    max_value: Decimal = Decimal("100"),
) -> Decimal:
    s = text.strip()
    raw = re.sub(r"\s+", "", s).replace("%", "").replace(",", "")
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError("Enter a valid percentage (e.g., 15 or 15%)") from exc
    if not value.is_finite() or value < min_value or value > max_value:
        raise ValueError(f"Percentage must be between {min_value} and {max_value}")
    return value.quantize(PERCENT_STEP, rounding=ROUND_HALF_UP)


def parse_bill_amount(text: Optional[str]) -> Decimal:
    """Lenient bill entry: anything missing, negative or unreadable counts as zero."""
    if text is None or not text.strip():
        return ZERO
    try:
        return parse_money(text)
    except ValueError:
        return ZERO


def parse_tip_choice(text: str) -> int:
    """Map ``"15"``, ``"15%"`` or ``"0.15"`` to an index into the tip table."""
    s = text.strip()
    percent = parse_percentage(s)
    # A bare fraction below one (no % sign) is read as a rate, e.g. "0.15".
    if "%" not in s and Decimal("0") < percent < Decimal("1"):
        percent = percent * HUNDRED
    return tip_index(percent / HUNDRED)


def parse_province(text: str) -> int:
    if not text or not text.strip():
        raise ValueError("Enter a province code (e.g., ON)")
    return region_index(text)
