from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, ROUND_HALF_UP
from typing import Dict, List, Optional

import pyperclip
from babel.core import UnknownLocaleError
from babel.numbers import format_currency as _babel_format_currency
from babel.numbers import format_percent as _babel_format_percent

from .tip_core import TipResult


# --- Money helpers & constants ---
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
PERCENT_STEP = Decimal("0.01")  # display percent with up to 2 decimals

MONEY_PLACEHOLDER = "--"
PERCENT_PLACEHOLDER = "-"
# Same precision as the simple path: up to two decimals, trailing zeros dropped.
PERCENT_PATTERN = "#,##0.##%"

_FORMAT_ERRORS = (InvalidOperation, ValueError, TypeError, UnknownLocaleError)


def quantize_amount(value: Decimal, *, step: Decimal = CENT, rounding: str = ROUND_HALF_EVEN) -> Decimal:
    """Quantize ``value`` to ``step`` (banker's rounding unless told otherwise)."""
    return value.quantize(step, rounding=rounding)


def to_cents(value: Decimal) -> Decimal:
    """Round a Decimal to two fractional digits using ROUND_HALF_UP."""
    return quantize_amount(value, rounding=ROUND_HALF_UP)


# --- Formatting ---
def currency_symbol(code: str) -> str:
    code = (code or "CAD").upper()
    return {"CAD": "$", "USD": "$"}.get(code, "$")


def fmt_money(
    value: Decimal,
    *,
    symbol: str = "$",
    currency: str = "CAD",
    locale: Optional[str] = None,
) -> str:
    """Format money for display.

    - With a ``locale``, use Babel's locale-aware formatting (grouping,
      symbol placement).
    - Otherwise, place ``symbol`` first with commas and two decimals.

    Returns ``"--"`` if the amount cannot be formatted.
    """
    try:
        amount = to_cents(Decimal(value))
        if locale:
            return _babel_format_currency(amount, currency, locale=locale)
        return f"{symbol}{amount:,.2f}"
    except _FORMAT_ERRORS:
        return MONEY_PLACEHOLDER


def fmt_percent(value: Decimal, *, locale: Optional[str] = None) -> str:
    """Format a fraction as a percentage: ``0.15`` -> ``"15%"``.

    Up to two decimals are kept, trailing zeros trimmed. Returns ``"-"`` if
    the value cannot be formatted.
    """
    try:
        fraction = Decimal(value)
        if locale:
            return _babel_format_percent(fraction, format=PERCENT_PATTERN, locale=locale)
        q = quantize_amount(fraction * HUNDRED, step=PERCENT_STEP, rounding=ROUND_HALF_UP)
        return f"{q:.2f}".rstrip("0").rstrip(".") + "%"
    except _FORMAT_ERRORS:
        return PERCENT_PLACEHOLDER


class Formatter(ABC):
    """Renders amounts and rates as display strings."""

    @abstractmethod
    def currency(self, amount: Decimal) -> str:
        raise NotImplementedError

    @abstractmethod
    def percent(self, fraction: Decimal) -> str:
        raise NotImplementedError


class SimpleFormatter(Formatter):
    def __init__(self, currency: str = "CAD") -> None:
        self.currency_code = currency
        self.symbol = currency_symbol(currency)

    def currency(self, amount: Decimal) -> str:
        return fmt_money(amount, symbol=self.symbol, currency=self.currency_code)

    def percent(self, fraction: Decimal) -> str:
        return fmt_percent(fraction)


class BabelFormatter(Formatter):
    def __init__(self, locale: str, currency: str = "CAD") -> None:
        self.locale = locale
        self.currency_code = currency

    def currency(self, amount: Decimal) -> str:
        return fmt_money(amount, currency=self.currency_code, locale=self.locale)

    def percent(self, fraction: Decimal) -> str:
        return fmt_percent(fraction, locale=self.locale)


def make_formatter(locale: Optional[str] = None, currency: str = "CAD") -> Formatter:
    if locale:
        return BabelFormatter(locale, currency)
    return SimpleFormatter(currency)


def print_results(result: TipResult, formatter: Optional[Formatter] = None) -> str:
    fmt = formatter or SimpleFormatter()
    lines: List[str] = []
    lines.append("\n--- Results ---")
    lines.append(f"Bill: {fmt.currency(result.bill)}")
    lines.append(f"Tip ({fmt.percent(result.tip_rate)}): {fmt.currency(result.tip)}")
    lines.append(
        f"Tax ({result.region.code} {fmt.percent(result.region.rate)}): {fmt.currency(result.tax)}"
    )
    lines.append(f"Total: {fmt.currency(result.total)}")
    return "\n".join(lines) + "\n"


def format_status_line(tip: str, tax: str, total: str) -> str:
    return f"Tip: {tip}   Tax: {tax}   Total: {total}"


# --- Data export helpers ---
CSV_COLUMNS = [
    "currency",
    "bill",
    "tip_percent",
    "province",
    "tax_percent",
    "tip",
    "tax",
    "total",
]


def _percent_text(fraction: Decimal) -> str:
    return f"{quantize_amount(fraction * HUNDRED, step=PERCENT_STEP):.2f}"


def results_to_dict(result: TipResult, *, currency: str = "CAD") -> Dict[str, str]:
    return {
        "currency": currency,
        "bill": f"{to_cents(result.bill):.2f}",
        "tip_percent": _percent_text(result.tip_rate),
        "province": result.region.code,
        "tax_percent": _percent_text(result.region.rate),
        "tip": f"{to_cents(result.tip):.2f}",
        "tax": f"{to_cents(result.tax):.2f}",
        "total": f"{to_cents(result.total):.2f}",
    }


def dict_to_csv_line(d: dict) -> str:
    return ",".join(str(d.get(k, "")) for k in CSV_COLUMNS)


def copy_to_clipboard(text: str) -> bool:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException:
        return False
    return True
