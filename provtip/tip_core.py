from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, TypeVar, Union

from .rates import REGIONS, TIP_RATES, Region

Amount = Union[Decimal, int, float, str]
T = TypeVar("T")

ZERO = Decimal("0")


@dataclass
class TipResult:
    bill: Decimal
    tip_rate: Decimal
    region: Region
    tip: Decimal
    tax: Decimal
    total: Decimal


def to_decimal(value: Optional[Amount]) -> Decimal:
    """Coerce a bill-like value to Decimal; ``None`` becomes zero.

    Floats go through ``str`` so that ``18.94`` stays ``Decimal("18.94")``.
    Text is read like a typed bill entry, so unreadable text is zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        from .parsing import parse_bill_amount

        return parse_bill_amount(value)
    return Decimal(value)


def _pick(table: Sequence[T], index: int) -> T:
    # Table indices come from iterating the tables; anything else is a caller bug.
    if not 0 <= index < len(table):
        raise IndexError(f"index {index} out of range for table of {len(table)}")
    return table[index]


def tip_amount(bill: Optional[Amount], tip_index: int) -> Decimal:
    return to_decimal(bill) * _pick(TIP_RATES, tip_index)


def tax_amount(bill: Optional[Amount], tax_index: int) -> Decimal:
    return to_decimal(bill) * _pick(REGIONS, tax_index).rate


def total_amount(bill: Optional[Amount], tip: Decimal, tax: Decimal) -> Decimal:
    return to_decimal(bill) + tip + tax


def compute(bill: Optional[Amount], tip_index: int, tax_index: int) -> TipResult:
    """Derive tip, tax and total for one set of inputs.

    Amounts are exact; rounding to cents is left to the formatting layer.
    """
    amount = to_decimal(bill)
    tip = tip_amount(amount, tip_index)
    tax = tax_amount(amount, tax_index)
    return TipResult(
        bill=amount,
        tip_rate=TIP_RATES[tip_index],
        region=REGIONS[tax_index],
        tip=tip,
        tax=tax,
        total=total_amount(amount, tip, tax),
    )
