from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Tuple


@dataclass(frozen=True)
class Region:
    code: str
    rate: Decimal
    name: str = ""


TIP_RATES: Tuple[Decimal, ...] = (
    Decimal("0"),
    Decimal("0.05"),
    Decimal("0.10"),
    Decimal("0.15"),
    Decimal("0.20"),
    Decimal("0.25"),
)

# Combined sales tax charged on a restaurant bill, one entry per province/territory.
REGIONS: Tuple[Region, ...] = (
    Region("AB", Decimal("0.05"), "Alberta"),
    Region("BC", Decimal("0.05"), "British Columbia"),
    Region("MB", Decimal("0.05"), "Manitoba"),
    Region("NB", Decimal("0.15"), "New Brunswick"),
    Region("NL", Decimal("0.15"), "Newfoundland and Labrador"),
    Region("NS", Decimal("0.05"), "Nova Scotia"),
    Region("ON", Decimal("0.15"), "Ontario"),
    Region("PE", Decimal("0.05"), "Prince Edward Island"),
    Region("QC", Decimal("0.13"), "Quebec"),
    Region("SK", Decimal("0.05"), "Saskatchewan"),
    Region("NU", Decimal("0.15"), "Nunavut"),
    Region("NT", Decimal("0.05"), "Northwest Territories"),
    Region("YK", Decimal("0.05"), "Yukon"),
)

DEFAULT_TIP_INDEX = 1
DEFAULT_REGION_INDEX = 1

_CODE_ALIASES: Dict[str, str] = {"YT": "YK"}


def tip_rates() -> Tuple[Decimal, ...]:
    return TIP_RATES


def region_codes() -> Tuple[str, ...]:
    return tuple(r.code for r in REGIONS)


def region_tax_rates() -> Tuple[Decimal, ...]:
    return tuple(r.rate for r in REGIONS)


def region_index(code: str) -> int:
    """Return the position of ``code`` in :data:`REGIONS` (case-insensitive)."""
    key = code.strip().upper()
    key = _CODE_ALIASES.get(key, key)
    for idx, region in enumerate(REGIONS):
        if region.code == key:
            return idx
    choices = ", ".join(region_codes())
    raise ValueError(f"Unknown province code '{code.strip()}'. Choose one of: {choices}")


def tip_index(rate: Decimal) -> int:
    """Return the position of a fractional tip ``rate`` in :data:`TIP_RATES`."""
    for idx, candidate in enumerate(TIP_RATES):
        if candidate == rate:
            return idx
    choices = ", ".join(f"{(r * 100).normalize():f}%" for r in TIP_RATES)
    raise ValueError(f"Tip must be one of: {choices}")
