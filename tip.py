from __future__ import annotations

# ruff: noqa: E402  # allow docstring after the future import

"""Public API and CLI entrypoint for the province tip calculator.

Re-exports the main API from `provtip` so that

    import tip as tipmod

works as a single flat namespace. Also provides the `python tip.py` entry.
"""

import importlib.metadata as importlib_metadata
import sys

from provtip import (
    CENT,
    HUNDRED,
    PERCENT_STEP,
    REGIONS,
    TIP_RATES,
    BabelFormatter,
    CalculatorViewModel,
    Formatter,
    Region,
    SimpleFormatter,
    Summary,
    TipResult,
    compute,
    fmt_money,
    fmt_percent,
    make_formatter,
    parse_bill_amount,
    parse_money,
    parse_percentage,
    parse_province,
    parse_tip_choice,
    print_results,
    quantize_amount,
    region_codes,
    region_tax_rates,
    tax_amount,
    tip_amount,
    tip_rates,
    to_cents,
    total_amount,
)
from provtip.cli import run_cli

try:
    _distribution_version = importlib_metadata.version("province-tip-calculator")
except importlib_metadata.PackageNotFoundError:
    __version__ = "0+unknown"
else:
    __version__ = _distribution_version or "0+unknown"

__all__ = [
    "__version__",
    "TIP_RATES",
    "REGIONS",
    "Region",
    "tip_rates",
    "region_codes",
    "region_tax_rates",
    "TipResult",
    "compute",
    "tip_amount",
    "tax_amount",
    "total_amount",
    "parse_money",
    "parse_percentage",
    "parse_bill_amount",
    "parse_tip_choice",
    "parse_province",
    "CENT",
    "HUNDRED",
    "PERCENT_STEP",
    "to_cents",
    "quantize_amount",
    "fmt_money",
    "fmt_percent",
    "Formatter",
    "SimpleFormatter",
    "BabelFormatter",
    "make_formatter",
    "print_results",
    "CalculatorViewModel",
    "Summary",
    "run_cli",
]

if __name__ == "__main__":
    sys.exit(run_cli())
