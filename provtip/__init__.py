from .formats import (
    CENT,
    HUNDRED,
    PERCENT_STEP,
    BabelFormatter,
    Formatter,
    SimpleFormatter,
    fmt_money,
    fmt_percent,
    make_formatter,
    print_results,
    quantize_amount,
    to_cents,
)
from .parsing import parse_bill_amount, parse_money, parse_percentage, parse_province, parse_tip_choice
from .rates import REGIONS, TIP_RATES, Region, region_codes, region_tax_rates, tip_rates
from .tip_core import TipResult, compute, tax_amount, tip_amount, total_amount
from .viewmodel import CalculatorViewModel, Summary

__all__ = [
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
]
