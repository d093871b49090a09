"""Screen state for the calculator, independent of any particular UI.

The view-model owns the three inputs (bill, tip selection, region selection).
Every update method changes one input, recomputes the derived amounts and
calls the ``on_change`` callback so the front end can redraw.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from .formats import Formatter, SimpleFormatter
from .parsing import parse_bill_amount
from .rates import DEFAULT_REGION_INDEX, DEFAULT_TIP_INDEX, REGIONS, TIP_RATES
from .tip_core import Amount, TipResult, compute, to_decimal


@dataclass
class Summary:
    tip: str
    tax: str
    total: str


RedrawFunc = Callable[["CalculatorViewModel"], None]


def _check_index(index: int, size: int, what: str) -> int:
    if not 0 <= index < size:
        raise IndexError(f"{what} index {index} out of range (0..{size - 1})")
    return index


class CalculatorViewModel:
    def __init__(
        self,
        formatter: Optional[Formatter] = None,
        *,
        bill: Optional[Amount] = None,
        tip_index: int = DEFAULT_TIP_INDEX,
        region_index: int = DEFAULT_REGION_INDEX,
        on_change: Optional[RedrawFunc] = None,
    ) -> None:
        self.formatter = formatter or SimpleFormatter()
        self.bill = None if bill is None else to_decimal(bill)
        self.tip_index = _check_index(tip_index, len(TIP_RATES), "tip")
        self.region_index = _check_index(region_index, len(REGIONS), "region")
        self.on_change = on_change
        self.result: TipResult = compute(self.bill, self.tip_index, self.region_index)
        self.summary: Summary = self._summarize()

    # --- inputs ---
    def update_bill(self, value: Optional[Amount]) -> None:
        self.bill = None if value is None else to_decimal(value)
        self.refresh()

    def update_bill_text(self, text: Optional[str]) -> None:
        self.bill = parse_bill_amount(text)
        self.refresh()

    def select_tip(self, index: int) -> None:
        self.tip_index = _check_index(index, len(TIP_RATES), "tip")
        self.refresh()

    def select_region(self, index: int) -> None:
        self.region_index = _check_index(index, len(REGIONS), "region")
        self.refresh()

    # --- derived state ---
    def refresh(self) -> None:
        self.result = compute(self.bill, self.tip_index, self.region_index)
        self.summary = self._summarize()
        if self.on_change is not None:
            self.on_change(self)

    def _summarize(self) -> Summary:
        fmt = self.formatter
        return Summary(
            tip=fmt.currency(self.result.tip),
            tax=fmt.currency(self.result.tax),
            total=fmt.currency(self.result.total),
        )

    def tip_options(self) -> List[str]:
        return [self.formatter.percent(rate) for rate in TIP_RATES]

    def region_options(self) -> List[str]:
        return [f"{r.code} - {self.formatter.percent(r.rate)}" for r in REGIONS]
