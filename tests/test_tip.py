import importlib.metadata as importlib_metadata
from decimal import ROUND_HALF_UP, Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

import tip as tipmod
from provtip import formats


bills = st.decimals(min_value=0, max_value=1_000_000, places=2, allow_nan=False, allow_infinity=False)
tip_indices = st.integers(min_value=0, max_value=len(tipmod.TIP_RATES) - 1)
tax_indices = st.integers(min_value=0, max_value=len(tipmod.REGIONS) - 1)


def test_region_tables_are_aligned():
    assert len(tipmod.region_codes()) == len(tipmod.region_tax_rates()) == 13
    for i, region in enumerate(tipmod.REGIONS):
        assert tipmod.region_codes()[i] == region.code
        assert tipmod.region_tax_rates()[i] == region.rate
    assert len(set(tipmod.region_codes())) == len(tipmod.REGIONS)


def test_tip_table_contents():
    assert tipmod.tip_rates() == tuple(Decimal(x) for x in ("0", "0.05", "0.10", "0.15", "0.20", "0.25"))


def test_region_rates_match_reference_table():
    expected = {
        "AB": "0.05", "BC": "0.05", "MB": "0.05", "NB": "0.15", "NL": "0.15", "NS": "0.05", "ON": "0.15",
        "PE": "0.05", "QC": "0.13", "SK": "0.05", "NU": "0.15", "NT": "0.05", "YK": "0.05",
    }
    assert list(tipmod.region_codes()) == list(expected)
    assert [str(r) for r in tipmod.region_tax_rates()] == list(expected.values())


@given(bills, tip_indices)
def test_tip_amount_is_bill_times_rate(bill, i):
    assert tipmod.tip_amount(bill, i) == bill * tipmod.TIP_RATES[i]


@given(bills, tax_indices)
def test_tax_amount_is_bill_times_region_rate(bill, j):
    assert tipmod.tax_amount(bill, j) == bill * tipmod.REGIONS[j].rate


@given(bills, bills, bills)
def test_total_is_sum_of_parts(bill, tip, tax):
    assert tipmod.total_amount(bill, tip, tax) == bill + tip + tax


@given(tip_indices, tax_indices)
def test_absent_bill_behaves_like_zero(i, j):
    absent = tipmod.compute(None, i, j)
    zero = tipmod.compute(Decimal("0"), i, j)
    assert (absent.tip, absent.tax, absent.total) == (zero.tip, zero.tax, zero.total)
    assert tipmod.tip_amount(None, i) == 0
    assert tipmod.tax_amount(None, j) == 0
    assert tipmod.total_amount(None, Decimal("0"), Decimal("0")) == 0


def test_float_bill_is_read_as_written():
    assert tipmod.tip_amount(18.94, 3) == Decimal("2.8410")
    assert tipmod.compute(18.94, 0, 0).bill == Decimal("18.94")


def test_string_bill_is_read_like_an_entry():
    assert tipmod.tip_amount("abc", 0) == 0
    assert tipmod.tax_amount("$100", tipmod.region_codes().index("QC")) == Decimal("13")
    assert tipmod.compute("9" * 29, 4, 8).total == 0
    assert tipmod.compute("18.94", 0, 0).tax == Decimal("0.9470")


@pytest.mark.parametrize("index", [-1, 6, 99])
def test_tip_index_out_of_range_is_an_error(index):
    with pytest.raises(IndexError):
        tipmod.tip_amount(Decimal("10"), index)


@pytest.mark.parametrize("index", [-1, 13])
def test_tax_index_out_of_range_is_an_error(index):
    with pytest.raises(IndexError):
        tipmod.tax_amount(Decimal("10"), index)


def test_scenario_no_tip_five_percent_tax():
    res = tipmod.compute(Decimal("18.94"), 0, tipmod.region_codes().index("AB"))
    assert res.tip == Decimal("0")
    assert res.tax == Decimal("0.9470")
    assert tipmod.to_cents(res.total) == Decimal("19.89")
    fmt = tipmod.SimpleFormatter()
    assert fmt.currency(res.tip) == "$0.00"
    assert fmt.currency(res.tax) == "$0.95"
    assert fmt.currency(res.total) == "$19.89"


def test_scenario_twenty_percent_tip_thirteen_percent_tax():
    res = tipmod.compute(Decimal("100.00"), 4, tipmod.region_codes().index("QC"))
    fmt = tipmod.SimpleFormatter()
    assert (fmt.currency(res.tip), fmt.currency(res.tax), fmt.currency(res.total)) == (
        "$20.00",
        "$13.00",
        "$133.00",
    )


@pytest.mark.parametrize(
    "fraction, expected",
    [
        (Decimal("0"), "0%"),
        (Decimal("0.05"), "5%"),
        (Decimal("0.15"), "15%"),
        (Decimal("0.25"), "25%"),
        (Decimal("0.13"), "13%"),
        (Decimal("0.14975"), "14.98%"),
    ],
)
def test_fmt_percent_simple(fraction, expected):
    assert tipmod.fmt_percent(fraction) == expected


@pytest.mark.parametrize("fraction, expected", [(Decimal("0"), "0%"), (Decimal("0.15"), "15%"), (Decimal("0.25"), "25%"), (Decimal("0.14975"), "14.98%")])
def test_fmt_percent_babel(fraction, expected):
    assert tipmod.fmt_percent(fraction, locale="en_US") == expected


def test_fmt_money_two_digits_and_grouping():
    assert tipmod.fmt_money(Decimal("1.5")) == "$1.50"
    assert tipmod.fmt_money(1.5) == "$1.50"
    assert tipmod.fmt_money(Decimal("1234567.891")) == "$1,234,567.89"


def test_fmt_money_babel_locales():
    assert tipmod.fmt_money(Decimal("1.5"), currency="CAD", locale="en_CA") == "$1.50"
    assert tipmod.fmt_money(Decimal("1234.5"), currency="USD", locale="en_US") == "$1,234.50"


def test_formatting_failures_use_placeholders():
    assert tipmod.fmt_money(Decimal("Infinity")) == "--"
    assert tipmod.fmt_percent(Decimal("Infinity")) == "-"
    bad_locale = tipmod.BabelFormatter("zz_ZZ")
    assert bad_locale.currency(Decimal("1")) == "--"
    assert bad_locale.percent(Decimal("0.15")) == "-"


def test_make_formatter_picks_implementation():
    assert isinstance(tipmod.make_formatter(), tipmod.SimpleFormatter)
    babel_fmt = tipmod.make_formatter("en_CA", "CAD")
    assert isinstance(babel_fmt, tipmod.BabelFormatter)
    assert babel_fmt.locale == "en_CA"


def test_formatter_requires_both_methods():
    class CurrencyOnly(tipmod.Formatter):
        def currency(self, amount):
            return str(amount)

    with pytest.raises(TypeError):
        CurrencyOnly()


@pytest.mark.parametrize("fraction", [Decimal("0.05"), Decimal("0.13"), Decimal("0.14975"), Decimal("0.1234")])
def test_simple_and_babel_percent_agree(fraction):
    assert tipmod.SimpleFormatter().percent(fraction) == tipmod.BabelFormatter("en_US").percent(fraction)


def test_print_results_labels():
    res = tipmod.compute(Decimal("100"), 4, tipmod.region_codes().index("QC"))
    out = tipmod.print_results(res)
    assert "Tip (20%): $20.00" in out
    assert "Tax (QC 13%): $13.00" in out
    assert "Total: $133.00" in out


def test_results_to_dict_and_csv():
    res = tipmod.compute(Decimal("18.94"), 0, 0)
    d = formats.results_to_dict(res)
    assert d == {
        "currency": "CAD",
        "bill": "18.94",
        "tip_percent": "0.00",
        "province": "AB",
        "tax_percent": "5.00",
        "tip": "0.00",
        "tax": "0.95",
        "total": "19.89",
    }
    assert formats.dict_to_csv_line(d) == "CAD,18.94,0.00,AB,5.00,0.00,0.95,19.89"


def test_copy_to_clipboard(monkeypatch):
    copied = []
    monkeypatch.setattr(formats.pyperclip, "copy", copied.append)
    assert formats.copy_to_clipboard("hello") is True
    assert copied == ["hello"]

    def broken(text):
        raise formats.pyperclip.PyperclipException("no clipboard")

    monkeypatch.setattr(formats.pyperclip, "copy", broken)
    assert formats.copy_to_clipboard("hello") is False


def test_parse_money_permissive_variants():
    assert tipmod.parse_money("$1,234.56") == Decimal("1234.56")
    assert tipmod.parse_money(" 1234.56 $") == Decimal("1234.56")
    assert tipmod.parse_money(" .5 ") == Decimal("0.50")
    assert tipmod.parse_money("$ 1,234.5") == Decimal("1234.50")


def test_parse_money_strict_validation():
    assert tipmod.parse_money("$1,234.56", strict=True) == Decimal("1234.56")
    assert tipmod.parse_money("1234.5", strict=True) == Decimal("1234.50")
    for bad in ["1234.56$", "$12,34.56", "1 234.56", "$.50."]:
        with pytest.raises(ValueError):
            tipmod.parse_money(bad, strict=True)


@pytest.mark.parametrize("text", [None, "", "   ", "abc", "-5", "NaN", "$$", "1e30", "9" * 29, "-1e30", "Infinity"])
def test_parse_bill_amount_defaults_to_zero(text):
    assert tipmod.parse_bill_amount(text) == Decimal("0")


def test_parse_bill_amount_reads_money():
    assert tipmod.parse_bill_amount("$18.94") == Decimal("18.94")


@pytest.mark.parametrize("text", ["1e30", "9" * 29])
def test_parse_money_rejects_amounts_too_large_for_cents(text):
    with pytest.raises(ValueError):
        tipmod.parse_money(text)


def test_parse_percentage_clamps_and_spaces():
    assert tipmod.parse_percentage("18.567%") == Decimal("18.57")
    assert tipmod.parse_percentage("15 %") == Decimal("15.00")
    assert tipmod.parse_percentage("100") == Decimal("100.00")
    with pytest.raises(ValueError):
        tipmod.parse_percentage("120%")


@pytest.mark.parametrize("text, index", [("0", 0), ("5", 1), ("10%", 2), ("15", 3), ("0.15", 3), (" 20 % ", 4), ("25", 5)])
def test_parse_tip_choice(text, index):
    assert tipmod.parse_tip_choice(text) == index


@pytest.mark.parametrize("text", ["18", "0.5", "abc", "101"])
def test_parse_tip_choice_rejects_rates_not_in_table(text):
    with pytest.raises(ValueError):
        tipmod.parse_tip_choice(text)


def test_parse_province():
    assert tipmod.parse_province("on") == tipmod.region_codes().index("ON")
    assert tipmod.parse_province(" QC ") == 8
    assert tipmod.parse_province("YT") == tipmod.region_codes().index("YK")
    for bad in ["", "XX", "Ontario"]:
        with pytest.raises(ValueError):
            tipmod.parse_province(bad)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (Decimal("1.005"), Decimal("1.00")),
        (Decimal("1.015"), Decimal("1.02")),
        (Decimal("-1.005"), Decimal("-1.00")),
        (Decimal("2.675"), Decimal("2.68")),
    ],
)
def test_quantize_amount_half_even(raw: Decimal, expected: Decimal) -> None:
    assert tipmod.quantize_amount(raw) == expected


def test_quantize_amount_custom_rounding() -> None:
    assert tipmod.quantize_amount(Decimal("1.005"), rounding=ROUND_HALF_UP) == Decimal("1.01")
    assert tipmod.to_cents(Decimal("0.9470")) == Decimal("0.95")


def test_tip_module_exports_and_version():
    assert {"__version__", "compute", "tip_amount", "tax_amount", "total_amount", "run_cli"} <= set(tipmod.__all__)
    for name in tipmod.__all__:
        assert hasattr(tipmod, name)

    try:
        expected_version = importlib_metadata.version("province-tip-calculator")
    except importlib_metadata.PackageNotFoundError:
        expected_version = "0+unknown"
    else:
        expected_version = expected_version or "0+unknown"

    assert tipmod.__version__ == expected_version
