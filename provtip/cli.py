from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional, TypeVar

from .formats import (
    CSV_COLUMNS,
    copy_to_clipboard,
    dict_to_csv_line,
    format_status_line,
    make_formatter,
    print_results,
    results_to_dict,
)
from .logging_config import setup_logging
from .parsing import parse_money, parse_province, parse_tip_choice
from .rates import DEFAULT_REGION_INDEX, DEFAULT_TIP_INDEX, REGIONS, region_codes
from .tip_core import compute
from .viewmodel import CalculatorViewModel

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tipconfig.json"
CURRENCIES = ("CAD", "USD")
DEFAULT_LOCALE = "en_CA"


class ConfigError(RuntimeError):
    """Raised when an explicitly requested config file cannot be used."""


@dataclass
class AppConfig:
    default_tip_index: int = DEFAULT_TIP_INDEX
    province_index: int = DEFAULT_REGION_INDEX
    locale: Optional[str] = None
    currency: str = "CAD"


# JSON key / env var -> AppConfig attribute
_SETTING_KEYS: Dict[str, str] = {
    "default_tip_percent": "tip",
    "tip_default_percent": "tip",
    "province": "province",
    "tip_province": "province",
    "locale": "locale",
    "tip_locale": "locale",
    "currency": "currency",
    "tip_currency": "currency",
}


def _apply_setting(cfg: AppConfig, key: str, value: object, source: str) -> None:
    target = _SETTING_KEYS.get(key.strip().lower())
    if target is None:
        return
    text = str(value).strip()
    try:
        if target == "tip":
            cfg.default_tip_index = parse_tip_choice(text)
        elif target == "province":
            cfg.province_index = parse_province(text)
        elif target == "locale":
            cfg.locale = text or None
        elif target == "currency":
            code = text.upper()
            if code not in CURRENCIES:
                raise ValueError(f"Currency must be one of: {', '.join(CURRENCIES)}")
            cfg.currency = code
    except ValueError as exc:
        logger.warning("Ignoring %s=%r from %s: %s", key, value, source, exc)


def _read_json_config(path: Path) -> dict:
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("config must contain a JSON object")
    return data


def _read_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        values[k.strip().upper()] = v.strip().strip('"').strip("'")
    return values


def load_config(path: Optional[str] = None) -> AppConfig:
    cfg = AppConfig()

    if path:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        try:
            if explicit.name.endswith(".env"):
                settings: dict = _read_env_file(explicit)
            else:
                settings = _read_json_config(explicit)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Failed to read config file {explicit}: {exc}") from exc
        for k, v in settings.items():
            _apply_setting(cfg, k, v, str(explicit))
        logger.debug("Loaded config from %s", explicit)
    else:
        for p in (Path.cwd() / CONFIG_FILENAME, Path(__file__).with_name(CONFIG_FILENAME)):
            if not p.is_file():
                continue
            try:
                data = _read_json_config(p)
            except (OSError, ValueError) as exc:
                logger.warning("Skipping unreadable config %s: %s", p, exc)
                continue
            for k, v in data.items():
                _apply_setting(cfg, k, v, str(p))
            logger.debug("Loaded config from %s", p)
            break

    for p in (Path.cwd() / ".env", Path(__file__).with_name(".env")):
        if not p.is_file():
            continue
        try:
            env_values = _read_env_file(p)
        except OSError as exc:
            logger.warning("Skipping unreadable .env %s: %s", p, exc)
            continue
        for k, v in env_values.items():
            if k.startswith("TIP_"):
                _apply_setting(cfg, k, v, str(p))
        break

    for k, v in os.environ.items():
        if k.startswith("TIP_"):
            _apply_setting(cfg, k, v, "environment")

    return cfg


T = TypeVar("T")


def prompt_loop(prompt: str, parser: Callable[[str], T]) -> T:
    while True:
        try:
            return parser(input(prompt))
        except ValueError as e:
            print(f"Error: {e}")


def yes_no(prompt: str, *, default_yes: bool = True) -> bool:
    suffix = "[Y/n]" if default_yes else "[y/N]"
    while True:
        ans = input(f"{prompt} {suffix} ").strip().lower()
        if not ans:
            return default_yes
        if ans in {"y", "yes"}:
            return True
        if ans in {"n", "no"}:
            return False
        print("Please answer 'y' or 'n'.")


def prompt_tip_index(vm: CalculatorViewModel) -> int:
    options = vm.tip_options()
    menu = "  ".join(f"[{i + 1}] {label}" for i, label in enumerate(options))
    current = options[vm.tip_index]

    def _parse(text: str) -> int:
        s = text.strip()
        if not s:
            return vm.tip_index
        if s.isdigit() and 1 <= int(s) <= len(options):
            return int(s) - 1
        return parse_tip_choice(s)

    return prompt_loop(f"Tip: {menu}  [Enter={current}]: ", _parse)


def prompt_province(vm: CalculatorViewModel) -> int:
    current = REGIONS[vm.region_index].code

    def _parse(text: str) -> int:
        if not text.strip():
            return vm.region_index
        return parse_province(text)

    return prompt_loop(f"Province ({', '.join(region_codes())}) [Enter={current}]: ", _parse)


def _print_status(vm: CalculatorViewModel) -> None:
    print(format_status_line(vm.summary.tip, vm.summary.tax, vm.summary.total))


def run_interactive(config: AppConfig, *, locale: Optional[str] = None) -> None:
    print("--- Tip Calculator ---")
    vm = CalculatorViewModel(
        make_formatter(locale, config.currency),
        tip_index=config.default_tip_index,
        region_index=config.province_index,
        on_change=_print_status,
    )
    while True:
        vm.update_bill_text(input("Bill amount: $"))
        vm.select_tip(prompt_tip_index(vm))
        vm.select_region(prompt_province(vm))
        if not yes_no("Calculate another tip?", default_yes=False):
            break


def list_options(*, locale: Optional[str], currency: str) -> str:
    vm = CalculatorViewModel(make_formatter(locale, currency))
    lines: List[str] = ["Tip options: " + ", ".join(vm.tip_options()), "Provinces:"]
    for region, label in zip(REGIONS, vm.region_options()):
        lines.append(f"  {label} ({region.name})")
    return "\n".join(lines)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tip and sales-tax calculator for Canadian provinces and territories."
    )
    parser.add_argument("--bill", help="Bill amount, e.g. 18.94 or $18.94. Unreadable amounts count as 0")
    parser.add_argument("--tip", default=None, help="Tip percentage from the table (0, 5, 10, 15, 20, 25). Default comes from config")
    parser.add_argument("--province", default=None, help="Province/territory code, e.g. ON. Default comes from config")
    parser.add_argument("--currency", choices=list(CURRENCIES), default=None, help="Currency for display")
    parser.add_argument("--locale", help="Locale for formatting (e.g., en_CA, fr_CA)")
    parser.add_argument("--format", choices=["auto", "simple", "locale"], default="auto", help="Output formatting style: simple, or locale-aware via Babel")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    parser.add_argument("--csv", action="store_true", help="Output results as CSV")
    parser.add_argument("--copy", action="store_true", help="Copy the output to clipboard")
    parser.add_argument("--list", action="store_true", help="List tip options and provincial tax rates")
    parser.add_argument("--config", help="Path to a JSON config or .env file")
    parser.add_argument("--interactive", action="store_true", help="Force interactive mode regardless of provided flags.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr")
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.error(str(exc))

    currency = args.currency or config.currency
    locale_value = args.locale or config.locale
    fmt_mode = args.format
    if fmt_mode == "locale":
        output_locale: Optional[str] = locale_value or DEFAULT_LOCALE
    elif fmt_mode == "auto":
        output_locale = locale_value
    else:
        output_locale = None

    if args.list:
        print(list_options(locale=output_locale, currency=currency))
        return 0

    try:
        tip_idx = parse_tip_choice(args.tip) if args.tip is not None else config.default_tip_index
        region_idx = parse_province(args.province) if args.province is not None else config.province_index
    except ValueError as e:
        parser.error(str(e))
        return 2

    if args.interactive or args.bill is None:
        config.default_tip_index = tip_idx
        config.province_index = region_idx
        try:
            run_interactive(config, locale=output_locale)
            return 0
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            return 0

    try:
        bill = parse_money(args.bill)
    except ValueError as e:
        logger.warning("Unreadable --bill %r (%s); using 0.", args.bill, e)
        bill = Decimal("0")

    result = compute(bill, tip_idx, region_idx)
    logger.debug(
        "bill=%s tip_rate=%s region=%s -> tip=%s tax=%s total=%s",
        result.bill, result.tip_rate, result.region.code, result.tip, result.tax, result.total,
    )

    d = results_to_dict(result, currency=currency)
    if args.json:
        out = json.dumps(d)
    elif args.csv:
        out = ",".join(CSV_COLUMNS) + "\n" + dict_to_csv_line(d)
    else:
        out = print_results(result, make_formatter(output_locale, currency))
    print(out)
    if args.copy:
        if not copy_to_clipboard(out):
            print("(Could not copy to clipboard on this system)", file=sys.stderr)
    return 0
