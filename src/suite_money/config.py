from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

DEFAULT_DATA_DIR: Path = Path(__file__).resolve().parent / "data"

ENV_DEFAULT_CURRENCY = "SUITE_MONEY_DEFAULT_CURRENCY"
ENV_ASSUME_FROM_SYMBOL = "SUITE_MONEY_ASSUME_FROM_SYMBOL"
ENV_DATA_DIR = "SUITE_MONEY_DATA_DIR"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class MoneySettings:
    """Process-level settings shared by the registry, Money and the parser.

    Attributes:
        default_currency (str): Currency used when neither caller nor text names one.
        assume_from_symbol (bool): Whether a leading `$`, `€` or `£` decides the
            currency of parsed text.
        data_dir (Path): Directory holding the currency-definition JSON files.
    """

    default_currency: str = "USD"
    assume_from_symbol: bool = False
    data_dir: Path = field(default=DEFAULT_DATA_DIR)


def _parse_bool(name: str, raw: str) -> bool:
    text = raw.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot read setting ${name} because value '{raw}' is not a boolean")


def load_settings() -> MoneySettings:
    """Build `MoneySettings` from the environment.

    A `.env` file in the working directory is loaded first, so settings can be
    kept next to the host application instead of being exported by hand.

    Returns:
        MoneySettings: Settings with environment overrides applied.

    Raises:
        ValueError: If a boolean setting holds unrecognized text.
    """
    load_dotenv()

    default_currency = os.environ.get(ENV_DEFAULT_CURRENCY, "USD").strip() or "USD"
    assume_from_symbol = _parse_bool(ENV_ASSUME_FROM_SYMBOL, os.environ.get(ENV_ASSUME_FROM_SYMBOL, ""))
    data_dir_raw = os.environ.get(ENV_DATA_DIR)
    data_dir = Path(data_dir_raw) if data_dir_raw else DEFAULT_DATA_DIR

    return MoneySettings(
        default_currency=default_currency.upper(),
        assume_from_symbol=assume_from_symbol,
        data_dir=data_dir,
    )


_default_settings: MoneySettings | None = None
_default_settings_lock = Lock()


def get_default_settings() -> MoneySettings:
    """Return settings loaded once from the environment and shared by the process."""
    global _default_settings
    if _default_settings is None:
        with _default_settings_lock:
            if _default_settings is None:
                _default_settings = load_settings()
    return _default_settings
