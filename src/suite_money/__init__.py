__version__ = "0.1.0"

from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry, get_default_registry
from suite_money.domain.monetary.exchange_bank import ExchangeBank, get_default_bank
from suite_money.domain.monetary.format_option import FormatOption
from suite_money.domain.monetary.money import Money
from suite_money.parsing.money_parser import MoneyParser, parse_money

__all__ = [
    "Currency",
    "CurrencyRegistry",
    "ExchangeBank",
    "FormatOption",
    "Money",
    "MoneyParser",
    "get_default_bank",
    "get_default_registry",
    "parse_money",
]
