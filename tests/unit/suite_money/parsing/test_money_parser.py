from __future__ import annotations

import pytest

from suite_money.domain.monetary.money import Money
from suite_money.errors import CurrencyMismatchError, InvalidAmountError, UnknownCurrencyError
from suite_money.parsing.money_parser import MoneyParser, parse_money
from tests.helpers.test_assistant import TEST_ASSISTANT as TST


@pytest.fixture
def registry():
    return TST.currency.create_registry()


@pytest.fixture
def bank(registry):
    return TST.money.create_bank(registry=registry)


@pytest.fixture
def parser(registry, bank) -> MoneyParser:
    return MoneyParser(registry, bank, TST.currency.create_settings())


@pytest.fixture
def symbol_parser(registry, bank) -> MoneyParser:
    return MoneyParser(registry, bank, TST.currency.create_settings(assume_from_symbol=True))


# region extract_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("100", 10000),
        ("100.37", 10037),
        ("-5.00", -500),
        ("5.00-", -500),
        ("1,234.56", 123456),
        ("1'234.56", 123456),
        ("0.5", 50),
        (".75", 75),
        ("100.", 10000),
        ("100.375", 10038),
        ("hello 2000 world", 200000),
    ],
)
def test_extract_amount_with_default_currency(parser, text: str, expected: int) -> None:
    assert parser.extract_amount(text) == expected


@pytest.mark.parametrize(
    "text, currency, expected",
    [
        ("1.234,56", "EUR", 123456),
        ("-1.234,5", "EUR", -123450),
        ("1234", "JPY", 1234),
        ("12.345", "BHD", 12345),
        ("1.2", "MGA", 7),  # 1 * 5 + 2
        ("1'234.50", "CHF", 123450),
    ],
)
def test_extract_amount_uses_currency_separators_and_subunit(parser, text: str, currency: str, expected: int) -> None:
    assert parser.extract_amount(text, currency) == expected


@pytest.mark.parametrize("text", ["1-000", "-1-", "--5", "", "USD", "1.2.3"])
def test_extract_amount_rejects_malformed_text(parser, text: str) -> None:
    with pytest.raises(InvalidAmountError):
        parser.extract_amount(text)


# endregion

# region parse


@pytest.mark.parametrize("text", ["USD 100", "100 USD", "  100 USD  ", "$100 USD"])
def test_parse_reads_stated_currency(parser, registry, text: str) -> None:
    money = parser.parse(text)
    assert money.amount == 10000
    assert money.currency is registry["usd"]


def test_parse_equivalent_inputs_give_equal_money(symbol_parser) -> None:
    values = [symbol_parser.parse("USD 100"), symbol_parser.parse("100 USD"), symbol_parser.parse("$100")]

    assert values[0] == values[1] == values[2]
    assert values[0].amount == 10000


@pytest.mark.parametrize("text, iso_code", [("€100", "EUR"), ("£2.50", "GBP"), ("$1", "USD")])
def test_parse_leading_symbol_when_enabled(symbol_parser, text: str, iso_code: str) -> None:
    assert symbol_parser.parse(text).currency.iso_code == iso_code


def test_parse_ignores_leading_symbol_when_disabled(parser) -> None:
    assert parser.parse("€100").currency.iso_code == "USD"


def test_parse_without_currency_uses_default(registry, bank) -> None:
    parser = MoneyParser(registry, bank, TST.currency.create_settings(default_currency="EUR"))

    money = parser.parse("1.234,56")

    assert money.currency.iso_code == "EUR"
    assert money.amount == 123456


def test_parse_uses_hint_when_text_has_no_code(parser) -> None:
    money = parser.parse("100", "GBP")
    assert money.currency.iso_code == "GBP"
    assert money.amount == 10000


def test_parse_accepts_matching_hint(parser, registry) -> None:
    assert parser.parse("USD 100", "usd") == parser.parse("USD 100")
    assert parser.parse("USD 100", registry["usd"]).amount == 10000


def test_parse_mismatching_hint_fails(parser) -> None:
    with pytest.raises(CurrencyMismatchError) as exc_info:
        parser.parse("USD 2000", "EUR")
    assert (exc_info.value.expected, exc_info.value.found) == ("EUR", "USD")


def test_parse_unknown_currency_fails(parser) -> None:
    with pytest.raises(UnknownCurrencyError):
        parser.parse("100 XYZ")


def test_parse_embedded_hyphen_fails(parser) -> None:
    with pytest.raises(InvalidAmountError):
        parser.parse("USD 1-000")


def test_parsed_money_shares_bank_and_registry(parser, registry, bank) -> None:
    money = parser.parse("CAD 10")
    assert money.bank is bank
    assert money.registry is registry


def test_detect_currency(parser, symbol_parser) -> None:
    assert parser.detect_currency("pay 10 EUR now") == "EUR"
    assert parser.detect_currency("10 eur") is None
    assert symbol_parser.detect_currency("£5 EUR") == "GBP"


# endregion

# region Unit amounts


@pytest.mark.parametrize(
    "value, currency, expected",
    [("100", "USD", 10000), ("100", "EUR", 10000), ("100", "BHD", 100000), ("1.005", "USD", 101), ("100", "JPY", 100)],
)
def test_from_string_scales_by_subunit(parser, value: str, currency: str, expected: int) -> None:
    assert parser.from_string(value, currency).amount == expected


def test_from_string_rejects_non_decimal(parser) -> None:
    with pytest.raises(InvalidAmountError):
        parser.from_string("ten")


def test_from_non_string(parser) -> None:
    assert parser.from_non_string(12.34).amount == 1234
    assert parser.from_non_string(7, "MGA").amount == 35


def test_large_unit_amounts_keep_every_minor_unit(parser) -> None:
    assert parser.from_string("1" + "0" * 30 + ".01", "USD").amount == 10**32 + 1
    assert parser.parse("USD 1" + ",000" * 10 + ".99").amount == 10**32 + 99


# endregion


def test_parse_money_uses_process_defaults() -> None:
    money = parse_money("USD 12.50")
    assert isinstance(money, Money)
    assert money.amount == 1250
    assert money.currency.iso_code == "USD"
