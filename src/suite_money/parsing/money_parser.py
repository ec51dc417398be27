"""Parsing of free-text monetary input into Money.

Examples (default currency USD):
    "100"              -> Money(10000, USD)
    "100.37"           -> Money(10037, USD)
    "USD 100"          -> Money(10000, USD)
    "100 USD"          -> Money(10000, USD)
    "hello 2000 world" -> Money(200000, USD)
    "EUR 1.234,56"     -> Money(123456, EUR)
"""
from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation, localcontext

from suite_money.config import MoneySettings, get_default_settings
from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry, get_default_registry
from suite_money.domain.monetary.exchange_bank import ExchangeBank, get_default_bank
from suite_money.domain.monetary.money import Money
from suite_money.errors import CurrencyMismatchError, InvalidAmountError
from suite_money.utils.decimal_tools import DecimalLike, as_decimal, round_half_up

logger = logging.getLogger(__name__)

# Leading symbols honoured when `MoneySettings.assume_from_symbol` is enabled
SYMBOL_CURRENCIES: dict[str, str] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
}

_CURRENCY_CODE_PATTERN = re.compile(r"[A-Z]{2,3}")
_DIGIT_PATTERN = re.compile(r"[0-9]")


class MoneyParser:
    """Turns text such as "USD 1,234.56" into Money.

    Args:
        registry: Registry resolving currency codes. Defaults to the process registry.
        bank: Bank given to every parsed Money. Defaults to the process bank.
        settings: Default currency and symbol handling. Defaults to the process settings.
    """

    def __init__(
        self,
        registry: CurrencyRegistry | None = None,
        bank: ExchangeBank | None = None,
        settings: MoneySettings | None = None,
    ):
        self._registry = registry if registry is not None else get_default_registry()
        self._bank = bank if bank is not None else get_default_bank()
        self._settings = settings if settings is not None else get_default_settings()

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    @property
    def settings(self) -> MoneySettings:
        return self._settings

    # region Parsing

    def parse(self, text: str, currency: Currency | str | None = None) -> Money:
        """Parse $text into Money, discarding characters that are not part of the amount.

        Args:
            text: Input such as "100", "USD 1,234.56" or "$100".
            currency: Expected currency. Must agree with any code stated in $text.

        Returns:
            Money: The parsed amount in the negotiated currency.

        Raises:
            CurrencyMismatchError: If $currency and the code in $text differ.
            UnknownCurrencyError: If the negotiated currency is not in the registry.
            InvalidAmountError: If the numeric part of $text is malformed.
        """
        trimmed = str(text).strip()

        detected = self.detect_currency(trimmed)
        code = self._negotiate_currency(currency, detected)
        resolved = self._registry.wrap(code)
        logger.debug(f"Parsing '{trimmed}': $currency={currency!r}, detected={detected!r}, resolved={resolved.iso_code}")

        minor_units = self.extract_amount(trimmed, resolved)
        return Money(minor_units, resolved, self._bank, self._registry)

    def detect_currency(self, text: str) -> str | None:
        """Return the currency code stated in $text, or None.

        A leading `$`, `€` or `£` decides when symbol handling is enabled;
        otherwise the first run of 2-3 uppercase letters is taken.
        """
        if self._settings.assume_from_symbol and text[:1] in SYMBOL_CURRENCIES:
            return SYMBOL_CURRENCIES[text[:1]]

        match = _CURRENCY_CODE_PATTERN.search(text)
        return match.group(0) if match else None

    def _negotiate_currency(self, hint: Currency | str | None, detected: str | None) -> Currency | str:
        if hint is None:
            return detected if detected is not None else self._settings.default_currency

        if detected is not None:
            hint_code = hint.iso_code if isinstance(hint, Currency) else hint.strip().upper()
            if hint_code != detected:
                raise CurrencyMismatchError(hint_code, detected)
        return hint

    def extract_amount(self, text: str, currency: Currency | str | None = None) -> int:
        """Extract the amount in $text as minor units of $currency.

        Separators are read from $currency: its thousands separator (and any
        apostrophe) is dropped and its decimal mark splits units from the fraction.

        Args:
            text: Text containing a number, e.g. "1,234.56" or "-5.00".
            currency: Currency whose separators and subunit apply. Defaults to the default currency.

        Returns:
            int: Amount in minor units.

        Raises:
            InvalidAmountError: If a minus sign is misplaced, no digits are present,
                or more than one decimal mark remains.
        """
        currency = self._registry.wrap(currency if currency is not None else self._settings.default_currency)

        keep = "0-9" + re.escape(currency.thousands_separator) + re.escape(currency.decimal_mark) + "'\\-"
        num = re.sub(f"[^{keep}]", "", text)

        negative = False
        if num.startswith("-"):
            negative, num = True, num[1:]
        elif num.endswith("-"):
            negative, num = True, num[:-1]

        if "-" in num:
            raise InvalidAmountError(text, "hyphen")

        num = num.replace("'", "")
        if currency.thousands_separator:
            num = num.replace(currency.thousands_separator, "")
        num = num.replace(currency.decimal_mark, ".")

        if not _DIGIT_PATTERN.search(num):
            raise InvalidAmountError(text, "no digits")
        if num.count(".") > 1:
            raise InvalidAmountError(text, "more than one decimal mark")

        major_text, _, minor_text = num.partition(".")
        major = int(major_text or "0")
        fraction = Decimal(f"0.{minor_text}") if minor_text else Decimal(0)

        minor_units = major * currency.subunit_to_unit + round_half_up(fraction * (10**currency.decimal_places))
        return -minor_units if negative else minor_units

    # endregion

    # region Conversion from unit amounts

    def from_string(self, value: str, currency: Currency | str | None = None) -> Money:
        """Create Money from a decimal string of whole units, e.g. "100" -> 10000 cents.

        Raises:
            InvalidAmountError: If $value is not a decimal number.
        """
        try:
            decimal_value = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise InvalidAmountError(str(value), "not a decimal number") from e
        return self.from_non_string(decimal_value, currency)

    def from_non_string(self, value: DecimalLike, currency: Currency | str | None = None) -> Money:
        """Create Money from a number of whole units, scaled by the currency's subunit."""
        resolved = self._registry.wrap(currency if currency is not None else self._settings.default_currency)
        decimal_value = as_decimal(value)
        with localcontext() as ctx:
            if decimal_value.is_finite():
                ctx.prec = max(ctx.prec, len(decimal_value.as_tuple().digits) + len(str(resolved.subunit_to_unit)) + 2)
            minor_units = decimal_value * resolved.subunit_to_unit
        return Money(minor_units, resolved, self._bank, self._registry)

    # endregion


def parse_money(text: str, currency: Currency | str | None = None) -> Money:
    """Parse $text with the process registry, bank and settings."""
    return MoneyParser().parse(text, currency)
