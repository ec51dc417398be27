from __future__ import annotations

from decimal import InvalidOperation
from typing import Iterable

from suite_money.config import get_default_settings
from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry, get_default_registry
from suite_money.domain.monetary.exchange_bank import ExchangeBank, get_default_bank
from suite_money.domain.monetary.format_option import FormatOption
from suite_money.errors import DivisionError
from suite_money.utils.decimal_tools import DecimalLike, round_half_up


class Money:
    """Immutable amount of minor units (e.g. cents) in one currency.

    Money refers to, but does not own, its Currency (shared through the
    registry) and its ExchangeBank (shared by the process). Operations across
    currencies ask the bank to convert.

    Equality never converts: 1.00 USD is never equal to any EUR amount. Ordering
    and arithmetic do convert the right operand into the left operand's currency.
    """

    def __init__(
        self,
        amount: DecimalLike,
        currency: Currency | str | None = None,
        bank: ExchangeBank | None = None,
        registry: CurrencyRegistry | None = None,
    ):
        """Initialize Money.

        Args:
            amount: Amount in minor units. Fractions are rounded half up.
            currency: Currency, or code/key/symbol resolved through $registry.
                Defaults to the configured default currency.
            bank: Bank used for cross-currency operations. Defaults to the process bank.
            registry: Registry resolving textual currencies. Defaults to the process registry.

        Raises:
            ValueError: If $amount cannot be converted to a number.
            UnknownCurrencyError: If a textual $currency is not in the registry.
        """
        try:
            self._amount: int = round_half_up(amount)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValueError(f"Cannot init `Money` because $amount ({amount}) cannot be converted to Decimal") from e

        self._registry = registry
        self._bank: ExchangeBank = bank if bank is not None else get_default_bank()
        self._currency: Currency = self._resolve_currency(currency)

    def _resolve_currency(self, currency: Currency | str | None) -> Currency:
        if isinstance(currency, Currency):
            # A bound registry swaps in its own instance and rejects currencies it lacks
            return currency if self._registry is None else self._registry.wrap(currency)
        if currency is None:
            currency = get_default_settings().default_currency
        return self.registry.wrap(currency)

    def _new(self, amount: DecimalLike, currency: Currency | str) -> Money:
        return self.__class__(amount, currency, self._bank, self._registry)

    # region Factories

    @classmethod
    def empty(cls, currency: Currency | str | None = None, bank: ExchangeBank | None = None, registry: CurrencyRegistry | None = None) -> Money:
        """Create Money with zero amount."""
        return cls(0, currency, bank, registry)

    @classmethod
    def us_dollar(cls, cents: DecimalLike, bank: ExchangeBank | None = None, registry: CurrencyRegistry | None = None) -> Money:
        return cls(cents, "USD", bank, registry)

    @classmethod
    def ca_dollar(cls, cents: DecimalLike, bank: ExchangeBank | None = None, registry: CurrencyRegistry | None = None) -> Money:
        return cls(cents, "CAD", bank, registry)

    @classmethod
    def euro(cls, cents: DecimalLike, bank: ExchangeBank | None = None, registry: CurrencyRegistry | None = None) -> Money:
        return cls(cents, "EUR", bank, registry)

    # endregion

    # region Properties

    @property
    def amount(self) -> int:
        """Amount in minor units."""
        return self._amount

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def bank(self) -> ExchangeBank:
        return self._bank

    @property
    def registry(self) -> CurrencyRegistry:
        if self._registry is None:
            self._registry = get_default_registry()
        return self._registry

    def is_zero(self) -> bool:
        return self._amount == 0

    # endregion

    # region Exchange

    def exchange_to(self, currency: Currency | str) -> Money:
        """Return this amount converted into $currency using this Money's bank.

        Raises:
            RateNotFoundError: If the bank has no rate for the pair.
        """
        target = self._resolve_currency(currency)
        return self._new(self._bank.exchange(self._amount, self._currency, target), target)

    def as_us_dollar(self) -> Money:
        return self.exchange_to("USD")

    def as_ca_dollar(self) -> Money:
        return self.exchange_to("CAD")

    def as_euro(self) -> Money:
        return self.exchange_to("EUR")

    def to_money(self) -> Money:
        return self

    def _amount_in_own_currency(self, other: Money) -> int:
        if self._bank.same_currency(self._currency, other.currency):
            return other.amount
        return other.exchange_to(self._currency).amount

    # endregion

    # region Comparison

    def __eq__(self, other) -> bool:
        """Same amount in the same currency. Never converts."""
        if not isinstance(other, Money):
            return False
        return self._amount == other.amount and self._bank.same_currency(self._currency, other.currency)

    def __hash__(self) -> int:
        return hash((self._amount, self._currency.key))

    def compare(self, other: Money) -> int:
        """Return -1, 0 or 1 after converting $other into this currency when needed.

        Raises:
            RateNotFoundError: If the currencies differ and no rate is registered.
        """
        other_amount = self._amount_in_own_currency(other)
        return (self._amount > other_amount) - (self._amount < other_amount)

    def __lt__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) >= 0

    # endregion

    # region Arithmetic

    def __add__(self, other):
        """Add Money; the result is in this (left) currency."""
        if not isinstance(other, Money):
            return NotImplemented
        return self._new(self._amount + self._amount_in_own_currency(other), self._currency)

    def __sub__(self, other):
        """Subtract Money; the result is in this (left) currency."""
        if not isinstance(other, Money):
            return NotImplemented
        return self._new(self._amount - self._amount_in_own_currency(other), self._currency)

    def __mul__(self, other):
        """Multiply by an integer scalar."""
        if isinstance(other, Money) or not isinstance(other, int):
            return NotImplemented
        return self._new(self._amount * other, self._currency)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        """Divide by an integer scalar, truncating toward zero.

        Raises:
            DivisionError: If $other is zero.
        """
        if isinstance(other, Money) or not isinstance(other, int):
            return NotImplemented
        if other == 0:
            raise DivisionError(f"Cannot divide {self!r} by zero")
        quotient = abs(self._amount) // abs(other)
        if (self._amount < 0) != (other < 0):
            quotient = -quotient
        return self._new(quotient, self._currency)

    def __neg__(self):
        return self._new(-self._amount, self._currency)

    def __abs__(self):
        return self._new(abs(self._amount), self._currency)

    # endregion

    # region Formatting

    def format(self, *options: FormatOption | str | Iterable[FormatOption | str]) -> str:
        """Format for display.

        Zero is always rendered as "free", whatever the options.

        Examples:
            Money.ca_dollar(100).format() -> "$1.00"
            Money.ca_dollar(599).format(FormatOption.NO_CENTS) -> "$5"
            Money.ca_dollar(570).format("html", "with_currency") -> '$5.70 <span class="currency">CAD</span>'

        Args:
            options: FormatOption members or their string values; lists and sets are flattened.

        Returns:
            str: The formatted amount.

        Raises:
            ValueError: If an option is unknown.
        """
        if self._amount == 0:
            return "free"

        rules: set[FormatOption] = set()
        for option in options:
            if isinstance(option, (FormatOption, str)):
                rules.add(FormatOption.coerce(option))
            else:
                rules.update(FormatOption.coerce(o) for o in option)

        units, cents = divmod(abs(self._amount), 100)
        sign = "-" if self._amount < 0 else ""
        if FormatOption.NO_CENTS in rules:
            formatted = f"${-units if self._amount < 0 else units}"
        else:
            formatted = f"${sign}{units}.{cents:02d}"

        if FormatOption.WITH_CURRENCY in rules:
            code = self._currency.iso_code
            if FormatOption.HTML in rules:
                code = f'<span class="currency">{code}</span>'
            formatted = f"{formatted} {code}"

        return formatted

    def to_display_string(self) -> str:
        """Return the unit amount with two decimals, e.g. '1.00' for 100 minor units."""
        units, cents = divmod(abs(self._amount), 100)
        sign = "-" if self._amount < 0 else ""
        return f"{sign}{units}.{cents:02d}"

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._amount}, {self._currency.iso_code})"

    # endregion
