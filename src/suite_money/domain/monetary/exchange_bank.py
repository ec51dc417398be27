from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, localcontext
from threading import Lock

from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry, get_default_registry
from suite_money.errors import RateNotFoundError
from suite_money.utils.decimal_tools import DecimalLike, as_decimal, round_half_up

logger = logging.getLogger(__name__)

CurrencyLike = Currency | str


class ExchangeBank:
    """Stores directed exchange rates and converts minor-unit amounts with them.

    Rates are one-way: the rate for (A, B) is independent of the rate for
    (B, A). Converting a currency into itself never needs a rate.

    Thread Safety:
        Every ordered pair has its own lock. Writers replace a pair's rate
        while holding that lock and readers take the same lock, so a reader
        sees either the old or the new rate. Different pairs never wait on
        each other; the table lock only guards creation of pair locks.
    """

    def __init__(self, registry: CurrencyRegistry | None = None):
        """Initialize an empty rate table.

        Args:
            registry: Registry resolving codes, keys and symbols to canonical keys.
                Defaults to the process registry, loaded on first textual lookup.
        """
        self._registry = registry
        self._rates: dict[tuple[str, str], Decimal] = {}
        self._pair_locks: dict[tuple[str, str], Lock] = {}
        self._table_lock = Lock()

    def _lock_for(self, pair: tuple[str, str]) -> Lock:
        lock = self._pair_locks.get(pair)
        if lock is None:
            with self._table_lock:
                lock = self._pair_locks.setdefault(pair, Lock())
        return lock

    @property
    def registry(self) -> CurrencyRegistry:
        if self._registry is None:
            self._registry = get_default_registry()
        return self._registry

    def currency_key(self, currency: CurrencyLike) -> str:
        """Return the canonical key of $currency.

        Strings (ISO code, key or symbol) are resolved through the registry.

        Raises:
            UnknownCurrencyError: If a string matches no registered currency.
            TypeError: If $currency is neither a Currency nor a string.
        """
        if isinstance(currency, Currency):
            return currency.key
        if isinstance(currency, str):
            return self.registry.wrap(currency).key
        raise TypeError(f"$currency must be a Currency or str, but provided value is: {currency!r}")

    # region Rates

    def add_rate(self, from_currency: CurrencyLike, to_currency: CurrencyLike, rate: DecimalLike) -> Decimal | None:
        """Store or replace the rate converting $from_currency into $to_currency.

        Args:
            from_currency: Source currency (Currency, ISO code or key).
            to_currency: Target currency (Currency, ISO code or key).
            rate: Positive multiplicative factor.

        Returns:
            Decimal | None: The replaced rate, or None if the pair had no rate.

        Raises:
            ValueError: If $rate is not a positive number.
        """
        try:
            rate_decimal = as_decimal(rate)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValueError(f"Cannot call `add_rate` because $rate ({rate}) cannot be converted to Decimal") from e

        if not rate_decimal.is_finite() or rate_decimal <= 0:
            raise ValueError(f"Cannot call `add_rate` because $rate ({rate_decimal}) is not a positive number")

        pair = (self.currency_key(from_currency), self.currency_key(to_currency))
        with self._lock_for(pair):
            previous = self._rates.get(pair)
            self._rates[pair] = rate_decimal

        if previous is None:
            logger.debug(f"Added exchange rate {pair[0]} -> {pair[1]}: {rate_decimal}")
        else:
            logger.debug(f"Replaced exchange rate {pair[0]} -> {pair[1]}: {previous} -> {rate_decimal}")
        return previous

    def rate(self, from_currency: CurrencyLike, to_currency: CurrencyLike) -> Decimal:
        """Return the rate converting $from_currency into $to_currency.

        Raises:
            RateNotFoundError: If the currencies differ and no rate is registered.
        """
        if self.same_currency(from_currency, to_currency):
            return Decimal(1)

        pair = (self.currency_key(from_currency), self.currency_key(to_currency))
        with self._lock_for(pair):
            rate = self._rates.get(pair)

        if rate is None:
            raise RateNotFoundError(*pair)
        return rate

    def rates(self) -> dict[tuple[str, str], Decimal]:
        """Return a snapshot of all registered rates keyed by (from_key, to_key)."""
        with self._table_lock:
            pairs = list(self._pair_locks)
        snapshot: dict[tuple[str, str], Decimal] = {}
        for pair in pairs:
            with self._lock_for(pair):
                if pair in self._rates:
                    snapshot[pair] = self._rates[pair]
        return snapshot

    # endregion

    # region Conversion

    def exchange(self, amount: int, from_currency: CurrencyLike, to_currency: CurrencyLike) -> int:
        """Convert $amount minor units of $from_currency into minor units of $to_currency.

        The product is rounded half up to whole minor units.

        Raises:
            RateNotFoundError: If the currencies differ and no rate is registered.
        """
        if self.same_currency(from_currency, to_currency):
            return amount
        rate = self.rate(from_currency, to_currency)
        # Enough precision for the exact product, so rounding happens only once
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, len(str(abs(amount))) + len(rate.as_tuple().digits) + 2)
            product = Decimal(amount) * rate
        return round_half_up(product)

    def same_currency(self, a: CurrencyLike, b: CurrencyLike) -> bool:
        """Tell whether $a and $b resolve to the same canonical currency key."""
        return self.currency_key(a) == self.currency_key(b)

    # endregion


# region Default bank

_default_bank: ExchangeBank | None = None
_default_bank_lock = Lock()


def get_default_bank() -> ExchangeBank:
    """Return the process-wide ExchangeBank, creating it on first use."""
    global _default_bank
    if _default_bank is None:
        with _default_bank_lock:
            if _default_bank is None:
                _default_bank = ExchangeBank()
    return _default_bank


# endregion
