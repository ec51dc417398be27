from __future__ import annotations

import logging
from threading import Lock
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from bidict import frozenbidict, ValueDuplicationError

from suite_money.config import MoneySettings, get_default_settings
from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_loader import CurrencyLoader
from suite_money.errors import LoadError, UnknownCurrencyError

logger = logging.getLogger(__name__)


class CurrencyRegistry:
    """Immutable set of known currencies with lookup by key, ISO code, symbol and id.

    A registry is built once (normally by `CurrencyRegistry.load`) and then
    shared read-only by every Money and parser in the process.
    """

    def __init__(self, currencies: Iterable[Currency]):
        """Index $currencies.

        Raises:
            LoadError: If two currencies share a key or a short id.
        """
        by_key: dict[str, Currency] = {}
        by_iso: dict[str, Currency] = {}
        by_symbol: dict[str, Currency] = {}

        for currency in currencies:
            if currency.key in by_key:
                raise LoadError(f"Duplicate currency key '{currency.key}' in registry")
            by_key[currency.key] = currency

        # Order by priority so the preferred currency wins ISO code and symbol ties
        for currency in sorted(by_key.values(), key=lambda c: c.priority):
            by_iso.setdefault(currency.iso_code.lower(), currency)
            for symbol in (currency.symbol, *currency.alternate_symbols):
                if symbol:
                    by_symbol.setdefault(symbol.lower(), currency)

        try:
            ids = frozenbidict((c.key, c.id) for c in by_key.values() if c.id is not None)
        except ValueDuplicationError as e:
            raise LoadError(f"Duplicate short id in registry: {e}") from e

        self._by_key: Mapping[str, Currency] = MappingProxyType(by_key)
        self._by_iso: Mapping[str, Currency] = MappingProxyType(by_iso)
        self._by_symbol: Mapping[str, Currency] = MappingProxyType(by_symbol)
        self._ids: frozenbidict[str, int] = ids

    # region Loading

    @classmethod
    def load(
        cls,
        silence_missing_ids: bool = False,
        loader: CurrencyLoader | None = None,
        settings: MoneySettings | None = None,
    ) -> CurrencyRegistry:
        """Load a new registry.

        Args:
            silence_missing_ids: Accept currencies without short ids (maintenance use only).
            loader: Source of currencies. Defaults to the JSON files in $settings.data_dir.
            settings: Settings used when $loader is not given.

        Returns:
            CurrencyRegistry: Fully loaded registry. Nothing is returned when loading fails.

        Raises:
            LoadError: If the records conflict, are malformed, or lack short ids.
            UnknownCurrencyError: If the id mapping references an unknown currency key.
        """
        if loader is None:
            settings = settings or get_default_settings()
            loader = CurrencyLoader.from_directory(settings.data_dir)

        return cls(loader.load_currencies(silence_missing_ids=silence_missing_ids))

    # endregion

    # region Lookup

    def wrap(self, value: Currency | str) -> Currency:
        """Normalize $value into the registry's canonical Currency.

        Strings are matched case-insensitively against keys, then ISO codes, then symbols.

        Args:
            value: A Currency, currency key, ISO code or symbol.

        Returns:
            Currency: The canonical currency.

        Raises:
            UnknownCurrencyError: If nothing in the registry matches.
            TypeError: If $value is neither a Currency nor a string.
        """
        if isinstance(value, Currency):
            currency = self._by_key.get(value.key)
            if currency is None:
                raise UnknownCurrencyError(value.key)
            return currency

        if not isinstance(value, str):
            raise TypeError(f"Cannot call `wrap` because $value must be a Currency or str, but provided value is: {value!r}")

        text = value.strip().lower()
        currency = self._by_key.get(text) or self._by_iso.get(text) or self._by_symbol.get(text)
        if currency is None:
            raise UnknownCurrencyError(value)
        return currency

    def get(self, key: str) -> Currency | None:
        return self._by_key.get(key.lower())

    def find_by_iso_code(self, iso_code: str) -> Currency | None:
        return self._by_iso.get(iso_code.strip().lower())

    def find_by_id(self, currency_id: int) -> Currency | None:
        key = self._ids.inverse.get(currency_id)
        return None if key is None else self._by_key[key]

    @property
    def ids(self) -> frozenbidict[str, int]:
        """Read-only bidirectional mapping between currency keys and short ids."""
        return self._ids

    def missing_ids(self) -> list[str]:
        """ISO codes of currencies that have no short id."""
        return [c.iso_code for c in self._by_key.values() if c.id is None]

    def __getitem__(self, key: str) -> Currency:
        currency = self.get(key)
        if currency is None:
            raise UnknownCurrencyError(key)
        return currency

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._by_key

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self)} currencies)"

    # endregion


# region Default registry

_default_registry: CurrencyRegistry | None = None
_default_registry_lock = Lock()


def get_default_registry(settings: MoneySettings | None = None) -> CurrencyRegistry:
    """Return the process-wide registry, loading it on first use.

    Concurrent first calls run at most one load; all callers receive the same
    registry. If the load fails, the error propagates, nothing is stored, and
    the next call tries again.

    Args:
        settings: Settings used for the first load only.

    Returns:
        CurrencyRegistry: The shared registry.
    """
    global _default_registry
    if _default_registry is not None:
        return _default_registry

    with _default_registry_lock:
        # Another thread may have finished loading while we waited
        if _default_registry is None:
            registry = CurrencyRegistry.load(settings=settings)
            _default_registry = registry
            logger.debug(f"Default currency registry loaded with {len(registry)} currency(ies)")
        return _default_registry


# endregion
