"""Errors raised by the money library.

Every error derives from `MoneyError`, and also from the closest built-in
exception, so callers may catch either.
"""
from __future__ import annotations


class MoneyError(Exception):
    """Base class for all errors raised by suite_money."""


class LoadError(MoneyError):
    """Raised when currency-definition records cannot be turned into a registry."""

    def __init__(self, message: str, missing_iso_codes: list[str] | None = None):
        self.missing_iso_codes = list(missing_iso_codes or [])
        super().__init__(message)


class UnknownCurrencyError(MoneyError, LookupError):
    """Raised when a currency code, key or symbol cannot be resolved."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unknown currency: {value!r}")


class CurrencyMismatchError(MoneyError, ValueError):
    """Raised when an explicit currency disagrees with the one found in parsed text."""

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Mismatching currencies: expected '{expected}' but text states '{found}'")


class InvalidAmountError(MoneyError, ValueError):
    """Raised when text does not hold a well-formed amount."""

    def __init__(self, text: str, reason: str):
        self.text = text
        super().__init__(f"Invalid currency amount in '{text}': {reason}")


class RateNotFoundError(MoneyError, LookupError):
    """Raised when no exchange rate is registered for a currency pair."""

    def __init__(self, from_key: str, to_key: str):
        self.from_key = from_key
        self.to_key = to_key
        super().__init__(f"No exchange rate registered from '{from_key}' to '{to_key}'")


class DivisionError(MoneyError, ZeroDivisionError):
    """Raised when Money is divided by zero."""
