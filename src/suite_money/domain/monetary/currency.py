from __future__ import annotations

from typing import Any, Mapping


class Currency:
    """Represents a currency with its canonical key, short id and display metadata.

    Instances are built once by the currency loader and shared by every Money
    that refers to them.

    Attributes:
        key (str): Canonical lowercase identifier (e.g., "usd").
        iso_code (str): Alphabetic ISO code (e.g., "USD").
        id (int | None): Short numeric identifier. None only when missing ids were silenced.
        symbol (str): Display symbol (e.g., "$").
        subunit_to_unit (int): Number of minor units in one unit (e.g., 100).
        decimal_mark (str): Character separating units from minor units.
        thousands_separator (str): Character grouping thousands.
    """

    def __init__(
        self,
        key: str,
        iso_code: str,
        subunit_to_unit: int,
        symbol: str = "",
        decimal_mark: str = ".",
        thousands_separator: str = ",",
        id: int | None = None,
        name: str = "",
        priority: int = 100,
        subunit: str = "",
        symbol_first: bool = True,
        html_entity: str = "",
        iso_numeric: str = "",
        alternate_symbols: tuple[str, ...] = (),
    ):
        """Initialize a Currency instance.

        Raises:
            ValueError: If any field has an invalid value.
            TypeError: If $alternate_symbols is not a sequence of strings.
        """
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"$key must be a non-empty string, but provided value is: '{key}'")

        if not isinstance(iso_code, str) or not iso_code.strip():
            raise ValueError(f"$iso_code must be a non-empty string, but provided value is: '{iso_code}'")

        if isinstance(subunit_to_unit, bool) or not isinstance(subunit_to_unit, int) or subunit_to_unit < 1:
            raise ValueError(f"$subunit_to_unit must be an integer >= 1, but provided value is: {subunit_to_unit}")

        if id is not None and (isinstance(id, bool) or not isinstance(id, int)):
            raise ValueError(f"$id must be an integer or None, but provided value is: {id}")

        if not isinstance(decimal_mark, str) or len(decimal_mark) != 1:
            raise ValueError(f"$decimal_mark must be a single character, but provided value is: '{decimal_mark}'")

        # Empty separator means digits are not grouped
        if not isinstance(thousands_separator, str) or len(thousands_separator) > 1:
            raise ValueError(f"$thousands_separator must be at most one character, but provided value is: '{thousands_separator}'")

        if thousands_separator == decimal_mark:
            raise ValueError(f"$thousands_separator and $decimal_mark must differ, but both are: '{decimal_mark}'")

        if isinstance(alternate_symbols, str) or not all(isinstance(s, str) for s in alternate_symbols):
            raise TypeError(f"$alternate_symbols must be a sequence of strings, but provided value is: {alternate_symbols}")

        self._key = key.strip().lower()
        self._iso_code = iso_code.strip().upper()
        self._id = id
        self._symbol = symbol or ""
        self._subunit_to_unit = subunit_to_unit
        self._decimal_mark = decimal_mark
        self._thousands_separator = thousands_separator
        self._name = name or ""
        self._priority = int(priority)
        self._subunit = subunit or ""
        self._symbol_first = bool(symbol_first)
        self._html_entity = html_entity or ""
        self._iso_numeric = str(iso_numeric or "")
        self._alternate_symbols = tuple(alternate_symbols)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Currency:
        """Build a Currency from a raw currency-definition record.

        Unknown fields are ignored; missing optional fields take their defaults.

        Args:
            record: Mapping with at least `key`, `iso_code` and `subunit_to_unit`.

        Returns:
            Currency: The validated currency.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        for required in ("key", "iso_code", "subunit_to_unit"):
            if record.get(required) is None:
                raise ValueError(f"Cannot call `Currency.from_record` because field '{required}' is missing in record: {dict(record)}")

        return cls(
            key=record["key"],
            iso_code=record["iso_code"],
            subunit_to_unit=record["subunit_to_unit"],
            symbol=record.get("symbol") or "",
            decimal_mark=record.get("decimal_mark") or ".",
            # An explicit empty separator is meaningful, so only None falls back
            thousands_separator="," if record.get("thousands_separator") is None else record["thousands_separator"],
            id=record.get("id"),
            name=record.get("name") or "",
            priority=record.get("priority", 100),
            subunit=record.get("subunit") or "",
            symbol_first=record.get("symbol_first", True),
            html_entity=record.get("html_entity") or "",
            iso_numeric=record.get("iso_numeric") or "",
            alternate_symbols=tuple(record.get("alternate_symbols") or ()),
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def iso_code(self) -> str:
        return self._iso_code

    @property
    def id(self) -> int | None:
        return self._id

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def subunit_to_unit(self) -> int:
        return self._subunit_to_unit

    @property
    def decimal_mark(self) -> str:
        return self._decimal_mark

    @property
    def thousands_separator(self) -> str:
        return self._thousands_separator

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def subunit(self) -> str:
        return self._subunit

    @property
    def symbol_first(self) -> bool:
        return self._symbol_first

    @property
    def html_entity(self) -> str:
        return self._html_entity

    @property
    def iso_numeric(self) -> str:
        return self._iso_numeric

    @property
    def alternate_symbols(self) -> tuple[str, ...]:
        return self._alternate_symbols

    @property
    def decimal_places(self) -> int:
        """Number of fractional digits read by the parser.

        Derived from the width of $subunit_to_unit, but never below 1 so that
        currencies with non-decimal subunits (e.g. MGA, 5 subunits) still read
        one fractional digit.
        """
        return max(1, len(str(self._subunit_to_unit)) - 1)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Currency):
            return False
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.iso_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key='{self.key}', iso_code='{self.iso_code}', id={self.id}, subunit_to_unit={self.subunit_to_unit})"
