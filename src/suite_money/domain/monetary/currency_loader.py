"""Reading and merging of raw currency-definition records.

The loader turns three record sources into validated `Currency` objects:

1. a base set of currency records keyed by currency key,
2. a supplemental set whose entries replace base entries with the same key,
3. a key -> short numeric id mapping.

Sources are plain callables returning mappings, so tests and host applications
can feed records from anywhere. `JsonFileSource` reads the packaged JSON files.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from suite_money.domain.monetary.currency import Currency
from suite_money.errors import LoadError, UnknownCurrencyError

logger = logging.getLogger(__name__)

RecordMapping = Mapping[str, Mapping[str, Any]]
RecordSource = Callable[[], RecordMapping]
IdSource = Callable[[], Mapping[str, int]]

BASE_FILENAME = "currency.json"
SUPPLEMENTAL_FILENAME = "currency_bc.json"
IDS_FILENAME = "currency_ids.json"


class JsonFileSource:
    """Callable source reading one JSON object from $path."""

    def __init__(self, path: Path | str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def __call__(self) -> dict:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise LoadError(f"Cannot read currency data file '{self._path}': {e}") from e

        if not isinstance(data, dict):
            raise LoadError(f"Currency data file '{self._path}' must hold a JSON object, but holds {type(data).__name__}")
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self._path}')"


# region Loading steps


def merge_records(base: RecordMapping, supplemental: RecordMapping) -> dict[str, dict[str, Any]]:
    """Merge two record sets; a supplemental record fully replaces the base record with the same key.

    Records are copied, so the sources are never mutated.
    """
    merged: dict[str, dict[str, Any]] = {key: dict(record) for key, record in base.items()}
    for key, record in supplemental.items():
        merged[key] = dict(record)
    return merged


def assign_keys(records: dict[str, dict[str, Any]]) -> None:
    """Store each record's mapping key as its canonical `key` field.

    Raises:
        LoadError: If a record already carries a different key.
    """
    for key, record in records.items():
        existing = record.get("key")
        if existing is not None and existing != key:
            raise LoadError(f"Currency already has key ({existing}) but we want to give it a new one ({key})")
        record["key"] = key


def assign_ids(records: dict[str, dict[str, Any]], ids: Mapping[str, int]) -> None:
    """Store the short numeric id of every record named in $ids.

    Raises:
        UnknownCurrencyError: If $ids names a key that has no record.
    """
    for key, currency_id in ids.items():
        record = records.get(key)
        if record is None:
            raise UnknownCurrencyError(key)
        record["id"] = currency_id


def find_missing_ids(records: Mapping[str, Mapping[str, Any]]) -> list[str]:
    """Return ISO codes of records that have no short id, in record order."""
    return [str(record.get("iso_code", key)) for key, record in records.items() if record.get("id") is None]


# endregion


class CurrencyLoader:
    """Builds the list of known currencies from record sources.

    Args:
        base_source: Callable returning the base record set.
        supplemental_source: Callable returning records that override or extend the base set.
        ids_source: Callable returning the key -> short id mapping.
    """

    def __init__(self, base_source: RecordSource, supplemental_source: RecordSource, ids_source: IdSource):
        self._base_source = base_source
        self._supplemental_source = supplemental_source
        self._ids_source = ids_source

    @classmethod
    def from_directory(cls, data_dir: Path | str) -> CurrencyLoader:
        """Create a loader reading the standard JSON files from $data_dir."""
        data_dir = Path(data_dir)
        return cls(
            base_source=JsonFileSource(data_dir / BASE_FILENAME),
            supplemental_source=JsonFileSource(data_dir / SUPPLEMENTAL_FILENAME),
            ids_source=JsonFileSource(data_dir / IDS_FILENAME),
        )

    def load_records(self) -> dict[str, dict[str, Any]]:
        """Read, merge and annotate the raw records with `key` and `id`.

        No validation of missing ids happens here; see `find_missing_ids`.
        """
        records = merge_records(self._base_source(), self._supplemental_source())
        assign_keys(records)
        assign_ids(records, self._ids_source())
        return records

    def load_currencies(self, silence_missing_ids: bool = False) -> list[Currency]:
        """Load all currencies as validated `Currency` objects.

        Args:
            silence_missing_ids: Accept currencies without a short id. Only the
                maintenance workflow that hands out new ids should pass True.

        Returns:
            list[Currency]: Currencies in record order.

        Raises:
            LoadError: If records conflict, are malformed, or lack ids (unless silenced).
            UnknownCurrencyError: If the id mapping names an unknown key.
        """
        records = self.load_records()

        missing = find_missing_ids(records)
        if missing and not silence_missing_ids:
            raise LoadError(f"The following currencies are missing short IDs: {', '.join(missing)}", missing_iso_codes=missing)
        if missing:
            logger.warning(f"Loading {len(missing)} currency(ies) without short IDs because $silence_missing_ids is set: {', '.join(missing)}")

        currencies: list[Currency] = []
        for key, record in records.items():
            try:
                currencies.append(Currency.from_record(record))
            except (ValueError, TypeError) as e:
                raise LoadError(f"Invalid currency record for key '{key}': {e}") from e

        logger.info(f"Loaded {len(currencies)} currency(ies); {len(missing)} without short IDs")
        return currencies
