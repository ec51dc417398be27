from __future__ import annotations

import json

import pytest

from suite_money.domain.monetary.currency_loader import (
    CurrencyLoader,
    JsonFileSource,
    assign_keys,
    find_missing_ids,
    merge_records,
)
from suite_money.errors import LoadError, UnknownCurrencyError
from tests.helpers.test_assistant import TEST_ASSISTANT as TST


def test_supplemental_record_replaces_base_record_entirely() -> None:
    records = TST.currency.create_loader().load_records()

    cad = dict(records["cad"])
    cad.pop("key")
    cad.pop("id")
    assert cad == TST.currency.SUPPLEMENTAL_RECORDS["cad"]
    assert "name" not in records["cad"]


def test_records_unique_to_either_set_are_kept() -> None:
    records = TST.currency.create_loader().load_records()
    assert set(records) == set(TST.currency.BASE_RECORDS) | set(TST.currency.SUPPLEMENTAL_RECORDS)


def test_merge_does_not_mutate_sources() -> None:
    base = {"usd": {"iso_code": "USD", "subunit_to_unit": 100}}
    supplemental = {"eek": {"iso_code": "EEK", "subunit_to_unit": 100}}

    merged = merge_records(base, supplemental)
    assign_keys(merged)

    assert "key" not in base["usd"]
    assert "key" not in supplemental["eek"]
    assert merged["usd"]["key"] == "usd"


def test_conflicting_key_fails_load() -> None:
    base = {"usd": {"key": "dollar", "iso_code": "USD", "subunit_to_unit": 100}}
    loader = TST.currency.create_loader(base=base, supplemental={}, ids={"usd": 1})

    with pytest.raises(LoadError, match="dollar"):
        loader.load_currencies()


def test_matching_preassigned_key_is_accepted() -> None:
    base = {"usd": {"key": "usd", "iso_code": "USD", "subunit_to_unit": 100}}
    loader = TST.currency.create_loader(base=base, supplemental={}, ids={"usd": 1})

    (usd,) = loader.load_currencies()
    assert usd.key == "usd"


def test_ids_are_assigned_by_key() -> None:
    currencies = {c.key: c for c in TST.currency.create_loader().load_currencies()}
    assert currencies["usd"].id == 1
    assert currencies["eek"].id == 18


def test_missing_ids_fail_load_and_name_iso_codes() -> None:
    ids = dict(TST.currency.IDS)
    del ids["jpy"]
    del ids["eek"]
    loader = TST.currency.create_loader(ids=ids)

    with pytest.raises(LoadError) as exc_info:
        loader.load_currencies()

    assert exc_info.value.missing_iso_codes == ["JPY", "EEK"]
    assert "JPY" in str(exc_info.value)
    assert "EEK" in str(exc_info.value)


def test_missing_ids_can_be_silenced() -> None:
    ids = dict(TST.currency.IDS)
    del ids["jpy"]
    loader = TST.currency.create_loader(ids=ids)

    currencies = {c.key: c for c in loader.load_currencies(silence_missing_ids=True)}

    assert currencies["jpy"].id is None
    assert currencies["usd"].id == 1


def test_find_missing_ids_returns_problems_instead_of_raising() -> None:
    records = {
        "usd": {"iso_code": "USD", "id": 1},
        "jpy": {"iso_code": "JPY"},
    }
    assert find_missing_ids(records) == ["JPY"]


def test_id_for_unknown_key_fails_fast() -> None:
    ids = dict(TST.currency.IDS, xyz=99)
    loader = TST.currency.create_loader(ids=ids)

    with pytest.raises(UnknownCurrencyError):
        loader.load_currencies()
    # Not a missing-id problem, so the maintenance flag does not hide it
    with pytest.raises(UnknownCurrencyError):
        loader.load_currencies(silence_missing_ids=True)


def test_malformed_record_fails_load() -> None:
    base = {"usd": {"iso_code": "USD", "subunit_to_unit": 0}}
    loader = TST.currency.create_loader(base=base, supplemental={}, ids={"usd": 1})

    with pytest.raises(LoadError, match="usd") as exc_info:
        loader.load_currencies()
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_from_directory_reads_json_files(tmp_path) -> None:
    (tmp_path / "currency.json").write_text(json.dumps({"usd": {"iso_code": "USD", "subunit_to_unit": 100}}), encoding="utf-8")
    (tmp_path / "currency_bc.json").write_text(json.dumps({"eek": {"iso_code": "EEK", "subunit_to_unit": 100}}), encoding="utf-8")
    (tmp_path / "currency_ids.json").write_text(json.dumps({"usd": 1, "eek": 2}), encoding="utf-8")

    currencies = CurrencyLoader.from_directory(tmp_path).load_currencies()

    assert [(c.key, c.id) for c in currencies] == [("usd", 1), ("eek", 2)]


def test_json_source_requires_object(tmp_path) -> None:
    path = tmp_path / "currency.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(LoadError):
        JsonFileSource(path)()


def test_json_source_reports_missing_file(tmp_path) -> None:
    with pytest.raises(LoadError) as exc_info:
        JsonFileSource(tmp_path / "absent.json")()
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)
