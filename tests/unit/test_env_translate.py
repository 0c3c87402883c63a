"""Tests for translating between flat and multi-context variables."""

from __future__ import annotations

from site_env.env import translate_from_envelope_to_mongo, translate_from_mongo_to_envelope
from site_env.types import ALL_SCOPES, Context, VariableRecord


def _record(key: str, *values: tuple[str, str]) -> VariableRecord:
    return VariableRecord.model_validate(
        {
            "key": key,
            "scopes": ["builds"],
            "values": [{"context": c, "value": v} for c, v in values],
        }
    )


class TestMongoToEnvelope:
    def test_record_shape(self) -> None:
        (record,) = translate_from_mongo_to_envelope({"FOO": "bar"})
        assert record.key == "FOO"
        assert record.scopes == list(ALL_SCOPES)
        assert len(record.values) == 1
        assert record.values[0].context is Context.ALL
        assert record.values[0].value == "bar"

    def test_keeps_input_order(self) -> None:
        records = translate_from_mongo_to_envelope({"b": "1", "A": "2"})
        assert [r.key for r in records] == ["b", "A"]

    def test_empty(self) -> None:
        assert translate_from_mongo_to_envelope() == []
        assert translate_from_mongo_to_envelope({}) == []


class TestEnvelopeToMongo:
    def test_uses_dev_value(self) -> None:
        records = [_record("FOO", ("production", "prod"), ("dev", "local"))]
        assert translate_from_envelope_to_mongo(records) == {"FOO": "local"}

    def test_uses_all_value(self) -> None:
        records = [_record("FOO", ("production", "prod"), ("all", "any"))]
        assert translate_from_envelope_to_mongo(records) == {"FOO": "any"}

    def test_first_of_dev_or_all_wins(self) -> None:
        records = [_record("FOO", ("all", "any"), ("dev", "local"))]
        assert translate_from_envelope_to_mongo(records) == {"FOO": "any"}

    def test_drops_records_without_dev_value(self) -> None:
        records = [_record("FOO", ("production", "prod")), _record("BAR", ("dev", "x"))]
        assert translate_from_envelope_to_mongo(records) == {"BAR": "x"}

    def test_drops_empty_values(self) -> None:
        """Empty values are omitted rather than written as empty strings."""
        records = [_record("EMPTY", ("dev", "")), _record("FULL", ("dev", "x"))]
        assert translate_from_envelope_to_mongo(records) == {"FULL": "x"}

    def test_sorted_case_insensitive(self) -> None:
        records = [_record("banana", ("all", "1")), _record("Apple", ("all", "2"))]
        assert list(translate_from_envelope_to_mongo(records)) == ["Apple", "banana"]

    def test_does_not_reorder_input(self) -> None:
        records = [_record("b", ("all", "1")), _record("A", ("all", "2"))]
        translate_from_envelope_to_mongo(records)
        assert [r.key for r in records] == ["b", "A"]

    def test_empty(self) -> None:
        assert translate_from_envelope_to_mongo() == {}


class TestRoundTrip:
    def test_flat_env_survives(self) -> None:
        env = {"FOO": "bar"}
        assert translate_from_envelope_to_mongo(translate_from_mongo_to_envelope(env)) == env

    def test_other_contexts_lost(self) -> None:
        """Only the dev/all value survives flattening."""
        records = [_record("FOO", ("dev", "local"), ("production", "prod"))]
        flat = translate_from_envelope_to_mongo(records)
        (back,) = translate_from_mongo_to_envelope(flat)
        assert [v.value for v in back.values] == ["local"]


class TestJSONRecords:
    def test_envelope_to_mongo_accepts_dicts(self) -> None:
        records = [
            {"key": "b", "scopes": ["builds"], "values": [{"context": "dev", "value": "1"}]},
            {"key": "A", "scopes": [], "values": [{"context": "all", "value": "2"}]},
        ]
        assert translate_from_envelope_to_mongo(records) == {"A": "2", "b": "1"}
