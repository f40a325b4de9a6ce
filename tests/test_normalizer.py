from __future__ import annotations

from datetime import UTC, datetime

from skillforge.services.normalizer import normalize_records, parse_datetime

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def test_empty_snapshot_is_empty_list() -> None:
    assert normalize_records(None) == []
    assert normalize_records({}) == []


def test_ids_come_from_keys_and_items_sorted_newest_first() -> None:
    raw = {
        "-a": {"title": "old", "createdAt": "2025-01-01T00:00:00+00:00"},
        "-b": {"title": "new", "createdAt": "2025-05-01T00:00:00+00:00"},
        "-c": {"title": "mid", "createdAt": "2025-03-01T00:00:00Z"},
    }

    items = normalize_records(raw, now=NOW)

    assert [item["id"] for item in items] == ["-b", "-c", "-a"]
    assert [item["title"] for item in items] == ["new", "mid", "old"]
    assert all(isinstance(item["createdAt"], datetime) for item in items)


def test_key_overrides_stale_embedded_id() -> None:
    items = normalize_records({"-real": {"id": "stale", "createdAt": NOW.isoformat()}})
    assert items[0]["id"] == "-real"


def test_missing_dates_default_to_now() -> None:
    items = normalize_records({"-a": {"title": "t"}}, now=NOW)

    assert items[0]["createdAt"] == NOW
    assert items[0]["updatedAt"] == NOW
    assert "targetDate" not in items[0]


def test_target_date_and_timestamp_are_parsed() -> None:
    raw = {"-a": {"targetDate": "2025-07-01T00:00:00+00:00", "timestamp": "2025-06-01T10:00:00+00:00"}}
    item = normalize_records(raw, now=NOW)[0]

    assert item["targetDate"] == datetime(2025, 7, 1, tzinfo=UTC)
    assert item["timestamp"] == datetime(2025, 6, 1, 10, tzinfo=UTC)


def test_sort_by_timestamp_field() -> None:
    raw = {
        "-a": {"timestamp": "2025-06-01T09:00:00+00:00"},
        "-b": {"timestamp": "2025-06-01T11:00:00+00:00"},
    }
    items = normalize_records(raw, sort_field="timestamp", now=NOW)
    assert [item["id"] for item in items] == ["-b", "-a"]


def test_non_object_records_are_skipped() -> None:
    items = normalize_records({"-a": "garbage", "-b": {"title": "ok"}}, now=NOW)
    assert [item["id"] for item in items] == ["-b"]


def test_input_is_not_mutated() -> None:
    raw = {"-a": {"createdAt": "2025-01-01T00:00:00+00:00"}}
    normalize_records(raw)
    assert raw == {"-a": {"createdAt": "2025-01-01T00:00:00+00:00"}}


def test_parse_datetime_variants() -> None:
    assert parse_datetime("2025-01-01T00:00:00") == datetime(2025, 1, 1, tzinfo=UTC)
    assert parse_datetime(0) == datetime(1970, 1, 1, tzinfo=UTC)
    assert parse_datetime(NOW) == NOW
    assert parse_datetime("not a date") is None
    assert parse_datetime(None) is None
    assert parse_datetime("") is None
