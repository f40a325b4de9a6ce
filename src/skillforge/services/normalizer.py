"""Convert keyed backend snapshots into ordered, typed record lists.

The remote backend stores each collection as ``{generated_id: record}`` with
ISO-8601 strings for dates. ``normalize_records`` turns that into a list of
dicts that carry their ``id`` and real ``datetime`` values, newest first.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

__all__ = ["normalize_records", "parse_datetime"]

# Fields defaulting to "now" when absent; ``targetDate`` stays absent instead.
_DEFAULTED_DATE_FIELDS = ("createdAt", "updatedAt")
_OPTIONAL_DATE_FIELDS = ("targetDate", "timestamp")


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 string, epoch milliseconds, or datetime.

    Returns:
        An aware datetime, or None if ``value`` is empty or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, int | float) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value / 1000, UTC)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            logger.warning("Unparseable date value %r", value)
            return None
    else:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def normalize_records(
    raw: Mapping[str, Any] | None,
    *,
    sort_field: str = "createdAt",
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Turn a ``{key: record}`` snapshot into a list sorted newest first.

    Args:
        raw: Snapshot keyed by backend-generated id. ``None`` means empty.
        sort_field: Date field to sort on, descending.
        now: Value used for missing ``createdAt``/``updatedAt``.

    Returns:
        New dicts; the input mapping is not modified.
    """
    if not raw:
        return []
    now = now or datetime.now(UTC)

    items: list[dict[str, Any]] = []
    for key, record in raw.items():
        if not isinstance(record, Mapping):
            logger.warning("Skipping non-object record under key %s", key)
            continue
        item = {**record, "id": key}
        for field in _DEFAULTED_DATE_FIELDS:
            item[field] = parse_datetime(record.get(field)) or now
        for field in _OPTIONAL_DATE_FIELDS:
            if field in record:
                parsed = parse_datetime(record[field])
                if parsed is None:
                    item.pop(field)
                else:
                    item[field] = parsed
        items.append(item)

    items.sort(key=lambda item: item.get(sort_field) or now, reverse=True)
    return items
