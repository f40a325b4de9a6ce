"""Shared pydantic base and timestamp type."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


def _ensure_aware(value: datetime) -> datetime:
    # Naive values are treated as UTC so that ordering never mixes naive and aware datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Timestamp = Annotated[datetime, AfterValidator(_ensure_aware)]


class CamelModel(BaseModel):
    """Base model whose wire form uses camelCase keys (``createdAt``, ``targetDate``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self, *, exclude: set[str] | None = None) -> dict:
        """Return the persisted form: camelCase keys, datetimes kept as objects."""
        return self.model_dump(by_alias=True, exclude=exclude)
