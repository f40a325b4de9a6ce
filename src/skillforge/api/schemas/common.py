"""Shared Pydantic schemas for API responses."""

from __future__ import annotations

from pydantic import Field

from skillforge.models.base import CamelModel


class IdResponse(CamelModel):
    """Identifier of a newly created record."""

    id: str = Field(description="Generated record id")


class CountResponse(CamelModel):
    """Number of records affected by a bulk operation."""

    updated: int = Field(description="Number of records that changed")
