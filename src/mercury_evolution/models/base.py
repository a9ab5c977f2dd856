# mercury_evolution/models/base.py
"""
Shared pieces of the persisted documents.

Documents on disk use camelCase keys and epoch-millisecond timestamps, the
layout existing heat maps and session files were written with. In code the
same records use snake_case attributes and aware UTC datetimes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current UTC time, truncated to the millisecond resolution documents keep."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_epoch_ms(value: datetime) -> int:
    return round(value.timestamp() * 1000)


# Parsed from ISO strings or epoch numbers; written as epoch milliseconds
EpochMillis = Annotated[datetime, PlainSerializer(to_epoch_ms, return_type=int, when_used="json")]


class DocumentModel(BaseModel):
    """Base for records that are written to disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
