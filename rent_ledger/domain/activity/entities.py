"""Activity log entities."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping


@dataclass(frozen=True)
class ActivityEntry:
    type: str
    entity: str
    message: str
    created_at: datetime
    entity_id: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)


def payment_created(room_id: str, period_key: str, message: str, created_at: datetime, **meta: Any) -> ActivityEntry:
    return ActivityEntry(
        type="payment_created",
        entity="payment",
        entity_id=f"{room_id}:{period_key}",
        message=message,
        created_at=created_at,
        meta=dict(meta),
    )


def tenancy_created(room_id: str, message: str, created_at: datetime, **meta: Any) -> ActivityEntry:
    return ActivityEntry(
        type="tenancy_created",
        entity="tenancy",
        entity_id=room_id,
        message=message,
        created_at=created_at,
        meta=dict(meta),
    )


def tenancy_ended(room_id: str, message: str, created_at: datetime, **meta: Any) -> ActivityEntry:
    return ActivityEntry(
        type="tenancy_ended",
        entity="tenancy",
        entity_id=room_id,
        message=message,
        created_at=created_at,
        meta=dict(meta),
    )


def tenancy_updated(room_id: str, message: str, created_at: datetime, **meta: Any) -> ActivityEntry:
    return ActivityEntry(
        type="tenancy_updated",
        entity="tenancy",
        entity_id=room_id,
        message=message,
        created_at=created_at,
        meta=dict(meta),
    )
