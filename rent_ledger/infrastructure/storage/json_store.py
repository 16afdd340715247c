"""JSON file store for tenancies and their payment history."""
from __future__ import annotations

import json
import logging
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence

from rent_ledger.domain.errors import InvalidInput, TenancyNotFound
from rent_ledger.domain.models import BillingPeriod, PaymentRecord, Tenancy
from rent_ledger.infrastructure.storage.serialization import (
    record_to_dict,
    tenancy_from_dict,
    tenancy_to_dict,
)

logger = logging.getLogger(__name__)


class JsonTenancyRepository:
    """Keeps every tenancy in one JSON document keyed by room id.

    Payments are only ever appended to a tenancy's ``payments`` list.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def list_tenancies(self) -> Sequence[Tenancy]:
        return [tenancy_from_dict(raw) for raw in self._load()["tenancies"].values()]

    def get_tenancy(self, room_id: str) -> Tenancy:
        raw = self._load()["tenancies"].get(str(room_id))
        if raw is None:
            raise TenancyNotFound(str(room_id))
        return tenancy_from_dict(raw)

    def add_tenancy(self, tenancy: Tenancy) -> None:
        if not tenancy.room_id:
            raise InvalidInput("room_id is required to store a tenancy")
        data = self._load()
        existing = data["tenancies"].get(tenancy.room_id)
        if existing is not None:
            if not existing.get("end_period"):
                raise InvalidInput(f"Room {tenancy.room_id!r} already has a tenancy")
            data["past_tenancies"].append(existing)
        data["tenancies"][tenancy.room_id] = tenancy_to_dict(tenancy)
        self._save(data)
        logger.info("Stored tenancy for room %s", tenancy.room_id)

    def end_tenancy(self, room_id: str, end_period: BillingPeriod) -> Tenancy:
        tenancy = self.get_tenancy(room_id)
        if tenancy.end_period is not None:
            raise InvalidInput(f"Tenancy in room {room_id!r} already ended in {tenancy.end_period}")
        ended = replace(tenancy, end_period=end_period)
        self._replace(ended)
        logger.info("Ended tenancy for room %s in %s", room_id, end_period.key)
        return ended

    def update_pricing(self, room_id: str, monthly_rent: Decimal, monthly_water: Decimal) -> Tenancy:
        tenancy = self.get_tenancy(room_id)
        updated = replace(tenancy, monthly_rent=monthly_rent, monthly_water=monthly_water)
        self._replace(updated)
        logger.info("Updated pricing for room %s: rent=%s water=%s", room_id, monthly_rent, monthly_water)
        return updated

    def list_past_tenancies(self) -> Sequence[Tenancy]:
        return [tenancy_from_dict(raw) for raw in self._load()["past_tenancies"]]

    def append_record(self, room_id: str, record: PaymentRecord) -> Tenancy:
        data = self._load()
        raw = data["tenancies"].get(str(room_id))
        if raw is None:
            raise TenancyNotFound(str(room_id))
        raw.setdefault("payments", []).append(record_to_dict(record))
        self._save(data)
        logger.info("Appended %s payment for room %s", record.period.key, room_id)
        return tenancy_from_dict(raw)

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {"tenancies": {}, "past_tenancies": []}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        data.setdefault("tenancies", {})
        data.setdefault("past_tenancies", [])
        return data

    def _replace(self, tenancy: Tenancy) -> None:
        data = self._load()
        data["tenancies"][tenancy.room_id] = tenancy_to_dict(tenancy)
        self._save(data)

    def _save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
