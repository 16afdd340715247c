"""JSON-lines activity log."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from rent_ledger.domain.activity.entities import ActivityEntry


class JsonLinesActivityRepository:
    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def append(self, entry: ActivityEntry) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(self._to_dict(entry), ensure_ascii=False) + "\n")

    def list_entries(self, limit: int | None = None) -> Sequence[ActivityEntry]:
        """Entries newest first."""
        if not self._path.exists():
            return []
        entries = []
        for line in self._path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                entries.append(self._from_dict(json.loads(line)))
        entries.reverse()
        if limit is not None:
            entries = entries[:limit]
        return entries

    @staticmethod
    def _to_dict(entry: ActivityEntry) -> dict[str, Any]:
        return {
            "type": entry.type,
            "entity": entry.entity,
            "entity_id": entry.entity_id,
            "message": entry.message,
            "meta": dict(entry.meta),
            "created_at": entry.created_at.isoformat(),
        }

    @staticmethod
    def _from_dict(raw: dict[str, Any]) -> ActivityEntry:
        return ActivityEntry(
            type=raw["type"],
            entity=raw["entity"],
            entity_id=raw.get("entity_id"),
            message=raw["message"],
            meta=raw.get("meta") or {},
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
