"""Activity log application use cases."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rent_ledger.domain.activity.entities import ActivityEntry
from rent_ledger.domain.repositories import ActivityRepository


@dataclass(slots=True)
class ListActivityUseCase:
    repository: ActivityRepository

    def execute(self, limit: int | None = 50) -> Sequence[ActivityEntry]:
        return self.repository.list_entries(limit=limit)
