"""Common columns shared by database records."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _format_time(moment: datetime | None) -> str | None:
    return None if moment is None else moment.isoformat().replace("+00:00", "Z")


@dataclass
class SQLModel:
    """Identifier and creation/update timestamps of a stored record."""

    id: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=0))
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def new(cls) -> SQLModel:
        """Return a model whose timestamps are both the current UTC time."""
        now = datetime.now(timezone.utc)
        return cls(created_at=now, updated_at=now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
        }