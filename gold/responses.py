from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from django.utils import timezone


@dataclass(frozen=True)
class SuccessResponse:
    """Acknowledgment returned by every mutating ledger operation."""

    message: str
    affected_id: Optional[int] = None
    timestamp: datetime = field(default_factory=timezone.now)

    def as_dict(self) -> dict:
        data = {
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
        }
        if self.affected_id is not None:
            data["id"] = self.affected_id
        return data
