"""
Per-record sync outcomes.

Every record handed to the batch driver ends in exactly one SyncOutcome:
Success (with the entity id), Skipped, or Error (with a message).

Author: Leonardo Pacciani-Mori
License: MIT
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SyncStatus(Enum):
    """Classification of a record's sync."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class SyncOutcome:
    """
    The result of syncing one record.

    Attributes:
        status: Success, skipped or error.
        source_id: The feed id of the record ("unknown" when missing).
        entity_id: The target entity id, set on success.
        message: Reason for a skip or an error.
    """
    status: SyncStatus
    source_id: Any = None
    entity_id: Optional[int] = None
    message: str = ""

    @classmethod
    def success(cls, source_id: Any, entity_id: int) -> "SyncOutcome":
        return cls(SyncStatus.SUCCESS, source_id=source_id, entity_id=entity_id)

    @classmethod
    def skipped(cls, source_id: Any, message: str = "") -> "SyncOutcome":
        return cls(SyncStatus.SKIPPED, source_id=source_id, message=message)

    @classmethod
    def error(cls, source_id: Any, message: str) -> "SyncOutcome":
        return cls(SyncStatus.ERROR, source_id=source_id, message=message)

    @property
    def is_success(self) -> bool:
        return self.status is SyncStatus.SUCCESS
