"""
Pydantic models for audit log records.

Audit logs are append-only: they are created by the services as a
side effect of every create, update and delete and are never edited
or removed.
"""

import json
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator

from .common import CamelModel, UtcDatetime


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class EntityType(str, Enum):
    MEMBER = "MEMBER"
    MEETING = "MEETING"
    ROTATION = "ROTATION"
    ANNOUNCEMENT = "ANNOUNCEMENT"


class AuditLog(CamelModel):
    id: str
    action: AuditAction
    entity_type: EntityType
    entity_id: str
    timestamp: UtcDatetime
    metadata: Optional[Any] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _decode_metadata(cls, value: Any) -> Any:
        # Older snapshots store metadata as JSON text.
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value
