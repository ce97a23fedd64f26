"""
Audit service for recording and querying lab data changes.

Every create, update and delete performed by the other services ends
with a call to ``AuditService.log``.  Records are append-only: there
is no update or delete operation.  Writing a record never fails the
operation that requested it; errors are logged and swallowed here.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from lab_manager_api.app.core.store import EntityStore, new_id, utcnow
from lab_manager_api.app.schemas.audit import AuditAction, AuditLog, EntityType

logger = logging.getLogger(__name__)


class AuditService:
    """Service class for writing and retrieving audit logs."""

    @classmethod
    async def log(
        cls,
        store: EntityStore,
        action: AuditAction,
        entity_type: EntityType,
        entity_id: str,
        metadata: Optional[Any] = None,
    ) -> Optional[AuditLog]:
        """Append a new audit record.

        Parameters
        ----------
        store : EntityStore
            Store receiving the record.  The caller is responsible for
            persisting the store afterwards.
        action : AuditAction
            ``CREATE``, ``UPDATE`` or ``DELETE``.
        entity_type : EntityType
            Kind of entity affected.
        entity_id : str
            Identifier of the affected entity.
        metadata : Optional[Any]
            JSON-compatible payload describing the change, typically a
            short snapshot (``{"name": ...}``) or the applied diff.

        Returns
        -------
        Optional[AuditLog]
            The stored record, or ``None`` if it could not be written.
        """
        try:
            record = AuditLog(
                id=new_id(),
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                timestamp=utcnow(),
                metadata=metadata,
            )
            store.audit_logs[record.id] = record
            return record
        except Exception:
            logger.exception(
                "Failed to record audit log %s %s %s", action, entity_type, entity_id
            )
            return None

    @classmethod
    async def list_logs(
        cls,
        store: EntityStore,
        entity_type: Optional[EntityType] = None,
        action: Optional[AuditAction] = None,
        entity_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[AuditLog]:
        """Retrieve audit records, most recent first.

        Records sharing a timestamp are returned newest-appended first.
        Filters narrow the result set; ``limit`` and ``offset`` page
        through it.
        """
        logs = list(reversed(list(store.audit_logs.values())))
        logs.sort(key=lambda log: log.timestamp, reverse=True)
        if entity_type is not None:
            logs = [log for log in logs if log.entity_type == entity_type]
        if action is not None:
            logs = [log for log in logs if log.action == action]
        if entity_id is not None:
            logs = [log for log in logs if log.entity_id == entity_id]
        logs = logs[offset:]
        if limit is not None:
            logs = logs[:limit]
        return logs
