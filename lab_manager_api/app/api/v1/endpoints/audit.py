"""
Audit log endpoints for API v1.

Provides read access to the audit trail.  Logs capture create, update
and delete actions on members, meetings, rotation entries and
announcements, newest first, with optional filters.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.audit import AuditAction, AuditLog, EntityType
from lab_manager_api.app.services.audit_service import AuditService

router = APIRouter()


@router.get("/logs", response_model=List[AuditLog])
async def list_audit_logs(
    entity_type: Optional[EntityType] = Query(None, description="Filter by entity type (MEMBER, MEETING, ...)"),
    action: Optional[AuditAction] = Query(None, description="Filter by action (CREATE, UPDATE, DELETE)"),
    entity_id: Optional[str] = Query(None, description="Filter by the affected entity's id"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of logs to return"),
    offset: int = Query(0, ge=0, description="Number of logs to skip"),
    store: EntityStore = Depends(get_store),
) -> List[AuditLog]:
    """Retrieve audit logs ordered by timestamp descending."""
    return await AuditService.list_logs(
        store,
        entity_type=entity_type,
        action=action,
        entity_id=entity_id,
        limit=limit,
        offset=offset,
    )
