"""
Business logic for announcements.

Announcements are soft-deleted like members and meetings.  Expired
announcements are kept as well; they simply drop out of the active
list once ``expires_at`` has passed.
"""

import logging
from datetime import datetime
from typing import List, Optional

from lab_manager_api.app.core.exceptions import NotFoundError
from lab_manager_api.app.core.store import EntityStore, filter_deleted, get_live, new_id, utcnow
from lab_manager_api.app.schemas.announcement import Announcement, AnnouncementCreate, AnnouncementUpdate
from lab_manager_api.app.schemas.audit import AuditAction, EntityType
from lab_manager_api.app.schemas.common import partial_updates
from lab_manager_api.app.services.audit_service import AuditService

logger = logging.getLogger(__name__)


def is_active(announcement: Announcement, now: datetime) -> bool:
    if announcement.deleted_at is not None:
        return False
    return announcement.expires_at is None or announcement.expires_at > now


class AnnouncementService:
    """Service for publishing announcements."""

    @classmethod
    async def list_announcements(cls, store: EntityStore) -> List[Announcement]:
        """All announcements that have not been deleted, expired ones included."""
        return filter_deleted(store.announcements.values())

    @classmethod
    async def list_active_announcements(
        cls, store: EntityStore, now: Optional[datetime] = None
    ) -> List[Announcement]:
        now = now or utcnow()
        return [a for a in store.announcements.values() if is_active(a, now)]

    @classmethod
    async def get_announcement(cls, store: EntityStore, announcement_id: str) -> Announcement:
        announcement = get_live(store.announcements, announcement_id)
        if announcement is None:
            raise NotFoundError(f"Announcement {announcement_id} not found")
        return announcement

    @classmethod
    async def create_announcement(cls, store: EntityStore, data: AnnouncementCreate) -> Announcement:
        logger.info("Publishing announcement '%s'", data.title)
        async with store.write_lock:
            announcement = Announcement(
                id=new_id(),
                created_at=utcnow(),
                deleted_at=None,
                **data.model_dump(),
            )
            store.announcements[announcement.id] = announcement
            await AuditService.log(
                store,
                AuditAction.CREATE,
                EntityType.ANNOUNCEMENT,
                announcement.id,
                {"title": announcement.title},
            )
            store.save()
        return announcement

    @classmethod
    async def update_announcement(
        cls, store: EntityStore, announcement_id: str, updates: AnnouncementUpdate
    ) -> Announcement:
        """Apply a partial update.  Announcements carry no ``updated_at``."""
        changes = partial_updates(updates, nullable={"expires_at"})
        async with store.write_lock:
            announcement = await cls.get_announcement(store, announcement_id)
            updated = announcement.model_copy(update=changes)
            store.announcements[announcement_id] = updated
            await AuditService.log(
                store,
                AuditAction.UPDATE,
                EntityType.ANNOUNCEMENT,
                announcement_id,
                updates.model_dump(mode="json", by_alias=True, include=set(changes)),
            )
            store.save()
        return updated

    @classmethod
    async def delete_announcement(cls, store: EntityStore, announcement_id: str) -> Announcement:
        async with store.write_lock:
            announcement = await cls.get_announcement(store, announcement_id)
            deleted = announcement.model_copy(update={"deleted_at": utcnow()})
            store.announcements[announcement_id] = deleted
            await AuditService.log(
                store,
                AuditAction.DELETE,
                EntityType.ANNOUNCEMENT,
                announcement_id,
                {"title": announcement.title},
            )
            store.save()
        return deleted
