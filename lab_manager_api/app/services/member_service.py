"""
Business logic for lab members.

Members are soft-deleted: deletion stamps ``deleted_at`` and the record
disappears from reads but stays in the store and in exports.  Email
addresses are unique among members that are not deleted, compared
case-insensitively, so an address frees up once its member is removed.

Creating a member enrolls them at the end of the presentation
rotation; deleting a member removes their rotation entry and closes
the gap.  Both are handled by ``RotationService`` on a best-effort
basis.
"""

import logging
from typing import List, Optional

from lab_manager_api.app.core.exceptions import ConflictError, NotFoundError
from lab_manager_api.app.core.store import EntityStore, filter_deleted, get_live, new_id, utcnow
from lab_manager_api.app.schemas.audit import AuditAction, EntityType
from lab_manager_api.app.schemas.common import partial_updates
from lab_manager_api.app.schemas.member import Member, MemberCreate, MemberUpdate
from lab_manager_api.app.services.audit_service import AuditService
from lab_manager_api.app.services.rotation_service import RotationService

logger = logging.getLogger(__name__)


class MemberService:
    """Service for managing lab members."""

    @classmethod
    async def list_members(cls, store: EntityStore) -> List[Member]:
        """Return all members that have not been deleted, in creation order."""
        return filter_deleted(store.members.values())

    @classmethod
    async def get_member(cls, store: EntityStore, member_id: str) -> Member:
        """Return a member by id.

        Raises ``NotFoundError`` if the member does not exist or has been
        deleted.
        """
        member = get_live(store.members, member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return member

    @classmethod
    async def get_member_by_email(cls, store: EntityStore, email: str) -> Optional[Member]:
        wanted = email.strip().lower()
        for member in filter_deleted(store.members.values()):
            if member.email.strip().lower() == wanted:
                return member
        return None

    @classmethod
    async def create_member(cls, store: EntityStore, data: MemberCreate) -> Member:
        """Create a member and enroll them in the rotation.

        Raises ``ConflictError`` if another non-deleted member already
        uses the email address.
        """
        logger.info("Creating member '%s'", data.name)
        async with store.write_lock:
            if await cls.get_member_by_email(store, data.email) is not None:
                raise ConflictError(f"Email {data.email} already exists")
            now = utcnow()
            member = Member(
                id=new_id(),
                created_at=now,
                updated_at=now,
                deleted_at=None,
                **data.model_dump(),
            )
            store.members[member.id] = member
            await RotationService.auto_enroll(store, member.id)
            await AuditService.log(store, AuditAction.CREATE, EntityType.MEMBER, member.id, {"name": member.name})
            store.save()
        return member

    @classmethod
    async def update_member(cls, store: EntityStore, member_id: str, updates: MemberUpdate) -> Member:
        """Apply a partial update to a member.

        Only fields present in ``updates`` are changed.  Raises
        ``NotFoundError`` for unknown or deleted members and
        ``ConflictError`` if the new email belongs to another member.
        """
        changes = partial_updates(updates, nullable={"intern_expiration_date"})
        async with store.write_lock:
            member = await cls.get_member(store, member_id)
            if "email" in changes:
                other = await cls.get_member_by_email(store, changes["email"])
                if other is not None and other.id != member_id:
                    raise ConflictError(f"Email {changes['email']} already exists")
            updated = member.model_copy(update={**changes, "updated_at": utcnow()})
            store.members[member_id] = updated
            await AuditService.log(
                store,
                AuditAction.UPDATE,
                EntityType.MEMBER,
                member_id,
                updates.model_dump(mode="json", by_alias=True, include=set(changes)),
            )
            store.save()
        return updated

    @classmethod
    async def delete_member(cls, store: EntityStore, member_id: str) -> Member:
        """Soft-delete a member and take them out of the rotation.

        Raises ``NotFoundError`` if the member does not exist or is
        already deleted.
        """
        async with store.write_lock:
            member = await cls.get_member(store, member_id)
            deleted = member.model_copy(update={"deleted_at": utcnow()})
            store.members[member_id] = deleted
            await RotationService.auto_remove(store, member_id)
            await AuditService.log(store, AuditAction.DELETE, EntityType.MEMBER, member_id, {"name": member.name})
            store.save()
        logger.info("Member %s deleted", member_id)
        return deleted
