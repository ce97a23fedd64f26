"""
Business logic for the presentation rotation queue.

The queue is the set of rotation entries ordered by ``order_index``.
Indices are kept contiguous and 0-based: new members are appended at
``max + 1``, removing a member renumbers the remaining entries from 0
and an explicit reorder assigns each entry its position in the given
list.

Marking an entry as presented only stamps ``last_presented_at``; the
queue never rotates by itself.  Moving the next person up is an
explicit reorder.

Enrollment on member creation and removal on member deletion are
best-effort side effects: they are called by ``MemberService`` while
it already holds the store's write lock, and any error they hit is
logged instead of failing the member operation.
"""

import logging
from collections import Counter
from typing import List, Optional

from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from lab_manager_api.app.core.store import EntityStore, get_live, new_id, utcnow
from lab_manager_api.app.schemas.audit import AuditAction, EntityType
from lab_manager_api.app.schemas.rotation import RotationEntry, RotationQueue
from lab_manager_api.app.services.audit_service import AuditService

logger = logging.getLogger(__name__)

# Entity id recorded in the audit log for operations on the whole queue.
QUEUE_ENTITY_ID = "queue"


class RotationService:
    """Service for maintaining the presentation rotation."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @classmethod
    async def get_rotation(cls, store: EntityStore) -> List[RotationEntry]:
        """Return every rotation entry sorted by ``order_index``."""
        return sorted(store.rotation.values(), key=lambda entry: entry.order_index)

    @classmethod
    async def get_entry(cls, store: EntityStore, entry_id: str) -> RotationEntry:
        entry = store.rotation.get(entry_id)
        if entry is None:
            raise NotFoundError(f"Rotation entry {entry_id} not found")
        return entry

    @classmethod
    async def get_queue(cls, store: EntityStore) -> RotationQueue:
        """Return the queue as shown to lab members.

        Entries that are paused or whose member no longer exists are
        left out.  The first remaining entry is up next.
        """
        entries = [
            entry
            for entry in await cls.get_rotation(store)
            if entry.active and get_live(store.members, entry.member_id) is not None
        ]
        return RotationQueue(
            up_next=entries[0] if entries else None,
            queue=entries[1:],
            presented_count=sum(1 for entry in entries if entry.last_presented_at is not None),
        )

    # ------------------------------------------------------------------
    # Enrollment
    # ------------------------------------------------------------------
    @classmethod
    async def _append_entry(cls, store: EntityStore, member_id: str, auto_added: bool) -> RotationEntry:
        max_index = max((entry.order_index for entry in store.rotation.values()), default=-1)
        entry = RotationEntry(
            id=new_id(),
            member_id=member_id,
            order_index=max_index + 1,
            active=True,
            last_presented_at=None,
        )
        store.rotation[entry.id] = entry
        metadata = {"memberId": member_id}
        if auto_added:
            metadata["autoAdded"] = True
        await AuditService.log(store, AuditAction.CREATE, EntityType.ROTATION, entry.id, metadata)
        return entry

    @classmethod
    async def auto_enroll(cls, store: EntityStore, member_id: str) -> Optional[RotationEntry]:
        """Append a newly created member to the end of the queue.

        Does nothing if the member already has an entry.  Must be called
        with the write lock held; does not persist.
        """
        try:
            if any(entry.member_id == member_id for entry in store.rotation.values()):
                logger.info("Member %s already in rotation, skipping", member_id)
                return None
            entry = await cls._append_entry(store, member_id, auto_added=True)
            logger.info("Member %s enrolled in rotation at position %d", member_id, entry.order_index)
            return entry
        except Exception:
            logger.exception("Failed to add member %s to rotation", member_id)
            return None

    @classmethod
    async def enroll_member(cls, store: EntityStore, member_id: str) -> RotationEntry:
        """Explicitly add an existing member to the end of the queue.

        Raises ``NotFoundError`` for unknown or deleted members and
        ``ConflictError`` if the member is already enrolled.
        """
        async with store.write_lock:
            if get_live(store.members, member_id) is None:
                raise NotFoundError(f"Member {member_id} not found")
            if any(entry.member_id == member_id for entry in store.rotation.values()):
                raise ConflictError(f"Member {member_id} is already in the rotation")
            entry = await cls._append_entry(store, member_id, auto_added=False)
            store.save()
            return entry

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------
    @staticmethod
    def _reindex(store: EntityStore) -> None:
        ordered = sorted(store.rotation.values(), key=lambda entry: entry.order_index)
        for index, entry in enumerate(ordered):
            if entry.order_index != index:
                store.rotation[entry.id] = entry.model_copy(update={"order_index": index})

    @classmethod
    async def auto_remove(cls, store: EntityStore, member_id: str) -> Optional[RotationEntry]:
        """Drop a deleted member's entry and close the gap it leaves.

        Must be called with the write lock held; does not persist.
        """
        try:
            entry = next((e for e in store.rotation.values() if e.member_id == member_id), None)
            if entry is None:
                return None
            del store.rotation[entry.id]
            cls._reindex(store)
            await AuditService.log(
                store,
                AuditAction.DELETE,
                EntityType.ROTATION,
                entry.id,
                {"memberId": member_id, "autoRemoved": True},
            )
            logger.info("Member %s removed from rotation", member_id)
            return entry
        except Exception:
            logger.exception("Failed to remove member %s from rotation", member_id)
            return None

    @classmethod
    async def delete_entry(cls, store: EntityStore, entry_id: str) -> RotationEntry:
        """Remove an entry from the queue and close the gap it leaves.

        The member is not affected and can be enrolled again later.
        Raises ``NotFoundError`` for unknown entries.
        """
        async with store.write_lock:
            entry = await cls.get_entry(store, entry_id)
            del store.rotation[entry_id]
            cls._reindex(store)
            await AuditService.log(
                store,
                AuditAction.DELETE,
                EntityType.ROTATION,
                entry_id,
                {"memberId": entry.member_id},
            )
            store.save()
        logger.info("Rotation entry %s removed", entry_id)
        return entry

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------
    @classmethod
    async def reorder(cls, store: EntityStore, rotation_ids: List[str]) -> List[RotationEntry]:
        """Set the queue order to ``rotation_ids``.

        The list must name every rotation entry exactly once.  Entry
        ``rotation_ids[i]`` receives ``order_index = i``.  Raises
        ``InvalidRequestError`` without changing anything if the list
        has duplicates, unknown ids or misses entries.
        """
        async with store.write_lock:
            counts = Counter(rotation_ids)
            duplicates = sorted(rid for rid, count in counts.items() if count > 1)
            if duplicates:
                raise InvalidRequestError(f"Duplicate rotation ids: {', '.join(duplicates)}")
            unknown = [rid for rid in rotation_ids if rid not in store.rotation]
            if unknown:
                raise InvalidRequestError(f"Unknown rotation ids: {', '.join(unknown)}")
            missing = [rid for rid in store.rotation if rid not in counts]
            if missing:
                raise InvalidRequestError(f"Reorder must include every rotation entry; missing: {', '.join(missing)}")

            for index, rotation_id in enumerate(rotation_ids):
                entry = store.rotation[rotation_id]
                if entry.order_index != index:
                    store.rotation[rotation_id] = entry.model_copy(update={"order_index": index})
            await AuditService.log(
                store,
                AuditAction.UPDATE,
                EntityType.ROTATION,
                QUEUE_ENTITY_ID,
                {"rotationIds": list(rotation_ids)},
            )
            store.save()
        return await cls.get_rotation(store)

    @classmethod
    async def mark_presented(cls, store: EntityStore, entry_id: str) -> RotationEntry:
        """Record that the entry's member has just presented.

        The entry keeps its position in the queue.
        """
        async with store.write_lock:
            entry = await cls.get_entry(store, entry_id)
            updated = entry.model_copy(update={"last_presented_at": utcnow()})
            store.rotation[entry_id] = updated
            await AuditService.log(
                store,
                AuditAction.UPDATE,
                EntityType.ROTATION,
                entry_id,
                {"lastPresentedAt": updated.last_presented_at.isoformat()},
            )
            store.save()
            return updated

    @classmethod
    async def set_active(cls, store: EntityStore, entry_id: str, active: bool) -> RotationEntry:
        """Pause (``active=False``) or resume an entry without losing its place."""
        async with store.write_lock:
            entry = await cls.get_entry(store, entry_id)
            updated = entry.model_copy(update={"active": active})
            store.rotation[entry_id] = updated
            await AuditService.log(store, AuditAction.UPDATE, EntityType.ROTATION, entry_id, {"active": active})
            store.save()
            return updated
