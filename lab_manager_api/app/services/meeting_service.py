"""
Business logic for lab meetings.

A presenter can only hold one meeting at a time: for the same
presenter and date, the ``[start_time, end_time)`` slots of meetings
that are not deleted must not overlap.  Slots that merely touch
(10:00-11:00 and 11:00-12:00) are allowed.
"""

import logging
from datetime import date, time, timedelta
from typing import List, Optional

from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from lab_manager_api.app.core.store import EntityStore, filter_deleted, get_live, new_id, utcnow
from lab_manager_api.app.schemas.audit import AuditAction, EntityType
from lab_manager_api.app.schemas.common import partial_updates
from lab_manager_api.app.schemas.meeting import Meeting, MeetingCreate, MeetingUpdate
from lab_manager_api.app.services.audit_service import AuditService

logger = logging.getLogger(__name__)

# Fields whose change requires a new overlap check.
_SCHEDULE_FIELDS = {"presenter_id", "date", "start_time", "end_time"}


def slots_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open interval overlap test."""
    return start_a < end_b and start_b < end_a


class MeetingService:
    """Service for scheduling lab meetings."""

    @classmethod
    async def list_meetings(cls, store: EntityStore) -> List[Meeting]:
        return filter_deleted(store.meetings.values())

    @classmethod
    async def get_meeting(cls, store: EntityStore, meeting_id: str) -> Meeting:
        meeting = get_live(store.meetings, meeting_id)
        if meeting is None:
            raise NotFoundError(f"Meeting {meeting_id} not found")
        return meeting

    @classmethod
    async def find_conflict(
        cls,
        store: EntityStore,
        presenter_id: str,
        meeting_date: date,
        start_time: time,
        end_time: time,
        exclude_id: Optional[str] = None,
    ) -> Optional[Meeting]:
        """Return a meeting of the presenter that overlaps the given slot, if any."""
        for meeting in filter_deleted(store.meetings.values()):
            if meeting.id == exclude_id:
                continue
            if meeting.presenter_id != presenter_id or meeting.date != meeting_date:
                continue
            if slots_overlap(start_time, end_time, meeting.start_time, meeting.end_time):
                return meeting
        return None

    @classmethod
    async def create_meeting(cls, store: EntityStore, data: MeetingCreate) -> Meeting:
        """Schedule a meeting.

        Raises ``ConflictError`` if the presenter already has an
        overlapping meeting on that date.
        """
        logger.info("Scheduling meeting '%s' on %s", data.title, data.date)
        async with store.write_lock:
            conflict = await cls.find_conflict(store, data.presenter_id, data.date, data.start_time, data.end_time)
            if conflict is not None:
                raise ConflictError(f"Presenter has conflicting meeting at this time: '{conflict.title}'")
            now = utcnow()
            meeting = Meeting(
                id=new_id(),
                created_at=now,
                updated_at=now,
                deleted_at=None,
                **data.model_dump(),
            )
            store.meetings[meeting.id] = meeting
            await AuditService.log(store, AuditAction.CREATE, EntityType.MEETING, meeting.id, {"title": meeting.title})
            store.save()
        return meeting

    @classmethod
    async def update_meeting(cls, store: EntityStore, meeting_id: str, updates: MeetingUpdate) -> Meeting:
        """Apply a partial update to a meeting.

        The overlap check runs against the merged record whenever the
        presenter, date or times change.  Raises ``NotFoundError``,
        ``InvalidRequestError`` (end not after start once merged) or
        ``ConflictError``.
        """
        changes = partial_updates(updates, nullable={"description"})
        async with store.write_lock:
            meeting = await cls.get_meeting(store, meeting_id)
            merged = meeting.model_copy(update=changes)
            if merged.end_time <= merged.start_time:
                raise InvalidRequestError("endTime must be after startTime")
            if _SCHEDULE_FIELDS & changes.keys():
                conflict = await cls.find_conflict(
                    store,
                    merged.presenter_id,
                    merged.date,
                    merged.start_time,
                    merged.end_time,
                    exclude_id=meeting_id,
                )
                if conflict is not None:
                    raise ConflictError(f"Presenter has conflicting meeting at this time: '{conflict.title}'")
            updated = merged.model_copy(update={"updated_at": utcnow()})
            store.meetings[meeting_id] = updated
            await AuditService.log(
                store,
                AuditAction.UPDATE,
                EntityType.MEETING,
                meeting_id,
                updates.model_dump(mode="json", by_alias=True, include=set(changes)),
            )
            store.save()
        return updated

    @classmethod
    async def delete_meeting(cls, store: EntityStore, meeting_id: str) -> Meeting:
        async with store.write_lock:
            meeting = await cls.get_meeting(store, meeting_id)
            deleted = meeting.model_copy(update={"deleted_at": utcnow()})
            store.meetings[meeting_id] = deleted
            await AuditService.log(store, AuditAction.DELETE, EntityType.MEETING, meeting_id, {"title": meeting.title})
            store.save()
        return deleted

    @classmethod
    async def upcoming_meetings(cls, store: EntityStore, today: date, weeks: int = 2) -> List[Meeting]:
        """Meetings dated from ``today`` through ``weeks`` weeks ahead, soonest first."""
        horizon = today + timedelta(weeks=weeks)
        meetings = [m for m in filter_deleted(store.meetings.values()) if today <= m.date <= horizon]
        return sorted(meetings, key=lambda m: (m.date, m.start_time))
