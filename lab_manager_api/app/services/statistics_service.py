"""
Dashboard statistics for the lab.

Counts are derived on the fly from the store; nothing here is cached
or persisted.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from lab_manager_api.app.core.config import settings
from lab_manager_api.app.core.store import EntityStore, filter_deleted, lab_today
from lab_manager_api.app.schemas.member import Member, StudentStatus
from lab_manager_api.app.schemas.statistics import LabStatistics
from lab_manager_api.app.services.meeting_service import MeetingService
from lab_manager_api.app.services.rotation_service import RotationService


def is_intern_expiring_soon(member: Member, today: date, days: int, tz: Optional[str] = None) -> bool:
    """True if the internship ends between the start of ``today`` and ``days`` days later.

    ``today`` is a lab-local date; the window starts at midnight in the
    lab's time zone.
    """
    if member.student_status != StudentStatus.INTERN or member.intern_expiration_date is None:
        return False
    start = datetime.combine(today, time.min, tzinfo=ZoneInfo(tz or settings.timezone))
    return start <= member.intern_expiration_date <= start + timedelta(days=days)


class StatisticsService:
    """Service computing the figures shown on the dashboard."""

    @classmethod
    async def lab_stats(cls, store: EntityStore, today: Optional[date] = None) -> LabStatistics:
        today = today or lab_today()
        active = [m for m in filter_deleted(store.members.values()) if m.is_active]

        def count(status: StudentStatus) -> int:
            return sum(1 for m in active if m.student_status == status)

        upcoming = await MeetingService.upcoming_meetings(store, today, settings.upcoming_meetings_weeks)
        queue = await RotationService.get_queue(store)
        queue_length = len(queue.queue) + (1 if queue.up_next is not None else 0)
        return LabStatistics(
            active_members=len(active),
            phd_students=count(StudentStatus.PHD),
            mtech_students=count(StudentStatus.MTECH),
            btech_students=count(StudentStatus.BTECH),
            interns=count(StudentStatus.INTERN),
            expiring_soon=sum(
                1 for m in active if is_intern_expiring_soon(m, today, settings.intern_expiry_warning_days)
            ),
            upcoming_meetings=len(upcoming),
            queue_length=queue_length,
            presented_count=queue.presented_count,
        )
