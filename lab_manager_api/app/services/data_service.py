"""
Export, import and seed data for the whole lab store.

``export_all`` returns every collection, soft-deleted records and the
full audit trail included.  ``import_all`` replaces all five
collections with the contents of such a document; it is not itself
audited, so an exported audit trail comes back unchanged.
``load_seed_data`` fills an empty store with a small illustrative
dataset through the regular services, so the seed members are
enrolled in the rotation and every record has its audit entry.
"""

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Optional

from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError
from lab_manager_api.app.core.store import EntityStore, filter_deleted, lab_today
from lab_manager_api.app.schemas.announcement import AnnouncementCreate
from lab_manager_api.app.schemas.data import LabSnapshot
from lab_manager_api.app.schemas.meeting import MeetingCreate, MeetingType
from lab_manager_api.app.schemas.member import MemberCreate, MemberRole, StudentStatus
from lab_manager_api.app.services.announcement_service import AnnouncementService
from lab_manager_api.app.services.meeting_service import MeetingService
from lab_manager_api.app.services.member_service import MemberService
from lab_manager_api.app.services.rotation_service import RotationService

logger = logging.getLogger(__name__)


def _end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59), tzinfo=timezone.utc)


class DataService:
    """Service for bulk operations on the lab data."""

    @classmethod
    async def export_all(cls, store: EntityStore) -> LabSnapshot:
        return LabSnapshot(
            members=list(store.members.values()),
            meetings=list(store.meetings.values()),
            rotation=list(store.rotation.values()),
            announcements=list(store.announcements.values()),
            audit_logs=list(store.audit_logs.values()),
        )

    @classmethod
    async def import_all(cls, store: EntityStore, snapshot: LabSnapshot) -> Dict[str, int]:
        """Replace the whole store with ``snapshot`` and persist it.

        A collection missing from the document is imported as empty.
        Raises ``InvalidRequestError`` if ids repeat within a collection.
        Returns the number of records imported per collection.
        """
        collections = {
            "members": snapshot.members,
            "meetings": snapshot.meetings,
            "rotation": snapshot.rotation,
            "announcements": snapshot.announcements,
            "auditLogs": snapshot.audit_logs,
        }
        for name, items in collections.items():
            repeated = [entity_id for entity_id, count in Counter(item.id for item in items).items() if count > 1]
            if repeated:
                raise InvalidRequestError(f"Duplicate ids in {name}: {', '.join(repeated)}")
        async with store.write_lock:
            store.replace_all(
                members=snapshot.members,
                meetings=snapshot.meetings,
                rotation=snapshot.rotation,
                announcements=snapshot.announcements,
                audit_logs=snapshot.audit_logs,
            )
            store.save()
        counts = {name: len(items) for name, items in collections.items()}
        logger.info("Imported lab data: %s", counts)
        return counts

    @classmethod
    async def load_seed_data(cls, store: EntityStore, today: Optional[date] = None) -> None:
        """Populate an empty store with the illustrative dataset.

        Meeting dates and expiry dates are placed relative to ``today``
        (the lab's current date by default).  Raises ``ConflictError``
        if the store already holds members.
        """
        if filter_deleted(store.members.values()):
            raise ConflictError("Lab data already present; seed data is only loaded into an empty store")
        today = today or lab_today()
        logger.info("Loading seed data")

        await MemberService.create_member(
            store,
            MemberCreate(
                name="Dr. Sharma G",
                email="sharma.g@lab.edu",
                role=MemberRole.ADMIN,
                student_status=StudentStatus.PHD,
            ),
        )
        priya = await MemberService.create_member(
            store,
            MemberCreate(name="Priya Patel", email="priya.patel@lab.edu", student_status=StudentStatus.PHD),
        )
        amit = await MemberService.create_member(
            store,
            MemberCreate(name="Amit Kumar", email="amit.kumar@lab.edu", student_status=StudentStatus.MTECH),
        )
        sarah = await MemberService.create_member(
            store,
            MemberCreate(name="Sarah Chen", email="sarah.chen@lab.edu", student_status=StudentStatus.BTECH),
        )
        vikram = await MemberService.create_member(
            store,
            MemberCreate(
                name="Vikram Singh",
                email="vikram.singh@lab.edu",
                student_status=StudentStatus.INTERN,
                intern_expiration_date=_end_of_day(today + timedelta(days=21)),
            ),
        )

        # Sarah, Vikram and Priya present first; everyone else keeps
        # their enrollment order behind them.
        leaders = [sarah.id, vikram.id, priya.id]
        entries = await RotationService.get_rotation(store)
        by_member = {entry.member_id: entry.id for entry in entries}
        order = [by_member[member_id] for member_id in leaders]
        order += [entry.id for entry in entries if entry.id not in order]
        await RotationService.reorder(store, order)

        await MeetingService.create_meeting(
            store,
            MeetingCreate(
                title="Machine Learning in Genomics",
                presenter_id=priya.id,
                type=MeetingType.PAPER_PRESENTATION,
                date=today + timedelta(days=3),
                start_time=time(14, 0),
                end_time=time(15, 0),
                description="Review of recent ML applications in genomic analysis",
            ),
        )
        await MeetingService.create_meeting(
            store,
            MeetingCreate(
                title="CRISPR Progress Update",
                presenter_id=priya.id,
                type=MeetingType.WORK_PRESENTATION,
                date=today + timedelta(days=5),
                start_time=time(10, 30),
                end_time=time(11, 30),
                description="Current progress on CRISPR research project",
            ),
        )
        await MeetingService.create_meeting(
            store,
            MeetingCreate(
                title="RNA-seq Analysis Tutorial",
                presenter_id=amit.id,
                type=MeetingType.TUTORIAL,
                date=today + timedelta(days=8),
                start_time=time(15, 0),
                end_time=time(16, 0),
                description="Step-by-step guide to RNA-seq data analysis",
            ),
        )

        await AnnouncementService.create_announcement(
            store,
            AnnouncementCreate(
                title="Lab Meeting Schedule Change",
                body="Weekly lab meetings will be moved to Fridays starting next week.",
                expires_at=_end_of_day(today + timedelta(days=14)),
            ),
        )
        await AnnouncementService.create_announcement(
            store,
            AnnouncementCreate(
                title="Equipment Maintenance",
                body="The PCR machine will be under maintenance for the next three days.",
                expires_at=_end_of_day(today + timedelta(days=4)),
            ),
        )
        logger.info("Seed data loaded")
