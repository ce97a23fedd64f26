"""Tests for ``AuditService`` and audit log records."""

from datetime import timedelta

import pytest

from conftest import meeting_data, member_data
from lab_manager_api.app.core.store import new_id, utcnow
from lab_manager_api.app.schemas.announcement import AnnouncementCreate, AnnouncementUpdate
from lab_manager_api.app.schemas.audit import AuditAction, AuditLog, EntityType
from lab_manager_api.app.schemas.meeting import MeetingUpdate
from lab_manager_api.app.schemas.member import MemberUpdate
from lab_manager_api.app.services.announcement_service import AnnouncementService
from lab_manager_api.app.services.audit_service import AuditService
from lab_manager_api.app.services.meeting_service import MeetingService
from lab_manager_api.app.services.member_service import MemberService
from lab_manager_api.app.services.rotation_service import RotationService


@pytest.mark.asyncio
async def test_every_mutation_leaves_a_record(store):
    member = await MemberService.create_member(store, member_data())
    await MemberService.delete_member(store, member.id)

    member_logs = await AuditService.list_logs(store, entity_type=EntityType.MEMBER)
    assert [log.action for log in member_logs] == [AuditAction.DELETE, AuditAction.CREATE]
    assert member_logs[0].metadata == {"name": "Priya Patel"}
    # Enrollment plus removal of the rotation entry.
    assert len(await AuditService.list_logs(store, entity_type=EntityType.ROTATION)) == 2


@pytest.mark.asyncio
async def test_logs_are_newest_first_with_paging(store):
    base = utcnow()
    for minutes in (5, 1, 3):
        record = AuditLog(
            id=new_id(),
            action=AuditAction.UPDATE,
            entity_type=EntityType.MEETING,
            entity_id=f"m{minutes}",
            timestamp=base + timedelta(minutes=minutes),
        )
        store.audit_logs[record.id] = record

    logs = await AuditService.list_logs(store)
    assert [log.entity_id for log in logs] == ["m5", "m3", "m1"]

    page = await AuditService.list_logs(store, limit=1, offset=1)
    assert [log.entity_id for log in page] == ["m3"]


@pytest.mark.asyncio
async def test_filter_by_entity_id(store):
    a = await MemberService.create_member(store, member_data("A One"))
    await MemberService.create_member(store, member_data("B Two"))

    logs = await AuditService.list_logs(store, entity_id=a.id)
    assert [log.entity_id for log in logs] == [a.id]


def test_metadata_stored_as_json_text_is_decoded():
    record = AuditLog.model_validate(
        {
            "id": "1",
            "action": "CREATE",
            "entityType": "MEMBER",
            "entityId": "m1",
            "timestamp": "2025-01-15T10:00:00Z",
            "metadata": '{"name": "Priya Patel"}',
        }
    )
    assert record.metadata == {"name": "Priya Patel"}


def test_plain_text_metadata_is_kept():
    record = AuditLog.model_validate(
        {
            "id": "1",
            "action": "CREATE",
            "entityType": "MEMBER",
            "entityId": "m1",
            "timestamp": "2025-01-15T10:00:00",
            "metadata": "imported by hand",
        }
    )
    assert record.metadata == "imported by hand"
    assert record.timestamp.tzinfo is not None


def _count(store, action, entity_type):
    return sum(1 for log in store.audit_logs.values() if log.action == action and log.entity_type == entity_type)


@pytest.mark.asyncio
async def test_each_mutation_adds_exactly_one_matching_record(store):
    member = await MemberService.create_member(store, member_data())
    entry = (await RotationService.get_rotation(store))[0]
    meeting = None
    announcement = None

    async def create_meeting():
        nonlocal meeting
        meeting = await MeetingService.create_meeting(store, meeting_data(member.id))

    async def create_announcement():
        nonlocal announcement
        announcement = await AnnouncementService.create_announcement(
            store, AnnouncementCreate(title="Notice", body="Details follow.")
        )

    steps = [
        (create_meeting, AuditAction.CREATE, EntityType.MEETING),
        (lambda: MeetingService.update_meeting(store, meeting.id, MeetingUpdate(title="Renamed")),
         AuditAction.UPDATE, EntityType.MEETING),
        (lambda: MeetingService.delete_meeting(store, meeting.id), AuditAction.DELETE, EntityType.MEETING),
        (create_announcement, AuditAction.CREATE, EntityType.ANNOUNCEMENT),
        (lambda: AnnouncementService.update_announcement(store, announcement.id, AnnouncementUpdate(body="New")),
         AuditAction.UPDATE, EntityType.ANNOUNCEMENT),
        (lambda: AnnouncementService.delete_announcement(store, announcement.id),
         AuditAction.DELETE, EntityType.ANNOUNCEMENT),
        (lambda: RotationService.mark_presented(store, entry.id), AuditAction.UPDATE, EntityType.ROTATION),
        (lambda: RotationService.set_active(store, entry.id, False), AuditAction.UPDATE, EntityType.ROTATION),
        (lambda: RotationService.reorder(store, [entry.id]), AuditAction.UPDATE, EntityType.ROTATION),
        (lambda: MemberService.update_member(store, member.id, MemberUpdate(name="Priya P.")),
         AuditAction.UPDATE, EntityType.MEMBER),
        (lambda: RotationService.delete_entry(store, entry.id), AuditAction.DELETE, EntityType.ROTATION),
    ]
    for run, action, entity_type in steps:
        total_before = len(store.audit_logs)
        matching_before = _count(store, action, entity_type)

        await run()

        assert len(store.audit_logs) == total_before + 1
        assert _count(store, action, entity_type) == matching_before + 1
