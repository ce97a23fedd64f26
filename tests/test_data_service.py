"""Tests for export, import and seeding."""

from datetime import date

import pytest

from conftest import meeting_data, member_data
from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError
from lab_manager_api.app.core.store import EntityStore
from lab_manager_api.app.schemas.data import LabSnapshot
from lab_manager_api.app.schemas.member import MemberRole, StudentStatus
from lab_manager_api.app.services.data_service import DataService
from lab_manager_api.app.services.meeting_service import MeetingService
from lab_manager_api.app.services.member_service import MemberService
from lab_manager_api.app.services.rotation_service import RotationService


@pytest.mark.asyncio
async def test_export_then_import_reproduces_store(store, tmp_path):
    member = await MemberService.create_member(store, member_data())
    await MeetingService.create_meeting(store, meeting_data(member.id))
    gone = await MemberService.create_member(store, member_data("Amit Kumar"))
    await MemberService.delete_member(store, gone.id)

    exported = await DataService.export_all(store)
    document = exported.model_dump(mode="json", by_alias=True)

    target = EntityStore(tmp_path / "restored.json")
    counts = await DataService.import_all(target, LabSnapshot.model_validate(document))

    assert counts == {"members": 2, "meetings": 1, "rotation": 1, "announcements": 0, "auditLogs": len(store.audit_logs)}
    again = (await DataService.export_all(target)).model_dump(mode="json", by_alias=True)
    assert again == document
    assert target.members[gone.id].deleted_at is not None


@pytest.mark.asyncio
async def test_import_replaces_everything(store):
    await MemberService.create_member(store, member_data())

    counts = await DataService.import_all(store, LabSnapshot.model_validate({"meetings": []}))

    assert counts["members"] == 0
    assert store.members == {}
    assert store.rotation == {}
    assert store.audit_logs == {}


@pytest.mark.asyncio
async def test_import_rejects_duplicate_ids(store):
    member = await MemberService.create_member(store, member_data())
    document = (await DataService.export_all(store)).model_dump(mode="json", by_alias=True)
    document["members"].append(document["members"][0])

    with pytest.raises(InvalidRequestError):
        await DataService.import_all(store, LabSnapshot.model_validate(document))
    assert list(store.members) == [member.id]


@pytest.mark.asyncio
async def test_seed_data(store):
    today = date(2025, 1, 10)

    await DataService.load_seed_data(store, today=today)

    members = await MemberService.list_members(store)
    assert [m.name for m in members] == [
        "Dr. Sharma G",
        "Priya Patel",
        "Amit Kumar",
        "Sarah Chen",
        "Vikram Singh",
    ]
    assert members[0].role == MemberRole.ADMIN
    assert members[4].student_status == StudentStatus.INTERN
    assert members[4].intern_expiration_date.date() == date(2025, 1, 31)

    by_id = {m.id: m.name for m in members}
    rotation = await RotationService.get_rotation(store)
    assert [by_id[e.member_id] for e in rotation] == [
        "Sarah Chen",
        "Vikram Singh",
        "Priya Patel",
        "Dr. Sharma G",
        "Amit Kumar",
    ]
    assert [e.order_index for e in rotation] == [0, 1, 2, 3, 4]

    meetings = await MeetingService.list_meetings(store)
    assert [(m.date, m.start_time.strftime("%H:%M")) for m in meetings] == [
        (date(2025, 1, 13), "14:00"),
        (date(2025, 1, 15), "10:30"),
        (date(2025, 1, 18), "15:00"),
    ]
    assert len(store.announcements) == 2


@pytest.mark.asyncio
async def test_seed_refused_when_members_exist(store):
    await MemberService.create_member(store, member_data())

    with pytest.raises(ConflictError):
        await DataService.load_seed_data(store)
    assert len(store.members) == 1
