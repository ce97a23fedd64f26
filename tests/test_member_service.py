"""Tests for ``MemberService``."""

from datetime import datetime, timezone

import pytest

from conftest import member_data
from lab_manager_api.app.core.exceptions import ConflictError, NotFoundError
from lab_manager_api.app.schemas.audit import AuditAction, EntityType
from lab_manager_api.app.schemas.member import MemberUpdate, StudentStatus
from lab_manager_api.app.services.audit_service import AuditService
from lab_manager_api.app.services.member_service import MemberService
from lab_manager_api.app.services.rotation_service import RotationService


@pytest.mark.asyncio
async def test_create_member_sets_timestamps_and_enrolls(store):
    member = await MemberService.create_member(store, member_data())

    assert member.id
    assert member.created_at == member.updated_at
    assert member.deleted_at is None
    assert member.is_active is True
    rotation = await RotationService.get_rotation(store)
    assert [(e.member_id, e.order_index) for e in rotation] == [(member.id, 0)]


@pytest.mark.asyncio
async def test_duplicate_email_is_rejected_case_insensitively(store):
    await MemberService.create_member(store, member_data(email="priya@lab.edu"))

    with pytest.raises(ConflictError):
        await MemberService.create_member(store, member_data("Someone Else", email="PRIYA@lab.edu"))
    assert len(await MemberService.list_members(store)) == 1


@pytest.mark.asyncio
async def test_email_is_reusable_after_delete(store):
    first = await MemberService.create_member(store, member_data(email="shared@lab.edu"))
    await MemberService.delete_member(store, first.id)

    second = await MemberService.create_member(store, member_data("New Person", email="shared@lab.edu"))
    assert second.id != first.id


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(store):
    member = await MemberService.create_member(store, member_data())

    updated = await MemberService.update_member(store, member.id, MemberUpdate(name="Priya P."))

    assert updated.name == "Priya P."
    assert updated.email == member.email
    assert updated.student_status == StudentStatus.PHD
    assert updated.updated_at >= member.updated_at
    logs = await AuditService.list_logs(store, entity_type=EntityType.MEMBER, action=AuditAction.UPDATE)
    assert logs[0].metadata == {"name": "Priya P."}


@pytest.mark.asyncio
async def test_update_to_taken_email_conflicts(store):
    await MemberService.create_member(store, member_data("Amit Kumar"))
    sarah = await MemberService.create_member(store, member_data("Sarah Chen"))

    with pytest.raises(ConflictError):
        await MemberService.update_member(store, sarah.id, MemberUpdate(email="amit.kumar@lab.edu"))


@pytest.mark.asyncio
async def test_update_keeping_own_email_is_allowed(store):
    sarah = await MemberService.create_member(store, member_data("Sarah Chen"))

    updated = await MemberService.update_member(store, sarah.id, MemberUpdate(email="Sarah.Chen@lab.edu"))
    assert updated.email == "Sarah.Chen@lab.edu"


@pytest.mark.asyncio
async def test_intern_expiration_can_be_cleared(store):
    intern = await MemberService.create_member(
        store,
        member_data(
            "Vikram Singh",
            status=StudentStatus.INTERN,
            intern_expiration_date=datetime(2025, 6, 30, tzinfo=timezone.utc),
        ),
    )

    updated = await MemberService.update_member(
        store, intern.id, MemberUpdate.model_validate({"internExpirationDate": None})
    )
    assert updated.intern_expiration_date is None


@pytest.mark.asyncio
async def test_delete_is_soft_and_removes_rotation_entry(store):
    amit = await MemberService.create_member(store, member_data("Amit Kumar"))
    sarah = await MemberService.create_member(store, member_data("Sarah Chen"))

    deleted = await MemberService.delete_member(store, amit.id)

    assert deleted.deleted_at is not None
    assert store.members[amit.id].deleted_at is not None
    assert await MemberService.list_members(store) == [store.members[sarah.id]]
    with pytest.raises(NotFoundError):
        await MemberService.get_member(store, amit.id)
    rotation = await RotationService.get_rotation(store)
    assert [(e.member_id, e.order_index) for e in rotation] == [(sarah.id, 0)]


@pytest.mark.asyncio
async def test_delete_twice_is_not_found(store):
    member = await MemberService.create_member(store, member_data())
    await MemberService.delete_member(store, member.id)

    with pytest.raises(NotFoundError):
        await MemberService.delete_member(store, member.id)


@pytest.mark.asyncio
async def test_update_unknown_member_is_not_found(store):
    with pytest.raises(NotFoundError):
        await MemberService.update_member(store, "missing", MemberUpdate(name="x"))
