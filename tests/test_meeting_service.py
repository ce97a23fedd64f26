"""Tests for ``MeetingService`` scheduling rules."""

from datetime import date, time

import pytest
import pytest_asyncio
from pydantic import ValidationError

from conftest import meeting_data, member_data
from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from lab_manager_api.app.schemas.meeting import MeetingCreate, MeetingUpdate
from lab_manager_api.app.services.meeting_service import MeetingService, slots_overlap
from lab_manager_api.app.services.member_service import MemberService


@pytest_asyncio.fixture
async def presenter(store):
    return await MemberService.create_member(store, member_data())


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((time(10), time(11)), (time(11), time(12)), False),
        ((time(10), time(11)), (time(10, 30), time(11, 30)), True),
        ((time(10), time(12)), (time(10, 30), time(11)), True),
        ((time(9), time(10)), (time(10, 30), time(11)), False),
    ],
)
def test_slots_overlap_is_half_open(a, b, expected):
    assert slots_overlap(*a, *b) is expected
    assert slots_overlap(*b, *a) is expected


def test_end_must_follow_start():
    with pytest.raises(ValidationError):
        meeting_data("p1", start=time(11, 0), end=time(11, 0))


def test_times_are_truncated_to_minutes():
    meeting = meeting_data("p1", start=time(10, 0, 45), end=time(11, 0, 5))
    assert meeting.start_time == time(10, 0)
    assert meeting.model_dump(mode="json", by_alias=True)["endTime"] == "11:00"


@pytest.mark.asyncio
async def test_overlapping_meeting_for_same_presenter_conflicts(store, presenter):
    await MeetingService.create_meeting(store, meeting_data(presenter.id, title="First"))

    with pytest.raises(ConflictError, match="First"):
        await MeetingService.create_meeting(
            store, meeting_data(presenter.id, start=time(10, 30), end=time(11, 30))
        )


@pytest.mark.asyncio
async def test_back_to_back_and_other_days_are_allowed(store, presenter):
    await MeetingService.create_meeting(store, meeting_data(presenter.id))
    await MeetingService.create_meeting(store, meeting_data(presenter.id, start=time(11), end=time(12)))
    await MeetingService.create_meeting(store, meeting_data(presenter.id, day=date(2025, 1, 16)))

    assert len(await MeetingService.list_meetings(store)) == 3


@pytest.mark.asyncio
async def test_other_presenters_may_overlap(store, presenter):
    other = await MemberService.create_member(store, member_data("Amit Kumar"))
    await MeetingService.create_meeting(store, meeting_data(presenter.id))

    await MeetingService.create_meeting(store, meeting_data(other.id))


@pytest.mark.asyncio
async def test_deleted_meetings_do_not_block_slot(store, presenter):
    first = await MeetingService.create_meeting(store, meeting_data(presenter.id))
    await MeetingService.delete_meeting(store, first.id)

    await MeetingService.create_meeting(store, meeting_data(presenter.id))
    with pytest.raises(NotFoundError):
        await MeetingService.get_meeting(store, first.id)


@pytest.mark.asyncio
async def test_update_does_not_conflict_with_itself(store, presenter):
    meeting = await MeetingService.create_meeting(store, meeting_data(presenter.id))

    updated = await MeetingService.update_meeting(store, meeting.id, MeetingUpdate(end_time=time(11, 30)))

    assert updated.end_time == time(11, 30)
    assert updated.start_time == time(10, 0)


@pytest.mark.asyncio
async def test_update_into_occupied_slot_conflicts(store, presenter):
    await MeetingService.create_meeting(store, meeting_data(presenter.id))
    later = await MeetingService.create_meeting(store, meeting_data(presenter.id, start=time(14), end=time(15)))

    with pytest.raises(ConflictError):
        await MeetingService.update_meeting(
            store, later.id, MeetingUpdate(start_time=time(10, 30), end_time=time(11, 30))
        )
    assert store.meetings[later.id].start_time == time(14)


@pytest.mark.asyncio
async def test_update_checks_merged_times(store, presenter):
    meeting = await MeetingService.create_meeting(store, meeting_data(presenter.id))

    with pytest.raises(InvalidRequestError):
        await MeetingService.update_meeting(store, meeting.id, MeetingUpdate(end_time=time(9, 30)))


@pytest.mark.asyncio
async def test_description_can_be_cleared(store, presenter):
    meeting = await MeetingService.create_meeting(
        store, meeting_data(presenter.id, description="Slides to follow")
    )

    updated = await MeetingService.update_meeting(
        store, meeting.id, MeetingUpdate.model_validate({"description": None})
    )
    assert updated.description is None


@pytest.mark.asyncio
async def test_upcoming_meetings_window_and_order(store, presenter):
    today = date(2025, 1, 10)
    for day, start in [(date(2025, 1, 9), 10), (date(2025, 1, 20), 9), (date(2025, 1, 12), 14),
                       (date(2025, 1, 12), 9), (date(2025, 1, 25), 10)]:
        await MeetingService.create_meeting(
            store, meeting_data(presenter.id, day=day, start=time(start), end=time(start + 1))
        )

    upcoming = await MeetingService.upcoming_meetings(store, today, weeks=2)

    assert [(m.date, m.start_time.hour) for m in upcoming] == [
        (date(2025, 1, 12), 9),
        (date(2025, 1, 12), 14),
        (date(2025, 1, 20), 9),
    ]


def test_meeting_accepts_camel_case_payload():
    meeting = MeetingCreate.model_validate(
        {
            "title": "Paper club",
            "presenterId": "p1",
            "type": "PaperPresentation",
            "date": "2025-01-15",
            "startTime": "14:00",
            "endTime": "15:00",
        }
    )
    assert meeting.presenter_id == "p1"
