"""
Meeting endpoints for API v1.

Scheduling operations for lab meetings.  Creating or rescheduling a
meeting is rejected with 409 when the presenter already has an
overlapping meeting on the same date.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from lab_manager_api.app.core.config import settings
from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from lab_manager_api.app.core.store import EntityStore, get_store, lab_today
from lab_manager_api.app.schemas.meeting import Meeting, MeetingCreate, MeetingUpdate
from lab_manager_api.app.services.meeting_service import MeetingService


router = APIRouter()


@router.get("/", response_model=List[Meeting])
async def list_meetings(store: EntityStore = Depends(get_store)) -> List[Meeting]:
    return await MeetingService.list_meetings(store)


@router.get("/upcoming", response_model=List[Meeting])
async def upcoming_meetings(
    weeks: Optional[int] = Query(None, ge=1, le=52, description="How many weeks ahead to look"),
    store: EntityStore = Depends(get_store),
) -> List[Meeting]:
    """Meetings from today (lab time) through the next few weeks, soonest first."""
    return await MeetingService.upcoming_meetings(store, lab_today(), weeks or settings.upcoming_meetings_weeks)


@router.get("/{meeting_id}", response_model=Meeting)
async def get_meeting(meeting_id: str, store: EntityStore = Depends(get_store)) -> Meeting:
    try:
        return await MeetingService.get_meeting(store, meeting_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/", response_model=Meeting, status_code=status.HTTP_201_CREATED)
async def create_meeting(meeting: MeetingCreate, store: EntityStore = Depends(get_store)) -> Meeting:
    try:
        return await MeetingService.create_meeting(store, meeting)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.patch("/{meeting_id}", response_model=Meeting)
async def update_meeting(
    meeting_id: str,
    updates: MeetingUpdate,
    store: EntityStore = Depends(get_store),
) -> Meeting:
    """Update an existing meeting.

    Changing the presenter, date or times re-runs the overlap check
    against the presenter's other meetings.
    """
    try:
        return await MeetingService.update_meeting(store, meeting_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except InvalidRequestError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meeting(meeting_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        await MeetingService.delete_meeting(store, meeting_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
