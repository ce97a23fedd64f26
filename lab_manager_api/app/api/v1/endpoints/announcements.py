"""
Announcement endpoints for API v1.

``GET /announcements/`` returns only active announcements (not
deleted, not expired).  Expired ones remain retrievable through
``/announcements/all`` and the data export.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from lab_manager_api.app.core.exceptions import NotFoundError
from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.announcement import Announcement, AnnouncementCreate, AnnouncementUpdate
from lab_manager_api.app.services.announcement_service import AnnouncementService


router = APIRouter()


@router.get("/", response_model=List[Announcement])
async def list_active_announcements(store: EntityStore = Depends(get_store)) -> List[Announcement]:
    return await AnnouncementService.list_active_announcements(store)


@router.get("/all", response_model=List[Announcement])
async def list_announcements(store: EntityStore = Depends(get_store)) -> List[Announcement]:
    """All announcements that have not been deleted, expired ones included."""
    return await AnnouncementService.list_announcements(store)


@router.get("/{announcement_id}", response_model=Announcement)
async def get_announcement(announcement_id: str, store: EntityStore = Depends(get_store)) -> Announcement:
    try:
        return await AnnouncementService.get_announcement(store, announcement_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/", response_model=Announcement, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    announcement: AnnouncementCreate,
    store: EntityStore = Depends(get_store),
) -> Announcement:
    return await AnnouncementService.create_announcement(store, announcement)


@router.patch("/{announcement_id}", response_model=Announcement)
async def update_announcement(
    announcement_id: str,
    updates: AnnouncementUpdate,
    store: EntityStore = Depends(get_store),
) -> Announcement:
    try:
        return await AnnouncementService.update_announcement(store, announcement_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(announcement_id: str, store: EntityStore = Depends(get_store)) -> None:
    try:
        await AnnouncementService.delete_announcement(store, announcement_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
