"""
Rotation endpoints for API v1.

The rotation is the ordered queue of members taking turns to present.
``GET /rotation/`` returns every entry ordered by index, while
``GET /rotation/queue`` returns the view shown to members: who is up
next and who follows.  Reordering requires the complete list of entry
ids in the new order.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from lab_manager_api.app.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.rotation import (
    RotationActiveUpdate,
    RotationEnroll,
    RotationEntry,
    RotationQueue,
    RotationReorder,
)
from lab_manager_api.app.services.rotation_service import RotationService


router = APIRouter()


@router.get("/", response_model=List[RotationEntry])
async def get_rotation(store: EntityStore = Depends(get_store)) -> List[RotationEntry]:
    return await RotationService.get_rotation(store)


@router.get("/queue", response_model=RotationQueue)
async def get_queue(store: EntityStore = Depends(get_store)) -> RotationQueue:
    """Active entries of existing members: the next presenter and the rest of the queue."""
    return await RotationService.get_queue(store)


@router.post("/", response_model=RotationEntry, status_code=status.HTTP_201_CREATED)
async def enroll_member(body: RotationEnroll, store: EntityStore = Depends(get_store)) -> RotationEntry:
    """Add an existing member to the end of the queue.

    New members are enrolled automatically; this is for members whose
    entry was removed with ``DELETE /rotation/{id}``.
    """
    try:
        return await RotationService.enroll_member(store, body.member_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.post("/reorder", response_model=List[RotationEntry])
async def reorder_rotation(body: RotationReorder, store: EntityStore = Depends(get_store)) -> List[RotationEntry]:
    """Reorder the queue.

    ``rotationIds`` lists every rotation entry once, first presenter
    first.  Indices are assigned from 0.  Returns the reordered
    entries.
    """
    try:
        return await RotationService.reorder(store, body.rotation_ids)
    except InvalidRequestError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.patch("/{entry_id}/present", response_model=RotationEntry)
async def mark_presented(entry_id: str, store: EntityStore = Depends(get_store)) -> RotationEntry:
    """Record that the entry's member has presented.  The queue order is unchanged."""
    try:
        return await RotationService.mark_presented(store, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.patch("/{entry_id}", response_model=RotationEntry)
async def set_entry_active(
    entry_id: str,
    body: RotationActiveUpdate,
    store: EntityStore = Depends(get_store),
) -> RotationEntry:
    """Pause or resume a member's turn without changing their position."""
    try:
        return await RotationService.set_active(store, entry_id, body.active)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: str, store: EntityStore = Depends(get_store)) -> None:
    """Take an entry out of the queue.  The member itself is kept."""
    try:
        await RotationService.delete_entry(store, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
