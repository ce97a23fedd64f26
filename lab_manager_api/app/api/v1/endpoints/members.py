"""
Member endpoints for API v1.

CRUD operations for lab members.  Deletion is a soft delete; the
member's rotation entry is removed at the same time.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from lab_manager_api.app.core.exceptions import ConflictError, NotFoundError
from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.schemas.member import Member, MemberCreate, MemberUpdate
from lab_manager_api.app.services.member_service import MemberService


router = APIRouter()


@router.get("/", response_model=List[Member])
async def list_members(store: EntityStore = Depends(get_store)) -> List[Member]:
    """List all members that have not been deleted."""
    return await MemberService.list_members(store)


@router.get("/{member_id}", response_model=Member)
async def get_member(member_id: str, store: EntityStore = Depends(get_store)) -> Member:
    try:
        return await MemberService.get_member(store, member_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/", response_model=Member, status_code=status.HTTP_201_CREATED)
async def create_member(member: MemberCreate, store: EntityStore = Depends(get_store)) -> Member:
    """Register a new member.

    The member is appended to the presentation rotation.  Returns 409
    if the email address is already used by another member.
    """
    try:
        return await MemberService.create_member(store, member)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.patch("/{member_id}", response_model=Member)
async def update_member(
    member_id: str,
    updates: MemberUpdate,
    store: EntityStore = Depends(get_store),
) -> Member:
    """Update an existing member.

    Partial updates are supported; any unspecified fields remain
    unchanged.
    """
    try:
        return await MemberService.update_member(store, member_id, updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(member_id: str, store: EntityStore = Depends(get_store)) -> None:
    """Soft-delete a member and remove them from the rotation."""
    try:
        await MemberService.delete_member(store, member_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
