"""
Pydantic models for announcements.

An announcement is visible while it is not deleted and its optional
``expiresAt`` lies in the future.
"""

from typing import Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime


class AnnouncementBase(CamelModel):
    title: str = Field(..., min_length=1, examples=["Lab Meeting Schedule Change"])
    body: str = Field(..., min_length=1, examples=["Weekly lab meetings move to Fridays."])
    expires_at: Optional[UtcDatetime] = Field(None, examples=["2025-12-31T00:00:00Z"])


class AnnouncementCreate(AnnouncementBase):
    """Schema for publishing an announcement."""
    pass


class AnnouncementUpdate(CamelModel):
    """Schema for updating an announcement.

    ``expiresAt: null`` removes the expiry.
    """
    title: Optional[str] = Field(None, min_length=1)
    body: Optional[str] = Field(None, min_length=1)
    expires_at: Optional[UtcDatetime] = None


class Announcement(AnnouncementBase):
    id: str
    created_at: UtcDatetime
    deleted_at: Optional[UtcDatetime] = None
