"""
Pydantic models for lab members.

``MemberCreate`` is the request body for registering a member,
``MemberUpdate`` carries a partial update and ``Member`` is the stored
entity returned by the API.  Email uniqueness among non-deleted
members is a business rule checked by ``MemberService``, not here.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime


class MemberRole(str, Enum):
    ADMIN = "Admin"
    NON_ADMIN = "NonAdmin"


class StudentStatus(str, Enum):
    PHD = "PhD"
    MTECH = "MTech"
    BTECH = "BTech"
    INTERN = "Intern"


class MemberBase(CamelModel):
    name: str = Field(..., min_length=1, examples=["Priya Patel"])
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$", examples=["priya.patel@lab.edu"])
    role: MemberRole = Field(MemberRole.NON_ADMIN, examples=["NonAdmin"])
    student_status: StudentStatus = Field(..., examples=["PhD"])
    is_active: bool = Field(True, examples=[True])
    intern_expiration_date: Optional[UtcDatetime] = Field(None, examples=["2025-12-31T00:00:00Z"])


class MemberCreate(MemberBase):
    """Schema for creating a member."""
    pass


class MemberUpdate(CamelModel):
    """Schema for updating a member.

    All fields are optional; only provided fields will be updated.
    Sending ``internExpirationDate: null`` clears the date.
    """
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    role: Optional[MemberRole] = None
    student_status: Optional[StudentStatus] = None
    is_active: Optional[bool] = None
    intern_expiration_date: Optional[UtcDatetime] = None


class Member(MemberBase):
    """A stored member, including soft-delete marker."""

    id: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
    deleted_at: Optional[UtcDatetime] = None
