"""
Pydantic models for the dashboard statistics and health endpoints.
"""

from typing import Optional

from .common import CamelModel


class LabStatistics(CamelModel):
    """Counts shown on the lab dashboard.

    Status counts only consider active members.  ``expiringSoon`` is
    the number of active interns whose internship ends within the
    configured warning window.
    """

    active_members: int
    phd_students: int
    mtech_students: int
    btech_students: int
    interns: int
    expiring_soon: int
    upcoming_meetings: int
    queue_length: int
    presented_count: int


class HealthStatus(CamelModel):
    status: str
    persistence_failures: int
    last_persistence_error: Optional[str] = None
