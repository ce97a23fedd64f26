"""
Pydantic model for a full lab data snapshot.

This is the document produced by ``GET /data/export`` and accepted by
``POST /data/import``: every collection as a plain list of entities,
soft-deleted records included.
"""

from typing import List

from .announcement import Announcement
from .audit import AuditLog
from .common import CamelModel
from .meeting import Meeting
from .member import Member
from .rotation import RotationEntry


class LabSnapshot(CamelModel):
    members: List[Member] = []
    meetings: List[Meeting] = []
    rotation: List[RotationEntry] = []
    announcements: List[Announcement] = []
    audit_logs: List[AuditLog] = []
