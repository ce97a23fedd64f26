"""
Pydantic models for the presentation rotation.

A ``RotationEntry`` places one member in the presentation queue.  The
queue order is defined by ``orderIndex``; ``RotationService`` keeps the
indices contiguous from 0.
"""

from typing import List, Optional

from pydantic import Field

from .common import CamelModel, UtcDatetime


class RotationEntry(CamelModel):
    id: str
    member_id: str
    order_index: int
    active: bool = True
    last_presented_at: Optional[UtcDatetime] = None


class RotationEnroll(CamelModel):
    """Request body for adding an existing member to the queue."""

    member_id: str = Field(..., min_length=1)


class RotationReorder(CamelModel):
    """Request body for reordering the queue.

    ``rotationIds`` must list every rotation entry exactly once, in the
    desired presentation order.
    """

    rotation_ids: List[str] = Field(..., examples=[["3f0c…", "a91b…"]])


class RotationActiveUpdate(CamelModel):
    """Request body for pausing or resuming a rotation entry."""

    active: bool


class RotationQueue(CamelModel):
    """The queue as presented to lab members.

    Only active entries whose member still exists are included.
    ``upNext`` is the entry with the lowest index, ``queue`` holds the
    rest in order.
    """

    up_next: Optional[RotationEntry] = None
    queue: List[RotationEntry] = []
    presented_count: int = 0
