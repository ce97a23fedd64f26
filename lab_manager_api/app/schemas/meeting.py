"""
Pydantic models for lab meetings.

A meeting has a presenter (a member id, not enforced as a foreign
key), a calendar date and a same-day ``[startTime, endTime)`` slot in
lab-local time.  Times travel as ``HH:MM`` strings.  Overlap between
meetings of the same presenter is checked by ``MeetingService``.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field, field_serializer, field_validator, model_validator

from .common import CamelModel, UtcDatetime


class MeetingType(str, Enum):
    PAPER_PRESENTATION = "PaperPresentation"
    WORK_PRESENTATION = "WorkPresentation"
    TUTORIAL = "Tutorial"


def _minute_precision(value: Optional[dt.time]) -> Optional[dt.time]:
    if value is None:
        return None
    return value.replace(second=0, microsecond=0, tzinfo=None)


class _MeetingTimes(CamelModel):
    """Validators and serializers shared by the meeting schemas."""

    @field_validator("start_time", "end_time", check_fields=False)
    @classmethod
    def _truncate_seconds(cls, value: Optional[dt.time]) -> Optional[dt.time]:
        return _minute_precision(value)

    @field_serializer("start_time", "end_time", check_fields=False)
    def _format_time(self, value: Optional[dt.time]) -> Optional[str]:
        return value.strftime("%H:%M") if value is not None else None

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.start_time is not None and self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class MeetingBase(_MeetingTimes):
    title: str = Field(..., min_length=1, examples=["Machine Learning in Genomics"])
    presenter_id: str = Field(..., min_length=1)
    type: MeetingType = Field(..., examples=["PaperPresentation"])
    date: dt.date = Field(..., examples=["2025-01-15"])
    start_time: dt.time = Field(..., examples=["14:00"])
    end_time: dt.time = Field(..., examples=["15:00"])
    description: Optional[str] = Field(None, examples=["Review of recent ML applications"])


class MeetingCreate(MeetingBase):
    """Schema for scheduling a meeting."""
    pass


class MeetingUpdate(_MeetingTimes):
    """Schema for updating a meeting.

    All fields are optional.  When only one of ``startTime`` or
    ``endTime`` is given, the ordering is checked by the service
    against the merged record.
    """
    title: Optional[str] = Field(None, min_length=1)
    presenter_id: Optional[str] = Field(None, min_length=1)
    type: Optional[MeetingType] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    description: Optional[str] = None


class Meeting(MeetingBase):
    """A stored meeting, including soft-delete marker."""

    id: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
    deleted_at: Optional[UtcDatetime] = None
