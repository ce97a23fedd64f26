"""Shared fixtures for the lab manager test-suite."""

from datetime import date, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lab_manager_api.app.core.store import EntityStore, get_store
from lab_manager_api.app.main import app
from lab_manager_api.app.schemas.meeting import MeetingCreate, MeetingType
from lab_manager_api.app.schemas.member import MemberCreate, StudentStatus


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "lab-data.json"


@pytest.fixture
def store(data_file):
    return EntityStore(data_file)


@pytest_asyncio.fixture
async def api_client(store):
    app.dependency_overrides[get_store] = lambda: store
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


def member_data(name="Priya Patel", email=None, status=StudentStatus.PHD, **kwargs) -> MemberCreate:
    email = email or name.lower().replace(" ", ".") + "@lab.edu"
    return MemberCreate(name=name, email=email, student_status=status, **kwargs)


def meeting_data(presenter_id, day=date(2025, 1, 15), start=time(10, 0), end=time(11, 0), **kwargs) -> MeetingCreate:
    kwargs.setdefault("title", "Weekly progress")
    kwargs.setdefault("type", MeetingType.WORK_PRESENTATION)
    return MeetingCreate(presenter_id=presenter_id, date=day, start_time=start, end_time=end, **kwargs)
