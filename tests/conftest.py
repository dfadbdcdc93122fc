"""
Pytest fixtures for the scheme monitor tests.

Provides small seed records, seed JSON files written into ``tmp_path``,
stores with a fake clock, a file-backed session, and a TestClient wired to
all of them through ``create_app()``.
"""

import json
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from housing.session import SessionContext  # noqa: E402
from housing.store import HouseStore, OfficerStore  # noqa: E402
from utils.config import AppConfig  # noqa: E402

TODAY = date(2026, 10, 19)


def _house(id, name, constituency, village, stage, progress, allocated, released,
           utilized, last_updated, officer):
    return {
        "id": id,
        "beneficiaryName": name,
        "constituency": constituency,
        "village": village,
        "stage": stage,
        "progress": progress,
        "fundUtilized": utilized,
        "lat": 27.3,
        "lng": 88.6,
        "images": [],
        "lastUpdated": last_updated,
        "startDate": "2026-01-01",
        "expectedCompletion": "2026-12-31",
        "contactNumber": "9800000000",
        "aadharNumber": "0000 0000 0000",
        "familyMembers": 4,
        "assignedOfficer": officer,
        "remarks": "",
        "fundDetails": {"allocated": allocated, "released": released, "utilized": utilized},
        "constructionDetails": {
            "foundation": {"status": "Completed", "completionDate": "2026-03-01"},
            "walls": {"status": "In Progress", "completionDate": None},
            "roof": {"status": "Not Started", "completionDate": None},
            "finishing": {"status": "Not Started", "completionDate": None},
        },
    }


SAMPLE_HOUSES = [
    _house(1, "Ramesh Kumar", "Gangtok", "Tadong", "Completed", 100,
           "Rs. 1,20,000", "Rs. 1,20,000", "Rs. 1,20,000", "2026-10-04", "Pema Sherpa"),
    _house(2, "Sunita Rai", "Gangtok", "Ranipool", "In Progress", 60,
           "Rs. 1,20,000", "Rs. 80,000", "Rs. 70,000", "2026-10-12", "Pema Sherpa"),
    _house(3, "Dawa Lepcha", "Namchi", "Damthang", "Delayed", 20,
           "Rs. 1,20,000", "Rs. 40,000", "Rs. 25,000", "2026-09-18", "Karma Bhutia"),
    _house(4, "Anita Subba", "Mangan", "Dzongu", "Not Started", 0,
           "Rs. 1,20,000", "Rs. 0", "Rs. 0", "2025-12-05", "Karma Bhutia"),
]

SAMPLE_OFFICERS = [
    {"id": 1, "name": "Pema Sherpa", "designation": "Assistant Engineer",
     "constituency": "Gangtok", "contactNumber": "9832100001",
     "email": "pema@example.gov.in", "assignedHouses": [1, 2]},
    {"id": 2, "name": "Karma Bhutia", "designation": "Junior Engineer",
     "constituency": "Namchi", "contactNumber": "9733100002",
     "email": "karma@example.gov.in", "assignedHouses": [3, 4]},
]


class FakeClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def sample_houses():
    return json.loads(json.dumps(SAMPLE_HOUSES))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def seed_dir(tmp_path):
    """Directory with beneficiaries.json and officers.json."""
    (tmp_path / "beneficiaries.json").write_text(
        json.dumps({"beneficiaries": SAMPLE_HOUSES}), encoding="utf-8"
    )
    (tmp_path / "officers.json").write_text(
        json.dumps({"officers": SAMPLE_OFFICERS}), encoding="utf-8"
    )
    return tmp_path


@pytest.fixture()
def house_store(sample_houses, clock):
    return HouseStore(sample_houses, clock=clock, today=lambda: TODAY)


@pytest.fixture()
def officer_store(clock):
    return OfficerStore(SAMPLE_OFFICERS, clock=clock)


@pytest.fixture()
def session(tmp_path):
    return SessionContext(tmp_path / "session.json")


@pytest.fixture()
def app_config(seed_dir, monkeypatch):
    monkeypatch.setenv("APP_DATA_DIR", str(seed_dir))
    monkeypatch.setenv("APP_SESSION_PATH", str(seed_dir / "session.json"))
    return AppConfig.from_env()


@pytest.fixture()
def client(app_config, house_store, officer_store, session):
    from fastapi.testclient import TestClient

    from api.app import create_app

    app = create_app(
        config=app_config,
        house_store=house_store,
        officer_store=officer_store,
        session=session,
        today=lambda: TODAY,
    )
    return TestClient(app)


@pytest.fixture()
def admin_headers(client):
    resp = client.post("/api/v1/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
