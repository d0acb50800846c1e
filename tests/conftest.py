import copy
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from seascape.api.deps import get_booking_ledger
from seascape.core.security import create_access_token
from seascape.core.session import Session
from seascape.ledger.memory import InMemoryLedger
from seascape.main import app

GUEST_ID = "00000000-0000-0000-0000-000000000001"
OTHER_GUEST_ID = "00000000-0000-0000-0000-000000000002"
STAFF_ID = "00000000-0000-0000-0000-000000000003"
ADMIN_ID = "00000000-0000-0000-0000-000000000004"
OWNER_ID = "00000000-0000-0000-0000-000000000005"

SEA_QUEEN_ID = "10000000-0000-0000-0000-000000000001"
OCEAN_SPIRIT_ID = "10000000-0000-0000-0000-000000000002"
DRY_DOCK_ID = "10000000-0000-0000-0000-000000000003"

YACHTS = [
    {
        "id": SEA_QUEEN_ID,
        "owner_id": OWNER_ID,
        "name": "Sea Queen 45ft",
        "type": "private-yacht",
        "location": "north-coast",
        "capacity": 12,
        "price_per_person": 850,
        "price_per_hour": 2500,
        "rating": 4.9,
        "is_available": True,
    },
    {
        "id": OCEAN_SPIRIT_ID,
        "owner_id": None,
        "name": "Ocean Spirit",
        "type": "speed-boat",
        "location": "alexandria",
        "capacity": 8,
        "price_per_person": 450,
        "price_per_hour": 1500,
        "rating": 4.7,
        "is_available": True,
    },
    {
        "id": DRY_DOCK_ID,
        "owner_id": None,
        "name": "Dry Dock",
        "type": "catamaran",
        "location": "el-gouna",
        "capacity": 20,
        "price_per_person": 650,
        "price_per_hour": 3500,
        "rating": 4.1,
        "is_available": False,
    },
]

PROFILES = [
    {"id": GUEST_ID, "name": "Ahmed Hassan", "email": "ahmed@example.com", "phone": "+201000000001"},
    {"id": OTHER_GUEST_ID, "name": "Mona Adel", "email": "mona@example.com", "phone": None},
]

ROLES = {
    GUEST_ID: ["guest"],
    OTHER_GUEST_ID: ["guest"],
    STAFF_ID: ["staff"],
    ADMIN_ID: ["admin"],
    OWNER_ID: ["owner"],
}


@pytest.fixture
def ledger():
    return InMemoryLedger(
        yachts=copy.deepcopy(YACHTS),
        profiles=copy.deepcopy(PROFILES),
        roles=copy.deepcopy(ROLES),
    )


@pytest.fixture
def trip_date():
    return date.today() + timedelta(days=7)


def make_session(ledger: InMemoryLedger, user_id: str) -> Session:
    token = create_access_token({"sub": user_id})
    session = Session(user_id=user_id, access_token=token)
    return session.with_roles(ledger.roles.get(user_id, ["guest"]))


@pytest.fixture
def guest_session(ledger):
    return make_session(ledger, GUEST_ID)


@pytest.fixture
def other_session(ledger):
    return make_session(ledger, OTHER_GUEST_ID)


@pytest.fixture
def staff_session(ledger):
    return make_session(ledger, STAFF_ID)


@pytest.fixture
def admin_session(ledger):
    return make_session(ledger, ADMIN_ID)


@pytest.fixture
def owner_session(ledger):
    return make_session(ledger, OWNER_ID)


@pytest.fixture
def book(ledger, trip_date):
    """Create a booking straight on the ledger and return its id."""

    async def _book(session, yacht_id=SEA_QUEEN_ID, seats=2, payment_method="cash", booking_date=None):
        result = await ledger.create_booking(
            session,
            yacht_id=yacht_id,
            booking_date=booking_date or trip_date,
            time_slot="10:00",
            seats=seats,
            payment_method=payment_method,
        )
        assert result.success, result.error_message
        return result.booking_id

    return _book


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def client(ledger):
    app.dependency_overrides[get_booking_ledger] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
