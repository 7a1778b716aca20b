import mongomock
import pytest
from fastapi.testclient import TestClient

from flightlog.core.config import Settings
from flightlog.main import create_app

TEST_DB = "flightlog_test"


@pytest.fixture
def settings():
    return Settings(mongodb_db=TEST_DB, log_level="WARNING", session_max_age=3600)


@pytest.fixture
def mongo():
    return mongomock.MongoClient()


@pytest.fixture
def db(mongo):
    return mongo[TEST_DB]


@pytest.fixture
def app(settings, mongo):
    return create_app(settings, client=mongo)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def other_client(app):
    """A second browser with its own cookie jar."""
    with TestClient(app) as c:
        yield c


def register(client, username, password="pw1", name=None):
    return client.post(
        "/register",
        data={"username": username, "password": password, "name": name or username.title()},
    )


def login(client, username, password="pw1"):
    return client.post(
        "/login",
        data={"username": username, "password": password},
        follow_redirects=False,
    )


@pytest.fixture
def alice(client):
    register(client, "alice", "pw1", "Alice")
    assert login(client, "alice", "pw1").status_code == 303
    return client


@pytest.fixture
def bob(other_client):
    register(other_client, "bob", "pw2", "Bob")
    assert login(other_client, "bob", "pw2").status_code == 303
    return other_client


def add_flight(client, **fields):
    data = {"flightNumber": "AA100", "destination": "JFK", "hours": "2", "minutes": "30"}
    data.update(fields)
    return client.post("/api/flights", json=data).json()
