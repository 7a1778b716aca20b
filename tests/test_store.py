from datetime import datetime, timedelta, timezone
from unittest import mock

import mongomock
import pytest
from pymongo.errors import PyMongoError

from flightlog.core.errors import StoreError
from flightlog.core.session import SessionManager, SessionUser
from flightlog.core.store import OwnedCollection


@pytest.fixture
def flights():
    return OwnedCollection(mongomock.MongoClient().db.flights)


def test_insert_stamps_owner(flights):
    flights.insert("u1", {"flightNumber": "AA100", "userid": "u2"})
    assert flights.collection.find_one({})["userid"] == "u1"


def test_reads_are_scoped_to_owner(flights):
    flights.insert("u1", {"flightNumber": "AA100"})
    flights.insert("u2", {"flightNumber": "AA100"})

    assert flights.find_one("u1", {"flightNumber": "AA100"})["userid"] == "u1"
    assert len(flights.find("u1")) == 1
    assert flights.find_one("u3", {"flightNumber": "AA100"}) is None


def test_update_and_delete_are_scoped_to_owner(flights):
    flights.insert("u1", {"flightNumber": "AA100", "gate": "A1"})

    assert flights.update("u2", {"flightNumber": "AA100"}, {"gate": "B2"}) == 0
    assert flights.delete("u2", {"flightNumber": "AA100"}) == 0
    assert flights.update("u1", {"flightNumber": "AA100"}, {"gate": "B2"}) == 1
    assert flights.delete("u1", {"flightNumber": "AA100"}) == 1


def test_update_ignores_identity_fields(flights):
    flights.insert("u1", {"flightNumber": "AA100"})

    assert flights.update("u1", {"flightNumber": "AA100"}, {"userid": "u2"}) == 0
    assert flights.collection.find_one({})["userid"] == "u1"


def test_driver_errors_become_store_errors():
    collection = mock.MagicMock()
    collection.name = "flights"
    collection.find_one.side_effect = PyMongoError("connection refused")

    with pytest.raises(StoreError):
        OwnedCollection(collection).find_one("u1", {"flightNumber": "AA100"})


def test_session_round_trip():
    sessions = SessionManager(mongomock.MongoClient().db.sessions, max_age=60)
    token = sessions.create(SessionUser(id="u1", name="Alice"))

    assert sessions.get(token) == SessionUser(id="u1", name="Alice")
    sessions.destroy(token)
    assert sessions.get(token) is None


def test_expired_session_is_dropped():
    collection = mongomock.MongoClient().db.sessions
    sessions = SessionManager(collection, max_age=60)
    token = sessions.create(SessionUser(id="u1", name="Alice"))
    collection.update_one(
        {"_id": token}, {"$set": {"expiresAt": datetime.now(timezone.utc) - timedelta(seconds=1)}}
    )

    assert sessions.get(token) is None
    assert collection.count_documents({}) == 0


def test_missing_token_is_no_session():
    sessions = SessionManager(mongomock.MongoClient().db.sessions, max_age=60)
    assert sessions.get(None) is None
    assert sessions.get("") is None
