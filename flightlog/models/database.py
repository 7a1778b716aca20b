# flightlog/models/database.py
import logging

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)

USERS = "users"
FLIGHTS = "flights"
SESSIONS = "sessions"


def connect(uri: str) -> MongoClient:
    return MongoClient(uri, tz_aware=True)


def ensure_indexes(db: Database) -> None:
    db[USERS].create_index([("username", ASCENDING)], unique=True)
    db[FLIGHTS].create_index([("userid", ASCENDING), ("createdAt", DESCENDING)])
    db[SESSIONS].create_index([("expiresAt", ASCENDING)], expireAfterSeconds=0)
    logger.info("Indexes ensured on database %s", db.name)


# --- DB dependency: the handle is created once at startup ---
def get_db(request: Request) -> Database:
    return request.app.state.db
