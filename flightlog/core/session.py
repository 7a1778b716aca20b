# flightlog/core/session.py
import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import Request
from pydantic import BaseModel
from pymongo.collection import Collection

from flightlog.core.errors import StoreError
from flightlog.core.store import store_errors

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    id: str
    name: str


class SessionManager:
    """Server-side sessions stored in Mongo, keyed by a random cookie token."""

    def __init__(self, collection: Collection, max_age: int):
        self.collection = collection
        self.max_age = max_age

    def create(self, user: SessionUser) -> str:
        token = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        with store_errors("create session"):
            self.collection.insert_one({
                "_id": token,
                "user": user.model_dump(),
                "createdAt": now,
                "expiresAt": now + timedelta(seconds=self.max_age),
            })
        return token

    def get(self, token: str | None) -> SessionUser | None:
        if not token:
            return None
        with store_errors("read session"):
            record = self.collection.find_one({"_id": token})
        if not record:
            return None

        expires_at = record["expiresAt"]
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= datetime.now(timezone.utc):
            self.destroy(token)
            return None
        return SessionUser(**record["user"])

    def destroy(self, token: str | None) -> None:
        if not token:
            return
        with store_errors("destroy session"):
            self.collection.delete_one({"_id": token})


# --- helper: get current logged in user from the session cookie ---
def get_current_user(request: Request) -> SessionUser | None:
    sessions: SessionManager = request.app.state.sessions
    token = request.cookies.get(request.app.state.settings.session_cookie_name)
    try:
        return sessions.get(token)
    except StoreError:
        logger.warning("Session lookup failed, treating request as logged out")
        return None
