import logging

from pydantic import ValidationError as SchemaError
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from flightlog.core.errors import AuthError, ConflictError, ValidationError
from flightlog.core.session import SessionUser
from flightlog.core.store import store_errors
from flightlog.models.database import USERS
from flightlog.models.user import RegistrationForm, User, new_user_id

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Database):
        self.users = db[USERS]

    def register(self, username: str | None, password: str | None, name: str | None) -> User:
        try:
            form = RegistrationForm(username=username or "", password=password or "", name=name or "")
        except SchemaError as exc:
            raise ValidationError("All fields required") from exc

        with store_errors("look up user"):
            existing = self.users.find_one({"username": form.username})
        if existing:
            raise ConflictError()

        user = User(
            username=form.username,
            password=generate_password_hash(form.password),
            name=form.name,
            userId=new_user_id(),
        )
        with store_errors("register user"):
            try:
                self.users.insert_one(user.model_dump())
            except DuplicateKeyError as exc:
                # lost a race against another registration with the same name
                raise ConflictError() from exc

        logger.info("Registered user %s (%s)", user.username, user.userId)
        return user

    def login(self, username: str | None, password: str | None) -> SessionUser:
        with store_errors("look up user"):
            user = self.users.find_one({"username": username or ""})

        if not user or not check_password_hash(user["password"], password or ""):
            logger.warning("Failed login for %r", username)
            raise AuthError()

        logger.info("User %s logged in", user["userId"])
        return SessionUser(id=user["userId"], name=user["name"])
