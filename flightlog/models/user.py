import time

from pydantic import BaseModel, field_validator


def new_user_id() -> str:
    return f"u{int(time.time() * 1000)}"


class RegistrationForm(BaseModel):
    username: str
    password: str
    name: str

    @field_validator("username", "password", "name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value


class User(BaseModel):
    username: str           # unique, case-sensitive
    password: str           # salted hash, never the raw password
    name: str
    userId: str
