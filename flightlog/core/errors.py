# flightlog/core/errors.py


class FlightLogError(Exception):
    """Base class for every error a handler is expected to catch."""

    message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class ValidationError(FlightLogError):
    message = "Invalid input"


class ConflictError(FlightLogError):
    message = "Username exists"


class AuthError(FlightLogError):
    # Same text for unknown users and wrong passwords.
    message = "Invalid credentials"


class NotFoundError(FlightLogError):
    message = "Flight not found"


class StoreError(FlightLogError):
    message = "Database error"


class FilesystemError(FlightLogError):
    message = "Could not read uploaded file"
