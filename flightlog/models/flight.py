# flightlog/models/flight.py
import re
from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from flightlog.core.errors import NotFoundError

# Fields matched by every search variant
SEARCH_FIELDS = (
    "flightNumber",
    "destination",
    "airline",
    "departureAirport",
    "arrivalAirport",
    "status",
    "gate",
)

DEFAULT_GATE = "N/A"
DEFAULT_STATUS = "On Time"


class FlightFields(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class FlightCreate(FlightFields):
    flight_number: str
    destination: str
    hours: str = ""
    minutes: str = ""
    gate: str = DEFAULT_GATE
    status: str = DEFAULT_STATUS
    airline: str = ""
    departure_airport: str = ""
    arrival_airport: str = ""
    departure_time: str = ""

    @field_validator("flight_number", "destination")
    @classmethod
    def required(cls, value: str) -> str:
        if not value:
            raise ValueError("is required")
        return value

    @field_validator("gate")
    @classmethod
    def gate_default(cls, value: str) -> str:
        return value or DEFAULT_GATE

    @field_validator("status")
    @classmethod
    def status_default(cls, value: str) -> str:
        return value or DEFAULT_STATUS

    def to_document(self, created_at: datetime) -> dict:
        doc = self.model_dump(by_alias=True)
        doc["createdAt"] = created_at
        return doc


class FlightUpdate(FlightFields):
    flight_number: str | None = None
    destination: str | None = None
    hours: str | None = None
    minutes: str | None = None
    gate: str | None = None
    status: str | None = None
    airline: str | None = None
    departure_airport: str | None = None
    arrival_airport: str | None = None
    departure_time: str | None = None

    def to_fields(self) -> dict:
        """Only what was actually submitted; explicit nulls count as not submitted."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


# --- lookup keys ---
def by_id(flight_id: str | None) -> dict:
    # ObjectId(None) would mint a fresh id
    if not flight_id:
        raise NotFoundError()
    try:
        return {"_id": ObjectId(flight_id)}
    except (InvalidId, TypeError):
        raise NotFoundError()


def by_flight_number(flight_number: str) -> dict:
    return {"flightNumber": flight_number}


def search_query(term: str | None) -> dict:
    """Mongo filter for a case-insensitive substring match on any search field."""
    if term is None or not term.strip():
        return {}
    pattern = {"$regex": re.escape(term.strip()), "$options": "i"}
    return {"$or": [{field: pattern} for field in SEARCH_FIELDS]}


def serialize(flight: dict) -> dict:
    doc = dict(flight)
    doc["_id"] = str(doc["_id"])
    created_at = doc.get("createdAt")
    if isinstance(created_at, datetime):
        doc["createdAt"] = created_at.isoformat()
    return doc
