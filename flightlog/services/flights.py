import base64
import logging
from datetime import datetime, timezone

from fastapi import UploadFile
from pydantic import ValidationError as SchemaError
from pymongo.database import Database

from flightlog.core.errors import FilesystemError, NotFoundError, ValidationError
from flightlog.core.store import OwnedCollection
from flightlog.models.database import FLIGHTS
from flightlog.models.flight import FlightCreate, FlightUpdate, search_query

logger = logging.getLogger(__name__)


async def read_photo(upload: UploadFile | None) -> str | None:
    """Base64 text of the uploaded file, or None when nothing was uploaded."""
    if upload is None or not upload.filename:
        return None
    try:
        content = await upload.read()
    except OSError as exc:
        logger.exception("Failed to read upload %s", upload.filename)
        raise FilesystemError() from exc
    if not content:
        return None
    return base64.b64encode(content).decode("ascii")


def _describe(exc: SchemaError) -> str:
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        problems.append(f"{field}: {err['msg']}")
    return "Invalid flight: " + "; ".join(problems)


class FlightService:
    def __init__(self, db: Database):
        self.flights = OwnedCollection(db[FLIGHTS])

    def create(self, owner_id: str, fields: dict, photo: str | None = None) -> str:
        try:
            flight = FlightCreate.model_validate(fields)
        except SchemaError as exc:
            raise ValidationError(_describe(exc)) from exc

        doc = flight.to_document(created_at=datetime.now(timezone.utc))
        if photo:
            doc["photo"] = photo
        flight_id = self.flights.insert(owner_id, doc)
        logger.info("User %s added flight %s", owner_id, flight.flight_number)
        return str(flight_id)

    def get(self, owner_id: str, lookup: dict) -> dict:
        flight = self.flights.find_one(owner_id, lookup)
        if not flight:
            raise NotFoundError()
        return flight

    def find(self, owner_id: str, term: str | None = None) -> list[dict]:
        return self.flights.find(owner_id, search_query(term))

    def update(self, owner_id: str, lookup: dict, fields: dict, photo: str | None = None) -> int:
        try:
            changes = FlightUpdate.model_validate(fields).to_fields()
        except SchemaError as exc:
            raise ValidationError(_describe(exc)) from exc

        if photo:
            changes["photo"] = photo
        modified = self.flights.update(owner_id, lookup, changes)
        logger.info("User %s updated %d flight(s) matching %s", owner_id, modified, lookup)
        return modified

    def delete(self, owner_id: str, lookup: dict) -> int:
        deleted = self.flights.delete(owner_id, lookup)
        logger.info("User %s deleted %d flight(s) matching %s", owner_id, deleted, lookup)
        return deleted
