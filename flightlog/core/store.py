# flightlog/core/store.py
"""
Owner-scoped access to a Mongo collection.

Every flight read, update and delete goes through :class:`OwnedCollection`,
which always adds the owner filter to the caller's criteria. Handlers never
build a flight query by hand.
"""
import logging
from contextlib import contextmanager

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from flightlog.core.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(action: str):
    """Turn any driver failure inside the block into a StoreError."""
    try:
        yield
    except PyMongoError as exc:
        logger.exception("Store failure while trying to %s", action)
        raise StoreError(f"Database error while trying to {action}") from exc


class OwnedCollection:
    def __init__(self, collection: Collection, owner_field: str = "userid"):
        self.collection = collection
        self.owner_field = owner_field

    def scoped(self, owner_id: str, criteria: dict | None = None) -> dict:
        query = dict(criteria or {})
        query[self.owner_field] = owner_id
        return query

    def find_one(self, owner_id: str, criteria: dict) -> dict | None:
        with store_errors(f"read from {self.collection.name}"):
            return self.collection.find_one(self.scoped(owner_id, criteria))

    def find(self, owner_id: str, criteria: dict | None = None,
             sort_field: str = "createdAt") -> list[dict]:
        with store_errors(f"list {self.collection.name}"):
            cursor = self.collection.find(self.scoped(owner_id, criteria)).sort(
                [(sort_field, DESCENDING), ("_id", DESCENDING)]
            )
            return list(cursor)

    def insert(self, owner_id: str, document: dict):
        document = dict(document)
        document[self.owner_field] = owner_id
        with store_errors(f"insert into {self.collection.name}"):
            return self.collection.insert_one(document).inserted_id

    def update(self, owner_id: str, criteria: dict, fields: dict) -> int:
        fields = {k: v for k, v in fields.items() if k not in ("_id", self.owner_field)}
        # $set with an empty document is rejected by the server
        if not fields:
            return 0
        with store_errors(f"update {self.collection.name}"):
            result = self.collection.update_one(
                self.scoped(owner_id, criteria), {"$set": fields}
            )
            return result.modified_count

    def delete(self, owner_id: str, criteria: dict) -> int:
        with store_errors(f"delete from {self.collection.name}"):
            return self.collection.delete_one(self.scoped(owner_id, criteria)).deleted_count
