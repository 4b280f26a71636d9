"""Credential store backed by the MongoDB ``users`` collection."""

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from config.logging_utils import log_debug
from models.user import UserInDB


USERS_COLLECTION = "users"


class DuplicateUserError(Exception):
    """Raised when a user with the same normalized email already exists."""


def _to_user(doc: dict) -> UserInDB:
    return UserInDB(
        id=str(doc["_id"]),
        email=doc["email"],
        password_hash=doc["password_hash"],
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at", doc["created_at"])
    )


class UserStore:
    """Persistence for user records. Emails are expected to be normalized by the caller."""

    def __init__(self, collection):
        self.collection = collection

    async def create_indexes(self) -> None:
        """Create unique index on email field for fast lookups."""
        await self.collection.create_index("email", unique=True)

    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        """Get a user by normalized email."""
        doc = await self.collection.find_one({"email": email})
        return _to_user(doc) if doc else None

    async def get_by_id(self, user_id: str) -> Optional[UserInDB]:
        """Get a user by ID. Malformed IDs are treated as unknown."""
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        doc = await self.collection.find_one({"_id": oid})
        return _to_user(doc) if doc else None

    async def create(self, email: str, password_hash: str) -> UserInDB:
        """Insert a new user record."""
        now = datetime.now(timezone.utc)
        user_doc = {
            "email": email,
            "password_hash": password_hash,
            "created_at": now,
            "updated_at": now
        }

        try:
            result = await self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            raise DuplicateUserError(email) from e

        user_doc["_id"] = result.inserted_id
        log_debug(f"Inserted user id={result.inserted_id}", prefix="USERS")
        return _to_user(user_doc)
