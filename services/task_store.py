"""
Task Store

Owner-scoped persistence for tasks in the MongoDB ``tasks`` collection.
Every query and mutation filters on the owning user id, so a task that
belongs to someone else is indistinguishable from one that does not exist.
"""

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from config.logging_utils import log_debug
from models.task import TaskInDB


TASKS_COLLECTION = "tasks"


def _parse_id(task_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(task_id)
    except (InvalidId, TypeError):
        return None


def _to_task(doc: dict) -> TaskInDB:
    return TaskInDB(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        title=doc["title"],
        completed=doc.get("completed", False),
        created_at=doc["created_at"],
        updated_at=doc.get("updated_at", doc["created_at"])
    )


class TaskStore:
    """Persistence for tasks, scoped by owner."""

    def __init__(self, collection):
        self.collection = collection

    async def create_indexes(self) -> None:
        """Create indexes for the tasks collection."""
        await self.collection.create_index([("user_id", 1), ("created_at", -1)])

    async def list_for_owner(self, owner_id: str) -> list[TaskInDB]:
        """List all tasks of an owner, newest first."""
        cursor = self.collection.find({"user_id": owner_id}).sort(
            [("created_at", -1), ("_id", -1)]
        )

        tasks = []
        async for doc in cursor:
            tasks.append(_to_task(doc))
        return tasks

    async def create(self, owner_id: str, title: str) -> TaskInDB:
        """Insert a new, not yet completed task."""
        now = datetime.now(timezone.utc)
        task_doc = {
            "user_id": owner_id,
            "title": title,
            "completed": False,
            "created_at": now,
            "updated_at": now
        }
        result = await self.collection.insert_one(task_doc)
        task_doc["_id"] = result.inserted_id
        log_debug(f"Created task id={result.inserted_id} for user_id={owner_id}", prefix="TASKS")
        return _to_task(task_doc)

    async def get(self, owner_id: str, task_id: str) -> Optional[TaskInDB]:
        """Get a single task of an owner."""
        oid = _parse_id(task_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid, "user_id": owner_id})
        return _to_task(doc) if doc else None

    async def update(
        self,
        owner_id: str,
        task_id: str,
        title: Optional[str] = None,
        completed: Optional[bool] = None
    ) -> Optional[TaskInDB]:
        """Apply a partial update and return the updated task."""
        oid = _parse_id(task_id)
        if oid is None:
            return None

        updates = {"updated_at": datetime.now(timezone.utc)}
        if title is not None:
            updates["title"] = title
        if completed is not None:
            updates["completed"] = completed

        doc = await self.collection.find_one_and_update(
            {"_id": oid, "user_id": owner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
        return _to_task(doc) if doc else None

    async def delete(self, owner_id: str, task_id: str) -> bool:
        """Delete a task. Returns False when nothing matched."""
        oid = _parse_id(task_id)
        if oid is None:
            return False
        doc = await self.collection.find_one_and_delete({"_id": oid, "user_id": owner_id})
        return doc is not None
