"""Task operations for API clients."""

from dataclasses import dataclass
from typing import Any, Optional

from client.api import ApiClient, as_dict


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    completed: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def map_task(data: Any) -> Task:
    """Build a Task from an API payload."""
    data = data if isinstance(data, dict) else {}
    return Task(
        id=str(data.get("id") or data.get("_id") or ""),
        title=str(data.get("title") or ""),
        completed=bool(data.get("completed", False)),
        created_at=data.get("createdAt"),
        updated_at=data.get("updatedAt"),
    )


def list_tasks(api: ApiClient) -> list[Task]:
    data = api.get("/tasks")
    items = data if isinstance(data, list) else as_dict(data).get("tasks")
    return [map_task(t) for t in items or []]


def create_task(api: ApiClient, title: str) -> Task:
    body = as_dict(api.post("/tasks", {"title": title}))
    return map_task(body.get("task", body))


def update_task(
    api: ApiClient,
    task_id: str,
    title: Optional[str] = None,
    completed: Optional[bool] = None
) -> Task:
    patch = {}
    if title is not None:
        patch["title"] = title
    if completed is not None:
        patch["completed"] = completed
    body = as_dict(api.patch(f"/tasks/{task_id}", patch))
    return map_task(body.get("task", body))


def delete_task(api: ApiClient, task_id: str) -> None:
    api.delete(f"/tasks/{task_id}")
