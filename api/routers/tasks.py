"""
Tasks API Router

Provides CRUD endpoints for the authenticated user's tasks. Lookups of a task
that does not exist and of a task owned by someone else both answer 404.
"""

import logging

from fastapi import APIRouter, HTTPException, Depends, Response, status

from api.dependencies import get_current_identity, get_task_store
from config.logging_utils import log_debug
from models.task import TaskCreate, TaskEnvelope, TaskInDB, TaskList, TaskResponse, TaskUpdate
from models.user import TokenData
from services.task_store import TaskStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


def _to_response(task: TaskInDB) -> TaskResponse:
    return TaskResponse(**task.model_dump())


@router.get("", response_model=TaskList)
async def list_tasks(
    identity: TokenData = Depends(get_current_identity),
    tasks: TaskStore = Depends(get_task_store)
):
    """List all tasks for the current user, newest first."""
    items = await tasks.list_for_owner(identity.user_id)
    return TaskList(tasks=[_to_response(t) for t in items])


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: TaskCreate,
    identity: TokenData = Depends(get_current_identity),
    tasks: TaskStore = Depends(get_task_store)
):
    """Create a new task."""
    title = (request.title or "").strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")

    task = await tasks.create(identity.user_id, title)
    logger.info("Created task %s for user %s", task.id, identity.user_id)
    return TaskEnvelope(task=_to_response(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(
    task_id: str,
    identity: TokenData = Depends(get_current_identity),
    tasks: TaskStore = Depends(get_task_store)
):
    """Get a single task by ID."""
    task = await tasks.get(identity.user_id, task_id)
    if task is None:
        raise _not_found()
    return TaskEnvelope(task=_to_response(task))


@router.patch("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: str,
    request: TaskUpdate,
    identity: TokenData = Depends(get_current_identity),
    tasks: TaskStore = Depends(get_task_store)
):
    """Update the title and/or completion state of a task."""
    title = None
    if request.title is not None:
        title = request.title.strip()
        if not title:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title cannot be empty")

    completed = None
    if "completed" in request.model_fields_set:
        completed = bool(request.completed)

    task = await tasks.update(identity.user_id, task_id, title=title, completed=completed)
    if task is None:
        log_debug(f"Update missed task_id={task_id} for user_id={identity.user_id}", prefix="TASKS")
        raise _not_found()
    return TaskEnvelope(task=_to_response(task))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    identity: TokenData = Depends(get_current_identity),
    tasks: TaskStore = Depends(get_task_store)
):
    """Delete a task."""
    deleted = await tasks.delete(identity.user_id, task_id)
    if not deleted:
        log_debug(f"Delete missed task_id={task_id} for user_id={identity.user_id}", prefix="TASKS")
        raise _not_found()

    logger.info("Deleted task %s for user %s", task_id, identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
