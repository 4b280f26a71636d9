"""
Task Models

Defines request and response schemas for per-user tasks.
"""

from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskCreate(BaseModel):
    """Request schema for task creation."""

    title: Optional[str] = Field(default=None, description="Task title")


class TaskUpdate(BaseModel):
    """Request schema for a partial task update."""

    title: Optional[str] = Field(default=None, description="New title")
    completed: Any = Field(default=None, description="New completion state, coerced to a boolean when present")


class TaskInDB(BaseModel):
    """Schema for task stored in database."""

    id: str = Field(..., description="Unique task ID")
    user_id: str = Field(..., description="ID of the owning user")
    title: str = Field(..., description="Task title")
    completed: bool = Field(default=False, description="Whether the task is done")
    created_at: datetime
    updated_at: datetime


class TaskResponse(TaskInDB):
    """Schema for task returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskEnvelope(BaseModel):
    """Response wrapper for a single task."""

    task: TaskResponse


class TaskList(BaseModel):
    """Response wrapper for the task listing."""

    tasks: list[TaskResponse] = Field(default_factory=list)
