"""Project API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

INBOX_PROJECT_NAME = "Inbox"


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str
    pinned: bool = False

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()


class ProjectUpdate(BaseModel):
    """Schema for updating a project (all fields optional)."""

    name: Optional[str] = None
    pinned: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("name must not be empty")
        return v.strip()


class ProjectSwap(BaseModel):
    """Body for swapping the manual order of two projects."""

    first_id: str
    second_id: str


class ProjectResponse(BaseModel):
    """Schema for project response with computed task_count."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    pinned: bool
    sort_order: int
    created_at: int
    updated_at: int
    task_count: int = 0
