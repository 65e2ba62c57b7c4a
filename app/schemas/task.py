"""Pydantic schemas for task endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from app.models.task import Priority

TITLE_MAX_LENGTH = 255


class TaskFields(BaseModel):
    """Complete set of writable task fields. Used for both create and full-replacement update."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    due_date: date | None = None
    completed: bool = False
    priority: Priority | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class TaskFilters(BaseModel):
    """Optional list filters. A None value means the filter is not applied."""

    search: str | None = None
    completed: bool | None = None
    priority: Priority | None = None

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class TaskResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None
    due_date: date | None
    completed: bool
    priority: Priority | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
