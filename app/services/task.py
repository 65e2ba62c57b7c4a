"""Task service: ownership-scoped queries and validated writes."""

import logging
from typing import Any

import pydantic
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError, request_errors_to_fields
from app.models.task import Task
from app.schemas.task import TaskFields, TaskFilters
from app.services.authorization import ensure_owner

logger = logging.getLogger("taskboard")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _coerce(model: type[pydantic.BaseModel], data: Any) -> Any:
    """Accept either an already validated model or raw mapping data."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data or {})
    except pydantic.ValidationError as e:
        raise ValidationError(request_errors_to_fields(e.errors())) from None


class TaskService:
    """Handles task listing and CRUD for a single owner."""

    def list_tasks(self, db: Session, owner_id: int, filters: TaskFilters | dict | None = None) -> list[Task]:
        """Return the owner's tasks matching every given filter, newest first."""
        filters = _coerce(TaskFilters, filters)
        query = db.query(Task).filter(Task.user_id == owner_id)

        if filters.search is not None:
            pattern = f"%{_escape_like(filters.search.lower())}%"
            query = query.filter(
                or_(
                    Task.title.ilike(pattern, escape="\\"),
                    Task.description.ilike(pattern, escape="\\"),
                )
            )

        if filters.completed is not None:
            query = query.filter(Task.completed == filters.completed)

        if filters.priority is not None:
            query = query.filter(Task.priority == filters.priority)

        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def create_task(self, db: Session, owner_id: int, fields: TaskFields | dict) -> Task:
        """Create a task owned by ``owner_id``. Raises ValidationError for invalid fields."""
        fields = _coerce(TaskFields, fields)
        task = Task(user_id=owner_id, **fields.model_dump())
        db.add(task)
        db.commit()
        db.refresh(task)
        logger.info("User %s created task %s", owner_id, task.id)
        return task

    def get_task(self, db: Session, owner_id: int, task_id: int) -> Task:
        """Fetch a task the owner may read. Raises NotFoundError or AuthorizationError."""
        task = db.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        ensure_owner(owner_id, task.user_id)
        return task

    def update_task(self, db: Session, owner_id: int, task_id: int, fields: TaskFields | dict) -> Task:
        """Replace every writable field of an owned task."""
        task = self.get_task(db, owner_id, task_id)
        fields = _coerce(TaskFields, fields)
        for name, value in fields.model_dump().items():
            setattr(task, name, value)
        db.commit()
        db.refresh(task)
        return task

    def delete_task(self, db: Session, owner_id: int, task_id: int) -> None:
        """Permanently delete an owned task."""
        task = self.get_task(db, owner_id, task_id)
        db.delete(task)
        db.commit()
        logger.info("User %s deleted task %s", owner_id, task_id)


_task_service: TaskService | None = None


def get_task_service() -> TaskService:
    """Get singleton task service instance."""
    global _task_service
    if _task_service is None:
        _task_service = TaskService()
    return _task_service
