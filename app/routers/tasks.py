"""Task API endpoints."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.models.task import Priority
from app.schemas.task import TaskFields, TaskFilters, TaskResponse
from app.services.task import get_task_service

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    search: str | None = Query(default=None),
    completed: bool | None = Query(default=None),
    priority: Priority | None = Query(default=None),
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[TaskResponse]:
    """List the current user's tasks, newest first."""
    service = get_task_service()
    filters = TaskFilters(search=search, completed=completed, priority=priority)
    tasks = service.list_tasks(db, current.user_id, filters)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    body: TaskFields,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Create a task owned by the current user."""
    task = get_task_service().create_task(db, current.user_id, body)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Get a single task."""
    task = get_task_service().get_task(db, current.user_id, task_id)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    body: TaskFields,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Replace all fields of a task."""
    task = get_task_service().update_task(db, current.user_id, task_id, body)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: int,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a task."""
    get_task_service().delete_task(db, current.user_id, task_id)
    return Response(status_code=204)
