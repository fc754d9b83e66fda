from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import failure_message
from app.core.deps import get_current_user, get_db
from app.db.models import User
from app.db.schemas import DeleteResult, Page, TaskCreate, TaskDetail, TaskListItem, TaskOut, TaskPatch
from app.services import tasks as task_service


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=Page[TaskListItem])
def list_tasks(
    project_id: str | None = Query(None, alias="projectId"),
    status: str | None = Query(None),
    assignee_id: str | None = Query(None, alias="assigneeId"),
    page: int = Query(1),
    limit: int = Query(50),
    db: Session = Depends(get_db),
):
    with failure_message("Failed to fetch tasks"):
        return task_service.list_tasks(
            db,
            project_id=project_id,
            status=status,
            assignee_id=assignee_id,
            page=page,
            limit=limit,
        )


@router.post("", response_model=TaskOut, status_code=201)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    with failure_message("Failed to create task"):
        return task_service.create_task(db, payload, current_user)


@router.get("/{task_id}", response_model=TaskDetail)
def get_task(task_id: str, db: Session = Depends(get_db)):
    with failure_message("Failed to fetch task"):
        return task_service.get_task(db, task_id)


@router.patch("/{task_id}", response_model=TaskOut)
def patch_task(
    task_id: str,
    payload: TaskPatch,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    with failure_message("Failed to update task"):
        return task_service.update_task(db, task_id, payload, current_user)


@router.delete("/{task_id}", response_model=DeleteResult)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    with failure_message("Failed to delete task"):
        task_service.delete_task(db, task_id)
        return DeleteResult()
