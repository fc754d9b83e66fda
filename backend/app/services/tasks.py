import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import ResourceNotFoundError
from app.db.models import TASK_STATUSES, Comment, Task, TaskLabel, User
from app.db.schemas import (
    CommentOut,
    LabelOut,
    Page,
    ProjectBrief,
    TaskCounts,
    TaskCreate,
    TaskDetail,
    TaskListItem,
    TaskOut,
    TaskPatch,
    UserContact,
)
from app.services.activity import record_activity
from app.services.listing import build_filters, paginate

logger = logging.getLogger(__name__)

STATUS_ORDER = case({status: rank for rank, status in enumerate(TASK_STATUSES)}, value=Task.status)


def _comment_count():
    return select(func.count(Comment.id)).where(Comment.task_id == Task.id).correlate(Task).scalar_subquery()


def _labels(task: Task) -> list[LabelOut]:
    return [LabelOut.model_validate(link.label) for link in task.labels]


def get_task_or_404(db: Session, task_id: str) -> Task:
    task = db.get(Task, task_id)
    if not task:
        raise ResourceNotFoundError("Task", task_id)
    return task


def next_position(db: Session, project_id: str, status: str) -> int:
    last = (
        db.query(func.max(Task.position))
        .filter(Task.project_id == project_id, Task.status == status)
        .scalar()
    )
    return 0 if last is None else last + 1


def list_tasks(
    db: Session,
    *,
    project_id: str | None = None,
    status: str | None = None,
    assignee_id: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> Page[TaskListItem]:
    filters = build_filters(project_id=project_id, status=status, assignee_id=assignee_id)
    query = (
        db.query(Task, _comment_count().label("comment_count"))
        .filter_by(**filters)
        .options(
            selectinload(Task.assignee),
            selectinload(Task.creator),
            selectinload(Task.labels).selectinload(TaskLabel.label),
        )
        .order_by(STATUS_ORDER.asc(), Task.position.asc())
    )
    rows, pagination = paginate(query, page, limit)
    data = [
        TaskListItem(
            **TaskOut.model_validate(task).model_dump(),
            labels=_labels(task),
            counts=TaskCounts(comments=comment_count),
        )
        for task, comment_count in rows
    ]
    return Page[TaskListItem](data=data, pagination=pagination)


def get_task(db: Session, task_id: str) -> TaskDetail:
    task = (
        db.query(Task)
        .options(
            selectinload(Task.project),
            selectinload(Task.assignee),
            selectinload(Task.creator),
            selectinload(Task.labels).selectinload(TaskLabel.label),
            selectinload(Task.comments).selectinload(Comment.author),
        )
        .filter(Task.id == task_id)
        .first()
    )
    if not task:
        raise ResourceNotFoundError("Task", task_id)

    base = TaskOut.model_validate(task).model_dump(exclude={"assignee", "creator"})
    return TaskDetail(
        **base,
        project=ProjectBrief.model_validate(task.project),
        assignee=UserContact.model_validate(task.assignee) if task.assignee else None,
        creator=UserContact.model_validate(task.creator),
        labels=_labels(task),
        comments=[CommentOut.model_validate(comment) for comment in task.comments],
    )


def create_task(db: Session, payload: TaskCreate, caller: User) -> TaskOut:
    task = Task(
        **payload.model_dump(),
        creator_id=caller.id,
        position=next_position(db, payload.project_id, payload.status),
    )
    db.add(task)
    db.flush()

    record_activity(
        db,
        "task_created",
        caller.id,
        project_id=task.project_id,
        task_id=task.id,
        task_title=task.title,
    )
    if task.assignee_id:
        record_activity(
            db,
            "task_assigned",
            task.assignee_id,
            project_id=task.project_id,
            task_id=task.id,
            task_title=task.title,
            assigned_by=caller.id,
        )

    db.commit()
    db.refresh(task)
    logger.info("Created task %s", task.id, extra={"task_id": task.id, "project_id": task.project_id})
    return TaskOut.model_validate(task)


def update_task(db: Session, task_id: str, payload: TaskPatch, caller: User) -> TaskOut:
    task = get_task_or_404(db, task_id)

    patch_data = payload.model_dump(exclude_unset=True)
    if not patch_data:
        return TaskOut.model_validate(task)

    previous_assignee_id = task.assignee_id
    previous_title = task.title

    for key, value in patch_data.items():
        setattr(task, key, value)

    if "assignee_id" in patch_data and patch_data["assignee_id"] != previous_assignee_id:
        # unassignment is attributed to the caller
        record_activity(
            db,
            "task_assigned",
            patch_data["assignee_id"] or caller.id,
            project_id=task.project_id,
            task_id=task.id,
            task_title=previous_title,
            assigned_by=caller.id,
        )

    if patch_data.get("status") == "done":
        record_activity(
            db,
            "task_completed",
            caller.id,
            project_id=task.project_id,
            task_id=task.id,
            task_title=previous_title,
        )

    db.commit()
    db.refresh(task)
    return TaskOut.model_validate(task)


def delete_task(db: Session, task_id: str) -> None:
    task = get_task_or_404(db, task_id)
    db.delete(task)
    db.commit()
    logger.info("Deleted task %s", task_id, extra={"task_id": task_id})
