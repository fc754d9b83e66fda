import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import ResourceNotFoundError
from app.db.models import TASK_STATUSES, Project, ProjectMember, Task, User
from app.db.schemas import (
    BoardOut,
    Page,
    ProjectCounts,
    ProjectCreate,
    ProjectDetail,
    ProjectListItem,
    ProjectMemberOut,
    ProjectOut,
    ProjectPatch,
    TaskOut,
    UserContact,
)
from app.services.activity import record_activity
from app.services.listing import build_filters, paginate

logger = logging.getLogger(__name__)


def _task_count():
    return select(func.count(Task.id)).where(Task.project_id == Project.id).correlate(Project).scalar_subquery()


def _member_count():
    return (
        select(func.count(ProjectMember.id))
        .where(ProjectMember.project_id == Project.id)
        .correlate(Project)
        .scalar_subquery()
    )


def get_project_or_404(db: Session, project_id: str) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise ResourceNotFoundError("Project", project_id)
    return project


def list_projects(db: Session, *, status: str | None = None, page: int = 1, limit: int = 20) -> Page[ProjectListItem]:
    query = (
        db.query(Project, _task_count().label("task_count"), _member_count().label("member_count"))
        .filter_by(**build_filters(status=status))
        .options(selectinload(Project.owner))
        .order_by(Project.updated_at.desc())
    )
    rows, pagination = paginate(query, page, limit)
    data = [
        ProjectListItem(
            **ProjectOut.model_validate(project).model_dump(),
            counts=ProjectCounts(tasks=task_count, members=member_count),
        )
        for project, task_count, member_count in rows
    ]
    return Page[ProjectListItem](data=data, pagination=pagination)


def get_project(db: Session, project_id: str) -> ProjectDetail:
    project = (
        db.query(Project)
        .options(
            selectinload(Project.owner),
            selectinload(Project.members).selectinload(ProjectMember.user),
        )
        .filter(Project.id == project_id)
        .first()
    )
    if not project:
        raise ResourceNotFoundError("Project", project_id)

    task_count = db.query(func.count(Task.id)).filter(Task.project_id == project.id).scalar()
    base = ProjectOut.model_validate(project).model_dump(exclude={"owner"})
    return ProjectDetail(
        **base,
        owner=UserContact.model_validate(project.owner),
        members=[ProjectMemberOut.model_validate(member) for member in project.members],
        counts=ProjectCounts(tasks=task_count, members=len(project.members)),
    )


def create_project(db: Session, payload: ProjectCreate, caller: User) -> ProjectOut:
    project = Project(
        name=payload.name,
        description=payload.description,
        due_date=payload.due_date,
        owner_id=caller.id,
    )
    db.add(project)
    db.flush()

    record_activity(db, "project_created", caller.id, project_id=project.id, project_name=project.name)

    db.commit()
    db.refresh(project)
    logger.info("Created project %s", project.id, extra={"project_id": project.id, "user_id": caller.id})
    return ProjectOut.model_validate(project)


def update_project(db: Session, project_id: str, payload: ProjectPatch) -> ProjectOut:
    project = get_project_or_404(db, project_id)

    patch_data = payload.model_dump(exclude_unset=True)
    if not patch_data:
        return ProjectOut.model_validate(project)

    for key, value in patch_data.items():
        setattr(project, key, value)

    db.commit()
    db.refresh(project)
    return ProjectOut.model_validate(project)


def delete_project(db: Session, project_id: str) -> None:
    project = get_project_or_404(db, project_id)
    # tasks, members and comments go with it through the foreign keys
    db.delete(project)
    db.commit()
    logger.info("Deleted project %s", project_id, extra={"project_id": project_id})


def partition_by_status(tasks: list) -> dict[str, list]:
    columns = {status: [] for status in TASK_STATUSES}
    for task in sorted(tasks, key=lambda item: item.position):
        columns.setdefault(task.status, []).append(task)
    return columns


def get_board(db: Session, project_id: str) -> BoardOut:
    get_project_or_404(db, project_id)

    tasks = (
        db.query(Task)
        .options(selectinload(Task.assignee), selectinload(Task.creator))
        .filter(Task.project_id == project_id)
        .all()
    )
    columns = {
        status: [TaskOut.model_validate(task) for task in column]
        for status, column in partition_by_status(tasks).items()
    }
    return BoardOut(project_id=project_id, columns=columns)
