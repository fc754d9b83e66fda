from datetime import datetime
from typing import Annotated, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel


Identifier = Annotated[str, StringConstraints(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")]


def _datetime_string(value):
    # epoch numbers and bare dates are not accepted as due dates
    if not isinstance(value, str) or "T" not in value:
        raise ValueError("must be an ISO-8601 datetime string")
    return value


DueDate = Annotated[datetime, BeforeValidator(_datetime_string)]

UserRole = Literal["admin", "member"]
ProjectStatus = Literal["active", "archived", "completed"]
TaskStatus = Literal["todo", "in_progress", "review", "done"]
TaskPriority = Literal["low", "medium", "high", "urgent"]

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Inputs


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    due_date: DueDate | None = None


class ProjectPatch(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    due_date: DueDate | None = None
    status: ProjectStatus | None = None

    @field_validator("name", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class TaskCreate(CamelModel):
    project_id: Identifier
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    due_date: DueDate | None = None
    assignee_id: Identifier | None = None


class TaskPatch(CamelModel):
    # project_id is not declared: a task never moves between projects and the
    # field is dropped from incoming payloads.
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: DueDate | None = None
    assignee_id: Identifier | None = None
    position: int | None = Field(default=None, ge=0)

    @field_validator("title", "status", "priority", "position")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class CommentCreate(CamelModel):
    task_id: Identifier
    content: str = Field(min_length=1, max_length=5000)
    parent_id: Identifier | None = None


# Activity metadata, keyed by activity type


class ProjectEventMeta(CamelModel):
    type: Literal["project_created", "project_updated"]
    project_name: str


class TaskEventMeta(CamelModel):
    type: Literal["task_created", "task_updated", "task_completed", "comment_added"]
    task_title: str


class TaskAssignedMeta(CamelModel):
    type: Literal["task_assigned"]
    task_title: str
    assigned_by: str


class MemberEventMeta(CamelModel):
    type: Literal["member_added", "member_removed"]
    project_name: str
    member_name: str


ActivityMeta = Annotated[
    Union[ProjectEventMeta, TaskEventMeta, TaskAssignedMeta, MemberEventMeta],
    Field(discriminator="type"),
]


# Outputs


class UserBrief(CamelModel):
    id: str
    name: str
    avatar_url: str | None = None


class UserContact(UserBrief):
    email: str


class UserOut(UserContact):
    role: UserRole


class ProjectBrief(CamelModel):
    id: str
    name: str


class TaskBrief(CamelModel):
    id: str
    title: str


class LabelOut(CamelModel):
    id: str
    name: str
    color: str


class ProjectCounts(CamelModel):
    tasks: int = 0
    members: int = 0


class ProjectOut(CamelModel):
    id: str
    name: str
    description: str | None
    status: ProjectStatus
    due_date: datetime | None
    owner_id: str
    owner: UserBrief
    created_at: datetime
    updated_at: datetime


class ProjectListItem(ProjectOut):
    counts: ProjectCounts = Field(alias="_count")


class ProjectMemberOut(CamelModel):
    id: str
    role: str
    user: UserContact


class ProjectDetail(ProjectOut):
    owner: UserContact
    members: list[ProjectMemberOut]
    counts: ProjectCounts = Field(alias="_count")


class TaskOut(CamelModel):
    id: str
    project_id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    assignee_id: str | None
    creator_id: str
    position: int
    assignee: UserBrief | None
    creator: UserBrief
    created_at: datetime
    updated_at: datetime


class TaskCounts(CamelModel):
    comments: int = 0


class TaskListItem(TaskOut):
    labels: list[LabelOut]
    counts: TaskCounts = Field(alias="_count")


class CommentOut(CamelModel):
    id: str
    task_id: str
    author_id: str
    content: str
    parent_id: str | None
    author: UserBrief
    created_at: datetime
    updated_at: datetime


class CommentThread(CommentOut):
    replies: list[CommentOut]


class TaskDetail(TaskOut):
    project: ProjectBrief
    assignee: UserContact | None
    creator: UserContact
    labels: list[LabelOut]
    comments: list[CommentOut]


class ActivityOut(CamelModel):
    id: str
    type: str
    project_id: str | None
    task_id: str | None
    user_id: str
    metadata: dict | None
    description: str
    user: UserBrief
    project: ProjectBrief | None
    task: TaskBrief | None
    created_at: datetime


class BoardOut(CamelModel):
    project_id: str
    columns: dict[str, list[TaskOut]]


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class Page(CamelModel, Generic[T]):
    data: list[T]
    pagination: Pagination


class DeleteResult(CamelModel):
    success: bool = True
