import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()

USER_ROLES = ("admin", "member")
PROJECT_STATUSES = ("active", "archived", "completed")
TASK_STATUSES = ("todo", "in_progress", "review", "done")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")
ACTIVITY_TYPES = (
    "project_created",
    "project_updated",
    "task_created",
    "task_updated",
    "task_assigned",
    "task_completed",
    "comment_added",
    "member_added",
    "member_removed",
)


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _in_check(column: str, values: tuple[str, ...], name: str) -> CheckConstraint:
    allowed = ", ".join(f"'{value}'" for value in values)
    return CheckConstraint(f"{column} IN ({allowed})", name=name)


class User(Base):
    __tablename__ = "Users"

    id = Column(String(64), primary_key=True, default=new_id)
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    avatar_url = Column(String)
    role = Column(String, nullable=False, default="member")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (_in_check("role", USER_ROLES, "ck_users_role"),)


class Project(Base):
    __tablename__ = "Projects"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    status = Column(String, nullable=False, default="active")
    due_date = Column(DateTime(timezone=True))
    owner_id = Column(String(64), ForeignKey("Users.id", onupdate="CASCADE", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (_in_check("status", PROJECT_STATUSES, "ck_projects_status"),)

    owner = relationship("User")
    tasks = relationship("Task", back_populates="project", passive_deletes=True)
    members = relationship("ProjectMember", back_populates="project", passive_deletes=True)


class ProjectMember(Base):
    __tablename__ = "ProjectMembers"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("Projects.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), ForeignKey("Users.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    role = Column(String, nullable=False, default="member")
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),)

    project = relationship("Project", back_populates="members")
    user = relationship("User")


class Task(Base):
    __tablename__ = "Tasks"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("Projects.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    status = Column(String, nullable=False, default="todo")
    priority = Column(String, nullable=False, default="medium")
    due_date = Column(DateTime(timezone=True))
    assignee_id = Column(String(64), ForeignKey("Users.id", onupdate="CASCADE", ondelete="SET NULL"))
    creator_id = Column(String(64), ForeignKey("Users.id", onupdate="CASCADE", ondelete="RESTRICT"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        _in_check("status", TASK_STATUSES, "ck_tasks_status"),
        _in_check("priority", TASK_PRIORITIES, "ck_tasks_priority"),
    )

    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assignee_id])
    creator = relationship("User", foreign_keys=[creator_id])
    labels = relationship("TaskLabel", back_populates="task", passive_deletes=True)
    comments = relationship(
        "Comment",
        back_populates="task",
        passive_deletes=True,
        order_by="Comment.created_at",
    )


class Label(Base):
    __tablename__ = "Labels"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True)
    color = Column(String(7), nullable=False)


class TaskLabel(Base):
    __tablename__ = "TaskLabels"

    task_id = Column(String(64), ForeignKey("Tasks.id", onupdate="CASCADE", ondelete="CASCADE"), primary_key=True)
    label_id = Column(String(64), ForeignKey("Labels.id", onupdate="CASCADE", ondelete="CASCADE"), primary_key=True)

    task = relationship("Task", back_populates="labels")
    label = relationship("Label")


class Comment(Base):
    __tablename__ = "Comments"

    id = Column(String(64), primary_key=True, default=new_id)
    task_id = Column(String(64), ForeignKey("Tasks.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    author_id = Column(String(64), ForeignKey("Users.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    parent_id = Column(String(64), ForeignKey("Comments.id", onupdate="CASCADE", ondelete="CASCADE"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    task = relationship("Task", back_populates="comments")
    author = relationship("User")
    parent = relationship("Comment", remote_side=[id], back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        passive_deletes=True,
        order_by="Comment.created_at",
    )


class Activity(Base):
    __tablename__ = "Activities"

    id = Column(String(64), primary_key=True, default=new_id)
    type = Column(String, nullable=False)
    project_id = Column(String(64), ForeignKey("Projects.id", onupdate="CASCADE", ondelete="SET NULL"))
    task_id = Column(String(64), ForeignKey("Tasks.id", onupdate="CASCADE", ondelete="SET NULL"))
    user_id = Column(String(64), ForeignKey("Users.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (_in_check("type", ACTIVITY_TYPES, "ck_activities_type"),)

    user = relationship("User")
    project = relationship("Project")
    task = relationship("Task")
