import logging

from sqlalchemy.orm import Session, selectinload

from app.core.errors import InvalidInputError
from app.db.models import Comment, User
from app.db.schemas import CommentCreate, CommentOut, CommentThread
from app.services.activity import record_activity
from app.services.tasks import get_task_or_404

logger = logging.getLogger(__name__)


def list_comments(db: Session, task_id: str) -> list[CommentThread]:
    """Top-level comments of a task, each with its direct replies."""
    comments = (
        db.query(Comment)
        .options(
            selectinload(Comment.author),
            selectinload(Comment.replies).selectinload(Comment.author),
        )
        .filter(Comment.task_id == task_id, Comment.parent_id.is_(None))
        .order_by(Comment.created_at.asc())
        .all()
    )
    return [CommentThread.model_validate(comment) for comment in comments]


def _check_parent(db: Session, parent_id: str, task_id: str) -> None:
    parent = db.get(Comment, parent_id)
    if parent is None or parent.task_id != task_id:
        raise InvalidInputError("Parent comment does not belong to this task", "parentId")
    if parent.parent_id is not None:
        raise InvalidInputError("Replies cannot be nested more than one level", "parentId")


def create_comment(db: Session, payload: CommentCreate, caller: User) -> CommentOut:
    task = get_task_or_404(db, payload.task_id)
    if payload.parent_id:
        _check_parent(db, payload.parent_id, task.id)

    comment = Comment(
        task_id=task.id,
        author_id=caller.id,
        content=payload.content,
        parent_id=payload.parent_id,
    )
    db.add(comment)
    db.flush()

    record_activity(
        db,
        "comment_added",
        caller.id,
        project_id=task.project_id,
        task_id=task.id,
        task_title=task.title,
    )

    db.commit()
    db.refresh(comment)
    logger.info("Added comment %s", comment.id, extra={"task_id": task.id, "user_id": caller.id})
    return CommentOut.model_validate(comment)
