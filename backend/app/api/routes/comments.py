from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import failure_message
from app.core.deps import get_current_user, get_db
from app.core.errors import MissingParameterError
from app.db.models import User
from app.db.schemas import CommentCreate, CommentOut, CommentThread
from app.services import comments as comment_service


router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("", response_model=list[CommentThread])
def list_comments(
    task_id: str | None = Query(None, alias="taskId"),
    db: Session = Depends(get_db),
):
    if not task_id:
        raise MissingParameterError("taskId")
    with failure_message("Failed to fetch comments"):
        return comment_service.list_comments(db, task_id)


@router.post("", response_model=CommentOut, status_code=201)
def create_comment(
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    with failure_message("Failed to create comment"):
        return comment_service.create_comment(db, payload, current_user)
