from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import failure_message
from app.core.deps import get_db
from app.db.schemas import ActivityOut, Page
from app.services.activity import list_activity


router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("", response_model=Page[ActivityOut])
def get_activity_feed(
    project_id: str | None = Query(None, alias="projectId"),
    task_id: str | None = Query(None, alias="taskId"),
    user_id: str | None = Query(None, alias="userId"),
    page: int = Query(1),
    limit: int = Query(20),
    db: Session = Depends(get_db),
):
    with failure_message("Failed to fetch activity"):
        return list_activity(
            db,
            project_id=project_id,
            task_id=task_id,
            user_id=user_id,
            page=page,
            limit=limit,
        )
