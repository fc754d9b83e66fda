from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.errors import failure_message
from app.core.deps import get_db
from app.db.schemas import BoardOut
from app.services.projects import get_board as build_board


router = APIRouter(prefix="/projects", tags=["board"])


@router.get("/{project_id}/board", response_model=BoardOut)
def get_board(project_id: str, db: Session = Depends(get_db)):
    with failure_message("Failed to fetch board"):
        return build_board(db, project_id)
