from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.errors import failure_message
from app.core.deps import get_current_user, get_db
from app.db.models import User
from app.db.schemas import DeleteResult, Page, ProjectCreate, ProjectDetail, ProjectListItem, ProjectOut, ProjectPatch
from app.services import projects as project_service


router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=Page[ProjectListItem])
def list_projects(
    page: int = Query(1),
    limit: int = Query(20),
    status: str | None = Query(None),
    db: Session = Depends(get_db),
):
    with failure_message("Failed to fetch projects"):
        return project_service.list_projects(db, status=status, page=page, limit=limit)


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    with failure_message("Failed to create project"):
        return project_service.create_project(db, payload, current_user)


@router.get("/{project_id}", response_model=ProjectDetail)
def get_project(project_id: str, db: Session = Depends(get_db)):
    with failure_message("Failed to fetch project"):
        return project_service.get_project(db, project_id)


@router.patch("/{project_id}", response_model=ProjectOut)
def patch_project(
    project_id: str,
    payload: ProjectPatch,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    with failure_message("Failed to update project"):
        return project_service.update_project(db, project_id, payload)


@router.delete("/{project_id}", response_model=DeleteResult)
def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    with failure_message("Failed to delete project"):
        project_service.delete_project(db, project_id)
        return DeleteResult()
