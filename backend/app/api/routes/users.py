from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.api.errors import failure_message
from app.core.deps import get_db
from app.db.models import User
from app.db.schemas import UserOut


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def list_users(
    search: str | None = Query(None),
    limit: int = Query(50),
    db: Session = Depends(get_db),
):
    with failure_message("Failed to fetch users"):
        query = db.query(User)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        return query.order_by(User.name.asc()).limit(limit).all()
