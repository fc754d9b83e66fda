import logging

from pydantic import TypeAdapter
from sqlalchemy.orm import Session, selectinload

from app.core.formatting import describe_activity
from app.db.models import Activity
from app.db.schemas import ActivityMeta, ActivityOut, Page, ProjectBrief, TaskBrief, UserBrief
from app.services.listing import build_filters, paginate

logger = logging.getLogger(__name__)

activity_meta_adapter = TypeAdapter(ActivityMeta)


def record_activity(
    db: Session,
    activity_type: str,
    user_id: str,
    *,
    project_id: str | None = None,
    task_id: str | None = None,
    **meta,
) -> Activity:
    """Queue an activity row on the caller's session.

    The row is committed together with the mutation that caused it.
    """
    parsed = activity_meta_adapter.validate_python({"type": activity_type, **meta})
    activity = Activity(
        type=activity_type,
        project_id=project_id,
        task_id=task_id,
        user_id=user_id,
        meta=parsed.model_dump(by_alias=True, exclude={"type"}),
    )
    db.add(activity)
    logger.info(
        "Recorded %s activity",
        activity_type,
        extra={"activity_type": activity_type, "user_id": user_id, "project_id": project_id, "task_id": task_id},
    )
    return activity


def to_activity_out(activity: Activity) -> ActivityOut:
    return ActivityOut(
        id=activity.id,
        type=activity.type,
        project_id=activity.project_id,
        task_id=activity.task_id,
        user_id=activity.user_id,
        metadata=activity.meta,
        description=describe_activity(activity),
        user=UserBrief.model_validate(activity.user),
        project=ProjectBrief.model_validate(activity.project) if activity.project else None,
        task=TaskBrief.model_validate(activity.task) if activity.task else None,
        created_at=activity.created_at,
    )


def list_activity(
    db: Session,
    *,
    project_id: str | None = None,
    task_id: str | None = None,
    user_id: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> Page[ActivityOut]:
    filters = build_filters(project_id=project_id, task_id=task_id, user_id=user_id)
    query = (
        db.query(Activity)
        .filter_by(**filters)
        .options(selectinload(Activity.user), selectinload(Activity.project), selectinload(Activity.task))
        .order_by(Activity.created_at.desc(), Activity.id.desc())
    )
    activities, pagination = paginate(query, page, limit)
    return Page[ActivityOut](data=[to_activity_out(a) for a in activities], pagination=pagination)
