"""Display helpers used when shaping API responses.

Everything here is pure: no database access, no clock reads unless the
caller omits ``now``.
"""

import math
from datetime import date, datetime, timezone
from typing import Any

STATUS_COLORS = {
    "todo": "bg-gray-100 text-gray-800",
    "in_progress": "bg-blue-100 text-blue-800",
    "review": "bg-yellow-100 text-yellow-800",
    "done": "bg-green-100 text-green-800",
}
DEFAULT_STATUS_COLOR = "bg-gray-100 text-gray-800"

PRIORITY_COLORS = {
    "low": "bg-gray-100 text-gray-600",
    "medium": "bg-blue-100 text-blue-600",
    "high": "bg-orange-100 text-orange-600",
    "urgent": "bg-red-100 text-red-600",
}
DEFAULT_PRIORITY_COLOR = "bg-gray-100 text-gray-600"

ACTIVITY_TEMPLATES = {
    "project_created": 'created project "{project}"',
    "project_updated": 'updated project "{project}"',
    "task_created": 'created task "{task}"',
    "task_assigned": 'was assigned to "{task}"',
    "task_completed": 'completed "{task}"',
    "task_updated": 'updated "{task}"',
    "comment_added": 'commented on "{task}"',
    "member_added": 'added {member} to "{project}"',
    "member_removed": 'removed {member} from "{project}"',
}


def _to_datetime(value: datetime | date | str) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        # the store hands back naive UTC timestamps
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_date(value: datetime | date | str) -> str:
    """Short absolute date, e.g. ``Mar 15, 2024``."""
    d = _to_datetime(value)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def format_relative_date(value: datetime | date | str, now: datetime | None = None) -> str:
    d = _to_datetime(value)
    now = _to_datetime(now) if now is not None else datetime.now(timezone.utc)

    diff_secs = math.floor((now - d).total_seconds())
    diff_mins = diff_secs // 60
    diff_hours = diff_mins // 60
    diff_days = diff_hours // 24

    if diff_secs < 60:
        return "just now"
    if diff_mins < 60:
        return f"{diff_mins}m ago"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    if diff_days < 7:
        return f"{diff_days}d ago"
    return format_date(d)


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def get_initials(name: str) -> str:
    return "".join(token[0] for token in name.split()[:2]).upper()


def get_status_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def get_priority_color(priority: str) -> str:
    return PRIORITY_COLORS.get(priority, DEFAULT_PRIORITY_COLOR)


def describe_activity(activity: Any) -> str:
    """Human readable phrase for an activity row.

    Names come from the related project/task and fall back to the copy kept
    in the activity metadata once the record is gone.
    """
    meta = activity.meta or {}
    project = getattr(activity, "project", None)
    task = getattr(activity, "task", None)
    project_name = project.name if project is not None else meta.get("projectName")
    task_title = task.title if task is not None else meta.get("taskTitle")
    member_name = meta.get("memberName")

    template = ACTIVITY_TEMPLATES.get(activity.type)
    if template is None:
        return "performed an action"
    return template.format(project=project_name, task=task_title, member=member_name)
