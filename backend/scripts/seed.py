from sqlalchemy.orm import Session

from app.db.models import Activity, Label, Project, ProjectMember, Task, User
from app.db.session import SessionLocal, init_db
from app.services.activity import record_activity


LABELS = [
    ("bug", "Bug", "#ef4444"),
    ("feature", "Feature", "#22c55e"),
    ("enhancement", "Enhancement", "#3b82f6"),
    ("docs", "Documentation", "#a855f7"),
]

TASKS = [
    ("task-1", "Set up project structure", "Initialize the web project and tooling", "done", "high", "alice"),
    ("task-2", "Implement user authentication", "Add login and registration", "done", "high", "bob"),
    ("task-3", "Create project CRUD API", "Endpoints for creating, reading, updating and deleting projects", "done", "medium", "carol"),
    ("task-4", "Create task CRUD API", "Endpoints for task management within projects", "done", "medium", "alice"),
    ("task-5", "Build project dashboard UI", "Project overview and recent activity", "in_progress", "high", "bob"),
    ("task-6", "Implement task board (Kanban)", "Drag-and-drop board for task management", "in_progress", "medium", "carol"),
    ("task-7", "Add comment system", "Allow users to comment on tasks with threaded replies", "todo", "medium", None),
    ("task-8", "Implement real-time notifications", "Notify on task assignments and updates", "todo", "high", None),
]


def upsert_user(db: Session, email: str, name: str, role: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(email=email, name=name, role=role)
    db.add(user)
    db.flush()
    return user


def ensure_label(db: Session, label_id: str, name: str, color: str) -> None:
    if db.get(Label, label_id) is None:
        db.add(Label(id=label_id, name=name, color=color))


def ensure_member(db: Session, project_id: str, user_id: str) -> None:
    exists = (
        db.query(ProjectMember.id)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )
    if not exists:
        db.add(ProjectMember(project_id=project_id, user_id=user_id, role="member"))


def ensure_task(db: Session, project_id: str, creator_id: str, position: int, task_id: str, title: str,
                description: str, status: str, priority: str, assignee_id: str | None) -> None:
    if db.get(Task, task_id) is not None:
        return
    db.add(
        Task(
            id=task_id,
            project_id=project_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            assignee_id=assignee_id,
            creator_id=creator_id,
            position=position,
        )
    )


def main() -> None:
    init_db()
    db = SessionLocal()
    try:
        users = {
            "alice": upsert_user(db, "alice@techflow.io", "Alice Chen", "admin"),
            "bob": upsert_user(db, "bob@techflow.io", "Bob Martinez", "member"),
            "carol": upsert_user(db, "carol@techflow.io", "Carol Williams", "member"),
        }
        for label in LABELS:
            ensure_label(db, *label)

        project = db.get(Project, "flowboard-main")
        if project is None:
            project = Project(
                id="flowboard-main",
                name="FlowBoard Main",
                description="The main FlowBoard project management application",
                status="active",
                owner_id=users["alice"].id,
            )
            db.add(project)
            db.flush()

        ensure_member(db, project.id, users["bob"].id)
        ensure_member(db, project.id, users["carol"].id)

        for position, (task_id, title, description, status, priority, assignee) in enumerate(TASKS):
            assignee_id = users[assignee].id if assignee else None
            ensure_task(db, project.id, users["alice"].id, position, task_id, title, description, status, priority, assignee_id)

        has_activity = db.query(Activity.id).filter(Activity.project_id == project.id).first()
        if not has_activity:
            record_activity(db, "project_created", users["alice"].id, project_id=project.id, project_name=project.name)

        db.commit()
    finally:
        db.close()
    print("Seed complete")


if __name__ == "__main__":
    main()
