from app.db.models import Activity, Project, Task


def create_project(env, **overrides):
    payload = {"name": "Website Redesign"}
    payload.update(overrides)
    return env.client.post("/api/projects", headers=env.headers(env.alice_id), json=payload)


def test_create_project_without_token_is_rejected(env):
    response = env.client.post("/api/projects", json={"name": "Anonymous"})
    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


def test_create_project_records_activity(env):
    response = create_project(env, description="New marketing site", dueDate="2030-01-01T00:00:00Z")
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Website Redesign"
    assert body["status"] == "active"
    assert body["ownerId"] == env.alice_id
    assert body["owner"] == {"id": env.alice_id, "name": "Alice Chen", "avatarUrl": None}

    db = env.session_factory()
    activities = db.query(Activity).filter(Activity.project_id == body["id"]).all()
    db.close()
    assert len(activities) == 1
    assert activities[0].type == "project_created"
    assert activities[0].user_id == env.alice_id
    assert activities[0].task_id is None
    assert activities[0].meta == {"projectName": "Website Redesign"}


def test_create_project_with_invalid_name_fails_generically(env):
    response = create_project(env, name="")
    assert response.status_code == 500
    assert "error" in response.json()

    listing = env.client.get("/api/projects").json()
    assert listing["pagination"]["total"] == 1


def test_list_projects_envelope_and_counts(env):
    env.client.post(
        "/api/tasks",
        headers=env.headers(env.alice_id),
        json={"projectId": env.project_id, "title": "Counted"},
    )

    response = env.client.get("/api/projects")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}
    project = body["data"][0]
    assert project["id"] == env.project_id
    assert project["_count"] == {"tasks": 1, "members": 0}
    assert project["owner"]["name"] == "Alice Chen"


def test_list_projects_orders_by_last_update(env):
    first = create_project(env, name="First").json()
    second = create_project(env, name="Second").json()

    names = [p["name"] for p in env.client.get("/api/projects").json()["data"]]
    assert names[:2] == ["Second", "First"]

    env.client.patch(f"/api/projects/{first['id']}", headers=env.headers(env.alice_id), json={"description": "bump"})
    names = [p["name"] for p in env.client.get("/api/projects").json()["data"]]
    assert names[0] == "First"
    assert second["id"] != first["id"]


def test_list_projects_filters_and_pages(env):
    for index in range(3):
        created = create_project(env, name=f"Archived {index}").json()
        env.client.patch(
            f"/api/projects/{created['id']}",
            headers=env.headers(env.alice_id),
            json={"status": "archived"},
        )

    archived = env.client.get("/api/projects", params={"status": "archived", "limit": 2}).json()
    assert archived["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
    assert len(archived["data"]) == 2
    assert all(p["status"] == "archived" for p in archived["data"])

    second_page = env.client.get("/api/projects", params={"status": "archived", "limit": 2, "page": 2}).json()
    assert len(second_page["data"]) == 1

    unfiltered = env.client.get("/api/projects").json()
    assert unfiltered["pagination"]["total"] == 4


def test_get_project_detail(env):
    response = env.client.get(f"/api/projects/{env.project_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["owner"]["email"] == "alice@flowboard.test"
    assert body["members"] == []
    assert body["_count"]["tasks"] == 0


def test_get_missing_project_returns_404(env):
    response = env.client.get("/api/projects/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Project not found"}


def test_patch_project(env):
    response = env.client.patch(
        f"/api/projects/{env.project_id}",
        headers=env.headers(env.alice_id),
        json={"name": "Renamed", "status": "completed"},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["status"] == "completed"

    missing = env.client.patch("/api/projects/nope", headers=env.headers(env.alice_id), json={"name": "X"})
    assert missing.status_code == 404


def test_patch_project_rejects_null_name(env):
    response = env.client.patch(
        f"/api/projects/{env.project_id}",
        headers=env.headers(env.alice_id),
        json={"name": None},
    )
    assert response.status_code == 500
    assert env.client.get(f"/api/projects/{env.project_id}").json()["name"] == "Seed Project"


def test_delete_project_cascades_to_tasks(env):
    created = env.client.post(
        "/api/tasks",
        headers=env.headers(env.alice_id),
        json={"projectId": env.project_id, "title": "Doomed"},
    ).json()

    response = env.client.delete(f"/api/projects/{env.project_id}", headers=env.headers(env.alice_id))
    assert response.status_code == 200
    assert response.json() == {"success": True}

    db = env.session_factory()
    assert db.get(Task, created["id"]) is None
    # the activity log survives with its references cleared
    orphaned = db.query(Activity).filter(Activity.type == "task_created").one()
    assert orphaned.task_id is None
    assert orphaned.project_id is None
    db.close()

    assert env.client.get(f"/api/projects/{env.project_id}").status_code == 404
    assert env.client.delete(f"/api/projects/{env.project_id}", headers=env.headers(env.alice_id)).status_code == 404


def test_board_partitions_tasks_by_status(env):
    headers = env.headers(env.alice_id)
    for title, status in [("A", "todo"), ("B", "done"), ("C", "todo"), ("D", "review")]:
        env.client.post("/api/tasks", headers=headers, json={"projectId": env.project_id, "title": title, "status": status})

    response = env.client.get(f"/api/projects/{env.project_id}/board")
    assert response.status_code == 200
    columns = response.json()["columns"]
    assert list(columns) == ["todo", "in_progress", "review", "done"]
    assert [t["title"] for t in columns["todo"]] == ["A", "C"]
    assert columns["in_progress"] == []
    assert [t["title"] for t in columns["review"]] == ["D"]
    assert [t["title"] for t in columns["done"]] == ["B"]

    assert env.client.get("/api/projects/missing/board").status_code == 404


def test_create_project_with_date_only_due_date_fails(env):
    response = create_project(env, dueDate="2030-01-01")
    assert response.status_code == 500
    assert response.json() == {"error": "Invalid request data"}


def test_failed_activity_write_rolls_back_project(env, monkeypatch):
    def broken_record_activity(*args, **kwargs):
        raise RuntimeError("activity table unavailable")

    monkeypatch.setattr("app.services.projects.record_activity", broken_record_activity)

    response = create_project(env, name="Never Saved")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create project"}

    db = env.session_factory()
    assert db.query(Project).filter(Project.name == "Never Saved").count() == 0
    assert db.query(Activity).count() == 0
    db.close()
