def seed_activity(env):
    headers = env.headers(env.alice_id)
    task = env.client.post(
        "/api/tasks",
        headers=headers,
        json={"projectId": env.project_id, "title": "Ship it", "assigneeId": env.bob_id},
    ).json()
    env.client.post("/api/projects", headers=headers, json={"name": "Side Quest"})
    env.client.patch(f"/api/tasks/{task['id']}", headers=env.headers(env.bob_id), json={"status": "done"})
    return task


def test_activity_feed_is_newest_first_with_descriptions(env):
    seed_activity(env)

    response = env.client.get("/api/activity")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 4, "totalPages": 1}

    newest = body["data"][0]
    assert newest["type"] == "task_completed"
    assert newest["description"] == 'completed "Ship it"'
    assert newest["user"]["name"] == "Bob Martinez"
    assert newest["task"]["title"] == "Ship it"
    assert newest["project"]["name"] == "Seed Project"

    descriptions = {a["type"]: a["description"] for a in body["data"]}
    assert descriptions["project_created"] == 'created project "Side Quest"'
    assert descriptions["task_created"] == 'created task "Ship it"'
    assert descriptions["task_assigned"] == 'was assigned to "Ship it"'


def test_activity_filters(env):
    task = seed_activity(env)

    by_task = env.client.get("/api/activity", params={"taskId": task["id"]}).json()
    assert {a["type"] for a in by_task["data"]} == {"task_created", "task_assigned", "task_completed"}

    by_user = env.client.get("/api/activity", params={"userId": env.bob_id}).json()
    assert {a["type"] for a in by_user["data"]} == {"task_assigned", "task_completed"}

    by_both = env.client.get("/api/activity", params={"userId": env.bob_id, "taskId": task["id"], "limit": 1}).json()
    assert by_both["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}
    assert len(by_both["data"]) == 1


def test_activity_survives_task_deletion(env):
    task = seed_activity(env)
    env.client.delete(f"/api/tasks/{task['id']}", headers=env.headers(env.alice_id))

    feed = env.client.get("/api/activity", params={"userId": env.bob_id}).json()["data"]
    completed = next(a for a in feed if a["type"] == "task_completed")
    assert completed["task"] is None
    assert completed["taskId"] is None
    assert completed["description"] == 'completed "Ship it"'
