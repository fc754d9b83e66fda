def test_list_users_sorted_by_name(env):
    response = env.client.get("/api/users")
    assert response.status_code == 200
    users = response.json()
    assert [u["name"] for u in users] == ["Alice Chen", "Bob Martinez", "Carol Williams"]
    assert set(users[0]) == {"id", "name", "email", "avatarUrl", "role"}
    assert users[0]["role"] == "admin"


def test_search_matches_name_or_email_case_insensitively(env):
    by_name = env.client.get("/api/users", params={"search": "martinez"}).json()
    assert [u["name"] for u in by_name] == ["Bob Martinez"]

    by_email = env.client.get("/api/users", params={"search": "CAROL@"}).json()
    assert [u["name"] for u in by_email] == ["Carol Williams"]

    limited = env.client.get("/api/users", params={"search": "flowboard", "limit": 2}).json()
    assert len(limited) == 2


def test_me_returns_caller(env):
    response = env.client.get("/api/auth/me", headers=env.headers(env.carol_id))
    assert response.status_code == 200
    assert response.json()["email"] == "carol@flowboard.test"

    assert env.client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401
    assert env.client.get("/api/auth/me", headers=env.headers("unknown-user")).status_code == 401
