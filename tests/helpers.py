PASSWORD = "secret123"


def register(client, username="alice", email=None, password=PASSWORD, **extra):
    body = {
        "firstName": extra.get("firstName", "Alice"),
        "lastName": extra.get("lastName", "Liddell"),
        "username": username,
        "emailAddress": email or f"{username}@example.com",
        "password": password,
    }
    return client.post("/api/auth/register", json=body)


def login(client, identifier="alice", password=PASSWORD):
    return client.post("/api/auth/login", json={"identifier": identifier, "password": password})


def auth_headers(client, username="alice"):
    assert register(client, username=username).status_code == 201
    res = login(client, identifier=username)
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}


def create_task(client, headers, title="T1", description="first task", **extra):
    res = client.post(
        "/api/tasks",
        json={"title": title, "description": description, **extra},
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()["task"]


def titles(client, headers, status):
    res = client.get("/api/tasks", params={"status": status}, headers=headers)
    assert res.status_code == 200, res.text
    return [t["title"] for t in res.json()["tasks"]]
