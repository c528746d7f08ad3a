"""Project Routes — verifies project writes, partial links and lookups."""


async def _create(client, **payload):
    body = {"title": "Task Manager", "category_id": "web", **payload}
    return await client.post("/api/v1/projects", json=body)


async def test_create_project_returns_201_with_slug(client, seed_vocabulary):
    res = await _create(client, technologies=["React"], links={"case": "/case"})
    assert res.status_code == 201
    project = res.json()["project"]
    assert project["slug"] == "task-manager"
    assert project["technologies"] == ["React"]
    assert project["links"]["case"] == "/case"


async def test_unknown_technology_is_reported_not_failed(client, seed_vocabulary):
    """Unresolvable names are skipped, the write still succeeds."""
    res = await _create(client, technologies=["React", "NonexistentTech"])
    assert res.status_code == 201
    assert res.json()["skipped"] == ["NonexistentTech"]


async def test_missing_category_returns_404(client, seed_vocabulary):
    res = await _create(client, category_id="games")
    assert res.status_code == 404


async def test_duplicate_title_returns_409(client, seed_vocabulary):
    await _create(client)
    res = await _create(client, title="task manager")
    assert res.status_code == 409


async def test_get_by_slug_and_id(client, seed_vocabulary):
    project_id = (await _create(client)).json()["project"]["id"]

    by_slug = await client.get("/api/v1/projects/slug/task-manager")
    by_id = await client.get(f"/api/v1/projects/{project_id}")

    assert by_slug.json()["id"] == project_id
    assert by_id.json()["slug"] == "task-manager"


async def test_list_filters_by_category(client, seed_vocabulary):
    await _create(client)
    await _create(client, title="Pocket", category_id="mobile")

    res = await client.get("/api/v1/projects", params={"category": "mobile"})
    body = res.json()
    assert body["total"] == 1
    assert body["items"][0]["slug"] == "pocket"


async def test_replace_associations(client, seed_vocabulary):
    """PUT /associations makes the links exactly the given names."""
    project_id = (await _create(client, technologies=["React", "Vue"])).json()["project"]["id"]

    res = await client.put(
        f"/api/v1/projects/{project_id}/associations",
        json={"technologies": ["Go", "NonexistentTech"], "features": []},
    )
    assert res.status_code == 200
    assert res.json()["technologies"] == ["Go"]
    assert res.json()["skipped"] == ["NonexistentTech"]

    project = (await client.get(f"/api/v1/projects/{project_id}")).json()
    assert project["technologies"] == ["Go"]
    assert project["features"] == []


async def test_associations_for_missing_project_return_404(client, seed_vocabulary):
    res = await client.put(
        "/api/v1/projects/404/associations", json={"technologies": ["Go"]},
    )
    assert res.status_code == 404


async def test_delete_project(client, seed_vocabulary):
    project_id = (await _create(client)).json()["project"]["id"]
    assert (await client.delete(f"/api/v1/projects/{project_id}")).status_code == 204
    assert (await client.get(f"/api/v1/projects/{project_id}")).status_code == 404


async def test_update_rejects_null_for_required_column(client, seed_vocabulary):
    """A null title or status is a 400, never a duplicate key."""
    project_id = (await _create(client)).json()["project"]["id"]

    for field in ("title", "status"):
        res = await client.put(f"/api/v1/projects/{project_id}", json={field: None})
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "VALIDATION_ERROR"

    project = (await client.get(f"/api/v1/projects/{project_id}")).json()
    assert project["title"] == "Task Manager"
    assert project["status"] == "DEVELOPMENT"


async def test_update_can_clear_optional_column(client, seed_vocabulary):
    project_id = (await _create(client, image="/cover.png")).json()["project"]["id"]

    res = await client.put(f"/api/v1/projects/{project_id}", json={"image": None})
    assert res.status_code == 200
    assert res.json()["project"]["image"] is None
    assert res.json()["project"]["title"] == "Task Manager"


async def test_title_without_slug_characters_returns_400(client, seed_vocabulary):
    for title in ("日本語", "中文", "!!!"):
        res = await _create(client, title=title)
        assert res.status_code == 400

    listing = (await client.get("/api/v1/projects")).json()
    assert listing["total"] == 0
