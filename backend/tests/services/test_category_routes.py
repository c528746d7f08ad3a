"""Category Routes — verifies status mapping and stale-until-recalculated counts.

Invariants:
    - Duplicate id → 409 DUPLICATE_KEY; missing id → 404
    - DELETE with projects → 409 with dependent_count; empty → 204
    - count changes only through POST /recalculate
"""

import pytest


@pytest.fixture
async def web_with_projects(client, seed_vocabulary):
    for title in ("Alpha", "Beta"):
        res = await client.post(
            "/api/v1/projects", json={"title": title, "category_id": "web"},
        )
        assert res.status_code == 201
    return client


async def test_create_category_returns_201(client):
    """POST /categories creates a category with count 0."""
    res = await client.post("/api/v1/categories", json={"id": "games", "label": "Games"})
    assert res.status_code == 201
    assert res.json()["count"] == 0


async def test_create_duplicate_category_returns_409(client, seed_vocabulary):
    res = await client.post("/api/v1/categories", json={"id": "web", "label": "Web"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_KEY"


async def test_invalid_category_id_returns_400(client):
    """Ids must be slugs."""
    res = await client.post("/api/v1/categories", json={"id": "Not A Slug", "label": "x"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_get_missing_category_returns_404(client):
    res = await client.get("/api/v1/categories/nope")
    assert res.status_code == 404


async def test_count_is_stale_until_recalculated(web_with_projects):
    """Project writes leave count alone; the live project_count moves."""
    client = web_with_projects

    body = (await client.get("/api/v1/categories/web")).json()
    assert (body["count"], body["project_count"]) == (0, 2)

    res = await client.post("/api/v1/categories/recalculate")
    assert res.status_code == 200
    outcomes = {o["id"]: o for o in res.json()}
    assert outcomes["web"]["count"] == 2
    assert outcomes["web"]["outcome"] == "updated"
    assert outcomes["mobile"]["outcome"] == "unchanged"

    assert (await client.get("/api/v1/categories/web")).json()["count"] == 2


async def test_delete_category_with_projects_returns_409(web_with_projects):
    client = web_with_projects
    res = await client.delete("/api/v1/categories/web")

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "DEPENDENTS_EXIST"
    assert error["dependent_count"] == 2
    assert (await client.get("/api/v1/categories/web")).status_code == 200


async def test_delete_empty_category_returns_204(client, seed_vocabulary):
    res = await client.delete("/api/v1/categories/mobile")
    assert res.status_code == 204
    assert (await client.get("/api/v1/categories/mobile")).status_code == 404


async def test_recalculate_one_missing_returns_404(client):
    res = await client.post("/api/v1/categories/nope/recalculate")
    assert res.status_code == 404


async def test_update_category_label(client, seed_vocabulary):
    res = await client.put("/api/v1/categories/web", json={"label": "Websites"})
    assert res.status_code == 200
    assert res.json()["label"] == "Websites"
