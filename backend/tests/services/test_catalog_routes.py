"""Catalog Routes — verifies natural-key upsert and bulk import over HTTP.

Invariants:
    - Repeating a PUT returns created=false, changed=false
    - Unknown attribute fields → 400
    - Import reports failures per item with 200
"""


async def test_upsert_is_idempotent(client):
    url = "/api/v1/catalog/technology/Rust"
    first = await client.put(url, json={"icon": "rust"})
    second = await client.put(url, json={"icon": "rust"})

    assert first.status_code == 200
    assert (first.json()["created"], first.json()["changed"]) == (True, True)
    assert (second.json()["created"], second.json()["changed"]) == (False, False)
    assert second.json()["entity"]["name"] == "Rust"


async def test_upsert_unknown_field_returns_400(client):
    res = await client.put("/api/v1/catalog/feature/Dark%20Mode", json={"colour": "black"})
    assert res.status_code == 400


async def test_upsert_unknown_kind_returns_400(client):
    res = await client.put("/api/v1/catalog/planet/Mars", json={})
    assert res.status_code == 400


async def test_upsert_faq_item_with_missing_category_returns_404(client):
    res = await client.put(
        "/api/v1/catalog/faq_item/1",
        json={"category": "missing", "question": "Q?", "answer": "A."},
    )
    assert res.status_code == 404


async def test_blog_slug_clash_returns_409(client):
    await client.put("/api/v1/catalog/blog_tag/Web%20Dev", json={})
    res = await client.put("/api/v1/catalog/blog_tag/web-dev", json={})
    assert res.status_code == 409


async def test_service_upsert_reports_skipped_technologies(client, seed_vocabulary):
    res = await client.put(
        "/api/v1/catalog/service/Consulting",
        json={"features": ["Audits"], "technologies": ["Go", "Elm"]},
    )
    assert res.status_code == 200
    assert res.json()["skipped"] == ["Elm"]


async def test_import_reports_per_item_failures(client):
    seed = {
        "categories": [{"id": "web", "label": "Web Apps"}],
        "technologies": [{"name": "React"}],
        "projects": [
            {"title": "Task Manager", "category_id": "web", "technologies": ["React"]},
            {"title": "Orphan", "category_id": "games"},
        ],
    }
    res = await client.post("/api/v1/catalog/import", json=seed)

    assert res.status_code == 200
    body = res.json()
    assert body["created"] == {"category": 1, "technology": 1, "project": 1}
    assert [f["natural_key"] for f in body["failures"]] == ["Orphan"]
    assert body["counts"] == [{"id": "web", "count": 1, "outcome": "updated", "error": None}]


async def test_blog_name_without_slug_characters_returns_400(client):
    for name in ("日本語", "中文"):
        res = await client.put(f"/api/v1/catalog/blog_tag/{name}", json={})
        assert res.status_code == 400
        assert res.json()["error"]["details"][0]["field"] == "path.natural_key"
