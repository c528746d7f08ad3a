"""Project Reconciler — verifies project writes with links and owned sub-records."""

import pytest
from sqlalchemy import func, select

from app.core.errors import DuplicateKeyError, ResourceNotFoundError
from app.models.category import Category
from app.models.project import Project, ProjectImage
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services.project_reconciler import ProjectReconciler


def _seed(**overrides) -> ProjectCreate:
    payload = {
        "title": "Task Manager",
        "category_id": "web",
        "technologies": ["React", "Go"],
        "features": ["Offline Mode"],
        "metrics": {"users": "10k"},
        "links": {"github": "https://github.com/x/y", "case": "/case/task"},
        "images": [{"url": "/a.png"}, {"url": "/b.png", "type": "MOCKUP"}],
    }
    payload.update(overrides)
    return ProjectCreate.model_validate(payload)


async def test_create_derives_slug_and_writes_relations(test_db, seed_vocabulary):
    project, skipped = await ProjectReconciler(test_db).create(_seed())
    await test_db.commit()

    assert project.slug == "task-manager"
    assert skipped == []
    assert sorted(project.technologies) == ["Go", "React"]
    assert project.features == ["Offline Mode"]
    assert project.metrics.users == "10k"
    assert project.links.case_study == "/case/task"
    assert [(i.url, i.order, i.image_type) for i in project.images] == [
        ("/a.png", 0, "SCREENSHOT"), ("/b.png", 1, "MOCKUP"),
    ]


async def test_create_reports_unknown_technologies(test_db, seed_vocabulary):
    project, skipped = await ProjectReconciler(test_db).create(
        _seed(technologies=["React", "Cobol"]),
    )
    assert skipped == ["Cobol"]
    assert project.technologies == ["React"]


async def test_create_duplicate_slug(test_db, seed_vocabulary):
    reconciler = ProjectReconciler(test_db)
    await reconciler.create(_seed())
    await test_db.commit()

    with pytest.raises(DuplicateKeyError):
        await reconciler.create(_seed(title="  Task   Manager "))


async def test_create_missing_category(test_db, seed_vocabulary):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await ProjectReconciler(test_db).create(_seed(category_id="games"))
    assert exc_info.value.resource_type == "Category"


async def test_create_does_not_touch_category_count(test_db, seed_vocabulary):
    await ProjectReconciler(test_db).create(_seed())
    await test_db.commit()
    count = (await test_db.execute(
        select(Category.count).where(Category.id == "web"),
    )).scalar_one()
    assert count == 0


async def test_update_is_partial_and_keeps_slug(test_db, seed_vocabulary):
    reconciler = ProjectReconciler(test_db)
    project, _ = await reconciler.create(_seed())
    await test_db.commit()

    updated, skipped = await reconciler.update(
        project.id, ProjectUpdate(title="Renamed", technologies=["Vue"]),
    )
    await test_db.commit()

    assert updated.slug == "task-manager"
    assert updated.title == "Renamed"
    assert updated.technologies == ["Vue"]
    assert updated.features == ["Offline Mode"]
    assert len(updated.images) == 2


async def test_update_to_missing_category(test_db, seed_vocabulary):
    reconciler = ProjectReconciler(test_db)
    project, _ = await reconciler.create(_seed())
    await test_db.commit()

    with pytest.raises(ResourceNotFoundError):
        await reconciler.update(project.id, ProjectUpdate(category_id="games"))


async def test_upsert_twice_is_stable(test_db, seed_vocabulary):
    reconciler = ProjectReconciler(test_db)
    first, _ = await reconciler.upsert(_seed())
    await test_db.commit()
    second, _ = await reconciler.upsert(_seed(subtitle="v2"))
    await test_db.commit()

    assert first.created
    assert not second.created
    assert second.entity.subtitle == "v2"
    projects = (await test_db.execute(select(func.count()).select_from(Project))).scalar_one()
    images = (await test_db.execute(select(func.count()).select_from(ProjectImage))).scalar_one()
    assert (projects, images) == (1, 2)


async def test_delete_removes_project(test_db, seed_vocabulary):
    reconciler = ProjectReconciler(test_db)
    project, _ = await reconciler.create(_seed())
    await test_db.commit()

    await reconciler.delete(project.id)
    await test_db.commit()

    remaining = (await test_db.execute(select(func.count()).select_from(Project))).scalar_one()
    assert remaining == 0


async def test_delete_missing_project(test_db):
    with pytest.raises(ResourceNotFoundError):
        await ProjectReconciler(test_db).delete(404)
