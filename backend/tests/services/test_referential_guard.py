"""Referential Guard — verifies deletes are refused while dependents exist.

Invariants:
    - Refused delete reports the true live dependent count
    - Refused delete leaves the parent in place
    - Unreferenced parents are deleted
    - Technology dependents span projects and services
"""

import pytest
from sqlalchemy import select

from app.core.errors import DependentsExistError, ResourceNotFoundError
from app.models.category import Category
from app.models.faq import FAQCategory, FAQItem
from app.models.project import Project
from app.models.service import Service
from app.models.technology import Technology
from app.services.association_sync import (
    PROJECT_TECHNOLOGIES, SERVICE_TECHNOLOGIES, AssociationSynchronizer,
)
from app.services.referential_guard import (
    CATEGORY_GUARD, FAQ_CATEGORY_GUARD, TECHNOLOGY_GUARD, ReferentialGuard,
)


async def _category_ids(test_db):
    result = await test_db.execute(select(Category.id).order_by(Category.id))
    return list(result.scalars().all())


async def _technology_id(test_db, name):
    result = await test_db.execute(select(Technology.id).where(Technology.name == name))
    return result.scalar_one()


async def test_delete_refused_with_live_count(test_db, seed_vocabulary):
    test_db.add_all([
        Project(slug=f"p{i}", title=f"P{i}", category_id="web") for i in range(3)
    ])
    await test_db.commit()

    with pytest.raises(DependentsExistError) as exc_info:
        await ReferentialGuard(test_db).delete(CATEGORY_GUARD, "web")
    await test_db.rollback()

    assert exc_info.value.dependent_count == 3
    assert exc_info.value.dependent_type == "projects"
    assert "web" in await _category_ids(test_db)


async def test_unreferenced_parent_is_deleted(test_db, seed_vocabulary):
    await ReferentialGuard(test_db).delete(CATEGORY_GUARD, "mobile")
    await test_db.commit()
    assert await _category_ids(test_db) == ["web"]


async def test_delete_missing_parent_raises_not_found(test_db, seed_vocabulary):
    with pytest.raises(ResourceNotFoundError):
        await ReferentialGuard(test_db).delete(CATEGORY_GUARD, "games")


async def test_can_delete_reports_without_deleting(test_db, seed_vocabulary):
    test_db.add(Project(slug="a", title="A", category_id="web"))
    await test_db.commit()

    guard = ReferentialGuard(test_db)
    web = await guard.can_delete(CATEGORY_GUARD, "web")
    mobile = await guard.can_delete(CATEGORY_GUARD, "mobile")

    assert (web.allowed, web.dependent_count) == (False, 1)
    assert (mobile.allowed, mobile.dependent_count) == (True, 0)
    assert await _category_ids(test_db) == ["mobile", "web"]


async def test_technology_count_spans_projects_and_services(test_db, seed_vocabulary):
    project = Project(slug="a", title="A", category_id="web")
    service = Service(title="Consulting")
    test_db.add_all([project, service])
    await test_db.commit()

    sync = AssociationSynchronizer(test_db)
    await sync.sync(PROJECT_TECHNOLOGIES, project.id, ["Go"])
    await sync.sync(SERVICE_TECHNOLOGIES, service.id, ["Go"])
    await test_db.commit()
    go_id = await _technology_id(test_db, "Go")

    with pytest.raises(DependentsExistError) as exc_info:
        await ReferentialGuard(test_db).delete(TECHNOLOGY_GUARD, go_id)

    assert exc_info.value.dependent_count == 2
    assert exc_info.value.dependent_type == "projects and services"


async def test_faq_category_with_items_is_refused(test_db):
    test_db.add(FAQCategory(id="general", name="General", icon="help"))
    await test_db.flush()
    test_db.add(FAQItem(category="general", question="Q?", answer="A."))
    await test_db.commit()

    with pytest.raises(DependentsExistError) as exc_info:
        await ReferentialGuard(test_db).delete(FAQ_CATEGORY_GUARD, "general")
    assert exc_info.value.dependent_count == 1


async def test_foreign_key_is_second_line(test_db, seed_vocabulary, monkeypatch):
    test_db.add(Project(slug="a", title="A", category_id="web"))
    await test_db.commit()

    guard = ReferentialGuard(test_db)
    calls = []
    original = guard.count_dependents

    # First count misses the dependent, as a concurrent insert would on a lockless backend
    async def racing_count(spec, parent_id):
        calls.append(parent_id)
        if len(calls) == 1:
            return 0
        return await original(spec, parent_id)

    monkeypatch.setattr(guard, "count_dependents", racing_count)
    with pytest.raises(DependentsExistError) as exc_info:
        await guard.delete(CATEGORY_GUARD, "web")

    assert exc_info.value.dependent_count == 1
    assert "web" in await _category_ids(test_db)
