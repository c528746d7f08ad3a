"""Catalog Import — verifies seeding is idempotent and tolerant of bad items."""

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from app.models.blog import BlogCategory, BlogPost, BlogTag
from app.models.category import Category
from app.models.faq import FAQItem
from app.models.project import Project
from app.models.project_association import ProjectTechnology
from app.models.service import Service, ServiceFeature, ServiceTechnology
from app.schemas.catalog import CatalogSeed
from app.services.catalog_import import CatalogImporter

SEED = {
    "categories": [
        {"id": "web", "label": "Web Apps"},
        {"id": "mobile", "label": "Mobile Apps"},
    ],
    "technologies": [{"name": "React", "icon": "react"}, {"name": "Go"}],
    "features": ["Responsive Design"],
    "faq_categories": [{"id": "general", "name": "General", "icon": "help"}],
    "faq_items": [
        {"id": 1, "category": "general", "question": "Who?", "answer": "Me."},
        {"id": 2, "category": "pricing", "question": "How much?", "answer": "Ask."},
    ],
    "projects": [
        {
            "title": "Task Manager", "category_id": "web",
            "technologies": ["React", "Go", "Cobol"],
            "features": ["Responsive Design"],
        },
        {"title": "Orphan", "category_id": "games"},
    ],
}


async def _count(test_db, model):
    return (await test_db.execute(select(func.count()).select_from(model))).scalar_one()


async def test_import_lands_good_items_and_reports_bad_ones(test_db):
    report = await CatalogImporter(test_db).run(CatalogSeed.model_validate(SEED))

    assert report.created["category"] == 2
    assert report.created["project"] == 1
    assert report.skipped == {"task-manager": ["Cobol"]}
    assert sorted((f.kind, f.natural_key) for f in report.failures) == [
        ("faq_item", "2"), ("project", "Orphan"),
    ]
    assert await _count(test_db, FAQItem) == 1
    web = (await test_db.execute(select(Category.count).where(Category.id == "web"))).scalar_one()
    assert web == 1


async def test_rerun_converges(test_db):
    seed = CatalogSeed.model_validate(SEED)
    await CatalogImporter(test_db).run(seed)
    report = await CatalogImporter(test_db).run(seed)

    assert not report.created
    assert report.unchanged["category"] == 2
    assert report.unchanged["technology"] == 2
    assert await _count(test_db, Project) == 1
    assert await _count(test_db, ProjectTechnology) == 2
    assert [o.new_count for o in report.counts] == [0, 1]


TAXONOMY_SEED = {
    "technologies": [{"name": "React"}, {"name": "Go"}],
    "services": [
        {
            "title": "Web Development", "icon": "globe",
            "features": ["SSR", "SEO"], "technologies": ["React", "Cobol"],
        },
    ],
    "blog_categories": [{"name": "Web Development", "color": "blue"}],
    "blog_tags": [{"name": "FastAPI"}, {"name": "Async IO"}],
}


async def test_import_seeds_services_and_blog_taxonomy(test_db):
    report = await CatalogImporter(test_db).run(CatalogSeed.model_validate(TAXONOMY_SEED))

    assert report.created["service"] == 1
    assert report.created["blog_category"] == 1
    assert report.created["blog_tag"] == 2
    assert report.skipped == {"Web Development": ["Cobol"]}
    assert not report.failures
    assert [o.new_count for o in report.post_counts] == [0]

    tags = (await test_db.execute(select(BlogTag.slug).order_by(BlogTag.slug))).scalars()
    assert list(tags) == ["async-io", "fastapi"]
    linked = (await test_db.execute(select(ServiceTechnology.name))).scalars()
    assert list(linked) == ["React"]


async def test_rerun_of_services_and_blog_taxonomy_converges(test_db):
    seed = CatalogSeed.model_validate(TAXONOMY_SEED)
    await CatalogImporter(test_db).run(seed)

    category_id = (await test_db.execute(select(BlogCategory.id))).scalar_one()
    test_db.add_all([
        BlogPost(title="Live", slug="live", category_id=category_id, published=True),
        BlogPost(title="Draft", slug="draft", category_id=category_id, published=False),
    ])
    await test_db.commit()

    report = await CatalogImporter(test_db).run(seed)

    assert not report.created
    assert report.unchanged["service"] == 1
    assert report.unchanged["blog_category"] == 1
    assert report.unchanged["blog_tag"] == 2
    assert report.skipped == {"Web Development": ["Cobol"]}
    assert await _count(test_db, Service) == 1
    assert await _count(test_db, ServiceFeature) == 2
    assert await _count(test_db, ServiceTechnology) == 1
    assert await _count(test_db, BlogTag) == 2
    # Only published posts count
    assert [o.new_count for o in report.post_counts] == [1]


async def test_blog_name_without_slug_is_rejected_before_import():
    with pytest.raises(ValidationError):
        CatalogSeed.model_validate({"blog_tags": [{"name": "日本語"}]})
