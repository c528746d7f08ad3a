"""Upsert Reconciler — verifies idempotent upserts and duplicate-key reporting.

Invariants:
    - upsert twice with the same attributes leaves one row, second call unchanged
    - create on an existing key → DuplicateKeyError
    - Unique collisions at flush → DuplicateKeyError, not IntegrityError
    - Other constraint failures (NOT NULL, FK) → DatabaseError, never a duplicate
    - FAQ items must reference an existing FAQ category
"""

from types import SimpleNamespace

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.domain_types import EntityKind
from app.core.errors import DatabaseError, DuplicateKeyError, ResourceNotFoundError
from app.infrastructure.database import integrity_error_for, is_unique_violation
from app.models.blog import BlogCategory
from app.models.category import Category
from app.models.faq import FAQCategory
from app.models.technology import Technology
from app.services.upsert_reconciler import UpsertReconciler


async def _row_count(test_db, model):
    result = await test_db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def test_upsert_creates_then_is_idempotent(test_db):
    reconciler = UpsertReconciler(test_db)
    first = await reconciler.upsert(EntityKind.CATEGORY, "web", {"label": "Web Apps"})
    await test_db.commit()
    second = await reconciler.upsert(EntityKind.CATEGORY, "web", {"label": "Web Apps"})
    await test_db.commit()

    assert first.created and first.changed
    assert not second.created
    assert not second.changed
    assert await _row_count(test_db, Category) == 1


async def test_upsert_updates_changed_attributes(test_db):
    reconciler = UpsertReconciler(test_db)
    await reconciler.upsert(EntityKind.TECHNOLOGY, "React", {"icon": "react"})
    result = await reconciler.upsert(
        EntityKind.TECHNOLOGY, "React", {"icon": "atom", "description": "UI library"},
    )
    await test_db.commit()

    assert result.changed
    row = (await test_db.execute(
        select(Technology.icon, Technology.description).where(Technology.name == "React"),
    )).one()
    assert tuple(row) == ("atom", "UI library")


async def test_upsert_new_category_starts_at_zero(test_db):
    result = await UpsertReconciler(test_db).upsert(
        EntityKind.CATEGORY, "games", {"label": "Games"},
    )
    assert result.entity.count == 0


async def test_create_existing_key_raises_duplicate(test_db, seed_vocabulary):
    with pytest.raises(DuplicateKeyError) as exc_info:
        await UpsertReconciler(test_db).create(EntityKind.CATEGORY, "web", {"label": "Web"})
    assert exc_info.value.natural_key == "web"


async def test_update_missing_key_raises_not_found(test_db):
    with pytest.raises(ResourceNotFoundError):
        await UpsertReconciler(test_db).update(EntityKind.CATEGORY, "nope", {"label": "x"})


async def test_update_is_partial(test_db):
    reconciler = UpsertReconciler(test_db)
    await reconciler.upsert(
        EntityKind.FAQ_CATEGORY, "billing", {"name": "Billing", "icon": "card"},
    )
    entity = await reconciler.update(EntityKind.FAQ_CATEGORY, "billing", {"name": "Payments"})
    assert (entity.name, entity.icon) == ("Payments", "card")


async def test_unknown_attribute_is_rejected(test_db):
    with pytest.raises(ValueError):
        await UpsertReconciler(test_db).upsert(
            EntityKind.FEATURE, "Dark Mode", {"colour": "black"},
        )


async def test_missing_required_attribute_on_create(test_db):
    with pytest.raises(ValueError):
        await UpsertReconciler(test_db).upsert(EntityKind.FAQ_CATEGORY, "general", {"name": "General"})


async def test_blog_category_slug_is_derived(test_db):
    result = await UpsertReconciler(test_db).upsert(
        EntityKind.BLOG_CATEGORY, "Web Development", {},
    )
    assert result.entity.slug == "web-development"
    assert result.entity.post_count == 0


async def test_derived_slug_clash_is_duplicate_key(test_db):
    reconciler = UpsertReconciler(test_db)
    await reconciler.upsert(EntityKind.BLOG_TAG, "Web Dev", {})
    await test_db.commit()

    with pytest.raises(DuplicateKeyError):
        await reconciler.upsert(EntityKind.BLOG_TAG, "web-dev", {})


async def test_concurrent_insert_becomes_duplicate_key(
    test_db, test_session_factory, monkeypatch,
):
    # Another writer commits the same key after our lookup saw nothing
    async with test_session_factory() as other:
        other.add(BlogCategory(name="Design", slug="design"))
        await other.commit()

    reconciler = UpsertReconciler(test_db)

    async def stale_find(spec, key, lock=False):
        return None

    monkeypatch.setattr(reconciler, "_find", stale_find)
    with pytest.raises(DuplicateKeyError):
        await reconciler.upsert(EntityKind.BLOG_CATEGORY, "Design", {})

    assert await _row_count(test_db, BlogCategory) == 1


async def test_faq_item_requires_existing_category(test_db):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await UpsertReconciler(test_db).upsert(
            EntityKind.FAQ_ITEM, 1,
            {"category": "missing", "question": "Q?", "answer": "A."},
        )
    assert exc_info.value.resource_type == "FAQCategory"


async def test_faq_item_key_is_coerced_to_int(test_db):
    test_db.add(FAQCategory(id="general", name="General", icon="help"))
    await test_db.commit()

    reconciler = UpsertReconciler(test_db)
    created = await reconciler.upsert(
        EntityKind.FAQ_ITEM, "7",
        {"category": "general", "question": "Q?", "answer": "A.", "popular": True},
    )
    again = await reconciler.upsert(
        EntityKind.FAQ_ITEM, 7,
        {"category": "general", "question": "Q?", "answer": "A.", "popular": True},
    )

    assert created.entity.id == 7
    assert not again.changed


async def test_non_numeric_faq_item_key_is_not_found(test_db):
    with pytest.raises(ResourceNotFoundError):
        await UpsertReconciler(test_db).get(EntityKind.FAQ_ITEM, "abc")


async def test_not_null_violation_is_database_error(test_db):
    """Only key collisions are duplicates; a NULL in a required column is not."""
    test_db.add(Category(id="web", label="Web Apps", count=0))
    await test_db.commit()

    with pytest.raises(DatabaseError) as exc_info:
        await UpsertReconciler(test_db).update(EntityKind.CATEGORY, "web", {"label": None})
    assert exc_info.value.outcome is None

    label = (await test_db.execute(select(Category.label))).scalar_one()
    assert label == "Web Apps"


@pytest.mark.parametrize("orig, unique", [
    (SimpleNamespace(sqlstate="23505"), True),
    (SimpleNamespace(sqlstate="23502"), False),
    (SimpleNamespace(sqlstate="23503"), False),
    (SimpleNamespace(sqlite_errorname="SQLITE_CONSTRAINT_UNIQUE"), True),
    (SimpleNamespace(sqlite_errorname="SQLITE_CONSTRAINT_PRIMARYKEY"), True),
    (SimpleNamespace(sqlite_errorname="SQLITE_CONSTRAINT_NOTNULL"), False),
    (Exception("no driver code"), False),
])
def test_integrity_errors_classified_by_driver_code(orig, unique):
    exc = IntegrityError("INSERT ...", {}, orig)
    assert is_unique_violation(exc) is unique
    expected = DuplicateKeyError if unique else DatabaseError
    assert isinstance(integrity_error_for(exc, "Category", "web"), expected)
