"""Dashboard Stats — admin dashboard aggregates computed live from the store.

Invariants:
    - Every number is a live COUNT at request time; cached counters are not read
    - technology_usage lists at most 10 technologies, most-used first, ties by name
    - in_progress counts IN_PROGRESS_STATUSES (DEVELOPMENT, BETA); completed counts LIVE
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import IN_PROGRESS_STATUSES, ProjectStatus
from app.models.blog import BlogPost
from app.models.category import Category
from app.models.faq import FAQItem
from app.models.project import Project
from app.models.project_association import ProjectTechnology
from app.models.technology import Technology

TOP_TECHNOLOGIES = 10


async def collect_dashboard_stats(db: AsyncSession) -> dict:
    """Totals, project status breakdown, and top technology usage."""
    total_projects = await _count(db, select(func.count()).select_from(Project))
    published_posts = await _count(
        db,
        select(func.count()).select_from(BlogPost).where(BlogPost.published.is_(True)),
    )
    total_faq_items = await _count(db, select(func.count()).select_from(FAQItem))
    total_categories = await _count(db, select(func.count()).select_from(Category))

    result = await db.execute(
        select(Project.status, func.count())
        .group_by(Project.status)
        .order_by(Project.status),
    )
    by_status = {status: count for status, count in result.all()}

    usage = func.count(ProjectTechnology.project_id)
    result = await db.execute(
        select(Technology.name, usage)
        .join(ProjectTechnology, ProjectTechnology.technology_id == Technology.id)
        .group_by(Technology.id, Technology.name)
        .order_by(usage.desc(), Technology.name)
        .limit(TOP_TECHNOLOGIES),
    )
    technology_usage = [{"name": name, "count": count} for name, count in result.all()]

    return {
        "total_projects": total_projects,
        "total_blog_posts": published_posts,
        "total_faq_items": total_faq_items,
        "total_categories": total_categories,
        "projects_by_status": [
            {"status": status, "count": count} for status, count in by_status.items()
        ],
        "technology_usage": technology_usage,
        "project_stats": {
            "total": total_projects,
            "completed": by_status.get(ProjectStatus.LIVE.value, 0),
            "in_progress": sum(
                by_status.get(status.value, 0) for status in IN_PROGRESS_STATUSES
            ),
        },
    }


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar_one()
