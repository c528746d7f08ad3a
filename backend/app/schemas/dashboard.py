"""Dashboard Schemas — response contract for /dashboard/stats."""

from pydantic import BaseModel


class StatusCount(BaseModel):
    status: str
    count: int


class TechnologyUsage(BaseModel):
    name: str
    count: int


class ProjectStats(BaseModel):
    total: int
    completed: int
    in_progress: int


class DashboardStats(BaseModel):
    total_projects: int
    total_blog_posts: int
    total_faq_items: int
    total_categories: int
    projects_by_status: list[StatusCount]
    technology_usage: list[TechnologyUsage]
    project_stats: ProjectStats
