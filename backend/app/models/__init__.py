"""ORM Models — SQLAlchemy declarative models for all catalog entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Natural keys (slug ids, names, titles) carry unique constraints

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.category import Category  # noqa: F401
from app.models.technology import Technology, Feature  # noqa: F401
from app.models.project import (  # noqa: F401
    Project, ProjectMetric, ProjectLink, ProjectImage,
)
from app.models.project_association import ProjectTechnology, ProjectFeature  # noqa: F401
from app.models.faq import FAQCategory, FAQItem  # noqa: F401
from app.models.blog import BlogCategory, BlogTag, BlogPost, BlogPostTag  # noqa: F401
from app.models.service import Service, ServiceFeature, ServiceTechnology  # noqa: F401
