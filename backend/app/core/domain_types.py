"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CategoryId and FAQCategoryId are slug strings (lowercase, digits, hyphens)
    - ProjectId, TechnologyId, FeatureId are integer surrogate keys
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CategoryId = NewType("CategoryId", str)
FAQCategoryId = NewType("FAQCategoryId", str)
ProjectId = NewType("ProjectId", int)
TechnologyId = NewType("TechnologyId", int)
FeatureId = NewType("FeatureId", int)


# ─── Enums ───────────────────────────────────────────────────────

class Outcome(str, Enum):
    """Discriminant carried by every command result."""
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    NOT_FOUND = "not_found"
    DUPLICATE_KEY = "duplicate_key"
    CONFLICT = "conflict"
    TRANSIENT = "transient"


class CountStatus(str, Enum):
    """Per-parent result of a counter recalculation."""
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class EntityKind(str, Enum):
    """Entities that can be upserted by natural key."""
    CATEGORY = "category"
    TECHNOLOGY = "technology"
    FEATURE = "feature"
    BLOG_CATEGORY = "blog_category"
    BLOG_TAG = "blog_tag"
    FAQ_CATEGORY = "faq_category"
    FAQ_ITEM = "faq_item"
    SERVICE = "service"


class ProjectStatus(str, Enum):
    """Project lifecycle — maps to DB `status` column."""
    DEVELOPMENT = "DEVELOPMENT"
    BETA = "BETA"
    LIVE = "LIVE"
    ARCHIVED = "ARCHIVED"


class ImageType(str, Enum):
    """Project gallery image classification."""
    SCREENSHOT = "SCREENSHOT"
    MOCKUP = "MOCKUP"
    DIAGRAM = "DIAGRAM"
    PHOTO = "PHOTO"


# Statuses the dashboard reports as "in progress"
IN_PROGRESS_STATUSES = frozenset({ProjectStatus.DEVELOPMENT, ProjectStatus.BETA})
