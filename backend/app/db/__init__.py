"""Database Infrastructure — declarative Base, timestamp mixin, standalone session factory.

Invariants:
    - All sessions are async (AsyncSession)
    - Every table inherits Base, so alembic sees the full metadata

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
