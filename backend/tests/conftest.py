"""Root conftest — shared test configuration."""

import os

# Tests never reach a real Postgres: settings resolve to SQLite
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("LOG_FORMAT", "text")
