"""Pydantic Schemas — request/response contracts for the catalog API and seed files.

Invariants:
    - Schemas validate at the system boundary (request bodies, seed JSON, responses)
    - Natural-key formats (slug ids) and enums from core/ are enforced here

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
