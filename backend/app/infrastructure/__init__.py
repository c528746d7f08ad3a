"""Infrastructure Layer — store connection lifecycle and cross-cutting concerns.

Invariants:
    - Infrastructure depends on core/ only for the error hierarchy
    - All store failures leave this layer as PortfolioError subclasses

Design Decisions:
    - One session manager per process, owned by the FastAPI lifespan
"""
