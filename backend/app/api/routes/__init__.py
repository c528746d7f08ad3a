"""Route Modules — one file per catalog resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes parse, call a command or query object, and map the result;
      consistency rules live in services/

Design Decisions:
    - Explicit registration in main.py over auto-discovery (ADR: ExMA anti-pattern)
"""
