"""Services Layer — catalog consistency components, commands, and read queries.

Invariants:
    - Components (association_sync, aggregates, referential_guard,
      upsert_reconciler, project_reconciler) flush but never commit
    - Command classes own the transaction boundary and return CommandResult
    - Query modules never write

Design Decisions:
    - One module per component for locality (ADR: ExMA no god objects)
"""
