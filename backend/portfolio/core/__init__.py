"""Core Layer — record types, validation, query, analytics, snapshot and export.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/ or config
    - Everything except RecordManager is pure; the manager's only state is its collection

Design Decisions:
    - Functional core separated from the HTTP shell (impureim sandwich)
"""
