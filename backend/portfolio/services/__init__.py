"""Services Layer — envelope mapping, seed loading and cross-catalog lookups.

Invariants:
    - Services call the core and translate results; they never re-implement rules
"""
