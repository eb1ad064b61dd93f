"""Core Layer — pure domain logic, no IO, no async, no locks.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or config
    - Rules are pure and deterministic given their inputs (clock values passed in)

Design Decisions:
    - Functional core separated from imperative shell (services/ owns state and locks)
"""
