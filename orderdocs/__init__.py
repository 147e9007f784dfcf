"""orderdocs — work-order identifiers and per-order artifact folders.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
