"""Services Layer — allocation, path resolution, folder management, artifact filing.

Invariants:
    - Services depend on the RecordStore protocol, never on SQLAlchemy directly
    - Expected failures come back as result objects (core/results.py)

Design Decisions:
    - One service per concern, composed in api/dependencies.py
"""
