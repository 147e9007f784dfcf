"""Infrastructure Layer — database, filesystem, retry primitives, logging.

Invariants:
    - Blocking calls (disk) run in worker threads; the event loop never blocks
    - Store failures surface as typed errors from core/errors.py

Design Decisions:
    - Thin adapters; every decision about what a failure means lives in services/
"""
