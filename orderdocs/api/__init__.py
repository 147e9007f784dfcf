"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses, except report filing which
      returns the PDF bytes

Design Decisions:
    - Thin routes delegate to services
"""
