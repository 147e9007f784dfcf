"""Core Layer — pure rules: identifier formats, path checks, filenames, backoff, errors.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO: folder listings and stored values are passed in as arguments

Design Decisions:
    - Functional core separated from imperative shell (services/ and infrastructure/)
"""
