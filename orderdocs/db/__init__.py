"""Database Declarations — SQLAlchemy Base shared by models, record store and migrations.

Invariants:
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests
"""
