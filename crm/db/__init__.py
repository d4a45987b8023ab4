"""Database Declarations: SQLAlchemy Base shared by all ORM rows.

Invariants:
    - Engine and session lifecycle live in infrastructure/database.py, not here
"""
