"""Repositories: SQLAlchemy adapters for the core repository protocols.

Invariants:
    - Every repository is constructed with a Transaction and only uses tx.session
    - Repositories never commit; the caller owns the durability point
"""
