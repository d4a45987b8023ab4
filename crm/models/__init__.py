"""ORM Models: SQLAlchemy declarative rows for the user and company tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORM rows never leak into core; repositories translate them to entities

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from crm.models.user import UserRecord  # noqa: F401
from crm.models.company import CompanyRecord  # noqa: F401
