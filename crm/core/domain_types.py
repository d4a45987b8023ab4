"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps int; NEW_USER_ID (0) marks a user that was never persisted
    - Membership types encoded as Enum, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum: the value is what the DB column stores and what the domain log prints
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
DomainName = NewType("DomainName", str)

NEW_USER_ID = UserId(0)


# ─── Enums ───────────────────────────────────────────────────────

class UserType(str, Enum):
    """Membership type, derived from whether the email is corporate."""
    CUSTOMER = "Customer"
    EMPLOYEE = "Employee"
