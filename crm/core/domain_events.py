"""Domain Events: immutable records of state transitions produced by change_email.

Invariants:
    - Events are value objects: equal fields means equal events
    - Events are never persisted; they live from mutation until dispatch

Design Decisions:
    - DomainEvent is a closed union of frozen dataclasses, routed with `match`
      on the variant (ADR: no marker base class, no isinstance ladders)
"""

from dataclasses import dataclass

from crm.core.domain_types import UserId, UserType


@dataclass(frozen=True)
class EmailChanged:
    user_id: UserId
    new_email: str


@dataclass(frozen=True)
class MembershipTypeChanged:
    user_id: UserId
    old_type: UserType
    new_type: UserType


DomainEvent = EmailChanged | MembershipTypeChanged
