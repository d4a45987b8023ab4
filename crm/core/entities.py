"""Aggregates: User and Company with the invariants each one enforces.

Invariants:
    - Entities are immutable; every mutation returns a new instance
    - Company.number_of_employees is never negative, checked BEFORE a new value exists
    - User.is_email_confirmed never changes after construction
    - Pending domain events are NOT stored on entities (see change_email.py)

Design Decisions:
    - frozen dataclasses: structural equality makes save/reload round-trips assertable
    - email_domain splits on the first '@' only: "a@b@c" has domain "b@c"
"""

from dataclasses import dataclass, replace

from crm.core.domain_types import DomainName, UserId, UserType, NEW_USER_ID
from crm.core.errors import EmployeeCountError, MalformedEmailError


def email_domain(email: str) -> str:
    """Domain portion of an address. Raises MalformedEmailError without '@'."""
    _, sep, domain = email.partition("@")
    if not sep:
        raise MalformedEmailError(email)
    return domain


@dataclass(frozen=True)
class User:
    id: UserId
    email: str
    type: UserType
    is_email_confirmed: bool = False

    @property
    def is_persisted(self) -> bool:
        return self.id != NEW_USER_ID

    def with_id(self, user_id: UserId) -> "User":
        return replace(self, id=user_id)


@dataclass(frozen=True)
class Company:
    domain_name: DomainName
    number_of_employees: int

    def __post_init__(self):
        if self.number_of_employees < 0:
            raise EmployeeCountError(self.domain_name, self.number_of_employees)

    def change_number_of_employees(self, delta: int) -> "Company":
        """Return a copy with the counter moved by delta; refuses to go below zero."""
        if self.number_of_employees + delta < 0:
            raise EmployeeCountError(
                self.domain_name, self.number_of_employees, delta,
            )
        return replace(
            self, number_of_employees=self.number_of_employees + delta,
        )

    def is_email_corporate(self, email: str) -> bool:
        return email_domain(email) == self.domain_name
