"""Email Change Rules: decides the new user/company state and the events it produces.

Invariants:
    - can_change_email is a pure predicate; change_email never runs without it passing
    - Same email in, nothing out: no company change, no events
    - Event order mirrors application order: MembershipTypeChanged before EmailChanged
    - EmailChanged is emitted on every effective change, even when the type is unchanged

Design Decisions:
    - Returns EmailChangeResult instead of appending to a list on the User
      (ADR: no hidden mutable state, the dispatch boundary is an explicit value)
    - Shell persists result.user / result.company and dispatches result.events after commit
"""

from dataclasses import dataclass, field, replace

from crm.core.domain_events import DomainEvent, EmailChanged, MembershipTypeChanged
from crm.core.domain_types import UserType
from crm.core.entities import Company, User
from crm.core.errors import require


EMAIL_CONFIRMED_ERROR = "Can't change email after it's confirmed"


@dataclass(frozen=True)
class EmailChangeResult:
    user: User
    company: Company
    events: tuple[DomainEvent, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return bool(self.events)


def can_change_email(user: User) -> str | None:
    """Business rule: a confirmed email is frozen. Returns the refusal or None."""
    if user.is_email_confirmed:
        return EMAIL_CONFIRMED_ERROR
    return None


def change_email(user: User, new_email: str, company: Company) -> EmailChangeResult:
    """Apply an email change. Pure: inputs are left untouched."""
    require(can_change_email(user) is None, EMAIL_CONFIRMED_ERROR)

    if user.email == new_email:
        return EmailChangeResult(user=user, company=company)

    new_type = (
        UserType.EMPLOYEE if company.is_email_corporate(new_email)
        else UserType.CUSTOMER
    )
    events: list[DomainEvent] = []

    if user.type != new_type:
        delta = 1 if new_type == UserType.EMPLOYEE else -1
        company = company.change_number_of_employees(delta)
        events.append(MembershipTypeChanged(user.id, user.type, new_type))

    user = replace(user, email=new_email, type=new_type)
    events.append(EmailChanged(user.id, new_email))

    return EmailChangeResult(user=user, company=company, events=tuple(events))
