"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test spies need no inheritance
    - Repositories are async because implementations do IO; Bus.send is sync
      because dispatch is synchronous and side-effecting
"""

from typing import Protocol

from crm.core.domain_types import UserId
from crm.core.entities import Company, User


class UserRepository(Protocol):
    """Contract for user persistence, bound to one transaction."""
    async def get_by_id(self, user_id: UserId) -> User | None: ...
    async def save(self, user: User) -> User: ...


class CompanyRepository(Protocol):
    """Contract for the single-row company table, bound to one transaction."""
    async def get(self) -> Company | None: ...
    async def save(self, company: Company) -> None: ...
    async def add(self, company: Company) -> None: ...


class Bus(Protocol):
    """Outbound messaging sink: one opaque text message per call."""
    def send(self, message: str) -> None: ...
