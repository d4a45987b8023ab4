"""Service test fixtures: in-memory database, bus spy, seed and query helpers.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Seed/query helpers run in their own committed transactions, like separate requests

Design Decisions:
    - StaticPool: one shared connection, so every session sees the same :memory: DB
    - BusSpy records raw messages: assertions compare the exact wire text
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.pool import StaticPool

import crm.models  # noqa: F401
from crm.core.domain_types import UserId, UserType, NEW_USER_ID
from crm.core.entities import Company, User
from crm.db.base import Base
from crm.infrastructure.database import DatabaseSessionManager
from crm.infrastructure.domain_logger import DomainLogger
from crm.infrastructure.message_bus import MessageBus, format_email_changed_message
from crm.models.user import UserRecord
from crm.repositories.company_repository import SqlCompanyRepository
from crm.repositories.user_repository import SqlUserRepository
from crm.services.event_dispatcher import EventDispatcher
from crm.services.user_controller import UserController


class BusSpy:
    """Bus test double: records every message sent."""

    def __init__(self):
        self.sent_messages: list[str] = []

    def send(self, message: str) -> None:
        self.sent_messages.append(message)

    def should_send_number_of_messages(self, number: int) -> "BusSpy":
        assert len(self.sent_messages) == number
        return self

    def with_email_changed_message(self, user_id: int, new_email: str) -> "BusSpy":
        assert format_email_changed_message(user_id, new_email) in self.sent_messages
        return self


@pytest.fixture
async def db():
    manager = DatabaseSessionManager(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool,
    )
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
def bus_spy():
    return BusSpy()


@pytest.fixture
def domain_logger_mock():
    return MagicMock(spec=DomainLogger)


@pytest.fixture
def controller(db, bus_spy, domain_logger_mock):
    dispatcher = EventDispatcher(MessageBus(bus_spy), domain_logger_mock)
    return UserController(db, dispatcher)


@pytest.fixture
def create_user(db):
    """Persist a user. With user_id, the row is inserted under that exact id."""
    async def _create(
        email: str = "user@mycorp.com",
        type: UserType = UserType.EMPLOYEE,
        is_email_confirmed: bool = False,
        user_id: int | None = None,
    ) -> User:
        async with db.transaction() as tx:
            if user_id is None:
                user = await SqlUserRepository(tx).save(
                    User(NEW_USER_ID, email, type, is_email_confirmed),
                )
            else:
                tx.session.add(UserRecord(
                    id=user_id, email=email, type=type.value,
                    is_email_confirmed=is_email_confirmed,
                ))
                user = User(UserId(user_id), email, type, is_email_confirmed)
            await tx.commit()
        return user
    return _create


@pytest.fixture
def create_company(db):
    async def _create(domain_name: str = "mycorp.com", number_of_employees: int = 0) -> Company:
        company = Company(domain_name, number_of_employees)
        async with db.transaction() as tx:
            await SqlCompanyRepository(tx).add(company)
            await tx.commit()
        return company
    return _create


@pytest.fixture
def query_user(db):
    async def _query(user_id: int) -> User | None:
        async with db.transaction() as tx:
            return await SqlUserRepository(tx).get_by_id(UserId(user_id))
    return _query


@pytest.fixture
def query_company(db):
    async def _query() -> Company | None:
        async with db.transaction() as tx:
            return await SqlCompanyRepository(tx).get()
    return _query
