"""User Repository: translates User entities to and from UserRecord rows.

Invariants:
    - save() is an upsert: NEW_USER_ID inserts, anything else updates by id
    - The generated id comes back on the returned User (entities are immutable)
    - Updating an id with no row raises ResourceNotFoundError

Design Decisions:
    - flush() after insert: the autoincrement id is needed before commit
"""

from crm.core.domain_types import UserId, UserType
from crm.core.entities import User
from crm.core.errors import ResourceNotFoundError
from crm.infrastructure.database import Transaction
from crm.models.user import UserRecord


def _to_domain(record: UserRecord) -> User:
    return User(
        id=UserId(record.id),
        email=record.email,
        type=UserType(record.type),
        is_email_confirmed=record.is_email_confirmed,
    )


class SqlUserRepository:
    def __init__(self, tx: Transaction):
        self._tx = tx

    async def get_by_id(self, user_id: UserId) -> User | None:
        record = await self._tx.session.get(UserRecord, user_id)
        return _to_domain(record) if record else None

    async def save(self, user: User) -> User:
        session = self._tx.session
        if not user.is_persisted:
            record = UserRecord(
                email=user.email,
                type=user.type.value,
                is_email_confirmed=user.is_email_confirmed,
            )
            session.add(record)
            await session.flush()
            return user.with_id(UserId(record.id))

        record = await session.get(UserRecord, user.id)
        if record is None:
            raise ResourceNotFoundError("User", str(user.id))
        record.email = user.email
        record.type = user.type.value
        record.is_email_confirmed = user.is_email_confirmed
        return user
