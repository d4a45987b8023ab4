"""Transaction Boundary: async session manager handing out one-shot transaction handles.

Invariants:
    - Every transaction() scope rolls back unless Transaction.commit() succeeded
    - The underlying session is closed on every exit path (success, error, early return)
    - A Transaction commits at most once; any use after commit/rollback raises TransactionStateError
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)

Design Decisions:
    - Explicit handle threaded into repositories instead of an ambient scope
      (ADR: no thread-local transaction state)
    - commit() returns a CommitReceipt: event dispatch demands one, so it cannot
      run before the durability point
    - expire_on_commit=False: committed rows stay readable without lazy loads
    - Isolation level configurable; SERIALIZABLE by default so concurrent counter
      updates on the company row cannot lose writes
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from crm.core.errors import DatabaseError, TransactionStateError

logger = logging.getLogger(__name__)


class TransactionStatus(str, Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


@dataclass(frozen=True)
class CommitReceipt:
    """Proof that a transaction reached durability."""
    committed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Transaction:
    """One unit of work. Owned by exactly one workflow."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._status = TransactionStatus.ACTIVE

    @property
    def status(self) -> TransactionStatus:
        return self._status

    @property
    def session(self) -> AsyncSession:
        """Session for repositories. Only valid while the transaction is active."""
        self._ensure_active("use session")
        return self._session

    async def commit(self) -> CommitReceipt:
        self._ensure_active("commit")
        try:
            await self._session.commit()
        except BaseException:
            self._status = TransactionStatus.FAILED
            raise
        self._status = TransactionStatus.COMMITTED
        return CommitReceipt()

    async def _release(self) -> None:
        try:
            if self._status is not TransactionStatus.COMMITTED:
                if self._status is TransactionStatus.ACTIVE:
                    self._status = TransactionStatus.ROLLED_BACK
                await self._session.rollback()
        finally:
            await self._session.close()

    def _ensure_active(self, operation: str) -> None:
        if self._status is not TransactionStatus.ACTIVE:
            raise TransactionStateError(self._status.value, operation)


class DatabaseSessionManager:
    """Manages the async engine and hands out transactions with guaranteed release."""

    def __init__(self, database_url: str, **engine_options):
        self.engine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[Transaction, None]:
        """Provide a transaction handle; rollback unless committed."""
        tx = Transaction(self._session_factory())
        try:
            yield tx
        except IntegrityError as e:
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown") from e
        finally:
            await tx._release()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.transaction() as tx:
                await tx.session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
