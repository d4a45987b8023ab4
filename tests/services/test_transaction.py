"""Transaction Boundary: commit, implicit rollback, handle misuse and error mapping.

Tests cover:
    - Committed writes are durable; uncommitted writes vanish
    - Rollback on exception and on early return
    - Double commit and use-after-commit raise TransactionStateError
    - SQLAlchemy failures surface as DatabaseError and leave nothing behind
    - health_check reports connectivity
"""

import pytest

from crm.core.entities import Company
from crm.core.errors import DatabaseError, TransactionStateError
from crm.infrastructure.database import (
    CommitReceipt, DatabaseSessionManager, TransactionStatus,
)
from crm.models.company import CompanyRecord
from crm.repositories.company_repository import SqlCompanyRepository


async def test_commit_makes_writes_durable(db, query_company):
    async with db.transaction() as tx:
        await SqlCompanyRepository(tx).add(Company("mycorp.com", 3))
        receipt = await tx.commit()

    assert isinstance(receipt, CommitReceipt)
    assert tx.status == TransactionStatus.COMMITTED
    assert await query_company() == Company("mycorp.com", 3)


async def test_exit_without_commit_rolls_back(db, query_company):
    async with db.transaction() as tx:
        await SqlCompanyRepository(tx).add(Company("mycorp.com", 3))

    assert tx.status == TransactionStatus.ROLLED_BACK
    assert await query_company() is None


async def test_exception_rolls_back_and_propagates(db, query_company):
    with pytest.raises(ValueError):
        async with db.transaction() as tx:
            await SqlCompanyRepository(tx).add(Company("mycorp.com", 3))
            raise ValueError("boom")

    assert tx.status == TransactionStatus.ROLLED_BACK
    assert await query_company() is None


async def test_early_return_rolls_back(db, query_company):
    async def workflow():
        async with db.transaction() as tx:
            await SqlCompanyRepository(tx).add(Company("mycorp.com", 3))
            return tx

    tx = await workflow()
    assert tx.status == TransactionStatus.ROLLED_BACK
    assert await query_company() is None


async def test_double_commit_is_rejected(db):
    with pytest.raises(TransactionStateError) as exc:
        async with db.transaction() as tx:
            await tx.commit()
            await tx.commit()
    assert exc.value.status == "committed"


async def test_session_unusable_after_commit(db):
    with pytest.raises(TransactionStateError):
        async with db.transaction() as tx:
            await tx.commit()
            await SqlCompanyRepository(tx).get()


async def test_session_unusable_after_scope_ends(db):
    async with db.transaction() as tx:
        pass
    with pytest.raises(TransactionStateError):
        _ = tx.session


async def test_failed_commit_maps_to_database_error(db, query_company):
    with pytest.raises(DatabaseError) as exc:
        async with db.transaction() as tx:
            tx.session.add(CompanyRecord(domain_name="bad.com", number_of_employees=-1))
            await tx.commit()

    assert exc.value.code == "DATABASE_ERROR"
    assert tx.status == TransactionStatus.FAILED
    assert await query_company() is None


async def test_duplicate_key_maps_to_database_error(db, create_company, query_company):
    await create_company("mycorp.com", 1)

    with pytest.raises(DatabaseError):
        async with db.transaction() as tx:
            await SqlCompanyRepository(tx).add(Company("mycorp.com", 5))
            await tx.commit()

    assert await query_company() == Company("mycorp.com", 1)


async def test_health_check_succeeds(db):
    assert await db.health_check() is True


async def test_health_check_fails_on_unreachable_database():
    manager = DatabaseSessionManager(
        "sqlite+aiosqlite:////nonexistent-dir/never/crm.db",
    )
    try:
        assert await manager.health_check() is False
    finally:
        await manager.dispose()
