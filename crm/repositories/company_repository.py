"""Company Repository: the single company row.

Invariants:
    - get() returns the only row, None when the table is empty
    - More than one row is a store integrity failure (surfaces as DatabaseError)
    - save() updates an existing row; add() inserts and is meant for setup only
"""

from sqlalchemy import select

from crm.core.domain_types import DomainName
from crm.core.entities import Company
from crm.core.errors import ResourceNotFoundError
from crm.infrastructure.database import Transaction
from crm.models.company import CompanyRecord


def _to_domain(record: CompanyRecord) -> Company:
    return Company(
        domain_name=DomainName(record.domain_name),
        number_of_employees=record.number_of_employees,
    )


class SqlCompanyRepository:
    def __init__(self, tx: Transaction):
        self._tx = tx

    async def get(self) -> Company | None:
        result = await self._tx.session.execute(select(CompanyRecord))
        record = result.scalar_one_or_none()
        return _to_domain(record) if record else None

    async def save(self, company: Company) -> None:
        record = await self._tx.session.get(CompanyRecord, company.domain_name)
        if record is None:
            raise ResourceNotFoundError("Company", company.domain_name)
        record.number_of_employees = company.number_of_employees

    async def add(self, company: Company) -> None:
        session = self._tx.session
        session.add(CompanyRecord(
            domain_name=company.domain_name,
            number_of_employees=company.number_of_employees,
        ))
        await session.flush()
