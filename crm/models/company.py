"""CompanyRecord ORM: the single company row and its employee counter.

Invariants:
    - domain_name is the primary key and lookup key
    - number_of_employees >= 0 enforced by a CHECK constraint as well as by the domain

Design Decisions:
    - CHECK constraint mirrors the aggregate invariant so a buggy writer fails at commit
"""

from sqlalchemy import String, Integer, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crm.db.base import Base


class CompanyRecord(Base):
    __tablename__ = "company"
    __table_args__ = (
        CheckConstraint(
            "number_of_employees >= 0", name="ck_company_employees_non_negative",
        ),
    )

    domain_name: Mapped[str] = mapped_column(String(253), primary_key=True)
    number_of_employees: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
