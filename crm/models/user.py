"""UserRecord ORM: persisted columns of a User.

Invariants:
    - id is an autoincrement integer; 0 is never a stored id
    - type stores UserType.value ("Customer" | "Employee")

Design Decisions:
    - No events column: domain events are transient and never persisted
"""

from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from crm.db.base import Base


class UserRecord(Base):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    is_email_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
