"""User Controller: orchestrates load -> mutate -> persist -> commit -> dispatch.

Invariants:
    - One transaction per call; repositories are bound to it and die with it
    - Business refusal (confirmed email) returns the message string, writes nothing, commits nothing
    - Missing user or company raises ResourceNotFoundError (integrity violation, rollback)
    - Events dispatched strictly after commit succeeded; a failed commit dispatches nothing
    - A no-op change (same email) writes nothing, dispatches nothing, logs no change
    - CrmError failures are logged with their to_dict() payload, then re-raised

Design Decisions:
    - Imperative shell around the pure change_email rule (ADR: impureim sandwich)
    - Dispatch failures are logged by EventDispatcher and do not change the "OK" result:
      the committed change is authoritative
"""

import logging

from crm.core.change_email import can_change_email, change_email
from crm.core.domain_types import UserId
from crm.core.errors import CrmError, ErrorContext, ResourceNotFoundError
from crm.infrastructure.database import DatabaseSessionManager
from crm.repositories.company_repository import SqlCompanyRepository
from crm.repositories.user_repository import SqlUserRepository
from crm.services.event_dispatcher import EventDispatcher

logger = logging.getLogger(__name__)

OK = "OK"


class UserController:
    def __init__(self, db: DatabaseSessionManager, dispatcher: EventDispatcher):
        self._db = db
        self._dispatcher = dispatcher

    async def change_email(self, user_id: UserId, new_email: str) -> str:
        """Change a user's email. Returns "OK" or the business-rule refusal."""
        try:
            return await self._change_email(user_id, new_email)
        except CrmError as e:
            logger.error(
                f"Email change failed for user {user_id}: {e.message}",
                extra={"user_id": user_id, "error_code": e.code, "error": e.to_dict()},
            )
            raise

    async def _change_email(self, user_id: UserId, new_email: str) -> str:
        async with self._db.transaction() as tx:
            users = SqlUserRepository(tx)
            companies = SqlCompanyRepository(tx)

            user = await users.get_by_id(user_id)
            if user is None:
                raise ResourceNotFoundError(
                    "User", str(user_id),
                    ErrorContext(user_id=user_id, operation="change_email"),
                )

            error = can_change_email(user)
            if error is not None:
                logger.info(
                    f"Email change refused for user {user_id}: {error}",
                    extra={"user_id": user_id},
                )
                return error

            company = await companies.get()
            if company is None:
                raise ResourceNotFoundError(
                    "Company", "<single>",
                    ErrorContext(user_id=user_id, operation="change_email"),
                )

            result = change_email(user, new_email, company)
            if not result.changed:
                return OK

            logger.info(
                f"Changing email for user {user_id} to {new_email}",
                extra={"user_id": user_id, "domain_name": company.domain_name},
            )
            await companies.save(result.company)
            await users.save(result.user)
            receipt = await tx.commit()

        logger.info(
            f"Email is changed for user {user_id}", extra={"user_id": user_id},
        )
        self._dispatcher.dispatch(result.events, receipt)
        return OK
