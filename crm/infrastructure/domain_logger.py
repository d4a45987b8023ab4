"""Domain Logger: records business-significant transitions as log lines.

Invariants:
    - Line format: "User <id> changed type from <old> to <new>"
    - user_id attached as a structured extra for JSONFormatter
"""

import logging

from crm.core.domain_types import UserId, UserType


class DomainLogger:
    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("crm.domain")

    def user_type_has_changed(
        self, user_id: UserId, old_type: UserType, new_type: UserType,
    ) -> None:
        self._logger.info(
            f"User {user_id} changed type from {old_type.value} to {new_type.value}",
            extra={"user_id": user_id, "event_type": "MembershipTypeChanged"},
        )
