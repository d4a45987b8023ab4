"""Event Dispatch: explicit routing from domain event variant to its single subscriber.

Invariants:
    - Events handled strictly in the order given
    - EmailChanged -> MessageBus, MembershipTypeChanged -> DomainLogger, nothing else
    - Unknown event kinds are skipped (debug log), never raised
    - One failing handler never blocks the rest; each failure is logged at ERROR
      with error_code EVENT_DISPATCH_FAILED and returned to the caller
    - dispatch() requires a CommitReceipt (TransactionStateError otherwise): only
      committed changes reach subscribers

Design Decisions:
    - `match` over the closed DomainEvent union: every mapping visible in one place
    - Failures are not retried and not re-raised: the committed data change is
      authoritative, notification is a separate failure domain
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from crm.core.domain_events import EmailChanged, MembershipTypeChanged
from crm.core.errors import TransactionStateError
from crm.infrastructure.database import CommitReceipt
from crm.infrastructure.domain_logger import DomainLogger
from crm.infrastructure.message_bus import MessageBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchFailure:
    event: object
    error: Exception


class EventDispatcher:
    """Routes domain events to subscribers after commit."""

    def __init__(self, message_bus: MessageBus, domain_logger: DomainLogger):
        self._message_bus = message_bus
        self._domain_logger = domain_logger

    def dispatch(
        self, events: Iterable[object], receipt: CommitReceipt,
    ) -> list[DispatchFailure]:
        if not isinstance(receipt, CommitReceipt):
            raise TransactionStateError("uncommitted", "dispatch events")
        failures: list[DispatchFailure] = []
        for event in events:
            try:
                self._dispatch_one(event)
            except Exception as e:
                logger.error(
                    f"Failed to dispatch {type(event).__name__}: {e}",
                    exc_info=True,
                    extra={
                        "error_code": "EVENT_DISPATCH_FAILED",
                        "event_type": type(event).__name__,
                        "user_id": getattr(event, "user_id", None),
                    },
                )
                failures.append(DispatchFailure(event, e))
        return failures

    def _dispatch_one(self, event: object) -> None:
        match event:
            case EmailChanged(user_id=user_id, new_email=new_email):
                self._message_bus.send_email_changed_message(user_id, new_email)
            case MembershipTypeChanged(
                user_id=user_id, old_type=old_type, new_type=new_type,
            ):
                self._domain_logger.user_type_has_changed(
                    user_id, old_type, new_type,
                )
            case _:
                logger.debug(f"No subscriber for {type(event).__name__}; skipped")
