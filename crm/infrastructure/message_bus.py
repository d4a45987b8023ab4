"""Message Bus: formats outbound notifications for downstream consumers.

Invariants:
    - Message format is a byte-exact contract:
      "Type: USER EMAIL CHANGED; Id: <id>; NewEmail: <email>"
    - Exactly one Bus.send per notification
"""

from crm.core.domain_types import UserId
from crm.core.repository_protocols import Bus


def format_email_changed_message(user_id: UserId, new_email: str) -> str:
    return (
        "Type: USER EMAIL CHANGED; "
        f"Id: {user_id}; "
        f"NewEmail: {new_email}"
    )


class MessageBus:
    def __init__(self, bus: Bus):
        self._bus = bus

    def send_email_changed_message(self, user_id: UserId, new_email: str) -> None:
        self._bus.send(format_email_changed_message(user_id, new_email))
