"""Notification delivery for invitations."""

from typing import Protocol

from src.teamdesk.core.notifications.email import EmailNotifier, send_invitation_email


class Notifier(Protocol):
    """Delivery collaborator used by the invitation workflow.

    Returns False (or raises DeliveryFailed) when the message was not delivered.
    """

    def send_invitation(
        self,
        contact_address: str,
        tenant_name: str,
        role: str,
        inviter_label: str,
        accept_link: str,
    ) -> bool: ...


__all__ = [
    "EmailNotifier",
    "Notifier",
    "send_invitation_email",
]
