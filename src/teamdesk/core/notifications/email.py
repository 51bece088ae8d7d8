"""Invitation delivery through the Resend API."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

import resend

from src.teamdesk.core.config import get_settings
from src.teamdesk.core.logging import get_logger, loggable_email

logger = get_logger(__name__)

# resend is synchronous; sends run here so a slow provider can be cut off
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="invitation_email")

_ROLE_LABELS = {"admin": "Administrator", "viewer": "Viewer"}

_STYLES = {
    "body": (
        "font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; color: #1f2937; "
        "max-width: 560px; margin: 0 auto; padding: 24px; line-height: 1.5;"
    ),
    "button": (
        "display: inline-block; padding: 10px 20px; border-radius: 6px; "
        "background: #1d4ed8; color: #ffffff; text-decoration: none;"
    ),
    "note": "color: #6b7280; font-size: 13px;",
}


def role_label(role: str) -> str:
    return _ROLE_LABELS.get(role, role.title())


def build_invitation_message(
    tenant_name: str, role: str, inviter_name: str, accept_url: str
) -> dict[str, str]:
    """Subject, HTML and plain-text bodies for an invitation."""
    label = role_label(role)
    safe = {
        "tenant": html.escape(tenant_name),
        "inviter": html.escape(inviter_name),
        "role": html.escape(label),
        "url": html.escape(accept_url, quote=True),
    }
    body = f"""<!DOCTYPE html>
<html>
<body style="{_STYLES["body"]}">
    <p>{safe["inviter"]} invited you to join <strong>{safe["tenant"]}</strong>
    as <strong>{safe["role"]}</strong>.</p>
    <p><a href="{safe["url"]}" style="{_STYLES["button"]}">Join {safe["tenant"]}</a></p>
    <p style="{_STYLES["note"]}">Link not working? Open {safe["url"]}</p>
    <p style="{_STYLES["note"]}">Not expecting this? Ignore this email or decline the
    invitation from the link above.</p>
</body>
</html>"""
    text = (
        f"{inviter_name} invited you to join {tenant_name} as {label}.\n\n"
        f"Accept the invitation: {accept_url}\n"
    )
    return {
        "subject": f"You've been invited to join {tenant_name} as {label}",
        "html": body,
        "text": text,
    }


def send_invitation_email(
    to: str,
    tenant_name: str,
    role: str,
    inviter_name: str,
    accept_url: str,
) -> bool:
    """Send one invitation email.

    Returns:
        True when Resend accepted the message, or when no API key is configured
        (development: the send is only logged). False on provider error or timeout.
    """
    settings = get_settings()
    if not settings.resend_api_key:
        logger.warning(
            "RESEND_API_KEY not set - invitation email not sent",
            to=loggable_email(to),
        )
        return True

    resend.api_key = settings.resend_api_key
    params: dict[str, Any] = {
        "from": settings.email_from,
        "to": [to],
        **build_invitation_message(tenant_name, role, inviter_name, accept_url),
    }

    future = _email_executor.submit(resend.Emails.send, params)
    try:
        future.result(timeout=settings.email_send_timeout_seconds)
    except FuturesTimeoutError:
        logger.error(
            "Invitation email timed out",
            to=loggable_email(to),
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Invitation email failed", to=loggable_email(to), error=str(e))
        return False

    logger.info("Invitation email sent", to=loggable_email(to))
    return True


class EmailNotifier:
    """Notifier backed by Resend email."""

    def send_invitation(
        self,
        contact_address: str,
        tenant_name: str,
        role: str,
        inviter_label: str,
        accept_link: str,
    ) -> bool:
        return send_invitation_email(
            to=contact_address,
            tenant_name=tenant_name,
            role=role,
            inviter_name=inviter_label,
            accept_url=accept_link,
        )
