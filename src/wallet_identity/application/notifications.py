"""Notification dispatch for the authentication flows.

Welcome emails are best effort: they are queued while a flow runs and
only handed to background tasks once the caller has committed the state
change (``release``). A slow or failing mail provider therefore never
lengthens or fails the request. Verification codes are different: the
caller needs to know whether delivery worked, so they are sent inline.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wallet_identity.infrastructure.email import EmailService

logger = logging.getLogger(__name__)

# Store references to fire-and-forget tasks to prevent garbage collection
_background_tasks: set[asyncio.Task] = set()


@dataclass(frozen=True)
class _WelcomeEmail:
    email: str
    name: str


class NotificationDispatcher:
    def __init__(self, email_service: EmailService):
        self._email_service = email_service
        self._pending: list[_WelcomeEmail] = []

    def enqueue_welcome(self, email: str, name: str) -> None:
        """Queue a welcome email until the current unit of work commits."""
        self._pending.append(_WelcomeEmail(email=email, name=name))

    def release(self) -> None:
        """Send queued welcome emails in the background."""
        pending, self._pending = self._pending, []
        for item in pending:
            task = asyncio.create_task(self._send_welcome(item))
            _background_tasks.add(task)
            task.add_done_callback(_background_tasks.discard)

    def discard(self) -> None:
        if self._pending:
            logger.debug("Dropping %d queued welcome email(s)", len(self._pending))
        self._pending = []

    async def send_verification_code(self, email: str, code: str, name: str) -> None:
        """Send a verification code; raises if the mailer fails."""
        await asyncio.to_thread(
            self._email_service.send_verification_code_email,
            email,
            code,
            name,
        )

    async def _send_welcome(self, item: _WelcomeEmail) -> None:
        try:
            await asyncio.to_thread(
                self._email_service.send_welcome_email,
                item.email,
                item.name,
            )
        except Exception as e:
            logger.error("Failed to send welcome email to %s: %s", item.email, e)


async def wait_for_notifications() -> None:
    """Wait until all background notification tasks have finished."""
    if _background_tasks:
        await asyncio.gather(*list(_background_tasks), return_exceptions=True)
