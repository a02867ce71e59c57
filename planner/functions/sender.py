"""Delivering invites through a channel.

A dispatcher hands one guest's invite text to a channel. Link channels need no
I/O; the phone channels produce a URL for the client to open; e-mail goes out
over SMTP.
"""

import asyncio
import logging
import smtplib
from abc import ABC, abstractmethod
from collections.abc import Iterable
from email.mime.text import MIMEText
from uuid import UUID

from planner.config.settings import settings
from planner.events.repository.orm_models import Event, EventFunction, FunctionInvite, Guest
from planner.functions.dtos import InviteChannel
from planner.functions.invitations import create_invite, find_invite, mark_sent
from planner.functions.messages import build_invite_message, channel_url, invite_subject

logger = logging.getLogger(__name__)


class InviteDispatcher(ABC):
    @abstractmethod
    async def dispatch(
        self, channel: InviteChannel, guest: Guest, event: Event, message: str
    ) -> bool:
        """Deliver ``message``; returns False when the guest cannot be reached on ``channel``."""
        raise NotImplementedError


class LinkDispatcher(InviteDispatcher):
    """Succeeds whenever the channel can be addressed for this guest."""

    async def dispatch(
        self, channel: InviteChannel, guest: Guest, event: Event, message: str
    ) -> bool:
        return channel_url(channel, guest, event, message) is not None


class SMTPInviteDispatcher(LinkDispatcher):
    def __init__(self):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_password
        self.from_address = settings.emails_from

    def _create_message(self, to_address: str, subject: str, text_body: str) -> MIMEText:
        msg = MIMEText(text_body, "plain")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address
        return msg

    def _send(self, msg: MIMEText) -> None:
        with smtplib.SMTP(self.host, self.port) as server:
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

    async def dispatch(
        self, channel: InviteChannel, guest: Guest, event: Event, message: str
    ) -> bool:
        if InviteChannel(channel) != InviteChannel.EMAIL:
            return await super().dispatch(channel, guest, event, message)
        if not guest.email:
            return False
        msg = self._create_message(guest.email, invite_subject(event), message)
        await asyncio.to_thread(self._send, msg)
        return True


def prepare_invites(
    event: Event, guest: Guest, functions: Iterable[EventFunction]
) -> tuple[str, int]:
    """Create the guest's missing invites and render their message.

    Returns ``(message, invites_created)``.
    """
    functions = list(functions)
    created = 0
    for function in functions:
        before = len(function.invites)
        create_invite(guest, function)
        created += len(function.invites) - before
    return build_invite_message(guest, event, functions), created


async def deliver(
    dispatcher: InviteDispatcher,
    channel: InviteChannel,
    guest: Guest,
    event: Event,
    message: str,
) -> bool:
    """Dispatch one message; a raising dispatcher counts as a failed delivery."""
    try:
        delivered = await dispatcher.dispatch(channel, guest, event, message)
    except Exception:
        logger.warning("Sending invite to guest %s via %s failed", guest.uuid, channel, exc_info=True)
        delivered = False
    if not delivered:
        logger.warning("Invite for guest %s was not delivered via %s", guest.uuid, channel)
    return delivered


def mark_guest_sent(
    guest_id: UUID, functions: Iterable[EventFunction], channel: InviteChannel
) -> list[FunctionInvite]:
    """Mark the guest's invites to ``functions`` sent; functions without one are skipped."""
    marked = []
    for function in functions:
        invite = find_invite(function, guest_id)
        if invite is not None:
            marked.append(mark_sent(invite, channel))
    return marked
