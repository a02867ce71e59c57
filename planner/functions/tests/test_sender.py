from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from planner.functions import invitations
from planner.functions.dtos import InviteChannel, InviteStatus
from planner.functions.sender import (
    InviteDispatcher,
    LinkDispatcher,
    SMTPInviteDispatcher,
    deliver,
    mark_guest_sent,
    prepare_invites,
)
from planner.guests import party


class RecordingDispatcher(InviteDispatcher):
    """Dispatcher that records messages and fails for the given guest names."""

    def __init__(self, failing: set[str] | None = None, raising: set[str] | None = None):
        self.failing = failing or set()
        self.raising = raising or set()
        self.sent = []

    async def dispatch(self, channel, guest, event, message) -> bool:
        if guest.name in self.raising:
            raise ConnectionError("channel unavailable")
        if guest.name in self.failing:
            return False
        self.sent.append((channel, guest.name, message))
        return True


@pytest.fixture
def functions(event, starts_at):
    return [
        invitations.add_function(event, "Mehndi", starts_at - timedelta(days=1)),
        invitations.add_function(event, "Reception", starts_at),
    ]


@pytest.mark.asyncio
async def test_delivered_invites_are_marked_sent(event, functions):
    guest = party.add_guest(event, "Alice Smith")
    dispatcher = RecordingDispatcher()

    message, created = prepare_invites(event, guest, functions)
    delivered = await deliver(dispatcher, InviteChannel.IN_APP_LINK, guest, event, message)
    marked = mark_guest_sent(guest.uuid, functions, InviteChannel.IN_APP_LINK)

    assert delivered is True
    assert created == 2
    assert len(marked) == 2
    assert [i.status for i in guest.invites] == [InviteStatus.SENT, InviteStatus.SENT]
    channel, name, sent_message = dispatcher.sent[0]
    assert channel == InviteChannel.IN_APP_LINK
    assert "Functions:" in sent_message


def test_prepare_invites_reuses_existing_invites(event, functions):
    guest = party.add_guest(event, "Alice Smith")
    invitations.create_invite(guest, functions[0])

    _, created = prepare_invites(event, guest, functions)

    assert created == 1
    assert len(guest.invites) == 2


def test_mark_guest_sent_skips_functions_without_invite(event, functions):
    guest = party.add_guest(event, "Alice Smith")
    invitations.create_invite(guest, functions[0])

    marked = mark_guest_sent(guest.uuid, functions, InviteChannel.SMS)

    assert [i.function_id for i in marked] == [functions[0].uuid]


@pytest.mark.asyncio
@pytest.mark.parametrize("dispatcher", [
    RecordingDispatcher(failing={"Alice Smith"}),
    RecordingDispatcher(raising={"Alice Smith"}),
])
async def test_failed_delivery(event, dispatcher):
    guest = party.add_guest(event, "Alice Smith")

    assert await deliver(dispatcher, InviteChannel.SMS, guest, event, "Hi") is False


@pytest.mark.asyncio
async def test_link_dispatcher_needs_contact(event):
    dispatcher = LinkDispatcher()
    reachable = party.add_guest(event, "Bob Jones", phone="+15550100")
    unreachable = party.add_guest(event, "Carol White")

    assert await dispatcher.dispatch(InviteChannel.WHATSAPP, reachable, event, "Hi") is True
    assert await dispatcher.dispatch(InviteChannel.WHATSAPP, unreachable, event, "Hi") is False
    assert await dispatcher.dispatch(InviteChannel.IN_APP_LINK, unreachable, event, "Hi") is True


@pytest.mark.asyncio
async def test_smtp_dispatcher_sends_mail(event, monkeypatch):
    dispatcher = SMTPInviteDispatcher()
    send = MagicMock()
    monkeypatch.setattr(dispatcher, "_send", send)
    guest = party.add_guest(event, "Alice Smith", email="alice@example.com")

    assert await dispatcher.dispatch(InviteChannel.EMAIL, guest, event, "Hi Alice!") is True

    msg = send.call_args.args[0]
    assert msg["To"] == "alice@example.com"
    assert msg["Subject"] == "You're Invited to Summer Wedding!"
    assert msg.get_payload() == "Hi Alice!"


@pytest.mark.asyncio
async def test_smtp_dispatcher_skips_guest_without_email(event, monkeypatch):
    dispatcher = SMTPInviteDispatcher()
    send = MagicMock()
    monkeypatch.setattr(dispatcher, "_send", send)
    guest = party.add_guest(event, "Carol White")

    assert await dispatcher.dispatch(InviteChannel.EMAIL, guest, event, "Hi") is False
    send.assert_not_called()
