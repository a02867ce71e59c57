"""Tests for SqlFunctionWriteModel."""

from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from planner.errors import NotFoundError, ValidationError
from planner.events.repository.orm_models import FunctionInvite
from planner.events.repository.read_models import SqlEventReadModel
from planner.events.repository.write_models import SqlEventWriteModel, load_event
from planner.functions.dtos import InviteChannel, InviteStatus, RSVPResponse
from planner.functions.sender import InviteDispatcher
from planner.functions.write_model import SqlFunctionWriteModel
from planner.guests.write_model import SqlGuestWriteModel
from planner.notifications import NotificationPublisher

STARTS_AT = datetime(2030, 6, 15, 19, 0, tzinfo=UTC)


class InMemoryPublisher(NotificationPublisher):
    def __init__(self):
        self.events = []

    async def publish(self, event) -> None:
        self.events.append(event)


class FakeDispatcher(InviteDispatcher):
    """Delivers to everyone except the guests named in ``unreachable``."""

    def __init__(self, unreachable: set[str] | None = None):
        self.unreachable = unreachable or set()
        self.delivered = []

    async def dispatch(self, channel, guest, event, message) -> bool:
        if guest.name in self.unreachable:
            raise TimeoutError("no answer from gateway")
        self.delivered.append(guest.name)
        return True


@pytest_asyncio.fixture
async def event_id(db_session):
    event = await SqlEventWriteModel(session_overwrite=db_session).create_event(
        title="Summer Wedding", starts_at=STARTS_AT
    )
    return event.id


@pytest_asyncio.fixture
async def guest_ids(db_session, event_id):
    guests = SqlGuestWriteModel(session_overwrite=db_session)
    alice = await guests.add_guest(event_id, "Alice Smith", email="alice@example.com")
    bob = await guests.add_guest(event_id, "Bob Jones", phone="+15550100", plus_one_count=1)
    carol = await guests.add_guest(event_id, "Carol White")
    return [alice.id, bob.id, carol.id]


@pytest.fixture
def publisher():
    return InMemoryPublisher()


@pytest.fixture
def write_model(db_session, publisher):
    return SqlFunctionWriteModel(
        session_overwrite=db_session,
        publisher=publisher,
        dispatcher=FakeDispatcher(unreachable={"Carol White"}),
        send_delay_seconds=0,
    )


@pytest_asyncio.fixture
async def function_ids(write_model, event_id):
    mehndi = await write_model.add_function(event_id, "Mehndi", STARTS_AT - timedelta(days=1))
    reception = await write_model.add_function(event_id, "Reception", STARTS_AT)
    return [mehndi.id, reception.id]


async def invite_count(session) -> int:
    result = await session.execute(select(func.count()).select_from(FunctionInvite))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_add_function_validation(write_model, event_id):
    with pytest.raises(ValidationError):
        await write_model.add_function(event_id, "", STARTS_AT)


@pytest.mark.asyncio
async def test_create_invites_is_idempotent(db_session, write_model, event_id, guest_ids, function_ids):
    created = await write_model.create_invites(event_id, guest_ids, function_ids)
    again = await write_model.create_invites(event_id, guest_ids, function_ids)

    assert len(created) == 6
    assert again == []
    assert await invite_count(db_session) == 6
    bob_invites = [i for i in created if i.guest_id == guest_ids[1]]
    assert {i.party_size for i in bob_invites} == {2}


@pytest.mark.asyncio
async def test_record_response_upserts_one_record(db_session, write_model, publisher, event_id, guest_ids, function_ids):
    await write_model.record_response(event_id, function_ids[0], guest_ids[0], RSVPResponse.MAYBE)
    invite = await write_model.record_response(
        event_id, function_ids[0], guest_ids[0], RSVPResponse.YES, party_size=1, note="Can't wait"
    )

    assert invite.status == InviteStatus.RESPONDED
    assert invite.response == RSVPResponse.YES
    assert invite.note == "Can't wait"
    assert await invite_count(db_session) == 1
    assert [e.body for e in publisher.events] == [
        "Alice Smith might come to Mehndi at Summer Wedding",
        "Alice Smith is coming to Mehndi at Summer Wedding",
    ]


@pytest.mark.asyncio
async def test_mark_sent_and_reopen(write_model, event_id, guest_ids, function_ids):
    await write_model.create_invites(event_id, guest_ids[:1], function_ids[:1])

    sent = await write_model.mark_sent(event_id, function_ids[0], guest_ids[0], InviteChannel.EMAIL)
    assert sent.status == InviteStatus.SENT
    assert sent.sent_via == InviteChannel.EMAIL

    await write_model.record_response(event_id, function_ids[0], guest_ids[0], RSVPResponse.NO)
    reopened = await write_model.reopen_invite(event_id, function_ids[0], guest_ids[0])

    assert reopened.status == InviteStatus.SENT
    assert reopened.response is None


@pytest.mark.asyncio
async def test_mark_sent_without_invite(write_model, event_id, guest_ids, function_ids):
    with pytest.raises(NotFoundError):
        await write_model.mark_sent(event_id, function_ids[0], guest_ids[0], InviteChannel.SMS)


@pytest.mark.asyncio
async def test_send_invites_continues_past_failures(db_session, write_model, event_id, guest_ids, function_ids):
    result = await write_model.send_invites(event_id, guest_ids, function_ids, InviteChannel.IN_APP_LINK)

    assert result.sent_count == 2
    assert result.failed_count == 1
    assert result.failed_guest_ids == [guest_ids[2]]
    assert result.created_invites == 6
    assert write_model.dispatcher.delivered == ["Alice Smith", "Bob Jones"]

    event = await load_event(db_session, event_id)
    statuses = {(i.guest_id, i.status) for f in event.functions for i in f.invites}
    assert (guest_ids[0], InviteStatus.SENT) in statuses
    assert (guest_ids[2], InviteStatus.NOT_SENT) in statuses
    assert (guest_ids[2], InviteStatus.SENT) not in statuses


@pytest.mark.asyncio
async def test_send_invites_to_unknown_guest(write_model, event_id, function_ids):
    with pytest.raises(NotFoundError):
        await write_model.send_invites(event_id, [uuid4()], function_ids, InviteChannel.SMS)


@pytest.mark.asyncio
async def test_remove_function_drops_its_invites(db_session, write_model, event_id, guest_ids, function_ids):
    await write_model.create_invites(event_id, guest_ids, function_ids)

    await write_model.remove_function(event_id, function_ids[0])

    assert await invite_count(db_session) == 3


@pytest.mark.asyncio
async def test_invite_message_for_invited_functions(db_session, write_model, event_id, guest_ids, function_ids):
    await write_model.create_invites(event_id, guest_ids[:1], function_ids[1:])

    message = await SqlEventReadModel(session_overwrite=db_session).invite_message(
        event_id, guest_ids[0]
    )

    assert message.subject == "You're Invited to Summer Wedding!"
    assert "- Reception:" in message.body
    assert "Mehndi" not in message.body
    assert set(message.channel_urls) == {
        InviteChannel.EMAIL,
        InviteChannel.IN_APP_LINK,
        InviteChannel.COPIED,
    }
    assert message.channel_urls[InviteChannel.EMAIL].startswith("mailto:alice@example.com?")


@pytest.mark.asyncio
async def test_send_invites_dispatches_with_no_session_open(session_maker):
    open_sessions = []

    @asynccontextmanager
    async def session_manager(auto_commit=True, session_overwrite=None):
        async with session_maker() as session:
            open_sessions.append(session)
            try:
                yield session
            finally:
                open_sessions.remove(session)

    class SessionCheckingDispatcher(InviteDispatcher):
        def __init__(self):
            self.open_during_dispatch = []

        async def dispatch(self, channel, guest, event, message) -> bool:
            self.open_during_dispatch.append(len(open_sessions))
            return True

    async with session_maker() as session:
        event = await SqlEventWriteModel(session_overwrite=session).create_event(
            title="Summer Wedding", starts_at=STARTS_AT
        )
        guests = SqlGuestWriteModel(session_overwrite=session)
        guest_ids = [(await guests.add_guest(event.id, name)).id for name in ("Alice Smith", "Bob Jones")]
        mehndi = await SqlFunctionWriteModel(session_overwrite=session).add_function(
            event.id, "Mehndi", STARTS_AT - timedelta(days=1)
        )
        await session.commit()

    dispatcher = SessionCheckingDispatcher()
    write_model = SqlFunctionWriteModel(dispatcher=dispatcher, send_delay_seconds=0)
    write_model.async_session_manager = session_manager

    result = await write_model.send_invites(event.id, guest_ids, [mehndi.id], InviteChannel.COPIED)

    assert result.sent_count == 2
    assert dispatcher.open_during_dispatch == [0, 0]
    async with session_maker() as session:
        stored = await load_event(session, event.id)
        assert [i.status for i in stored.functions[0].invites] == [InviteStatus.SENT, InviteStatus.SENT]
