from uuid import uuid4

import pytest

from planner.events.router import EVENTS_URL
from planner.functions.router import (
    FUNCTION_URL,
    FUNCTIONS_URL,
    INVITE_MESSAGE_URL,
    INVITE_RESPONSE_URL,
    INVITE_SENT_URL,
    INVITES_URL,
    SEND_INVITES_URL,
)
from planner.guests.router import GUESTS_URL


@pytest.fixture
async def client(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        yield client


@pytest.fixture
async def event_id(client):
    response = await client.post(
        EVENTS_URL, json={"title": "Summer Wedding", "starts_at": "2030-06-15T19:00:00Z"}
    )
    return response.json()["id"]


@pytest.fixture
async def guests(client, event_id):
    url = GUESTS_URL.format(event_id=event_id)
    alice = (await client.post(url, json={"name": "Alice Smith", "phone": "+15550100"})).json()
    bob = (await client.post(url, json={"name": "Bob Jones", "plus_one_count": 1})).json()
    return alice, bob


@pytest.fixture
async def function_id(client, event_id):
    response = await client.post(
        FUNCTIONS_URL.format(event_id=event_id),
        json={
            "name": "Mehndi",
            "starts_at": "2030-06-14T18:00:00Z",
            "location_name": "Garden Terrace",
            "dress_code": "traditional",
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
async def test_list_functions(client, event_id, function_id):
    response = await client.get(FUNCTIONS_URL.format(event_id=event_id))

    assert response.status_code == 200
    [function] = response.json()
    assert function["id"] == function_id
    assert function["dress_code"] == "Traditional"
    assert function["summary"]["invited_count"] == 0


@pytest.mark.asyncio
async def test_function_end_before_start(client, event_id):
    response = await client.post(
        FUNCTIONS_URL.format(event_id=event_id),
        json={"name": "Dinner", "starts_at": "2030-06-14T18:00:00Z", "ends_at": "2030-06-14T17:00:00Z"},
    )

    assert response.status_code == 422
    assert response.json()["entity"] == "EventFunction"


@pytest.mark.asyncio
async def test_function_with_naive_end_time(client, event_id):
    url = FUNCTIONS_URL.format(event_id=event_id)

    accepted = await client.post(
        url, json={"name": "Dinner", "starts_at": "2030-06-14T18:00:00Z", "ends_at": "2030-06-14T21:00:00"}
    )
    rejected = await client.post(
        url, json={"name": "Dinner", "starts_at": "2030-06-14T18:00:00Z", "ends_at": "2030-06-14T17:00:00"}
    )

    assert accepted.status_code == 201
    assert rejected.status_code == 422
    assert rejected.json()["detail"] == "End time cannot be before start time"


@pytest.mark.asyncio
async def test_create_invites_twice(client, event_id, guests, function_id):
    body = {"guest_ids": [g["id"] for g in guests], "function_ids": [function_id]}

    first = await client.post(INVITES_URL.format(event_id=event_id), json=body)
    second = await client.post(INVITES_URL.format(event_id=event_id), json=body)

    assert first.status_code == 201
    assert [i["party_size"] for i in first.json()] == [1, 2]
    assert second.json() == []


@pytest.mark.asyncio
async def test_send_invites_counts_unreachable_guests(client, event_id, guests, function_id):
    alice, bob = guests

    response = await client.post(
        SEND_INVITES_URL.format(event_id=event_id),
        json={"guest_ids": [alice["id"], bob["id"]], "function_ids": [function_id], "channel": "sms"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "sent_count": 1,
        "failed_count": 1,
        "created_invites": 2,
        "failed_guest_ids": [bob["id"]],
    }


@pytest.mark.asyncio
async def test_respond_then_reopen(client, event_id, guests, function_id):
    alice, _ = guests
    url = INVITE_RESPONSE_URL.format(event_id=event_id, function_id=function_id, guest_id=alice["id"])

    await client.put(url, json={"response": "maybe"})
    answered = await client.put(url, json={"response": "no", "party_size": 3})
    summary = (await client.get(FUNCTIONS_URL.format(event_id=event_id))).json()[0]["summary"]
    reopened = await client.delete(url)

    assert answered.status_code == 200
    assert answered.json()["status"] == "responded"
    assert answered.json()["party_size"] == 0
    assert summary["invited_count"] == 1
    assert summary["declined_count"] == 1
    assert reopened.json()["status"] == "notSent"
    assert reopened.json()["response"] is None


@pytest.mark.asyncio
async def test_accept_after_declining(client, event_id, guests, function_id):
    _, bob = guests
    url = INVITE_RESPONSE_URL.format(event_id=event_id, function_id=function_id, guest_id=bob["id"])

    await client.put(url, json={"response": "no"})
    response = await client.put(url, json={"response": "yes"})
    summary = (await client.get(FUNCTIONS_URL.format(event_id=event_id))).json()[0]["summary"]

    assert response.json()["party_size"] == 2
    assert summary["attending_headcount"] == 2


@pytest.mark.asyncio
async def test_mark_sent(client, event_id, guests, function_id):
    alice, _ = guests
    await client.post(
        INVITES_URL.format(event_id=event_id),
        json={"guest_ids": [alice["id"]], "function_ids": [function_id]},
    )

    response = await client.post(
        INVITE_SENT_URL.format(event_id=event_id, function_id=function_id, guest_id=alice["id"]),
        json={"channel": "whatsapp"},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "sent"
    assert response.json()["sent_via"] == "whatsapp"


@pytest.mark.asyncio
async def test_invite_message(client, event_id, guests, function_id):
    alice, _ = guests

    response = await client.get(
        INVITE_MESSAGE_URL.format(event_id=event_id, guest_id=alice["id"]),
        params={"function_ids": [function_id]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["subject"] == "You're Invited to Summer Wedding!"
    assert data["body"].startswith("Hi Alice!")
    assert "- Mehndi: Friday, Jun 14 at 6:00 PM at Garden Terrace" in data["body"]
    assert set(data["channel_urls"]) == {"whatsapp", "sms", "inAppLink", "copied"}
    assert data["channel_urls"]["sms"].startswith("sms:+15550100&body=Hi%20Alice%21")


@pytest.mark.asyncio
async def test_remove_unknown_function(client, event_id):
    response = await client.delete(FUNCTION_URL.format(event_id=event_id, function_id=uuid4()))

    assert response.status_code == 404
    assert response.json()["operation"] == "remove_function"
