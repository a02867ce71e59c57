import json
from uuid import uuid4

import pytest

from planner.events.router import EVENT_REMINDERS_URL, EVENT_SUMMARY_URL, EVENT_URL, EVENTS_URL, USER_EXPORT_URL
from planner.guests.router import GUEST_RSVP_URL, GUESTS_URL

EVENT_BODY = {
    "title": "Summer Wedding",
    "starts_at": "2030-06-15T19:00:00Z",
    "category": "wedding",
    "capacity": 2,
    "location_name": "Lakeside Gardens",
}


async def create_event(client, **overrides) -> dict:
    response = await client.post(EVENTS_URL, json={**EVENT_BODY, **overrides})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get_event(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        created = await create_event(client)
        response = await client.get(EVENT_URL.format(event_id=created["id"]))

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Summer Wedding"
    assert data["category"] == "wedding"
    assert data["privacy"] == "inviteOnly"
    assert data["version"] == 1
    assert data["share_link"] == f"planner://event/{created['id']}"
    assert "seating" in data["enabled_features"]


@pytest.mark.asyncio
async def test_create_event_with_blank_title(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        response = await client.post(EVENTS_URL, json={**EVENT_BODY, "title": "  "})

    assert response.status_code == 422
    assert response.json() == {
        "detail": "Title is required",
        "operation": "create_event",
        "entity": "Event",
        "entity_id": None,
    }


@pytest.mark.asyncio
async def test_get_unknown_event(client_factory, inmemory_overrides):
    event_id = uuid4()

    async with client_factory(inmemory_overrides) as client:
        response = await client.get(EVENT_URL.format(event_id=event_id))

    assert response.status_code == 404
    data = response.json()
    assert data["entity"] == "Event"
    assert data["entity_id"] == str(event_id)


@pytest.mark.asyncio
async def test_update_event_fields(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        created = await create_event(client)
        response = await client.patch(
            EVENT_URL.format(event_id=created["id"]),
            params={"expected_version": 1},
            json={"title": "Autumn Wedding", "location_name": None},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Autumn Wedding"
    assert data["location_name"] is None
    assert data["capacity"] == 2
    assert data["version"] == 2


@pytest.mark.asyncio
async def test_update_with_stale_version(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        created = await create_event(client)
        url = EVENT_URL.format(event_id=created["id"])
        await client.patch(url, json={"title": "First"})
        response = await client.patch(url, params={"expected_version": 1}, json={"title": "Second"})

    assert response.status_code == 409
    assert response.json()["operation"] == "update_event"


@pytest.mark.asyncio
async def test_delete_event(client_factory, inmemory_overrides, store):
    async with client_factory(inmemory_overrides) as client:
        created = await create_event(client)
        url = EVENT_URL.format(event_id=created["id"])
        response = await client.delete(url)
        missing = await client.get(url)

    assert response.status_code == 204
    assert missing.status_code == 404
    assert store.events == {}


@pytest.mark.asyncio
async def test_summary_counts(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        event_id = (await create_event(client))["id"]
        for name, status in (("Ann", "attending"), ("Ben", "attending"), ("Cat", "waitlisted")):
            guest = (await client.post(GUESTS_URL.format(event_id=event_id), json={"name": name})).json()
            await client.put(
                GUEST_RSVP_URL.format(event_id=event_id, guest_id=guest["id"]),
                json={"status": status},
            )
        response = await client.get(EVENT_SUMMARY_URL.format(event_id=event_id))

    assert response.status_code == 200
    assert response.json() == {
        "guest_count": 3,
        "attending_count": 2,
        "maybe_count": 0,
        "pending_count": 1,
        "declined_count": 0,
        "waitlisted_count": 1,
        "total_guest_headcount": 3,
        "attending_headcount": 2,
        "capacity": 2,
        "spots_remaining": 0,
        "is_full": True,
    }


@pytest.mark.asyncio
async def test_reminders(client_factory, inmemory_overrides):
    async with client_factory(inmemory_overrides) as client:
        event_id = (await create_event(client))["id"]
        response = await client.get(EVENT_REMINDERS_URL.format(event_id=event_id))

    assert response.status_code == 200
    reminders = response.json()
    assert [r["days_before"] for r in reminders] == [7, 1, 0]
    assert reminders[2]["title"] == "Summer Wedding is today!"
    assert reminders[0]["identifier"] == f"event_reminder_{event_id}_main_7"


@pytest.mark.asyncio
async def test_export_user_data(client_factory, inmemory_overrides):
    host_id = str(uuid4())

    async with client_factory(inmemory_overrides) as client:
        await create_event(client, host_id=host_id)
        await create_event(client, title="Other Party")
        response = await client.get(
            USER_EXPORT_URL.format(user_id=host_id), params={"name": "Pat Lee"}
        )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    data = json.loads(response.text)
    assert data["profile"] == {"id": host_id, "name": "Pat Lee"}
    assert [e["title"] for e in data["hostedEvents"]] == ["Summer Wedding"]
    assert data["attendingEvents"] == []
    assert data["tickets"] == []
