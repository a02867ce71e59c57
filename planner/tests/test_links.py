from uuid import UUID

import pytest

from planner.errors import ValidationError
from planner.links import DeepLink, event_link, parse_link, rsvp_link

EVENT_ID = UUID("6f1c2a8e-3b4d-4e5f-8a9b-0c1d2e3f4a5b")
GUEST_ID = UUID("0a1b2c3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d")


def test_event_link():
    assert event_link(EVENT_ID) == "planner://event/6f1c2a8e-3b4d-4e5f-8a9b-0c1d2e3f4a5b"


def test_rsvp_link_with_custom_scheme():
    assert rsvp_link(EVENT_ID, GUEST_ID, scheme="eventapp") == (
        "eventapp://rsvp/6f1c2a8e-3b4d-4e5f-8a9b-0c1d2e3f4a5b/0a1b2c3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d"
    )


def test_parse_event_link():
    assert parse_link(event_link(EVENT_ID)) == DeepLink(kind="event", event_id=EVENT_ID)


def test_parse_rsvp_link():
    link = parse_link(rsvp_link(EVENT_ID, GUEST_ID) + "/")

    assert link == DeepLink(kind="rsvp", event_id=EVENT_ID, guest_id=GUEST_ID)


@pytest.mark.parametrize(
    "link",
    [
        "",
        "https://event/6f1c2a8e-3b4d-4e5f-8a9b-0c1d2e3f4a5b",
        "planner://event/not-a-uuid",
        "planner://event",
        "planner://rsvp/6f1c2a8e-3b4d-4e5f-8a9b-0c1d2e3f4a5b",
        "planner://tickets/6f1c2a8e-3b4d-4e5f-8a9b-0c1d2e3f4a5b",
    ],
)
def test_parse_rejects_malformed_links(link):
    with pytest.raises(ValidationError) as exc_info:
        parse_link(link)

    assert exc_info.value.operation == "parse_link"
