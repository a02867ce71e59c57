"""Deep links into the app.

``{scheme}://event/{eventId}`` opens an event and
``{scheme}://rsvp/{eventId}/{guestId}`` opens a guest's RSVP page. Ids are the
canonical lowercase UUID strings.
"""

from dataclasses import dataclass
from uuid import UUID

from planner.config.settings import settings
from planner.errors import ValidationError


@dataclass(frozen=True)
class DeepLink:
    kind: str
    event_id: UUID
    guest_id: UUID | None = None


def event_link(event_id: UUID, scheme: str | None = None) -> str:
    return f"{scheme or settings.link_scheme}://event/{event_id}"


def rsvp_link(event_id: UUID, guest_id: UUID, scheme: str | None = None) -> str:
    return f"{scheme or settings.link_scheme}://rsvp/{event_id}/{guest_id}"


def _invalid(link: str) -> ValidationError:
    return ValidationError(f"Not a valid link: {link!r}", operation="parse_link", entity="DeepLink")


def parse_link(link: str, scheme: str | None = None) -> DeepLink:
    prefix = f"{scheme or settings.link_scheme}://"
    if not link or not link.startswith(prefix):
        raise _invalid(link)

    parts = link[len(prefix):].rstrip("/").split("/")
    try:
        if parts[0] == "event" and len(parts) == 2:
            return DeepLink(kind="event", event_id=UUID(parts[1]))
        if parts[0] == "rsvp" and len(parts) == 3:
            return DeepLink(kind="rsvp", event_id=UUID(parts[1]), guest_id=UUID(parts[2]))
    except ValueError:
        raise _invalid(link) from None
    raise _invalid(link)
