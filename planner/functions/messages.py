"""Invite text and the per-channel URLs that carry it.

The text is channel agnostic; a channel only needs the message plus the
guest's phone number or e-mail address.
"""

from collections.abc import Iterable
from urllib.parse import quote

from planner.config.settings import settings
from planner.dates import as_utc, format_day_and_time, format_day_and_time_with_year
from planner.events.repository.orm_models import Event, EventFunction, Guest
from planner.functions.dtos import InviteChannel
from planner.links import rsvp_link


def build_invite_message(guest: Guest, event: Event, functions: Iterable[EventFunction] = ()) -> str:
    lines = [f"Hi {guest.first_name or 'there'}!", "", f"You're invited to {event.title}!", ""]

    functions = sorted(functions, key=lambda f: as_utc(f.starts_at))
    if functions:
        lines.append("Functions:")
        for function in functions:
            line = f"- {function.name}: {format_day_and_time(function.starts_at)}"
            if function.location_name:
                line += f" at {function.location_name}"
            lines.append(line)
    else:
        lines.append(f"Date: {format_day_and_time_with_year(event.starts_at)}")
        if event.location_name:
            lines.append(f"Location: {event.location_name}")
    lines.append("")

    lines.append(
        f"Please RSVP in the {settings.app_name} app to let us know if you can make it!"
    )
    lines.append("")
    lines.append(f"RSVP here: {rsvp_link(event.uuid, guest.uuid)}")
    lines.append("")
    lines.append(f"Download {settings.app_name}: {settings.app_install_url}")
    return "\n".join(lines)


def invite_subject(event: Event) -> str:
    return f"You're Invited to {event.title}!"


def _encode(value: str) -> str:
    return quote(value, safe="")


def clean_phone(phone: str) -> str:
    for char in " -()":
        phone = phone.replace(char, "")
    return phone


def whatsapp_url(phone: str, message: str) -> str:
    return f"whatsapp://send?phone={clean_phone(phone)}&text={_encode(message)}"


def sms_url(phone: str, message: str) -> str:
    return f"sms:{phone}&body={_encode(message)}"


def mailto_url(email: str, subject: str, message: str) -> str:
    return f"mailto:{email}?subject={_encode(subject)}&body={_encode(message)}"


def channel_url(channel: InviteChannel, guest: Guest, event: Event, message: str) -> str | None:
    """URL that opens ``channel`` with the message, or ``None`` when the guest lacks the contact."""
    channel = InviteChannel(channel)
    if channel == InviteChannel.WHATSAPP and guest.phone:
        return whatsapp_url(guest.phone, message)
    if channel == InviteChannel.SMS and guest.phone:
        return sms_url(guest.phone, message)
    if channel == InviteChannel.EMAIL and guest.email:
        return mailto_url(guest.email, invite_subject(event), message)
    if channel in (InviteChannel.IN_APP_LINK, InviteChannel.COPIED):
        return rsvp_link(event.uuid, guest.uuid)
    return None
