"""CLI commands for event planner management."""

import asyncio
from datetime import timedelta
from decimal import Decimal
from uuid import UUID

import typer

from planner.budget.write_model import SqlBudgetWriteModel
from planner.config.database import upgrade_database
from planner.config.logging import setup_logging
from planner.events.dtos import EventCategory
from planner.events.repository.read_models import SqlEventReadModel
from planner.events.repository.write_models import SqlEventWriteModel
from planner.functions.dtos import InviteChannel
from planner.functions.write_model import SqlFunctionWriteModel
from planner.guests.dtos import PartyRelationship, RSVPStatus
from planner.guests.write_model import SqlGuestWriteModel
from planner.models.base import utcnow
from planner.seating.write_model import SqlSeatingWriteModel
from planner.team.dtos import MemberRole
from planner.team.write_model import SqlTeamWriteModel

app = typer.Typer(help="CLI commands for event planner management")


async def _create_demo_event(host_id: UUID | None):
    """Async helper that builds an event touching every component."""
    starts_at = (utcnow() + timedelta(days=30)).replace(hour=17, minute=0, second=0, microsecond=0)
    event = await SqlEventWriteModel().create_event(
        title="Demo Wedding",
        starts_at=starts_at,
        ends_at=starts_at + timedelta(days=2),
        category=EventCategory.WEDDING,
        capacity=120,
        location_name="Lakeside Gardens",
        host_id=host_id,
    )

    guest_model = SqlGuestWriteModel()
    alice = await guest_model.add_guest(event.id, "Alice Smith", email="alice@example.com")
    bob = await guest_model.add_guest(event.id, "Bob Jones", phone="+1 555 010 2000", plus_one_count=1)
    carol = await guest_model.add_guest(event.id, "Carol White", email="carol@example.com")
    await guest_model.add_party_member(event.id, alice.id, "Sam Smith", PartyRelationship.SPOUSE)
    await guest_model.set_rsvp(event.id, bob.id, RSVPStatus.ATTENDING)
    guest_ids = [alice.id, bob.id, carol.id]

    function_model = SqlFunctionWriteModel(send_delay_seconds=0)
    mehndi = await function_model.add_function(
        event.id, "Mehndi", starts_at - timedelta(days=1), location_name="Garden Terrace"
    )
    reception = await function_model.add_function(
        event.id, "Reception", starts_at + timedelta(hours=5), location_name="Grand Hall"
    )
    result = await function_model.send_invites(
        event.id, guest_ids, [mehndi.id, reception.id], InviteChannel.IN_APP_LINK
    )

    seating_model = SqlSeatingWriteModel()
    table = await seating_model.create_table(event.id, "Table 1", capacity=8)
    for guest_id in guest_ids:
        await seating_model.assign_guest(event.id, table.id, guest_id)

    budget_model = SqlBudgetWriteModel()
    budget = await budget_model.create_budget(event.id, Decimal("25000"), with_default_categories=True)
    venue = budget.categories[0]
    await budget_model.set_allocation(event.id, venue.id, Decimal("8000"))
    await budget_model.add_expense(event.id, venue.id, "Venue deposit", Decimal("2500"), is_paid=True)

    member = await SqlTeamWriteModel().invite_member(
        event.id, "Dana Planner", email="dana@example.com", role=MemberRole.MANAGER
    )
    return event, result, member


@app.command()
def migrate():
    """Upgrade the database schema to the latest revision."""
    setup_logging()
    asyncio.run(upgrade_database())
    typer.secho("Database is up to date.", fg=typer.colors.GREEN)


@app.command()
def create_demo_event(host_id: str = typer.Option(None, help="User id of the host")):
    """Create a demo event with guests, functions, seating, budget and a team member."""
    setup_logging()
    # Typer doesn't support async directly, so use asyncio.run
    event, result, member = asyncio.run(_create_demo_event(UUID(host_id) if host_id else None))

    typer.secho("Event created successfully!", fg=typer.colors.GREEN)
    typer.secho(f"Event ID: {event.id}", fg=typer.colors.BLUE)
    typer.secho(f"Share link: {event.share_link}", fg=typer.colors.CYAN)
    typer.secho(
        f"Invites sent: {result.sent_count} guests, {result.failed_count} failed",
        fg=typer.colors.CYAN,
    )
    typer.secho(f"Team invite code for {member.name}: {member.invite_code}", fg=typer.colors.CYAN)


@app.command()
def export_data(
    user_id: str = typer.Argument(..., help="User id to export"),
    name: str = typer.Option(..., help="User's display name"),
    email: str = typer.Option(None, help="User's e-mail address"),
):
    """Print the data export document for a user."""
    document = asyncio.run(SqlEventReadModel().export_user_data(UUID(user_id), name, email))
    typer.echo(document)


@app.command()
def reminders(event_id: str = typer.Argument(..., help="Event id")):
    """List the upcoming reminder notifications for an event."""
    triggers = asyncio.run(SqlEventReadModel().reminders(UUID(event_id)))
    if not triggers:
        typer.secho("No upcoming reminders.", fg=typer.colors.YELLOW)
        return
    for reminder in triggers:
        typer.secho(f"{reminder.fire_at.isoformat()}  {reminder.title}", fg=typer.colors.BLUE)
        typer.echo(f"    {reminder.body}  ({reminder.identifier})")


if __name__ == "__main__":
    app()
