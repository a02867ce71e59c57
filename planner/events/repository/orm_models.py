from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from planner.config.table_names import TableNames
from planner.dates import as_utc
from planner.events.dtos import EventCategory, EventPrivacy
from planner.functions.dtos import (
    DRESS_CODE_LABELS,
    DressCode,
    InviteChannel,
    InviteStatus,
    RSVPResponse,
)
from planner.guests.dtos import GuestRole, PartyRelationship, RSVPStatus
from planner.models.base import Base, TimeStamp, utcnow
from planner.team.dtos import MemberInviteStatus, MemberRole

ZERO = Decimal("0")


def _values(enum_cls):
    return [e.value for e in enum_cls]


def _fk(table: TableNames) -> ForeignKey:
    return ForeignKey(f"{table.value}.uuid", ondelete="CASCADE")


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)

    location_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    location_city: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Informational only, never enforced against the guest list
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    privacy: Mapped[EventPrivacy] = mapped_column(
        Enum(EventPrivacy, name="event_privacy_enum", values_callable=_values),
        default=EventPrivacy.INVITE_ONLY,
        nullable=False,
    )
    category: Mapped[EventCategory] = mapped_column(
        Enum(EventCategory, name="event_category_enum", values_callable=_values),
        default=EventCategory.PARTY,
        nullable=False,
    )
    enabled_features: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    is_draft: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    host_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    guests: Mapped[list["Guest"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="Guest.invited_at"
    )
    functions: Mapped[list["EventFunction"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="EventFunction.starts_at"
    )
    seating_tables: Mapped[list["SeatingTable"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="SeatingTable.created_at"
    )
    members: Mapped[list["EventMember"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="EventMember.invited_at"
    )
    budget: Mapped["Budget | None"] = relationship(
        cascade="all, delete-orphan", lazy="selectin", uselist=False
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Event {self.title}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    event_id: Mapped[UUID] = mapped_column(_fk(TableNames.EVENTS), nullable=False, index=True)
    # Optional link to a platform account; guests exist without one
    user_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[RSVPStatus] = mapped_column(
        Enum(RSVPStatus, name="rsvp_status_enum", values_callable=_values),
        default=RSVPStatus.PENDING,
        nullable=False,
    )
    role: Mapped[GuestRole] = mapped_column(
        Enum(GuestRole, name="guest_role_enum", values_callable=_values),
        default=GuestRole.GUEST,
        nullable=False,
    )
    plus_one_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    meal_choice: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_tasks: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    invited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    party_members: Mapped[list["PartyMember"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PartyMember.position",
        collection_class=ordering_list("position"),
    )
    # Deleting a guest deletes everything keyed to it in the event
    invites: Mapped[list["FunctionInvite"]] = relationship(cascade="all", lazy="selectin")
    seat_assignments: Mapped[list["SeatAssignment"]] = relationship(
        cascade="all", lazy="selectin"
    )

    @property
    def companion_count(self) -> int:
        return max(self.plus_one_count or 0, len(self.party_members))

    @property
    def total_headcount(self) -> int:
        return 1 + self.companion_count

    @property
    def has_responded(self) -> bool:
        return self.status not in (None, RSVPStatus.PENDING)

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else self.name

    @property
    def display_contact(self) -> str | None:
        return self.email or self.phone

    def __repr__(self) -> str:
        return f"<Guest {self.name} - {self.status}>"


class PartyMember(Base, TimeStamp):
    __tablename__ = TableNames.PARTY_MEMBERS.value

    guest_id: Mapped[UUID] = mapped_column(_fk(TableNames.GUESTS), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    relation: Mapped[PartyRelationship | None] = mapped_column(
        Enum(PartyRelationship, name="party_relationship_enum", values_callable=_values),
        nullable=True,
    )
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<PartyMember {self.name}>"


class EventFunction(Base, TimeStamp):
    __tablename__ = TableNames.EVENT_FUNCTIONS.value

    event_id: Mapped[UUID] = mapped_column(_fk(TableNames.EVENTS), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    location_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    dress_code: Mapped[DressCode | None] = mapped_column(
        Enum(DressCode, name="dress_code_enum", values_callable=_values),
        nullable=True,
    )
    custom_dress_code: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    invites: Mapped[list["FunctionInvite"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="FunctionInvite.created_at"
    )

    @property
    def display_dress_code(self) -> str | None:
        if self.dress_code is None:
            return None
        if self.dress_code == DressCode.CUSTOM and self.custom_dress_code:
            return self.custom_dress_code
        return DRESS_CODE_LABELS[DressCode(self.dress_code)]

    def __repr__(self) -> str:
        return f"<EventFunction {self.name}>"


class FunctionInvite(Base, TimeStamp):
    __tablename__ = TableNames.FUNCTION_INVITES.value
    __table_args__ = (
        UniqueConstraint("guest_id", "function_id", name="uq_function_invites_guest_function"),
    )

    guest_id: Mapped[UUID] = mapped_column(_fk(TableNames.GUESTS), nullable=False, index=True)
    function_id: Mapped[UUID] = mapped_column(
        _fk(TableNames.EVENT_FUNCTIONS), nullable=False, index=True
    )

    status: Mapped[InviteStatus] = mapped_column(
        Enum(InviteStatus, name="invite_status_enum", values_callable=_values),
        default=InviteStatus.NOT_SENT,
        nullable=False,
    )
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_via: Mapped[InviteChannel | None] = mapped_column(
        Enum(InviteChannel, name="invite_channel_enum", values_callable=_values),
        nullable=True,
    )
    # Non-null exactly when status is responded
    response: Mapped[RSVPResponse | None] = mapped_column(
        Enum(RSVPResponse, name="rsvp_response_enum", values_callable=_values),
        nullable=True,
    )
    party_size: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<FunctionInvite guest={self.guest_id} function={self.function_id} {self.status}>"


class SeatingTable(Base, TimeStamp):
    __tablename__ = TableNames.SEATING_TABLES.value

    event_id: Mapped[UUID] = mapped_column(_fk(TableNames.EVENTS), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    assignments: Mapped[list["SeatAssignment"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SeatAssignment.position",
        collection_class=ordering_list("position"),
    )

    @property
    def guest_ids(self) -> list[UUID]:
        return [a.guest_id for a in self.assignments]

    @property
    def remaining_seats(self) -> int:
        return max(0, self.capacity - len(self.assignments))

    @property
    def is_full(self) -> bool:
        return len(self.assignments) >= self.capacity

    def __repr__(self) -> str:
        return f"<SeatingTable {self.name} {len(self.assignments)}/{self.capacity}>"


class SeatAssignment(Base, TimeStamp):
    """The single guest -> table record of an event."""

    __tablename__ = TableNames.SEAT_ASSIGNMENTS.value
    __table_args__ = (
        UniqueConstraint("event_id", "guest_id", name="uq_seat_assignments_event_guest"),
    )

    event_id: Mapped[UUID] = mapped_column(_fk(TableNames.EVENTS), nullable=False, index=True)
    table_id: Mapped[UUID] = mapped_column(
        _fk(TableNames.SEATING_TABLES), nullable=False, index=True
    )
    guest_id: Mapped[UUID] = mapped_column(_fk(TableNames.GUESTS), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<SeatAssignment guest={self.guest_id} table={self.table_id}>"


class Budget(Base, TimeStamp):
    __tablename__ = TableNames.BUDGETS.value

    event_id: Mapped[UUID] = mapped_column(
        _fk(TableNames.EVENTS), nullable=False, unique=True, index=True
    )
    total_budget: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)

    categories: Mapped[list["BudgetCategory"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="BudgetCategory.sort_order"
    )
    splits: Mapped[list["PaymentSplit"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="PaymentSplit.created_at"
    )

    @property
    def expenses(self) -> list["Expense"]:
        return [e for c in self.categories for e in c.expenses]

    @property
    def total_allocated(self) -> Decimal:
        return sum((c.allocated for c in self.categories), ZERO)

    @property
    def total_spent(self) -> Decimal:
        return sum((c.spent for c in self.categories), ZERO)

    @property
    def remaining(self) -> Decimal:
        return self.total_budget - self.total_spent

    @property
    def percent_spent(self) -> float:
        if self.total_budget <= 0:
            return 0.0
        return float(self.total_spent / self.total_budget * 100)

    @property
    def total_paid(self) -> Decimal:
        return sum((e.amount for e in self.expenses if e.is_paid), ZERO)

    @property
    def total_pending(self) -> Decimal:
        return sum((e.amount for e in self.expenses if not e.is_paid), ZERO)

    @property
    def upcoming_payments(self) -> list["Expense"]:
        unpaid = [e for e in self.expenses if not e.is_paid and e.due_date is not None]
        return sorted(unpaid, key=lambda e: as_utc(e.due_date))

    def __repr__(self) -> str:
        return f"<Budget {self.total_budget}>"


class BudgetCategory(Base, TimeStamp):
    __tablename__ = TableNames.BUDGET_CATEGORIES.value

    budget_id: Mapped[UUID] = mapped_column(_fk(TableNames.BUDGETS), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), default="dollarsign.circle", nullable=False)
    color: Mapped[str] = mapped_column(String(32), default="purple", nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    allocated: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)

    expenses: Mapped[list["Expense"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin", order_by="Expense.created_at"
    )

    @property
    def spent(self) -> Decimal:
        """Sum of paid expenses; there is no stored counterpart."""
        return sum((e.amount for e in self.expenses if e.is_paid), ZERO)

    @property
    def remaining(self) -> Decimal:
        return self.allocated - self.spent

    @property
    def percent_spent(self) -> float:
        if self.allocated <= 0:
            return 0.0
        return float(self.spent / self.allocated * 100)

    @property
    def is_over_budget(self) -> bool:
        return self.allocated > 0 and self.spent > self.allocated

    def __repr__(self) -> str:
        return f"<BudgetCategory {self.name}>"


class Expense(Base, TimeStamp):
    __tablename__ = TableNames.EXPENSES.value

    category_id: Mapped[UUID] = mapped_column(
        _fk(TableNames.BUDGET_CATEGORIES), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Exactly one of these is set, matching is_paid
    paid_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    vendor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    paid_by_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Expense {self.name} {self.amount}>"


class PaymentSplit(Base, TimeStamp):
    __tablename__ = TableNames.PAYMENT_SPLITS.value

    budget_id: Mapped[UUID] = mapped_column(_fk(TableNames.BUDGETS), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    share_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=ZERO, nullable=False)

    @property
    def balance(self) -> Decimal:
        return self.share_amount - self.paid_amount

    @property
    def is_paid_up(self) -> bool:
        return self.paid_amount >= self.share_amount

    @property
    def owed_amount(self) -> Decimal:
        return max(ZERO, self.balance)

    def __repr__(self) -> str:
        return f"<PaymentSplit {self.name} {self.paid_amount}/{self.share_amount}>"


class EventMember(Base, TimeStamp):
    __tablename__ = TableNames.EVENT_MEMBERS.value

    event_id: Mapped[UUID] = mapped_column(_fk(TableNames.EVENTS), nullable=False, index=True)
    user_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, name="member_role_enum", values_callable=_values),
        default=MemberRole.VIEWER,
        nullable=False,
    )
    invite_status: Mapped[MemberInviteStatus] = mapped_column(
        Enum(MemberInviteStatus, name="member_invite_status_enum", values_callable=_values),
        default=MemberInviteStatus.PENDING,
        nullable=False,
    )
    # Only held while the invite is pending
    invite_code: Mapped[str | None] = mapped_column(String(6), nullable=True, index=True)
    invited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<EventMember {self.name} {self.role}>"
