"""Initial schema - events and everything they own

Revision ID: 3f2a9c1d7b10
Revises:
Create Date: 2026-10-17 12:00:00

"""
from typing import Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy_utils import UUIDType

# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None


def _uuid() -> UUIDType:
    return UUIDType(binary=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.current_timestamp(), nullable=False),
    ]


def _fk(table: str) -> sa.ForeignKey:
    return sa.ForeignKey(f'{table}.uuid', ondelete='CASCADE')


def upgrade() -> None:
    op.create_table(
        'events',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('timezone', sa.String(64), nullable=False),
        sa.Column('location_name', sa.String(255), nullable=True),
        sa.Column('location_address', sa.String(500), nullable=True),
        sa.Column('location_city', sa.String(255), nullable=True),
        sa.Column('capacity', sa.Integer, nullable=True),
        sa.Column('privacy', sa.Enum('public', 'unlisted', 'inviteOnly', name='event_privacy_enum'), nullable=False),
        sa.Column('category', sa.Enum('wedding', 'party', 'office', 'conference', 'concert', 'meetup', 'custom', name='event_category_enum'), nullable=False),
        sa.Column('enabled_features', sa.JSON, nullable=False),
        sa.Column('is_draft', sa.Boolean, nullable=False),
        sa.Column('host_id', _uuid(), nullable=True, index=True),
        sa.Column('version', sa.Integer, nullable=False),
    )

    op.create_table(
        'guests',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('event_id', _uuid(), _fk('events'), nullable=False, index=True),
        sa.Column('user_id', _uuid(), nullable=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('status', sa.Enum('pending', 'attending', 'maybe', 'declined', 'waitlisted', name='rsvp_status_enum'), nullable=False),
        sa.Column('role', sa.Enum('guest', 'vip', 'cohost', 'vendor', name='guest_role_enum'), nullable=False),
        sa.Column('plus_one_count', sa.Integer, nullable=False),
        sa.Column('meal_choice', sa.String(255), nullable=True),
        sa.Column('dietary_restrictions', sa.Text, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('assigned_tasks', sa.JSON, nullable=False),
        sa.Column('invited_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'party_members',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('guest_id', _uuid(), _fk('guests'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('relation', sa.Enum('spouse', 'partner', 'child', 'parent', 'sibling', 'friend', 'other', name='party_relationship_enum'), nullable=True),
        sa.Column('dietary_restrictions', sa.Text, nullable=True),
        sa.Column('position', sa.Integer, nullable=False),
    )

    op.create_table(
        'event_functions',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('event_id', _uuid(), _fk('events'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location_name', sa.String(255), nullable=True),
        sa.Column('location_address', sa.String(500), nullable=True),
        sa.Column('dress_code', sa.Enum('casual', 'smartCasual', 'cocktail', 'formal', 'blackTie', 'traditional', 'custom', name='dress_code_enum'), nullable=True),
        sa.Column('custom_dress_code', sa.String(255), nullable=True),
        sa.Column('sort_order', sa.Integer, nullable=False),
    )

    op.create_table(
        'function_invites',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('guest_id', _uuid(), _fk('guests'), nullable=False, index=True),
        sa.Column('function_id', _uuid(), _fk('event_functions'), nullable=False, index=True),
        sa.Column('status', sa.Enum('notSent', 'sent', 'responded', name='invite_status_enum'), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sent_via', sa.Enum('whatsapp', 'sms', 'email', 'inAppLink', 'copied', name='invite_channel_enum'), nullable=True),
        sa.Column('response', sa.Enum('yes', 'no', 'maybe', name='rsvp_response_enum'), nullable=True),
        sa.Column('party_size', sa.Integer, nullable=False),
        sa.Column('note', sa.Text, nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('guest_id', 'function_id', name='uq_function_invites_guest_function'),
    )

    op.create_table(
        'seating_tables',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('event_id', _uuid(), _fk('events'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('capacity', sa.Integer, nullable=False),
    )

    op.create_table(
        'seat_assignments',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('event_id', _uuid(), _fk('events'), nullable=False, index=True),
        sa.Column('table_id', _uuid(), _fk('seating_tables'), nullable=False, index=True),
        sa.Column('guest_id', _uuid(), _fk('guests'), nullable=False, index=True),
        sa.Column('position', sa.Integer, nullable=False),
        sa.UniqueConstraint('event_id', 'guest_id', name='uq_seat_assignments_event_guest'),
    )

    op.create_table(
        'budgets',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('event_id', _uuid(), _fk('events'), nullable=False, unique=True, index=True),
        sa.Column('total_budget', sa.Numeric(12, 2), nullable=False),
    )

    op.create_table(
        'budget_categories',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('budget_id', _uuid(), _fk('budgets'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('icon', sa.String(64), nullable=False),
        sa.Column('color', sa.String(32), nullable=False),
        sa.Column('sort_order', sa.Integer, nullable=False),
        sa.Column('allocated', sa.Numeric(12, 2), nullable=False),
    )

    op.create_table(
        'expenses',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('category_id', _uuid(), _fk('budget_categories'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_paid', sa.Boolean, nullable=False),
        sa.Column('paid_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('vendor_name', sa.String(255), nullable=True),
        sa.Column('paid_by_name', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
    )

    op.create_table(
        'payment_splits',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('budget_id', _uuid(), _fk('budgets'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('share_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(12, 2), nullable=False),
    )

    op.create_table(
        'event_members',
        sa.Column('uuid', _uuid(), primary_key=True),
        *_timestamps(),
        sa.Column('event_id', _uuid(), _fk('events'), nullable=False, index=True),
        sa.Column('user_id', _uuid(), nullable=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('role', sa.Enum('admin', 'manager', 'viewer', name='member_role_enum'), nullable=False),
        sa.Column('invite_status', sa.Enum('pending', 'accepted', 'declined', name='member_invite_status_enum'), nullable=False),
        sa.Column('invite_code', sa.String(6), nullable=True, index=True),
        sa.Column('invited_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('event_members')
    op.drop_table('payment_splits')
    op.drop_table('expenses')
    op.drop_table('budget_categories')
    op.drop_table('budgets')
    op.drop_table('seat_assignments')
    op.drop_table('seating_tables')
    op.drop_table('function_invites')
    op.drop_table('event_functions')
    op.drop_table('party_members')
    op.drop_table('guests')
    op.drop_table('events')
    for enum_name in (
        'member_invite_status_enum',
        'member_role_enum',
        'rsvp_response_enum',
        'invite_channel_enum',
        'invite_status_enum',
        'dress_code_enum',
        'party_relationship_enum',
        'guest_role_enum',
        'rsvp_status_enum',
        'event_category_enum',
        'event_privacy_enum',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
