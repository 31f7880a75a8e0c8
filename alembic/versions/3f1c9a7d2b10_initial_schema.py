"""initial_schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, length=20)


def upgrade() -> None:
    """Upgrade schema - Members and volunteer tables."""

    # ── Members ──────────────────────────────────────────────────────
    op.create_table(
        'members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('marital_status', sa.String(length=20), nullable=True),
        sa.Column('profile_photo', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column(
            'membership_status',
            _enum('membership_status', 'pending', 'active', 'inactive'),
            nullable=False,
        ),
        sa.Column('join_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('updated_by', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_members_email', 'members', ['email'], unique=True)
    op.create_index('ix_members_date_of_birth', 'members', ['date_of_birth'])
    op.create_index('ix_members_membership_status', 'members', ['membership_status'])
    op.create_index('ix_members_join_date', 'members', ['join_date'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('color', sa.String(length=20), nullable=False),
        sa.Column(
            'category',
            _enum(
                'tag_category',
                'demographic', 'spiritual', 'interest', 'skill', 'role', 'other',
            ),
            nullable=False,
        ),
        sa.Column('is_system_tag', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)

    op.create_table(
        'member_tags',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('tag_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id', 'tag_id', name='uq_member_tag'),
    )
    op.create_index('ix_member_tags_member_id', 'member_tags', ['member_id'])
    op.create_index('ix_member_tags_tag_id', 'member_tags', ['tag_id'])

    op.create_table(
        'member_emergency_contacts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('contact_relationship', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
    )

    op.create_table(
        'member_preferences',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column(
            'communication_method',
            _enum('communication_method', 'email', 'phone', 'text', 'app'),
            nullable=False,
        ),
        sa.Column('newsletter', sa.Boolean(), nullable=False),
        sa.Column('event_notifications', sa.Boolean(), nullable=False),
        sa.Column(
            'privacy_level',
            _enum('privacy_level', 'public', 'members', 'leaders', 'private'),
            nullable=False,
        ),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
    )

    op.create_table(
        'spiritual_journeys',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('current_stage', sa.String(length=100), nullable=True),
        sa.Column('salvation_date', sa.Date(), nullable=True),
        sa.Column('baptism_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
    )

    op.create_table(
        'groups',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('group_type', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'group_memberships',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('group_id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column(
            'role',
            _enum('group_role', 'member', 'leader', 'assistant'),
            nullable=False,
        ),
        sa.Column('join_date', sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group_id', 'member_id', name='uq_group_membership'),
    )
    op.create_index('ix_group_memberships_group_id', 'group_memberships', ['group_id'])
    op.create_index('ix_group_memberships_member_id', 'group_memberships', ['member_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'attendance',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('event_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('attended', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_attendance_member_id', 'attendance', ['member_id'])
    op.create_index('ix_attendance_event_id', 'attendance', ['event_id'])

    op.create_table(
        'care_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column(
            'care_type',
            _enum('care_type', 'visit', 'call', 'prayer', 'counseling', 'other'),
            nullable=False,
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('care_giver', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_care_history_member_id', 'care_history', ['member_id'])

    # ── Volunteers ───────────────────────────────────────────────────
    # member_id and coordinator_id are soft references: no foreign key.
    op.create_table(
        'volunteers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('interests', sa.JSON(), nullable=False),
        sa.Column('preferred_ministries', sa.JSON(), nullable=False),
        sa.Column('availability', sa.JSON(), nullable=True),
        sa.Column('max_hours_per_week', sa.Integer(), nullable=True),
        sa.Column('transportation_available', sa.Boolean(), nullable=False),
        sa.Column('willing_to_travel', sa.Boolean(), nullable=False),
        sa.Column(
            'background_check',
            _enum(
                'background_check_status',
                'not_required', 'required', 'pending', 'in_progress',
                'approved', 'expired', 'rejected',
            ),
            nullable=False,
        ),
        sa.Column('emergency_contact', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_volunteers_member_id', 'volunteers', ['member_id'], unique=True)

    op.create_table(
        'volunteer_opportunities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('ministry', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('skills_required', sa.JSON(), nullable=False),
        sa.Column('min_age', sa.Integer(), nullable=True),
        sa.Column('max_age', sa.Integer(), nullable=True),
        sa.Column('background_check_required', sa.Boolean(), nullable=False),
        sa.Column('training_required', sa.JSON(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('recurring_schedule', sa.String(length=200), nullable=True),
        sa.Column('estimated_hours', sa.Float(), nullable=True),
        sa.Column('max_volunteers', sa.Integer(), nullable=True),
        sa.Column('current_volunteers', sa.Integer(), nullable=False),
        sa.Column(
            'urgency',
            _enum('opportunity_urgency', 'low', 'normal', 'high', 'urgent'),
            nullable=False,
        ),
        sa.Column(
            'status',
            _enum(
                'opportunity_status',
                'draft', 'open', 'filled', 'in_progress',
                'completed', 'cancelled', 'on_hold',
            ),
            nullable=False,
        ),
        sa.Column('coordinator_id', sa.Uuid(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'max_volunteers IS NULL OR current_volunteers <= max_volunteers',
            name='ck_opportunity_capacity',
        ),
    )
    op.create_index(
        'ix_volunteer_opportunities_ministry', 'volunteer_opportunities', ['ministry']
    )
    op.create_index(
        'ix_volunteer_opportunities_start_date', 'volunteer_opportunities', ['start_date']
    )
    op.create_index(
        'ix_volunteer_opportunities_status', 'volunteer_opportunities', ['status']
    )
    op.create_index(
        'ix_volunteer_opportunities_coordinator_id',
        'volunteer_opportunities',
        ['coordinator_id'],
    )

    op.create_table(
        'volunteer_signups',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('volunteer_id', sa.Uuid(), nullable=False),
        sa.Column('opportunity_id', sa.Uuid(), nullable=False),
        sa.Column(
            'status',
            _enum(
                'signup_status',
                'pending', 'confirmed', 'declined', 'completed', 'waitlisted', 'cancelled',
            ),
            nullable=False,
        ),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('scheduled_date', sa.Date(), nullable=True),
        sa.Column('estimated_hours', sa.Float(), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('confirmed_by', sa.String(length=255), nullable=True),
        sa.Column('declined_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('declined_reason', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('actual_hours', sa.Float(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['volunteer_id'], ['volunteers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['opportunity_id'], ['volunteer_opportunities.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'volunteer_id', 'opportunity_id', 'scheduled_date', name='uq_volunteer_signup'
        ),
    )
    op.create_index('ix_volunteer_signups_volunteer_id', 'volunteer_signups', ['volunteer_id'])
    op.create_index(
        'ix_volunteer_signups_opportunity_id', 'volunteer_signups', ['opportunity_id']
    )

    op.create_table(
        'volunteer_hours',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('volunteer_id', sa.Uuid(), nullable=False),
        sa.Column('opportunity_id', sa.Uuid(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('hours_worked', sa.Float(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('ministry', sa.String(length=100), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['volunteer_id'], ['volunteers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['opportunity_id'], ['volunteer_opportunities.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_volunteer_hours_volunteer_id', 'volunteer_hours', ['volunteer_id'])
    op.create_index('ix_volunteer_hours_date', 'volunteer_hours', ['date'])


def downgrade() -> None:
    """Downgrade schema - Drop all tables."""
    op.drop_table('volunteer_hours')
    op.drop_table('volunteer_signups')
    op.drop_table('volunteer_opportunities')
    op.drop_table('volunteers')
    op.drop_table('care_history')
    op.drop_table('attendance')
    op.drop_table('events')
    op.drop_table('group_memberships')
    op.drop_table('groups')
    op.drop_table('spiritual_journeys')
    op.drop_table('member_preferences')
    op.drop_table('member_emergency_contacts')
    op.drop_table('member_tags')
    op.drop_table('tags')
    op.drop_table('members')
