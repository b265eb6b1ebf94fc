"""initial schema

Revision ID: 3b9e41c7a2d0
Revises: 
Create Date: 2025-10-02 10:14:03.512904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3b9e41c7a2d0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True, unique=True),
        sa.Column('hashed_password', sa.String(), nullable=True),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('profile_image_url', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'goals',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        _created_at(),
    )
    op.create_index('ix_goals_user_id', 'goals', ['user_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('goal_id', sa.String(), sa.ForeignKey('goals.id'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('time_estimate', sa.String(), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=True),
        sa.Column('skipped', sa.Boolean(), nullable=True),
        sa.Column('snooze_until', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index('ix_tasks_user_id', 'tasks', ['user_id'])

    op.create_table(
        'activities',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('plan_summary', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=True),
        sa.Column('share_token', sa.String(), nullable=True, unique=True),
        sa.Column('tags', JSONType, nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=True),
        sa.Column('like_count', sa.Integer(), nullable=True),
        sa.Column('trending_score', sa.Integer(), nullable=True),
        sa.Column('featured_in_community', sa.Boolean(), nullable=True),
        sa.Column('creator_name', sa.String(), nullable=True),
        sa.Column('copied_from_share_token', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='planning'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])

    op.create_table(
        'activity_tasks',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('activity_id', sa.String(), sa.ForeignKey('activities.id', ondelete='CASCADE'), nullable=False),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('order', sa.Integer(), nullable=True),
        _created_at(),
        sa.UniqueConstraint('activity_id', 'task_id', name='unique_activity_task'),
    )

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('mood', sa.String(), nullable=False),
        sa.Column('reflection', sa.Text(), nullable=True),
        sa.Column('completed_tasks', JSONType, nullable=True),
        sa.Column('missed_tasks', JSONType, nullable=True),
        sa.Column('achievements', JSONType, nullable=True),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('user_id', 'date', name='uq_journal_user_date'),
    )

    op.create_table(
        'progress_stats',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('completed_count', sa.Integer(), nullable=True),
        sa.Column('total_count', sa.Integer(), nullable=True),
        sa.Column('categories', JSONType, nullable=True),
        _created_at(),
        sa.UniqueConstraint('user_id', 'date', name='uq_progress_user_date'),
    )

    op.create_table(
        'chat_imports',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('source', sa.String(), nullable=False),
        sa.Column('conversation_title', sa.String(), nullable=True),
        sa.Column('chat_history', JSONType, nullable=False),
        sa.Column('extracted_goals', JSONType, nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )

    op.create_table(
        'groups',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('is_private', sa.Boolean(), nullable=True),
        sa.Column('invite_code', sa.String(), nullable=False, unique=True),
        sa.Column('tracking_enabled', sa.Boolean(), nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        'group_memberships',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_group_user'),
    )

    op.create_table(
        'shared_goals',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('group_id', sa.String(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )

    op.create_table(
        'shared_tasks',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('shared_goal_id', sa.String(), sa.ForeignKey('shared_goals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assigned_to', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_by', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )

    op.create_table(
        'notification_preferences',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('enable_browser_notifications', sa.Boolean(), nullable=True),
        sa.Column('enable_task_reminders', sa.Boolean(), nullable=True),
        sa.Column('enable_deadline_warnings', sa.Boolean(), nullable=True),
        sa.Column('enable_daily_planning', sa.Boolean(), nullable=True),
        sa.Column('reminder_lead_time', sa.Integer(), nullable=True),
        sa.Column('daily_planning_time', sa.String(), nullable=True),
        sa.Column('quiet_hours_start', sa.String(), nullable=True),
        sa.Column('quiet_hours_end', sa.String(), nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        'task_reminders',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('task_id', sa.String(), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reminder_type', sa.String(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('is_sent', sa.Boolean(), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index('ix_task_reminders_user_id', 'task_reminders', ['user_id'])

    op.create_table(
        'scheduling_suggestions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('suggestion_type', sa.String(), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('suggested_tasks', JSONType, nullable=True),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('accepted', sa.Boolean(), nullable=True),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index('ix_scheduling_suggestions_user_id', 'scheduling_suggestions', ['user_id'])


def downgrade() -> None:
    op.drop_table('scheduling_suggestions')
    op.drop_table('task_reminders')
    op.drop_table('notification_preferences')
    op.drop_table('shared_tasks')
    op.drop_table('shared_goals')
    op.drop_table('group_memberships')
    op.drop_table('groups')
    op.drop_table('chat_imports')
    op.drop_table('progress_stats')
    op.drop_table('journal_entries')
    op.drop_table('activity_tasks')
    op.drop_table('activities')
    op.drop_table('tasks')
    op.drop_table('goals')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
