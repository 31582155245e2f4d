"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2024-01-15

Creates all database tables for Student Hub:
- students: Student records with unique email, phone and student code
- attendance_entries: Ordered day/week/month/status records per student
- ratings: Ordered score sheets per student
- badges: Achievement badges with an image
- student_badges: Many-to-many link between students and badges

Also creates indexes for the per-student child lookups.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Students Table ────────────────────────────────────────
    op.create_table(
        'students',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False, unique=True),
        sa.Column('phone', sa.Text(), nullable=False, unique=True),
        sa.Column('photo', sa.Text(), nullable=True),
        sa.Column('student_code', sa.Text(), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=True),
    )

    # ── Attendance Table ──────────────────────────────────────
    op.create_table(
        'attendance_entries',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('student_id', sa.String(24),
                  sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('day', sa.Integer(), nullable=False),
        sa.Column('week', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('status', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint('student_id', 'day', 'week', 'month',
                            name='uq_attendance_natural_key'),
    )
    op.create_index('ix_attendance_entries_student_id', 'attendance_entries', ['student_id'])

    # ── Ratings Table ─────────────────────────────────────────
    op.create_table(
        'ratings',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('student_id', sa.String(24),
                  sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('week', sa.Integer(), nullable=False),
        sa.Column('day', sa.Integer(), nullable=False),
        sa.Column('assignments', sa.Float(), nullable=False, server_default='0'),
        sa.Column('participation', sa.Float(), nullable=False, server_default='0'),
        sa.Column('performance', sa.Float(), nullable=False, server_default='0'),
        sa.Column('date', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_ratings_student_id', 'ratings', ['student_id'])

    # ── Badges Tables ─────────────────────────────────────────
    op.create_table(
        'badges',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=True),
    )

    op.create_table(
        'student_badges',
        sa.Column('student_id', sa.String(24),
                  sa.ForeignKey('students.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('badge_id', sa.String(24),
                  sa.ForeignKey('badges.id', ondelete='CASCADE'), primary_key=True),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('student_badges')
    op.drop_table('badges')
    op.drop_index('ix_ratings_student_id', table_name='ratings')
    op.drop_table('ratings')
    op.drop_index('ix_attendance_entries_student_id', table_name='attendance_entries')
    op.drop_table('attendance_entries')
    op.drop_table('students')
