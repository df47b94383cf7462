"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates all database tables for the Student Course Registration Service:
- students: Student records (email is the logical key, checked by callers)
- courses: Course catalog (course_code is the logical key)
- registrations: Student/course relationship, one row per pair

Foreign keys have no cascade rule, so a student or course that still has
registration rows cannot be deleted.
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
        sa.Column('student_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('enrollment_date', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_students_email', 'students', ['email'])
    op.create_index('ix_students_name', 'students', ['last_name', 'first_name'])

    # ── Courses Table ─────────────────────────────────────────
    op.create_table(
        'courses',
        sa.Column('course_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('course_code', sa.String(20), nullable=False),
        sa.Column('course_name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('credits', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('instructor', sa.String(100), nullable=True),
        sa.Column('created_date', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('credits >= 0', name='ck_courses_credits_non_negative'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_courses_course_code', 'courses', ['course_code'])

    # ── Registrations Table ───────────────────────────────────
    op.create_table(
        'registrations',
        sa.Column('registration_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('student_id', sa.Integer(),
                  sa.ForeignKey('students.student_id'), nullable=False),
        sa.Column('course_id', sa.Integer(),
                  sa.ForeignKey('courses.course_id'), nullable=False),
        sa.Column('registration_date', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('grade', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        sa.CheckConstraint("status IN ('ACTIVE', 'DROPPED', 'COMPLETED')",
                           name='ck_registrations_status'),
        sa.UniqueConstraint('student_id', 'course_id',
                            name='uq_registrations_student_course'),
        sqlite_autoincrement=True,
    )

    # Indexes for common query patterns on registrations
    # (student_id lookups are served by the unique constraint's index)
    op.create_index('ix_registrations_course_id', 'registrations', ['course_id'])
    op.create_index('ix_registrations_status', 'registrations', ['status'])
    op.create_index('ix_registrations_registration_date', 'registrations', ['registration_date'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index('ix_registrations_registration_date', table_name='registrations')
    op.drop_index('ix_registrations_status', table_name='registrations')
    op.drop_index('ix_registrations_course_id', table_name='registrations')
    op.drop_table('registrations')
    op.drop_index('ix_courses_course_code', table_name='courses')
    op.drop_table('courses')
    op.drop_index('ix_students_name', table_name='students')
    op.drop_index('ix_students_email', table_name='students')
    op.drop_table('students')
