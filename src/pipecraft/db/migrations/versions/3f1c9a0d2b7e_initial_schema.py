"""Initial schema: users, careers, applications, contacts, projects, services

Learn: users.email carries the UNIQUE constraint that decides concurrent
registrations. applications cascade with their job posting.

Revision ID: 3f1c9a0d2b7e
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '3f1c9a0d2b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('phone', sa.String(length=15), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'careers',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('job_title', sa.String(length=100), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=100), nullable=False),
        sa.Column('job_type', sa.String(length=20), nullable=False),
        sa.Column('experience_level', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('responsibilities', sa.JSON(), nullable=False),
        sa.Column('requirements', sa.JSON(), nullable=False),
        sa.Column('qualifications', sa.JSON(), nullable=True),
        sa.Column('salary', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('number_of_positions', sa.Integer(), nullable=False),
        sa.Column('application_deadline', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'applications',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('career_id', sa.String(length=32), sa.ForeignKey('careers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('applicant_name', sa.String(length=100), nullable=False),
        sa.Column('applicant_email', sa.String(length=255), nullable=False),
        sa.Column('applicant_phone', sa.String(length=15), nullable=True),
        sa.Column('resume_link', sa.Text(), nullable=False),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_applications_career_id', 'applications', ['career_id'])

    op.create_table(
        'contacts',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=15), nullable=True),
        sa.Column('company_name', sa.String(length=100), nullable=True),
        sa.Column('service_interested', sa.String(length=100), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('client', sa.String(length=100), nullable=False),
        sa.Column('scope', sa.Text(), nullable=False),
        sa.Column('image', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'services',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('services')
    op.drop_table('projects')
    op.drop_table('contacts')
    op.drop_index('ix_applications_career_id', table_name='applications')
    op.drop_table('applications')
    op.drop_table('careers')
    op.drop_table('users')
