"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Constraints that must hold under concurrency (one
user per email) live here as database constraints, not as application checks.

Key concepts:
- Prefixed short string ids ("USR…", "CAR…") that read well in URLs and logs
- Portable column types (JSON, not JSONB) so the same models run on
  PostgreSQL in production and SQLite in tests
- updated_at is written by the patch engine, never by an ORM onupdate hook
"""

import secrets
import string
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ID_ALPHABET = string.ascii_uppercase + string.digits
ID_SUFFIX_LENGTH = 16


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    """Generate a prefixed identifier such as ``USR7K2Q…``.

    Learn: 16 characters from a 36-symbol alphabet is ~82 bits of
    randomness from the secrets module, so collisions are not a practical
    concern and no uniqueness round-trip is needed at generation time.
    The primary key constraint still rejects the impossible duplicate.
    """
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}{suffix}"


# ══════════════════════════════════════════════════════════════
# Identities
# ══════════════════════════════════════════════════════════════


class User(Base):
    """A registered principal.

    Learn: refresh_token holds the ONE refresh token currently honoured for
    this user. Logging in overwrites it, logging out clears it — which is
    what makes older refresh tokens stop working before they expire.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user"
    )  # admin, user
    phone: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


# ══════════════════════════════════════════════════════════════
# Site content
# ══════════════════════════════════════════════════════════════


class Career(Base):
    """A job posting."""

    __tablename__ = "careers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    job_title: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    job_type: Mapped[str] = mapped_column(String(20), nullable=False)
    experience_level: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    responsibilities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    requirements: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    qualifications: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    salary: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {"min": 1, "max": 2, "currency": "USD"}
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    number_of_positions: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    application_deadline: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Application(Base):
    """A candidate's application to a job posting, with an uploaded resume."""

    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    career_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("careers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    applicant_name: Mapped[str] = mapped_column(String(100), nullable=False)
    applicant_email: Mapped[str] = mapped_column(String(255), nullable=False)
    applicant_phone: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    resume_link: Mapped[str] = mapped_column(Text, nullable=False)
    cover_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )


class Contact(Base):
    """A contact-form submission from the public site."""

    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    service_interested: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Project(Base):
    """A portfolio project, optionally with a cover image in object storage."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    client: Mapped[str] = mapped_column(String(100), nullable=False)
    scope: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Service(Base):
    """A service offering listed on the site."""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    features: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
