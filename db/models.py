"""SQLAlchemy 2.0 ORM models for the contact identity engine.

Covers 2 tables in the crm schema:
  - crm.contacts:       one row per known person
  - crm.contact_emails: email addresses, many per contact

Two partial unique indexes carry correctness, not just speed:
  - uq_contacts_linkedin_url:   one contact per lower(linkedin_url)
  - uq_contact_emails_primary:  one primary email per contact
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    UUID,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Contact category values used in the CHECK constraint
# ---------------------------------------------------------------------------

CONTACT_CATEGORIES = (
    "Analyst",
    "CEO",
    "Founder",
    "Co-Founder",
    "Consultant",
    "Data Scientist",
    "Designer",
    "Product Manager",
    "Recruiter",
    "University Recruiter",
    "Software Engineer",
    "Talent Acquisition",
)

_CATEGORY_CHECK = (
    "category IS NULL OR category IN ("
    + ", ".join(f"'{c}'" for c in CONTACT_CATEGORIES)
    + ")"
)

# Fields a merge may fill in but never overwrite once populated.
MERGEABLE_FIELDS = (
    "job_title",
    "company",
    "city",
    "state",
    "country",
    "linkedin_url",
    "category",
)


# ===========================================================================
# Schema: crm
# ===========================================================================


class Contact(Base):
    """crm.contacts — a person, deduplicated by LinkedIn URL or name + company."""

    __tablename__ = "contacts"
    __table_args__ = (
        CheckConstraint(_CATEGORY_CHECK, name="ck_contact_category"),
        Index(
            "uq_contacts_linkedin_url",
            text("lower(linkedin_url)"),
            unique=True,
            postgresql_where=text(
                "linkedin_url IS NOT NULL AND length(trim(linkedin_url)) > 0"
            ),
        ),
        Index("ix_contacts_last_first", "last_name", "first_name"),
        Index("ix_contacts_category", "category"),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    job_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    company: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool] = mapped_column(
        Boolean, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    emails: Mapped[list["ContactEmail"]] = relationship(
        "ContactEmail",
        back_populates="contact",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ContactEmail(Base):
    """crm.contact_emails — an address owned by exactly one contact."""

    __tablename__ = "contact_emails"
    __table_args__ = (
        UniqueConstraint("contact_id", "email", name="uq_contact_emails_contact_email"),
        Index(
            "uq_contact_emails_primary",
            "contact_id",
            unique=True,
            postgresql_where=text("is_primary"),
        ),
        Index("ix_contact_emails_contact_id", "contact_id"),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    contact_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.contacts.id", ondelete="CASCADE"),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary: Mapped[bool] = mapped_column(
        Boolean, server_default="false", nullable=False
    )
    is_verified: Mapped[bool] = mapped_column(
        Boolean, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationship
    contact: Mapped["Contact"] = relationship("Contact", back_populates="emails")
