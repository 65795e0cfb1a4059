"""Initial schema: crm.contacts and crm.contact_emails.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None

CATEGORIES = (
    "Analyst", "CEO", "Founder", "Co-Founder", "Consultant", "Data Scientist",
    "Designer", "Product Manager", "Recruiter", "University Recruiter",
    "Software Engineer", "Talent Acquisition",
)


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS crm")

    # ─── Contacts ────────────────────────────────────────────────────────────

    op.create_table(
        "contacts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("first_name", sa.Text, nullable=False),
        sa.Column("last_name", sa.Text, nullable=False),
        sa.Column("job_title", sa.Text, nullable=True),
        sa.Column("company", sa.Text, nullable=True),
        sa.Column("city", sa.Text, nullable=True),
        sa.Column("state", sa.Text, nullable=True),
        sa.Column("country", sa.Text, nullable=True),
        sa.Column("category", sa.Text, nullable=True),
        sa.Column("linkedin_url", sa.Text, nullable=True),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "category IS NULL OR category IN ("
            + ", ".join(f"'{c}'" for c in CATEGORIES)
            + ")",
            name="ck_contact_category",
        ),
        schema="crm",
    )
    # One contact per profile; blank URLs are not identities
    op.create_index(
        "uq_contacts_linkedin_url",
        "contacts",
        [sa.text("lower(linkedin_url)")],
        unique=True,
        schema="crm",
        postgresql_where=sa.text("linkedin_url IS NOT NULL AND length(trim(linkedin_url)) > 0"),
    )
    op.create_index("ix_contacts_last_first", "contacts", ["last_name", "first_name"], schema="crm")
    op.create_index("ix_contacts_category", "contacts", ["category"], schema="crm")

    # ─── Contact emails ──────────────────────────────────────────────────────

    op.create_table(
        "contact_emails",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "contact_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("crm.contacts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("contact_id", "email", name="uq_contact_emails_contact_email"),
        schema="crm",
    )
    op.create_index("ix_contact_emails_contact_id", "contact_emails", ["contact_id"], schema="crm")
    # At most one primary email per contact
    op.create_index(
        "uq_contact_emails_primary",
        "contact_emails",
        ["contact_id"],
        unique=True,
        schema="crm",
        postgresql_where=sa.text("is_primary"),
    )


def downgrade() -> None:
    op.drop_index("uq_contact_emails_primary", table_name="contact_emails", schema="crm")
    op.drop_index("ix_contact_emails_contact_id", table_name="contact_emails", schema="crm")
    op.drop_table("contact_emails", schema="crm")
    op.drop_index("ix_contacts_category", table_name="contacts", schema="crm")
    op.drop_index("ix_contacts_last_first", table_name="contacts", schema="crm")
    op.drop_index("uq_contacts_linkedin_url", table_name="contacts", schema="crm")
    op.drop_table("contacts", schema="crm")
