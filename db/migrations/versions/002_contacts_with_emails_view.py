"""Add crm.contacts_with_emails browsing view.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from alembic import op

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE OR REPLACE VIEW crm.contacts_with_emails AS
        SELECT
          c.id,
          c.first_name,
          c.last_name,
          c.job_title,
          c.company,
          c.category,
          c.city,
          c.state,
          c.country,
          c.linkedin_url,
          c.is_verified,
          COALESCE(
            (
              SELECT array_agg(e.email ORDER BY e.is_primary DESC, e.email)
              FROM crm.contact_emails e
              WHERE e.contact_id = c.id
            ),
            ARRAY[]::text[]
          ) AS emails,
          c.created_at,
          c.updated_at
        FROM crm.contacts c
        """
    )


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS crm.contacts_with_emails")
