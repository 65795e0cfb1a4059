"""Contact repository — identity lookups, inserts and gap-filling updates."""
import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Contact
from db.repositories import contact_emails as emails_repo

logger = logging.getLogger(__name__)


async def get_by_id(session: AsyncSession, contact_id: UUID) -> Optional[Contact]:
    """Return the Contact with this id, or None."""
    result = await session.execute(select(Contact).where(Contact.id == contact_id))
    return result.scalar_one_or_none()


async def find_by_linkedin_variants(
    session: AsyncSession, variants: list[str]
) -> Optional[Contact]:
    """Return the most recently updated contact whose URL is any of variants.

    variants must already be lowercased; the comparison is against
    lower(linkedin_url) so legacy mixed-case rows still match. One query,
    set membership, no per-variant round trips.
    """
    if not variants:
        return None
    result = await session.execute(
        select(Contact)
        .where(Contact.linkedin_url.isnot(None))
        .where(func.length(func.trim(Contact.linkedin_url)) > 0)
        .where(func.lower(Contact.linkedin_url).in_(variants))
        .order_by(Contact.updated_at.desc(), Contact.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def find_by_name(
    session: AsyncSession,
    first_name: str,
    last_name: str,
    company: Optional[str] = None,
) -> Optional[Contact]:
    """Return the most recently updated contact with this exact name.

    Names compare case-insensitively. A known company narrows the match with a
    case-insensitive substring test (wildcards in the company are escaped).
    """
    stmt = (
        select(Contact)
        .where(func.lower(Contact.first_name) == first_name.lower())
        .where(func.lower(Contact.last_name) == last_name.lower())
    )
    if company:
        stmt = stmt.where(Contact.company.icontains(company, autoescape=True))
    result = await session.execute(
        stmt.order_by(Contact.updated_at.desc(), Contact.created_at.desc()).limit(1)
    )
    return result.scalar_one_or_none()


async def insert(session: AsyncSession, data: dict[str, Any]) -> Contact:
    """Insert a new contact row and return it with server defaults loaded.

    data dict keys: first_name, last_name, job_title, company, city, state,
    country, category, linkedin_url, is_verified
    """
    contact = Contact(**data)
    session.add(contact)
    await session.flush()
    await session.refresh(contact)
    return contact


async def update_fields(
    session: AsyncSession, contact_id: UUID, values: dict[str, Any]
) -> Contact:
    """Apply values to a contact and bump updated_at, even when values is empty."""
    result = await session.execute(
        update(Contact)
        .where(Contact.id == contact_id)
        .values(**values, updated_at=func.now())
        .returning(Contact),
        execution_options={"populate_existing": True},
    )
    await session.flush()
    return result.scalar_one()


async def get_contact_view(session: AsyncSession, contact_id: UUID) -> Optional[dict]:
    """Return a contact flattened with its emails, best email first.

    Mirrors the crm.contacts_with_emails view, plus per-email flags.
    """
    contact = await get_by_id(session, contact_id)
    if contact is None:
        return None
    emails = await emails_repo.list_for_contact(session, contact_id)
    return {
        "id": contact.id,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "job_title": contact.job_title,
        "company": contact.company,
        "category": contact.category,
        "city": contact.city,
        "state": contact.state,
        "country": contact.country,
        "linkedin_url": contact.linkedin_url,
        "is_verified": contact.is_verified,
        "created_at": contact.created_at,
        "updated_at": contact.updated_at,
        "emails": [
            {
                "email": e.email,
                "is_primary": e.is_primary,
                "is_verified": e.is_verified,
            }
            for e in emails
        ],
    }
