"""Contact email repository — per-contact address set."""
import logging
from uuid import UUID
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import ContactEmail

logger = logging.getLogger(__name__)


async def get(session: AsyncSession, contact_id: UUID, email: str) -> Optional[ContactEmail]:
    """Return the (contact, email) row, or None. email must be normalized."""
    result = await session.execute(
        select(ContactEmail)
        .where(ContactEmail.contact_id == contact_id)
        .where(func.lower(ContactEmail.email) == email)
    )
    return result.scalars().first()


async def count_for_contact(session: AsyncSession, contact_id: UUID) -> int:
    result = await session.execute(
        select(func.count()).select_from(ContactEmail).where(ContactEmail.contact_id == contact_id)
    )
    return int(result.scalar_one())


async def insert(
    session: AsyncSession,
    contact_id: UUID,
    email: str,
    is_primary: bool,
    is_verified: bool,
) -> ContactEmail:
    """Insert an email row. Unique indexes reject duplicates and second primaries."""
    row = ContactEmail(
        contact_id=contact_id,
        email=email,
        is_primary=is_primary,
        is_verified=is_verified,
    )
    session.add(row)
    await session.flush()
    return row


async def mark_verified(session: AsyncSession, email_id: UUID) -> ContactEmail:
    """Promote an email to verified. There is no demotion counterpart."""
    result = await session.execute(
        update(ContactEmail)
        .where(ContactEmail.id == email_id)
        .values(is_verified=True)
        .returning(ContactEmail),
        execution_options={"populate_existing": True},
    )
    await session.flush()
    return result.scalar_one()


async def list_for_contact(session: AsyncSession, contact_id: UUID) -> list[ContactEmail]:
    """Return a contact's emails, best first: primary, then verified, then oldest."""
    result = await session.execute(
        select(ContactEmail)
        .where(ContactEmail.contact_id == contact_id)
        .order_by(
            ContactEmail.is_primary.desc(),
            ContactEmail.is_verified.desc(),
            ContactEmail.created_at,
            ContactEmail.email,
        )
    )
    return list(result.scalars().all())
