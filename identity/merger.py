"""Merge policy for contacts and their emails.

Contacts: fill gaps, never clobber. A populated field keeps its value no
matter what a later source says, so a noisy CSV row cannot degrade a
manually verified entry. is_verified only ever goes false -> true.

Emails: one row per (contact, address); the first email a contact gets is
its primary and primary status is never reassigned afterwards.
"""
import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from db.models import MERGEABLE_FIELDS, Contact, ContactEmail
from db.repositories import contact_emails as emails_repo
from db.repositories import contacts as contacts_repo
from identity.errors import ContactValidationError
from identity.text import normalize_email
from schemas.contact import ContactFields, SourceTrust

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def fill_gaps(existing: Contact, incoming: ContactFields) -> dict[str, Any]:
    """Return the incoming values that land on fields existing has left empty."""
    patch: dict[str, Any] = {}
    for field in MERGEABLE_FIELDS:
        value = getattr(incoming, field)
        if _is_blank(value):
            continue
        if _is_blank(getattr(existing, field)):
            patch[field] = value
    return patch


async def merge_contact(
    session: AsyncSession,
    existing: Optional[Contact],
    incoming: ContactFields,
    trust: SourceTrust,
) -> Contact:
    """Insert or gap-fill a contact and return the post-merge row."""
    if existing is None:
        if _is_blank(incoming.first_name) or _is_blank(incoming.last_name):
            raise ContactValidationError(
                "First and last name are required to create a contact",
                field="first_name" if _is_blank(incoming.first_name) else "last_name",
            )
        data = {
            field: getattr(incoming, field)
            for field in MERGEABLE_FIELDS
            if not _is_blank(getattr(incoming, field))
        }
        data.update(
            first_name=incoming.first_name,
            last_name=incoming.last_name,
            is_verified=trust.verified,
        )
        contact = await contacts_repo.insert(session, data)
        logger.info("Created contact %s from %s", contact.id, trust.source)
        return contact

    patch = fill_gaps(existing, incoming)
    if trust.verified and not existing.is_verified:
        patch["is_verified"] = True
    if patch:
        logger.info(
            "Merging %s into contact %s from %s", sorted(patch), existing.id, trust.source
        )
    return await contacts_repo.update_fields(session, existing.id, patch)


async def merge_email(
    session: AsyncSession,
    contact_id: UUID,
    address: Optional[str],
    trust: SourceTrust,
) -> Optional[ContactEmail]:
    """Attach an address to a contact, or promote its verification.

    Returns the resulting row, or None for a blank address. The zero-emails
    primary check runs in the caller's transaction; the partial unique index
    on primaries rejects a concurrent second claim.
    """
    email = normalize_email(address)
    if not email:
        return None

    row = await emails_repo.get(session, contact_id, email)
    if row is not None:
        if trust.verified and not row.is_verified:
            logger.info("Promoting email %s on contact %s to verified", email, contact_id)
            return await emails_repo.mark_verified(session, row.id)
        return row

    is_primary = await emails_repo.count_for_contact(session, contact_id) == 0
    return await emails_repo.insert(
        session,
        contact_id,
        email,
        is_primary=is_primary,
        is_verified=trust.verified,
    )
