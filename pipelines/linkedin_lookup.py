"""Read-only email lookup by LinkedIn profile URL."""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db.connection import get_db
from db.repositories import contacts as contacts_repo
from identity.errors import ContactValidationError
from identity.matcher import match_contact
from identity.text import clean_text, normalize_company
from identity.urls import canonicalize, is_linkedin_url
from schemas.contact import ContactSignals, ContactView, LookupResult

logger = logging.getLogger(__name__)


async def lookup_email_by_linkedin(
    linkedin_url: Optional[str],
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    company: Optional[str] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> LookupResult:
    """Return the stored contact and its best email for a profile URL.

    Falls back to first + last name (narrowed by company) when no stored URL
    matches. Never writes.
    """
    raw_url = clean_text(linkedin_url)
    if raw_url is None:
        raise ContactValidationError("linkedin_url is required", field="linkedin_url")
    canonical = canonicalize(raw_url)
    if canonical is None and not is_linkedin_url(raw_url):
        raise ContactValidationError(f"Invalid LinkedIn URL: {raw_url}", field="linkedin_url")

    signals = ContactSignals(
        canonical_url=canonical,
        raw_url=None if canonical else raw_url,
        first_name=clean_text(first_name),
        last_name=clean_text(last_name),
        company=normalize_company(company) or None,
    )

    async with get_db(session_factory) as session:
        contact, matched_by = await match_contact(session, signals)
        if contact is None:
            logger.info("No contact found for %s", canonical or raw_url)
            return LookupResult(found=False)
        view = ContactView.model_validate(
            await contacts_repo.get_contact_view(session, contact.id)
        )

    return LookupResult(
        found=True,
        contact=view,
        email=view.emails[0].email if view.emails else None,
        emails=view.emails,
        matched_by=matched_by,
    )
