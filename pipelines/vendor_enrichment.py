"""Apollo enrichment: reveal an email and fold it into the contact store.

Everything Apollo returns is treated as verified. The HTTP call runs in a
worker thread so the event loop is never blocked on the vendor.
"""
import asyncio
import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db.connection import contact_transaction
from db.repositories import contacts as contacts_repo
from identity.engine import resolve_contact
from identity.errors import ContactError, ContactValidationError
from identity.text import clean_text, normalize_email
from schemas.contact import ContactFields, ContactView, EmailFact, EnrichmentResult, SourceTrust
from tools.apollo_tools import apollo_people_match

logger = logging.getLogger(__name__)

VENDOR_TRUST = SourceTrust(verified=True, source="vendor")


def fields_from_person(
    person: dict[str, Any],
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    company: Optional[str] = None,
    linkedin_url: Optional[str] = None,
) -> ContactFields:
    """Map an Apollo person onto contact fields, request values as fallback."""
    organization = person.get("organization") or {}
    return ContactFields(
        first_name=clean_text(person.get("first_name")) or clean_text(first_name),
        last_name=clean_text(person.get("last_name")) or clean_text(last_name),
        job_title=person.get("title"),
        company=clean_text(organization.get("name")) or clean_text(company),
        city=person.get("city"),
        state=person.get("state"),
        country=person.get("country"),
        linkedin_url=clean_text(person.get("linkedin_url")) or clean_text(linkedin_url),
    )


async def enrich_contact(
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    company: Optional[str] = None,
    linkedin_url: Optional[str] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> EnrichmentResult:
    """Ask Apollo for this person and persist any email it reveals."""
    if not any(clean_text(v) for v in (first_name, last_name, company, linkedin_url)):
        raise ContactValidationError("At least one search parameter is required")

    response = await asyncio.to_thread(
        apollo_people_match,
        first_name=first_name or "",
        last_name=last_name or "",
        company=company or "",
        linkedin_url=linkedin_url or "",
    )
    person = response.get("person")
    if not person:
        if response.get("error"):
            logger.warning("Apollo people match failed: %s", response["error"])
        return EnrichmentResult(found=False, error=response.get("error"))

    email = normalize_email(person.get("email"))
    if not email:
        logger.info("Apollo matched a person without a revealable email")
        return EnrichmentResult(found=True, vendor_person=person)

    fields = fields_from_person(person, first_name, last_name, company, linkedin_url)
    try:
        async with contact_transaction(session_factory) as session:
            contact, created = await resolve_contact(
                session, fields, [EmailFact(address=email, verified=True)], VENDOR_TRUST
            )
            view = await contacts_repo.get_contact_view(session, contact.id)
    except ContactError as exc:
        logger.warning("Apollo email %s found but not saved: %s", email, exc)
        return EnrichmentResult(
            found=True, email=email, saved=False, vendor_person=person, error=str(exc)
        )

    logger.info("Apollo email %s saved to %s contact %s",
                email, "new" if created else "existing", contact.id)
    return EnrichmentResult(
        found=True,
        email=email,
        saved=True,
        contact=ContactView.model_validate(view),
        vendor_person=person,
    )
