"""The one resolve sequence every write path runs: normalize, match, merge."""
import logging
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Contact
from identity.errors import ContactValidationError
from identity.matcher import match_contact
from identity.merger import merge_contact, merge_email
from identity.text import clean_text, infer_category, normalize_company
from identity.urls import canonicalize
from schemas.contact import ContactFields, ContactSignals, EmailFact, SourceTrust

logger = logging.getLogger(__name__)


def prepare_fields(fields: ContactFields) -> tuple[ContactFields, ContactSignals]:
    """Normalize raw facts and derive the matcher's signals from them.

    The stored linkedin_url is canonical or nothing. A URL that does not
    canonicalize is still offered to the matcher as a raw signal.
    """
    raw_url = clean_text(fields.linkedin_url)
    canonical = canonicalize(raw_url)
    job_title = clean_text(fields.job_title)
    company = normalize_company(fields.company) or None

    normalized = ContactFields(
        first_name=clean_text(fields.first_name),
        last_name=clean_text(fields.last_name),
        job_title=job_title,
        company=company,
        city=clean_text(fields.city),
        state=clean_text(fields.state),
        country=clean_text(fields.country),
        category=clean_text(fields.category) or infer_category(job_title),
        linkedin_url=canonical,
    )
    signals = ContactSignals(
        canonical_url=canonical,
        raw_url=None if canonical else raw_url,
        first_name=normalized.first_name,
        last_name=normalized.last_name,
        company=company,
    )
    return normalized, signals


async def resolve_contact(
    session: AsyncSession,
    fields: ContactFields,
    emails: Iterable[EmailFact],
    trust: SourceTrust,
) -> tuple[Contact, bool]:
    """Resolve facts to a single stored contact and attach their emails.

    Runs inside the caller's transaction; returns (contact, created).
    Each email carries its own verification; trust only governs the contact.
    """
    normalized, signals = prepare_fields(fields)
    if not normalized.first_name or not normalized.last_name:
        raise ContactValidationError(
            "First and last name are required",
            field="first_name" if not normalized.first_name else "last_name",
        )

    existing, tier = await match_contact(session, signals)
    if existing is not None:
        logger.info("Resolved %s %s to contact %s by %s",
                    normalized.first_name, normalized.last_name, existing.id, tier)

    contact = await merge_contact(session, existing, normalized, trust)
    for fact in emails:
        await merge_email(
            session,
            contact.id,
            fact.address,
            SourceTrust(verified=fact.verified, source=trust.source),
        )
    return contact, existing is None
