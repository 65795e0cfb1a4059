"""Find the one existing contact an incoming fact describes.

Precedence, first hit wins:
  1. canonical LinkedIn URL (canonical, no-slash and legacy http spellings)
  2. raw URL that failed canonicalization (generic variant set)
  3. first + last name, narrowed by company when one is known
A URL beats a name because names collide far more often than slugs.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Contact
from db.repositories import contacts as contacts_repo
from identity.text import clean_text, normalize_company
from identity.urls import build_variants, lookup_variants
from schemas.contact import ContactSignals

logger = logging.getLogger(__name__)


async def match_contact(
    session: AsyncSession, signals: ContactSignals
) -> tuple[Optional[Contact], Optional[str]]:
    """Return (contact, tier) where tier is "linkedin_url", "name" or None."""
    variants: list[str] = []
    if signals.canonical_url:
        variants = lookup_variants(signals.canonical_url)
    elif signals.raw_url:
        variants = build_variants(signals.raw_url)

    if variants:
        contact = await contacts_repo.find_by_linkedin_variants(session, variants)
        if contact is not None:
            logger.debug("Matched contact %s by LinkedIn URL", contact.id)
            return contact, "linkedin_url"

    first_name = clean_text(signals.first_name)
    last_name = clean_text(signals.last_name)
    if first_name and last_name:
        company = normalize_company(signals.company) or None
        contact = await contacts_repo.find_by_name(session, first_name, last_name, company)
        if contact is not None:
            logger.debug("Matched contact %s by name", contact.id)
            return contact, "name"

    return None, None


async def find_existing_contact(
    session: AsyncSession, signals: ContactSignals
) -> Optional[Contact]:
    """Return the existing contact matching signals, or None."""
    contact, _ = await match_contact(session, signals)
    return contact
