"""Interactive contact creation."""
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db.connection import contact_transaction
from db.repositories import contacts as contacts_repo
from identity.engine import resolve_contact
from identity.errors import ContactValidationError
from schemas.contact import ContactCreate, ContactFields, ContactView, EmailFact, SourceTrust

logger = logging.getLogger(__name__)


def _validation_error(exc: ValidationError) -> ContactValidationError:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    return ContactValidationError(f"{field}: {first.get('msg')}", field=field)


async def create_contact(
    payload: Union[ContactCreate, dict[str, Any]],
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> ContactView:
    """Create a contact, or merge into the one it duplicates.

    Submitting the same person twice (same LinkedIn URL, or same name and
    company) returns the existing row, gap-filled with any new facts.
    """
    if not isinstance(payload, ContactCreate):
        try:
            payload = ContactCreate.model_validate(payload)
        except ValidationError as exc:
            raise _validation_error(exc) from exc

    fields = ContactFields(
        first_name=payload.first_name,
        last_name=payload.last_name,
        job_title=payload.job_title,
        company=payload.company,
        city=payload.city,
        state=payload.state,
        country=payload.country,
        linkedin_url=payload.linkedin_url,
    )
    trust = SourceTrust(verified=payload.is_verified, source="manual")
    emails = [EmailFact(address=e, verified=payload.is_verified) for e in payload.emails]

    async with contact_transaction(session_factory) as session:
        contact, created = await resolve_contact(session, fields, emails, trust)
        view = await contacts_repo.get_contact_view(session, contact.id)

    logger.info("%s contact %s", "Created" if created else "Merged into", contact.id)
    return ContactView.model_validate(view)
