"""Bulk import of Apollo CSV exports.

Each row is resolved in its own transaction so one bad row never aborts the
file. Rows that fail are logged with their row number and reported in the
returned ImportSummary.
"""
import asyncio
import csv
import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db.connection import contact_transaction
from identity.engine import resolve_contact
from identity.errors import ContactError, DuplicateContactError
from identity.text import clean_text, normalize_email
from schemas.contact import ContactFields, EmailFact, ImportRow, ImportSummary, RowFailure, SourceTrust

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100
VERIFIED_STATUSES = {"verified", "valid"}

# ImportRow field -> export header (lowercased)
COLUMNS = {
    "first_name": "first name",
    "last_name": "last name",
    "job_title": "title",
    "company": "company",
    "city": "city",
    "state": "state",
    "country": "country",
    "linkedin_url": "person linkedin url",
}
# (address column, status column), primary first
EMAIL_COLUMNS = (
    ("email", "email status"),
    ("secondary email", "secondary email status"),
    ("tertiary email", "tertiary email status"),
)
CONFIDENCE_COLUMN = "email confidence"

Cleaner = Callable[[Optional[str], Optional[str]], dict]


def _confidence_threshold() -> float:
    return float(os.environ.get("EMAIL_CONFIDENCE_THRESHOLD", "70"))


def email_is_verified(
    status: Optional[str], confidence: Optional[str], threshold: Optional[float] = None
) -> bool:
    """Apollo status decides; a blank status falls back to the confidence score."""
    status = (status or "").strip().lower()
    if status:
        return status in VERIFIED_STATUSES
    raw = (confidence or "").strip().rstrip("%").strip()
    if not raw:
        return False
    try:
        score = float(raw)
    except ValueError:
        return False
    return score >= (_confidence_threshold() if threshold is None else threshold)


def read_rows(path: Union[str, Path]) -> Iterator[Union[dict[str, str], csv.Error]]:
    """Yield CSV rows keyed by lowercased, trimmed header.

    A record the parser rejects (oversized field, stray NUL) is yielded as
    its csv.Error so the caller can count it and keep reading. Undecodable
    bytes become U+FFFD rather than ending the file.
    """
    with open(path, newline="", encoding="utf-8-sig", errors="replace") as fh:
        reader = csv.DictReader(fh)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as exc:
                yield exc
                continue
            yield {
                (key or "").strip().lower(): (value or "")
                for key, value in row.items()
                if key is not None
            }


def map_row(row_number: int, row: dict[str, str]) -> ImportRow:
    """Map one header-normalized export row onto an ImportRow."""
    values = {field: clean_text(row.get(column)) for field, column in COLUMNS.items()}
    confidence = row.get(CONFIDENCE_COLUMN)

    emails: list[EmailFact] = []
    seen: set[str] = set()
    for address_column, status_column in EMAIL_COLUMNS:
        address = normalize_email(row.get(address_column))
        if not address or address in seen:
            continue
        seen.add(address)
        # confidence is only reported for the primary address
        emails.append(EmailFact(
            address=address,
            verified=email_is_verified(
                row.get(status_column),
                confidence if address_column == "email" else None,
            ),
        ))
    return ImportRow(row_number=row_number, emails=emails, **values)


async def _clean(row: ImportRow, cleaner: Cleaner) -> ImportRow:
    cleaned = await asyncio.to_thread(cleaner, row.job_title, row.company)
    return row.model_copy(update={
        "job_title": cleaned.get("job_title") or row.job_title,
        "company": cleaned.get("company") or row.company,
    })


async def import_rows(
    rows: Iterable[Union[ImportRow, RowFailure]],
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    cleaner: Optional[Cleaner] = None,
) -> ImportSummary:
    """Resolve each row into the contact store, one transaction per row.

    A RowFailure in rows is a record that could not be read; it is counted
    as failed without touching storage.
    """
    summary = ImportSummary()
    for row in rows:
        summary.total_rows += 1
        if isinstance(row, RowFailure):
            summary.failed += 1
            summary.failures.append(row)
            logger.error("Row %d failed: %s", row.row_number, row.reason)
            continue
        if not row.first_name or not row.last_name:
            summary.skipped += 1
            logger.warning("Row %d skipped: missing first or last name", row.row_number)
            continue

        if cleaner is not None:
            row = await _clean(row, cleaner)

        fields = ContactFields(
            first_name=row.first_name,
            last_name=row.last_name,
            job_title=row.job_title,
            company=row.company,
            city=row.city,
            state=row.state,
            country=row.country,
            linkedin_url=row.linkedin_url,
        )
        trust = SourceTrust(
            verified=bool(row.emails) and row.emails[0].verified, source="csv_import"
        )
        try:
            async with contact_transaction(session_factory) as session:
                _, created = await resolve_contact(session, fields, row.emails, trust)
        except DuplicateContactError as exc:
            summary.duplicates += 1
            summary.failures.append(
                RowFailure(row_number=row.row_number, reason=str(exc), duplicate=True)
            )
            logger.warning("Row %d (%s %s) duplicate: %s",
                           row.row_number, row.first_name, row.last_name, exc)
        except ContactError as exc:
            summary.failed += 1
            summary.failures.append(RowFailure(row_number=row.row_number, reason=str(exc)))
            logger.error("Row %d (%s %s) failed: %s",
                         row.row_number, row.first_name, row.last_name, exc)
        else:
            if created:
                summary.created += 1
            else:
                summary.updated += 1

        if summary.total_rows % PROGRESS_EVERY == 0:
            logger.info("Processed %d rows (%d created, %d updated)",
                        summary.total_rows, summary.created, summary.updated)

    logger.info(
        "Import finished: %d rows, %d created, %d updated, %d skipped, %d duplicates, %d failed",
        summary.total_rows, summary.created, summary.updated,
        summary.skipped, summary.duplicates, summary.failed,
    )
    return summary


async def import_csv(
    path: Union[str, Path],
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    clean: bool = False,
) -> ImportSummary:
    """Import an Apollo export file. clean=True runs titles/companies through the LLM."""
    cleaner: Optional[Cleaner] = None
    if clean:
        from tools.cleaning_tools import clean_contact_data
        cleaner = clean_contact_data

    # data rows start on line 2
    rows = (
        RowFailure(row_number=n, reason=f"Unreadable CSV record: {row}")
        if isinstance(row, csv.Error) else map_row(n, row)
        for n, row in enumerate(read_rows(path), start=2)
    )
    return await import_rows(rows, session_factory=session_factory, cleaner=cleaner)
