"""Contact input, trust and result schemas."""
from datetime import datetime
from typing import List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


Source = Literal["manual", "csv_import", "vendor", "linkedin_scrape"]


class SourceTrust(BaseModel):
    """How far the engine may trust facts from one call site."""

    verified: bool = False
    source: Source = "manual"


class EmailFact(BaseModel):
    address: str
    verified: bool = False


class ContactFields(BaseModel):
    """Normalized contact facts handed to the merger."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    category: Optional[str] = None
    linkedin_url: Optional[str] = None


class ContactSignals(BaseModel):
    """Identity keys the matcher tries, strongest first."""

    canonical_url: Optional[str] = None
    raw_url: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None


class ContactCreate(BaseModel):
    """Payload of the interactive contact-creation entry point.

    Accepts both snake_case and the camelCase keys the web client sends.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")
    job_title: Optional[str] = Field(default=None, alias="jobTitle")
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    linkedin_url: Optional[str] = Field(default=None, alias="linkedinUrl")
    emails: List[str] = Field(default_factory=list)
    is_verified: bool = Field(default=False, alias="isVerified")

    @field_validator("emails", mode="before")
    @classmethod
    def _coerce_emails(cls, value: Union[None, str, List[str]]) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [e for e in value if isinstance(e, str) and e.strip()]


class ImportRow(BaseModel):
    """One vendor CSV row after column mapping."""

    row_number: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    linkedin_url: Optional[str] = None
    emails: List[EmailFact] = Field(default_factory=list)


class EmailView(BaseModel):
    email: str
    is_primary: bool
    is_verified: bool


class ContactView(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    job_title: Optional[str] = None
    company: Optional[str] = None
    category: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    linkedin_url: Optional[str] = None
    is_verified: bool
    created_at: datetime
    updated_at: datetime
    emails: List[EmailView] = Field(default_factory=list)


class LookupResult(BaseModel):
    found: bool
    contact: Optional[ContactView] = None
    email: Optional[str] = None
    emails: List[EmailView] = Field(default_factory=list)
    matched_by: Optional[Literal["linkedin_url", "name"]] = None


class EnrichmentResult(BaseModel):
    found: bool
    email: Optional[str] = None
    saved: bool = False
    contact: Optional[ContactView] = None
    vendor_person: Optional[dict] = None
    error: Optional[str] = None


class RowFailure(BaseModel):
    row_number: int
    reason: str
    duplicate: bool = False


class ImportSummary(BaseModel):
    total_rows: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    duplicates: int = 0
    failed: int = 0
    failures: List[RowFailure] = Field(default_factory=list)
