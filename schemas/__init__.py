from .contact import (
    SourceTrust,
    EmailFact,
    ContactFields,
    ContactSignals,
    ContactCreate,
    ImportRow,
    EmailView,
    ContactView,
    LookupResult,
    EnrichmentResult,
    RowFailure,
    ImportSummary,
)

__all__ = [
    "SourceTrust", "EmailFact", "ContactFields", "ContactSignals",
    "ContactCreate", "ImportRow",
    "EmailView", "ContactView", "LookupResult", "EnrichmentResult",
    "RowFailure", "ImportSummary",
]
