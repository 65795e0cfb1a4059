"""Contact identity resolution: canonical keys, matching, and merge policy."""
from identity.errors import (
    ContactError,
    ContactStorageError,
    ContactValidationError,
    DuplicateContactError,
)
from identity.text import normalize_company
from identity.urls import build_variants, canonicalize, is_linkedin_url, lookup_variants

__all__ = [
    "ContactError", "ContactValidationError", "DuplicateContactError", "ContactStorageError",
    "canonicalize", "build_variants", "lookup_variants", "is_linkedin_url", "normalize_company",
]
