"""LinkedIn profile URL canonicalization and lookup variants.

Stored URLs are always in the canonical form
``https://www.linkedin.com/in/{slug}/`` (lowercase slug, https, www, one
trailing slash). Older rows may hold non-canonical values, so lookups go
through ``lookup_variants`` rather than comparing the canonical string alone.
"""
import re
from typing import Optional
from urllib.parse import urlsplit

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_PROFILE_SLUG_RE = re.compile(r"/in/([A-Za-z0-9_-]+)", re.IGNORECASE)

CANONICAL_PREFIX = "https://www.linkedin.com/in/"


def _ensure_scheme(value: str) -> str:
    return value if _SCHEME_RE.match(value) else f"https://{value}"


def _is_linkedin_host(host: str) -> bool:
    return host == "linkedin.com" or host.endswith(".linkedin.com")


def is_linkedin_url(raw_url: Optional[str]) -> bool:
    """True when raw_url parses to a linkedin.com host, profile or not."""
    if not raw_url or not isinstance(raw_url, str) or not raw_url.strip():
        return False
    try:
        host = (urlsplit(_ensure_scheme(raw_url.strip())).hostname or "").lower()
    except ValueError:
        return False
    return _is_linkedin_host(host)


def canonicalize(raw_url: Optional[str]) -> Optional[str]:
    """Return the canonical profile URL, or None if raw_url is not a LinkedIn profile.

    Never raises: malformed input, foreign hosts and non-/in/ paths all map to None.
    """
    if not raw_url or not isinstance(raw_url, str):
        return None
    value = raw_url.strip()
    if not value:
        return None

    try:
        parsed = urlsplit(_ensure_scheme(value))
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None
    if not _is_linkedin_host(host):
        return None

    match = _PROFILE_SLUG_RE.search(parsed.path)
    if not match:
        return None
    return f"{CANONICAL_PREFIX}{match.group(1).lower()}/"


def build_variants(raw_url: Optional[str]) -> list[str]:
    """Best-effort spellings of a URL that failed canonicalization.

    Covers trailing slash, http/https, www/non-www, and query/hash removal.
    Only for matching against legacy rows; never store these.
    """
    if not raw_url or not isinstance(raw_url, str):
        return []
    lower = raw_url.strip().lower()
    if not lower:
        return []

    # dict keeps insertion order and drops duplicates
    candidates: dict[str, None] = {lower: None}
    if lower.endswith("/"):
        candidates[lower.rstrip("/")] = None
    else:
        candidates[f"{lower}/"] = None

    try:
        parsed = urlsplit(_ensure_scheme(lower))
    except ValueError:
        return list(candidates)
    if not parsed.netloc:
        return list(candidates)

    host_no_www = parsed.netloc.removeprefix("www.")
    host_www = f"www.{host_no_www}"
    path = parsed.path.rstrip("/")

    for scheme in ("https://", "http://", ""):
        for host in (host_no_www, host_www):
            base = f"{scheme}{host}{path}"
            candidates[base] = None
            candidates[f"{base}/"] = None

    return list(candidates)


def lookup_variants(raw_url: Optional[str]) -> list[str]:
    """Lowercased keys the matcher compares against ``lower(linkedin_url)``.

    Canonicalizable input yields the canonical URL with and without its
    trailing slash, plus the legacy http:// spellings of both. Anything else
    falls back to ``build_variants``.
    """
    canonical = canonicalize(raw_url)
    if canonical is None:
        return build_variants(raw_url)

    no_slash = canonical.rstrip("/")
    legacy = canonical.replace("https://", "http://", 1)
    return [canonical, no_slash, legacy, legacy.rstrip("/")]
