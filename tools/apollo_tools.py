"""Apollo.io People Match client.

Calls the Apollo REST API directly (no official Python SDK). Like every
tool here it never raises: failures come back as a dict with an 'error'.
"""
import os
import re
from typing import Any, Dict

import requests


APOLLO_BASE = "https://api.apollo.io/api/v1"
# unit must start uppercase and span 3+ chars so "Coco" or "Dodo" survive
_REPEATED_RE = re.compile(r"^([A-Z].{2,}?)\1+$")


def _api_key() -> str:
    return os.environ["APOLLO_API_KEY"]


def _timeout() -> float:
    return float(os.environ.get("APOLLO_TIMEOUT", "15"))


def collapse_repeated(company: str) -> str:
    """Collapse a name scraped twice ('AcmeAcme') back to 'Acme'.

    Only a whole-string repetition of a capitalized unit of three or more
    characters collapses, so 'Google', 'Coco' and 'Tartar' are left alone.
    """
    return _REPEATED_RE.sub(r"\1", company).strip()


def apollo_people_match(
    first_name: str = "",
    last_name: str = "",
    company: str = "",
    linkedin_url: str = "",
) -> Dict[str, Any]:
    """Look up one person on Apollo and reveal their email.

    Args:
        first_name: Person's first name.
        last_name: Person's last name.
        company: Current employer name.
        linkedin_url: LinkedIn profile URL (any spelling).

    Returns:
        Dict with 'person' (Apollo person object or None) and 'params' sent,
        or 'error' on failure.
    """
    params: Dict[str, str] = {}
    if first_name and first_name.strip():
        params["first_name"] = first_name.strip()
    if last_name and last_name.strip():
        params["last_name"] = last_name.strip()
    if company and company.strip():
        params["organization_name"] = collapse_repeated(company.strip())
    if linkedin_url and linkedin_url.strip():
        params["linkedin_url"] = linkedin_url.strip()
    if not params:
        return {"person": None, "error": "At least one search parameter is required"}
    params["reveal_personal_emails"] = "true"

    try:
        resp = requests.post(
            f"{APOLLO_BASE}/people/match",
            params=params,
            headers={
                "Content-Type": "application/json",
                "Cache-Control": "no-cache",
                "X-Api-Key": _api_key(),
            },
            timeout=_timeout(),
        )
        resp.raise_for_status()
        data = resp.json()
        return {"person": data.get("person"), "params": params}
    except Exception as exc:
        return {"person": None, "params": params, "error": str(exc)}
