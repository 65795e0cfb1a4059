"""Free-text cleanup for scraped contact fields."""
import re
from typing import Optional

_COMPANY_NOISE_RE = re.compile(r"[·|,\n]")
_WHITESPACE_RE = re.compile(r"\s+")

# Checked in order: the more specific title wins
# (University Recruiter before Recruiter, Co-Founder before Founder).
_CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("University Recruiter", ("university", "recruit")),
    ("Co-Founder", ("co-founder",)),
    ("Data Scientist", ("data scientist",)),
    ("Product Manager", ("product manager",)),
    ("Software Engineer", ("software engineer",)),
    ("Talent Acquisition", ("talent acquisition",)),
    ("Analyst", ("analyst",)),
    ("CEO", ("ceo",)),
    ("Founder", ("founder",)),
    ("Consultant", ("consultant",)),
    ("Designer", ("designer",)),
    ("Recruiter", ("recruit",)),
)


def normalize_company(raw: Optional[str]) -> str:
    """Strip LinkedIn UI noise from a company label.

    "Google · Full-time" -> "Google". Keeps the text before the first
    separator and collapses whitespace. None/blank gives "".
    """
    if not raw or not isinstance(raw, str):
        return ""
    value = _COMPANY_NOISE_RE.split(raw.strip(), maxsplit=1)[0]
    return _WHITESPACE_RE.sub(" ", value).strip()


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim a free-text value; blank becomes None."""
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def normalize_email(value: Optional[str]) -> str:
    if not value or not isinstance(value, str):
        return ""
    return value.strip().lower()


def infer_category(job_title: Optional[str]) -> Optional[str]:
    """Map a job title onto the closed contact category set, or None."""
    if not job_title:
        return None
    title = job_title.lower()
    for category, needles in _CATEGORY_RULES:
        if all(needle in title for needle in needles):
            return category
    return None
