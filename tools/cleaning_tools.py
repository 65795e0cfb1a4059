"""LLM cleanup of scraped job titles and company names.

Scraped LinkedIn headlines carry noise ("Software Engineer @ Acme | ex-Foo").
This asks the active LLM for the bare title and employer. Any failure keeps
the raw values so an import never stalls on the model.
"""
import json
import logging
from typing import Dict, Optional

import litellm

from model_config import get_llm_model

logger = logging.getLogger(__name__)

_PROMPT = """Clean up this LinkedIn profile data.
Return ONLY a JSON object with "jobTitle" and "company" keys, no markdown.

Rules:
- Keep only the actual job title, drop company names, pipes, emojis and marketing text
- Keep only the company name, drop locations and extra descriptors
- Use null for a value that is missing or cannot be determined

Job title: {job_title}
Company: {company}"""


def _strip_fences(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
        content = content.rsplit("```", 1)[0]
    return content.strip()


def _value(raw: object) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    raw = raw.strip()
    return raw if raw and raw.lower() != "null" else None


def clean_contact_data(
    job_title: Optional[str], company: Optional[str]
) -> Dict[str, Optional[str]]:
    """Return {'job_title', 'company'} cleaned by the LLM, raw values on failure."""
    fallback = {"job_title": job_title or None, "company": company or None}
    if not job_title and not company:
        return fallback

    model = get_llm_model()
    if model is None:
        logger.warning("No LLM provider configured, keeping raw title/company")
        return fallback

    try:
        resp = litellm.completion(
            model=model,
            messages=[{
                "role": "user",
                "content": _PROMPT.format(
                    job_title=job_title or "Not provided",
                    company=company or "Not provided",
                ),
            }],
            temperature=0.1,
            max_tokens=100,
        )
        cleaned = json.loads(_strip_fences(resp.choices[0].message.content or ""))
    except Exception as exc:
        logger.warning("Contact cleaning failed, keeping raw values: %s", exc)
        return fallback

    if not isinstance(cleaned, dict):
        logger.warning("Contact cleaning returned %r, keeping raw values", cleaned)
        return fallback
    return {
        "job_title": _value(cleaned.get("jobTitle")),
        "company": _value(cleaned.get("company")),
    }
