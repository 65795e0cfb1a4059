"""Unit tests for matcher precedence (repository queries mocked)."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from identity.matcher import find_existing_contact, match_contact
from schemas.contact import ContactSignals

MATCHER_MODULE = "identity.matcher"


@pytest.mark.asyncio
async def test_url_match_wins_over_name():
    by_url = SimpleNamespace(id="url-hit")
    with patch(f"{MATCHER_MODULE}.contacts_repo.find_by_linkedin_variants",
               new=AsyncMock(return_value=by_url)) as by_variants, \
         patch(f"{MATCHER_MODULE}.contacts_repo.find_by_name", new=AsyncMock()) as by_name:
        contact, tier = await match_contact(MagicMock(), ContactSignals(
            canonical_url="https://www.linkedin.com/in/janedoe/",
            first_name="Jane",
            last_name="Doe",
        ))
    assert contact is by_url
    assert tier == "linkedin_url"
    by_name.assert_not_awaited()
    variants = by_variants.call_args.args[1]
    assert "http://www.linkedin.com/in/janedoe" in variants


@pytest.mark.asyncio
async def test_raw_url_uses_generic_variants():
    with patch(f"{MATCHER_MODULE}.contacts_repo.find_by_linkedin_variants",
               new=AsyncMock(return_value=None)) as by_variants, \
         patch(f"{MATCHER_MODULE}.contacts_repo.find_by_name", new=AsyncMock(return_value=None)):
        await match_contact(MagicMock(), ContactSignals(raw_url="linkedin.com/pub/jane"))
    variants = by_variants.call_args.args[1]
    assert "https://www.linkedin.com/pub/jane/" in variants


@pytest.mark.asyncio
async def test_falls_back_to_name_with_normalized_company():
    by_name_hit = SimpleNamespace(id="name-hit")
    with patch(f"{MATCHER_MODULE}.contacts_repo.find_by_linkedin_variants",
               new=AsyncMock(return_value=None)), \
         patch(f"{MATCHER_MODULE}.contacts_repo.find_by_name",
               new=AsyncMock(return_value=by_name_hit)) as by_name:
        contact, tier = await match_contact(MagicMock(), ContactSignals(
            canonical_url="https://www.linkedin.com/in/janedoe/",
            first_name=" Jane ",
            last_name="Doe",
            company="Acme · Full-time",
        ))
    assert contact is by_name_hit
    assert tier == "name"
    assert by_name.call_args.args[1:] == ("Jane", "Doe", "Acme")


@pytest.mark.asyncio
async def test_no_signals_no_queries():
    with patch(f"{MATCHER_MODULE}.contacts_repo.find_by_linkedin_variants", new=AsyncMock()) as by_variants, \
         patch(f"{MATCHER_MODULE}.contacts_repo.find_by_name", new=AsyncMock()) as by_name:
        assert await find_existing_contact(MagicMock(), ContactSignals(first_name="Jane")) is None
    by_variants.assert_not_awaited()
    by_name.assert_not_awaited()
