"""Unit tests for the resolve sequence (matcher and merger mocked)."""
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest

from identity.engine import prepare_fields, resolve_contact
from identity.errors import ContactValidationError
from schemas.contact import ContactFields, EmailFact, SourceTrust

ENGINE_MODULE = "identity.engine"


class TestPrepareFields:
    def test_canonical_url_is_stored_and_matched(self):
        fields, signals = prepare_fields(ContactFields(
            first_name=" Jane ",
            last_name="Doe",
            company="Acme · Full-time",
            job_title="Senior Data Scientist",
            linkedin_url="linkedin.com/IN/JaneDoe/",
        ))
        assert fields.linkedin_url == "https://www.linkedin.com/in/janedoe/"
        assert fields.first_name == "Jane"
        assert fields.company == "Acme"
        assert fields.category == "Data Scientist"
        assert signals.canonical_url == fields.linkedin_url
        assert signals.raw_url is None

    def test_unusable_url_is_matched_but_never_stored(self):
        fields, signals = prepare_fields(ContactFields(
            first_name="Jane", last_name="Doe", linkedin_url="https://example.com/jane",
        ))
        assert fields.linkedin_url is None
        assert signals.canonical_url is None
        assert signals.raw_url == "https://example.com/jane"

    def test_explicit_category_is_kept(self):
        fields, _ = prepare_fields(ContactFields(job_title="Recruiter", category="Analyst"))
        assert fields.category == "Analyst"


class TestResolveContact:
    @pytest.mark.asyncio
    async def test_missing_name_fails_before_any_query(self):
        with patch(f"{ENGINE_MODULE}.match_contact", new=AsyncMock()) as match:
            with pytest.raises(ContactValidationError):
                await resolve_contact(MagicMock(), ContactFields(first_name="Jane"), [], SourceTrust())
        match.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_each_email_keeps_its_own_verification(self):
        session = MagicMock()
        contact = SimpleNamespace(id=uuid.uuid4())
        with patch(f"{ENGINE_MODULE}.match_contact", new=AsyncMock(return_value=(None, None))), \
             patch(f"{ENGINE_MODULE}.merge_contact", new=AsyncMock(return_value=contact)), \
             patch(f"{ENGINE_MODULE}.merge_email", new=AsyncMock()) as merge_email:
            result, created = await resolve_contact(
                session,
                ContactFields(first_name="Jane", last_name="Doe"),
                [EmailFact(address="a@acme.com", verified=True), EmailFact(address="b@acme.com")],
                SourceTrust(verified=True, source="csv_import"),
            )
        assert result is contact
        assert created is True
        assert merge_email.await_args_list == [
            call(session, contact.id, "a@acme.com", SourceTrust(verified=True, source="csv_import")),
            call(session, contact.id, "b@acme.com", SourceTrust(verified=False, source="csv_import")),
        ]

    @pytest.mark.asyncio
    async def test_existing_match_is_not_created(self):
        existing = SimpleNamespace(id=uuid.uuid4())
        with patch(f"{ENGINE_MODULE}.match_contact", new=AsyncMock(return_value=(existing, "name"))), \
             patch(f"{ENGINE_MODULE}.merge_contact", new=AsyncMock(return_value=existing)) as merge_contact, \
             patch(f"{ENGINE_MODULE}.merge_email", new=AsyncMock()):
            _, created = await resolve_contact(
                MagicMock(), ContactFields(first_name="Jane", last_name="Doe"), [], SourceTrust()
            )
        assert created is False
        assert merge_contact.call_args.args[1] is existing
