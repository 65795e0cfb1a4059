"""Unit tests for driver-error translation at the transaction boundary."""
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from db.connection import contact_transaction
from identity.errors import (
    ContactStorageError,
    ContactValidationError,
    DuplicateContactError,
)


class _FakeTx:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.session.committed = True
        else:
            self.session.rolled_back = True
        return False


class _FakeSession:
    def __init__(self):
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def begin(self):
        return _FakeTx(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False


class _FakeFactory:
    def __init__(self):
        self.sessions = []

    def __call__(self):
        session = _FakeSession()
        self.sessions.append(session)
        return session


class _PgError(Exception):
    def __init__(self, sqlstate, constraint_name=None):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


@pytest.mark.asyncio
async def test_commits_and_closes_on_success():
    factory = _FakeFactory()
    async with contact_transaction(factory) as session:
        assert session is factory.sessions[0]
    assert session.committed and session.closed and not session.rolled_back


@pytest.mark.asyncio
async def test_unique_violation_becomes_duplicate():
    factory = _FakeFactory()
    orig = _PgError("23505", constraint_name="uq_contacts_linkedin_url")
    with pytest.raises(DuplicateContactError) as exc_info:
        async with contact_transaction(factory):
            raise IntegrityError("INSERT ...", {}, orig)
    assert exc_info.value.constraint == "uq_contacts_linkedin_url"
    assert factory.sessions[0].rolled_back
    assert factory.sessions[0].closed


@pytest.mark.asyncio
async def test_other_integrity_error_becomes_validation():
    factory = _FakeFactory()
    with pytest.raises(ContactValidationError):
        async with contact_transaction(factory):
            raise IntegrityError("INSERT ...", {}, _PgError("23502"))


@pytest.mark.asyncio
async def test_driver_failure_becomes_storage_error():
    factory = _FakeFactory()
    with pytest.raises(ContactStorageError):
        async with contact_transaction(factory):
            raise OperationalError("SELECT 1", {}, SimpleNamespace())
    assert factory.sessions[0].rolled_back


@pytest.mark.asyncio
async def test_engine_errors_pass_through_after_rollback():
    factory = _FakeFactory()
    error = ContactValidationError("First and last name are required", field="first_name")
    with pytest.raises(ContactValidationError) as exc_info:
        async with contact_transaction(factory):
            raise error
    assert exc_info.value is error
    assert factory.sessions[0].rolled_back


class _ExhaustedPoolFactory:
    def __call__(self):
        raise PoolTimeoutError("QueuePool limit of size 5 overflow 10 reached")


@pytest.mark.asyncio
async def test_pool_timeout_becomes_storage_error():
    with pytest.raises(ContactStorageError) as exc_info:
        async with contact_transaction(_ExhaustedPoolFactory()):
            pass
    assert isinstance(exc_info.value.__cause__, PoolTimeoutError)
