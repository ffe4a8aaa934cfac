"""Tests for the in-memory credential store."""
import asyncio

import pytest

from quantum_ledger.errors import ConflictError
from quantum_ledger.store import CredentialStore


class TestAdd:
    def test_assigns_increasing_ids(self, store: CredentialStore):
        first = asyncio.run(store.add("Ada", "ada@example.com", "hash-1"))
        second = asyncio.run(store.add("Bob", "bob@example.com", "hash-2"))
        assert (first.id, second.id) == (1, 2)
        assert len(store) == 2

    def test_sets_created_at(self, store: CredentialStore):
        record = asyncio.run(store.add("Ada", "ada@example.com", "hash"))
        assert record.created_at is not None

    def test_duplicate_email_conflicts(self, store: CredentialStore):
        asyncio.run(store.add("Ada", "ada@example.com", "hash"))
        with pytest.raises(ConflictError):
            asyncio.run(store.add("Other Ada", "ada@example.com", "hash"))
        assert len(store) == 1

    def test_rejected_insert_does_not_consume_an_id(self, store: CredentialStore):
        asyncio.run(store.add("Ada", "ada@example.com", "hash"))
        with pytest.raises(ConflictError):
            asyncio.run(store.add("Ada", "ada@example.com", "hash"))
        record = asyncio.run(store.add("Bob", "bob@example.com", "hash"))
        assert record.id == 2

    def test_concurrent_duplicates_only_one_wins(self, store: CredentialStore):
        async def race():
            return await asyncio.gather(
                *(store.add(f"User {i}", "same@example.com", "hash") for i in range(5)),
                return_exceptions=True,
            )

        results = asyncio.run(race())
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(conflicts) == 4
        assert len(store) == 1


class TestFindByEmail:
    def test_returns_record(self, store: CredentialStore):
        created = asyncio.run(store.add("Ada", "ada@example.com", "hash"))
        assert store.find_by_email("ada@example.com") == created

    def test_missing_returns_none(self, store: CredentialStore):
        assert store.find_by_email("nobody@example.com") is None

    def test_public_view_has_no_hash(self, store: CredentialStore):
        record = asyncio.run(store.add("Ada", "ada@example.com", "secret-hash"))
        public = record.to_public().model_dump()
        assert public == {"id": 1, "name": "Ada", "email": "ada@example.com"}
        assert "secret-hash" not in repr(record)
