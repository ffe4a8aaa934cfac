"""Credential storage: user records and the in-memory store."""
from quantum_ledger.store.credential_store import CredentialStore
from quantum_ledger.store.models import UserRecord

__all__ = ["CredentialStore", "UserRecord"]
