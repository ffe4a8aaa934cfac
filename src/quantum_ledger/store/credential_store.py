"""In-memory, append-only credential store."""
import asyncio
import logging

from quantum_ledger.errors import ConflictError
from quantum_ledger.store.models import UserRecord

logger = logging.getLogger(__name__)


class CredentialStore:
    """Holds UserRecords keyed by normalized email.

    add() performs the uniqueness check, id assignment and insert under one
    lock, so two concurrent registrations of the same email cannot both win.
    Reads do not take the lock; records are never mutated or removed.
    """

    def __init__(self) -> None:
        self._by_email: dict[str, UserRecord] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._by_email)

    async def add(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Append a new record.

        Args:
            name: Display name.
            email: Normalized (lower-cased) email; the unique key.
            password_hash: Already-hashed password.

        Returns:
            The stored UserRecord with its assigned id.

        Raises:
            ConflictError: A record with this email already exists.
        """
        async with self._lock:
            if email in self._by_email:
                raise ConflictError("User with this email already exists")
            record = UserRecord(
                id=self._next_id,
                name=name,
                email=email,
                password_hash=password_hash,
            )
            self._next_id += 1
            self._by_email[email] = record
        logger.info("Registered user id=%s", record.id)
        return record

    def find_by_email(self, email: str) -> UserRecord | None:
        """Return the record for a normalized email, or None."""
        return self._by_email.get(email)
