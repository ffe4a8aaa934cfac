"""User records held by the credential store.

Records live in process memory only; a restart forgets every account.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from quantum_ledger.schemas import PublicUser


class UserRecord(BaseModel):
    """User account for authentication. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str  # lower-cased
    password_hash: str = Field(repr=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def to_public(self) -> PublicUser:
        """Redacted view without the password hash."""
        return PublicUser(id=self.id, name=self.name, email=self.email)
