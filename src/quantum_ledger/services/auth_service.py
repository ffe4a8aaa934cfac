"""Authentication service: registration, login and bearer-token verification.

Tokens are stateless HS256 JWTs carrying {id, email, name, iat, exp}. No
server-side session table is kept; validity is signature plus expiry.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from quantum_ledger.config import Settings
from quantum_ledger.errors import AuthError, ConflictError, ValidationError
from quantum_ledger.schemas import AuthResponse, UserClaims
from quantum_ledger.store import CredentialStore, UserRecord

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
MISSING_TOKEN = "Missing or invalid token"
INVALID_TOKEN = "Invalid or expired token"

# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def normalize_email(email: str) -> str:
    """Trim and lower-case an email for comparison and storage."""
    return email.strip().lower()


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class AuthService:
    """Registers users, checks credentials and issues/validates tokens."""

    def __init__(self, store: CredentialStore, settings: Settings) -> None:
        self._store = store
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._token_ttl = timedelta(seconds=settings.token_ttl_seconds)
        self._rounds = settings.bcrypt_rounds
        # Compared against when the account does not exist, so both login
        # failure paths spend the same bcrypt time.
        self._dummy_hash = bcrypt.hashpw(
            b"quantum-ledger-dummy", bcrypt.gensalt(self._rounds)
        )

    async def register(
        self, name: str | None, email: str | None, password: str | None
    ) -> AuthResponse:
        """Create an account and return a fresh token for it.

        Raises:
            ValidationError: A field is missing or blank, or the password is too long.
            ConflictError: The normalized email is already registered.
        """
        if _is_blank(name) or _is_blank(email) or _is_blank(password):
            raise ValidationError("Name, email and password are required")
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > _BCRYPT_MAX_BYTES:
            raise ValidationError(
                f"Password must be at most {_BCRYPT_MAX_BYTES} bytes"
            )

        normalized = normalize_email(email)
        if self._store.find_by_email(normalized) is not None:
            # Skips the hash; the store re-checks atomically on insert.
            raise ConflictError("User with this email already exists")
        password_hash = await self._hash_password(password_bytes)
        record = await self._store.add(name.strip(), normalized, password_hash)
        return self._auth_response(record)

    async def login(self, email: str | None, password: str | None) -> AuthResponse:
        """Check credentials and return a fresh token.

        Raises:
            ValidationError: Email or password missing.
            AuthError: Unknown email or wrong password (same message for both).
        """
        if _is_blank(email) or _is_blank(password):
            raise ValidationError("Email and password are required")

        record = self._store.find_by_email(normalize_email(email))
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > _BCRYPT_MAX_BYTES:
            # No stored password is this long; still pay one bcrypt check.
            await asyncio.to_thread(
                bcrypt.checkpw, password_bytes[:_BCRYPT_MAX_BYTES], self._dummy_hash
            )
            matches = False
        elif record is None:
            await asyncio.to_thread(bcrypt.checkpw, password_bytes, self._dummy_hash)
            matches = False
        else:
            matches = await asyncio.to_thread(
                bcrypt.checkpw, password_bytes, record.password_hash.encode("utf-8")
            )
        if record is None or not matches:
            logger.info("Login failed")
            raise AuthError(INVALID_CREDENTIALS)
        return self._auth_response(record)

    def verify_token(self, token: str | None) -> UserClaims:
        """Check signature and expiry; return the embedded claims verbatim.

        The store is not consulted: records are immutable, so self-issued
        claims cannot go stale.

        Raises:
            AuthError: Token missing, malformed, tampered with or expired.
        """
        if _is_blank(token):
            raise AuthError(MISSING_TOKEN)
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
            return UserClaims(
                id=payload["id"], name=payload["name"], email=payload["email"]
            )
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
            raise AuthError(INVALID_TOKEN) from exc

    def issue_token(self, record: UserRecord) -> str:
        """Sign a token for a user, valid for the configured TTL."""
        issued_at = datetime.now(timezone.utc)
        claims = {
            "id": record.id,
            "email": record.email,
            "name": record.name,
            "iat": issued_at,
            "exp": issued_at + self._token_ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    async def _hash_password(self, password: bytes) -> str:
        """bcrypt in a worker thread so the event loop keeps serving."""
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, password, bcrypt.gensalt(self._rounds)
        )
        return hashed.decode("utf-8")

    def _auth_response(self, record: UserRecord) -> AuthResponse:
        return AuthResponse(token=self.issue_token(record), user=record.to_public())
