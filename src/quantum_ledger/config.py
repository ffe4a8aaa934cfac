"""Runtime configuration read from environment variables."""
import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Insecure development default; never deploy with it. Set JWT_SECRET instead.
DEV_JWT_SECRET = "dev_fallback_secret_change_me_now"


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Process-wide settings. Build with Settings.from_env() at startup."""

    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    bcrypt_rounds: int = 10
    coingecko_api_key: str | None = None
    coingecko_timeout: float = 10.0
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 4000

    @property
    def uses_dev_secret(self) -> bool:
        """True when tokens are signed with the built-in development secret."""
        return self.jwt_secret == DEV_JWT_SECRET

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment, falling back to defaults."""
        return cls(
            jwt_secret=os.getenv("JWT_SECRET") or DEV_JWT_SECRET,
            token_ttl_seconds=int(os.getenv("TOKEN_TTL_SECONDS", "3600")),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "10")),
            coingecko_api_key=os.getenv("COINGECKO_API_KEY") or None,
            coingecko_timeout=float(os.getenv("COINGECKO_TIMEOUT", "10")),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")) or ("*",),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "4000")),
        )

    def warn_if_insecure(self) -> None:
        """Log a warning when the development secret is in use."""
        if self.uses_dev_secret:
            logger.warning(
                "JWT_SECRET is not set; signing tokens with the insecure "
                "development secret. Do not run this configuration in production."
            )
