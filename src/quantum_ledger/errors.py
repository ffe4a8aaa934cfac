"""Domain exceptions and their mapping to HTTP responses."""
from dataclasses import dataclass

from fastapi import HTTPException


class QuantumLedgerError(Exception):
    """Base class for errors raised by the auth and portfolio services."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuantumLedgerError):
    """Required input is missing or empty."""


class ConflictError(QuantumLedgerError):
    """An identity (email) is already registered."""


class AuthError(QuantumLedgerError):
    """Bad credentials, or a missing, invalid or expired token."""


class FeedError(QuantumLedgerError):
    """The market data feed is unreachable or returned a malformed payload."""

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


@dataclass(frozen=True)
class ServiceErrorMapper:
    """Maps service exceptions to HTTP (status_code, detail).

    Routes call raise_http() so every endpoint classifies errors the same way.
    """

    api_name: str = "Market data API"

    def to_http(self, exc: Exception) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTP responses."""
        if isinstance(exc, ValidationError):
            return (400, exc.message)
        if isinstance(exc, ConflictError):
            return (409, exc.message)
        if isinstance(exc, AuthError):
            return (401, exc.message)
        if isinstance(exc, FeedError):
            if exc.timed_out:
                return (504, f"Request to {self.api_name} timed out")
            return (502, f"{self.api_name} error")
        return (500, "Internal server error")

    def raise_http(self, exc: Exception) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        raise HTTPException(
            status_code=status_code, detail=detail, headers=headers
        ) from exc
