"""Authentication routes: register, login and current user."""
from fastapi import APIRouter

from quantum_ledger.deps import AuthServiceDep, CurrentUser, ErrorMapperDep
from quantum_ledger.errors import QuantumLedgerError
from quantum_ledger.schemas import (AuthResponse, LoginRequest, MeResponse,
                                    RegisterRequest)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    auth_service: AuthServiceDep,
    error_mapper: ErrorMapperDep,
) -> AuthResponse:
    """Create an account and return a bearer token for it.

    400 when a field is missing, 409 when the email is already registered.
    """
    try:
        return await auth_service.register(body.name, body.email, body.password)
    except QuantumLedgerError as exc:
        error_mapper.raise_http(exc)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    auth_service: AuthServiceDep,
    error_mapper: ErrorMapperDep,
) -> AuthResponse:
    """Exchange email and password for a bearer token.

    401 with the same message whether the account is unknown or the password is wrong.
    """
    try:
        return await auth_service.login(body.email, body.password)
    except QuantumLedgerError as exc:
        error_mapper.raise_http(exc)


@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUser) -> MeResponse:
    """Return the claims of the presented bearer token."""
    return MeResponse(user=user)
