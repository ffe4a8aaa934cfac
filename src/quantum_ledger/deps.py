"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

No external DI container. Lifespan (main.py) creates the store, provider and
services once and attaches them to app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from quantum_ledger.errors import AuthError, ServiceErrorMapper
from quantum_ledger.providers import MarketProviderABC
from quantum_ledger.schemas import UserClaims
from quantum_ledger.services import AuthService, PortfolioService

_bearer = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """Resolve the AuthService created at startup."""
    return request.app.state.auth_service


def get_portfolio_service(request: Request) -> PortfolioService:
    """Resolve the PortfolioService created at startup."""
    return request.app.state.portfolio_service


def get_market_provider(request: Request) -> MarketProviderABC:
    """Resolve the shared market data provider."""
    return request.app.state.market_provider


def get_error_mapper(request: Request) -> ServiceErrorMapper:
    """Resolve the shared error mapper."""
    return request.app.state.error_mapper


def get_current_user(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    error_mapper: Annotated[ServiceErrorMapper, Depends(get_error_mapper)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> UserClaims:
    """Verify the bearer token on the request; 401 when missing or invalid."""
    token = credentials.credentials if credentials is not None else None
    try:
        return auth_service.verify_token(token)
    except AuthError as exc:
        error_mapper.raise_http(exc)


# Type aliases for route injection
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PortfolioServiceDep = Annotated[PortfolioService, Depends(get_portfolio_service)]
MarketProviderDep = Annotated[MarketProviderABC, Depends(get_market_provider)]
ErrorMapperDep = Annotated[ServiceErrorMapper, Depends(get_error_mapper)]
CurrentUser = Annotated[UserClaims, Depends(get_current_user)]
