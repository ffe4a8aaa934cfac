"""Main module for the Quantum Ledger backend."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from quantum_ledger.config import Settings
from quantum_ledger.errors import ServiceErrorMapper, ValidationError
from quantum_ledger.log import setup_logging
from quantum_ledger.providers import CoinGeckoProvider, MarketProviderABC
from quantum_ledger.routers import auth_router, markets_router, portfolio_router
from quantum_ledger.services import AuthService, PortfolioService
from quantum_ledger.store import CredentialStore

logger = logging.getLogger(__name__)


def describe_request_error(exc: RequestValidationError) -> str:
    """One-line message for the first problem FastAPI found in a request."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not location and first.get("type") == "missing":
        return "Request body is required"
    field = ".".join(location) or "body"
    return f"Invalid request: {field}: {first.get('msg', 'invalid value')}"


def create_app(
    settings: Settings | None = None,
    market_provider: MarketProviderABC | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        settings: Defaults to Settings.from_env().
        market_provider: Defaults to a CoinGeckoProvider built from settings.
            The app closes whichever provider it ends up with on shutdown.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Create store, provider and services at startup; close provider on shutdown."""
        settings.warn_if_insecure()
        provider = market_provider or CoinGeckoProvider(
            api_key=settings.coingecko_api_key,
            timeout=settings.coingecko_timeout,
        )
        store = CredentialStore()

        fastapi_app.state.settings = settings
        fastapi_app.state.error_mapper = ServiceErrorMapper(api_name="CoinGecko")
        fastapi_app.state.credential_store = store
        fastapi_app.state.auth_service = AuthService(store, settings)
        fastapi_app.state.market_provider = provider
        fastapi_app.state.portfolio_service = PortfolioService(provider)

        yield

        try:
            await provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)

    fastapi_app = FastAPI(
        title="Quantum Ledger",
        description="Demo crypto portfolio backend: auth and portfolio valuation",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fastapi_app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies get the same 400 {"detail": str} as missing fields."""
        error = ValidationError(describe_request_error(exc))
        status_code, detail = request.app.state.error_mapper.to_http(error)
        return JSONResponse(status_code=status_code, content={"detail": detail})

    fastapi_app.include_router(auth_router)
    fastapi_app.include_router(portfolio_router)
    fastapi_app.include_router(markets_router)

    @fastapi_app.get("/", response_class=PlainTextResponse)
    def health() -> str:
        """Return health check text."""
        return "Quantum Ledger backend is running"

    return fastapi_app


app = create_app()


def run() -> None:
    """Run the server (uvicorn). Use for `poetry run start`."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger.info("Backend listening on http://%s:%s", settings.host, settings.port)
    uvicorn.run("quantum_ledger.main:app", host=settings.host, port=settings.port)
