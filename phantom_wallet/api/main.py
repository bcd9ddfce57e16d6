"""FastAPI application factory"""

import logging
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from phantom_wallet.api.errors import domain_exception_handler
from phantom_wallet.api.middleware import RequestIDMiddleware, MetricsMiddleware
from phantom_wallet.api.v1 import loans, savings
from phantom_wallet.config import Settings, settings
from phantom_wallet.domain.exceptions import DomainException
from phantom_wallet.domain.rates import rate_spread_violations
from phantom_wallet.infrastructure.observability.logging import setup_logging
from phantom_wallet.services.locks import UserLockRegistry

# Setup structured logging
setup_logging(settings.log_level)


def check_rate_spread(config: Settings) -> None:
    """Warn, or refuse to start, when a tier lends below its savings rate"""
    violations = [tier.value for tier in rate_spread_violations()]
    if not violations:
        return
    if config.enforce_rate_spread:
        raise RuntimeError(f"Loan rate does not exceed savings rate for tiers: {', '.join(violations)}")
    logging.warning("Loan/savings rate spread is not positive", extra={"tiers": violations})


def create_app(config: Settings = settings) -> FastAPI:
    """Create and configure FastAPI application"""
    check_rate_spread(config)

    app = FastAPI(
        title="PhantomPay Savings & Loans",
        description="Time-locked savings and savings-collateralized loans",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.user_locks = UserLockRegistry()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": config.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(savings.router, prefix="/v1", tags=["savings"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])

    return app


app = create_app()
