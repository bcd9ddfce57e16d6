"""Map domain exceptions to HTTP responses"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from phantom_wallet.api.dependencies import get_request_id
from phantom_wallet.domain.exceptions import (
    AmountExceedsLimit,
    CollateralInUse,
    DomainException,
    IneligibleForLoan,
    InvalidInput,
    NotFound,
    Unauthenticated,
    WalletServiceError,
)
from phantom_wallet.infrastructure.observability.metrics import wallet_failures_counter

STATUS_CODES = {
    Unauthenticated: 401,
    NotFound: 404,
    IneligibleForLoan: 422,
    AmountExceedsLimit: 422,
    InvalidInput: 400,
    CollateralInUse: 409,
    WalletServiceError: 503,
}


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """One human-readable message per error kind, as {"detail": ...}"""
    status_code = next((code for kind, code in STATUS_CODES.items() if isinstance(exc, kind)), 500)
    request_id = get_request_id(request)

    if isinstance(exc, WalletServiceError):
        wallet_failures_counter.inc()
        logging.error(f"Wallet API error: {exc}", extra={"request_id": request_id})
        return JSONResponse(status_code=status_code, content={"detail": "Wallet service unavailable"})

    logging.warning(
        f"{type(exc).__name__}: {exc}",
        extra={"request_id": request_id, "path": request.url.path},
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})
