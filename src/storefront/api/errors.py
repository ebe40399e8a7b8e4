"""HTTP rendering of domain errors.

Protean's own handlers cover ``ValidationError`` (400) and
``ObjectNotFoundError`` (404). The typed storefront errors are registered on
top with their own status codes; security failures never echo detail.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.shared.errors import (
    CartNotOpen,
    InsufficientStock,
    InvalidInput,
    InvalidQuantity,
    InvalidSignature,
    InvalidState,
    NegativeStock,
    ProviderUnavailable,
    StorefrontError,
    UnknownTransaction,
    VariantNotFound,
)

_STATUS_CODES = {
    InvalidInput: 400,
    InvalidQuantity: 400,
    CartNotOpen: 409,
    VariantNotFound: 404,
    InsufficientStock: 409,
    NegativeStock: 409,
    InvalidState: 409,
    InvalidSignature: 401,
    UnknownTransaction: 404,
    ProviderUnavailable: 502,
}

_GENERIC_DETAIL = {
    InvalidSignature: "payment verification failed",
    UnknownTransaction: "payment verification failed",
    ProviderUnavailable: "payment provider unavailable, please retry",
}


def error_body(exc: StorefrontError) -> dict:
    body = {"error": exc.code, "detail": _GENERIC_DETAIL.get(type(exc), exc.messages)}
    if isinstance(exc, InsufficientStock):
        body.update(
            variant_id=exc.variant_id,
            sku=exc.sku,
            available=exc.available,
            requested=exc.requested,
        )
    return body


def _handler_for(status_code: int):
    async def handler(request: Request, exc: StorefrontError) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=error_body(exc))

    return handler


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler_for(status_code))
