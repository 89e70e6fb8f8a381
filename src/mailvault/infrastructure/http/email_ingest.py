"""Email ingest endpoints for the producer service."""

from __future__ import annotations

import hmac

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from mailvault.application.secret_cache import SecretCache
from mailvault.application.use_cases.publish_email import EmailPublisher
from mailvault.application.use_cases.validate_email import EmailValidator
from mailvault.domain.errors import (
    AuthError,
    EmailValidationError,
    MailvaultError,
    SecretStoreError,
    TransportError,
)
from mailvault.domain.models import EmailRequest, EmailResponse
from mailvault.infrastructure.http.correlation import correlation_id_from
from mailvault.infrastructure.http.dependencies import (
    get_publisher,
    get_secret_cache,
    get_validator,
)
from mailvault.infrastructure.settings import Settings, get_settings

router = APIRouter()

INVALID_DATA_MESSAGE = "Invalid email data - all fields are required and timestamp must be valid"


def _error(status_code: int, message: str, correlation_id: str) -> JSONResponse:
    body = EmailResponse.error(message, correlation_id).model_dump(by_alias=True)
    return JSONResponse(status_code=status_code, content=body)


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/api/email")
def ingest_email(
    payload: EmailRequest,
    request: Request,
    validator: EmailValidator = Depends(get_validator),
    publisher: EmailPublisher = Depends(get_publisher),
) -> JSONResponse:
    """
    Accept one email record and queue it for archival.

    This endpoint:
    1. Validates the shared token (401 on failure)
    2. Validates the email data (400 on failure)
    3. Publishes the record to the queue (500 on transport failure)
    """
    correlation_id = correlation_id_from(request)
    logger.info(f"Received email processing request. CorrelationId: {correlation_id}")

    try:
        ok, reason = validator.validate_token(payload.token)
        if not ok:
            raise AuthError(reason)

        ok, reason = validator.validate_email_data(payload.data)
        if not ok:
            raise EmailValidationError(reason)

        message_id = publisher.publish(payload.data, correlation_id)
    except MailvaultError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error processing email request. CorrelationId: {correlation_id}: {e}")
        return _error(500, "Internal server error", correlation_id)

    logger.info(
        f"Email processing request completed successfully. MessageId: {message_id}, "
        f"CorrelationId: {correlation_id}"
    )
    body = EmailResponse.ok("Email processed successfully and queued for storage", correlation_id)
    return JSONResponse(status_code=200, content=body.model_dump(by_alias=True))


@router.get("/api/health", response_class=PlainTextResponse)
def health() -> str:
    """Liveness probe."""
    return "Service is healthy"


@router.post("/internal/token/refresh", status_code=204)
def refresh_token(
    x_admin_secret: str = Header(default="", alias="x-admin-secret"),
    settings: Settings = Depends(get_settings),
    cache: SecretCache = Depends(get_secret_cache),
) -> Response:
    """Reload the shared token from the secret store after a rotation."""
    expected = settings.admin_refresh_secret.get_secret_value() if settings.admin_refresh_secret else ""
    if not expected or not hmac.compare_digest(x_admin_secret.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Token refresh unauthorized attempt")
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        cache.refresh()
    except SecretStoreError as e:
        logger.error(f"Token refresh failed: {e}")
        raise HTTPException(status_code=503, detail="Secret store unavailable")

    return Response(status_code=204)


# ============================================================================
# Error mapping
# ============================================================================


async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
    correlation_id = correlation_id_from(request)
    logger.warning(f"Token validation failed ({exc}). CorrelationId: {correlation_id}")
    return _error(401, "Invalid token", correlation_id)


async def _validation_error(request: Request, exc: EmailValidationError) -> JSONResponse:
    correlation_id = correlation_id_from(request)
    logger.warning(f"Email data validation failed ({exc}). CorrelationId: {correlation_id}")
    return _error(400, INVALID_DATA_MESSAGE, correlation_id)


async def _transport_error(request: Request, exc: TransportError) -> JSONResponse:
    correlation_id = correlation_id_from(request)
    logger.error(f"Queue transport error ({exc}). CorrelationId: {correlation_id}")
    return _error(500, "Internal server error", correlation_id)


async def _mailvault_error(request: Request, exc: MailvaultError) -> JSONResponse:
    correlation_id = correlation_id_from(request)
    logger.error(f"Unhandled service error ({exc}). CorrelationId: {correlation_id}")
    return _error(500, "Internal server error", correlation_id)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    correlation_id = correlation_id_from(request)
    fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()})
    logger.warning(f"Malformed request body ({', '.join(fields)}). CorrelationId: {correlation_id}")
    return _error(400, f"Invalid request body: {', '.join(fields) or 'body'}", correlation_id)


def register_error_handlers(app: FastAPI) -> None:
    """Map service errors onto the stable ``{success, message, correlationId}`` shape."""
    app.add_exception_handler(AuthError, _auth_error)
    app.add_exception_handler(EmailValidationError, _validation_error)
    app.add_exception_handler(TransportError, _transport_error)
    app.add_exception_handler(MailvaultError, _mailvault_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
