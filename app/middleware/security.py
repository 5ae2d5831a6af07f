"""
Request middleware for the Filmoteka API

Outermost first: RecoverPanicMiddleware -> RequestLoggingMiddleware ->
RateLimitMiddleware -> AuthenticationMiddleware -> routes.
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import HTTPException
import base64
import binascii
import logging

from app.middleware.rate_limit import ClientRateLimiter
from app.schemas.user import ANONYMOUS_USER
from app.services.errors import RecordNotFoundError, StoreError
from app.utils.errors import (
    SERVER_ERROR_MESSAGE,
    error_body,
    invalid_authentication_credentials,
    invalid_credentials,
    rate_limit_exceeded,
    server_error,
)
from app.utils.security import PasswordHashError

logger = logging.getLogger(__name__)


def error_response(exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=exc.headers)


def client_ip(request: Request) -> str:
    """Client address, honouring proxy headers like realip does"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


class RecoverPanicMiddleware(BaseHTTPMiddleware):
    """Turn any unhandled exception into a 500 and close the connection"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled exception: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"error": SERVER_ERROR_MESSAGE},
                headers={"Connection": "close"},
            )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log successfully processed requests; failures are logged where they happen"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if response.status_code < 400:
            remote_addr = request.client.host if request.client else "-"
            logger.info(
                f"Request processed: {request.method} {request.url} "
                f"status_code={response.status_code} remote_addr={remote_addr}"
            )
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, limiter: ClientRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        if not self.limiter.allow(client_ip(request)):
            return error_response(rate_limit_exceeded())
        return await call_next(request)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Resolve the caller from HTTP Basic credentials.

    - no Authorization header: ANONYMOUS_USER, route gates decide
    - malformed header: 401 invalid or missing authentication credentials
    - unknown user / wrong password: 401 invalid authentication credentials
    - otherwise: the user is stored on request.state.user
    """

    async def dispatch(self, request: Request, call_next):
        header = request.headers.get("Authorization")

        if not header:
            request.state.user = ANONYMOUS_USER
            response = await call_next(request)
        else:
            user, failure = await self.authenticate(request, header)
            if failure is not None:
                response = error_response(failure)
            else:
                request.state.user = user
                response = await call_next(request)

        response.headers.add_vary_header("Authorization")
        return response

    async def authenticate(self, request: Request, header: str):
        """Returns (user, None) on success or (None, HTTPException) on failure"""
        parts = header.split(" ")
        if len(parts) != 2 or parts[0] != "Basic":
            return None, invalid_authentication_credentials()

        try:
            decoded = base64.b64decode(parts[1], validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None, invalid_authentication_credentials()

        username, separator, password = decoded.partition(":")
        if not separator:
            return None, invalid_authentication_credentials()

        models = request.app.state.models
        try:
            user = await run_in_threadpool(models.users.get, username)
        except RecordNotFoundError:
            logger.warning(f"Authentication failed: unknown user {username}")
            return None, invalid_credentials()
        except StoreError as e:
            return None, server_error(e)

        try:
            match = await run_in_threadpool(user.password_matches, password)
        except PasswordHashError as e:
            return None, server_error(e)

        if not match:
            logger.warning(f"Authentication failed: wrong password for {username}")
            return None, invalid_credentials()

        return user, None
