"""
HTTP error responses.

Every helper returns an HTTPException; the handlers in app/main.py render
it as {"error": detail}. Server errors never carry internal detail.
"""
from fastapi import HTTPException, status
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "the server encountered a problem and could not process your request"
NOT_FOUND_MESSAGE = "the requested resource could not be found"
BASIC_CHALLENGE = {"WWW-Authenticate": "Basic"}


def server_error(error: Exception) -> HTTPException:
    logger.error(f"Server error: {str(error)}", exc_info=error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR_MESSAGE)


def not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)


def method_not_allowed(method: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail=f"the {method} method is not supported for this resource",
    )


def bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def failed_validation(errors: Dict[str, str]) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=dict(errors))


def rate_limit_exceeded() -> HTTPException:
    return HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="rate limit exceeded")


def invalid_authentication_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="invalid or missing authentication credentials",
        headers=BASIC_CHALLENGE,
    )


def invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="invalid authentication credentials",
        headers=BASIC_CHALLENGE,
    )


def authentication_required() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="you must be authenticated to access this resource",
        headers=BASIC_CHALLENGE,
    )


def not_permitted() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="your user account doesn't have the necessary permissions to access this resource",
    )


def error_body(exc: HTTPException) -> dict:
    return {"error": exc.detail}


def describe_request_error(errors: List[dict]) -> str:
    """One client-facing sentence for the first body/query decoding failure"""
    if not errors:
        return "body contains badly-formed JSON"

    error = errors[0]
    kind = error.get("type", "")
    # List indexes are dropped so errors point at the field, not the element
    loc = [part for part in error.get("loc", ()) if isinstance(part, str) and part != "body"]
    field = loc[-1] if loc else ""

    if kind == "json_invalid":
        position = error.get("ctx", {}).get("error", "")
        return f"body contains badly-formed JSON {position}".strip()
    if kind == "extra_forbidden":
        return f'body contains unknown key "{field}"'
    if kind == "missing" and not loc:
        return "body must not be empty"
    if kind == "missing":
        return f'body is missing required field "{field}"'
    if kind in ("model_attributes_type", "dict_type") and len(loc) == 0:
        return "body must be a single JSON object"
    if field:
        return f'body contains incorrect JSON type for field "{field}"'
    return "body contains badly-formed JSON"
