from fastapi import Depends, Request
from fastapi.security import HTTPBasic

from app.schemas.movie import MAX_RECORD_ID
from app.schemas.user import ANONYMOUS_USER, User
from app.services.base import Models
from app.utils.errors import authentication_required, not_found, not_permitted


class BasicAuthScheme(HTTPBasic):
    """Puts HTTP Basic into the OpenAPI schema; AuthenticationMiddleware does the checking"""

    async def __call__(self, request: Request):
        return None


basic_scheme = BasicAuthScheme()


def get_models(request: Request) -> Models:
    return request.app.state.models


def get_current_user(request: Request) -> User:
    return getattr(request.state, "user", ANONYMOUS_USER)


# Dependency for routes that need any logged in user
def require_authenticated_user(
    request: Request,
    _credentials=Depends(basic_scheme),
) -> User:
    user = get_current_user(request)
    if user.is_anonymous:
        raise authentication_required()
    return user


# Dependency for admin-only routes
def require_role_admin(user: User = Depends(require_authenticated_user)) -> User:
    if user.role != "admin":
        raise not_permitted()
    return user


def read_id_param(value: str) -> int:
    """Path ids must be positive integers; anything else is a 404"""
    try:
        record_id = int(value)
    except ValueError:
        raise not_found()
    if record_id < 1 or record_id > MAX_RECORD_ID:
        raise not_found()
    return record_id
