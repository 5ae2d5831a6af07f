from fastapi import APIRouter, Depends, status

from app.schemas.user import User, UserCreate, UserEnvelope
from app.schemas.validation import validate_user
from app.services.base import Models
from app.services.errors import DuplicateNameError, StoreError
from app.utils.dependencies import get_models
from app.utils.errors import failed_validation, server_error
from app.utils.validator import Validator

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register_user(user_data: UserCreate, models: Models = Depends(get_models)):
    """
    Register a new account

    - **name**: unique, up to 200 bytes
    - **password**: 8 to 72 bytes

    New accounts always get the `user` role.
    """
    user = User(name=user_data.name, role="user")
    user.set_password(user_data.password)

    v = Validator()
    if not validate_user(v, user).valid():
        raise failed_validation(v.errors)

    try:
        user = models.users.insert(user)
    except DuplicateNameError:
        v.add_error("name", "a user with this name already exists")
        raise failed_validation(v.errors)
    except StoreError as e:
        raise server_error(e)

    return {"user": user}
