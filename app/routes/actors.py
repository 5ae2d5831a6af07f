from fastapi import APIRouter, Depends, status

from app.schemas.actor import Actor, ActorCreate, ActorEnvelope, ActorListEnvelope, ActorUpdate
from app.schemas.movie import MessageResponse
from app.schemas.user import User
from app.schemas.validation import validate_actor
from app.services.base import Models
from app.services.errors import DuplicateNameError, RecordNotFoundError, StoreError
from app.utils.dependencies import get_models, read_id_param, require_authenticated_user, require_role_admin
from app.utils.errors import failed_validation, not_found, server_error
from app.utils.validator import Validator

router = APIRouter(prefix="/actors", tags=["Actors"])

DUPLICATE_ACTOR_MESSAGE = "an actor with this full name already exists"


def save_errors(v: Validator, error: StoreError):
    """Map a store failure on insert/update to an HTTP error"""
    if isinstance(error, DuplicateNameError):
        v.add_error("full_name", DUPLICATE_ACTOR_MESSAGE)
        return failed_validation(v.errors)
    if isinstance(error, RecordNotFoundError):
        return not_found()
    return server_error(error)


@router.post("", response_model=ActorEnvelope, status_code=status.HTTP_201_CREATED)
def create_actor(
    actor_data: ActorCreate,
    _: User = Depends(require_role_admin),
    models: Models = Depends(get_models),
):
    """
    Add an actor (admin only)

    - **full_name**: unique, up to 200 characters
    - **gender**: male or female
    - **birth_date**: RFC3339 timestamp in the past
    """
    actor = Actor(full_name=actor_data.full_name, gender=actor_data.gender, birth_date=actor_data.birth_date)

    v = Validator()
    if not validate_actor(v, actor).valid():
        raise failed_validation(v.errors)

    try:
        actor = models.actors.insert(actor)
    except StoreError as e:
        raise save_errors(v, e)

    return {"actor": actor}


@router.get("", response_model=ActorListEnvelope)
def list_actors(
    _: User = Depends(require_authenticated_user),
    models: Models = Depends(get_models),
):
    """All actors with the ids of the movies they play in"""
    try:
        actors = models.actors.get_all()
    except StoreError as e:
        raise server_error(e)
    return {"actors": actors}


@router.get("/{actor_id}", response_model=ActorEnvelope)
def get_actor(
    actor_id: str,
    _: User = Depends(require_authenticated_user),
    models: Models = Depends(get_models),
):
    record_id = read_id_param(actor_id)
    try:
        actor = models.actors.get(record_id)
    except RecordNotFoundError:
        raise not_found()
    except StoreError as e:
        raise server_error(e)
    return {"actor": actor}


@router.patch("/{actor_id}", response_model=ActorEnvelope)
def update_actor(
    actor_id: str,
    update_data: ActorUpdate,
    _: User = Depends(require_role_admin),
    models: Models = Depends(get_models),
):
    """Partial update: omitted or null fields keep their current value"""
    record_id = read_id_param(actor_id)
    try:
        actor = models.actors.get(record_id)
    except RecordNotFoundError:
        raise not_found()
    except StoreError as e:
        raise server_error(e)

    changes = update_data.model_dump(exclude_none=True)
    actor = Actor.model_validate({**actor.model_dump(), **changes})

    v = Validator()
    if not validate_actor(v, actor).valid():
        raise failed_validation(v.errors)

    try:
        actor = models.actors.update(actor)
    except StoreError as e:
        raise save_errors(v, e)

    return {"actor": actor}


@router.delete("/{actor_id}", response_model=MessageResponse)
def delete_actor(
    actor_id: str,
    _: User = Depends(require_role_admin),
    models: Models = Depends(get_models),
):
    """Remove an actor; movies stay and lose the actor from their cast"""
    record_id = read_id_param(actor_id)
    try:
        models.actors.delete(record_id)
    except RecordNotFoundError:
        raise not_found()
    except StoreError as e:
        raise server_error(e)
    return {"message": "actor successfully deleted"}
