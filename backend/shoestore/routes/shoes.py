"""
Shoe Store Backend — Shoe Route Handlers
==========================================

What:  The five shoe endpoints, each bound to one path and one verb.
How:   Checks the required `id` query parameter, decodes the JSON body into
       ShoeFields, delegates to ShoeService, returns JSON.
Who:   Any HTTP client of the shoe API.

Route Inventory:
    POST   /create    → create a shoe, id generated server-side
    GET    /getall    → every shoe as a JSON array
    GET    /getbyid   → one shoe by ?id=
    PUT    /update    → overwrite every field of ?id= (no partial update)
    DELETE /delete    → hard-delete ?id=

A request with any other verb on these paths is answered 405 by the
HTTPException handler in main.py. On /create FastAPI decodes the body and
main.py renders RequestValidationError as DecodeError output. /update decodes
its own body after the id check, so a missing id wins over a bad body.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import ValidationError as PydanticValidationError
from pymongo.asynchronous.collection import AsyncCollection

from shoestore.config import Settings
from shoestore.database import get_shoe_collection
from shoestore.exceptions import (
    DatabaseError,
    DecodeError,
    NotFoundError,
    ValidationError,
    describe_validation_errors,
)
from shoestore.schemas.shoe import Shoe, ShoeFields
from shoestore.services.shoe_service import ShoeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Shoes"])

ID_REQUIRED = "ID is required."


# ── Dependencies ──────────────────────────────────────────────────────────
def get_shoe_service(
    collection: AsyncCollection = Depends(get_shoe_collection),
) -> ShoeService:
    return ShoeService(collection)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_id(id: Optional[str] = Query(default=None, description="Shoe id")) -> str:
    """Rejects a missing or empty `id` query parameter with 400."""
    if not id:
        raise ValidationError(message=ID_REQUIRED, field="id")
    return id


def _reported_as_not_found(exc: DatabaseError, shoe_id: str) -> NotFoundError:
    logger.warning("Reporting database error for shoe %s as not found: %s", shoe_id, exc.message)
    return NotFoundError(shoe_id=shoe_id, context={"cause": exc.message})


async def decode_shoe_fields(request: Request) -> ShoeFields:
    body = await request.body()
    try:
        return ShoeFields.model_validate_json(body)
    except PydanticValidationError as e:
        raise DecodeError(describe_validation_errors(e.errors(), prefix="body")) from e


# ── Routes ────────────────────────────────────────────────────────────────
@router.post(
    "/create",
    response_model=Shoe,
    summary="Create a shoe",
    responses={500: {"description": "Body could not be decoded, or insert failed"}},
)
async def create_shoe(
    fields: ShoeFields,
    service: ShoeService = Depends(get_shoe_service),
) -> Shoe:
    return await service.create_shoe(fields)


@router.get("/getall", response_model=List[Shoe], summary="List every shoe")
async def list_shoes(service: ShoeService = Depends(get_shoe_service)) -> List[Shoe]:
    """
    Return every stored shoe.

    An empty collection yields `[]`. One undecodable document fails the whole
    request with 500.
    """
    return await service.list_shoes()


@router.get(
    "/getbyid",
    response_model=Shoe,
    summary="Get a shoe by id",
    responses={400: {"description": "Missing id"}, 404: {"description": "Shoe not found."}},
)
async def get_shoe(
    shoe_id: str = Depends(require_id),
    service: ShoeService = Depends(get_shoe_service),
    settings: Settings = Depends(get_app_settings),
) -> Shoe:
    try:
        return await service.get_shoe(shoe_id)
    except DatabaseError as e:
        # Backend failures read as "Shoe not found." unless configured otherwise
        if not settings.backend_errors_as_not_found:
            raise
        raise _reported_as_not_found(e, shoe_id) from e


@router.put(
    "/update",
    response_model=Shoe,
    summary="Replace every field of a shoe",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ShoeFields.model_json_schema()}},
        }
    },
    responses={
        400: {"description": "Missing id"},
        404: {"description": "Shoe not found."},
        500: {"description": "Body could not be decoded, or update failed"},
    },
)
async def update_shoe(
    request: Request,
    shoe_id: str = Depends(require_id),
    service: ShoeService = Depends(get_shoe_service),
) -> Shoe:
    """
    Overwrite name, brand, size and price of the shoe with ?id=.

    Fields missing from the body are written as zero values.
    """
    fields = await decode_shoe_fields(request)
    return await service.update_shoe(shoe_id, fields)


@router.delete(
    "/delete",
    response_class=Response,
    summary="Delete a shoe by id",
    responses={
        200: {"description": "Deleted, empty body"},
        400: {"description": "Missing id"},
        404: {"description": "Shoe not found."},
    },
)
async def delete_shoe(
    shoe_id: str = Depends(require_id),
    service: ShoeService = Depends(get_shoe_service),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    try:
        await service.delete_shoe(shoe_id)
    except DatabaseError as e:
        # Backend failures read as "Shoe not found." unless configured otherwise
        if not settings.backend_errors_as_not_found:
            raise
        raise _reported_as_not_found(e, shoe_id) from e
    return Response(status_code=200)
