"""
Shoe Store Backend — Shoe Service (Record Store Adapter)
=========================================================

What:  Maps each logical shoe operation onto one MongoDB collection call.
How:   Wraps an AsyncCollection; every method performs a single driver call
       and converts the result (or the lack of one) into schemas or exceptions.
Who:   Constructed per request by the route layer's dependency; holds no state
       beyond the collection handle.

Operation Mapping:
    create_shoe  → insert_one(document with fresh id)
    list_shoes   → find({}) materialized in full
    get_shoe     → find_one({"id": id})
    update_shoe  → find_one_and_update({"id": id}, {"$set": ...}, AFTER)
    delete_shoe  → delete_one({"id": id})

Error Handling Strategy:
    - No matching document → NotFoundError
    - pymongo.errors.PyMongoError → DatabaseError carrying the driver message
    - A stored document that does not decode into Shoe → DatabaseError
"""

import logging
from typing import Any, List, Mapping

from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from shoestore.exceptions import DatabaseError, NotFoundError
from shoestore.models.shoe import (
    SHOE_PROJECTION,
    build_document,
    generate_shoe_id,
    id_filter,
    replace_fields_update,
)
from shoestore.schemas.shoe import Shoe, ShoeFields

logger = logging.getLogger(__name__)


def _decode(document: Mapping[str, Any]) -> Shoe:
    try:
        return Shoe.model_validate(document)
    except PydanticValidationError as e:
        raise DatabaseError(
            message=f"Error decoding shoe: {e}",
            context={"shoe_id": document.get("id")},
        ) from e


class ShoeService:
    """
    Business logic layer for shoe operations.

    Every method is a coroutine and may run concurrently with others on the
    same collection; the driver's connection pool handles the concurrency.
    """

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    async def create_shoe(self, fields: ShoeFields) -> Shoe:
        """
        Insert a new shoe with a freshly generated id.

        Args:
            fields: Decoded request body (any client id already discarded)

        Returns:
            The created Shoe, including its generated id

        Raises:
            DatabaseError: insert_one failed
        """
        shoe_id = generate_shoe_id()
        document = build_document(shoe_id, fields)

        try:
            # insert_one adds `_id` to the dict it receives; hand it a copy
            await self.collection.insert_one(dict(document))
        except PyMongoError as e:
            logger.error("Insert failed for shoe %s: %s", shoe_id, e)
            raise DatabaseError(message=str(e), context={"shoe_id": shoe_id}) from e

        logger.info("Created shoe %s", shoe_id)
        return Shoe.model_validate(document)

    async def list_shoes(self) -> List[Shoe]:
        """
        Return every shoe in the collection.

        The whole result set is loaded into memory; there is no pagination.

        Raises:
            DatabaseError: find failed, or any document failed to decode
        """
        try:
            documents = await self.collection.find({}, SHOE_PROJECTION).to_list()
        except PyMongoError as e:
            logger.error("Listing shoes failed: %s", e)
            raise DatabaseError(message=str(e)) from e

        return [_decode(document) for document in documents]

    async def get_shoe(self, shoe_id: str) -> Shoe:
        """
        Fetch one shoe by its application-level id.

        Raises:
            NotFoundError: No shoe has this id
            DatabaseError: find_one failed
        """
        try:
            document = await self.collection.find_one(id_filter(shoe_id), SHOE_PROJECTION)
        except PyMongoError as e:
            logger.error("Lookup failed for shoe %s: %s", shoe_id, e)
            raise DatabaseError(message=str(e), context={"shoe_id": shoe_id}) from e

        if document is None:
            raise NotFoundError(shoe_id=shoe_id)
        return _decode(document)

    async def update_shoe(self, shoe_id: str, fields: ShoeFields) -> Shoe:
        """
        Overwrite every non-id field of a shoe and return the stored result.

        find_one_and_update matches, writes and reads back in one atomic
        server-side operation, so the returned document is exactly the state
        this call produced.

        Raises:
            NotFoundError: No shoe has this id
            DatabaseError: find_one_and_update failed
        """
        try:
            document = await self.collection.find_one_and_update(
                id_filter(shoe_id),
                replace_fields_update(fields),
                projection=SHOE_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Update failed for shoe %s: %s", shoe_id, e)
            raise DatabaseError(
                message=f"Error updating shoe: {e}",
                context={"shoe_id": shoe_id},
            ) from e

        if document is None:
            raise NotFoundError(shoe_id=shoe_id)

        logger.info("Updated shoe %s", shoe_id)
        return _decode(document)

    async def delete_shoe(self, shoe_id: str) -> None:
        """
        Hard-delete a shoe.

        Raises:
            NotFoundError: No shoe has this id
            DatabaseError: delete_one failed
        """
        try:
            result = await self.collection.delete_one(id_filter(shoe_id))
        except PyMongoError as e:
            logger.error("Delete failed for shoe %s: %s", shoe_id, e)
            raise DatabaseError(message=str(e), context={"shoe_id": shoe_id}) from e

        if result.deleted_count == 0:
            raise NotFoundError(shoe_id=shoe_id)

        logger.info("Deleted shoe %s", shoe_id)
