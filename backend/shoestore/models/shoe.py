"""
Shoe Store Backend — Shoe Document Model
==========================================

What:  The shape of a shoe document in the `shoes` MongoDB collection.
How:   Plain dict documents; these helpers build them and the filters,
       projections and update specs every ShoeService operation uses.
Who:   Used by ShoeService for CRUD operations and by database.py for indexes.

Document Layout:
    {
        "_id":   ObjectId,   ← MongoDB internal, never exposed
        "id":    str,        ← application-level key, uuid4 hex
        "name":  str,
        "brand": str,
        "size":  int,
        "price": float
    }

    `id` is the only lookup key. Reads project `_id` out so documents decode
    straight into the Shoe schema.
"""

import uuid
from typing import Any, Dict

from shoestore.schemas.shoe import ShoeFields

ID_FIELD = "id"
ID_INDEX_NAME = "idx_shoes_id"

# Applied to every read so the ObjectId never reaches the JSON encoder
SHOE_PROJECTION: Dict[str, int] = {"_id": 0}


def generate_shoe_id() -> str:
    """
    Return a fresh application-level shoe id.

    uuid4 draws 122 random bits from os.urandom, so concurrent creates share
    no generator state and collisions are negligible.
    """
    return uuid.uuid4().hex


def id_filter(shoe_id: str) -> Dict[str, Any]:
    """Exact-match filter on the application-level id."""
    return {ID_FIELD: shoe_id}


def build_document(shoe_id: str, fields: ShoeFields) -> Dict[str, Any]:
    """A new document: the generated id followed by every client-supplied field."""
    return {ID_FIELD: shoe_id, **fields.model_dump()}


def replace_fields_update(fields: ShoeFields) -> Dict[str, Any]:
    """
    `$set` spec overwriting every mutable field.

    All four fields are always written, so fields missing from the request
    body are reset to their zero values rather than merged.
    """
    return {"$set": fields.model_dump()}
