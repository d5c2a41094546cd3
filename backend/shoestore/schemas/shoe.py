"""
Shoe Store Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract for shoe records.
How:   FastAPI uses these models to decode request bodies, serialize responses,
       and generate OpenAPI documentation.
Who:   Route handlers (request bodies, response models) and ShoeService
       (decoding stored documents).

Decoding Rules:
    - Fields absent from the JSON body, or sent as null, take the type's zero
      value ("" / 0 / 0.0).
    - Request values must already have the declared JSON type (strict mode):
      "size": "42" and "size": 42.0 are decode errors; an integer price is fine.
    - An `id` in a request body is ignored (extra keys are dropped).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class ShoeFields(BaseModel):
    """
    What:  The client-writable fields of a shoe.
    Who:   Body of POST /create and PUT /update.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", strict=True, description="Model name, free-form")
    brand: str = Field(default="", strict=True, description="Brand name, free-form")
    size: int = Field(default=0, strict=True, description="Shoe size")
    price: float = Field(default=0.0, strict=True, description="Unit price")

    @field_validator("name", "brand", "size", "price", mode="before")
    @classmethod
    def null_is_zero_value(cls, v: Any, info: ValidationInfo) -> Any:
        """An explicit null leaves the field at its zero value."""
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class Shoe(BaseModel):
    """
    What:  Full representation of a stored shoe.
    Who:   Returned by /create, /getbyid, /update and (as a list) /getall.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default="", description="Application-level identifier, generated on create")
    name: str = Field(default="")
    brand: str = Field(default="")
    size: int = Field(default=0)
    price: float = Field(default=0.0)


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
