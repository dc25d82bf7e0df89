"""Tax schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TaxCreate(BaseModel):
    code: str = Field(max_length=255)
    name: str = Field(max_length=255)
    rate: Decimal = Field(ge=0, le=100)
    description: str | None = None
    applied_by_default: bool = False


class TaxResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    rate: Decimal
    description: str | None = None
    applied_by_default: bool
    created_at: datetime
    updated_at: datetime
