"""Fee schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from billrun.models.fee import FeeKind


class FeeAppliedTaxCreate(BaseModel):
    """One tax allocation carried by a fee before it is persisted."""

    tax_id: UUID
    tax_rate: Decimal
    amount_cents: int = 0


class FeeCreate(BaseModel):
    """Schema for creating a fee together with its tax allocations."""

    invoice_id: UUID | None = None
    subscription_id: UUID | None = None
    kind: FeeKind = FeeKind.SUBSCRIPTION
    amount_cents: int = 0
    description: str | None = None
    applied_taxes: list[FeeAppliedTaxCreate] = Field(default_factory=list)


class FeeResponse(BaseModel):
    """Schema for fee response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    subscription_id: UUID | None = None
    position: int
    kind: str
    amount_cents: int
    taxes_amount_cents: int
    taxes_rate: Decimal
    description: str | None = None
    created_at: datetime
