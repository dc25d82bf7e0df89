from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from billrun.schemas.fee import FeeResponse


class InvoiceCreateRequest(BaseModel):
    subscription_id: UUID
    billing_at: datetime


class InvoiceAppliedTaxResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_id: UUID
    tax_id: UUID | None = None
    tax_code: str
    tax_name: str
    tax_description: str | None = None
    tax_rate: Decimal
    amount_cents: int
    amount_currency: str


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    invoice_number: str
    subscription_id: UUID
    status: str
    from_date: date
    to_date: date
    issuing_date: date
    fees_amount_cents: int
    taxes_amount_cents: int
    total_amount_cents: int
    taxes_rate: Decimal
    currency: str
    created_at: datetime
    updated_at: datetime


class InvoiceDetailResponse(InvoiceResponse):
    fees: list[FeeResponse] = Field(default_factory=list)
    applied_taxes: list[InvoiceAppliedTaxResponse] = Field(default_factory=list)
