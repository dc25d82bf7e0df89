from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from billrun.core.database import get_db
from billrun.models.invoice import Invoice, InvoiceStatus
from billrun.repositories.fee_repository import FeeRepository
from billrun.repositories.invoice_repository import InvoiceRepository
from billrun.schemas.fee import FeeResponse
from billrun.schemas.invoice import (
    InvoiceAppliedTaxResponse,
    InvoiceCreateRequest,
    InvoiceDetailResponse,
    InvoiceResponse,
)
from billrun.services.errors import (
    DuplicateInvoiceError,
    PersistenceError,
    SubscriptionNotFoundError,
)
from billrun.services.invoice_creation import InvoiceCreateService

router = APIRouter()


def _detail(db: Session, invoice: Invoice) -> InvoiceDetailResponse:
    invoice_id = UUID(str(invoice.id))
    fees = FeeRepository(db).get_by_invoice_id(invoice_id)
    applied_taxes = InvoiceRepository(db).get_applied_taxes(invoice_id)
    return InvoiceDetailResponse(
        **InvoiceResponse.model_validate(invoice).model_dump(),
        fees=[FeeResponse.model_validate(fee) for fee in fees],
        applied_taxes=[InvoiceAppliedTaxResponse.model_validate(tax) for tax in applied_taxes],
    )


@router.get(
    "/",
    response_model=list[InvoiceResponse],
    summary="List invoices",
)
async def list_invoices(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    subscription_id: UUID | None = None,
    status: InvoiceStatus | None = None,
    db: Session = Depends(get_db),
) -> list[Invoice]:
    """List invoices with optional filters."""
    repo = InvoiceRepository(db)
    invoices = repo.get_all(
        skip=skip,
        limit=limit,
        subscription_id=subscription_id,
        status=status,
    )
    total = repo.count(subscription_id=subscription_id, status=status)
    response.headers["X-Total-Count"] = str(total)
    return invoices


@router.post(
    "/",
    response_model=InvoiceDetailResponse,
    status_code=201,
    summary="Create invoice for a billing instant",
    responses={
        404: {"description": "Subscription not found"},
        409: {"description": "Invoice already exists for this period"},
        422: {"description": "Billing period or fees could not be computed"},
        503: {"description": "Invoice could not be persisted"},
    },
)
async def create_invoice(
    data: InvoiceCreateRequest,
    db: Session = Depends(get_db),
) -> InvoiceDetailResponse:
    """Create the invoice of a subscription for the period billed at ``billing_at``."""
    service = InvoiceCreateService(db)
    result = await service.create(data.subscription_id, data.billing_at)

    if isinstance(result.error, SubscriptionNotFoundError):
        raise HTTPException(status_code=404, detail=result.error.message)
    if isinstance(result.error, DuplicateInvoiceError):
        raise HTTPException(status_code=409, detail=result.error.message)
    if isinstance(result.error, PersistenceError):
        raise HTTPException(
            status_code=503,
            detail={"code": result.error.code, "message": result.error.message},
        )
    if result.error is not None:
        raise HTTPException(
            status_code=422,
            detail={"code": result.error.code, "message": result.error.message},
        )

    if result.invoice is None:
        raise HTTPException(status_code=500, detail="Invoice creation returned no invoice")
    return _detail(db, result.invoice)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDetailResponse,
    summary="Get invoice",
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> InvoiceDetailResponse:
    """Get an invoice by ID, with its fees and applied taxes."""
    invoice = InvoiceRepository(db).get_by_id(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return _detail(db, invoice)
