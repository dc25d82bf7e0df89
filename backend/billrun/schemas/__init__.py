from billrun.schemas.fee import (
    FeeAppliedTaxCreate,
    FeeCreate,
    FeeResponse,
)
from billrun.schemas.invoice import (
    InvoiceAppliedTaxResponse,
    InvoiceCreateRequest,
    InvoiceDetailResponse,
    InvoiceResponse,
)
from billrun.schemas.tax import TaxCreate, TaxResponse

__all__ = [
    "FeeAppliedTaxCreate",
    "FeeCreate",
    "FeeResponse",
    "InvoiceAppliedTaxResponse",
    "InvoiceCreateRequest",
    "InvoiceDetailResponse",
    "InvoiceResponse",
    "TaxCreate",
    "TaxResponse",
]
