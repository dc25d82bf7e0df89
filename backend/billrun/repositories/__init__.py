from billrun.repositories.fee_repository import FeeRepository
from billrun.repositories.invoice_repository import InvoiceRepository
from billrun.repositories.plan_repository import PlanRepository
from billrun.repositories.subscription_repository import SubscriptionRepository
from billrun.repositories.tax_repository import TaxRepository

__all__ = [
    "FeeRepository",
    "InvoiceRepository",
    "PlanRepository",
    "SubscriptionRepository",
    "TaxRepository",
]
