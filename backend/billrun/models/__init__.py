from billrun.models.fee import Fee, FeeKind
from billrun.models.fee_applied_tax import FeeAppliedTax
from billrun.models.invoice import Invoice, InvoiceStatus
from billrun.models.invoice_applied_tax import InvoiceAppliedTax
from billrun.models.invoice_number_sequence import InvoiceNumberSequence
from billrun.models.plan import Plan, PlanFrequency, PlanInterval
from billrun.models.subscription import Subscription, SubscriptionStatus
from billrun.models.tax import Tax

__all__ = [
    "Fee",
    "FeeAppliedTax",
    "FeeKind",
    "Invoice",
    "InvoiceAppliedTax",
    "InvoiceNumberSequence",
    "InvoiceStatus",
    "Plan",
    "PlanFrequency",
    "PlanInterval",
    "Subscription",
    "SubscriptionStatus",
    "Tax",
]
