"""Typed failures of invoice creation."""


class BillingError(Exception):
    """Base class for failures surfaced as an invoice creation result."""

    code = "billing_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SubscriptionNotFoundError(BillingError):
    code = "subscription_not_found"


class PeriodResolutionError(BillingError):
    """Subscription or plan state does not allow computing a billing period."""

    code = "period_resolution_error"


class FeeGenerationError(BillingError):
    """The fee generator failed for this invoice attempt."""

    code = "fee_generation_error"


class PersistenceError(BillingError):
    """The invoice transaction could not be committed."""

    code = "persistence_error"


class DuplicateInvoiceError(PersistenceError):
    """The subscription already has an invoice for the resolved period."""

    code = "duplicate_invoice"


class TaxIntegrityError(Exception):
    """A fee tax allocation references a tax that does not exist.

    Raised on corrupted data only; never converted into a failure result.
    """
