"""Invoice creation for one subscription at one billing instant."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from billrun.models.invoice import Invoice
from billrun.models.plan import Plan
from billrun.models.subscription import Subscription
from billrun.repositories.fee_repository import FeeRepository
from billrun.repositories.invoice_repository import InvoiceRepository
from billrun.repositories.plan_repository import PlanRepository
from billrun.repositories.subscription_repository import SubscriptionRepository
from billrun.schemas.fee import FeeCreate
from billrun.services.billing_period import BillingPeriod, BillingPeriodResolver
from billrun.services.errors import (
    BillingError,
    DuplicateInvoiceError,
    FeeGenerationError,
    PeriodResolutionError,
    PersistenceError,
    SubscriptionNotFoundError,
)
from billrun.services.fee_generator import FeeGenerator, PlanFeeGenerator
from billrun.services.invoice_taxes import InvoiceTaxService
from billrun.services.subscription_lifecycle import SubscriptionLifecycleService

logger = logging.getLogger(__name__)

# Spelling of the period unique constraint in PostgreSQL and SQLite error messages
_PERIOD_CONFLICT_MARKERS = (
    "uq_invoices_subscription_period",
    "invoices.subscription_id, invoices.from_date, invoices.to_date",
)


def _is_period_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _PERIOD_CONFLICT_MARKERS)


@dataclass
class InvoiceCreateResult:
    """Outcome of an invoice creation attempt."""

    invoice: Invoice | None = None
    error: BillingError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class InvoiceCreateService:
    """Create a finalized invoice for a subscription billing period.

    Resolving the period, generating fees, persisting the invoice and
    aggregating its taxes happen in a single transaction. The lifecycle
    step only runs once that transaction is committed.
    """

    def __init__(self, db: Session, fee_generator: FeeGenerator | None = None):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)
        self.plan_repo = PlanRepository(db)
        self.invoice_repo = InvoiceRepository(db)
        self.fee_repo = FeeRepository(db)
        self.period_resolver = BillingPeriodResolver()
        self.fee_generator: FeeGenerator = fee_generator or PlanFeeGenerator(db)
        self.tax_service = InvoiceTaxService(db)
        self.lifecycle_service = SubscriptionLifecycleService(db)

    async def create(self, subscription_id: UUID, billing_instant: datetime) -> InvoiceCreateResult:
        """Create the invoice billed at ``billing_instant``.

        Callers key idempotency on the billed period; a second invoice for
        the same subscription period is rejected as a persistence error.
        """
        try:
            subscription, invoice = self._create_in_transaction(subscription_id, billing_instant)
        except BillingError as exc:
            self.db.rollback()
            logger.warning(
                "Invoice creation failed for subscription %s: %s", subscription_id, exc.message
            )
            return InvoiceCreateResult(error=exc)
        except Exception:
            self.db.rollback()
            raise

        await self.lifecycle_service.schedule_termination_if_replaced(subscription)
        return InvoiceCreateResult(invoice=invoice)

    def _create_in_transaction(
        self, subscription_id: UUID, billing_instant: datetime
    ) -> tuple[Subscription, Invoice]:
        subscription = self.subscription_repo.get_by_id(subscription_id)
        if not subscription:
            raise SubscriptionNotFoundError(f"Subscription {subscription_id} not found")

        plan = self.plan_repo.get_by_id(UUID(str(subscription.plan_id)))
        if not plan:
            raise PeriodResolutionError(f"Plan {subscription.plan_id} not found")

        period = self.period_resolver.resolve(subscription, plan, billing_instant)
        fees = self._generate_fees(subscription, plan, period)

        duplicate_message = (
            f"Subscription {subscription_id} is already invoiced for "
            f"{period.from_date} to {period.to_date}"
        )

        try:
            if self.invoice_repo.get_by_period(subscription_id, period.from_date, period.to_date):
                raise DuplicateInvoiceError(duplicate_message)

            invoice = self.invoice_repo.create(
                subscription_id=subscription_id,
                from_date=period.from_date,
                to_date=period.to_date,
                issuing_date=period.issuing_date,
                currency=str(plan.currency),
            )
            created_fees = self.fee_repo.create_bulk(UUID(str(invoice.id)), fees)
            invoice.fees_amount_cents = sum(int(fee.amount_cents) for fee in created_fees)  # type: ignore[assignment]

            self.tax_service.apply(invoice)
            self.invoice_repo.finalize(invoice)
            self.db.commit()
        except IntegrityError as exc:
            if _is_period_conflict(exc):
                raise DuplicateInvoiceError(duplicate_message) from exc
            raise PersistenceError(f"Could not persist invoice: {exc}") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not persist invoice: {exc}") from exc

        self.db.refresh(invoice)
        logger.info(
            "Created invoice %s for subscription %s (%s to %s)",
            invoice.invoice_number,
            subscription_id,
            period.from_date,
            period.to_date,
        )
        return subscription, invoice

    def _generate_fees(
        self, subscription: Subscription, plan: Plan, period: BillingPeriod
    ) -> list[FeeCreate]:
        try:
            return self.fee_generator.generate(
                subscription, plan, period.from_date, period.to_date
            )
        except FeeGenerationError:
            raise
        except Exception as exc:
            raise FeeGenerationError(f"Fee generation failed: {exc}") from exc
