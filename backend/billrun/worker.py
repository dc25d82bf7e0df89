import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from arq import cron

from billrun.core.database import SessionLocal
from billrun.models.subscription import SubscriptionStatus
from billrun.repositories.plan_repository import PlanRepository
from billrun.repositories.subscription_repository import SubscriptionRepository
from billrun.services.billing_period import BillingPeriodResolver
from billrun.services.errors import PeriodResolutionError
from billrun.services.invoice_creation import InvoiceCreateService
from billrun.services.subscription_lifecycle import SubscriptionLifecycleService
from billrun.tasks import redis_settings

logger = logging.getLogger(__name__)


async def terminate_subscription_task(ctx: dict[str, Any], subscription_id: str) -> bool:
    """Background task: terminate a subscription replaced by a pending successor.

    Enqueued after the subscription's invoice is committed.

    Args:
        ctx: ARQ worker context.
        subscription_id: UUID string of the subscription to terminate.

    Returns:
        True if the subscription exists and is terminated afterwards.
    """
    db = SessionLocal()
    try:
        sub_repo = SubscriptionRepository(db)
        if not sub_repo.get_by_id(UUID(subscription_id)):
            logger.warning("Subscription %s not found for termination", subscription_id)
            return False

        lifecycle = SubscriptionLifecycleService(db)
        subscription = lifecycle.terminate_subscription(UUID(subscription_id))
        logger.info("Terminated subscription %s", subscription_id)
        return subscription.status == SubscriptionStatus.TERMINATED.value
    finally:
        db.close()


async def generate_periodic_invoices_task(ctx: dict[str, Any]) -> int:
    """Background task: invoice every active subscription whose period ends today.

    Runs daily. A subscription is due when today is one of its period
    boundaries; the billed period is the one that just ended.
    """
    db = SessionLocal()
    try:
        now = datetime.now(UTC)
        today = now.date()

        subscriptions = SubscriptionRepository(db).get_by_statuses([SubscriptionStatus.ACTIVE])

        resolver = BillingPeriodResolver()
        plan_repo = PlanRepository(db)
        count = 0

        for sub in subscriptions:
            plan = plan_repo.get_by_id(UUID(str(sub.plan_id)))
            if not plan:
                continue

            try:
                due = resolver.is_billing_day(sub, plan, today)
            except PeriodResolutionError as exc:
                logger.warning("Skipping subscription %s: %s", sub.id, exc.message)
                continue
            if not due:
                continue

            result = await InvoiceCreateService(db).create(UUID(str(sub.id)), now)
            if result.success:
                count += 1
            else:
                logger.warning(
                    "Periodic invoice for subscription %s failed: %s",
                    sub.id,
                    result.error.code if result.error else "unknown",
                )

        if count > 0:
            logger.info("Generated %d periodic invoices", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    functions = [
        terminate_subscription_task,
        generate_periodic_invoices_task,
    ]
    cron_jobs = [
        cron(generate_periodic_invoices_task, hour=0, minute=5),  # daily after midnight
    ]
    redis_settings = redis_settings
