"""Subscription lifecycle around invoicing: successor hand-over and termination."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from billrun.models.subscription import Subscription, SubscriptionStatus
from billrun.repositories.subscription_repository import SubscriptionRepository
from billrun.tasks import enqueue_terminate_subscription

logger = logging.getLogger(__name__)


class SubscriptionLifecycleService:
    """Service for subscription transitions triggered by billing."""

    def __init__(self, db: Session):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)

    async def schedule_termination_if_replaced(self, subscription: Subscription) -> bool:
        """Enqueue termination when a pending successor replaces the subscription.

        Runs after the invoice is committed. Enqueue failures are logged and
        never propagate to the invoice.

        Returns:
            True if a termination job was enqueued.
        """
        subscription_id = UUID(str(subscription.id))
        successor = self.subscription_repo.get_pending_successor(subscription_id)
        if successor is None:
            return False

        try:
            await enqueue_terminate_subscription(str(subscription_id))
        except Exception:
            logger.exception("Failed to enqueue termination for subscription %s", subscription_id)
            return False

        logger.info(
            "Scheduled termination of subscription %s in favor of %s",
            subscription_id,
            successor.id,
        )
        return True

    def terminate_subscription(self, subscription_id: UUID) -> Subscription:
        """Terminate a subscription and activate its pending successor.

        1. Set status=terminated, terminated_at=now (no-op if already terminated)
        2. If a pending successor exists: set status=active, started_at=now
        """
        subscription = self.subscription_repo.get_by_id(subscription_id)
        if not subscription:
            raise ValueError(f"Subscription {subscription_id} not found")

        if subscription.status == SubscriptionStatus.TERMINATED.value:
            return subscription

        if subscription.status != SubscriptionStatus.ACTIVE.value:
            raise ValueError("Can only terminate active subscriptions")

        now = datetime.now(UTC)
        subscription.status = SubscriptionStatus.TERMINATED.value  # type: ignore[assignment]
        subscription.terminated_at = now  # type: ignore[assignment]

        successor = self.subscription_repo.get_pending_successor(subscription_id)
        if successor is not None:
            successor.status = SubscriptionStatus.ACTIVE.value  # type: ignore[assignment]
            successor.started_at = now  # type: ignore[assignment]
            if successor.anniversary_date is None:
                successor.anniversary_date = now.date()  # type: ignore[assignment]

        self.db.commit()
        self.db.refresh(subscription)
        return subscription
