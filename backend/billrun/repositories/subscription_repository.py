from uuid import UUID

from sqlalchemy.orm import Session

from billrun.models.subscription import Subscription, SubscriptionStatus


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, subscription_id: UUID) -> Subscription | None:
        return self.db.query(Subscription).filter(Subscription.id == subscription_id).first()

    def get_by_statuses(self, statuses: list[SubscriptionStatus]) -> list[Subscription]:
        values = [status.value for status in statuses]
        return self.db.query(Subscription).filter(Subscription.status.in_(values)).all()

    def get_pending_successor(self, subscription_id: UUID) -> Subscription | None:
        """Find the pending subscription scheduled to replace the given one."""
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.previous_subscription_id == subscription_id,
                Subscription.status == SubscriptionStatus.PENDING.value,
            )
            .order_by(Subscription.created_at.asc())
            .first()
        )
