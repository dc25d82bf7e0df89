"""Tax repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from billrun.models.tax import Tax
from billrun.schemas.tax import TaxCreate


class TaxRepository:
    """Repository for Tax model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100) -> list[Tax]:
        return self.db.query(Tax).order_by(Tax.code.asc()).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self.db.query(Tax).count()

    def get_by_ids(self, tax_ids: list[UUID]) -> dict[UUID, Tax]:
        """Get taxes keyed by ID. Missing IDs are absent from the result."""
        if not tax_ids:
            return {}
        taxes = self.db.query(Tax).filter(Tax.id.in_(tax_ids)).all()
        return {tax.id: tax for tax in taxes}

    def get_by_code(self, code: str) -> Tax | None:
        """Get a tax by code."""
        return self.db.query(Tax).filter(Tax.code == code).first()

    def get_applied_by_default(self) -> list[Tax]:
        """Get taxes that apply to every fee."""
        return (
            self.db.query(Tax)
            .filter(Tax.applied_by_default.is_(True))
            .order_by(Tax.code.asc())
            .all()
        )

    def create(self, data: TaxCreate) -> Tax:
        """Create a new tax."""
        tax = Tax(
            code=data.code,
            name=data.name,
            rate=data.rate,
            description=data.description,
            applied_by_default=data.applied_by_default,
        )
        self.db.add(tax)
        self.db.commit()
        self.db.refresh(tax)
        return tax
