"""Tax API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from billrun.core.database import get_db
from billrun.models.tax import Tax
from billrun.repositories.tax_repository import TaxRepository
from billrun.schemas.tax import TaxCreate, TaxResponse

router = APIRouter()


@router.post(
    "/",
    response_model=TaxResponse,
    status_code=201,
    summary="Create tax",
    responses={
        409: {"description": "Tax with this code already exists"},
        422: {"description": "Validation error"},
    },
)
async def create_tax(
    data: TaxCreate,
    db: Session = Depends(get_db),
) -> Tax:
    """Create a new tax. Default taxes are applied to every generated fee."""
    repo = TaxRepository(db)
    if repo.get_by_code(data.code):
        raise HTTPException(status_code=409, detail="Tax with this code already exists")
    return repo.create(data)


@router.get(
    "/",
    response_model=list[TaxResponse],
    summary="List taxes",
)
async def list_taxes(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[Tax]:
    """List all taxes."""
    repo = TaxRepository(db)
    response.headers["X-Total-Count"] = str(repo.count())
    return repo.get_all(skip=skip, limit=limit)
