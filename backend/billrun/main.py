from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from billrun.core.config import settings
from billrun.routers import invoices, taxes

OPENAPI_TAGS = [
    {"name": "Invoices", "description": "Create and inspect subscription invoices."},
    {"name": "Taxes", "description": "Taxes applied to generated fees."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Recurring subscription billing API. Resolves billing periods, "
        "generates fees and aggregates invoice taxes."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.include_router(invoices.router, prefix="/v1/invoices", tags=["Invoices"])
app.include_router(taxes.router, prefix="/v1/taxes", tags=["Taxes"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
