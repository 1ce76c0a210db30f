"""FastAPI application for the SDN screening engine."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
import structlog

from .config import get_settings
from .models import RiskLevel
from .log import configure_logging
from .services import get_screener, close_screener, SanctionsScreener

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("SDN Screening API starting...", provider=get_settings().sdn_api_url)
    yield
    await close_screener()
    logger.info("SDN Screening API stopped")


# Initialize FastAPI app
app = FastAPI(
    title="SDN Screening API",
    description="""
    Screen customer names against the OFAC SDN watchlist.

    ## Features
    - Watchlist record lookup by name and country
    - Single-name screening with provider-side fuzzy/alias matching
    - Bulk screening with per-name failure isolation

    ## Risk levels
    | Level | Meaning |
    |-------|---------|
    | CRITICAL | One or more watchlist matches |
    | CLEAR | No match |
    | UNKNOWN | Lookup failed |
    """,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============ Request Models ============

class CheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName", min_length=1)
    fuzzy_match: bool = Field(default=True, alias="fuzzyMatch")


class BulkCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_names: list[Annotated[str, Field(min_length=1)]] = Field(..., alias="customerNames")


router = APIRouter(prefix=get_settings().api_prefix)


# ============ Health & Info ============

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}


@router.get("/info")
async def api_info():
    """API information."""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment.value,
        "provider": settings.sdn_api_url,
        "max_batch_size": settings.max_batch_size,
        "max_concurrent": settings.max_concurrent,
        "risk_levels": [level.value for level in RiskLevel],
    }


# ============ Screening Endpoints ============

@router.get("/sdn")
async def get_sdn_data(
    name: Optional[str] = Query(None, description="Name to search for"),
    country: Optional[str] = Query(None, description="Country filter"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Defaults to DEFAULT_LIMIT"),
    screener: SanctionsScreener = Depends(get_screener),
):
    """Look up watchlist records by name and/or country."""
    result = await screener.get_sdn_data(name, country, limit)
    return result.to_dict()


@router.post("/check")
async def check_customer(
    request: CheckRequest,
    screener: SanctionsScreener = Depends(get_screener),
):
    """
    Check a single customer name against the SDN list.

    A failed lookup is reported as riskLevel UNKNOWN, not as an HTTP error.
    """
    result = await screener.check_customer(request.customer_name, request.fuzzy_match)
    return result.to_dict()


@router.post("/bulk-check")
async def bulk_check(
    request: BulkCheckRequest,
    screener: SanctionsScreener = Depends(get_screener),
):
    """
    Check many customer names in one batch.

    Results are returned in request order.
    """
    max_batch = get_settings().max_batch_size
    if len(request.customer_names) > max_batch:
        raise HTTPException(
            status_code=422,
            detail=f"customerNames exceeds the maximum batch size of {max_batch}"
        )

    result = await screener.bulk_check(request.customer_names)
    return result.to_dict()


app.include_router(router)


def create_app() -> FastAPI:
    """Factory function for creating the app."""
    return app
