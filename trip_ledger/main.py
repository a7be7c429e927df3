"""
Trip Ledger - FastAPI Web Backend

This module serves the balance and settlement engine over HTTP.

Features:
    - Per-member balances for a trip in the reporting currency
    - Suggested settlement transfers
    - Spending by category with pie-chart geometry
    - Combined trip summary and PDF report
    - Expense creation

Endpoints:
    GET  /health                          - Health check
    GET  /rates                           - Cached exchange rates
    GET  /trips/{trip_id}/balances        - Member balances
    GET  /trips/{trip_id}/settlements     - Settlement transfers
    GET  /trips/{trip_id}/categories      - Category breakdown
    GET  /trips/{trip_id}/summary         - All of the above
    GET  /trips/{trip_id}/report.pdf      - PDF report
    POST /trips/{trip_id}/expenses        - Add expense to trip

Usage:
    uvicorn trip_ledger.main:app --reload
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from trip_ledger.analytics import aggregate_by_category, pie_slices
from trip_ledger.categories import ExpenseCategory
from trip_ledger.config.settings import get_settings
from trip_ledger.currency import SUPPORTED_CURRENCIES, trip_total
from trip_ledger.expenses import add_expense, get_expenses
from trip_ledger.logging_config import configure_logging
from trip_ledger.members import TripNotFoundError, get_member_names, get_trip
from trip_ledger.rates import RateCache, fetch_frankfurter_rates
from trip_ledger.report import build_report_html, render_pdf
from trip_ledger.settlement import compute_settlements
from trip_ledger.splitter import compute_balances

logger = structlog.get_logger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class BalanceResponse(BaseModel):
    """One member's balance."""
    uid: str
    name: str
    paid: float
    balance: float


class SettlementResponse(BaseModel):
    """A suggested transfer from a debtor to a creditor."""
    model_config = ConfigDict(populate_by_name=True)

    from_name: str = Field(..., alias="from")
    to: str
    from_uid: Optional[str] = None
    to_uid: Optional[str] = None
    amount: float


class CategoryResponse(BaseModel):
    """Spend for one category."""
    category: str
    amount: float
    percentage: float


class SliceResponse(BaseModel):
    """Pie-chart slice for one category."""
    category: str
    color: str
    start_fraction: float
    end_fraction: float
    start_angle: float
    end_angle: float
    start_point: tuple[float, float]
    end_point: tuple[float, float]
    large_arc: bool
    full_circle: bool


class CategoriesResponse(BaseModel):
    """Category breakdown with chart slices."""
    currency: str
    total: float
    categories: list[CategoryResponse]
    slices: list[SliceResponse]


class SummaryResponse(BaseModel):
    """Everything the balances screen shows for a trip."""
    trip_id: str
    currency: str
    total: float
    balances: list[BalanceResponse]
    settlements: list[SettlementResponse]
    categories: list[CategoryResponse]
    slices: list[SliceResponse]


class RatesResponse(BaseModel):
    """Exchange rates relative to a base currency."""
    base: str
    rates: dict[str, float]


class ExpenseCreate(BaseModel):
    """Request model for adding an expense."""
    amount: float = Field(..., gt=0, description="Expense amount (must be > 0)")
    currency: str = Field("EUR", description=f"One of {', '.join(SUPPORTED_CURRENCIES)}")
    category: ExpenseCategory = Field(..., description="Expense category")
    description: str = Field("", description="Optional description")
    paid_by: Optional[str] = Field(None, description="Member uid of the payer")
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="Expense date (YYYY-MM-DD)")


class ExpenseResponse(BaseModel):
    """Response model for expense data."""
    expense_id: Optional[str]
    trip_id: Optional[str]
    amount: float
    currency: str
    category: str
    description: str
    paid_by: Optional[str]
    date: Optional[str]



# =============================================================================
# Helper Functions
# =============================================================================

def get_rate_cache(request: Request) -> RateCache:
    """Dependency returning the application's rate cache."""
    return request.app.state.rate_cache


def get_reporting_currency(request: Request) -> str:
    """Dependency returning the configured reporting currency."""
    return request.app.state.reporting_currency


def _load_trip(trip_id: str) -> tuple[dict, list[str], dict, list[dict]]:
    """
    Load everything the calculators need for a trip.

    Returns:
        tuple: (trip, member uids, uid -> name, expense dicts)
    """
    trip = get_trip(trip_id)
    members = list(trip.get("members") or [])
    names = get_member_names(members) if members else {}
    expenses = [e.to_dict() for e in get_expenses(trip_id)]
    return trip, members, names, expenses


def _compute_summary(trip_id: str, rates: dict, currency: str) -> dict:
    """Run all calculators for a trip and return the combined result."""
    trip, members, names, expenses = _load_trip(trip_id)

    balances = compute_balances(members, expenses, names, rates, currency)
    settlements = compute_settlements(balances)
    categories = aggregate_by_category(expenses, rates, currency)

    logger.info(
        "trip_summary_computed",
        trip_id=trip_id,
        members=len(members),
        expenses=len(expenses),
        settlements=len(settlements)
    )

    return {
        "trip": trip,
        "trip_id": trip_id,
        "currency": currency,
        "total": trip_total(expenses, rates, currency),
        "balances": balances,
        "settlements": settlements,
        "categories": categories,
        "slices": pie_slices(categories)
    }


def _raise_http(e: Exception) -> None:
    """Translate store/validation errors into HTTP errors."""
    if isinstance(e, ValueError):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, TripNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, RuntimeError):
        raise HTTPException(status_code=503, detail=str(e))
    logger.exception("unhandled_error")
    raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# API Endpoints
# =============================================================================

router = APIRouter()


@router.get("/rates", response_model=RatesResponse)
def read_rates(
    base: Optional[str] = None,
    cache: RateCache = Depends(get_rate_cache),
    currency: str = Depends(get_reporting_currency)
):
    """Return the cached rate table (empty if rates could not be fetched)."""
    base = (base or currency).upper()
    return RatesResponse(base=base, rates=cache.get(base))


@router.get("/trips/{trip_id}/balances", response_model=list[BalanceResponse])
def read_balances(
    trip_id: str,
    cache: RateCache = Depends(get_rate_cache),
    currency: str = Depends(get_reporting_currency)
):
    """
    Get member balances for a trip.

    Request flow:
        1. Load trip members, names and expenses from Firestore
        2. Get rates from the cache
        3. Calculate balances (splitter.py)
    """
    try:
        _, members, names, expenses = _load_trip(trip_id)
        return compute_balances(members, expenses, names, cache.get(currency), currency)
    except HTTPException:
        raise
    except Exception as e:
        _raise_http(e)


@router.get("/trips/{trip_id}/settlements", response_model=list[SettlementResponse])
def read_settlements(
    trip_id: str,
    cache: RateCache = Depends(get_rate_cache),
    currency: str = Depends(get_reporting_currency)
):
    """Get suggested settlement transfers for a trip."""
    try:
        _, members, names, expenses = _load_trip(trip_id)
        balances = compute_balances(members, expenses, names, cache.get(currency), currency)
        return compute_settlements(balances)
    except HTTPException:
        raise
    except Exception as e:
        _raise_http(e)


@router.get("/trips/{trip_id}/categories", response_model=CategoriesResponse)
def read_categories(
    trip_id: str,
    cache: RateCache = Depends(get_rate_cache),
    currency: str = Depends(get_reporting_currency)
):
    """Get spend by category, with pie-chart slices."""
    try:
        _, _, _, expenses = _load_trip(trip_id)
        rates = cache.get(currency)
        categories = aggregate_by_category(expenses, rates, currency)
        return CategoriesResponse(
            currency=currency,
            total=trip_total(expenses, rates, currency),
            categories=categories,
            slices=pie_slices(categories)
        )
    except HTTPException:
        raise
    except Exception as e:
        _raise_http(e)


@router.get("/trips/{trip_id}/summary", response_model=SummaryResponse)
def read_summary(
    trip_id: str,
    cache: RateCache = Depends(get_rate_cache),
    currency: str = Depends(get_reporting_currency)
):
    """Get balances, settlements and category breakdown in one call."""
    try:
        summary = _compute_summary(trip_id, cache.get(currency), currency)
        summary.pop("trip")
        return summary
    except HTTPException:
        raise
    except Exception as e:
        _raise_http(e)


@router.get("/trips/{trip_id}/report.pdf")
def export_report(
    trip_id: str,
    cache: RateCache = Depends(get_rate_cache),
    currency: str = Depends(get_reporting_currency)
):
    """Download the trip report as a PDF."""
    try:
        summary = _compute_summary(trip_id, cache.get(currency), currency)
        trip_name = summary["trip"].get("name") or trip_id
        html_content = build_report_html(
            trip_name=trip_name,
            balances=summary["balances"],
            settlements=summary["settlements"],
            categories=summary["categories"],
            total=summary["total"],
            currency=currency
        )
        pdf = render_pdf(html_content)
    except HTTPException:
        raise
    except Exception as e:
        _raise_http(e)

    filename = f"{trip_name.replace(' ', '_')}_report.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.post("/trips/{trip_id}/expenses", response_model=ExpenseResponse, status_code=201)
def add_trip_expense(trip_id: str, expense_data: ExpenseCreate):
    """
    Add an expense to a trip.

    Request flow:
        1. Validate input using Pydantic model
        2. Check the payer is a member of the trip
        3. Call add_expense() from expenses.py
    """
    try:
        members = list(get_trip(trip_id).get("members") or [])
        expense = add_expense(
            trip_id=trip_id,
            amount=expense_data.amount,
            currency=expense_data.currency,
            category=expense_data.category.value,
            date=expense_data.date,
            paid_by=expense_data.paid_by,
            description=expense_data.description,
            members=members
        )
        return expense.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        _raise_http(e)


# =============================================================================
# Health Check Endpoint
# =============================================================================

@router.get("/health")
def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Trip Ledger"}


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """Build the API application with its own exchange-rate cache and routes."""
    settings = get_settings()
    configure_logging()

    application = FastAPI(
        title="Trip Ledger",
        description="Multi-currency trip balances and settlements",
        version="1.0.0"
    )

    rates_settings = settings.rates
    application.state.rate_cache = RateCache(
        fetcher=lambda base: fetch_frankfurter_rates(
            base,
            url=rates_settings.api_url,
            timeout=rates_settings.timeout_seconds
        ),
        ttl_seconds=rates_settings.ttl_seconds,
        retry_seconds=rates_settings.retry_seconds
    )
    application.state.reporting_currency = settings.app.reporting_currency
    application.include_router(router)
    return application


app = create_app()


# =============================================================================
# Run with: python -m trip_ledger.main
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("trip_ledger.main:app", host="127.0.0.1", port=8000, reload=True)
