"""
FastAPI Application Entry Point

Restaurant Billing Service - the cashier of the restaurant simulation.
Receives delivered items from the delivery service, generates bills
and registers payments.

Endpoints:
    - POST /deliveries: Register items delivered to a guest
    - POST /bills: Generate a bill from a guest's ledger entry
    - POST /bills/guest/{guest}: Generate a bill from the current ledger
    - GET /bills/{bill_id}: Inspect an open bill
    - POST /payments: Pay a bill
    - GET /payment-options: Payment methods for an amount
    - GET /ledger/{guest}: Delivered, unpaid items of a guest
    - GET /menu: The cached price list
    - GET /health: System health check
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from restaurant_billing.core.config import get_settings, setup_logging
from restaurant_billing.core.exceptions import BillNotFound, BillingError
from restaurant_billing.schemas import (
    ErrorResponse,
    GuestBillResponse,
    GuestOrders,
    HealthResponse,
    ItemRegistration,
    MenuPayload,
    OpenBillResponse,
    PaidBillResponse,
    PaymentRequest,
)
from restaurant_billing.services.billing import (
    BillingService,
    LedgerEntry,
    OrderLine,
    PaymentMethod,
    get_billing_service,
)

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.

    The menu is requested once at startup in the background; the API
    serves deliveries and payments while it is still loading.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    billing = app.dependency_overrides.get(get_billing_service, get_billing_service)()
    logger.info(f"Menu Source: {billing.menu_client.source.provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"Missing production config: {missing}")

    billing.menu_client.start()
    logger.info("Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await billing.menu_client.stop()
    logger.info("Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Billing service of the restaurant simulation: tracks delivered items, "
        "generates bills from a cached price list and settles payments."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def to_ledger_entry(guest_orders: GuestOrders) -> LedgerEntry:
    """Convert a validated request body into a ledger entry."""
    return LedgerEntry(
        guest=guest_orders.guest,
        orders=[
            OrderLine(line.order, list(line.food), list(line.drinks))
            for line in guest_orders.orders
        ],
    )


async def wait_for_menu(billing: BillingService) -> None:
    """Give a loading menu up to bill_menu_wait_seconds (0 = fail fast)."""
    await billing.menu_client.wait_until_ready(settings.bill_menu_wait_seconds)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    billing: BillingService = Depends(get_billing_service),
) -> HealthResponse:
    """Report menu readiness, pricing source reachability and open state."""
    menu_client = billing.menu_client
    source_healthy = await menu_client.source.health_check()

    return HealthResponse(
        status="operational" if menu_client.is_ready else "degraded",
        menu_source=menu_client.source.provider_name,
        menu_ready=menu_client.is_ready,
        menu_source_healthy=source_healthy,
        guests=len(billing.ledger),
        open_bills=len(billing.bill_book),
        timestamp=datetime.now(),
    )


@app.get(
    "/menu",
    response_model=MenuPayload,
    responses={503: {"model": ErrorResponse}},
    tags=["Health"],
)
async def get_menu(
    billing: BillingService = Depends(get_billing_service),
) -> MenuPayload:
    """The cached price list (503 while it is still loading)."""
    return MenuPayload.model_validate(billing.menu_client.menu.to_dict())


# =============================================================================
# DELIVERY ENDPOINTS
# =============================================================================

@app.post(
    "/deliveries",
    status_code=204,
    tags=["Deliveries"],
    summary="Register Delivered Items",
)
async def register_delivered_items(
    registration: ItemRegistration,
    billing: BillingService = Depends(get_billing_service),
) -> Response:
    """Record food and drinks that reached a guest and are now owed."""
    billing.register_delivered_items(
        guest=registration.guest,
        order=registration.order,
        food=registration.food,
        drinks=registration.drinks,
        delivery_id=registration.delivery_id,
    )
    return Response(status_code=204)


@app.get(
    "/ledger/{guest}",
    response_model=GuestOrders,
    responses={404: {"model": ErrorResponse}},
    tags=["Deliveries"],
)
async def get_ledger_entry(
    guest: int,
    billing: BillingService = Depends(get_billing_service),
) -> GuestOrders:
    """Delivered items the guest has not paid yet."""
    return GuestOrders.model_validate(billing.get_ledger_entry(guest))


# =============================================================================
# BILL ENDPOINTS
# =============================================================================

@app.post(
    "/bills",
    response_model=GuestBillResponse,
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Bills"],
    summary="Generate Bill",
)
async def generate_bill(
    guest_orders: GuestOrders,
    billing: BillingService = Depends(get_billing_service),
) -> GuestBillResponse:
    """
    Generate or refresh the guest's bill from the given ledger entry.

    Fails with 503 while the menu is not loaded.
    """
    await wait_for_menu(billing)
    guest_bill = billing.generate_bill(to_ledger_entry(guest_orders))
    return GuestBillResponse.model_validate(guest_bill)


@app.post(
    "/bills/guest/{guest}",
    response_model=GuestBillResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Bills"],
    summary="Generate Bill From Ledger",
)
async def generate_bill_for_guest(
    guest: int,
    billing: BillingService = Depends(get_billing_service),
) -> GuestBillResponse:
    """Generate or refresh the guest's bill from the recorded deliveries."""
    await wait_for_menu(billing)
    guest_bill = billing.generate_bill_for_guest(guest)
    return GuestBillResponse.model_validate(guest_bill)


@app.get(
    "/bills/{bill_id}",
    response_model=OpenBillResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Bills"],
)
async def get_bill(
    bill_id: int,
    billing: BillingService = Depends(get_billing_service),
) -> OpenBillResponse:
    """Get an open bill by ID."""
    bill = billing.get_bill(bill_id)
    if bill is None:
        raise BillNotFound(bill_id)
    return OpenBillResponse.model_validate(bill)


# =============================================================================
# PAYMENT ENDPOINTS
# =============================================================================

@app.post(
    "/payments",
    response_model=PaidBillResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Payments"],
    summary="Register Payment",
)
async def register_payment(
    payment: PaymentRequest,
    billing: BillingService = Depends(get_billing_service),
) -> PaidBillResponse:
    """Pay an open bill and receive the receipt."""
    paid_bill = billing.register_payment(payment.bill)
    return PaidBillResponse.model_validate(paid_bill)


@app.get(
    "/payment-options",
    response_model=List[PaymentMethod],
    tags=["Payments"],
)
async def get_payment_options(
    amount: float = Query(...),
    billing: BillingService = Depends(get_billing_service),
) -> List[PaymentMethod]:
    """Payment methods accepted for the amount."""
    return billing.get_payment_option(amount)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(BillingError)
async def billing_exception_handler(request: Request, exc: BillingError) -> JSONResponse:
    """Render billing failures with their status and error code."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error_code,
            detail=exc.message if exc.detail is None else f"{exc.message}: {exc.detail}",
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "restaurant_billing.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
