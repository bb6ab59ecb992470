"""
Orders Service API

This module implements a FastAPI-based microservice for placing and retrieving
customer orders, with PostgreSQL database persistence. Placing an order checks
product availability with the Inventory service, stores the order as PENDING,
deducts inventory per item and finalizes the order as CONFIRMED or FAILED.

Endpoints:
    POST /api/order: Place a new order
    GET /api/order/{order_id}: Get a single order by ID
    GET /api/order/customer/{customer_id}: List a customer's orders
    GET /api/order/{order_id}/timeline: Get an order's event timeline
    GET /healthz: Health check endpoint for orchestration systems

Attributes:
    app (FastAPI): The FastAPI application instance configured with the title "orders-service"
"""
from typing import List
import logging
import os
from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import crud, models, schemas
from .database import engine, get_db
from .exceptions import OrderServiceError

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="orders-service")


@app.exception_handler(OrderServiceError)
async def order_service_error_handler(request: Request, exc: OrderServiceError):
    """
    Render domain errors as JSON with the status code of their kind.

    Response body: {"detail": <message>, "error": <kind>}
    """
    logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the orders service.

    This endpoint is used by orchestration systems (like Kubernetes) to verify
    that the service is running and able to respond to requests.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): Always returns "healthy" when the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}

@app.post("/api/order", response_model=schemas.Order, status_code=status.HTTP_201_CREATED)
async def place_order(order: schemas.OrderCreate, db: Session = Depends(get_db)):
    """
    Place a new order and update inventory accordingly.

    This endpoint:
    - Checks every product with the Inventory service
    - Stores the order as PENDING
    - Deducts inventory for each item in order, stopping at the first failure
    - Returns the order as CONFIRMED, or FAILED if a deduction failed

    Args:
        order: Order data to place
        db: Database session (injected)

    Returns:
        The placed order

    Raises:
        InvalidRequest: 400 if the order has no items or a product is unavailable
        OrderProcessingError: 500 on an unexpected error
    """
    logger.info(f"POST /api/order - Placing order for customer: {order.customer_id}")
    return await crud.place_order(db, order=order)

@app.get("/api/order/customer/{customer_id}", response_model=List[schemas.Order])
def get_customer_orders(customer_id: str, db: Session = Depends(get_db)):
    """
    List all orders of a customer.

    Args:
        customer_id: Customer identifier
        db: Database session (injected)

    Returns:
        List of order objects (empty if the customer has none)
    """
    logger.info(f"GET /api/order/customer/{customer_id}")
    return crud.get_orders_by_customer_id(db, customer_id=customer_id)

@app.get("/api/order/{order_id}", response_model=schemas.Order)
def get_order(order_id: str, db: Session = Depends(get_db)):
    """
    Get a single order by ID.

    Args:
        order_id: ID of the order to retrieve
        db: Database session (injected)

    Returns:
        Order object

    Raises:
        NotFound: 404 if the order does not exist
    """
    logger.info(f"GET /api/order/{order_id}")
    return crud.get_order_by_id(db, order_id=order_id)

@app.get("/api/order/{order_id}/timeline", response_model=List[schemas.OrderEvent])
def get_order_timeline(order_id: str, db: Session = Depends(get_db)):
    """
    Get the event timeline of an order, oldest first.

    For a FAILED order the inventory_deducted events name the items whose
    deductions were applied before the failure.

    Raises:
        NotFound: 404 if the order does not exist
    """
    return crud.get_order_events(db, order_id=order_id)
