"""
    Inventory Service API

    This module implements a FastAPI-based microservice for managing products and
    their expiry-dated batches, with PostgreSQL database persistence.

    The service exposes:
    - Batch listing per product, ordered by expiry date
    - Product registration
    - Inventory update: add a batch, deduct from a named batch, or deduct for an
      order across batches (ORDER_REDUCTION) using the FIFO/LIFO allocation strategy
    - Allocation preview: the plan a deduction would apply, without applying it
    - Health endpoint: Provides service health status for monitoring and orchestration

    The Orders service calls GET /inventory/{product_id} to check availability and
    POST /inventory/update with ORDER_REDUCTION to deduct stock for an order.
"""
from typing import List
import logging
import os
from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import crud, models, schemas, seed
from .database import SessionLocal, engine, get_db
from .exceptions import InventoryError

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

if os.getenv("SEED_SAMPLE_DATA", "false").lower() == "true":
    with SessionLocal() as seed_db:
        seed.seed_sample_data(seed_db)

app = FastAPI(title="inventory-service")

@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
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
    Health check endpoint for the inventory service.

    This endpoint is typically used by orchestrators (like Kubernetes) or load balancers
    to determine if the service is running and ready to accept requests.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): "healthy" if the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}

@app.get("/inventory/{product_id}", response_model=List[schemas.Batch])
def get_batches(product_id: str, db: Session = Depends(get_db)):
    """
    List a product's batches sorted by expiry date (earliest first).

    Args:
        product_id: Product identifier
        db: Database session (injected)

    Returns:
        List of batch objects

    Raises:
        NotFound: 404 if the product does not exist
    """
    logger.info(f"GET /inventory/{product_id} - Fetching batches")
    return crud.list_batches_by_product(db, product_id=product_id)

@app.post("/inventory/product", response_model=schemas.Product, status_code=status.HTTP_201_CREATED)
def create_product(product: schemas.ProductCreate, db: Session = Depends(get_db)):
    """
    Register a new product.

    Args:
        product: Product data to create
        db: Database session (injected)

    Returns:
        Created product object

    Raises:
        AlreadyExists: 400 if the product ID is already registered
    """
    logger.info(f"POST /inventory/product - Creating product: {product.product_id}")
    return crud.create_product(db=db, product=product)

@app.post("/inventory/update", response_model=schemas.Batch, status_code=status.HTTP_201_CREATED)
def update_inventory(update: schemas.InventoryUpdate, db: Session = Depends(get_db)):
    """
    Add a new batch or reduce batch quantities.

    For ORDER_REDUCTION several batches may be reduced; only the first one
    touched (earliest expiry under FIFO) is returned.

    Args:
        update: Inventory update request
        db: Database session (injected)

    Returns:
        The affected batch

    Raises:
        NotFound: 404 if the product does not exist
        InvalidRequest: 400 for a missing expiry date, no batches, or an unknown strategy
        InsufficientInventory: 409 if the deduction exceeds available stock
    """
    logger.info(
        f"POST /inventory/update - Product: {update.product_id}, "
        f"Batch: {update.batch_id}, Quantity: {update.quantity}"
    )
    affected = crud.update_inventory(db, update=update)
    return affected[0]

@app.post("/inventory/allocate", response_model=List[schemas.AllocationLine])
def preview_allocation(request: schemas.AllocationRequest, db: Session = Depends(get_db)):
    """
    Preview the allocation plan for a quantity without changing any batch.

    Args:
        request: Product, quantity and strategy (FIFO, LIFO or EXPIRY)
        db: Database session (injected)

    Returns:
        List of {batch_id, quantity} lines in allocation order
    """
    plan = crud.preview_allocation(db, request=request)
    return [line._asdict() for line in plan]
