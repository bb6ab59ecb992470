"""
CRUD (Create, Read, Update, Delete) operations for the Orders service.

This module contains all database operations for order management and the
order placement flow that coordinates with the Inventory service.
"""
from typing import List, Optional
from uuid import uuid4
from sqlalchemy.orm import Session
import logging
from . import models, schemas, validators
from .clients import inventory_client
from .exceptions import InvalidRequest, NotFound, OrderProcessingError, OrderServiceError

# Set up logging
logger = logging.getLogger(__name__)

def generate_order_id() -> str:
    """Return a fresh order ID of the form ORD-XXXXXXXX (uppercase hex)."""
    return "ORD-" + uuid4().hex[:8].upper()

def get_order(db: Session, order_id: str) -> Optional[models.Order]:
    """
    Retrieve a single order by ID.

    Args:
        db: Database session
        order_id: ID of the order to retrieve

    Returns:
        Order object or None if not found
    """
    return db.query(models.Order).filter(models.Order.order_id == order_id).first()

def get_order_by_id(db: Session, order_id: str) -> models.Order:
    """
    Retrieve a single order by ID.

    Raises:
        NotFound: If no order has this ID
    """
    logger.info(f"Fetching order: {order_id}")
    db_order = get_order(db, order_id)
    if db_order is None:
        logger.error(f"Order not found: {order_id}")
        raise NotFound(f"Order not found: {order_id}")
    return db_order

def get_orders_by_customer_id(db: Session, customer_id: str) -> List[models.Order]:
    """
    Retrieve all orders of a customer, oldest first.

    Args:
        db: Database session
        customer_id: Customer identifier

    Returns:
        List of Order objects (empty for an unknown customer)
    """
    logger.info(f"Fetching orders for customer: {customer_id}")
    return (
        db.query(models.Order)
        .filter(models.Order.customer_id == customer_id)
        .order_by(models.Order.created_at, models.Order.order_id)
        .all()
    )

def get_order_events(db: Session, order_id: str) -> List[models.OrderEvent]:
    """
    Retrieve an order's timeline, oldest event first.

    Raises:
        NotFound: If no order has this ID
    """
    get_order_by_id(db, order_id)
    return (
        db.query(models.OrderEvent)
        .filter(models.OrderEvent.order_id == order_id)
        .order_by(models.OrderEvent.id)
        .all()
    )

def log_order_event(
    db: Session,
    order_id: str,
    event_type: str,
    description: str,
    old_value: str = None,
    new_value: str = None,
):
    """
    Append an event to an order's timeline.

    Args:
        db: Database session
        order_id: Order identifier
        event_type: Type of event (e.g., "created", "inventory_deducted", "status_changed")
        description: Human-readable description
        old_value: Previous value (optional)
        new_value: New value (optional)
    """
    event = models.OrderEvent(
        order_id=order_id,
        event_type=event_type,
        description=description,
        old_value=old_value,
        new_value=new_value,
    )
    db.add(event)
    db.commit()

def create_order(db: Session, order_id: str, order: schemas.OrderCreate) -> models.Order:
    """
    Persist a new PENDING order with its items.

    NOTE: This function assumes validation has already been performed.

    Args:
        db: Database session
        order_id: Generated order ID
        order: Order data to create

    Returns:
        Created Order object
    """
    db_order = models.Order(
        order_id=order_id,
        customer_id=order.customer_id,
        status=models.OrderStatus.PENDING.value,
        items=[
            models.OrderItem(product_id=item.product_id, quantity=item.quantity)
            for item in order.items
        ],
    )
    db.add(db_order)
    db.commit()
    db.refresh(db_order)
    log_order_event(
        db,
        order_id=order_id,
        event_type="created",
        description=f"Order created with status '{db_order.status}'",
        new_value=db_order.status,
    )
    return db_order

def update_order_status(db: Session, db_order: models.Order, new_status: models.OrderStatus) -> models.Order:
    """
    Move an order to a new status and record the change on its timeline.

    Raises:
        InvalidRequest: If the state machine does not allow the transition
    """
    old_status = db_order.status
    is_valid, error_message = validators.validate_order_status_transition(old_status, new_status.value)
    if not is_valid:
        raise InvalidRequest(error_message)

    db_order.status = new_status.value
    db.commit()
    db.refresh(db_order)
    log_order_event(
        db,
        order_id=db_order.order_id,
        event_type="status_changed",
        description=f"Status changed from '{old_status}' to '{new_status.value}'",
        old_value=old_status,
        new_value=new_status.value,
    )
    return db_order

async def process_inventory_for_order(db: Session, db_order: models.Order) -> bool:
    """
    Deduct inventory for each order item, in order, stopping at the first failure.

    Deductions applied before a failure are not restored; each applied
    deduction is recorded on the order's timeline.

    Args:
        db: Database session
        db_order: The PENDING order

    Returns:
        True if every item was deducted, False otherwise
    """
    for item in list(db_order.items):
        try:
            await inventory_client.deduct_inventory(item.product_id, item.quantity)
        except Exception as e:
            logger.error(f"Failed to update inventory for item: {item.product_id} ({e})")
            log_order_event(
                db,
                order_id=db_order.order_id,
                event_type="inventory_failed",
                description=f"Failed to deduct {item.quantity} of '{item.product_id}': {e}",
            )
            return False

        logger.info(f"Deducted {item.quantity} units of product '{item.product_id}'")
        log_order_event(
            db,
            order_id=db_order.order_id,
            event_type="inventory_deducted",
            description=f"Deducted {item.quantity} of '{item.product_id}'",
            new_value=str(item.quantity),
        )
    return True

async def validate_order_data(order: schemas.OrderCreate) -> None:
    """
    Validate the order items and check every product with the Inventory service.

    This is a best-effort gate; stock can still run out before deduction.

    Raises:
        InvalidRequest: If there are no items or a product is unavailable
    """
    is_valid, error_message = validators.validate_order_items(order.items)
    if not is_valid:
        logger.error(error_message)
        raise InvalidRequest(error_message)

    for item in order.items:
        if not await inventory_client.check_inventory_availability(item.product_id):
            logger.error(f"Product not found or no inventory: {item.product_id}")
            raise InvalidRequest(f"Product not found or no inventory: {item.product_id}")

async def place_order(db: Session, order: schemas.OrderCreate) -> models.Order:
    """
    Place an order: check availability, persist it as PENDING, deduct inventory
    per item, then mark it CONFIRMED or FAILED.

    A failed deduction does not raise; the returned order is FAILED.

    Args:
        db: Database session
        order: Order data

    Returns:
        The persisted order in its final status

    Raises:
        InvalidRequest: If the order has no items or a product is unavailable
        OrderProcessingError: On any unexpected error
    """
    logger.info(f"Processing new order for customer: {order.customer_id}")
    try:
        await validate_order_data(order)

        order_id = generate_order_id()
        while get_order(db, order_id) is not None:
            order_id = generate_order_id()

        db_order = create_order(db, order_id, order)
        logger.info(f"Order created with ID: {order_id}")

        if await process_inventory_for_order(db, db_order):
            update_order_status(db, db_order, models.OrderStatus.CONFIRMED)
            logger.info(f"Order confirmed: {order_id}")
        else:
            update_order_status(db, db_order, models.OrderStatus.FAILED)
            logger.error(f"Order failed: {order_id}")
        return db_order

    except OrderServiceError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error processing order: {e}")
        raise OrderProcessingError(f"Error processing order: {e}") from e
