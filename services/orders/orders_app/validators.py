"""
Business rule validation for the Orders service.

Provides validation beyond what the request schemas enforce.
"""
from typing import List, Tuple
from . import schemas
from .models import OrderStatus


# PENDING is the only initial state; CONFIRMED and FAILED are terminal
VALID_TRANSITIONS = {
    OrderStatus.PENDING: [OrderStatus.CONFIRMED, OrderStatus.FAILED],
    OrderStatus.CONFIRMED: [],
    OrderStatus.FAILED: [],
}


def validate_order_items(items: List[schemas.OrderItemCreate]) -> Tuple[bool, str]:
    """
    Validate order items for business rules.

    Args:
        items: List of requested order items

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not items:
        return False, "Order must contain at least one item"

    for item in items:
        if item.quantity <= 0:
            return False, f"Item {item.product_id}: quantity must be positive"

    return True, ""


def validate_order_status_transition(old_status: str, new_status: str) -> Tuple[bool, str]:
    """
    Validate that a status transition is allowed.

    Args:
        old_status: Current order status
        new_status: New order status

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        old, new = OrderStatus(old_status), OrderStatus(new_status)
    except ValueError:
        return False, f"Unknown status: {old_status} -> {new_status}"

    if new not in VALID_TRANSITIONS[old]:
        return False, f"Invalid status transition: {old.value} -> {new.value}"

    return True, ""
