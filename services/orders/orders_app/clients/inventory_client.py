"""
HTTP client for communicating with the Inventory service.

This module provides functions to check product availability and to deduct
inventory for placed orders.
"""
import logging
import os
import httpx
from typing import Optional

from ..exceptions import ERROR_KINDS, CommunicationFailure, InsufficientInventory, InvalidRequest, NotFound, OrderServiceError

logger = logging.getLogger(__name__)

# Use internal Docker network hostname by default
INVENTORY_SERVICE_URL = os.getenv("INVENTORY_SERVICE_URL", "http://inventory:8000").rstrip("/")
TIMEOUT = float(os.getenv("INVENTORY_TIMEOUT", "5.0"))  # seconds

# Inventory chooses the batches itself for this batch ID
ORDER_REDUCTION = "ORDER_REDUCTION"

STATUS_ERRORS = {
    404: NotFound,
    409: InsufficientInventory,
}


async def check_inventory_availability(product_id: str) -> bool:
    """
    Check that a product exists in the Inventory service.

    Args:
        product_id: The product to check

    Returns:
        True if the Inventory service answered with a 2xx status, False on any
        other status, on a network error or when no valid URL can be built
        for the product ID
    """
    logger.info(f"Checking inventory availability for product: {product_id}")
    try:
        async with httpx.AsyncClient(timeout=TIMEOUT) as client:
            response = await client.get(f"{INVENTORY_SERVICE_URL}/inventory/{product_id}")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Failed to check inventory for product: {product_id} - {e}")
        return False

    if not response.is_success:
        logger.warning(f"Product {product_id} unavailable: HTTP {response.status_code}")
        return False
    logger.info(f"Product {product_id} has available inventory")
    return True


async def deduct_inventory(product_id: str, quantity: int, strategy: Optional[str] = None) -> dict:
    """
    Deduct inventory for an order item, letting the Inventory service pick batches.

    Args:
        product_id: The product to deduct from
        quantity: Amount to deduct
        strategy: Optional allocation strategy (FIFO or LIFO)

    Returns:
        The first batch affected by the deduction

    Raises:
        NotFound, InvalidRequest, InsufficientInventory: If the Inventory
            service rejected the deduction
        CommunicationFailure: On a network error, an unusable product ID in the
            URL, or an uninterpretable response
    """
    logger.info(f"Calling Inventory Service to reduce inventory for product: {product_id} by quantity: {quantity}")
    payload = {"product_id": product_id, "batch_id": ORDER_REDUCTION, "quantity": quantity}
    if strategy:
        payload["strategy"] = strategy

    try:
        async with httpx.AsyncClient(timeout=TIMEOUT) as client:
            response = await client.post(f"{INVENTORY_SERVICE_URL}/inventory/update", json=payload)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Failed to update inventory for product: {product_id} - {e}")
        raise CommunicationFailure(f"Failed to communicate with Inventory Service: {e}") from e

    if response.is_success:
        logger.info(f"Inventory updated successfully for product: {product_id}")
        return response.json()
    raise error_from_response(response)


def error_from_response(response: httpx.Response) -> OrderServiceError:
    """
    Map an unsuccessful Inventory service response onto an error kind.

    4xx responses keep the kind and message reported by the Inventory service;
    anything else becomes a CommunicationFailure.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    detail = body.get("detail") or response.text or f"HTTP {response.status_code}"
    if not isinstance(detail, str):
        detail = str(detail)

    if not response.is_client_error:
        return CommunicationFailure(f"Inventory Service error (HTTP {response.status_code}): {detail}")

    error_class = ERROR_KINDS.get(body.get("error")) or STATUS_ERRORS.get(response.status_code, InvalidRequest)
    return error_class(detail)
