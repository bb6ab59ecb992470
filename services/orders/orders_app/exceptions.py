"""
Error taxonomy for the Orders service.

Errors reported by the Inventory service are mapped onto the same kinds by
clients.inventory_client; main.py renders them as JSON responses.
"""
from fastapi import status


class OrderServiceError(Exception):
    """Base class for errors reported to order clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotFound(OrderServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExists(OrderServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidRequest(OrderServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientInventory(OrderServiceError):
    status_code = status.HTTP_409_CONFLICT


class CommunicationFailure(OrderServiceError):
    """The Inventory service could not be reached or answered unintelligibly."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class OrderProcessingError(OrderServiceError):
    """Unexpected failure while placing an order."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


ERROR_KINDS = {
    cls.__name__: cls
    for cls in (NotFound, AlreadyExists, InvalidRequest, InsufficientInventory, CommunicationFailure)
}
