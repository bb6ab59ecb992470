"""
Error taxonomy for the Inventory service.

Domain code raises these; main.py renders them as JSON responses with the
status code carried by each class.
"""
from fastapi import status


class InventoryError(Exception):
    """Base class for errors reported to inventory clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotFound(InventoryError):
    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExists(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidRequest(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientInventory(InventoryError):
    status_code = status.HTTP_409_CONFLICT
