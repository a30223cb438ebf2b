"""
Typed errors raised by the stock ledger and the daily transfer workflow.

Every class carries a machine-readable ``code`` and the data needed to build a
message for the person at the counter, so views catch by type instead of
parsing strings:

    InventoryError
    +-- NotFoundError
    +-- InvalidLocationError
    +-- InvalidQuantityError
    +-- InsufficientStockError
    +-- TransferError
        +-- EmptyTransferError
        +-- ZeroQuantityError
"""


class InventoryError(Exception):
    code: str = "INVENTORY_ERROR"


class NotFoundError(InventoryError):
    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class InvalidLocationError(InventoryError):
    code: str = "INVALID_LOCATION"

    def __init__(self, from_location, to_location=None, reason: str = ""):
        self.from_location = from_location
        self.to_location = to_location
        super().__init__(reason or f"Invalid transfer locations: {from_location!r} -> {to_location!r}")


class InvalidQuantityError(InventoryError):
    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity, reason: str = ""):
        self.quantity = quantity
        super().__init__(reason or f"Invalid quantity: {quantity!r}")


class InsufficientStockError(InventoryError):
    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id, location: str, available: int, requested: int, name: str = ""):
        self.product_id = product_id
        self.location = location
        self.available = available
        self.requested = requested
        label = name or f"product {product_id}"
        super().__init__(
            f"Insufficient stock in {location} for {label}: available {available}, requested {requested}"
        )


class TransferError(InventoryError):
    code: str = "TRANSFER_ERROR"


class EmptyTransferError(TransferError):
    code: str = "EMPTY_TRANSFER"

    def __init__(self):
        super().__init__("No items selected for transfer.")


class ZeroQuantityError(TransferError):
    code: str = "ZERO_QUANTITY"

    def __init__(self, product_ids):
        self.product_ids = list(product_ids)
        super().__init__(
            "Some items have 0 quantity. Adjust the quantities or remove these items before transferring."
        )
