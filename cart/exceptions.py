"""Cart domain errors."""


class CartError(Exception):
    """Raised for cart mutation failures."""


class IdentityRequired(CartError):
    """Neither an authenticated owner nor a guest token was supplied."""

    def __init__(self, message: str = "An authenticated user or a guest token is required"):
        super().__init__(message)


class ProductNotFound(CartError):
    """The configured product model is missing or the product cannot be resolved."""


class InsufficientStock(CartError):
    """Requested quantity exceeds the available stock for a product."""

    def __init__(self, product_id: int, requested_quantity: int, available_stock: int | None):
        self.product_id = product_id
        self.requested_quantity = requested_quantity
        self.available_stock = available_stock
        available = available_stock if available_stock is not None else "None"
        super().__init__(
            f"Insufficient stock for product ID {product_id}. "
            f"Requested: {requested_quantity}, Available: {available}"
        )


class DataIntegrityViolation(CartError):
    """A stored cart row references something that is not purchasable."""
