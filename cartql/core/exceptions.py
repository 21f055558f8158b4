class CartError(Exception):
    """Base class for errors raised by the cart domain.

    `code` is the machine-readable tag the API layer exposes to clients.
    """
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class NotFoundError(CartError):
    code = "NOT_FOUND"

class ValidationError(CartError):
    code = "BAD_USER_INPUT"

class StorageError(CartError):
    code = "STORAGE_ERROR"

class PaymentProviderError(CartError):
    code = "PAYMENT_PROVIDER_ERROR"
