class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""
    pass


class InsufficientStockError(Exception):
    """Exception raised when there's not enough stock to record an outflow."""
    pass


class StorageUnavailableError(Exception):
    """Exception raised when the database cannot be reached or a write fails."""
    pass
