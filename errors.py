"""
Domain errors raised by the services and translated to HTTP responses in main.py.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    """Requested product, cart item, order or user does not exist."""
    status_code = 404


class ValidationError(StorefrontError):
    """Malformed or out-of-range input that reached a service."""
    status_code = 400


class ConflictError(ValidationError):
    """Unique field (username, email) already taken."""


class DataIntegrityError(StorefrontError):
    """A stored row references a product that is no longer in the catalog."""
    status_code = 500
