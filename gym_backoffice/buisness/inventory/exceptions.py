class InventoryError(Exception):
    """Base exception for inventory business rule failures."""

    status_code = 500
    default_message = "An error occurred in the inventory system"

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.message,
        }

        if self.code:
            error_dict['code'] = self.code

        if self.details:
            error_dict['details'] = self.details

        return error_dict


class ValidationError(InventoryError):
    """Malformed or out-of-range input.

    ``details`` is a list of ``{'field': ..., 'message': ...}`` entries.
    """

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message=None, code='VALIDATION_FAILED', details=None):
        super().__init__(message, code, details or [])

    @classmethod
    def for_field(cls, field, message):
        return cls(details=[{'field': field, 'message': message}])


class NotFoundError(InventoryError):
    """Referenced product, location, vendor or request does not exist."""

    status_code = 404
    default_message = "Resource not found"

    def __init__(self, message=None, code='NOT_FOUND', details=None):
        super().__init__(message, code, details)

    @classmethod
    def for_entity(cls, entity, entity_id):
        return cls(f"{entity} not found", details={'entity': entity, 'id': entity_id})


class InvalidTransitionError(InventoryError):
    """Reorder status machine violation."""

    status_code = 400
    default_message = "Invalid status transition"

    def __init__(self, message=None, code='INVALID_TRANSITION', details=None):
        super().__init__(message, code, details)


class QuantityExceedsOrderError(InventoryError):
    """Received quantity is larger than the quantity on the request."""

    status_code = 400
    default_message = "Quantity received exceeds quantity ordered"

    def __init__(self, message=None, code='QUANTITY_EXCEEDS_ORDER', details=None):
        super().__init__(message, code, details)


class PersistenceError(InventoryError):
    """The store was unavailable or a write failed; the transaction was rolled back."""

    status_code = 500
    default_message = "The operation could not be saved"

    def __init__(self, message=None, code='PERSISTENCE_FAILURE', details=None):
        super().__init__(message, code, details)
