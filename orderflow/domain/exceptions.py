"""
Business exceptions for the orderflow domain.

Every user-facing failure is a BusinessRuleViolation carrying a human-readable
message. These exceptions are independent of infrastructure concerns
(HTTP, database, etc.).
"""

from typing import Any, Optional


class BusinessRuleViolation(Exception):
    """Base exception for all business rule failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(BusinessRuleViolation):
    """Raised when an input value is missing, malformed or out of range."""

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Invalid {field}: {reason}"
        super().__init__(
            message=message,
            details={"field": field, "value": None if value is None else str(value), "reason": reason},
        )


class NotFoundException(BusinessRuleViolation):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, key: str, value: Any):
        message = f"{entity} not found for {key}: {value}"
        super().__init__(
            message=message, details={"entity": entity, "key": key, "value": str(value)}
        )


class AlreadyExistsException(BusinessRuleViolation):
    """Raised when a unique key is already registered."""

    def __init__(self, entity: str, key: str, value: Any):
        message = f"{entity} already registered with {key}: {value}"
        super().__init__(
            message=message, details={"entity": entity, "key": key, "value": str(value)}
        )


class EntityInUseException(BusinessRuleViolation):
    """Raised when deleting an entity that other records still reference."""

    def __init__(self, entity: str, key: str, value: Any, referenced_by: str):
        message = f"{entity} with {key} {value} is still referenced by {referenced_by}"
        super().__init__(
            message=message,
            details={
                "entity": entity,
                "key": key,
                "value": str(value),
                "referenced_by": referenced_by,
            },
        )


class InvalidStatusTransitionException(BusinessRuleViolation):
    """Raised when an order status change is not allowed."""

    def __init__(self, current: Optional[str], target: str):
        if current is None:
            message = f"Order status cannot be changed to {target}"
        else:
            message = f"Order status cannot change from {current} to {target}"
        super().__init__(message=message, details={"current": current, "target": target})


class PersistenceFailure(BusinessRuleViolation):
    """
    Raised when the storage layer fails unexpectedly.

    The message is stable and never includes driver output; the original
    exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str):
        message = f"Failed to {operation}."
        super().__init__(message=message, details={"operation": operation})
