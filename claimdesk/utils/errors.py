"""
Custom Exceptions
Domain error handling for rating, claims and quotes.

Two failure kinds reach callers: validation failures (a full list of
messages, nothing persisted) and precondition failures (a single
descriptive error, record left untouched).
"""

from typing import Optional


class BrokerageError(Exception):
    """Base exception for brokerage core errors."""

    pass


class ClaimValidationError(BrokerageError):
    """Raised when a claim submission is not admissible."""

    def __init__(self, message: str = "Claim validation failed", errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        return f"{super().__str__()}: {'; '.join(self.errors)}"


class TransitionError(BrokerageError):
    """Raised when a claim lifecycle transition precondition fails."""

    def __init__(
        self,
        message: str,
        claim_id: Optional[str] = None,
        current_status: Optional[str] = None,
        action: Optional[str] = None,
    ):
        super().__init__(message)
        self.claim_id = claim_id
        self.current_status = current_status
        self.action = action


class QuoteStateError(BrokerageError):
    """Raised when a quote decision or policy issuance precondition fails."""

    pass


class RecordNotFoundError(BrokerageError):
    """Raised when the record store has no entity with the given id."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ConcurrencyConflictError(BrokerageError):
    """Raised when a save loses an optimistic version check."""

    def __init__(self, entity: str, entity_id: str, expected_version: int):
        super().__init__(
            f"{entity} {entity_id} was modified concurrently "
            f"(expected version {expected_version})"
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version


class ConfigurationError(BrokerageError):
    """Raised when a plan table or settings file is invalid."""

    pass
