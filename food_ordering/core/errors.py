"""
Domain Errors

Every failure in the mock backend is terminal for the request that caused
it. Services raise these exceptions and the exception handlers registered
in ``food_ordering.main`` turn them into HTTP responses:

    - NotFoundError → 404 with an empty body
    - InvalidReferenceError → 400 with ``{"error": "<message>"}``
"""

from typing import Optional


class FoodOrderingError(Exception):
    """Base class for all domain errors."""


class NotFoundError(FoodOrderingError):
    """
    An id in the request path does not match a known entity.

    Attributes:
        entity: Kind of entity looked up (cart, line, order, outlet)
        entity_id: The id that was not found
    """

    def __init__(self, entity: str, entity_id: Optional[str]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id!r} not found")


class InvalidReferenceError(FoodOrderingError):
    """
    A request body references an entity that does not exist.

    The message is short and human readable; it is returned to the
    caller verbatim.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
