"""
Core module initialization.
Exports configuration, logging utilities and domain errors.
"""

from food_ordering.core.config import get_settings, Settings, EnvironmentMode
from food_ordering.core.errors import (
    FoodOrderingError,
    InvalidReferenceError,
    NotFoundError,
)

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "FoodOrderingError",
    "InvalidReferenceError",
    "NotFoundError",
]
