"""
                Mock Food Ordering API

An in-memory food-ordering backend: static outlet and menu catalog,
ephemeral carts, and orders that walk through a simulated delivery
timeline.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
