"""
Core module initialization.
Exports configuration, logging utilities and the error taxonomy.
"""

from foodorder.core.config import get_settings, Settings, EnvironmentMode
from foodorder.core.errors import FoodOrderError

__all__ = ["get_settings", "Settings", "EnvironmentMode", "FoodOrderError"]
