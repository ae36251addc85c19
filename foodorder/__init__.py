"""
                Food Ordering Backend

Multi-tenant ordering backend where merchants manage venues and
menus and diners place orders against a venue's live menu.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
