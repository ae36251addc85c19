"""
HTTP routers, grouped by caller role.
"""

from foodorder.api import auth, diner, merchant, public

routers = [auth.router, public.router, diner.router, merchant.router]

__all__ = ["routers"]
