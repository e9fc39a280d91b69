"""
HTTP routes of the access relay.
"""

from .access import router as access_router

__all__ = ["access_router"]
