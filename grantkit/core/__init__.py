"""
Core module initialization
"""

from .access_control import AccessControl
from .access import Access
from .query import Query
from .permission import Permission
from .config import Config

__all__ = ["AccessControl", "Access", "Query", "Permission", "Config"]
