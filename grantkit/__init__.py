"""
grantkit Python Package

Role and attribute based access control with glob attribute filtering
"""

__version__ = "0.1.0"
__author__ = "grantkit contributors"

from .core.access_control import AccessControl
from .core.access import Access
from .core.query import Query
from .core.permission import Permission
from .core.config import Config
from .grants.store import GrantStore
from .notation import filter_data, filter_all, union, normalize
from .types import (
    AccessControlError,
    ErrorCode,
    Action,
    Possession,
    AccessInfo,
    QueryInfo,
)

__all__ = [
    "AccessControl",
    "Access",
    "Query",
    "Permission",
    "Config",
    "GrantStore",
    "AccessControlError",
    "ErrorCode",
    "Action",
    "Possession",
    "AccessInfo",
    "QueryInfo",
    "filter_data",
    "filter_all",
    "union",
    "normalize",
]
