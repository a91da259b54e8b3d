# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package types provides shared type definitions for grantkit.

This package contains types used across the grants model, the builders and
the facade:
- Action and possession enums
- Access and query records
- Reserved names of the grants model
- The AccessControlError exception and its error codes
"""

from .common import (
    # Enums
    Action,
    Possession,
    ACTIONS,
    POSSESSIONS,

    # Records
    AccessInfo,
    QueryInfo,
    Names,

    # Constants
    EXTEND_KEY,
    RESERVED_KEYWORDS,
    ERR_LOCK,
)

from .errors import (
    AccessControlError,
    ErrorCode,
    LOCKED,
    INVALID_NAME,
    INVALID_SHAPE,
    INVALID_ACTION,
    NOT_FOUND,
    SELF_EXTENSION,
    CROSS_INHERITANCE,
    EMPTY_MODEL,
    INTERNAL_ERROR,
)

__all__ = [
    # Enums
    'Action',
    'Possession',
    'ACTIONS',
    'POSSESSIONS',

    # Records
    'AccessInfo',
    'QueryInfo',
    'Names',

    # Constants
    'EXTEND_KEY',
    'RESERVED_KEYWORDS',
    'ERR_LOCK',

    # Errors
    'AccessControlError',
    'ErrorCode',
    'LOCKED',
    'INVALID_NAME',
    'INVALID_SHAPE',
    'INVALID_ACTION',
    'NOT_FOUND',
    'SELF_EXTENSION',
    'CROSS_INHERITANCE',
    'EMPTY_MODEL',
    'INTERNAL_ERROR',
]
