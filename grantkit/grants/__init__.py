# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package grants implements the grants model: storage, validation,
normalization and role hierarchy resolution.
"""

from .store import GrantStore, GrantsInput
from .hierarchy import (
    hierarchy_of,
    flatten_roles,
    non_existent_roles,
    cross_extending_role,
    extend_role,
)
from .normalize import (
    normalize_action_possession,
    normalize_query_info,
    normalize_access_info,
    normalize_attributes,
    action_possession_key,
    reset_attributes,
)

__all__ = [
    # Store
    'GrantStore',
    'GrantsInput',

    # Hierarchy
    'hierarchy_of',
    'flatten_roles',
    'non_existent_roles',
    'cross_extending_role',
    'extend_role',

    # Normalization
    'normalize_action_possession',
    'normalize_query_info',
    'normalize_access_info',
    'normalize_attributes',
    'action_possession_key',
    'reset_attributes',
]
