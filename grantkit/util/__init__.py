# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Utility package providing helper functions for grantkit.

This package includes:
- Validation utilities for subject/resource names and string lists
- Configuration utilities for environment variables and JSON/YAML files
"""

from .validation import (
    to_string_array, is_filled_string_array, is_empty_array,
    valid_name, has_valid_names, uniq_concat, subtract_array
)
from .config import (
    load_config_from_env, get_config_value, get_bool_config,
    load_config_file
)

__all__ = [
    # Validation utilities
    'to_string_array', 'is_filled_string_array', 'is_empty_array',
    'valid_name', 'has_valid_names', 'uniq_concat', 'subtract_array',

    # Configuration utilities
    'load_config_from_env', 'get_config_value', 'get_bool_config',
    'load_config_file',
]
