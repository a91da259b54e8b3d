"""
Validation utilities for grantkit.
Provides name and list checks used by the grants model and the builders.
"""

import re
from typing import Any, Iterable, List

from ..types.common import RESERVED_KEYWORDS
from ..types.errors import AccessControlError, INVALID_NAME

_DELIMITER = re.compile(r'\s*[;,]\s*')


def to_string_array(value: Any) -> List[str]:
    """
    Convert a string or list into a list of strings.
    Strings are split on commas and semicolons. Returns an empty list for any
    other type, so callers decide whether that is an error.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return _DELIMITER.split(value.strip())
    return []


def is_filled_string_array(arr: Any) -> bool:
    """
    Check that every item of a list is a non-blank string.
    The list itself may be empty.
    """
    if not isinstance(arr, (list, tuple)):
        return False
    for s in arr:
        if not isinstance(s, str) or s.strip() == '':
            return False
    return True


def is_empty_array(value: Any) -> bool:
    """Check whether the value is an empty list or tuple."""
    return isinstance(value, (list, tuple)) and len(value) == 0


def valid_name(name: Any, throw_on_invalid: bool = True) -> bool:
    """
    Check that a subject or resource name is a non-blank string and not a
    reserved keyword.

    Raises:
        AccessControlError: If the name is invalid and throw_on_invalid is set
    """
    if not isinstance(name, str) or name.strip() == '':
        if not throw_on_invalid:
            return False
        raise AccessControlError(
            "Invalid name, expected a valid string.", INVALID_NAME, {'name': repr(name)}
        )
    if name in RESERVED_KEYWORDS:
        if not throw_on_invalid:
            return False
        raise AccessControlError(
            f'Cannot use reserved name: "{name}"', INVALID_NAME, {'name': name}
        )
    return True


def has_valid_names(names: Any, throw_on_invalid: bool = True) -> bool:
    """Check every name in a string or list with valid_name."""
    for name in to_string_array(names):
        if not valid_name(name, throw_on_invalid):
            return False
    return True


def uniq_concat(arr_a: Iterable[str], arr_b: Iterable[str]) -> List[str]:
    """Concatenate two lists keeping the first occurrence of each item."""
    result = list(arr_a)
    for item in arr_b:
        if item not in result:
            result.append(item)
    return result


def subtract_array(arr_a: Iterable[str], arr_b: Iterable[str]) -> List[str]:
    """Return the items of arr_a that are not in arr_b."""
    exclude = set(arr_b)
    return [a for a in arr_a if a not in exclude]
