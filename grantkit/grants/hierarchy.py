"""
Role hierarchy resolution.

Subjects extend other subjects through the list stored under EXTEND_KEY in
their entry. Inheritance must stay acyclic: a subject may not extend itself,
and may not extend a subject that already (transitively) extends it.
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple

from ..types.common import EXTEND_KEY, Names
from ..types.errors import (
    AccessControlError, CROSS_INHERITANCE, INVALID_NAME, NOT_FOUND, SELF_EXTENSION
)
from ..util.validation import (
    to_string_array, is_empty_array, is_filled_string_array, uniq_concat, valid_name
)


logger = logging.getLogger(__name__)


def hierarchy_of(grants: Mapping[str, Any], subject_name: str,
                 _path: Tuple[str, ...] = ()) -> List[str]:
    """
    Get the flat, ordered list of `subject_name` followed by every subject
    it extends, directly or transitively. Each subject appears once.

    Raises:
        AccessControlError: If a subject is missing or the chain loops back
    """
    subject = grants.get(subject_name)
    if subject is None:
        raise AccessControlError(f'Subject not found: "{subject_name}"', NOT_FOUND)

    result = [subject_name]
    extended = subject.get(EXTEND_KEY)
    if not extended:
        return result

    path = _path + (subject_name,)
    for ext_name in extended:
        if ext_name not in grants:
            raise AccessControlError(f'Subject not found: "{ext_name}"', NOT_FOUND)
        if ext_name == subject_name:
            raise AccessControlError(
                f'Cannot extend subject "{subject_name}" by itself.', SELF_EXTENSION
            )
        # the chain loops back to a subject being resolved
        if ext_name in path:
            raise AccessControlError(
                f'Cross inheritance is not allowed. Subject "{subject_name}" already extends "{ext_name}".',
                CROSS_INHERITANCE,
                {'subject': subject_name, 'extends': ext_name}
            )
        result = uniq_concat(result, hierarchy_of(grants, ext_name, path))
    return result


def flatten_roles(grants: Mapping[str, Any], subjects: Names) -> List[str]:
    """Union of the hierarchies of every given subject, in first-seen order."""
    names = to_string_array(subjects)
    if len(names) == 0 or not is_filled_string_array(names):
        raise AccessControlError(f"Invalid subject(s): {subjects!r}", INVALID_NAME)

    result: List[str] = []
    for name in names:
        result = uniq_concat(result, hierarchy_of(grants, name))
    return result


def non_existent_roles(grants: Mapping[str, Any], subjects: List[str]) -> List[str]:
    """Return the subjects that have no entry in the grants model."""
    return [s for s in subjects if s not in grants]


def cross_extending_role(grants: Mapping[str, Any], subject_name: str,
                         extender_roles: Names) -> Optional[str]:
    """
    Return the first extender whose own hierarchy already contains
    `subject_name`, i.e. the role that would close a cycle. None if safe.
    """
    for extender in to_string_array(extender_roles):
        if extender == subject_name:
            break
        if subject_name in hierarchy_of(grants, extender):
            return extender
    return None


def extend_role(grants: dict, subjects: Names, extender_roles: Names,
                replace: bool = False, auto_create: bool = False) -> None:
    """
    Make each subject inherit from the extender roles.

    Every check runs before the model is touched, so a rejected call leaves
    `grants` unchanged. With `auto_create`, missing subjects are created as
    empty entries; otherwise they are rejected.

    Raises:
        AccessControlError: On invalid or missing subjects, self extension
        or cross inheritance
    """
    subject_names = to_string_array(subjects)
    if len(subject_names) == 0:
        raise AccessControlError(f"Invalid subject(s): {subjects!r}", INVALID_NAME)

    if is_empty_array(extender_roles):
        return

    ext_names = to_string_array(extender_roles)
    if len(ext_names) == 0 or not is_filled_string_array(ext_names):
        raise AccessControlError(
            f"Cannot inherit invalid subject(s): {extender_roles!r}", INVALID_NAME
        )

    missing = non_existent_roles(grants, ext_names)
    if missing:
        raise AccessControlError(
            f'Cannot inherit non-existent subject(s): "{", ".join(missing)}"',
            NOT_FOUND,
            {'subjects': missing}
        )

    for subject_name in subject_names:
        valid_name(subject_name)
        if subject_name not in grants and not auto_create:
            raise AccessControlError(f'Subject not found: "{subject_name}"', NOT_FOUND)
        if subject_name in ext_names:
            raise AccessControlError(
                f'Cannot extend subject "{subject_name}" by itself.', SELF_EXTENSION
            )
        cross = cross_extending_role(grants, subject_name, ext_names)
        if cross:
            raise AccessControlError(
                f'Cross inheritance is not allowed. Subject "{cross}" already extends "{subject_name}".',
                CROSS_INHERITANCE,
                {'subject': cross, 'extends': subject_name}
            )

    for subject_name in subject_names:
        entry = grants.setdefault(subject_name, {})
        if replace:
            entry[EXTEND_KEY] = list(ext_names)
        else:
            entry[EXTEND_KEY] = uniq_concat(entry.get(EXTEND_KEY) or [], ext_names)
        logger.debug(f"Subject {subject_name!r} now extends {entry[EXTEND_KEY]}")
