"""
Normalization of access and query records.

Records arrive as AccessInfo/QueryInfo instances or plain dicts (for example
rows loaded from a JSON document). They are normalized into fresh records so
the caller's input is never modified.
"""

from typing import Any, List, Union

from ..types.common import (
    AccessInfo, QueryInfo, ACTIONS, POSSESSIONS, Possession
)
from ..types.errors import AccessControlError, INVALID_ACTION, INVALID_NAME, INVALID_SHAPE
from ..util.validation import to_string_array, is_empty_array, is_filled_string_array


def as_access_info(info: Union[AccessInfo, dict]) -> AccessInfo:
    """Copy a dict or AccessInfo into a new AccessInfo."""
    if isinstance(info, AccessInfo):
        return AccessInfo(**info.to_dict())
    if isinstance(info, dict):
        if not info:
            raise AccessControlError("Invalid AccessInfo: {}", INVALID_SHAPE)
        return AccessInfo.from_dict(info)
    raise AccessControlError(f"Invalid AccessInfo: {type(info).__name__}", INVALID_SHAPE)


def as_query_info(info: Union[QueryInfo, dict]) -> QueryInfo:
    """Copy a dict or QueryInfo into a new QueryInfo."""
    if isinstance(info, QueryInfo):
        return QueryInfo(**info.to_dict())
    if isinstance(info, dict):
        if not info:
            raise AccessControlError("Invalid QueryInfo: {}", INVALID_SHAPE)
        return QueryInfo.from_dict(info)
    raise AccessControlError(f"Invalid QueryInfo: {type(info).__name__}", INVALID_SHAPE)


def normalize_action_possession(info: Union[AccessInfo, QueryInfo]) -> Union[AccessInfo, QueryInfo]:
    """
    Lower-case the action and resolve the possession, either from the
    `possession` field or from a compound "action:possession" string.
    Possession defaults to "any". Modifies and returns `info`.

    Raises:
        AccessControlError: If the action is missing/unknown or the
        possession is not "own" or "any"
    """
    if not isinstance(info.action, str) or info.action.strip() == '':
        raise AccessControlError(f"Invalid action: {info.to_dict()}", INVALID_ACTION)

    parts = info.action.split(':')
    action = parts[0].strip().lower()
    if action not in ACTIONS:
        raise AccessControlError(f"Invalid action: {action!r}", INVALID_ACTION)
    info.action = action

    possession = info.possession or (parts[1].strip().lower() if len(parts) > 1 else None)
    if possession:
        possession = str(possession).lower()
        if possession not in POSSESSIONS:
            raise AccessControlError(f"Invalid action possession: {possession}", INVALID_ACTION)
        info.possession = possession
    else:
        info.possession = Possession.ANY.value

    return info


def action_possession_key(action: str) -> str:
    """Normalize "read", "read:own" etc. into an "action:possession" key."""
    info = normalize_action_possession(QueryInfo(action=action))
    return f"{info.action}:{info.possession}"


def normalize_attributes(attributes: Any, denied: bool = False) -> List[str]:
    """
    Resolve the attribute list to be stored for a grant.

    Denials always store []. An omitted value (None or "") means all
    attributes (["*"]); an explicit empty list means none.
    """
    if denied:
        return []
    if attributes is None or attributes == '':
        return ['*']
    attrs = to_string_array(attributes)
    if not isinstance(attributes, (str, list, tuple)) or not is_filled_string_array(attrs):
        raise AccessControlError(
            f"Invalid attributes: {attributes!r}. Expected a list of non-empty strings.",
            INVALID_SHAPE
        )
    return [a.strip() for a in attrs]


def normalize_query_info(query: Union[QueryInfo, dict]) -> QueryInfo:
    """
    Validate and normalize a query record.

    Raises:
        AccessControlError: On an invalid subject, resource or action
    """
    query = as_query_info(query)

    subjects = to_string_array(query.subject)
    if len(subjects) == 0 or not is_filled_string_array(subjects):
        raise AccessControlError(f"Invalid subject(s): {query.subject!r}", INVALID_NAME)
    query.subject = subjects

    if not isinstance(query.resource, str) or query.resource.strip() == '':
        raise AccessControlError(f'Invalid resource: "{query.resource}"', INVALID_NAME)
    query.resource = query.resource.strip()

    return normalize_action_possession(query)


def normalize_access_info(access: Union[AccessInfo, dict], normalize_all: bool = False) -> AccessInfo:
    """
    Validate and normalize an access record for commit.

    When normalize_all is False the action and possession are assumed to be
    set by a builder method and are not re-validated.
    """
    access = as_access_info(access)

    subjects = to_string_array(access.subject)
    if len(subjects) == 0 or not is_filled_string_array(subjects):
        raise AccessControlError(f"Invalid subject(s): {access.subject!r}", INVALID_NAME)
    access.subject = subjects

    resources = to_string_array(access.resource)
    if len(resources) == 0 or not is_filled_string_array(resources):
        raise AccessControlError(f"Invalid resource(s): {access.resource!r}", INVALID_NAME)
    access.resource = resources

    access.attributes = normalize_attributes(access.attributes, access.denied)

    if normalize_all:
        access = normalize_action_possession(access)
    return access


def reset_attributes(access: AccessInfo) -> AccessInfo:
    """
    Apply the default attributes of a freshly started grant or deny.
    A grant record without attributes, including an empty list, grants all.
    """
    if access.denied:
        access.attributes = []
    elif access.attributes is None or access.attributes == '' or is_empty_array(access.attributes):
        access.attributes = ['*']
    return access
