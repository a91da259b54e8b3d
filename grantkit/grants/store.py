"""
Grant store: the canonical grants model.

The model is a nested mapping

    {subject: {resource: {"action:possession": [attribute globs]},
               "$extend": [extended subjects]}}

The store is the only writer of this mapping. Builders and queries hold a
reference to the store and go through its methods. Once locked, the mapping
is converted to read-only views and every mutator raises.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Sequence, Union
import copy
import logging

from ..types.common import AccessInfo, EXTEND_KEY, ERR_LOCK, Names
from ..types.errors import (
    AccessControlError, EMPTY_MODEL, INTERNAL_ERROR, INVALID_NAME, INVALID_SHAPE,
    LOCKED, NOT_FOUND
)
from ..util.validation import (
    to_string_array, is_empty_array, is_filled_string_array, subtract_array, valid_name
)
from .hierarchy import extend_role, hierarchy_of
from .normalize import action_possession_key, normalize_access_info


logger = logging.getLogger(__name__)

GrantsInput = Union[Mapping, Sequence[Union[AccessInfo, dict]]]


def _thaw(value: Any) -> Any:
    """Deep copy a (possibly frozen) grants structure into dicts and lists."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return copy.deepcopy(value)


def _freeze(value: Any) -> Any:
    """Convert dicts to read-only mapping views and lists to tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _is_frozen(value: Any) -> bool:
    if isinstance(value, (dict, list)):
        return False
    if isinstance(value, Mapping):
        return all(_is_frozen(v) for v in value.values())
    if isinstance(value, tuple):
        return all(_is_frozen(v) for v in value)
    return True


def _validate_resource_object(subject_name: str, resource_name: str, resource: Any) -> Dict[str, List[str]]:
    """Check a resource entry and return it with normalized action keys."""
    if not isinstance(resource, Mapping):
        raise AccessControlError(
            f'Invalid resource definition "{resource_name}" for subject "{subject_name}".',
            INVALID_SHAPE
        )
    normalized = {}
    for action, attributes in resource.items():
        if not is_empty_array(attributes) and not is_filled_string_array(attributes):
            raise AccessControlError(
                f'Invalid resource attributes for action "{action}".',
                INVALID_SHAPE,
                {'subject': subject_name, 'resource': resource_name}
            )
        normalized[action_possession_key(action)] = list(attributes)
    return normalized


def _validate_role_object(grants: dict, subject_name: str) -> None:
    subject = grants[subject_name]
    if not isinstance(subject, dict):
        raise AccessControlError(
            f'Invalid subject definition for "{subject_name}".', INVALID_SHAPE
        )

    for resource_name in list(subject.keys()):
        if resource_name == EXTEND_KEY:
            ext_roles = subject[resource_name]
            if not isinstance(ext_roles, list) or not ext_roles or not is_filled_string_array(ext_roles):
                raise AccessControlError(
                    f'Invalid extend value for subject "{subject_name}": {ext_roles!r}',
                    INVALID_SHAPE
                )
            # applying the extension also checks existence and cycles
            extend_role(grants, subject_name, ext_roles)
        elif not valid_name(resource_name, False):
            raise AccessControlError(
                f'Cannot use reserved name "{resource_name}" for a resource.', INVALID_NAME
            )
        else:
            subject[resource_name] = _validate_resource_object(
                subject_name, resource_name, subject[resource_name]
            )


class GrantStore:
    """
    Owner of the grants model.

    All mutating methods raise an AccessControlError with code LOCKED once
    lock() has been called. Multi-step mutations validate before writing.
    """

    def __init__(self, grants: Optional[GrantsInput] = None):
        self._grants: Dict[str, Any] = {}
        self._locked = False
        if grants is not None:
            self.set_grants(grants)

    # -------------------------------
    #  STATE
    # -------------------------------

    @property
    def locked(self) -> bool:
        """Whether the model has been permanently locked."""
        return self._locked

    @property
    def grants(self) -> Mapping:
        """Live view of the grants model, for read-only use by resolvers."""
        return self._grants

    def _ensure_unlocked(self) -> None:
        if self._locked:
            raise AccessControlError(ERR_LOCK, LOCKED)

    # -------------------------------
    #  BULK OPERATIONS
    # -------------------------------

    def get_grants(self) -> Dict[str, Any]:
        """Return a deep copy of the grants model as plain dicts and lists."""
        return _thaw(self._grants)

    def set_grants(self, grants: GrantsInput) -> 'GrantStore':
        """
        Replace the whole model with the given grants.

        Args:
            grants: Either a grants mapping in the canonical shape, or a flat
                list of access records (dicts or AccessInfo)

        Raises:
            AccessControlError: If locked or the input fails inspection
        """
        self._ensure_unlocked()
        self._grants = self._inspect_grants(grants)
        logger.info(f"Grants model loaded with {len(self._grants)} subject(s)")
        return self

    def reset(self) -> 'GrantStore':
        """Remove every grant."""
        self._ensure_unlocked()
        self._grants = {}
        logger.info("Grants model reset")
        return self

    @staticmethod
    def _inspect_grants(grants: GrantsInput) -> Dict[str, Any]:
        if isinstance(grants, Mapping):
            inspected = _thaw(grants)
            for subject_name in list(inspected.keys()):
                valid_name(subject_name)
                _validate_role_object(inspected, subject_name)
            return inspected

        if isinstance(grants, (list, tuple)):
            inspected = {}
            for item in grants:
                GrantStore._commit_to(inspected, item, True)
            return inspected

        raise AccessControlError(
            "Invalid grants object. Expected a list or mapping.",
            INVALID_SHAPE,
            {'type': type(grants).__name__}
        )

    # -------------------------------
    #  COMMIT
    # -------------------------------

    @staticmethod
    def _commit_to(grants: dict, access: Union[AccessInfo, dict], normalize_all: bool) -> AccessInfo:
        access = normalize_access_info(access, normalize_all)
        for subject in access.subject:
            valid_name(subject)
        for resource in access.resource:
            valid_name(resource)

        key = f"{access.action}:{access.possession}"
        for subject in access.subject:
            subject_entry = grants.setdefault(subject, {})
            for resource in access.resource:
                subject_entry.setdefault(resource, {})[key] = list(access.attributes)
        return access

    def commit(self, access: Union[AccessInfo, dict], normalize_all: bool = False) -> None:
        """
        Write an access record into the model.

        Missing subjects and resources are created. The attribute list of
        the exact "action:possession" key is overwritten.

        Args:
            access: The access record
            normalize_all: Also validate and normalize action/possession;
                builder methods that set them pass False
        """
        self._ensure_unlocked()
        access = self._commit_to(self._grants, access, normalize_all)
        logger.debug(
            f"{'Denied' if access.denied else 'Granted'} {access.action}:{access.possession} "
            f"on {access.resource} for {access.subject} with {access.attributes}"
        )

    def pre_create_roles(self, subjects: Names) -> None:
        """Create empty entries for subjects that do not exist yet."""
        self._ensure_unlocked()
        names = to_string_array(subjects)
        if len(names) == 0:
            raise AccessControlError(f"Invalid subject(s): {subjects!r}", INVALID_NAME)
        for name in names:
            valid_name(name)
        for name in names:
            self._grants.setdefault(name, {})

    # -------------------------------
    #  INHERITANCE
    # -------------------------------

    def extend_role(self, subjects: Names, extender_roles: Names,
                    replace: bool = False, auto_create: bool = False) -> 'GrantStore':
        """Make subjects inherit the grants of the extender roles."""
        self._ensure_unlocked()
        extend_role(self._grants, subjects, extender_roles, replace, auto_create)
        return self

    def hierarchy_of(self, subject_name: str) -> List[str]:
        """The subject followed by all subjects it inherits from."""
        return hierarchy_of(self._grants, subject_name)

    # -------------------------------
    #  REMOVAL
    # -------------------------------

    def remove_roles(self, subjects: Names) -> 'GrantStore':
        """
        Remove subjects and all their grants. References to the removed
        subjects are pruned from the inheritance lists of the others.

        Raises:
            AccessControlError: If locked, or any subject does not exist
        """
        self._ensure_unlocked()
        names = to_string_array(subjects)
        if len(names) == 0 or not is_filled_string_array(names):
            raise AccessControlError(f"Invalid subject(s): {subjects!r}", INVALID_NAME)
        for name in names:
            if name not in self._grants:
                raise AccessControlError(
                    f'Cannot remove a non-existing subject: "{name}"', NOT_FOUND
                )

        for name in dict.fromkeys(names):
            del self._grants[name]

        for subject_name, entry in self._grants.items():
            extended = entry.get(EXTEND_KEY)
            if extended:
                remaining = subtract_array(extended, names)
                if len(remaining) != len(extended):
                    logger.warning(
                        f"Pruned removed subject(s) from inheritance list of {subject_name!r}"
                    )
                if remaining:
                    entry[EXTEND_KEY] = remaining
                else:
                    # an empty inheritance list would not load back
                    del entry[EXTEND_KEY]

        logger.info(f"Removed subject(s): {names}")
        return self

    def remove_resources(self, resources: Names, subjects: Optional[Names] = None) -> 'GrantStore':
        """Remove resources for the given subjects, or for all subjects."""
        self._ensure_unlocked()
        self.remove_permission(resources, subjects)
        return self

    def remove_permission(self, resources: Names, subjects: Optional[Names] = None,
                          action_possession: Optional[str] = None) -> None:
        """
        Remove grants on resources.

        Args:
            resources: Resource name(s) to remove
            subjects: Limit removal to these subjects; all when omitted
            action_possession: Remove only this key (e.g. "read:own")
                instead of the whole resource entry
        """
        self._ensure_unlocked()
        resource_names = to_string_array(resources)
        if len(resource_names) == 0 or not is_filled_string_array(resource_names):
            raise AccessControlError(f"Invalid resource(s): {resources!r}", INVALID_NAME)

        subject_names = None
        if subjects is not None:
            subject_names = to_string_array(subjects)
            if len(subject_names) == 0 or not is_filled_string_array(subject_names):
                raise AccessControlError(f"Invalid subject(s): {subjects!r}", INVALID_NAME)

        key = action_possession_key(action_possession) if action_possession else None

        for subject_name, entry in self._grants.items():
            if subject_names is not None and subject_name not in subject_names:
                continue
            for resource_name in resource_names:
                if resource_name == EXTEND_KEY or resource_name not in entry:
                    continue
                if key is None:
                    del entry[resource_name]
                else:
                    entry[resource_name].pop(key, None)

        logger.info(
            f"Removed {key or 'all permissions'} on {resource_names} "
            f"for {subject_names if subject_names is not None else 'all subjects'}"
        )

    # -------------------------------
    #  LOCK
    # -------------------------------

    def lock(self) -> 'GrantStore':
        """
        Permanently freeze the grants model. There is no unlock.

        Raises:
            AccessControlError: If the model is empty, or freezing failed
        """
        if not self._grants:
            raise AccessControlError("Cannot lock empty or invalid grants model.", EMPTY_MODEL)
        if self._locked:
            return self

        frozen = _freeze(self._grants)
        if not _is_frozen(frozen):
            raise AccessControlError(
                f"Could not lock grants: {type(self._grants).__name__}", INTERNAL_ERROR
            )
        self._grants = frozen
        self._locked = True
        logger.info("Grants model locked")
        return self

    # -------------------------------
    #  INTROSPECTION
    # -------------------------------

    def get(self, subject_name: str) -> Optional[Mapping]:
        """Get the entry of a subject, or None."""
        return self._grants.get(subject_name)

    def get_roles(self) -> List[str]:
        """All subjects in the model."""
        return list(self._grants.keys())

    def get_resources(self) -> List[str]:
        """All unique resources granted to at least one subject."""
        resources: List[str] = []
        for entry in self._grants.values():
            for name in entry:
                if name != EXTEND_KEY and name not in resources:
                    resources.append(name)
        return resources

    def has_role(self, subject: Names) -> bool:
        """Whether every given subject exists."""
        if isinstance(subject, (list, tuple)):
            return all(s in self._grants for s in subject)
        return subject in self._grants

    def has_resource(self, resource: Names) -> bool:
        """Whether every given resource is granted to some subject."""
        resources = self.get_resources()
        if isinstance(resource, (list, tuple)):
            return all(r in resources for r in resource)
        if not isinstance(resource, str) or resource == '':
            return False
        return resource in resources

    def __len__(self) -> int:
        return len(self._grants)

    def __contains__(self, subject_name: object) -> bool:
        return subject_name in self._grants
