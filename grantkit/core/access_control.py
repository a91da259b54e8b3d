"""
Main AccessControl implementation for grantkit.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from typing import Any, Dict, List, Optional, Union
import logging

from .access import Access
from .config import Config
from .permission import Permission
from .query import Query
from ..grants.store import GrantStore, GrantsInput
from ..notation import filter_all
from ..types.common import AccessInfo, Action, Names, Possession, QueryInfo
from ..types.errors import AccessControlError


class AccessControl:
    """
    Role and attribute based access control over an in-memory grants model.

    Grants are built programmatically or loaded from a nested mapping or a
    flat list of records:

        ac = AccessControl()
        ac.grant('user').read_own('profile', ['*', '!password'])
        ac.grant('admin').extend('user').read_any('profile')

        permission = ac.can('admin').read_any('profile')
        permission.granted          # True
        permission.filter(data)     # data without denied attributes

        ac.lock()                   # no further changes
    """

    Action = Action
    Possession = Possession
    Error = AccessControlError

    def __init__(self, grants: Optional[GrantsInput] = None):
        """
        Initialize AccessControl instance.

        Args:
            grants: Optional grants mapping or flat list of access records
        """
        self._store = GrantStore()
        self.logger = logging.getLogger(__name__)
        if grants is not None:
            self.set_grants(grants)

    @classmethod
    def from_config(cls, config: Config) -> "AccessControl":
        """
        Create an AccessControl instance from configuration, loading the
        configured grants and locking them if requested.
        """
        config.validate()
        ac = cls()
        grants = config.load_grants()
        if grants is not None:
            ac.set_grants(grants)
        if config.lock:
            ac.lock()
        ac.logger.info(
            f"AccessControl configured with {len(ac.get_roles())} subject(s), "
            f"locked={ac.is_locked}"
        )
        return ac

    # -------------------------------
    #  GRANTS MODEL
    # -------------------------------

    @property
    def is_locked(self) -> bool:
        """Whether the grants model is locked."""
        return self._store.locked

    def get_grants(self) -> Dict[str, Any]:
        """Get a copy of the grants model."""
        return self._store.get_grants()

    def set_grants(self, grants: GrantsInput) -> "AccessControl":
        """Replace all grants with the given mapping or flat record list."""
        self._store.set_grants(grants)
        return self

    def reset(self) -> "AccessControl":
        """Remove all grants."""
        self._store.reset()
        return self

    def lock(self) -> "AccessControl":
        """
        Freeze the grants model. Any later attempt to modify it raises.
        There is no unlock.
        """
        self._store.lock()
        return self

    def extend_role(self, subjects: Names, extender_roles: Names) -> "AccessControl":
        """
        Make subject(s) inherit the grants of other subject(s). Missing
        subjects are created; missing extender roles raise.
        """
        self._store.extend_role(subjects, extender_roles, auto_create=True)
        return self

    def remove_roles(self, subjects: Names) -> "AccessControl":
        """Remove subject(s) and all their grants."""
        self._store.remove_roles(subjects)
        return self

    def remove_resources(self, resources: Names, subjects: Optional[Names] = None) -> "AccessControl":
        """Remove resource(s) for the given subjects, or for all of them."""
        self._store.remove_resources(resources, subjects)
        return self

    def get_roles(self) -> List[str]:
        """All subjects that have an entry."""
        return self._store.get_roles()

    def get_inherited_roles_of(self, subject: str) -> List[str]:
        """All subjects inherited by the given subject, excluding itself."""
        return self._store.hierarchy_of(subject)[1:]

    get_extended_roles_of = get_inherited_roles_of

    def get_resources(self) -> List[str]:
        """All resources granted to at least one subject."""
        return self._store.get_resources()

    def has_role(self, subject: Names) -> bool:
        """Whether the given subject (or all of the given subjects) exist."""
        return self._store.has_role(subject)

    def has_resource(self, resource: Names) -> bool:
        """Whether the given resource (or all of the given resources) exist."""
        return self._store.has_resource(resource)

    # -------------------------------
    #  QUERIES
    # -------------------------------

    def can(self, subject: Optional[Union[Names, QueryInfo, dict]] = None) -> Query:
        """
        Start a permission query.

            ac.can('admin').create_any('profile')
            ac.can(['admin', 'user']).read_own('profile')

        When several subjects are given their attributes are unioned.
        """
        return Query(self._store, subject)

    query = can

    def permission(self, query_info: Union[QueryInfo, dict]) -> Permission:
        """Resolve a complete query record into a Permission at once."""
        return Permission(self._store, query_info)

    # -------------------------------
    #  GRANT / DENY
    # -------------------------------

    def grant(self, subject: Optional[Union[Names, AccessInfo, dict]] = None) -> Access:
        """
        Start granting access. Attributes default to ["*"].

            ac.grant('admin').create_any('profile')
            ac.grant({'subject': 'admin', 'resource': 'profile', 'action': 'create:any'})
        """
        self._store._ensure_unlocked()
        return Access(self._store, subject, False)

    allow = grant

    def deny(self, subject: Optional[Union[Names, AccessInfo, dict]] = None) -> Access:
        """
        Start denying access. Denied grants store no attributes.

            ac.deny('admin').create_any('profile')
        """
        self._store._ensure_unlocked()
        return Access(self._store, subject, True)

    reject = deny

    # -------------------------------
    #  STATIC UTILITIES
    # -------------------------------

    @staticmethod
    def filter(data: Any, attributes: Names) -> Any:
        """
        Deep copy the data object (or each object of a list) keeping only
        the properties matched by the attribute globs.
        """
        if isinstance(attributes, str):
            attributes = [attributes]
        return filter_all(data, attributes)

    @staticmethod
    def is_ac_error(obj: Any) -> bool:
        """Whether the object is an AccessControlError."""
        return isinstance(obj, AccessControlError)

    is_access_control_error = is_ac_error
