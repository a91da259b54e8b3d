"""
Query: chainable builder for checking permissions against the grants model.
"""

from typing import Optional, Union

from ..grants.normalize import as_query_info
from ..grants.store import GrantStore
from ..types.common import Names, Possession, QueryInfo
from ..types.errors import AccessControlError, INVALID_ACTION, INVALID_SHAPE
from .permission import Permission


class Query:
    """
    Builds a query and resolves it into a Permission.

        ac.can('admin').read_any('profile')
        ac.can().subject('admin').resource('profile').read_any()
    """

    def __init__(self, store: GrantStore, subject_or_info: Optional[Union[Names, QueryInfo, dict]] = None):
        self._store = store
        self._ = QueryInfo()

        if isinstance(subject_or_info, (str, list, tuple)):
            self.subject(subject_or_info)
        elif isinstance(subject_or_info, (QueryInfo, dict)):
            self._ = as_query_info(subject_or_info)
        elif subject_or_info is not None:
            raise AccessControlError(
                "Invalid subject(s), expected a valid string, list or QueryInfo.",
                INVALID_SHAPE
            )

    def subject(self, subject: Names) -> 'Query':
        """Set the subject(s) to be checked."""
        self._.subject = list(subject) if isinstance(subject, tuple) else subject
        return self

    def resource(self, resource: str) -> 'Query':
        """Set the resource to be checked."""
        self._.resource = resource
        return self

    def create_own(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can create their own resource."""
        return self._get_permission('create', Possession.OWN, resource)

    def create_any(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can create any resource."""
        return self._get_permission('create', Possession.ANY, resource)

    create = create_any

    def read_own(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can read their own resource."""
        return self._get_permission('read', Possession.OWN, resource)

    def read_any(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can read any resource."""
        return self._get_permission('read', Possession.ANY, resource)

    read = read_any

    def update_own(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can update their own resource."""
        return self._get_permission('update', Possession.OWN, resource)

    def update_any(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can update any resource."""
        return self._get_permission('update', Possession.ANY, resource)

    update = update_any

    def delete_own(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can delete their own resource."""
        return self._get_permission('delete', Possession.OWN, resource)

    def delete_any(self, resource: Optional[str] = None) -> Permission:
        """Check whether the subject(s) can delete any resource."""
        return self._get_permission('delete', Possession.ANY, resource)

    delete = delete_any

    def do(self, action: str) -> Permission:
        """
        Check a compound "resource:action[:possession]" string,
        e.g. "video:read:own".
        """
        segments = action.split(':') if isinstance(action, str) else []
        if len(segments) < 2:
            raise AccessControlError(f"Invalid action: {action!r}", INVALID_ACTION)
        possession = segments[2] if len(segments) > 2 else None
        return self._get_permission(segments[1], possession, segments[0])

    def _get_permission(self, action: str, possession: Optional[str],
                        resource: Optional[str] = None) -> Permission:
        self._.action = action
        self._.possession = possession
        if resource:
            self._.resource = resource
        return Permission(self._store, self._)
