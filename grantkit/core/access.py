"""
Access: chainable builder that grants or denies access and commits it to
the grants model.
"""

from typing import Optional, Union

from ..grants.normalize import as_access_info, normalize_action_possession, reset_attributes
from ..grants.store import GrantStore
from ..types.common import AccessInfo, Names, Possession
from ..types.errors import AccessControlError, INVALID_ACTION, INVALID_NAME, INVALID_SHAPE
from ..util.validation import has_valid_names


class Access:
    """
    Builds an access record and commits it to the grant store.

    Action methods (create_own, read_any, ...) commit the current draft and
    return the same builder, so further grants can be chained. grant() and
    deny() start a new builder.

        ac.grant('user').read_own('profile', ['*', '!password']) \\
          .grant('admin').extend('user').delete_any('profile')
    """

    def __init__(self, store: GrantStore,
                 subject_or_info: Optional[Union[Names, AccessInfo, dict]] = None,
                 denied: bool = False):
        self._store = store
        self._ = AccessInfo(denied=denied)

        if isinstance(subject_or_info, (str, list, tuple)):
            self.subject(subject_or_info)
        elif isinstance(subject_or_info, (AccessInfo, dict)):
            info = as_access_info(subject_or_info)
            info.denied = denied
            self._ = reset_attributes(info)
            # a complete record is committed right away
            if self._.is_fulfilled():
                self._store.commit(self._, True)
        elif subject_or_info is not None:
            raise AccessControlError(
                "Invalid subject(s), expected a valid string, list or AccessInfo.",
                INVALID_SHAPE
            )

    @property
    def denied(self) -> bool:
        """Whether this builder denies access."""
        return self._.denied

    def subject(self, value: Names) -> 'Access':
        """
        Set the subject(s). New subjects are created right away so that an
        unterminated chain such as ac.grant('user') still registers them.
        """
        self._store.pre_create_roles(value)
        self._.subject = list(value) if isinstance(value, tuple) else value
        return self

    def resource(self, value: Names) -> 'Access':
        """Set the resource(s) for the following action methods."""
        has_valid_names(value, True)
        self._.resource = list(value) if isinstance(value, tuple) else value
        return self

    def attributes(self, value: Names) -> 'Access':
        """Set the attributes used by the next action method."""
        self._.attributes = value
        return self

    def extend(self, subjects: Names) -> 'Access':
        """Make the current subject(s) inherit from the given subjects."""
        if self._.subject is None:
            raise AccessControlError("Invalid subject(s): None", INVALID_NAME)
        self._store.extend_role(self._.subject, subjects)
        return self

    inherit = extend

    def grant(self, subject_or_info: Optional[Union[Names, AccessInfo, dict]] = None) -> 'Access':
        """Switch to a new grant builder within the chain."""
        return Access(self._store, subject_or_info, False)

    def deny(self, subject_or_info: Optional[Union[Names, AccessInfo, dict]] = None) -> 'Access':
        """Switch to a new deny builder within the chain."""
        return Access(self._store, subject_or_info, True)

    def lock(self) -> 'Access':
        """Lock the underlying grants model."""
        self._store.lock()
        return self

    def create_own(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "create:own" on the resource(s)."""
        return self._prepare_and_commit('create', Possession.OWN, resource, attributes)

    def create_any(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "create:any" on the resource(s)."""
        return self._prepare_and_commit('create', Possession.ANY, resource, attributes)

    create = create_any

    def read_own(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "read:own" on the resource(s)."""
        return self._prepare_and_commit('read', Possession.OWN, resource, attributes)

    def read_any(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "read:any" on the resource(s)."""
        return self._prepare_and_commit('read', Possession.ANY, resource, attributes)

    read = read_any

    def update_own(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "update:own" on the resource(s)."""
        return self._prepare_and_commit('update', Possession.OWN, resource, attributes)

    def update_any(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "update:any" on the resource(s)."""
        return self._prepare_and_commit('update', Possession.ANY, resource, attributes)

    update = update_any

    def delete_own(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "delete:own" on the resource(s)."""
        return self._prepare_and_commit('delete', Possession.OWN, resource, attributes)

    def delete_any(self, resource: Optional[Names] = None, attributes: Optional[Names] = None) -> 'Access':
        """Commit "delete:any" on the resource(s)."""
        return self._prepare_and_commit('delete', Possession.ANY, resource, attributes)

    delete = delete_any

    def do(self, action: str, attributes: Optional[Names] = None) -> 'Access':
        """
        Commit a compound "resource:action[:possession]" string,
        e.g. "video:update:own".
        """
        segments = action.split(':') if isinstance(action, str) else []
        if len(segments) < 2:
            raise AccessControlError(f"Invalid action: {action!r}", INVALID_ACTION)
        info = normalize_action_possession(
            AccessInfo(action=segments[1], possession=segments[2] if len(segments) > 2 else None)
        )
        return self._prepare_and_commit(info.action, info.possession, segments[0], attributes)

    def _prepare_and_commit(self, action: str, possession: str,
                            resource: Optional[Names] = None,
                            attributes: Optional[Names] = None) -> 'Access':
        self._.action = action
        self._.possession = str(possession)
        if resource:
            self._.resource = resource

        if self._.denied:
            self._.attributes = []
        elif attributes is not None:
            self._.attributes = attributes
        elif self._.attributes is None:
            self._.attributes = ['*']

        try:
            self._store.commit(self._, False)
        finally:
            # the next action on this chain starts from the defaults again
            self._.attributes = None
        return self
