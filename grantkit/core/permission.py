"""
Permission: the resolved outcome of an access query.
"""

from typing import Any, Dict, List, Tuple, Union

from ..grants.hierarchy import flatten_roles
from ..grants.normalize import normalize_query_info
from ..grants.store import GrantStore
from ..notation import filter_all, union
from ..types.common import Possession, QueryInfo


class Permission:
    """
    Granted or denied access of one or more subjects to a resource.

    When several subjects are queried, their attributes (and those of every
    subject they inherit from) are unioned: the permission is granted if at
    least one of them has it.
    """

    def __init__(self, store: GrantStore, query: Union[QueryInfo, dict]):
        query = normalize_query_info(query)
        self._subjects: Tuple[str, ...] = tuple(query.subject)
        self._resource: str = query.resource
        self._attributes: Tuple[str, ...] = tuple(
            self._union_attributes(store, query)
        )

    @staticmethod
    def _union_attributes(store: GrantStore, query: QueryInfo) -> List[str]:
        grants = store.grants
        key = f"{query.action}:{query.possession}"
        any_key = f"{query.action}:{Possession.ANY.value}"

        attrs_list = []
        for subject_name in flatten_roles(grants, query.subject):
            resource = grants[subject_name].get(query.resource)
            if resource is None:
                continue
            if key in resource:
                attrs_list.append(list(resource[key]))
            elif any_key in resource:
                # an "any" grant also satisfies an undefined "own"
                attrs_list.append(list(resource[any_key]))
            else:
                attrs_list.append([])

        if not attrs_list:
            return []
        attrs = attrs_list[0]
        for other in attrs_list[1:]:
            attrs = union(attrs, other)
        return attrs

    @property
    def subjects(self) -> List[str]:
        """The queried subjects (not including inherited ones)."""
        return list(self._subjects)

    @property
    def resource(self) -> str:
        """The queried resource."""
        return self._resource

    @property
    def attributes(self) -> List[str]:
        """Allowed attribute globs; empty when not granted."""
        return list(self._attributes)

    @property
    def granted(self) -> bool:
        """Whether at least one attribute of the resource is allowed."""
        return len(self._attributes) > 0

    def filter(self, data: Any) -> Any:
        """Filter a data object (or list of objects) by the allowed attributes."""
        return filter_all(data, self._attributes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'subjects': self.subjects,
            'resource': self.resource,
            'attributes': self.attributes,
            'granted': self.granted
        }

    def __repr__(self) -> str:
        return (f"Permission(subjects={self.subjects!r}, resource={self.resource!r}, "
                f"granted={self.granted!r}, attributes={self.attributes!r})")
