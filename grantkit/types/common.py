"""
Common types shared across grantkit packages.
Provides the action/possession enums, the access and query records, and the
reserved names of the grants model.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Action(str, Enum):
    """CRUD actions a subject can perform on a resource."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


class Possession(str, Enum):
    """Whether an action targets the subject's own resource or any resource."""
    OWN = "own"
    ANY = "any"

    def __str__(self) -> str:
        return self.value


ACTIONS = tuple(a.value for a in Action)
POSSESSIONS = tuple(p.value for p in Possession)

# Key under a subject entry holding the list of extended (inherited) subjects.
EXTEND_KEY = "$extend"

# Subjects and resources may not use these names.
RESERVED_KEYWORDS = ("*", "!", "$", EXTEND_KEY)

ERR_LOCK = "Cannot alter the underlying grants model. AccessControl instance is locked."

Names = Union[str, List[str]]


@dataclass
class AccessInfo:
    """
    Access record to be granted or denied.

    `subject` and `resource` accept a single name, a list of names or a
    comma/semicolon delimited string. `action` may carry the possession
    as in "create:own".
    """
    subject: Optional[Names] = None
    resource: Optional[Names] = None
    action: Optional[str] = None
    possession: Optional[str] = None
    attributes: Optional[Names] = None
    denied: bool = False

    def is_fulfilled(self) -> bool:
        """Whether the record has enough information to be committed."""
        return (self.subject is not None
                and self.action is not None
                and self.resource is not None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'subject': self.subject,
            'resource': self.resource,
            'action': self.action,
            'possession': self.possession,
            'attributes': self.attributes,
            'denied': self.denied
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccessInfo':
        """Create from dictionary representation."""
        return cls(
            subject=data.get('subject'),
            resource=data.get('resource'),
            action=data.get('action'),
            possession=data.get('possession'),
            attributes=data.get('attributes'),
            denied=bool(data.get('denied', False))
        )


@dataclass
class QueryInfo:
    """Query record describing the access to be checked."""
    subject: Optional[Names] = None
    resource: Optional[str] = None
    action: Optional[str] = None
    possession: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'subject': self.subject,
            'resource': self.resource,
            'action': self.action,
            'possession': self.possession
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueryInfo':
        """Create from dictionary representation."""
        return cls(
            subject=data.get('subject'),
            resource=data.get('resource'),
            action=data.get('action'),
            possession=data.get('possession')
        )
