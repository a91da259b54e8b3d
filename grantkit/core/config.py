"""
Configuration module for grantkit.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..util.config import get_bool_config, get_config_value, load_config_file


@dataclass
class Config:
    """Where an AccessControl instance gets its grants from"""
    grants: Optional[Any] = None
    grants_file: Optional[str] = None
    lock: bool = False

    def validate(self) -> None:
        """Validate the configuration"""
        if self.grants is not None and self.grants_file:
            raise ValueError("Only one of grants or grants_file can be set")
        if self.grants_file is not None and not self.grants_file.strip():
            raise ValueError("grants_file cannot be empty")
        if self.lock and self.grants is None and not self.grants_file:
            raise ValueError("Cannot lock without a grants source")

    def load_grants(self) -> Optional[Any]:
        """Return the configured grants input, reading grants_file if set"""
        if self.grants_file:
            return load_config_file(self.grants_file)
        return self.grants

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables"""
        return cls(
            grants_file=get_config_value("grants_file"),
            lock=get_bool_config("lock", False),
        )
