"""Authentication: credentials, the request principal and the role gate.

Dependencies and routes are imported from their own modules to keep this
package importable from the permission layer.
"""

from workforce.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from workforce.core.auth.principal import Principal, Role
from workforce.core.auth.roles import check_roles, parse_roles
from workforce.core.auth.schemas import TokenData


__all__ = [
    "Principal",
    "Role",
    "TokenData",
    "check_roles",
    "create_access_token",
    "decode_token",
    "hash_password",
    "parse_roles",
    "verify_password",
]
