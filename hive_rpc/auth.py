"""
JWT authentication for the Engine API.

Every authenticated request carries a freshly minted HS256 token whose claim set
contains the issued-at timestamp. Tokens are cheap to mint, so they are never cached.
"""

import time
from datetime import datetime
from typing import Any, Dict

import jwt

from .exceptions import TokenSigningError

DEFAULT_JWT_SECRET = b"secretsecretsecretsecretsecretse"
"""The secret provisioned to every client started by hive."""

JWT_ALGORITHM = "HS256"


def _unix_timestamp(iat: datetime | int | float) -> int:
    if isinstance(iat, datetime):
        return int(iat.timestamp())
    return int(iat)


def get_new_token(jwt_secret: bytes, iat: datetime | int | float) -> str:
    """Mint a signed token for `jwt_secret` issued at `iat`."""
    if not jwt_secret:
        raise TokenSigningError("cannot sign authentication token with an empty secret")
    try:
        return jwt.encode({"iat": _unix_timestamp(iat)}, jwt_secret, algorithm=JWT_ALGORITHM)
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise TokenSigningError(f"unable to sign authentication token: {e}") from e


def decode_token(token: str, jwt_secret: bytes, *, leeway: float = 0) -> Dict[str, Any]:
    """Validate `token` against `jwt_secret` and return its claims."""
    return jwt.decode(
        token,
        jwt_secret,
        algorithms=[JWT_ALGORITHM],
        options={"require": ["iat"], "verify_iat": False},
        leeway=leeway,
    )


class JWTAuth:
    """Authentication provider bound to the shared secret of a single client."""

    def __init__(self, jwt_secret: bytes = DEFAULT_JWT_SECRET):
        """Initialize the provider with the shared secret."""
        self.jwt_secret = jwt_secret

    def prepare_auth_headers(self, iat: datetime | int | float | None = None) -> Dict[str, str]:
        """Return the `Authorization` header for a call issued now (or at `iat`)."""
        if iat is None:
            iat = time.time()
        token = get_new_token(self.jwt_secret, iat)
        return {"Authorization": f"Bearer {token}"}
