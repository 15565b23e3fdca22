"""HTTP Basic auth gate that checks only the password against a configured SHA-256 digest."""

import hashlib
import hmac
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from dex_admin.services.admin.errors import UnauthorizedError

logger = logging.getLogger(__name__)

AUTH_REALM = "dex admin"

basic_auth = HTTPBasic(auto_error=False, realm=AUTH_REALM)


class AuthGate:
    """Holds the admin secret digest for the lifetime of the server."""

    def __init__(self, digest: bytes | None) -> None:
        self._digest = digest

    @property
    def configured(self) -> bool:
        return self._digest is not None

    def authorize(self, secret: str | None) -> bool:
        """Return True iff a non-empty secret hashes to the configured digest."""

        if not secret or self._digest is None:
            return False
        provided = hashlib.sha256(secret.encode("utf-8")).digest()
        return hmac.compare_digest(provided, self._digest)


def require_admin(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
) -> None:
    """FastAPI dependency rejecting requests without the admin password; the username is ignored."""

    gate: AuthGate = request.app.state.auth_gate
    secret = credentials.password if credentials is not None else None
    if gate.authorize(secret):
        return

    logger.warning(
        "admin_auth_denied",
        extra={"path": request.url.path, "client": request.client.host if request.client else None},
    )
    raise UnauthorizedError(AUTH_REALM)
