#  Mission Control - Token Authenticator
#
#  Single shared bearer credential. There are no users, roles or token
#  issuance: a request either presents the configured secret or it does not.
#
#  Depends on: config.py
#  Used by:    container.py, middleware/auth.py

import logging
import secrets

from mission_control.config import AUTH_TOKEN

logger = logging.getLogger("mission_control.auth")


class TokenAuthenticator:
    """Compares presented credentials to the configured token in constant time."""

    def __init__(self, token: str | None = None):
        self._token = token if token is not None else AUTH_TOKEN

    @property
    def configured(self) -> bool:
        return bool(self._token)

    def verify(self, credential: str | None) -> bool:
        # An unconfigured token never authenticates anything
        if not self._token or not credential:
            return False
        ok = secrets.compare_digest(credential.encode(), self._token.encode())
        if not ok:
            logger.debug("Rejected bearer credential")
        return ok
