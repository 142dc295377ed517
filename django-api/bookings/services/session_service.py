"""Role session - static credential check and the role it grants.

A RoleSession is bound explicitly to a storage mapping (a Django session in
the HTTP layer) and passed to whatever needs authorization. The role stays
until logout; there is no expiry.
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from django.conf import settings

from bookings.domain.errors import PermissionDeniedError
from bookings.domain.value_objects import Role

logger = logging.getLogger(__name__)

ROLE_KEY = "venue-role"


def configured_credentials() -> dict[str, tuple[str, Role]]:
    """Read ``VENUE_CREDENTIALS`` from settings as username -> (password, role)."""
    return {
        username.strip().lower(): (entry["password"], Role(entry["role"]))
        for username, entry in settings.VENUE_CREDENTIALS.items()
    }


class RoleSession:
    """Signed-in role for one client."""

    def __init__(
        self,
        storage: MutableMapping[str, Any],
        credentials: Mapping[str, tuple[str, Role]] | None = None,
    ) -> None:
        self._storage = storage
        self._credentials = configured_credentials() if credentials is None else credentials

    @property
    def role(self) -> Role:
        try:
            return Role(self._storage.get(ROLE_KEY, Role.NONE.value))
        except ValueError:
            return Role.NONE

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def login(self, username: str, password: str) -> bool:
        """Check the credentials; on success remember the granted role.

        The username is case-insensitive, both values are trimmed.
        """
        entry = self._credentials.get(username.strip().lower())
        if entry is None or entry[0] != password.strip():
            logger.info("Rejected login for %r", username.strip())
            return False
        self._storage[ROLE_KEY] = entry[1].value
        logger.info("Login as %s", entry[1].value)
        return True

    def logout(self) -> None:
        self._storage.pop(ROLE_KEY, None)

    def require(self, *roles: Role) -> None:
        """Raise PermissionDeniedError unless the session holds one of ``roles``."""
        if self.role is Role.NONE:
            raise PermissionDeniedError("Login required")
        if roles and self.role not in roles:
            raise PermissionDeniedError(f"Requires role: {', '.join(role.value for role in roles)}")
