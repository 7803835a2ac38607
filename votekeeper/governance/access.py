"""
Single-administrator access control.

One identity holds the administrator role at a time. It alone may register
voters, open proposals and finalize them, and it may hand the role to
exactly one other identity.
"""

from typing import Optional

from ..constants import ZERO_ADDRESS
from ..exceptions import InvalidArgumentError, UnauthorizedError
from ..logger import get_logger

logger = get_logger(__name__)


def is_null_identity(identity: Optional[str]) -> bool:
    """True for None, the empty string and the zero address."""
    if identity is None:
        return True
    if not isinstance(identity, str):
        return False
    return not identity.strip() or identity.lower() == ZERO_ADDRESS


class AccessControl:
    """Holds the administrator identity and gates admin-only calls."""

    def __init__(self, administrator: str):
        if is_null_identity(administrator):
            raise InvalidArgumentError("Administrator identity is required")
        self._administrator = administrator

    @property
    def administrator(self) -> str:
        return self._administrator

    def is_admin(self, caller: str) -> bool:
        return caller == self._administrator

    def require_admin(self, caller: str):
        if caller != self._administrator:
            logger.warning(f"Rejected admin-only call from {caller}")
            raise UnauthorizedError(f"Caller is not the owner: {caller}")

    def transfer(self, caller: str, new_admin: str) -> str:
        """
        Hand the administrator role to *new_admin*.

        Returns the previous administrator.
        """
        self.require_admin(caller)
        if is_null_identity(new_admin):
            logger.warning(f"Rejected ownership transfer to null identity {new_admin!r}")
            raise InvalidArgumentError(f"Invalid new owner: {new_admin!r}")
        previous = self._administrator
        self._administrator = new_admin
        logger.info(f"Ownership transferred: {previous} → {new_admin}")
        return previous

    def __repr__(self) -> str:
        return f"<AccessControl administrator={self._administrator}>"
