"""
Voter registry.

Maps voter identity to registration status. Registration is admin-only,
rejects duplicates and is never reversed.
"""

from typing import Dict, List

from ..exceptions import AlreadyRegisteredError, InvalidArgumentError
from ..logger import get_logger
from .access import AccessControl, is_null_identity
from .events import EventBus, VoterRegistered

logger = get_logger(__name__)


class VoterRegistry:
    """Set of identities eligible to vote."""

    def __init__(self, access: AccessControl, bus: EventBus):
        self._access = access
        self._bus = bus
        self._voters: Dict[str, bool] = {}

    def register(self, caller: str, voter: str, now: float) -> VoterRegistered:
        self._access.require_admin(caller)
        if not isinstance(voter, str) or is_null_identity(voter):
            logger.warning(f"Rejected registration of invalid identity {voter!r}")
            raise InvalidArgumentError(f"Invalid voter identity: {voter!r}")
        if self._voters.get(voter):
            logger.warning(f"Rejected duplicate registration of {voter}")
            raise AlreadyRegisteredError(f"Voter already registered: {voter}")

        self._voters[voter] = True
        event = VoterRegistered(
            voter=voter,
            timestamp=now,
        )
        logger.info(f"Voter registered: {voter}")
        self._bus.publish(event)
        return event

    def is_registered(self, voter: str) -> bool:
        if not isinstance(voter, str):
            return False
        return self._voters.get(voter, False)

    @property
    def count(self) -> int:
        return len(self._voters)

    def voters(self) -> List[str]:
        """Registered identities in registration order."""
        return list(self._voters)

    def __contains__(self, voter: str) -> bool:
        return self.is_registered(voter)

    def __repr__(self) -> str:
        return f"<VoterRegistry voters={len(self._voters)}>"
