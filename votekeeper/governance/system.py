"""
VotingSystem: composition root.

Wires AccessControl, VoterRegistry and ProposalStore around one EventBus and
one Clock, and exposes the public operation set. A single re-entrant lock
serializes every operation, so mutations are atomic and reads never observe
a partial update. The clock is read once per operation.
"""

import threading
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..clock import Clock, SystemClock
from ..constants import DEFAULT_MAX_PROPOSAL_DURATION, DEFAULT_MIN_PROPOSAL_DURATION
from ..logger import get_logger
from .access import AccessControl
from .events import EventBus, Listener, OwnershipTransferred
from .proposals import ProposalSnapshot, ProposalStatus, ProposalStore, VoteCounts
from .registry import VoterRegistry

if TYPE_CHECKING:
    from ..config import VoteKeeperConfig

logger = get_logger(__name__)


class VotingSystem:
    """
    Permissioned proposal-and-ballot tracker.

    Every caller identity is passed explicitly; there is no ambient
    "current sender".
    """

    def __init__(
        self,
        admin: str,
        clock: Optional[Clock] = None,
        *,
        min_duration: float = DEFAULT_MIN_PROPOSAL_DURATION,
        max_duration: float = DEFAULT_MAX_PROPOSAL_DURATION,
        keep_event_log: bool = True,
    ):
        """
        Args:
            admin: Initial administrator identity
            clock: Time source (defaults to wall-clock time)
            min_duration: Shortest accepted voting window in seconds
            max_duration: Longest accepted voting window in seconds (0 = unbounded)
            keep_event_log: Retain published events in memory
        """
        self._lock = threading.RLock()
        self._clock = clock or SystemClock()
        self._bus = EventBus(keep_log=keep_event_log)
        self._access = AccessControl(admin)
        self._registry = VoterRegistry(self._access, self._bus)
        self._proposals = ProposalStore(
            self._access,
            self._registry,
            self._bus,
            min_duration=min_duration,
            max_duration=max_duration,
        )
        logger.info(f"Voting system initialized (owner={admin})")

    @classmethod
    def from_config(
        cls,
        config: "VoteKeeperConfig",
        admin: str,
        clock: Optional[Clock] = None,
    ) -> "VotingSystem":
        return cls(
            admin,
            clock,
            min_duration=config.voting.min_proposal_duration,
            max_duration=config.voting.max_proposal_duration,
            keep_event_log=config.voting.keep_event_log,
        )

    # ── Output port ───────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Listener:
        with self._lock:
            return self._bus.subscribe(listener)

    def unsubscribe(self, listener: Listener):
        with self._lock:
            self._bus.unsubscribe(listener)

    @property
    def events(self) -> List[Any]:
        with self._lock:
            return self._bus.events

    # ── Ownership ─────────────────────────────────────────────────────

    def owner(self) -> str:
        with self._lock:
            return self._access.administrator

    def transfer_ownership(self, caller: str, new_admin: str):
        with self._lock:
            now = self._clock.now()
            previous = self._access.transfer(caller, new_admin)
            self._bus.publish(OwnershipTransferred(
                previous_owner=previous,
                new_owner=new_admin,
                timestamp=now,
            ))

    # ── Registration ──────────────────────────────────────────────────

    def register_voter(self, caller: str, voter: str):
        with self._lock:
            self._registry.register(caller, voter, now=self._clock.now())

    def is_registered_voter(self, voter: str) -> bool:
        with self._lock:
            return self._registry.is_registered(voter)

    def voter_count(self) -> int:
        with self._lock:
            return self._registry.count

    # ── Proposals ─────────────────────────────────────────────────────

    def create_proposal(
        self,
        caller: str,
        title: str,
        description: str,
        duration_seconds: float,
    ) -> int:
        """Open a new proposal and return its id."""
        with self._lock:
            return self._proposals.create(
                caller, title, description, duration_seconds, now=self._clock.now()
            )

    def get_proposal(self, proposal_id: int) -> ProposalSnapshot:
        with self._lock:
            return self._proposals.get(proposal_id)

    def proposal_count(self) -> int:
        with self._lock:
            return self._proposals.count

    def proposal_history(self, proposal_id: int) -> List[Dict[str, Any]]:
        with self._lock:
            return self._proposals.history(proposal_id)

    # ── Voting ────────────────────────────────────────────────────────

    def vote(self, caller: str, proposal_id: int, choice: bool):
        with self._lock:
            self._proposals.vote(caller, proposal_id, choice, now=self._clock.now())

    def has_voted(self, proposal_id: int, voter: str) -> bool:
        with self._lock:
            return self._proposals.has_voted(proposal_id, voter)

    def get_vote_counts(self, proposal_id: int) -> VoteCounts:
        with self._lock:
            return self._proposals.vote_counts(proposal_id)

    def end_proposal(self, caller: str, proposal_id: int) -> ProposalStatus:
        """Finalize a proposal whose deadline has passed; returns its outcome."""
        with self._lock:
            return self._proposals.finalize(caller, proposal_id, now=self._clock.now())

    # ── Introspection ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "owner": self._access.administrator,
                "voterCount": self._registry.count,
                "eventCount": len(self._bus.events),
                **self._proposals.to_dict(),
            }

    def __repr__(self) -> str:
        return (
            f"<VotingSystem owner={self._access.administrator} "
            f"voters={self._registry.count} proposals={self._proposals.count}>"
        )
