"""
Proposals and the proposal store.

A proposal is a time-bounded yes/no question. It is created ACTIVE, accepts
one ballot per registered voter until its deadline, and is finalized by the
administrator exactly once after the deadline, ending PASSED or REJECTED.
"""

import math
from dataclasses import dataclass, field
from enum import IntEnum
from numbers import Real
from typing import Any, Dict, List

from ..constants import DEFAULT_MAX_PROPOSAL_DURATION, DEFAULT_MIN_PROPOSAL_DURATION
from ..exceptions import (
    AlreadyFinalizedError,
    DuplicateVoteError,
    InvalidArgumentError,
    ProposalLifecycleError,
    ProposalNotFoundError,
    TooEarlyError,
    UnauthorizedError,
    VotingClosedError,
)
from ..logger import get_logger
from .access import AccessControl
from .events import EventBus, ProposalCreated, ProposalEnded, Voted
from .registry import VoterRegistry

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class ProposalStatus(IntEnum):
    """Lifecycle stage of a proposal."""
    ACTIVE = 0      # Open; accepts ballots until the deadline
    PASSED = 1      # Finalized with more yes than no
    REJECTED = 2    # Finalized otherwise (ties and empty tallies included)


_VALID_TRANSITIONS: Dict[ProposalStatus, set] = {
    ProposalStatus.ACTIVE:   {ProposalStatus.PASSED, ProposalStatus.REJECTED},
    # Terminal states, no further transitions
    ProposalStatus.PASSED:   set(),
    ProposalStatus.REJECTED: set(),
}


# ══════════════════════════════════════════════════════════════════════
#  SNAPSHOTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VoteCounts:
    """Tally of a proposal at the time it was read."""
    yes: int = 0
    no: int = 0

    @property
    def total(self) -> int:
        return self.yes + self.no

    def to_dict(self) -> Dict[str, int]:
        return {"yes": self.yes, "no": self.no}


@dataclass(frozen=True)
class ProposalSnapshot:
    """Read-only copy of a stored proposal."""
    id: int
    title: str
    description: str
    created_at: float
    deadline: float
    yes_votes: int
    no_votes: int
    status: ProposalStatus

    @property
    def is_terminal(self) -> bool:
        return self.status != ProposalStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdAt": self.created_at,
            "deadline": self.deadline,
            "yesVotes": self.yes_votes,
            "noVotes": self.no_votes,
            "status": self.status.name,
        }


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL
# ══════════════════════════════════════════════════════════════════════

@dataclass
class Proposal:
    """
    Stored proposal record, owned by ProposalStore.

    Fields:
        id:           Sequential identifier, starting at 0
        title:        Short title
        description:  Free text
        created_at:   Clock reading at creation
        deadline:     created_at + requested duration; ballots are refused from here on
        yes_votes:    Ballots cast for
        no_votes:     Ballots cast against
        status:       ACTIVE, then PASSED or REJECTED
    """
    id: int
    title: str
    description: str
    created_at: float
    deadline: float
    yes_votes: int = 0
    no_votes: int = 0
    status: ProposalStatus = ProposalStatus.ACTIVE
    _ballots: Dict[str, bool] = field(default_factory=dict, repr=False)
    _history: List[Dict[str, Any]] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self._record_transition(ProposalStatus.ACTIVE, "created", self.created_at)

    # ── Properties ────────────────────────────────────────────────────

    @property
    def is_terminal(self) -> bool:
        return self.status != ProposalStatus.ACTIVE

    @property
    def history(self) -> List[Dict[str, Any]]:
        return list(self._history)

    @property
    def ballot_count(self) -> int:
        return len(self._ballots)

    def is_open(self, now: float) -> bool:
        """Ballots are accepted strictly before the deadline."""
        return now < self.deadline

    def has_ballot(self, voter: str) -> bool:
        return voter in self._ballots

    # ── Mutation ──────────────────────────────────────────────────────

    def record_ballot(self, voter: str, choice: bool):
        self._ballots[voter] = choice
        if choice:
            self.yes_votes += 1
        else:
            self.no_votes += 1

    def outcome(self) -> ProposalStatus:
        """Strict majority of yes passes; everything else rejects."""
        if self.yes_votes > self.no_votes:
            return ProposalStatus.PASSED
        return ProposalStatus.REJECTED

    def _record_transition(self, new_status: ProposalStatus, reason: str, timestamp: float):
        self._history.append({
            "from": self.status.name if self._history else "INIT",
            "to": new_status.name,
            "reason": reason,
            "timestamp": timestamp,
        })

    def transition_to(self, new_status: ProposalStatus, timestamp: float, reason: str = ""):
        """
        Advance proposal to *new_status*.

        Raises ProposalLifecycleError on invalid transitions.
        """
        allowed = _VALID_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise ProposalLifecycleError(
                f"Cannot transition from {self.status.name} → {new_status.name}. "
                f"Allowed: {[s.name for s in allowed]}"
            )
        old = self.status
        self._record_transition(new_status, reason, timestamp)
        self.status = new_status
        logger.info(
            f"Proposal #{self.id} ({self.title}): "
            f"{old.name} → {new_status.name} | {reason}"
        )

    # ── Serialization ─────────────────────────────────────────────────

    def snapshot(self) -> ProposalSnapshot:
        return ProposalSnapshot(
            id=self.id,
            title=self.title,
            description=self.description,
            created_at=self.created_at,
            deadline=self.deadline,
            yes_votes=self.yes_votes,
            no_votes=self.no_votes,
            status=self.status,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.snapshot().to_dict()
        data["ballotCount"] = self.ballot_count
        data["historyLength"] = len(self._history)
        return data

    def __repr__(self) -> str:
        return (
            f"<Proposal #{self.id} '{self.title}' "
            f"yes={self.yes_votes} no={self.no_votes} status={self.status.name}>"
        )


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL STORE
# ══════════════════════════════════════════════════════════════════════

class ProposalStore:
    """
    Ordered collection of proposals, indexed by their sequential id.

    Responsibilities:
        - Allocate dense ids from 0
        - Enforce the voting window and one ballot per voter
        - Finalize exactly once after the deadline
    """

    def __init__(
        self,
        access: AccessControl,
        registry: VoterRegistry,
        bus: EventBus,
        min_duration: float = DEFAULT_MIN_PROPOSAL_DURATION,
        max_duration: float = DEFAULT_MAX_PROPOSAL_DURATION,
    ):
        self._access = access
        self._registry = registry
        self._bus = bus
        self.min_duration = min_duration
        self.max_duration = max_duration
        self._proposals: List[Proposal] = []

    # ── Lookup ────────────────────────────────────────────────────────

    @property
    def count(self) -> int:
        return len(self._proposals)

    def _get(self, proposal_id: int) -> Proposal:
        if (
            isinstance(proposal_id, bool)
            or not isinstance(proposal_id, int)
            or not 0 <= proposal_id < len(self._proposals)
        ):
            raise ProposalNotFoundError(f"Invalid proposal ID: {proposal_id!r}")
        return self._proposals[proposal_id]

    def get(self, proposal_id: int) -> ProposalSnapshot:
        return self._get(proposal_id).snapshot()

    def vote_counts(self, proposal_id: int) -> VoteCounts:
        proposal = self._get(proposal_id)
        return VoteCounts(yes=proposal.yes_votes, no=proposal.no_votes)

    def has_voted(self, proposal_id: int, voter: str) -> bool:
        try:
            proposal = self._get(proposal_id)
        except ProposalNotFoundError:
            return False
        if not isinstance(voter, str):
            return False
        return proposal.has_ballot(voter)

    def history(self, proposal_id: int) -> List[Dict[str, Any]]:
        return self._get(proposal_id).history

    def snapshots(self) -> List[ProposalSnapshot]:
        return [p.snapshot() for p in self._proposals]

    # ── Create ────────────────────────────────────────────────────────

    def _validate_duration(self, duration_seconds) -> float:
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, Real):
            raise InvalidArgumentError(
                f"Duration must be a number of seconds, got {type(duration_seconds).__name__}"
            )
        if not math.isfinite(duration_seconds):
            raise InvalidArgumentError(f"Duration must be finite, got {duration_seconds}")
        if duration_seconds <= 0 or duration_seconds < self.min_duration:
            raise InvalidArgumentError(
                f"Duration {duration_seconds}s < minimum {self.min_duration}s"
            )
        if self.max_duration and duration_seconds > self.max_duration:
            raise InvalidArgumentError(
                f"Duration {duration_seconds}s > maximum {self.max_duration}s"
            )
        return duration_seconds

    def create(
        self,
        caller: str,
        title: str,
        description: str,
        duration_seconds: float,
        now: float,
    ) -> int:
        self._access.require_admin(caller)
        try:
            duration = self._validate_duration(duration_seconds)
        except InvalidArgumentError as e:
            logger.warning(f"Rejected proposal '{title}': {e}")
            raise

        pid = len(self._proposals)
        proposal = Proposal(
            id=pid,
            title=title,
            description=description,
            created_at=now,
            deadline=now + duration,
        )
        self._proposals.append(proposal)
        logger.info(
            f"Proposal #{pid} created: '{title}' (deadline={proposal.deadline:.0f})"
        )
        self._bus.publish(ProposalCreated(
            proposal_id=pid,
            title=title,
            description=description,
            timestamp=now,
        ))
        return pid

    # ── Vote ──────────────────────────────────────────────────────────

    def vote(self, caller: str, proposal_id: int, choice: bool, now: float) -> Voted:
        """
        Record *caller*'s ballot on a proposal.

        Only the deadline decides whether voting is open. A proposal past
        its deadline refuses ballots even while its status is still ACTIVE.
        """
        proposal = self._get(proposal_id)

        if not self._registry.is_registered(caller):
            logger.warning(f"Rejected ballot on proposal #{proposal_id} from unregistered {caller}")
            raise UnauthorizedError(f"Not a registered voter: {caller}")

        if not proposal.is_open(now):
            logger.warning(f"Rejected ballot on proposal #{proposal_id} from {caller}: voting closed")
            raise VotingClosedError(
                f"Voting period has ended for proposal #{proposal_id}"
            )

        if proposal.has_ballot(caller):
            logger.warning(f"Rejected repeat ballot on proposal #{proposal_id} from {caller}")
            raise DuplicateVoteError(
                f"Already voted on this proposal: {caller} on #{proposal_id}"
            )

        choice = bool(choice)
        proposal.record_ballot(caller, choice)
        event = Voted(
            proposal_id=proposal_id,
            voter=caller,
            choice=choice,
            timestamp=now,
        )
        logger.info(
            f"Vote: {caller} → {'YES' if choice else 'NO'} on proposal #{proposal_id}"
        )
        self._bus.publish(event)
        return event

    # ── Finalize ──────────────────────────────────────────────────────

    def finalize(self, caller: str, proposal_id: int, now: float) -> ProposalStatus:
        """
        Fix the outcome of a proposal whose deadline has passed.

        Returns the resulting status.
        """
        self._access.require_admin(caller)
        proposal = self._get(proposal_id)

        if proposal.is_open(now):
            logger.warning(f"Rejected early finalization of proposal #{proposal_id}")
            raise TooEarlyError(
                f"Voting period has not ended yet for proposal #{proposal_id} "
                f"({proposal.deadline - now:.0f}s remaining)"
            )

        if proposal.is_terminal:
            logger.warning(f"Rejected repeat finalization of proposal #{proposal_id}")
            raise AlreadyFinalizedError(
                f"Proposal is not active: #{proposal_id} is {proposal.status.name}"
            )

        outcome = proposal.outcome()
        proposal.transition_to(
            outcome,
            now,
            f"yes={proposal.yes_votes} no={proposal.no_votes}",
        )
        self._bus.publish(ProposalEnded(
            proposal_id=proposal_id,
            status=outcome,
            timestamp=now,
        ))
        return outcome

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalCount": len(self._proposals),
            "minDuration": self.min_duration,
            "maxDuration": self.max_duration,
            "proposals": [p.to_dict() for p in self._proposals],
        }

    def __repr__(self) -> str:
        return f"<ProposalStore proposals={len(self._proposals)}>"
