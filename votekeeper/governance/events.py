"""
Governance Notifications

Immutable event records published after every successful state change, and
the EventBus output port that delivers them. Observers subscribe with a
plain callable; the bus also keeps an append-only log for inspection.
"""

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List

from ..logger import get_logger

if TYPE_CHECKING:
    from .proposals import ProposalStatus

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VoterRegistered:
    """Emitted when the administrator registers a voter."""
    voter: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "VoterRegistered",
            "voter": self.voter,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalCreated:
    """Emitted when a proposal opens for voting."""
    proposal_id: int
    title: str
    description: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalCreated",
            "proposalId": self.proposal_id,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Voted:
    """Emitted on every accepted ballot."""
    proposal_id: int
    voter: str
    choice: bool
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Voted",
            "proposalId": self.proposal_id,
            "voter": self.voter,
            "choice": self.choice,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalEnded:
    """Emitted when a proposal is finalized, carrying its outcome."""
    proposal_id: int
    status: "ProposalStatus"
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalEnded",
            "proposalId": self.proposal_id,
            "status": self.status.name,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class OwnershipTransferred:
    """Emitted when the administrator role changes hands."""
    previous_owner: str
    new_owner: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "OwnershipTransferred",
            "previousOwner": self.previous_owner,
            "newOwner": self.new_owner,
            "timestamp": self.timestamp,
        }


# ══════════════════════════════════════════════════════════════════════
#  OUTPUT PORT
# ══════════════════════════════════════════════════════════════════════

Listener = Callable[[Any], None]


class EventBus:
    """
    Delivers governance events to subscribed listeners.

    Publishing happens after the state change has been committed, so a
    failing listener cannot undo it. Listener errors are logged with their
    traceback and the remaining listeners still run.
    """

    def __init__(self, keep_log: bool = True):
        self._keep_log = keep_log
        self._events: List[Any] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Listener:
        """Attach *listener*. Returns it so this can be used as a decorator."""
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, event: Any):
        if self._keep_log:
            self._events.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    f"Listener {listener!r} failed on {type(event).__name__}"
                )

    @property
    def events(self) -> List[Any]:
        return list(self._events)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"<EventBus events={len(self._events)} listeners={len(self._listeners)}>"
