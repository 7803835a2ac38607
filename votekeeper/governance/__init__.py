"""
votekeeper governance core

Provides:
  - AccessControl                                  (access.py)
  - VoterRegistry                                  (registry.py)
  - Proposal / ProposalStatus / ProposalStore      (proposals.py)
  - Event records and the EventBus output port     (events.py)
  - VotingSystem composition root                  (system.py)
"""

from .access import AccessControl, is_null_identity
from .events import (
    EventBus,
    OwnershipTransferred,
    ProposalCreated,
    ProposalEnded,
    Voted,
    VoterRegistered,
)
from .proposals import (
    Proposal,
    ProposalSnapshot,
    ProposalStatus,
    ProposalStore,
    VoteCounts,
)
from .registry import VoterRegistry
from .system import VotingSystem

__all__ = [
    # Access
    "AccessControl",
    "is_null_identity",
    # Events
    "EventBus",
    "OwnershipTransferred",
    "ProposalCreated",
    "ProposalEnded",
    "Voted",
    "VoterRegistered",
    # Proposals
    "Proposal",
    "ProposalSnapshot",
    "ProposalStatus",
    "ProposalStore",
    "VoteCounts",
    # Registry
    "VoterRegistry",
    # Composition root
    "VotingSystem",
]
