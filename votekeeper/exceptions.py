"""
votekeeper Exceptions

Custom exception classes for the proposal and ballot tracker.
"""


class VoteKeeperException(Exception):
    """Base exception for votekeeper."""
    pass


class ConfigurationError(VoteKeeperException):
    """Configuration error."""
    pass


class GovernanceError(VoteKeeperException):
    """Base class for rejected governance operations."""
    pass


class UnauthorizedError(GovernanceError):
    """Caller lacks the role the operation requires."""
    pass


class ProposalNotFoundError(GovernanceError):
    """Referenced proposal id is out of range."""
    pass


class AlreadyRegisteredError(GovernanceError):
    """Voter identity is already in the registry."""
    pass


class DuplicateVoteError(GovernanceError):
    """Voter already cast a ballot on this proposal."""
    pass


class VotingClosedError(GovernanceError):
    """The proposal's voting window has elapsed."""
    pass


class TooEarlyError(GovernanceError):
    """The proposal's voting window has not elapsed yet."""
    pass


class ProposalLifecycleError(GovernanceError):
    """Illegal proposal status transition."""
    pass


class AlreadyFinalizedError(ProposalLifecycleError):
    """Proposal already reached a terminal status."""
    pass


class InvalidArgumentError(GovernanceError, ValueError):
    """Malformed input, such as a null identity or a non-positive duration."""
    pass
