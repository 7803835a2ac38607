"""
votekeeper: permissioned proposal and ballot tracker

Core imports are lazily loaded so that importing a submodule (for example
``votekeeper.constants``) does not configure logging as a side effect.
For direct module access, import from submodules:

    from votekeeper.governance import VotingSystem
    from votekeeper.clock import ManualClock
    from votekeeper.exceptions import DuplicateVoteError
"""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy module loading."""
    if name == 'VotingSystem':
        from .governance import VotingSystem
        return VotingSystem
    elif name == 'ProposalStatus':
        from .governance import ProposalStatus
        return ProposalStatus
    elif name == 'load_config':
        from .config import load_config
        return load_config
    raise AttributeError(f"module 'votekeeper' has no attribute {name!r}")

__all__ = ['VotingSystem', 'ProposalStatus', 'load_config']
