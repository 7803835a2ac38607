import pytest

from votekeeper.clock import ManualClock
from votekeeper.governance import VotingSystem

OWNER = "0x" + "0A" * 20
ALICE = "0x" + "A1" * 20
BOB = "0x" + "B2" * 20
CAROL = "0x" + "C3" * 20

HOUR = 3600


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def system(clock):
    """Fresh system owned by OWNER."""
    return VotingSystem(OWNER, clock)


@pytest.fixture
def open_proposal(system):
    """ALICE and BOB registered, proposal #0 open for one hour."""
    system.register_voter(OWNER, ALICE)
    system.register_voter(OWNER, BOB)
    pid = system.create_proposal(OWNER, "Title", "Desc", HOUR)
    assert pid == 0
    return pid
