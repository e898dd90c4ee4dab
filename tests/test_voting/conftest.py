"""Shared fixtures for voting system tests."""

import pytest
from tests.conftest import (
    IR_CANDIDATES,
    MPO_CANDIDATES,
    OPL_CANDIDATES,
    make_election,
    mark,
)


@pytest.fixture
def ir_first_round_majority():
    """Rosen has 4 of 6 first choices.

    Columns: Rosen, Kleinberg, Chou, Royce
    """
    return make_election("IR", IR_CANDIDATES, [
        "1,3,4,2",
        "1,,2,",
        "1,2,,",
        "1,,,",
        "2,1,,",
        ",,1,2",
    ])


@pytest.fixture
def ir_zero_vote_and_exhaustion():
    """No first-round majority; Kleinberg has no votes.

    First round: Rosen 3, Kleinberg 0, Chou 2, Royce 1 (6 ballots).
    Round 1 eliminates Kleinberg (0 votes) and Royce (lowest). Royce's only
    ballot ranks nobody else, so it is exhausted, and Rosen wins 3 of 5.
    """
    return make_election("IR", IR_CANDIDATES, [
        "1,,,",
        "1,,2,",
        "1,,,",
        ",,1,",
        "2,,1,",
        ",,,1",
    ])


@pytest.fixture
def ir_transfer_to_majority():
    """Royce's ballot moves to Rosen, giving Rosen 3 of 5.

    First round: Rosen 2, Kleinberg 0, Chou 2, Royce 1.
    """
    return make_election("IR", IR_CANDIDATES, [
        "1,,,",
        "1,,2,",
        ",,1,",
        ",,1,2",
        "2,,,1",
    ])


@pytest.fixture
def ir_lowest_ties():
    """Two rounds, each with a tie for the lowest count.

    Columns: A, B, C, D
    First round: A 3, B 2, C 1, D 1 (7 ballots).
    Round 1: C and D tie for lowest. Round 2: B and C tie at 2.
    """
    return make_election("IR", "A (X), B (Y), C (Z), D (W)", [
        "1,,,",
        "1,,,",
        "1,,,",
        "2,1,,",
        "2,1,,",
        ",,1,2",
        ",,2,1",
    ])


@pytest.fixture
def opl_all_votes_one_party():
    """Every ballot goes to a party D candidate: Pike 4, Foster 5. 3 seats."""
    ballots = [mark(0, 6)] * 4 + [mark(1, 6)] * 5
    return make_election("OPL", OPL_CANDIDATES, ballots, num_seats=3)


@pytest.fixture
def opl_remainders():
    """No party reaches the quota of 5 (9 ballots, 2 seats).

    Pike 3, Foster 1 (D = 4); Deutsch 2, Borg 1 (R = 3); Smith 2 (I = 2).
    """
    ballots = (
        [mark(0, 6)] * 3 + [mark(1, 6)]
        + [mark(2, 6)] * 2 + [mark(3, 6)]
        + [mark(5, 6)] * 2
    )
    return make_election("OPL", OPL_CANDIDATES, ballots, num_seats=2)


@pytest.fixture
def mpo_one_winner():
    """Pike 3, Foster 1, Smith 1; one seat."""
    ballots = [mark(0, 6)] * 3 + [mark(1, 6), mark(5, 6)]
    return make_election("MPO", MPO_CANDIDATES, ballots, num_seats=1)


@pytest.fixture
def mpo_tie_group():
    """A 3, B 2, C 2, D 1; two seats."""
    ballots = [mark(0, 4)] * 3 + [mark(1, 4)] * 2 + [mark(2, 4)] * 2 + [mark(3, 4)]
    return make_election("MPO", "[A, X], [B, Y], [C, Z], [D, W]", ballots, num_seats=2)
