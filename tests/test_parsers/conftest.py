"""Shared fixtures for parser tests."""

import pytest
from tests.conftest import (
    IR_CANDIDATES,
    MPO_CANDIDATES,
    OPL_CANDIDATES,
    election_file,
    mark,
)


@pytest.fixture
def ir_csv():
    return election_file("IR", IR_CANDIDATES, ["1,3,4,2", "1,,,2", ",1,,", "2,1,,"])


@pytest.fixture
def opl_csv():
    return election_file("OPL", OPL_CANDIDATES, [mark(0, 6), mark(3, 6), mark(5, 6)], num_seats=2)


@pytest.fixture
def mpo_csv():
    return election_file("MPO", MPO_CANDIDATES, [mark(1, 6), mark(1, 6)], num_seats=3)
