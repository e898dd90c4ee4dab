"""Tests for the Open Party List voting system."""

import pytest
from tests.conftest import (
    OPL_CANDIDATES,
    first_option_tiebreaker,
    make_election,
    mark,
)
from votecount.normalize import BallotFormatError
from votecount.voting.base import TabulationError
from votecount.voting.open_party_list import OpenPartyListSystem


class TestOpenPartyList:
    def setup_method(self):
        self.system = OpenPartyListSystem(first_option_tiebreaker())

    def test_name(self):
        assert self.system.name == "Open Party List"
        assert self.system.PROTOCOL == "OPL"

    def test_all_votes_to_one_party(self, opl_all_votes_one_party):
        result = self.system.tabulate(opl_all_votes_one_party)
        assert result.get_party("D").seats == 3
        assert result.rounds[0].method == "all_votes"
        assert result.winner == "Foster"
        assert result.details["winner_votes"] == 5
        assert result.details["winning_party"] == "D"
        assert result.details["quota"] == 3

    def test_parties_in_descriptor_order(self, opl_all_votes_one_party):
        result = self.system.tabulate(opl_all_votes_one_party)
        assert [p.name for p in result.parties] == ["D", "R", "I"]
        assert [c.name for c in result.get_party("R").candidates] == ["Deutsch", "Borg", "Jones"]

    def test_remainder_seats(self, opl_remainders):
        result = self.system.tabulate(opl_remainders)
        assert result.details["quota"] == 5
        assert [r.method for r in result.rounds] == ["quota", "remainder", "remainder"]
        assert result.rounds[0].seats_awarded == {"D": 0, "R": 0, "I": 0}
        assert result.rounds[1].seats_awarded == {"D": 1, "R": 0, "I": 0}
        assert result.rounds[2].seats_awarded == {"D": 0, "R": 1, "I": 0}

    def test_remainder_recipient_passed_over(self, opl_remainders):
        """D keeps the highest remainder but R gets the second remainder seat."""
        result = self.system.tabulate(opl_remainders)
        assert result.rounds[2].remaining_votes["D"] > result.rounds[2].remaining_votes["R"]
        assert {p.name: p.seats for p in result.parties} == {"D": 1, "R": 1, "I": 0}

    def test_party_tie_drawn(self, opl_remainders):
        result = self.system.tabulate(opl_remainders)
        assert [t.context for t in result.ties] == ["party"]
        assert result.ties[0].options == ["D", "R"]
        assert result.winner == "Pike"

    def test_initial_votes_kept_for_reporting(self, opl_remainders):
        result = self.system.tabulate(opl_remainders)
        assert {p.name: p.initial_votes for p in result.parties} == {"D": 4, "R": 3, "I": 2}

    def test_quota_seats(self):
        """quota = ceil(10 / 2) = 5: A's party gets one seat, B's party the other."""
        ballots = [mark(0, 2)] * 6 + [mark(1, 2)] * 4
        election = make_election("OPL", "A (X), B (Y)", ballots, num_seats=2)
        result = self.system.tabulate(election)
        assert result.rounds[0].seats_awarded == {"X": 1, "Y": 0}
        assert result.rounds[0].remaining_votes == {"X": 1, "Y": 4}
        assert result.rounds[1].seats_awarded == {"X": 0, "Y": 1}

    def test_exclusion_cleared_when_every_party_has_a_remainder_seat(self):
        """Five seats, two ballots: remainder seats cycle through both parties."""
        election = make_election("OPL", "A (X), B (Y)", [mark(0, 2), mark(1, 2)], num_seats=5)
        result = self.system.tabulate(election)
        assert [r.method for r in result.rounds] == [
            "quota", "remainder", "remainder", "remainder",
        ]
        assert {p.name: p.seats for p in result.parties} == {"X": 3, "Y": 2}
        assert [t.context for t in result.ties] == ["remainder", "remainder"]
        assert result.winner == "A"

    def test_seats_sum_to_seat_count(self, opl_remainders, opl_all_votes_one_party):
        for election in (opl_remainders, opl_all_votes_one_party):
            result = self.system.tabulate(election)
            assert sum(p.seats for p in result.parties) == election.num_seats

    def test_candidate_tie_in_winning_party(self):
        ballots = [mark(0, 3), mark(1, 3), mark(2, 3)]
        election = make_election("OPL", "A (X), B (X), C (Y)", ballots, num_seats=1)
        result = self.system.tabulate(election)
        assert result.details["winning_party"] == "X"
        assert result.ties[-1].context == "candidate"
        assert result.ties[-1].options == ["A", "B"]
        assert result.winner == "A"

    def test_no_seats(self):
        election = make_election("OPL", OPL_CANDIDATES, [mark(0, 6)], num_seats=0)
        with pytest.raises(TabulationError, match="at least one seat"):
            self.system.tabulate(election)

    def test_no_ballots(self):
        election = make_election("OPL", OPL_CANDIDATES, [], num_seats=2)
        with pytest.raises(TabulationError, match="no ballots"):
            self.system.tabulate(election)

    def test_declared_ballot_count_must_match(self):
        """A quota taken from 2 declared ballots would hand out 10 seats for 10 ballots."""
        ballots = [mark(0, 2)] * 6 + [mark(1, 2)] * 4
        election = make_election("OPL", "A (X), B (Y)", ballots, num_seats=2)
        election.num_ballots = 2
        with pytest.raises(TabulationError, match="declares 2 ballots but carries 10"):
            self.system.tabulate(election)

    def test_declared_ballot_count_matching(self):
        ballots = [mark(0, 2)] * 6 + [mark(1, 2)] * 4
        election = make_election("OPL", "A (X), B (Y)", ballots, num_seats=2)
        election.num_ballots = 10
        result = self.system.tabulate(election)
        assert sum(p.seats for p in result.parties) == 2

    def test_ballot_without_mark(self):
        election = make_election("OPL", "A (X), B (Y)", [",", "1,"], num_seats=1)
        with pytest.raises(BallotFormatError, match="no mark"):
            self.system.tabulate(election)
