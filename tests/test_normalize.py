"""Tests for descriptor and ballot normalization."""

import pytest
from tests.conftest import IR_CANDIDATES, MPO_CANDIDATES
from votecount.normalize import (
    BallotFormatError,
    build_ranked_ballot,
    find_mark,
    group_parties,
    parse_candidates,
    split_ballot,
)


def names(candidates):
    return [c.name if c is not None else None for c in candidates]


class TestParseCandidates:
    def test_parenthesized(self):
        candidates = parse_candidates(IR_CANDIDATES)
        assert [(c.name, c.party) for c in candidates] == [
            ("Rosen", "D"), ("Kleinberg", "R"), ("Chou", "I"), ("Royce", "L"),
        ]

    def test_bracketed(self):
        candidates = parse_candidates(MPO_CANDIDATES)
        assert names(candidates) == ["Pike", "Foster", "Deutsch", "Borg", "Jones", "Smith"]
        assert candidates[2].party == "R"

    def test_multiword_names_and_parties(self):
        candidates = parse_candidates("Mary Ann Lee (Green Party), Bo (Independent)")
        assert (candidates[0].name, candidates[0].party) == ("Mary Ann Lee", "Green Party")
        assert candidates[1].party == "Independent"

    def test_whitespace_tolerated(self):
        candidates = parse_candidates("  [ Pike ,D ],[Foster, D]  ")
        assert [(c.name, c.party) for c in candidates] == [("Pike", "D"), ("Foster", "D")]

    def test_fresh_counters(self):
        assert all(c.votes == 0 and not c.eliminated for c in parse_candidates(IR_CANDIDATES))

    @pytest.mark.parametrize("line", [
        "",
        "   ",
        "Rosen",
        "Rosen (D), Kleinberg",
        "Rosen (D),, Chou (I)",
        "[Pike, D], Foster",
        "[Pike D]",
    ])
    def test_malformed(self, line):
        with pytest.raises(BallotFormatError):
            parse_candidates(line)

    def test_duplicate_name(self):
        with pytest.raises(BallotFormatError, match="more than once"):
            parse_candidates("Rosen (D), Rosen (R)")


class TestGroupParties:
    def test_first_appearance_order(self):
        parties = group_parties(parse_candidates("A (Y), B (X), C (Y)"))
        assert [p.name for p in parties] == ["Y", "X"]
        assert names(parties[0].candidates) == ["A", "C"]


class TestRankedBallot:
    def setup_method(self):
        self.candidates = parse_candidates(IR_CANDIDATES)

    def test_full_ranking(self):
        ballot = build_ranked_ballot("1,3,4,2", self.candidates)
        assert names(ballot.ranking) == ["Rosen", "Royce", "Kleinberg", "Chou"]

    def test_partial_ranking(self):
        ballot = build_ranked_ballot("1,,,2", self.candidates)
        assert names(ballot.ranking) == ["Rosen", "Royce", None, None]
        assert names(ballot.remaining) == ["Rosen", "Royce"]

    def test_cells_stripped(self):
        ballot = build_ranked_ballot(" 2 , 1 ,, ", self.candidates)
        assert names(ballot.ranking)[:2] == ["Kleinberg", "Rosen"]

    @pytest.mark.parametrize("line, message", [
        ("1,2,3", "4"),
        ("1,x,,", "non-integer"),
        ("+1,,,", "non-integer"),
        ("-1,,,", "non-integer"),
        ("1_0,,,", "non-integer"),
        ("\u0662,1,,", "non-integer"),
        ("1.0,,,", "non-integer"),
        ("1,5,,", "outside"),
        ("0,,,", "outside"),
        ("1,1,,", "more than once"),
    ])
    def test_malformed(self, line, message):
        with pytest.raises(BallotFormatError, match=message):
            build_ranked_ballot(line, self.candidates)


class TestFindMark:
    def test_position(self):
        assert find_mark(",,1,", 4) == 2

    def test_first_mark_wins(self):
        assert find_mark("1,,1,", 4) == 0

    def test_no_mark(self):
        with pytest.raises(BallotFormatError, match="no mark"):
            find_mark(",,,", 4)

    def test_width_mismatch(self):
        with pytest.raises(BallotFormatError):
            find_mark("1,,", 4)


def test_split_ballot():
    assert split_ballot(" 1 , ,2", 3) == ["1", "", "2"]
