"""Open Party List (OPL) voting system."""

import logging
import math

from votecount.models import (
    AllocationRound,
    Candidate,
    Election,
    Party,
    TabulationResult,
)
from votecount.normalize import find_mark, group_parties, parse_candidates
from votecount.tiebreak import TieBreaker
from votecount.voting import register_voting_system
from votecount.voting.base import Count, TabulationError, VotingSystem

_log = logging.getLogger(__name__)


@register_voting_system
class OpenPartyListSystem(VotingSystem):
    """Open Party List voting system with largest-remainder apportionment.

    Each ballot marks one candidate; the vote counts for the candidate and
    for their party.

    Seats are allocated in rounds:
    1. quota = ceil(ballots / seats). Each party wins floor(votes / quota)
       seats and keeps votes mod quota as its remainder. If a single party
       received every vote, it takes all seats at once instead.
    2. While seats remain, the party with the highest remainder among the
       parties that have not yet received a remainder seat wins one seat.

    The winning party is the one with the most seats, and the winning
    candidate is the most voted candidate of that party.

    Tiebreakers: every tie (highest remainder, most seats, most votes within
    the winning party) is settled by a uniform random draw.
    """

    PROTOCOL = "OPL"

    @property
    def name(self) -> str:
        return "Open Party List"

    @property
    def description(self) -> str:
        return "Seats by quota and largest remainder; the top party's most voted candidate wins"

    def tabulate(self, election: Election) -> TabulationResult:
        return OpenPartyListCount(election, self.tiebreaker, self.name).run()


class OpenPartyListCount(Count):
    """A single Open Party List tabulation."""

    def __init__(self, election: Election, tiebreaker: TieBreaker, system_name: str):
        super().__init__(election, tiebreaker)
        self.system_name = system_name
        self.candidates: list[Candidate] = parse_candidates(election.candidate_line)
        self.parties: list[Party] = group_parties(self.candidates)
        self.rounds: list[AllocationRound] = []
        self.remainder_recipients: list[Party] = []

    def run(self) -> TabulationResult:
        num_seats = self.election.num_seats
        if num_seats < 1:
            raise TabulationError(f"OPL election needs at least one seat, got {num_seats}")
        for party in self.parties:
            if not party.candidates:
                raise TabulationError(f"Party {party.name!r} has no candidates")

        self._aggregate()
        total_ballots = self.election.total_ballots
        if total_ballots == 0:
            raise TabulationError("OPL election has no ballots")

        quota = math.ceil(total_ballots / num_seats)
        seats_left = num_seats - self._allocate_whole_seats(quota, num_seats)
        while seats_left > 0:
            self._allocate_remainder_seat()
            seats_left -= 1

        winning_party = self._find_winning_party()
        winner = self._find_winning_candidate(winning_party)

        _log.info(
            f"OPL winner: party {winning_party.name} with {winning_party.seats} seat(s), "
            f"candidate {winner.name} with {winner.votes} votes"
        )

        return TabulationResult(
            system_name=self.system_name,
            protocol=self.election.protocol,
            winners=[winner.name],
            candidates=self.candidates,
            parties=self.parties,
            rounds=self.rounds,
            ties=self.ties,
            num_ballots=total_ballots,
            num_seats=num_seats,
            details={
                "quota": quota,
                "winning_party": winning_party.name,
                "winning_party_votes": winning_party.initial_votes,
                "winning_party_seats": winning_party.seats,
                "winner_votes": winner.votes,
            },
        )

    def _aggregate(self):
        """Count one vote per ballot for the marked candidate and their party."""
        by_name = {p.name: p for p in self.parties}
        for line in self.election.ballots:
            candidate = self.candidates[find_mark(line, len(self.candidates))]
            candidate.add_vote()
            by_name[candidate.party].add_vote()

        for party in self.parties:
            party.snapshot_votes()

    def _allocate_whole_seats(self, quota: int, num_seats: int) -> int:
        """Run the first allocation round.

        Returns:
            The number of seats allocated.
        """
        awarded: dict[str, int] = {}
        voted = [p for p in self.parties if p.votes > 0]

        if len(voted) == 1:
            # One party received every vote: it takes all the seats
            party = voted[0]
            party.add_seats(num_seats)
            party.votes = 0
            awarded[party.name] = num_seats
            method = "all_votes"
        else:
            for party in self.parties:
                seats, remainder = divmod(party.votes, quota)
                party.add_seats(seats)
                party.votes = remainder
                awarded[party.name] = seats
            method = "quota"

        self._record_round(method, awarded)
        allocated = sum(awarded.values())
        _log.debug(f"OPL {method} round: quota {quota}, {allocated} seat(s) allocated")
        return allocated

    def _allocate_remainder_seat(self):
        """Award one seat to the party with the highest remainder.

        A party that already received a remainder seat is passed over, even
        if its remainder is still the highest, until every party has had one.
        """
        eligible = [p for p in self.parties if p not in self.remainder_recipients]
        if not eligible:
            self.remainder_recipients.clear()
            eligible = list(self.parties)

        highest = max(p.votes for p in eligible)
        leaders = [p for p in eligible if p.votes == highest]

        tie = None
        if len(leaders) > 1:
            party = self.break_tie(leaders, "remainder")
            tie = self.ties[-1]
        else:
            party = leaders[0]

        party.add_seats(1)
        self.remainder_recipients.append(party)
        self._record_round("remainder", {party.name: 1}, tie)
        _log.debug(f"OPL remainder seat to {party.name} (remainder {highest})")

    def _record_round(self, method, awarded, tie=None):
        self.rounds.append(AllocationRound(
            number=len(self.rounds) + 1,
            method=method,
            seats_awarded={p.name: awarded.get(p.name, 0) for p in self.parties},
            remaining_votes={p.name: p.votes for p in self.parties},
            seats={p.name: p.seats for p in self.parties},
            tie=tie,
        ))

    def _find_winning_party(self) -> Party:
        most_seats = max(p.seats for p in self.parties)
        leaders = [p for p in self.parties if p.seats == most_seats]
        if len(leaders) > 1:
            return self.break_tie(leaders, "party")
        return leaders[0]

    def _find_winning_candidate(self, party: Party) -> Candidate:
        most_votes = max(c.votes for c in party.candidates)
        leaders = [c for c in party.candidates if c.votes == most_votes]
        if len(leaders) > 1:
            return self.break_tie(leaders, "candidate")
        return leaders[0]
