"""Multiple Popularity Only (MPO) voting system."""

import logging

from votecount.models import Candidate, Election, SeatAward, TabulationResult
from votecount.normalize import find_mark, parse_candidates
from votecount.tiebreak import TieBreaker
from votecount.voting import register_voting_system
from votecount.voting.base import Count, TabulationError, VotingSystem

_log = logging.getLogger(__name__)


@register_voting_system
class MultiplePopularitySystem(VotingSystem):
    """Multiple Popularity Only voting system (multi-seat, single mark).

    Candidates are ranked by vote count (descriptor order among equal counts)
    and seats are handed out walking down that list:
    - A candidate with strictly more votes than the next one wins a seat.
    - A run of candidates with the same count forms a tie group; seats go to
      group members drawn at random until the group or the seats run out.
    - If a seat is left after the walk, the last candidate takes it.

    A candidate with zero votes never wins a seat.
    """

    PROTOCOL = "MPO"

    @property
    def name(self) -> str:
        return "Multiple Popularity Only"

    @property
    def description(self) -> str:
        return "The most voted candidates win the seats; equal counts are drawn at random"

    def tabulate(self, election: Election) -> TabulationResult:
        return MultiplePopularityCount(election, self.tiebreaker, self.name).run()


class MultiplePopularityCount(Count):
    """A single MPO tabulation."""

    def __init__(self, election: Election, tiebreaker: TieBreaker, system_name: str):
        super().__init__(election, tiebreaker)
        self.system_name = system_name
        self.candidates: list[Candidate] = parse_candidates(election.candidate_line)
        self.awards: list[SeatAward] = []
        self.tie_groups: list[list[str]] = []
        self.seats_left = 0

    def run(self) -> TabulationResult:
        num_seats = self.election.num_seats
        if num_seats < 1:
            raise TabulationError(f"MPO election needs at least one seat, got {num_seats}")

        for line in self.election.ballots:
            self.candidates[find_mark(line, len(self.candidates))].add_vote()

        # sorted() is stable, so equal counts keep descriptor order
        ranked = sorted(self.candidates, key=lambda c: c.votes, reverse=True)
        self.seats_left = num_seats
        self._sweep(ranked)

        last = ranked[-1]
        if self.seats_left > 0 and last.seats == 0 and last.votes > 0:
            # Nobody follows the last candidate to compare against
            self._award(last, "trailing")

        winners = [award.candidate for award in self.awards]
        _log.info(f"MPO winners ({len(winners)} of {num_seats} seats): {', '.join(winners)}")

        return TabulationResult(
            system_name=self.system_name,
            protocol=self.election.protocol,
            winners=winners,
            candidates=ranked,
            rounds=self.awards,
            ties=self.ties,
            num_ballots=self.election.total_ballots,
            num_seats=num_seats,
            details={
                "tie_groups": self.tie_groups,
                "seats_unfilled": self.seats_left,
            },
        )

    def _sweep(self, ranked: list[Candidate]):
        """Compare each candidate with the next one down the ranked list."""
        for i in range(len(ranked) - 1):
            if self.seats_left == 0:
                break
            first, second = ranked[i], ranked[i + 1]
            if first.seats:
                continue
            if first.votes == 0:
                # Everyone from here down has zero votes
                break
            if first.votes > second.votes:
                self._award(first, "higher_than_next")
            else:
                self._award_tie_group(ranked, i)

    def _award_tie_group(self, ranked: list[Candidate], start: int):
        """Hand out seats within the run of equal counts starting at `start`."""
        votes = ranked[start].votes
        group = []
        for candidate in ranked[start:]:
            if candidate.votes != votes:
                break
            if candidate.seats == 0:
                group.append(candidate)
        self.tie_groups.append([c.name for c in group])

        while self.seats_left > 0 and group:
            if len(group) > 1:
                chosen = self.break_tie(group, "seat")
                self._award(chosen, "tiebreak", self.ties[-1])
            else:
                chosen = group[0]
                self._award(chosen, "last_in_tie_group")
            group.remove(chosen)

    def _award(self, candidate: Candidate, method: str, tie=None):
        candidate.add_seat()
        self.seats_left -= 1
        self.awards.append(SeatAward(
            candidate=candidate.name,
            votes=candidate.votes,
            method=method,
            tie=tie,
        ))
        _log.debug(f"MPO seat to {candidate.name} ({method}), {self.seats_left} left")
