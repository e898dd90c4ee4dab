"""Instant Runoff (IR) voting system."""

import logging

from votecount.models import (
    Ballot,
    Candidate,
    Election,
    RedistributionRound,
    TabulationResult,
)
from votecount.normalize import build_ranked_ballots, parse_candidates
from votecount.tiebreak import TieBreaker
from votecount.voting import register_voting_system
from votecount.voting.base import Count, VotingSystem

_log = logging.getLogger(__name__)

# A candidate wins outright with strictly more than this share of the
# working ballots.
MAJORITY_FRACTION = 0.5


@register_voting_system
class InstantRunoffSystem(VotingSystem):
    """Instant Runoff voting system (single winner).

    1. Count first-choice votes.
    2. If someone has a majority (>50% of the working ballots), they win.
    3. If every remaining candidate with votes has the same count, choose
       one of them at random.
    4. Otherwise eliminate the candidate(s) with the fewest votes and move
       their ballots to each ballot's next remaining choice, then go to 2.

    Elimination details:
    - Candidates with zero votes are eliminated outright, before the lowest
      count is determined.
    - If several candidates share the lowest count, one of them chosen at
      random survives the round and the rest are eliminated.
    - A ballot with no remaining choice is exhausted and leaves the working
      set for good, which lowers the majority threshold.
    """

    PROTOCOL = "IR"

    @property
    def name(self) -> str:
        return "Instant Runoff"

    @property
    def description(self) -> str:
        return "Eliminate the weakest candidate and transfer ballots until someone has a majority"

    def tabulate(self, election: Election) -> TabulationResult:
        return InstantRunoffCount(election, self.tiebreaker, self.name).run()


class InstantRunoffCount(Count):
    """A single Instant Runoff tabulation."""

    def __init__(self, election: Election, tiebreaker: TieBreaker, system_name: str):
        super().__init__(election, tiebreaker)
        self.system_name = system_name
        self.candidates: list[Candidate] = parse_candidates(election.candidate_line)
        all_ballots = build_ranked_ballots(election.ballots, self.candidates)
        self.ballots: list[Ballot] = [b for b in all_ballots if not b.is_exhausted]
        self.blank_ballots = len(all_ballots) - len(self.ballots)
        self.rounds: list[RedistributionRound] = []
        self.winner: Candidate | None = None
        self.method = ""

    def run(self) -> TabulationResult:
        self._count_first_round()
        first_round = {c.name: c.votes for c in self.candidates}

        if self._check_majority():
            self.method = "majority"
        elif self._is_tied():
            self._resolve_tie("first_round_tie")
        else:
            self._redistribute()

        if self.winner is not None:
            _log.info(
                f"IR winner: {self.winner.name} with {self.winner.votes} of "
                f"{len(self.ballots)} votes ({self.method})"
            )
        else:
            _log.info("IR election has no winner: no ballot names a first choice")

        return TabulationResult(
            system_name=self.system_name,
            protocol=self.election.protocol,
            winners=[self.winner.name] if self.winner else [],
            candidates=self.candidates,
            rounds=self.rounds,
            ties=self.ties,
            num_ballots=len(self.election.ballots),
            num_seats=1,
            details={
                "method": self.method,
                "first_round": first_round,
                "blank_ballots": self.blank_ballots,
                "ballots_remaining": len(self.ballots),
                "winner_votes": self.winner.votes if self.winner else 0,
            },
        )

    def _active(self) -> list[Candidate]:
        return [c for c in self.candidates if not c.eliminated]

    def _contenders(self) -> list[Candidate]:
        """Active candidates holding at least one vote."""
        return [c for c in self._active() if c.votes > 0]

    def _count_first_round(self):
        for ballot in self.ballots:
            ballot.leader.add_vote()

    def _check_majority(self) -> bool:
        total = len(self.ballots)
        if total == 0:
            return False
        for candidate in self._active():
            if candidate.votes / total > MAJORITY_FRACTION:
                self.winner = candidate
                return True
        return False

    def _is_tied(self) -> bool:
        """Whether every active candidate with votes has the same count."""
        contenders = self._contenders()
        return bool(contenders) and len({c.votes for c in contenders}) == 1

    def _resolve_tie(self, method: str):
        self.winner = self.break_tie(self._contenders(), "winner")
        self.method = method

    def _redistribute(self):
        number = 0
        while True:
            if not self._contenders():
                self.method = "no_winner"
                return

            # A previous round may have left the remaining candidates tied
            if self._is_tied():
                self._resolve_tie("tie_after_redistribution")
                return

            number += 1
            self.rounds.append(self._run_round(number))

            if self._check_majority():
                self.method = "majority_after_redistribution"
                return

    def _run_round(self, number: int) -> RedistributionRound:
        zero_vote = [c for c in self._active() if c.votes == 0]
        for candidate in zero_vote:
            candidate.eliminate()
            _log.debug(f"Round {number}: {candidate.name} eliminated with 0 votes")

        contenders = self._active()
        lowest = min(c.votes for c in contenders)
        to_eliminate = [c for c in contenders if c.votes == lowest]

        tied_for_lowest: list[str] = []
        survivor = None
        if len(to_eliminate) > 1:
            tied_for_lowest = [c.name for c in to_eliminate]
            survivor = self.break_tie(to_eliminate, "elimination")
            to_eliminate = [c for c in to_eliminate if c is not survivor]

        # Mark every elimination before moving ballots so that no ballot
        # lands on a candidate leaving in this same round.
        for candidate in to_eliminate:
            candidate.eliminate()
        exhausted = self._transfer_ballots()

        _log.debug(
            f"Round {number}: eliminated {[c.name for c in to_eliminate]}, "
            f"{exhausted} ballot(s) exhausted, {len(self.ballots)} remaining"
        )

        active = self._active()
        record = RedistributionRound(
            number=number,
            zero_vote_eliminated=[c.name for c in zero_vote],
            tied_for_lowest=tied_for_lowest,
            tie_survivor=survivor.name if survivor else None,
            eliminated=[c.name for c in to_eliminate],
            redistributed={c.name: c.redistributed_votes for c in active},
            votes={c.name: c.votes for c in active},
            exhausted_ballots=exhausted,
            ballots_remaining=len(self.ballots),
        )

        for candidate in active:
            candidate.reset_redistributed_votes()

        return record

    def _transfer_ballots(self) -> int:
        """Move ballots led by eliminated candidates to their next choice.

        Returns:
            The number of ballots exhausted and removed from the working set.
        """
        kept = []
        exhausted = 0
        for ballot in self.ballots:
            if ballot.leader.eliminated:
                new_leader = ballot.advance()
                if new_leader is None:
                    exhausted += 1
                    continue
                new_leader.add_vote()
                new_leader.add_redistributed_vote()
            kept.append(ballot)
        self.ballots = kept
        return exhausted
