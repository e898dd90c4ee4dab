"""Abstract base classes for voting systems."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar

from votecount.models import Candidate, Election, Party, TabulationResult, TieRecord
from votecount.tiebreak import TieBreaker

_log = logging.getLogger(__name__)

Tied = TypeVar("Tied", Candidate, Party)


class TabulationError(RuntimeError):
    """Raised when an election violates a structural requirement of its protocol.

    For example, an OPL election with no seats to fill.
    """
    pass


class VotingSystem(ABC):
    """Abstract base class for voting systems.

    Each voting system tabulates one protocol. Systems are registered under
    their PROTOCOL tag via the @register_voting_system decorator in
    votecount/voting/__init__.py.
    """

    PROTOCOL: str = ""

    def __init__(self, tiebreaker: TieBreaker | None = None):
        self.tiebreaker = tiebreaker if tiebreaker is not None else TieBreaker()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this voting system."""
        pass

    @property
    def description(self) -> str:
        """Optional description of how this voting system works."""
        return ""

    @abstractmethod
    def tabulate(self, election: Election) -> TabulationResult:
        """Tabulate an election using this voting system.

        Args:
            election: The parsed election, with raw descriptor and ballots

        Returns:
            TabulationResult with the winner(s) and per-round statistics

        Raises:
            BallotFormatError: If the descriptor or a ballot is malformed
            TabulationError: If the election cannot be tabulated
        """
        pass


class Count(ABC):
    """State of a single tabulation run.

    A new Count is built for every call to VotingSystem.tabulate(), so the
    candidates, parties and ballots it mutates belong to that run alone.
    """

    def __init__(self, election: Election, tiebreaker: TieBreaker):
        declared = election.num_ballots
        if declared is not None and declared != len(election.ballots):
            raise TabulationError(
                f"Election declares {declared} ballots but carries {len(election.ballots)}"
            )
        self.election = election
        self.tiebreaker = tiebreaker
        self.ties: list[TieRecord] = []

    def break_tie(self, tied: Sequence[Tied], context: str) -> Tied:
        """Pick one of `tied` at random and record the draw."""
        chosen = self.tiebreaker.choose(tied)
        record = TieRecord(
            context=context,
            options=[option.name for option in tied],
            chosen=chosen.name,
        )
        self.ties.append(record)
        _log.debug(f"Tie ({context}) among {record.options} won by {record.chosen}")
        return chosen

    @abstractmethod
    def run(self) -> TabulationResult:
        pass
