"""Core data models for elections and tabulation results."""

from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Any


PROTOCOLS = ("IR", "OPL", "MPO")


@dataclass
class Election:
    """A parsed election file, before any tabulation.

    Attributes:
        protocol: Voting protocol tag ("IR", "OPL" or "MPO")
        candidate_line: Raw candidate/party descriptor line
        ballots: Raw ballot lines, one comma-separated cell per candidate
        num_seats: Seats to fill (OPL/MPO); IR always fills one
        num_ballots: Declared number of ballots, or None to use len(ballots)
        source: File name or URL the election was read from

    Example:
        >>> election = Election(
        ...     protocol="IR",
        ...     candidate_line="Rosen (D), Kleinberg (R)",
        ...     ballots=["1,2", "2,1", "1,"],
        ... )
    """
    protocol: str
    candidate_line: str
    ballots: list[str]
    num_seats: int = 1
    num_ballots: int | None = None
    source: str = ""

    @property
    def total_ballots(self) -> int:
        if self.num_ballots is not None:
            return self.num_ballots
        return len(self.ballots)


@dataclass(eq=False)
class Candidate:
    """A candidate standing in an election.

    Candidates compare by identity: the tabulators mutate them round over
    round and keep references to them inside ballots.

    Attributes:
        name: Candidate name (unique within an election)
        party: Party label
        votes: Cumulative vote count
        redistributed_votes: Votes received in the current redistribution round
        eliminated: Whether the candidate has been eliminated (IR)
        seats: Seats won (MPO)
    """
    name: str
    party: str
    votes: int = 0
    redistributed_votes: int = 0
    eliminated: bool = False
    seats: int = 0

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.party})"

    def add_vote(self) -> None:
        self.votes += 1

    def add_redistributed_vote(self) -> None:
        self.redistributed_votes += 1

    def reset_redistributed_votes(self) -> None:
        self.redistributed_votes = 0

    def eliminate(self) -> None:
        self.eliminated = True

    def add_seat(self) -> None:
        self.seats += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "party": self.party,
            "votes": self.votes,
            "eliminated": self.eliminated,
            "seats": self.seats,
        }


@dataclass(eq=False)
class Party:
    """A party and its ordered list of candidates (OPL).

    Attributes:
        name: Party label
        candidates: Member candidates in descriptor order
        votes: Working vote total. Overwritten with the remainder after the
            whole-seat round.
        initial_votes: Vote total frozen right after aggregation, used for
            reporting percentages
        seats: Seats allocated so far
    """
    name: str
    candidates: list[Candidate] = field(default_factory=list)
    votes: int = 0
    initial_votes: int = 0
    seats: int = 0

    def add_candidate(self, candidate: Candidate) -> None:
        self.candidates.append(candidate)

    def add_vote(self) -> None:
        self.votes += 1

    def snapshot_votes(self) -> None:
        """Freeze the current vote total as the pre-allocation total."""
        self.initial_votes = self.votes

    def add_seats(self, seats: int) -> None:
        self.seats += seats

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "candidates": [c.name for c in self.candidates],
            "votes": self.initial_votes,
            "remaining_votes": self.votes,
            "seats": self.seats,
        }


@dataclass(eq=False)
class Ballot:
    """A ranked IR ballot.

    `ranking` holds one slot per rank (slot 0 = first choice), with None where
    the voter ranked fewer candidates than there are slots. `remaining` is the
    queue of preferences not yet passed over; its head is the candidate the
    ballot currently counts for. A ballot whose first-rank slot is empty never
    counts for anyone, so its queue starts out empty.
    """
    ranking: tuple[Candidate | None, ...]
    remaining: deque[Candidate] = field(init=False, repr=False)

    def __post_init__(self):
        self.ranking = tuple(self.ranking)
        if self.ranking and self.ranking[0] is not None:
            self.remaining = deque(c for c in self.ranking if c is not None)
        else:
            self.remaining = deque()

    @property
    def leader(self) -> Candidate | None:
        return self.remaining[0] if self.remaining else None

    @property
    def is_exhausted(self) -> bool:
        return not self.remaining

    def advance(self) -> Candidate | None:
        """Drop eliminated candidates off the front of the queue.

        Returns:
            The new leader, or None if the ballot is exhausted.
        """
        while self.remaining and self.remaining[0].eliminated:
            self.remaining.popleft()
        return self.leader


@dataclass
class TieRecord:
    """One random tie-break draw.

    Attributes:
        context: What was being decided (e.g. "elimination", "remainder")
        options: Names of the tied candidates or parties
        chosen: Name of the option the draw picked
    """
    context: str
    options: list[str]
    chosen: str


@dataclass
class RedistributionRound:
    """One IR cycle of elimination and ballot transfer.

    Attributes:
        number: 1-indexed round number
        zero_vote_eliminated: Candidates eliminated for having no votes
        tied_for_lowest: Candidates sharing the lowest count, if more than one
        tie_survivor: Candidate the tie-breaker kept in the race
        eliminated: Candidates eliminated for having the lowest count
        redistributed: Votes each active candidate gained this round
        votes: Vote totals of the active candidates after the round
        exhausted_ballots: Ballots dropped this round for having no active
            preference left
        ballots_remaining: Size of the working ballot set after the round
    """
    number: int
    zero_vote_eliminated: list[str]
    tied_for_lowest: list[str]
    tie_survivor: str | None
    eliminated: list[str]
    redistributed: dict[str, int]
    votes: dict[str, int]
    exhausted_ballots: int
    ballots_remaining: int


@dataclass
class AllocationRound:
    """One OPL seat allocation round.

    Attributes:
        number: 1-indexed round number
        method: "quota", "all_votes" or "remainder"
        seats_awarded: Seats each party gained this round
        remaining_votes: Working vote totals after the round
        seats: Seat totals after the round
        tie: Remainder tie-break, if one happened
    """
    number: int
    method: str
    seats_awarded: dict[str, int]
    remaining_votes: dict[str, int]
    seats: dict[str, int]
    tie: TieRecord | None = None


@dataclass
class SeatAward:
    """One MPO seat.

    Attributes:
        candidate: Name of the candidate awarded the seat
        votes: That candidate's vote count
        method: "higher_than_next", "tiebreak", "last_in_tie_group" or
            "trailing"
        tie: The tie-break draw, for "tiebreak" awards
    """
    candidate: str
    votes: int
    method: str
    tie: TieRecord | None = None


@dataclass
class TabulationResult:
    """Result of tabulating an election.

    Attributes:
        system_name: Human-readable name of the voting system
        protocol: Protocol tag of the election
        winners: Winning candidate names; several for MPO, ordered by award
        candidates: Every candidate with final counters
        parties: Every party with final counters (OPL)
        rounds: Round records (RedistributionRound, AllocationRound or
            SeatAward, depending on the protocol)
        ties: Every tie-break draw, in order
        num_ballots: Ballots cast
        num_seats: Seats filled
        details: System-specific details for transparency
    """
    system_name: str
    protocol: str
    winners: list[str]
    candidates: list[Candidate]
    parties: list[Party] = field(default_factory=list)
    rounds: list[Any] = field(default_factory=list)
    ties: list[TieRecord] = field(default_factory=list)
    num_ballots: int = 0
    num_seats: int = 1
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def winner(self) -> str | None:
        return self.winners[0] if self.winners else None

    def get_candidate(self, name: str) -> Candidate | None:
        """Get a candidate by name, or None if not found."""
        for c in self.candidates:
            if c.name == name:
                return c
        return None

    def get_party(self, name: str) -> Party | None:
        for p in self.parties:
            if p.name == name:
                return p
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "system_name": self.system_name,
            "protocol": self.protocol,
            "winners": list(self.winners),
            "num_ballots": self.num_ballots,
            "num_seats": self.num_seats,
            "candidates": [c.to_dict() for c in self.candidates],
            "parties": [p.to_dict() for p in self.parties],
            "rounds": [asdict(r) for r in self.rounds],
            "ties": [asdict(t) for t in self.ties],
            "details": self.details,
        }
