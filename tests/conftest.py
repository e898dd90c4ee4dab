"""Shared test helpers."""

from votecount.models import Election
from votecount.normalize import parse_candidates
from votecount.tiebreak import TieBreaker

IR_CANDIDATES = "Rosen (D), Kleinberg (R), Chou (I), Royce (L)"
OPL_CANDIDATES = "Pike (D), Foster (D), Deutsch (R), Borg (R), Jones (R), Smith (I)"
MPO_CANDIDATES = "[Pike, D], [Foster, D], [Deutsch, R], [Borg, R], [Jones, R], [Smith, I]"


def make_election(protocol: str, candidate_line: str, ballots: list[str],
                  num_seats: int = 1) -> Election:
    """Build an Election directly, skipping the file parser."""
    return Election(
        protocol=protocol,
        candidate_line=candidate_line,
        ballots=ballots,
        num_seats=num_seats,
        source="test.csv",
    )


def mark(position: int, width: int) -> str:
    """A single-mark ballot line with the mark at `position`."""
    cells = [""] * width
    cells[position] = "1"
    return ",".join(cells)


def election_file(protocol: str, candidate_line: str, ballots: list[str],
                  num_seats: int = 1) -> bytes:
    """Render an election file as the CSV parser expects it."""
    lines = [protocol, str(len(parse_candidates(candidate_line)))]
    lines.append(candidate_line)
    if protocol != "IR":
        lines.append(str(num_seats))
    lines.append(str(len(ballots)))
    lines += ballots
    return ("\n".join(lines) + "\n").encode("utf-8")


class FirstOption:
    """Stand-in random generator that always picks the first option."""

    def choice(self, seq):
        return seq[0]


class LastOption:
    """Stand-in random generator that always picks the last option."""

    def choice(self, seq):
        return seq[-1]


def first_option_tiebreaker() -> TieBreaker:
    return TieBreaker(FirstOption())


def last_option_tiebreaker() -> TieBreaker:
    return TieBreaker(LastOption())
