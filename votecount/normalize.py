"""Turn raw descriptor and ballot strings into candidates, parties and ballots."""

import re

from votecount.models import Ballot, Candidate, Party


class BallotFormatError(ValueError):
    """Raised when a candidate descriptor or a ballot line is malformed.

    Miscounting a ballot is worse than refusing it, so every malformed token
    aborts normalization.
    """
    pass


# "Rosen (D)"
PAREN_TOKEN_PATTERN = re.compile(r"^(?P<name>[^()\[\],]+?)\s*\((?P<party>[^()]+)\)$")

# "[Pike, D]"
BRACKET_TOKEN_PATTERN = re.compile(r"\[\s*(?P<name>[^,\[\]]+?)\s*,\s*(?P<party>[^,\[\]]+?)\s*\]")
_BRACKET_TOKEN = r"\[\s*[^,\[\]]+?\s*,\s*[^,\[\]]+?\s*\]"
BRACKET_LINE_PATTERN = re.compile(rf"^{_BRACKET_TOKEN}(\s*,\s*{_BRACKET_TOKEN})*$")

# A rank is plain ASCII digits: no sign, underscore or other script
RANK_PATTERN = re.compile(r"[0-9]+")


def parse_candidates(candidate_line: str) -> list[Candidate]:
    """Parse a candidate descriptor line into Candidates, in descriptor order.

    Two forms are accepted:
        "Rosen (D), Kleinberg (R), Chou (I)"
        "[Pike, D], [Foster, D], [Deutsch, R]"

    Raises:
        BallotFormatError: If the line is empty, a token is malformed, or a
            candidate name appears twice.
    """
    line = candidate_line.strip()
    if not line:
        raise BallotFormatError("Candidate line is empty")

    if line.startswith("["):
        if not BRACKET_LINE_PATTERN.match(line):
            raise BallotFormatError(f"Malformed candidate line: {candidate_line!r}")
        pairs = [
            (m.group("name"), m.group("party"))
            for m in BRACKET_TOKEN_PATTERN.finditer(line)
        ]
    else:
        pairs = []
        for token in line.split(","):
            match = PAREN_TOKEN_PATTERN.match(token.strip())
            if match is None:
                raise BallotFormatError(
                    f"Malformed candidate {token.strip()!r}; expected 'Name (Party)'"
                )
            pairs.append((match.group("name").strip(), match.group("party").strip()))

    candidates = []
    seen: set[str] = set()
    for name, party in pairs:
        if name in seen:
            raise BallotFormatError(f"Candidate {name!r} is listed more than once")
        seen.add(name)
        candidates.append(Candidate(name=name, party=party))
    return candidates


def group_parties(candidates: list[Candidate]) -> list[Party]:
    """Group candidates into parties, in order of each party's first appearance."""
    parties: dict[str, Party] = {}
    for candidate in candidates:
        if candidate.party not in parties:
            parties[candidate.party] = Party(name=candidate.party)
        parties[candidate.party].add_candidate(candidate)
    return list(parties.values())


def split_ballot(ballot_line: str, width: int) -> list[str]:
    """Split a ballot line into exactly `width` stripped cells."""
    cells = [cell.strip() for cell in ballot_line.strip().split(",")]
    if len(cells) != width:
        raise BallotFormatError(
            f"Ballot {ballot_line.strip()!r} has {len(cells)} cells; "
            f"expected one per candidate ({width})"
        )
    return cells


def build_ranked_ballot(ballot_line: str, candidates: list[Candidate]) -> Ballot:
    """Build a rank-ordered IR ballot from a raw ballot line.

    Cell i holds the rank the voter gave candidates[i]; the ballot places
    candidates[i] at slot rank - 1. For example, with candidates
    Rosen, Kleinberg, Chou, Royce the line "1,3,4,2" yields
    [Rosen, Royce, Kleinberg, Chou] and "1,,,2" yields
    [Rosen, Royce, None, None].

    Raises:
        BallotFormatError: On a width mismatch, a non-integer rank, a rank
            outside 1..len(candidates), or a rank used twice.
    """
    n = len(candidates)
    cells = split_ballot(ballot_line, n)
    ranking: list[Candidate | None] = [None] * n

    for position, cell in enumerate(cells):
        if not cell:
            continue
        if not RANK_PATTERN.fullmatch(cell):
            raise BallotFormatError(
                f"Ballot {ballot_line.strip()!r} has a non-integer rank {cell!r}"
            )
        rank = int(cell)
        if not 1 <= rank <= n:
            raise BallotFormatError(
                f"Ballot {ballot_line.strip()!r} has rank {rank} outside 1..{n}"
            )
        if ranking[rank - 1] is not None:
            raise BallotFormatError(
                f"Ballot {ballot_line.strip()!r} uses rank {rank} more than once"
            )
        ranking[rank - 1] = candidates[position]

    return Ballot(ranking=tuple(ranking))


def build_ranked_ballots(ballot_lines: list[str], candidates: list[Candidate]) -> list[Ballot]:
    return [build_ranked_ballot(line, candidates) for line in ballot_lines]


def find_mark(ballot_line: str, width: int) -> int:
    """Return the position of the single mark on an OPL/MPO ballot.

    The mark is the first cell equal to "1".

    Raises:
        BallotFormatError: On a width mismatch or a ballot without a mark.
    """
    cells = split_ballot(ballot_line, width)
    for position, cell in enumerate(cells):
        if cell == "1":
            return position
    raise BallotFormatError(f"Ballot {ballot_line.strip()!r} has no mark")
