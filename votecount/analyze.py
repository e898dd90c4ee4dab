"""Orchestrator: parse an election file and tabulate it with the matching system."""

import logging
from dataclasses import dataclass
from typing import Any

from votecount.models import Election, TabulationResult
from votecount.normalize import BallotFormatError
from votecount.parsers import detect_parser, detect_parser_by_content, get_supported_formats
from votecount.tiebreak import TieBreaker
from votecount.voting import get_voting_system
from votecount.voting.base import TabulationError

# Import parsers and voting systems to register them
from votecount.parsers import csv_file  # noqa: F401
from votecount.voting import instant_runoff  # noqa: F401
from votecount.voting import multiple_popularity  # noqa: F401
from votecount.voting import open_party_list  # noqa: F401

_log = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Parsed election together with its tabulation outcome."""
    election: Election
    result: TabulationResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "source": self.election.source,
            "protocol": self.election.protocol,
            "num_ballots": self.election.total_ballots,
            "num_seats": self.election.num_seats,
            "result": self.result.to_dict(),
        }


class AnalysisError(Exception):
    """Error during election analysis."""
    pass


def parse_election(source: str, content: bytes) -> Election:
    """Parse an election file, detecting its format from the source or content.

    Raises:
        AnalysisError: If no parser is found or parsing fails
    """
    # Find appropriate parser: try source matching first, then content detection
    parser = detect_parser(source)
    if parser is None:
        parser = detect_parser_by_content(content, source)
    if parser is None:
        raise AnalysisError(
            f"We couldn't determine the election file format.\n\n{get_supported_formats()}"
        )

    try:
        return parser.parse(source, content)
    except ValueError as e:
        raise AnalysisError(f"Failed to parse election file: {e}") from e


def tabulate_election(
    source: str, content: bytes, tiebreaker: TieBreaker | None = None,
) -> AnalysisResult:
    """Parse an election file and tabulate it.

    Args:
        source: URL or filename (used to detect the appropriate parser)
        content: Raw bytes of the election file
        tiebreaker: Tie-breaker to use; a CSPRNG-backed one by default

    Returns:
        AnalysisResult with the parsed election and its tabulation result

    Raises:
        AnalysisError: If the file cannot be parsed or tabulated
    """
    election = parse_election(source, content)
    _log.info(
        f"Loaded {election.protocol} election from {source}: "
        f"{election.total_ballots} ballots, {election.num_seats} seat(s)"
    )

    voting_system = get_voting_system(election.protocol, tiebreaker)
    if voting_system is None:
        raise AnalysisError(f"No voting system handles protocol {election.protocol!r}")

    try:
        result = voting_system.tabulate(election)
    except (BallotFormatError, TabulationError) as e:
        raise AnalysisError(f"Failed to tabulate {voting_system.name} election: {e}") from e

    return AnalysisResult(election=election, result=result)
