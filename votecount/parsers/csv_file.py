"""Parser for plain-text election CSV files."""

from pathlib import PurePosixPath
from urllib.parse import urlparse

from votecount.models import PROTOCOLS, Election
from votecount.normalize import BallotFormatError, parse_candidates
from votecount.parsers import register_parser
from votecount.parsers.base import ElectionFileError, ElectionFileParser

SUPPORTED_EXTENSIONS = (".csv",)


@register_parser
class CSVElectionParser(ElectionFileParser):
    """Parser for election CSV files.

    The file starts with a protocol header, then counts and the candidate
    descriptor, then one line per ballot:

        IR                        OPL / MPO
        <number of candidates>    <number of candidates>
        <candidate descriptor>    <candidate descriptor>
        <number of ballots>       <number of seats>
        <ballot lines...>         <number of ballots>
                                  <ballot lines...>

    IR and OPL descriptors look like "Rosen (D), Kleinberg (R)"; MPO
    descriptors look like "[Pike, D], [Foster, D]". Each ballot line has one
    comma-separated cell per candidate.
    """

    EXAMPLE_SOURCE = "election.csv (IR, OPL or MPO header)"

    def can_parse(self, source: str) -> bool:
        """Check if the source names a .csv file (local path or URL)."""
        path = urlparse(source).path if "://" in source else source
        return PurePosixPath(path.replace("\\", "/")).suffix.lower() in SUPPORTED_EXTENSIONS

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if the first non-blank line is a protocol header."""
        text = content.decode("utf-8-sig", errors="replace")
        for line in text.splitlines():
            if line.strip():
                return line.strip() in PROTOCOLS
        return False

    def parse(self, source: str, content: bytes) -> Election:
        """Parse election file content into an Election."""
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ElectionFileError(f"Election file is not valid UTF-8: {e}") from e

        lines = [line.rstrip() for line in text.splitlines()]
        while lines and not lines[-1]:
            lines.pop()
        while lines and not lines[0]:
            lines.pop(0)

        if not lines:
            raise ElectionFileError("Election file is empty")

        protocol = lines[0].strip()
        if protocol not in PROTOCOLS:
            raise ElectionFileError(
                f"Unknown voting protocol {protocol!r}; expected one of {', '.join(PROTOCOLS)}"
            )

        header_size = 4 if protocol == "IR" else 5
        if len(lines) < header_size:
            raise ElectionFileError(
                f"{protocol} file needs {header_size} header lines, found {len(lines)}"
            )

        num_candidates = self._parse_count(lines[1], "number of candidates")
        candidate_line = lines[2].strip()
        try:
            candidates = parse_candidates(candidate_line)
        except BallotFormatError as e:
            raise ElectionFileError(str(e)) from e
        if len(candidates) != num_candidates:
            raise ElectionFileError(
                f"Header declares {num_candidates} candidates but the candidate line "
                f"lists {len(candidates)}"
            )

        if protocol == "IR":
            num_seats = 1
            num_ballots = self._parse_count(lines[3], "number of ballots")
        else:
            num_seats = self._parse_count(lines[3], "number of seats")
            num_ballots = self._parse_count(lines[4], "number of ballots")

        ballots = [line.strip() for line in lines[header_size:]]
        if len(ballots) != num_ballots:
            raise ElectionFileError(
                f"Header declares {num_ballots} ballots but the file contains {len(ballots)}"
            )

        return Election(
            protocol=protocol,
            candidate_line=candidate_line,
            ballots=ballots,
            num_seats=num_seats,
            num_ballots=num_ballots,
            source=source,
        )

    @staticmethod
    def _parse_count(line: str, what: str) -> int:
        try:
            value = int(line.strip())
        except ValueError:
            raise ElectionFileError(f"Invalid {what}: {line.strip()!r}") from None
        if value < 0:
            raise ElectionFileError(f"Invalid {what}: {value} is negative")
        return value
