"""Command-line entry point: tabulate an election file and write its audit trail.

Usage:
    votecount election.csv
    votecount election.csv --audit results/audit.txt
    votecount election.csv --seed 12345 --debug
    votecount                  # prompts for the file name
"""

import argparse
import logging
import random
import sys
from pathlib import Path

from votecount import __version__
from votecount.analyze import AnalysisError, tabulate_election
from votecount.audit import DEFAULT_AUDIT_PATH, write_audit_file
from votecount.parsers.csv_file import SUPPORTED_EXTENSIONS
from votecount.report import render_summary
from votecount.tiebreak import TieBreaker

_log = logging.getLogger(__name__)

PROMPT = "Enter the name of the election file (or 'help'): "

HELP_TEXT = """\
Type the name of an election file in the current directory, or a path to one,
for example "election.csv". The file must end in .csv.

The first line of the file names the voting protocol:
  IR   Instant Runoff (ranked ballots, one winner)
  OPL  Open Party List (one mark per ballot, seats by party)
  MPO  Multiple Popularity Only (one mark per ballot, several seats)
"""


def prompt_for_file(input_func=input, output=print) -> str:
    """Ask for an election file name until an existing .csv file is given.

    Raises:
        EOFError: If input runs out before a valid name is entered
    """
    while True:
        name = input_func(PROMPT).strip()
        if not name:
            continue
        if name.lower() == "help":
            output(HELP_TEXT)
        elif not name.lower().endswith(SUPPORTED_EXTENSIONS):
            output(f"{name!r} is not a .csv file. Type 'help' for more information.")
        elif not Path(name).is_file():
            output(f"File {name!r} does not exist. Type 'help' for more information.")
        else:
            return name


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="votecount",
        description="Tabulate an IR, OPL or MPO election file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("file", nargs="?",
                        help="election file to tabulate (prompted for if omitted)")
    parser.add_argument("--audit", metavar="PATH", default=DEFAULT_AUDIT_PATH,
                        help=f"where to write the audit file (default: {DEFAULT_AUDIT_PATH})")
    parser.add_argument("--no-audit", action="store_true",
                        help="do not write an audit file")
    parser.add_argument("--seed", type=int, metavar="N",
                        help="seed tie-breaking for a reproducible run (testing only)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable verbose info printout")
    parser.add_argument("--debug", action="store_true", help="enable debug printout")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="only print errors")
    return parser


def configure_logging(ns: argparse.Namespace):
    if ns.debug:
        level = logging.DEBUG
    elif ns.verbose:
        level = logging.INFO
    elif ns.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(level=level)


def main(argv=None) -> int:
    parser = make_parser()
    ns = parser.parse_args(argv)
    configure_logging(ns)

    path = ns.file
    if path is None:
        try:
            path = prompt_for_file()
        except (EOFError, KeyboardInterrupt):
            print("No election file given.", file=sys.stderr)
            return 1

    try:
        content = Path(path).read_bytes()
    except OSError as e:
        print(f"Could not read {path}: {e}", file=sys.stderr)
        return 1

    tiebreaker = None
    if ns.seed is not None:
        _log.warning(f"Tie-breaking seeded with {ns.seed}; draws are reproducible")
        tiebreaker = TieBreaker(random.Random(ns.seed))

    try:
        analysis = tabulate_election(path, content, tiebreaker)
    except AnalysisError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(render_summary(analysis.result))

    if not ns.no_audit:
        try:
            written = write_audit_file(analysis.result, ns.audit)
        except OSError as e:
            print(f"Could not write audit file {ns.audit}: {e}", file=sys.stderr)
            return 1
        if not ns.quiet:
            print(f"Audit file written to {written}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
