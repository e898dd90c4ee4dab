"""Audit trail: a step-by-step account of how a tabulation reached its result."""

import logging
from pathlib import Path

from votecount.models import TabulationResult, TieRecord
from votecount.report import format_percent, format_table

_log = logging.getLogger(__name__)

DEFAULT_AUDIT_PATH = "audit_file.txt"

PROTOCOL_BANNERS = {
    "IR": "Instant Runoff (IR)",
    "OPL": "Open Party List (OPL)",
    "MPO": "Multiple Popularity Only (MPO)",
}

TIE_CONTEXTS = {
    "winner": "Remaining candidates tied",
    "elimination": "Candidates tied for the lowest votes",
    "remainder": "Parties tied for the highest remaining votes",
    "party": "Parties tied for the most seats",
    "candidate": "Candidates of the winning party tied for the most votes",
    "seat": "Candidates tied with the same number of votes",
}


class AuditWriter:
    """Builds the audit text for a TabulationResult."""

    def render(self, result: TabulationResult) -> str:
        banner = PROTOCOL_BANNERS.get(result.protocol, result.protocol)
        lines = [f"Voting Protocol: {banner}", ""]

        if result.protocol == "IR":
            lines += self._render_ir(result)
        elif result.protocol == "OPL":
            lines += self._render_opl(result)
        elif result.protocol == "MPO":
            lines += self._render_mpo(result)
        else:
            raise ValueError(f"Cannot audit results for protocol {result.protocol!r}")

        return "\n".join(lines).rstrip() + "\n"

    @staticmethod
    def _tie_lines(tie: TieRecord) -> list[str]:
        heading = TIE_CONTEXTS.get(tie.context, f"Tie ({tie.context})")
        return [
            f"{heading}: {', '.join(tie.options)}",
            f"The winner of the tie-breaker is {tie.chosen}.",
        ]

    def _render_ir(self, result: TabulationResult) -> list[str]:
        details = result.details
        first_round = details["first_round"]
        counted = result.num_ballots - details["blank_ballots"]

        lines = [
            f"Ballots cast: {result.num_ballots}",
            f"Ballots without a first choice: {details['blank_ballots']}",
            "",
            "First round of vote calculations:",
            "",
        ]
        lines += format_table(
            ["Candidate & Party", "Number of Votes", "% of Votes Won"],
            [
                [c.display_name, first_round[c.name], format_percent(first_round[c.name], counted)]
                for c in result.candidates
            ],
        )
        lines.append("")

        for r in result.rounds:
            lines.append(f"Redistribution round {r.number}:")
            lines.append("")
            for name in r.zero_vote_eliminated:
                lines.append(f"Candidate {name} has been eliminated since they received 0 votes.")
            if r.tied_for_lowest:
                lines.append(f"Candidates tied for the lowest votes: {', '.join(r.tied_for_lowest)}")
                lines.append(f"The winner of the tie-breaker is {r.tie_survivor}.")
            lines.append(f"Eliminated this round: {', '.join(r.eliminated)}")
            lines.append(
                f"Exhausted ballots: {r.exhausted_ballots}; "
                f"ballots remaining: {r.ballots_remaining}"
            )
            lines.append("")

            rows = []
            for c in result.candidates:
                if c.name in r.votes:
                    rows.append([
                        c.display_name,
                        r.redistributed[c.name],
                        r.votes[c.name],
                        format_percent(r.votes[c.name], r.ballots_remaining),
                    ])
                else:
                    rows.append([c.display_name, 0, 0, "0.00 (Eliminated)"])
            lines += format_table(
                ["Candidate & Party", "Redistributed Votes", "Number of Votes", "% of Votes Won"],
                rows,
            )
            lines.append("")

        for tie in result.ties:
            if tie.context == "winner":
                lines += self._tie_lines(tie)
                lines.append("")

        lines.append("Final result of the election:")
        lines.append("")
        winner = result.get_candidate(result.winner) if result.winner else None
        if winner is None:
            lines.append("No candidate could be declared the winner.")
        else:
            lines.append(
                f"Winning candidate is {winner.name} from the {winner.party} party "
                f"with {winner.votes} of {details['ballots_remaining']} votes "
                f"({details['method'].replace('_', ' ')})."
            )
        return lines

    def _render_opl(self, result: TabulationResult) -> list[str]:
        lines = [
            f"Ballots cast: {result.num_ballots}",
            f"Seats: {result.num_seats}",
            f"Quota: {result.details['quota']}",
            "",
            "Statistics before seat allocation:",
            "",
        ]
        lines += format_table(
            ["Party", "Candidates", "Number of Votes"],
            [
                [p.name, ", ".join(c.name for c in p.candidates), p.initial_votes]
                for p in result.parties
            ],
        )
        lines.append("")

        for r in result.rounds:
            lines.append(f"Seat allocation round {r.number} ({r.method.replace('_', ' ')}):")
            lines.append("")
            if r.tie is not None:
                lines += self._tie_lines(r.tie)
                lines.append("")
            lines += format_table(
                ["Party", "Seats Awarded", "Remaining Votes", "Seats Allocated"],
                [
                    [p.name, r.seats_awarded[p.name], r.remaining_votes[p.name], r.seats[p.name]]
                    for p in result.parties
                ],
            )
            lines.append("")

        lines.append("Final result of the election:")
        lines.append("")
        lines += format_table(
            ["Party", "Number of Votes", "Number of Seats", "% of Votes / % of Seats"],
            [
                [
                    p.name,
                    p.initial_votes,
                    p.seats,
                    f"{format_percent(p.initial_votes, result.num_ballots)}"
                    f"/{format_percent(p.seats, result.num_seats)}",
                ]
                for p in result.parties
            ],
        )
        lines.append("")

        for tie in result.ties:
            if tie.context in ("party", "candidate"):
                lines += self._tie_lines(tie)
                lines.append("")

        party = result.get_party(result.details["winning_party"])
        lines.append(
            f"The {party.name} party won the election with {party.initial_votes} votes "
            f"and {party.seats} seat(s)."
        )
        lines.append("")
        lines += format_table(
            ["Candidate & Party", "Number of Votes", "% of Votes Won"],
            [
                [c.display_name, c.votes, format_percent(c.votes, result.num_ballots)]
                for c in party.candidates
            ],
        )
        lines.append("")
        winner = result.get_candidate(result.winner)
        lines.append(
            f"Winning candidate is {winner.name} from the {winner.party} party "
            f"with {winner.votes} votes."
        )
        return lines

    def _render_mpo(self, result: TabulationResult) -> list[str]:
        lines = [
            f"Ballots cast: {result.num_ballots}",
            f"Seats: {result.num_seats}",
            "",
            "Initial vote calculation results:",
            "",
        ]
        lines += format_table(
            ["Candidate & Party", "Number of Votes", "% of Total Votes"],
            [
                [c.display_name, c.votes, format_percent(c.votes, result.num_ballots)]
                for c in result.candidates
            ],
        )
        lines.append("")

        lines.append("Seat allocations:")
        lines.append("")
        for i, award in enumerate(result.rounds, start=1):
            if award.tie is not None:
                lines += self._tie_lines(award.tie)
            reason = {
                "higher_than_next": "more votes than the candidate after them",
                "tiebreak": "won the tie-breaker",
                "last_in_tie_group": "no longer tied with any other candidate",
                "trailing": "last remaining candidate with votes",
            }.get(award.method, award.method)
            lines.append(f"{i}. {award.candidate} ({award.votes} votes): {reason}")
        if not result.rounds:
            lines.append("No seats were allocated.")
        lines.append("")

        lines.append("Final result of the election:")
        lines.append("")
        lines += format_table(
            ["Candidate & Party", "Number of Votes", "Seats Won", "% of Votes", "% of Seats"],
            [
                [
                    c.display_name,
                    c.votes,
                    c.seats,
                    format_percent(c.votes, result.num_ballots),
                    format_percent(c.seats, result.num_seats),
                ]
                for c in result.candidates
            ],
        )
        lines.append("")
        lines.append("The following candidates won seats:")
        lines.append("")
        for name in result.winners:
            c = result.get_candidate(name)
            lines.append(f"{c.name} from the {c.party} party.")
        unfilled = result.details.get("seats_unfilled", 0)
        if unfilled:
            lines.append("")
            lines.append(f"{unfilled} seat(s) left unfilled: not enough candidates received votes.")
        return lines


def write_audit_file(result: TabulationResult, path: str | Path = DEFAULT_AUDIT_PATH) -> Path:
    """Write the audit trail for `result`, replacing any previous file at `path`."""
    path = Path(path)
    path.write_text(AuditWriter().render(result), encoding="utf-8")
    _log.info(f"Wrote audit file to {path}")
    return path
