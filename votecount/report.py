"""On-screen rendering of tabulation results."""

from votecount.models import TabulationResult


def format_percent(part: int, whole: int) -> str:
    """Format part/whole as a percentage with two decimals ("0.00" if whole is 0)."""
    if whole <= 0:
        return "0.00"
    return f"{part / whole * 100:.2f}"


def format_table(headers: list[str], rows: list[list]) -> list[str]:
    """Lay out rows under headers in left-aligned, padded columns."""
    cells = [[str(h) for h in headers]] + [[str(v) for v in row] for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]
    return [
        "  ".join(value.ljust(width) for value, width in zip(row, widths)).rstrip()
        for row in cells
    ]


def render_summary(result: TabulationResult) -> str:
    """Render the final result table for display."""
    if result.protocol == "IR":
        lines = _render_ir(result)
    elif result.protocol == "OPL":
        lines = _render_opl(result)
    elif result.protocol == "MPO":
        lines = _render_mpo(result)
    else:
        raise ValueError(f"Cannot render results for protocol {result.protocol!r}")
    return "\n".join(lines) + "\n"


def _render_ir(result: TabulationResult) -> list[str]:
    counted = result.details.get("ballots_remaining", result.num_ballots)
    rows = []
    for c in result.candidates:
        if c.eliminated:
            rows.append([c.display_name, 0, "0.00 (Eliminated)"])
        else:
            rows.append([c.display_name, c.votes, format_percent(c.votes, counted)])

    lines = [f"{result.system_name} (IR)", ""]
    lines += format_table(["Candidate & Party", "Number of Votes", "% of Votes Won"], rows)
    lines.append("")

    winner = result.get_candidate(result.winner) if result.winner else None
    if winner is None:
        lines.append("No candidate could be declared the winner.")
    else:
        lines.append(
            f"Winning candidate is {winner.name} from the {winner.party} party "
            f"with {winner.votes} votes."
        )
    return lines


def _render_opl(result: TabulationResult) -> list[str]:
    rows = [
        [
            p.name,
            p.initial_votes,
            p.seats,
            f"{format_percent(p.initial_votes, result.num_ballots)}"
            f"/{format_percent(p.seats, result.num_seats)}",
        ]
        for p in result.parties
    ]
    lines = [f"{result.system_name} (OPL)", ""]
    lines += format_table(
        ["Party", "Number of Votes", "Number of Seats", "% of Votes / % of Seats"], rows,
    )
    lines.append("")

    party = result.get_party(result.details["winning_party"])
    lines.append(
        f"The {party.name} party won the election with {party.initial_votes} votes "
        f"and {party.seats} seat(s)."
    )
    lines.append("")
    lines.append("Candidates of the winning party:")
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


def _render_mpo(result: TabulationResult) -> list[str]:
    rows = [
        [
            c.display_name,
            c.votes,
            c.seats,
            format_percent(c.votes, result.num_ballots),
            format_percent(c.seats, result.num_seats),
        ]
        for c in result.candidates
    ]
    lines = [f"{result.system_name} (MPO)", ""]
    lines += format_table(
        ["Candidate & Party", "Number of Votes", "Seats Won", "% of Votes", "% of Seats"],
        rows,
    )
    lines.append("")
    lines.append(f"{len(result.winners)} candidate(s) won seats:")
    for name in result.winners:
        lines.append(f"  {result.get_candidate(name).display_name}")
    return lines
