"""Generate a synthetic election file for demos and load testing.

Candidate names come from Faker and ballots from a seeded random generator,
so the same arguments always produce the same file.

Usage:
    python scripts/generate_election.py IR -o ir.csv
    python scripts/generate_election.py OPL --candidates 6 --seats 3 --ballots 10000 -o opl.csv
    python scripts/generate_election.py MPO --seats 2 --seed 7 -o mpo.csv
"""

import argparse
import random
from pathlib import Path

from faker import Faker

SEED = 20260301

PARTIES = ["D", "R", "I", "L", "G"]


def generate_candidates(count: int, num_parties: int, seed: int) -> list[tuple[str, str]]:
    """Return `count` (name, party) pairs with unique Faker last names."""
    fake = Faker("en_US")
    Faker.seed(seed)
    parties = PARTIES[:num_parties]
    names = [fake.unique.last_name() for _ in range(count)]
    return [(name, parties[i % len(parties)]) for i, name in enumerate(names)]


def format_descriptor(protocol: str, candidates: list[tuple[str, str]]) -> str:
    if protocol == "MPO":
        return ", ".join(f"[{name}, {party}]" for name, party in candidates)
    return ", ".join(f"{name} ({party})" for name, party in candidates)


def generate_ranked_ballot(rng: random.Random, num_candidates: int) -> str:
    """A ballot ranking a random number of candidates in random order."""
    ranked = rng.sample(range(num_candidates), rng.randint(1, num_candidates))
    cells = [""] * num_candidates
    for rank, index in enumerate(ranked, start=1):
        cells[index] = str(rank)
    return ",".join(cells)


def generate_marked_ballot(rng: random.Random, weights: list[float]) -> str:
    """A ballot with a single mark, candidates picked in proportion to `weights`."""
    cells = [""] * len(weights)
    cells[rng.choices(range(len(weights)), weights=weights)[0]] = "1"
    return ",".join(cells)


def generate_election(protocol: str, num_candidates: int, num_seats: int,
                      num_ballots: int, num_parties: int, seed: int) -> str:
    """Return the text of a valid election file."""
    rng = random.Random(seed)
    candidates = generate_candidates(num_candidates, num_parties, seed)

    lines = [protocol, str(num_candidates), format_descriptor(protocol, candidates)]
    if protocol != "IR":
        lines.append(str(num_seats))
    lines.append(str(num_ballots))

    if protocol == "IR":
        lines += [generate_ranked_ballot(rng, num_candidates) for _ in range(num_ballots)]
    else:
        weights = [rng.random() for _ in range(num_candidates)]
        lines += [generate_marked_ballot(rng, weights) for _ in range(num_ballots)]

    return "\n".join(lines) + "\n"


def main():
    parser = argparse.ArgumentParser(
        description="Generate a synthetic election file")
    parser.add_argument("protocol", choices=["IR", "OPL", "MPO"], help="Voting protocol")
    parser.add_argument("--candidates", type=int, default=4,
                        help="Number of candidates (default: 4)")
    parser.add_argument("--seats", type=int, default=2,
                        help="Number of seats, OPL and MPO only (default: 2)")
    parser.add_argument("--ballots", type=int, default=100,
                        help="Number of ballots (default: 100)")
    parser.add_argument("--parties", type=int, default=3, choices=range(1, len(PARTIES) + 1),
                        help="Number of parties (default: 3)")
    parser.add_argument("--seed", type=int, default=SEED,
                        help=f"Random seed (default: {SEED})")
    parser.add_argument("-o", "--output", default="election.csv",
                        help="Output path (default: election.csv)")
    args = parser.parse_args()

    if args.candidates < 1:
        parser.error("--candidates must be at least 1")

    text = generate_election(args.protocol, args.candidates, args.seats,
                             args.ballots, args.parties, args.seed)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    print(f"Written {args.protocol} election with {args.ballots} ballots to {output_path}")


if __name__ == "__main__":
    main()
