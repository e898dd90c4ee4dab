"""Voting systems for tabulating elections."""

from votecount.tiebreak import TieBreaker

from .base import VotingSystem

# Voting system registry - import systems here to register them
_voting_systems: dict[str, type[VotingSystem]] = {}


def register_voting_system(system_class: type[VotingSystem]) -> type[VotingSystem]:
    """Decorator to register a voting system class under its protocol tag."""
    _voting_systems[system_class.PROTOCOL] = system_class
    return system_class


def get_voting_system(protocol: str, tiebreaker: TieBreaker | None = None) -> VotingSystem | None:
    """Return an instance of the system registered for `protocol`, or None."""
    system_class = _voting_systems.get(protocol)
    if system_class is None:
        return None
    return system_class(tiebreaker)


def get_all_voting_systems() -> list[VotingSystem]:
    """Return instances of all registered voting systems."""
    return [system_class() for system_class in _voting_systems.values()]
