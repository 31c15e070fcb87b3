"""Difficulty profiles for the computer opponent.

The heuristic itself is identical at every level; a profile only changes
how many of the top-scored candidates the selector samples from.
"""

from dataclasses import dataclass


@dataclass
class DifficultyProfile:
    name: str
    label: str              # display label shown by the UI
    candidate_pool: int     # sample uniformly among this many best moves


DIFFICULTY_PROFILES: dict[str, DifficultyProfile] = {
    "easy":   DifficultyProfile("easy",   "Easy",   5),
    "medium": DifficultyProfile("medium", "Medium", 3),
    "hard":   DifficultyProfile("hard",   "Hard",   2),
}

DEFAULT_DIFFICULTY = "medium"


def get_profile(name: str | None) -> DifficultyProfile:
    """Look up a profile by name (case-insensitive), falling back to the default."""
    if name is None:
        return DIFFICULTY_PROFILES[DEFAULT_DIFFICULTY]
    return DIFFICULTY_PROFILES.get(name.lower(), DIFFICULTY_PROFILES[DEFAULT_DIFFICULTY])
