"""
Streak Detection Module

Finds the longest run of chronologically consecutive matches that satisfy a
predicate (scored, won, unbeaten, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from functools import reduce
from typing import Callable, Iterable

from loguru import logger

from matchlog.models.match import Match, MatchResult

Predicate = Callable[[Match], bool]

PREDICATES: dict[str, Predicate] = {
    "scored": lambda m: m.goals >= 1,
    "scoreless": lambda m: m.goals == 0,
    "assisted": lambda m: m.assists >= 1,
    "win": lambda m: m.result == MatchResult.WIN,
    "loss": lambda m: m.result == MatchResult.LOSS,
    "unbeaten": lambda m: m.result in (MatchResult.WIN, MatchResult.DRAW),
}


@dataclass(frozen=True)
class Streak:
    """A run of consecutive matches."""

    length: int
    start_id: int
    end_id: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.length, self.start_id, self.end_id)


@dataclass(frozen=True)
class StreakState:
    """Fold state: the run in progress and the best run so far."""

    current_length: int = 0
    current_start: int | None = None
    best: Streak | None = None


def chronological(matches: Iterable[Match]) -> list[Match]:
    """
    Order matches by date, then identifier.

    Undated matches follow every dated match, in identifier order.
    """
    return sorted(
        matches,
        key=lambda m: (m.played_at is None, m.played_at or datetime.min, m.match_id),
    )


def _advance(predicate: Predicate) -> Callable[[StreakState, Match], StreakState]:
    """Build the fold step for a predicate."""

    def step(state: StreakState, match: Match) -> StreakState:
        if not predicate(match):
            return replace(state, current_length=0, current_start=None)

        start = state.current_start if state.current_length else match.match_id
        length = state.current_length + 1
        best = state.best
        # Strictly longer only, so the earliest of equal runs is kept
        if best is None or length > best.length:
            best = Streak(length=length, start_id=start, end_id=match.match_id)
        return StreakState(current_length=length, current_start=start, best=best)

    return step


class StreakFinder:
    """Longest-run search over a match snapshot."""

    def longest(self, matches: Iterable[Match], predicate: Predicate | str) -> Streak | None:
        """
        Longest run of consecutive matches satisfying a predicate.

        Args:
            matches: Matches in any order; they are sorted chronologically
            predicate: Callable or the name of a built-in predicate

        Returns:
            The earliest longest streak, or None when no match qualifies
        """
        if isinstance(predicate, str):
            if predicate not in PREDICATES:
                raise KeyError(f"Unknown streak predicate '{predicate}'")
            predicate = PREDICATES[predicate]

        state = reduce(_advance(predicate), chronological(matches), StreakState())
        if state.best is not None:
            logger.debug(
                f"Longest streak {state.best.length} "
                f"({state.best.start_id} -> {state.best.end_id})"
            )
        return state.best

    def all_longest(self, matches: Iterable[Match]) -> dict[str, Streak | None]:
        """Longest streak for every built-in predicate."""
        ordered = chronological(matches)
        return {name: self.longest(ordered, name) for name in PREDICATES}
