"""Capture strategies used when no group needs attacking or defending.

A strategy answers one question: which free dot should be captured next?
:class:`HeuristicAI` takes any :class:`CaptureStrategy`, so tests can plug in
a deterministic stand-in instead of the default priority-then-random chain.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod

from ..board_manager import BoardManager
from ..models import Dot, DotColor, GameState

logger = logging.getLogger(__name__)


class CaptureStrategy(ABC):
    """Chooses a free dot to capture."""

    name: str = "strategy"

    def observe_capture(self, game_state: GameState, dot: Dot) -> None:
        """Hook called after any player captures ``dot``."""
        _ = game_state, dot

    @abstractmethod
    def pick(self, game_state: GameState) -> Dot | None:
        """Return a free dot, or ``None`` to defer to another strategy."""


class PriorityCaptureStrategy(CaptureStrategy):
    """Prefer neutral dots next to many opponent captures.

    Each dot the opponent captures adds one to the priority of every
    neutral dot around it. The highest priority free dot wins; among equal
    priorities the one prioritised first wins.
    """

    name = "priority"

    def __init__(self, color: DotColor):
        self.color = color
        self.priorities: dict[int, int] = {}

    def observe_capture(self, game_state: GameState, dot: Dot) -> None:
        self.priorities.pop(dot.id, None)
        if dot.color == self.color:
            return
        for neighbour in BoardManager.neighbours_of(game_state.board, dot):
            if neighbour.color == DotColor.NEUTRAL:
                self.priorities[neighbour.id] = self.priorities.get(neighbour.id, 0) + 1

    def pick(self, game_state: GameState) -> Dot | None:
        result: Dot | None = None
        highest = 0
        for dot_id, priority in list(self.priorities.items()):
            dot = BoardManager.dot_by_id(game_state.board, dot_id)
            if not dot.is_free:
                del self.priorities[dot_id]
                continue
            if priority > highest:
                highest = priority
                result = dot
        if result is not None:
            logger.debug("priority pick %s (priority %d)", result.position, highest)
        return result


class RandomCaptureStrategy(CaptureStrategy):
    """Pick any free dot with a seeded RNG."""

    name = "random"

    def __init__(self, rng: random.Random):
        self.rng = rng

    def pick(self, game_state: GameState) -> Dot | None:
        free = BoardManager.free_dots(game_state.board)
        if not free:
            return None
        return self.rng.choice(free)


class ChainedCaptureStrategy(CaptureStrategy):
    """Ask each strategy in turn until one picks a dot."""

    def __init__(self, *strategies: CaptureStrategy):
        self.strategies = list(strategies)
        self.name = "+".join(s.name for s in self.strategies)

    def observe_capture(self, game_state: GameState, dot: Dot) -> None:
        for strategy in self.strategies:
            strategy.observe_capture(game_state, dot)

    def pick(self, game_state: GameState) -> Dot | None:
        for strategy in self.strategies:
            dot = strategy.pick(game_state)
            if dot is not None:
                return dot
        return None
