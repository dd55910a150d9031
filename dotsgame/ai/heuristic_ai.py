"""
Heuristic AI implementation for the Dots game.

Each turn the agent looks for the most endangered group on both sides
(see :mod:`dotsgame.threats`) and acts in this order:

1. an opponent group with no breakouts left is encircled;
2. if the opponent has a group in danger and so do we (one breakout), we
   defend when our group is at least as large, otherwise we attack;
3. an opponent group in danger is sealed by taking its last breakout;
4. our own group with one breakout is saved by taking that breakout;
5. otherwise the :class:`CaptureStrategy` chooses a dot (by default the
   neighbour-priority heuristic, then a seeded random pick).

A group whose perimeter cannot be turned into a loop is remembered and not
targeted again; the failure is logged, counted and kept on
``last_failure`` while the turn falls back to a capture.
"""

from __future__ import annotations

import logging

from ..clustering import Group
from ..errors import AIFallbackError, NoEnclosingPathError
from ..game_engine import GameEngine
from ..metrics import AI_TURN_FAILURES
from ..models import AIConfig, Dot, DotColor, GameState
from ..threats import find_most_endangered
from .base import ActionKind, AIAction, BaseAI
from .capture_strategy import (
    CaptureStrategy,
    ChainedCaptureStrategy,
    PriorityCaptureStrategy,
    RandomCaptureStrategy,
)
from .encirclement import build_enclosing_path

logger = logging.getLogger(__name__)


class HeuristicAI(BaseAI):
    """AI that attacks and defends endangered groups."""

    ai_type = "heuristic"

    def __init__(
        self,
        color: DotColor,
        config: AIConfig,
        capture_strategy: CaptureStrategy | None = None,
    ):
        super().__init__(color, config)
        self.capture_strategy = capture_strategy or ChainedCaptureStrategy(
            PriorityCaptureStrategy(color),
            RandomCaptureStrategy(self.rng),
        )
        self.unenclosable: set[frozenset[int]] = set()

    def observe_capture(self, game_state: GameState, dot: Dot) -> None:
        self.capture_strategy.observe_capture(game_state, dot)

    def most_endangered(self, game_state: GameState, color: DotColor) -> Group | None:
        """Largest endangered group of ``color`` with fewer than 2 breakouts.

        Groups already known to be unenclosable are skipped.
        """
        return find_most_endangered(
            game_state.board,
            GameEngine.groups_for(game_state, color),
            exclude=self.unenclosable,
        )

    def select_action(self, game_state: GameState) -> AIAction | None:
        self.last_failure = None
        if self.should_pick_random_move():
            dot = self.get_random_element(self.get_free_dots(game_state))
            return self.capture(dot, "randomness") if dot is not None else None

        opponent = game_state.opponent_of(self.color)
        player_in_danger = self.most_endangered(game_state, opponent)
        ai_in_danger = self.most_endangered(game_state, self.color)

        if player_in_danger is not None:
            if not player_in_danger.breakouts:
                action = self._encircle(game_state, player_in_danger)
                if action is not None:
                    return action
            elif ai_in_danger is not None and len(ai_in_danger.breakouts) == 1:
                if len(ai_in_danger) >= len(player_in_danger):
                    return self.capture(ai_in_danger.breakouts[-1], "defend")
                return self.capture(player_in_danger.breakouts[-1], "seal")
            else:
                return self.capture(player_in_danger.breakouts[-1], "seal")
        if ai_in_danger is not None and len(ai_in_danger.breakouts) == 1:
            return self.capture(ai_in_danger.breakouts[-1], "defend")

        dot = self.capture_strategy.pick(game_state)
        if dot is None:
            return None
        return self.capture(dot, self.capture_strategy.name)

    def _encircle(self, game_state: GameState, target: Group) -> AIAction | None:
        try:
            path = build_enclosing_path(game_state.board, target, self.color)
        except NoEnclosingPathError as e:
            self.unenclosable.add(target.dot_ids)
            self.last_failure = AIFallbackError(
                "Could not encircle endangered group",
                original_error=e,
                fallback_method=self.capture_strategy.name,
            )
            AI_TURN_FAILURES.labels(ai_type=self.ai_type, reason=e.code).inc()
            logger.warning(f"{self.last_failure}")
            return None
        logger.debug(
            "encircling %d-dot group with a %d-dot loop",
            len(target), len(path) - 1,
        )
        self.move_count += 1
        return AIAction(
            kind=ActionKind.ENCIRCLE,
            path=path,
            target=target,
            reason="encircle",
        )

    def get_evaluation_breakdown(self, game_state: GameState) -> dict[str, float]:
        opponent = game_state.opponent_of(self.color)
        own = self.most_endangered(game_state, self.color)
        theirs = self.most_endangered(game_state, opponent)
        return {
            "total": self.evaluate_position(game_state),
            "own_endangered": float(len(own)) if own is not None else 0.0,
            "opponent_endangered": float(len(theirs)) if theirs is not None else 0.0,
        }
