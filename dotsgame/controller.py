"""Turn flow around :class:`GameEngine` and the automated opponent.

The controller is what an input layer talks to. It maps a selected dot to
the right engine operation, and whenever the turn lands on the AI's color
it runs the AI synchronously until the turn is handed back. All public
entry points take one re-entrant lock, so a UI thread and a background
caller can never interleave writes to the same game.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from enum import Enum

from .ai.base import ActionKind, AIAction, BaseAI
from .ai.encirclement import execute_encirclement
from .ai.factory import AIFactory
from .errors import (
    AlreadyEncircledError,
    ConfigurationError,
    DotsGameError,
    InvalidConnectionError,
    InvalidMoveError,
)
from .game_engine import GameEngine
from .metrics import AI_TURN_FAILURES, AI_TURN_LATENCY
from .models import (
    AIConfig,
    AIType,
    ConnectOutcome,
    Dot,
    DotColor,
    GameConfig,
    GameState,
)

logger = logging.getLogger(__name__)

# Cap on actions the AI may take in one turn. Closing a loop keeps the
# turn, so without a cap a run of encirclements could go on indefinitely.
MAX_AI_ACTIONS = int(os.getenv('DOTS_MAX_AI_ACTIONS', '8'))


class SelectionOutcome(str, Enum):
    CAPTURED = "captured"
    STARTED = "started"
    CONTINUE = "continue"
    CLOSED = "closed"


@dataclass
class AITurnReport:
    """What the AI did during one of its turns."""
    actions: list[AIAction] = field(default_factory=list)
    failures: list[DotsGameError] = field(default_factory=list)
    points: int = 0
    duration_s: float = 0.0

    @property
    def failed(self) -> bool:
        return bool(self.failures)


class GameController:
    """Owns one game and, optionally, the AI playing one of its colors."""

    def __init__(
        self,
        config: GameConfig,
        ai: BaseAI | None = None,
        game_id: str | None = None,
    ):
        if ai is not None and config.ai_color is None:
            raise ConfigurationError("An AI was given but no ai_color is configured")
        if ai is not None and ai.color != config.ai_color:
            raise ConfigurationError(
                "AI color does not match ai_color",
                context={"ai": ai.color.value, "ai_color": config.ai_color.value},
            )
        if ai is None and config.ai_color is not None:
            ai = AIFactory.create(AIType.HEURISTIC, config.ai_color, AIConfig())

        self.config = config
        self.ai = ai
        self.state: GameState = GameEngine.create_game(config, game_id)
        self.last_ai_report: AITurnReport | None = None
        self._lock = threading.RLock()

    def start(self) -> AITurnReport | None:
        """Let the AI move first if the game opens on its turn."""
        with self._lock:
            if GameEngine.is_ai_turn(self.state):
                return self.run_ai_turn()
            return None

    def get_dot(self, row: int, column: int) -> Dot:
        return GameEngine.get_dot(self.state, row, column)

    # ------------------------------------------------------------------
    # Input layer entry points
    # ------------------------------------------------------------------

    def on_dot_selected(self, dot: Dot) -> SelectionOutcome:
        """Apply the action a click on ``dot`` means in the current state.

        Raises:
            AlreadyEncircledError: ``dot`` was resolved by a loop.
            InvalidConnectionError: the path could not reach ``dot``; it
                was broken and the turn passed (the AI has already replied).
            InvalidMoveError: ``dot`` belongs to the opponent.
        """
        with self._lock:
            if dot.encircled:
                raise AlreadyEncircledError(
                    "You cannot connect encircled dots", position=dot.position
                )
            if self.state.encircling:
                try:
                    outcome = GameEngine.extend_encirclement(self.state, dot)
                except InvalidConnectionError:
                    # the path was broken and the turn passed
                    if GameEngine.is_ai_turn(self.state):
                        self.run_ai_turn()
                    raise
                if outcome == ConnectOutcome.CLOSED:
                    return SelectionOutcome.CLOSED
                return SelectionOutcome.CONTINUE
            if dot.color == DotColor.NEUTRAL:
                self.on_player_intent_to_capture(dot)
                return SelectionOutcome.CAPTURED
            if dot.color == self.state.current_player:
                GameEngine.start_encirclement(self.state, dot)
                return SelectionOutcome.STARTED
            raise InvalidMoveError(
                "That dot belongs to your opponent",
                context={"position": dot.position, "color": dot.color.value},
            )

    def on_player_intent_to_capture(self, dot: Dot) -> DotColor:
        """Capture ``dot`` for the current player, then run the AI if due."""
        with self._lock:
            owner, ai_turn = GameEngine.capture_dot(self.state, dot)
            self._observe(dot)
            if ai_turn:
                self.run_ai_turn()
            return owner

    def on_turn_advance(self) -> None:
        """Pass the turn, abandoning any path in progress."""
        with self._lock:
            GameEngine.require_active(self.state)
            if self.state.encircling:
                GameEngine.break_encirclement(self.state, reason="turn_advance")
            else:
                GameEngine.next_turn(self.state)
            if GameEngine.is_ai_turn(self.state):
                self.run_ai_turn()

    def break_encirclement(self) -> None:
        with self._lock:
            GameEngine.require_active(self.state)
            GameEngine.break_encirclement(self.state)
            if GameEngine.is_ai_turn(self.state):
                self.run_ai_turn()

    def score_for_player(self, color: DotColor) -> int:
        return GameEngine.score_for_player(self.state, color)

    # ------------------------------------------------------------------
    # Automated turns
    # ------------------------------------------------------------------

    def _observe(self, dot: Dot) -> None:
        if self.ai is not None:
            self.ai.observe_capture(self.state, dot)

    def apply_action(self, action: AIAction) -> int:
        """Play ``action`` for the current player and return points won.

        A capture passes the turn; an encirclement does not.
        """
        with self._lock:
            if action.kind == ActionKind.CAPTURE:
                GameEngine.capture_dot(self.state, action.dot)
                self._observe(action.dot)
                return 0
            return execute_encirclement(self.state, action.path)

    def run_ai_turn(self) -> AITurnReport:
        """Let the AI act until the turn leaves its color.

        Failed actions are logged, counted and reported; they never leave
        the turn stuck on the AI.
        """
        with self._lock:
            report = AITurnReport()
            started = time.perf_counter()
            ai = self.ai
            while GameEngine.is_ai_turn(self.state):
                if len(report.actions) >= MAX_AI_ACTIONS:
                    logger.warning(
                        "AI reached %d actions in one turn; passing", MAX_AI_ACTIONS
                    )
                    GameEngine.next_turn(self.state)
                    break
                action = ai.select_action(self.state)
                failure = ai.last_failure
                if failure is not None:
                    report.failures.append(failure)
                if action is None:
                    logger.info("AI has nothing to play; passing")
                    GameEngine.next_turn(self.state)
                    break
                report.actions.append(action)
                try:
                    report.points += self.apply_action(action)
                except DotsGameError as e:
                    report.failures.append(e)
                    AI_TURN_FAILURES.labels(ai_type=ai.ai_type, reason=e.code).inc()
                    logger.warning(f"AI action {action.kind.value} failed: {e}")
                    if self.state.encircling:
                        GameEngine.break_encirclement(self.state, reason="ai_failure")
                    elif GameEngine.is_ai_turn(self.state):
                        GameEngine.next_turn(self.state)
                    break

            report.duration_s = time.perf_counter() - started
            AI_TURN_LATENCY.labels(ai_type=ai.ai_type).observe(report.duration_s)
            self.last_ai_report = report
            return report
