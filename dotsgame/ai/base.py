"""
Base AI Player class for the Dots game
Abstract base class that all AI implementations inherit from
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any
import random

from ..board_manager import BoardManager
from ..clustering import Group
from ..errors import AIFallbackError
from ..models import AIConfig, Dot, DotColor, GameState


def derive_seed(config: AIConfig, color: DotColor) -> int:
    """
    Derive a deterministic RNG seed when ``AIConfig.rng_seed`` is not set.

    Mixes the difficulty and the AI's color into a 32-bit value so two
    opponents with the same difficulty still draw different sequences.
    """
    color_index = list(DotColor).index(color)
    base = (config.difficulty * 1_000_003) ^ (color_index * 97_911)
    return int(base & 0xFFFFFFFF)


class ActionKind(str, Enum):
    CAPTURE = "capture"
    ENCIRCLE = "encircle"


@dataclass(frozen=True)
class AIAction:
    """One decision of an automated player.

    ``path`` is set for encirclements and is closed (first dot repeated
    last); ``target`` is the enemy group it surrounds.
    """
    kind: ActionKind
    dot: Optional[Dot] = None
    path: List[Dot] = field(default_factory=list)
    target: Optional[Group] = None
    reason: str = ""


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    ai_type: str = "base"

    def __init__(self, color: DotColor, config: AIConfig):
        """
        Initialize AI player

        Args:
            color: The color this AI plays
            config: AI configuration settings
        """
        self.color = color
        self.config = config
        self.move_count = 0
        self.last_failure: Optional[AIFallbackError] = None

        # Per-instance RNG used for all stochastic behaviour. An explicit
        # rng_seed on AIConfig wins; otherwise the seed is derived from the
        # config so runs stay reproducible.
        if self.config.rng_seed is not None:
            self.rng_seed: int = int(self.config.rng_seed)
        else:
            self.rng_seed = derive_seed(self.config, self.color)
        self.rng: random.Random = random.Random(self.rng_seed)

    @abstractmethod
    def select_action(self, game_state: GameState) -> Optional[AIAction]:
        """
        Select the next action for the current game state

        Args:
            game_state: Current game state

        Returns:
            Selected action or None if nothing can be played
        """
        pass

    def observe_capture(self, game_state: GameState, dot: Dot) -> None:
        """Hook called after any player captures ``dot``."""
        _ = game_state, dot

    def evaluate_position(self, game_state: GameState) -> float:
        """
        Evaluate the current position from this AI's perspective

        Returns:
            Own points minus opponent points
        """
        opponent = game_state.opponent_of(self.color)
        return float(
            game_state.points.get(self.color, 0)
            - game_state.points.get(opponent, 0)
        )

    def get_evaluation_breakdown(
        self, game_state: GameState
    ) -> Dict[str, float]:
        return {
            "total": self.evaluate_position(game_state)
        }

    def get_free_dots(self, game_state: GameState) -> List[Dot]:
        return BoardManager.free_dots(game_state.board)

    def should_pick_random_move(self) -> bool:
        """
        Determine if AI should pick a random move based on randomness setting

        Returns:
            True if should pick random move
        """
        if self.config.randomness is None or self.config.randomness == 0:
            return False
        return self.rng.random() < self.config.randomness

    def get_random_element(self, items: List[Any]) -> Optional[Any]:
        """
        Get random element from list using the per-instance RNG.

        Returns:
            Random item or None if list is empty
        """
        if not items:
            return None
        return self.rng.choice(items)

    def capture(self, dot: Dot, reason: str) -> AIAction:
        self.move_count += 1
        return AIAction(kind=ActionKind.CAPTURE, dot=dot, reason=reason)

    def __repr__(self) -> str:
        """String representation of AI"""
        return (
            f"{self.__class__.__name__}"
            f"(color={self.color.value}, "
            f"difficulty={self.config.difficulty})"
        )
