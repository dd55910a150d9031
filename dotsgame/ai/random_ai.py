"""Random AI implementation for the Dots game.

This agent captures uniformly random free dots using the per-instance RNG
on the :class:`BaseAI`. It never draws encirclements and is intended for
testing, baselines and the lowest difficulties.
"""

from __future__ import annotations

from ..models import GameState
from .base import AIAction, BaseAI


class RandomAI(BaseAI):
    """AI that captures random free dots."""

    ai_type = "random"

    def select_action(self, game_state: GameState) -> AIAction | None:
        """Select a random free dot to capture.

        Returns:
            A capture action or ``None`` if the board is full.
        """
        dot = self.get_random_element(self.get_free_dots(game_state))
        if dot is None:
            return None
        return self.capture(dot, "random")
