"""Dots: a two-player encirclement game on a square grid of dots.

Players take turns capturing neutral dots and drawing closed loops of
their own dots; enemy dots inside a closed loop are captured for a point.

    from dotsgame import GameConfig, GameController
    from dotsgame.models import DotColor

    controller = GameController(GameConfig(board_size=10, ai_color=DotColor.BLACK))
    controller.on_dot_selected(controller.get_dot(5, 5))

- models.py: pydantic state and configuration models
- board_manager.py: grid, neighbours and partner links
- geometry.py: point-in-polygon and loop helpers
- clustering.py / threats.py: group building and threat analysis
- game_engine.py: rules (captures, encirclements, turns, scoring)
- controller.py: input-facing turn flow and the automated opponent
- ai/: automated players
"""

from dotsgame.board_manager import BoardManager
from dotsgame.controller import AITurnReport, GameController, SelectionOutcome
from dotsgame.errors import DotsGameError
from dotsgame.game_engine import GameEngine
from dotsgame.models import (
    AIConfig,
    AIType,
    BoardState,
    Dot,
    DotColor,
    GameConfig,
    GameState,
    GameStatus,
)

__all__ = [
    "AIConfig",
    "AITurnReport",
    "AIType",
    "BoardManager",
    "BoardState",
    "Dot",
    "DotColor",
    "DotsGameError",
    "GameConfig",
    "GameController",
    "GameEngine",
    "GameState",
    "GameStatus",
    "SelectionOutcome",
]
