"""
Shared pytest fixtures for dotsgame tests.

Game state fixtures are function-scoped so every test mutates its own
board. Positions are always 1-based ``(row, column)`` tuples.
"""

from pathlib import Path
import sys
from typing import Callable, List, Optional, Tuple

import pytest


# =============================================================================
# PROMETHEUS REGISTRY FIX
# =============================================================================
# Metrics register at import time. If a module is imported twice under
# different paths the second registration would fail the whole collection.


def _patch_prometheus_registry():
    """Make re-registration of identical metrics a no-op instead of an error."""
    try:
        from prometheus_client.registry import CollectorRegistry

        _original_register = CollectorRegistry.register

        def _safe_register(self, collector):
            """Register collector, ignoring duplicates."""
            try:
                return _original_register(self, collector)
            except ValueError as e:
                if "Duplicated timeseries" not in str(e):
                    raise

        # Only patch once
        if not getattr(CollectorRegistry, '_patched_for_tests', False):
            CollectorRegistry.register = _safe_register
            CollectorRegistry._patched_for_tests = True

    except ImportError:
        # prometheus_client not installed, no patching needed
        pass


_patch_prometheus_registry()

# Allow running pytest from a checkout without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotsgame.ai.base import BaseAI
from dotsgame.ai.capture_strategy import CaptureStrategy
from dotsgame.board_manager import BoardManager
from dotsgame.game_engine import GameEngine
from dotsgame.models import AIConfig, Dot, DotColor, GameConfig, GameState

Position = Tuple[int, int]


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def game_factory() -> Callable[..., GameState]:
    """Factory for fresh games with RED and BLACK as players."""

    def _create_game(
        size: int = 7,
        current_player: DotColor = DotColor.RED,
        ai_color: Optional[DotColor] = None,
    ) -> GameState:
        config = GameConfig(
            board_size=size,
            players=[DotColor.RED, DotColor.BLACK],
            ai_color=ai_color,
            first_player=current_player,
        )
        return GameEngine.create_game(config, game_id="test-game")

    return _create_game


@pytest.fixture
def place() -> Callable[..., List[Dot]]:
    """Color dots directly, without touching turns.

    Player colors are recorded in ``state.owned`` as if captured; gray
    dots are marked encircled like dead markers left by a loop.
    """

    def _place(state: GameState, color: DotColor, *positions: Position) -> List[Dot]:
        dots = []
        for row, column in positions:
            dot = BoardManager.get_dot(state.board, row, column)
            dot.color = color
            if color.is_player_color:
                state.owned.setdefault(color, []).append(dot.id)
            elif color == DotColor.GRAY:
                dot.encircled = True
            dots.append(dot)
        return dots

    return _place


@pytest.fixture
def dots_at() -> Callable[..., List[Dot]]:
    """Look up several dots of a state by position."""

    def _dots_at(state: GameState, *positions: Position) -> List[Dot]:
        return [BoardManager.get_dot(state.board, r, c) for r, c in positions]

    return _dots_at


# =============================================================================
# AI FIXTURES
# =============================================================================


class StubCaptureStrategy(CaptureStrategy):
    """Capture strategy that returns a fixed position while it is free."""

    name = "stub"

    def __init__(self, position: Optional[Position] = None):
        self.position = position
        self.observed: List[int] = []

    def observe_capture(self, game_state, dot):
        self.observed.append(dot.id)

    def pick(self, game_state):
        if self.position is None:
            return None
        dot = BoardManager.get_dot(game_state.board, *self.position)
        return dot if dot.is_free else None


class ScriptedAI(BaseAI):
    """AI that replays a fixed action (or ``None``) on every call."""

    ai_type = "scripted"

    def __init__(self, color, config, action=None):
        super().__init__(color, config)
        self.action = action
        self.calls = 0

    def select_action(self, game_state):
        self.calls += 1
        return self.action


@pytest.fixture
def stub_strategy() -> Callable[..., StubCaptureStrategy]:
    return StubCaptureStrategy


@pytest.fixture
def scripted_ai() -> Callable[..., ScriptedAI]:
    return ScriptedAI


@pytest.fixture
def ai_config_deterministic() -> AIConfig:
    """Heuristic play without random moves."""
    return AIConfig(difficulty=8, randomness=0.0, rng_seed=42)


@pytest.fixture
def ai_config_random() -> AIConfig:
    """Every move is a random capture."""
    return AIConfig(difficulty=1, randomness=1.0, rng_seed=7)
