"""AI implementations for the Dots game.

    from dotsgame.ai import AIFactory

    ai = AIFactory.create_from_difficulty(difficulty=5, color=DotColor.BLACK)

- base.py: BaseAI abstract base class and AIAction
- factory.py: AIFactory for creating AI instances
- heuristic_ai.py: attacks/defends endangered groups, encircles sealed ones
- random_ai.py: random captures
- capture_strategy.py: pluggable "which dot next" strategies
- encirclement.py: builds and plays a closed loop around an enemy group
"""

from dotsgame.ai.base import ActionKind, AIAction, BaseAI
from dotsgame.ai.capture_strategy import (
    CaptureStrategy,
    ChainedCaptureStrategy,
    PriorityCaptureStrategy,
    RandomCaptureStrategy,
)
from dotsgame.ai.factory import AIFactory, get_randomness_for_difficulty, select_ai_type
from dotsgame.ai.heuristic_ai import HeuristicAI
from dotsgame.ai.random_ai import RandomAI

__all__ = [
    "AIAction",
    "AIFactory",
    "ActionKind",
    "BaseAI",
    "CaptureStrategy",
    "ChainedCaptureStrategy",
    "HeuristicAI",
    "PriorityCaptureStrategy",
    "RandomAI",
    "RandomCaptureStrategy",
    "get_randomness_for_difficulty",
    "select_ai_type",
]
