"""AI Factory for the Dots game.

All AI creation should go through this factory so configuration is applied
consistently.

Usage:
    from dotsgame.ai.factory import AIFactory

    # Difficulty picks the type and the amount of random play
    ai = AIFactory.create_from_difficulty(difficulty=5, color=DotColor.BLACK)

    # Explicit type, seeded config
    ai = AIFactory.create(AIType.HEURISTIC, DotColor.BLACK, AIConfig(rng_seed=7))

    # Scripted or experimental players
    AIFactory.register("scripted", ScriptedAI)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..models import AIConfig, AIType, DotColor

if TYPE_CHECKING:
    from .base import BaseAI

logger = logging.getLogger(__name__)

# Difficulty 1-2 plays randomly; above that the heuristic opponent plays
# with less and less random noise.
RANDOMNESS_BY_DIFFICULTY: dict[int, float] = {
    1: 1.0,
    2: 1.0,
    3: 0.5,
    4: 0.3,
    5: 0.2,
    6: 0.1,
    7: 0.05,
    8: 0.0,
    9: 0.0,
    10: 0.0,
}


def select_ai_type(difficulty: int) -> AIType:
    return AIType.RANDOM if difficulty <= 2 else AIType.HEURISTIC


def get_randomness_for_difficulty(difficulty: int) -> float:
    return RANDOMNESS_BY_DIFFICULTY.get(difficulty, 0.0)


class AIFactory:
    """Single entry point for building automated players.

    Built-in types are resolved lazily; custom implementations can be
    registered at runtime under a string identifier.
    """

    # identifier -> constructor taking (color, config)
    _custom_registry: dict[str, Callable[..., BaseAI]] = {}

    @classmethod
    def register(
        cls,
        identifier: str,
        constructor: Callable[..., BaseAI],
    ) -> None:
        """Make ``constructor`` available to :meth:`create_custom`.

        Args:
            identifier: Name passed to ``create_custom`` later
            constructor: Called as ``constructor(color, config)``
        """
        if identifier in cls._custom_registry:
            logger.warning(f"Overwriting existing custom AI: {identifier}")
        cls._custom_registry[identifier] = constructor
        logger.debug(f"Registered custom AI: {identifier}")

    @classmethod
    def unregister(cls, identifier: str) -> bool:
        if identifier in cls._custom_registry:
            del cls._custom_registry[identifier]
            logger.debug(f"Unregistered custom AI: {identifier}")
            return True
        return False

    @classmethod
    def _get_ai_class(cls, ai_type: AIType) -> type[BaseAI]:
        """Get the AI class for a given type.

        Raises:
            ValueError: ``ai_type`` has no built-in implementation
        """
        if ai_type == AIType.RANDOM:
            from .random_ai import RandomAI
            return RandomAI
        if ai_type == AIType.HEURISTIC:
            from .heuristic_ai import HeuristicAI
            return HeuristicAI
        raise ValueError(f"Unsupported AI type: {ai_type}")

    @classmethod
    def create(
        cls,
        ai_type: AIType,
        color: DotColor,
        config: AIConfig,
        **kwargs: Any,
    ) -> BaseAI:
        """Build a built-in AI of ``ai_type`` for ``color``.

        Extra keyword arguments go to the AI constructor (for example a
        ``capture_strategy`` for :class:`HeuristicAI`).
        """
        ai_class = cls._get_ai_class(ai_type)
        return ai_class(color, config, **kwargs)

    @classmethod
    def create_from_difficulty(
        cls,
        difficulty: int,
        color: DotColor,
        *,
        rng_seed: int | None = None,
    ) -> BaseAI:
        config = AIConfig(
            difficulty=difficulty,
            randomness=get_randomness_for_difficulty(difficulty),
            rng_seed=rng_seed,
        )
        return cls.create(select_ai_type(difficulty), color, config)

    @classmethod
    def create_custom(cls, identifier: str, color: DotColor, config: AIConfig) -> BaseAI:
        if identifier not in cls._custom_registry:
            raise ValueError(
                f"Unknown custom AI: {identifier}. "
                f"Available: {list(cls._custom_registry.keys())}"
            )
        return cls._custom_registry[identifier](color, config)
