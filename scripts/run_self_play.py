#!/usr/bin/env python3
"""Play Dots games between two automated players and report the results.

RED is driven from this script through ``GameController.apply_action``;
BLACK is the controller's own opponent and answers every RED turn.

Usage:
    # One game between two heuristic players on a 12x12 board
    python scripts/run_self_play.py --board-size 12

    # Ten games, random RED against difficulty 8, JSON summary
    python scripts/run_self_play.py --games 10 --red-difficulty 1 \\
        --black-difficulty 8 --format json

    # Print the final board of every game
    python scripts/run_self_play.py --show-board -v
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from collections import Counter

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from dotsgame.ai.factory import AIFactory
from dotsgame.board_manager import BoardManager
from dotsgame.controller import GameController
from dotsgame.errors import DotsGameError
from dotsgame.game_engine import GameEngine
from dotsgame.models import DotColor, GameConfig, GameStatus

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def play_game(
    board_size: int,
    red_difficulty: int,
    black_difficulty: int,
    seed: int,
    max_turns: int,
) -> dict:
    """Play one game and return a summary dict."""
    config = GameConfig(board_size=board_size, ai_color=DotColor.BLACK)
    black = AIFactory.create_from_difficulty(black_difficulty, DotColor.BLACK, rng_seed=seed)
    red = AIFactory.create_from_difficulty(red_difficulty, DotColor.RED, rng_seed=seed + 1)
    controller = GameController(config, ai=black)
    state = controller.state
    failures = 0
    started = time.perf_counter()

    while state.game_status == GameStatus.ACTIVE and state.turn <= max_turns:
        if GameEngine.is_ai_turn(state):
            report = controller.run_ai_turn()
            failures += len(report.failures)
            for ai_action in report.actions:
                if ai_action.dot is not None:
                    red.observe_capture(state, ai_action.dot)
            continue

        action = red.select_action(state)
        if action is None:
            controller.on_turn_advance()
            continue
        try:
            controller.apply_action(action)
        except DotsGameError as e:
            failures += 1
            logger.warning(f"RED action failed: {e}")
            if state.encircling:
                GameEngine.break_encirclement(state, reason="ai_failure")
            elif state.current_player == DotColor.RED:
                GameEngine.next_turn(state)
            continue
        if action.dot is not None:
            red.observe_capture(state, action.dot)

    return {
        "game_id": state.id,
        "status": state.game_status.value,
        "turns": state.turn,
        "winner": state.winner.value if state.winner else None,
        "points": {color.value: points for color, points in state.points.items()},
        "encirclements": {
            color.value: len(paths) for color, paths in state.encirclements.items()
        },
        "failures": failures,
        "duration_s": round(time.perf_counter() - started, 3),
        "board": BoardManager.render_ascii(state.board),
    }


def main():
    parser = argparse.ArgumentParser(
        description="Dots self-play between two automated players",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--games", "-g", type=int, default=1, help="Number of games")
    parser.add_argument(
        "--board-size", "-s", type=int, default=10, help="Board side length"
    )
    parser.add_argument(
        "--red-difficulty", type=int, default=5, choices=range(1, 11),
        help="Difficulty of the RED player",
    )
    parser.add_argument(
        "--black-difficulty", type=int, default=5, choices=range(1, 11),
        help="Difficulty of the BLACK player",
    )
    parser.add_argument("--seed", type=int, default=0, help="Base RNG seed")
    parser.add_argument(
        "--max-turns", type=int, default=10_000,
        help="Stop a game after this many turns",
    )
    parser.add_argument(
        "--format", "-f", choices=["text", "json"], default="text",
        help="Output format",
    )
    parser.add_argument(
        "--show-board", action="store_true", help="Print the final board"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    results = []
    for index in range(args.games):
        result = play_game(
            args.board_size,
            args.red_difficulty,
            args.black_difficulty,
            seed=args.seed + 2 * index,
            max_turns=args.max_turns,
        )
        results.append(result)
        logger.info(
            f"Game {index + 1}/{args.games}: winner={result['winner']} "
            f"points={result['points']} turns={result['turns']}"
        )

    if args.format == "json":
        for result in results:
            if not args.show_board:
                result.pop("board")
        print(json.dumps(results, indent=2))
        return

    wins = Counter(r["winner"] or "draw" for r in results)
    for index, result in enumerate(results, start=1):
        print(f"Game {index}: {result['status']} after {result['turns']} turns, "
              f"winner={result['winner']}, points={result['points']}, "
              f"failures={result['failures']}")
        if args.show_board:
            print(result["board"])
            print()
    print(f"Summary: {dict(wins)}")


if __name__ == "__main__":
    main()
