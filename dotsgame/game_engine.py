"""Core game engine for the Dots game.

All operations are static and act on an explicit :class:`GameState`, so
several games can run side by side and tests can build any position
directly. The engine owns the rules:

- capturing a neutral dot passes the turn;
- a player may start an encirclement on one of their own dots and extend
  it one neighbouring dot at a time;
- connecting back to the start dot closes the loop, resolves every dot
  inside it and does *not* pass the turn;
- an invalid connection or an explicit break aborts the path, undoes its
  lines and ``connected`` flags, and passes the turn.

Rendering and input mapping live outside this module; see
:mod:`dotsgame.controller` for the turn flow around the automated opponent.
"""

from __future__ import annotations

import logging
import uuid

from .board_manager import BoardManager
from .clustering import Group, build_groups, prune_encircled
from .errors import (
    AlreadyEncircledError,
    InvalidConnectionError,
    InvalidMoveError,
)
from .geometry import could_connect, dots_inside, polygon_area
from .metrics import (
    DOTS_CAPTURED,
    ENCIRCLED_DOTS,
    ENCIRCLEMENTS_BROKEN,
    ENCIRCLEMENTS_CLOSED,
)
from .models import (
    ConnectOutcome,
    Dot,
    DotColor,
    GameConfig,
    GameState,
    GameStatus,
)
from .threats import find_most_endangered

logger = logging.getLogger(__name__)


class GameEngine:
    """Rules operations over a :class:`GameState`."""

    @staticmethod
    def create_game(config: GameConfig, game_id: str | None = None) -> GameState:
        """Create a fresh game on a neutral board."""
        board = BoardManager.create_board(config.board_size)
        return GameState(
            id=game_id or uuid.uuid4().hex,
            board=board,
            players=list(config.players),
            current_player=config.first_player or config.players[0],
            points={color: 0 for color in config.players},
            owned={color: [] for color in config.players},
            encirclements={color: [] for color in config.players},
            ai_color=config.ai_color,
        )

    @staticmethod
    def get_dot(state: GameState, row: int, column: int) -> Dot:
        return BoardManager.get_dot(state.board, row, column)

    @staticmethod
    def path_dots(state: GameState) -> list[Dot]:
        """Dots of the in-progress encirclement, start first."""
        return [BoardManager.dot_by_id(state.board, i) for i in state.current_encirclement]

    # ------------------------------------------------------------------
    # Captures and turns
    # ------------------------------------------------------------------

    @staticmethod
    def require_active(state: GameState) -> None:
        if state.game_status != GameStatus.ACTIVE:
            raise InvalidMoveError("The game is over", context={"game_id": state.id})

    @staticmethod
    def _reject_encircled(dot: Dot) -> None:
        if dot.encircled:
            raise AlreadyEncircledError(
                "Encircled dots cannot be used", position=dot.position
            )

    @staticmethod
    def capture_dot(state: GameState, dot: Dot) -> tuple[DotColor, bool]:
        """Give a neutral ``dot`` to the current player and pass the turn.

        Returns:
            The dot's new owner and whether the turn now belongs to the
            automated opponent.
        """
        GameEngine.require_active(state)
        GameEngine._reject_encircled(dot)
        if state.encircling:
            raise InvalidMoveError(
                "Finish or break the current encirclement first",
                context={"position": dot.position},
            )
        if dot.color != DotColor.NEUTRAL:
            raise InvalidMoveError(
                "Only neutral dots can be captured",
                context={"position": dot.position, "color": dot.color.value},
            )

        owner = state.current_player
        dot.color = owner
        state.owned.setdefault(owner, []).append(dot.id)
        DOTS_CAPTURED.labels(color=owner.value).inc()
        logger.debug("%s captured %s", owner.value, dot.position)

        GameEngine.next_turn(state)
        return owner, GameEngine.is_ai_turn(state)

    @staticmethod
    def is_ai_turn(state: GameState) -> bool:
        return (
            state.game_status == GameStatus.ACTIVE
            and state.ai_color is not None
            and state.current_player == state.ai_color
        )

    @staticmethod
    def next_turn(state: GameState) -> None:
        """Hand the turn to the other player and check for the end of game."""
        state.turn += 1
        state.current_player = state.opponent_of(state.current_player)
        if not BoardManager.free_dots(state.board):
            GameEngine._finish_game(state)

    @staticmethod
    def _finish_game(state: GameState) -> None:
        state.game_status = GameStatus.FINISHED
        best = max(state.points.values(), default=0)
        leaders = [color for color, points in state.points.items() if points == best]
        state.winner = leaders[0] if len(leaders) == 1 else None
        logger.info(
            "Game %s finished after %d turns, winner=%s, points=%s",
            state.id,
            state.turn,
            state.winner.value if state.winner else None,
            {color.value: points for color, points in state.points.items()},
        )

    @staticmethod
    def score_for_player(state: GameState, color: DotColor) -> int:
        return state.points.get(color, 0)

    # ------------------------------------------------------------------
    # Encirclements
    # ------------------------------------------------------------------

    @staticmethod
    def start_encirclement(state: GameState, dot: Dot) -> None:
        """Begin a loop at one of the current player's dots."""
        GameEngine.require_active(state)
        GameEngine._reject_encircled(dot)
        if state.encircling:
            raise InvalidMoveError("An encirclement is already in progress")
        if dot.color != state.current_player:
            raise InvalidMoveError(
                "Encirclements must start on your own dot",
                context={"position": dot.position, "color": dot.color.value},
            )
        state.encircling = True
        state.current_encirclement = [dot.id]
        state.path_connected_before = {dot.id: dot.connected}
        dot.connected = True

    @staticmethod
    def extend_encirclement(state: GameState, dot: Dot) -> ConnectOutcome:
        """Connect the path's last dot to ``dot``.

        Returns:
            ``CLOSED`` if ``dot`` is the start dot and the loop was scored,
            ``CONTINUE`` otherwise.

        Raises:
            AlreadyEncircledError: ``dot`` is resolved; the path is kept.
            InvalidConnectionError: the connection is illegal; the path has
                been broken (and the turn passed) before raising.
        """
        GameEngine.require_active(state)
        if not state.encircling:
            raise InvalidMoveError("No encirclement in progress")
        GameEngine._reject_encircled(dot)

        path = GameEngine.path_dots(state)
        last = path[-1]
        if not could_connect(last, dot, path):
            GameEngine.break_encirclement(state, reason="invalid_connection")
            raise InvalidConnectionError(
                "You can connect only neighbouring dots of your color",
                from_pos=last.position,
                to_pos=dot.position,
            )

        BoardManager.add_line(state.board, last, dot)
        BoardManager.join(last, dot)
        if dot.id == path[0].id:
            GameEngine.finish_encirclement(state)
            return ConnectOutcome.CLOSED

        state.current_encirclement.append(dot.id)
        state.path_connected_before[dot.id] = dot.connected
        dot.connected = True
        return ConnectOutcome.CONTINUE

    @staticmethod
    def break_encirclement(state: GameState, reason: str = "abandoned") -> None:
        """Abort the in-progress path and pass the turn.

        Restores every path dot's ``connected`` flag and removes the lines
        the path drew. Partner links made along the way are kept.
        """
        if not state.encircling:
            raise InvalidMoveError("No encirclement in progress")
        path = GameEngine.path_dots(state)
        for dot in path:
            dot.connected = state.path_connected_before.get(dot.id, False)
        for _ in path[1:]:
            BoardManager.remove_last_line(state.board)

        state.current_encirclement = []
        state.path_connected_before = {}
        state.encircling = False
        ENCIRCLEMENTS_BROKEN.labels(reason=reason).inc()
        logger.debug("%s broke an encirclement of %d dots (%s)",
                     state.current_player.value, len(path), reason)
        GameEngine.next_turn(state)

    @staticmethod
    def finish_encirclement(state: GameState) -> int:
        """Archive the closed path and resolve the dots inside it.

        Enemy dots inside become the closer's and score a point; neutral
        dots inside become gray. Both are marked encircled for good. The
        closer's own dots inside are left alone.

        Returns:
            Points scored by this loop.
        """
        closer = state.current_player
        path = GameEngine.path_dots(state)
        state.encirclements.setdefault(closer, []).append(
            list(state.current_encirclement) + [path[0].id]
        )
        for dot in path:
            dot.connected = True

        scored = dead = 0
        for dot in dots_inside(state.board, path):
            if dot.encircled or dot.color == closer:
                continue
            dot.encircled = True
            if dot.color == DotColor.NEUTRAL:
                dot.color = DotColor.GRAY
                dead += 1
            else:
                dot.color = closer
                scored += 1
        state.points[closer] = state.points.get(closer, 0) + scored

        state.current_encirclement = []
        state.path_connected_before = {}
        state.encircling = False
        for owned in state.owned.values():
            prune_encircled(state.board, owned)

        ENCIRCLEMENTS_CLOSED.labels(color=closer.value).inc()
        ENCIRCLED_DOTS.labels(color=closer.value, outcome="scored").inc(scored)
        ENCIRCLED_DOTS.labels(color=closer.value, outcome="dead").inc(dead)
        logger.info(
            "%s closed a loop of %d dots (area %.1f): %d scored, %d dead",
            closer.value, len(path), polygon_area(path), scored, dead,
        )
        if not BoardManager.free_dots(state.board):
            GameEngine._finish_game(state)
        return scored

    # ------------------------------------------------------------------
    # Analysis views
    # ------------------------------------------------------------------

    @staticmethod
    def groups_for(state: GameState, color: DotColor) -> list[Group]:
        """Rebuild ``color``'s groups from its ownership list."""
        return build_groups(state.board, state.owned.get(color, []))

    @staticmethod
    def most_endangered_group(state: GameState, color: DotColor) -> Group | None:
        return find_most_endangered(state.board, GameEngine.groups_for(state, color))
