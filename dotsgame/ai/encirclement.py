"""Build a closed loop of one color around an enemy group.

The perimeter of the target group (every not-yet-encircled dot of the
encircling color on a row/column-aligned neighbour) is sorted into short
chains, the chains are merged head-to-tail into one, and dots that are
fully surrounded by the chain and the target are dropped. The closed path
is then played through :class:`GameEngine` exactly like a human would
draw it, so scoring goes through the same rules.

Merging is bounded: a perimeter that splits into chains that never meet
(for example a pocket of our dots inside the target) raises
:class:`NoEnclosingPathError` instead of looping.
"""

from __future__ import annotations

import logging
import os

from ..board_manager import BoardManager
from ..clustering import Group
from ..errors import InvalidStateError, NoEnclosingPathError
from ..game_engine import GameEngine
from ..geometry import is_inside_polygon
from ..models import BoardState, ConnectOutcome, Dot, DotColor, GameState
from ..threats import analyze_group

logger = logging.getLogger(__name__)

# Upper bound on chain-merge passes; 0 means "number of chains", which is
# always enough when every pass merges one pair.
MAX_CHAIN_MERGE_PASSES = int(os.getenv('DOTS_MAX_CHAIN_MERGE_PASSES', '0'))

Chain = list[Dot]


def collect_perimeter(board: BoardState, group: Group, color: DotColor) -> list[Dot]:
    """Aligned neighbours of ``group`` owned by ``color``, without repeats."""
    perimeter: list[Dot] = []
    seen: set[int] = set()
    for dot in group.dots:
        for neighbour in BoardManager.aligned_neighbours(board, dot):
            if (
                neighbour.color == color
                and not neighbour.encircled
                and neighbour.id not in seen
            ):
                seen.add(neighbour.id)
                perimeter.append(neighbour)
    return perimeter


def build_chains(perimeter: list[Dot]) -> list[Chain]:
    """Sort perimeter dots into chains of consecutive neighbours.

    A dot is prepended to the first chain whose head it touches, or
    appended to the first chain whose tail it touches; otherwise it starts
    a new chain.
    """
    chains: list[Chain] = []
    for dot in perimeter:
        for chain in chains:
            if BoardManager.is_neighbour(dot, chain[0]):
                chain.insert(0, dot)
                break
            if BoardManager.is_neighbour(dot, chain[-1]):
                chain.append(dot)
                break
        else:
            chains.append([dot])
    return chains


def _find_mergeable(chains: list[Chain]) -> tuple[int, int] | None:
    """Return ``(base, added)`` indices where ``added`` can follow ``base``."""
    for i, chain_a in enumerate(chains):
        for j, chain_b in enumerate(chains):
            if i == j:
                continue
            if BoardManager.is_neighbour(chain_a[0], chain_b[-1]):
                return j, i
            if BoardManager.is_neighbour(chain_a[-1], chain_b[0]):
                return i, j
    return None


def merge_all_chains(chains: list[Chain], max_passes: int | None = None) -> Chain:
    """Join ``chains`` tail-to-head until one remains.

    Raises:
        NoEnclosingPathError: no chains, or no pair can be joined, or the
            pass budget ran out.
    """
    if not chains:
        raise NoEnclosingPathError("No perimeter dots to build a loop from", chain_count=0)
    chains = [list(chain) for chain in chains]
    limit = max_passes or MAX_CHAIN_MERGE_PASSES or len(chains)
    passes = 0
    while len(chains) > 1:
        if passes >= limit:
            raise NoEnclosingPathError(
                "Chain merging did not converge", chain_count=len(chains)
            )
        passes += 1
        pair = _find_mergeable(chains)
        if pair is None:
            raise NoEnclosingPathError(
                "Perimeter splits into chains that never meet",
                chain_count=len(chains),
            )
        base, added = pair
        chains[base].extend(chains[added])
        del chains[added]
    return chains[0]


def prune_insiders(board: BoardState, chain: Chain, group: Group) -> Chain:
    """Drop chain dots whose 8 neighbours all lie in the chain or the group.

    A dot is only dropped while its neighbours on the loop stay grid
    neighbours of each other, so the loop remains drawable.
    """
    chain = list(chain)
    target = group.dot_ids
    changed = True
    while changed and len(chain) > 3:
        changed = False
        members = {dot.id for dot in chain} | target
        for index, dot in enumerate(chain):
            if len(dot.neighbours) < 8:
                continue
            if not all(n in members for n in dot.neighbours):
                continue
            before, after = chain[index - 1], chain[(index + 1) % len(chain)]
            if BoardManager.is_neighbour(before, after):
                logger.debug("pruning inner loop dot %s", dot.position)
                del chain[index]
                changed = True
                break
    return chain


def _check_loop(board: BoardState, loop: Chain, group: Group) -> None:
    if len(loop) < 3:
        raise NoEnclosingPathError(
            "Perimeter is too short to enclose anything",
            group_size=len(group),
            chain_count=1,
        )
    for index, dot in enumerate(loop):
        following = loop[(index + 1) % len(loop)]
        if not BoardManager.is_neighbour(dot, following):
            raise NoEnclosingPathError(
                "Perimeter chain has a gap",
                group_size=len(group),
                context={"from": dot.position, "to": following.position},
            )
    for dot in group.dots:
        if not is_inside_polygon(dot, loop):
            raise NoEnclosingPathError(
                "Loop does not enclose the target group",
                group_size=len(group),
                context={"outside": dot.position},
            )


def build_enclosing_path(board: BoardState, group: Group, color: DotColor) -> Chain:
    """Return a closed path of ``color`` dots around ``group``.

    The group's breakouts are recomputed first; a group with any breakout
    left is rejected. The returned path repeats its first dot at the end.

    Raises:
        NoEnclosingPathError: the group can still escape, or its
            perimeter does not reduce to a single closed loop.
    """
    analyze_group(board, group)
    if group.breakouts:
        raise NoEnclosingPathError(
            "Target group still has breakouts",
            group_size=len(group),
            context={"breakouts": [b.position for b in group.breakouts]},
        )
    chains = build_chains(collect_perimeter(board, group, color))
    logger.debug("perimeter of %d-dot group split into %d chains", len(group), len(chains))
    loop = prune_insiders(board, merge_all_chains(chains), group)
    _check_loop(board, loop, group)
    return loop + [loop[0]]


def execute_encirclement(state: GameState, path: Chain) -> int:
    """Draw ``path`` (closed) for the current player and return points won."""
    before = GameEngine.score_for_player(state, state.current_player)
    closer = state.current_player
    GameEngine.start_encirclement(state, path[0])
    outcome = None
    for dot in path[1:]:
        outcome = GameEngine.extend_encirclement(state, dot)
    if outcome != ConnectOutcome.CLOSED:
        if state.encircling:
            GameEngine.break_encirclement(state, reason="unclosed_path")
        raise InvalidStateError(
            "Encirclement path did not close",
            context={"length": len(path)},
        )
    return GameEngine.score_for_player(state, closer) - before
