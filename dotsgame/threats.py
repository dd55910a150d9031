"""Threat analysis over same-color groups.

Only the up to four row/column-aligned neighbours of a dot count. Each is a
friend (same color), an escape (neutral, recorded as a group breakout) or
an enemy (any other color, including gray dead markers).

A dot away from the board edge, not on a loop path and not yet encircled is

- ``ENCIRCLED`` when all four aligned neighbours are enemies, and
- ``ENDANGERED`` when three are enemies and none is a friend; the fourth
  is then its only escape.

A whole group is in danger when it has exactly one breakout, or when enemy
contacts exceed three and every aligned slot of every dot is occupied.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field

from .board_manager import BoardManager
from .clustering import Group
from .models import BoardState, Dot, DotColor, ThreatLevel


@dataclass
class DotThreat:
    dot: Dot
    level: ThreatLevel
    friends: int = 0
    enemies: int = 0
    escapes: list[Dot] = field(default_factory=list)
    aligned: int = 0


@dataclass
class GroupThreat:
    group: Group
    dot_threats: list[DotThreat] = field(default_factory=list)
    friends_total: int = 0
    enemies_total: int = 0

    @property
    def in_danger(self) -> bool:
        if len(self.group.breakouts) == 1:
            return True
        fully_occupied = (
            self.enemies_total + self.friends_total == 4 * len(self.group)
        )
        return self.enemies_total > 3 and fully_occupied


def classify_dot(board: BoardState, dot: Dot) -> DotThreat:
    """Count friends, enemies and escapes around ``dot`` and classify it."""
    threat = DotThreat(dot=dot, level=ThreatLevel.SAFE)
    for neighbour in BoardManager.aligned_neighbours(board, dot):
        threat.aligned += 1
        if neighbour.color == dot.color:
            threat.friends += 1
        elif neighbour.color == DotColor.NEUTRAL:
            threat.escapes.append(neighbour)
        else:
            threat.enemies += 1

    if dot.connected or dot.encircled or BoardManager.is_edge_dot(dot, board.size):
        return threat
    if threat.aligned == 4 and threat.enemies == 4:
        threat.level = ThreatLevel.ENCIRCLED
    elif threat.enemies == 3 and threat.friends == 0:
        threat.level = ThreatLevel.ENDANGERED
    return threat


def analyze_group(board: BoardState, group: Group) -> GroupThreat:
    """Classify every dot of ``group`` and recompute its breakouts."""
    group.breakouts.clear()
    result = GroupThreat(group=group)
    for dot in group.dots:
        threat = classify_dot(board, dot)
        for escape in threat.escapes:
            group.add_breakout(escape)
        result.friends_total += threat.friends
        result.enemies_total += threat.enemies
        result.dot_threats.append(threat)
    return result


def find_endangered(board: BoardState, groups: list[Group]) -> list[Group]:
    """Return endangered candidates in discovery order.

    Endangered and encircled dots are reported as singleton groups (with
    the single escape as breakout for endangered ones), followed by their
    whole group if that group is in danger.
    """
    endangered: list[Group] = []
    for group in groups:
        result = analyze_group(board, group)
        for threat in result.dot_threats:
            if threat.level == ThreatLevel.ENCIRCLED:
                endangered.append(Group(group.color, [threat.dot]))
            elif threat.level == ThreatLevel.ENDANGERED:
                endangered.append(
                    Group(group.color, [threat.dot], list(threat.escapes))
                )
        if result.in_danger:
            endangered.append(group)
    return endangered


def find_most_endangered(
    board: BoardState,
    groups: list[Group],
    exclude: Collection[frozenset[int]] = (),
) -> Group | None:
    """Return the largest endangered candidate with fewer than 2 breakouts.

    Ties go to the candidate found first. Breakout-free candidates whose
    dot-id set is in ``exclude`` are skipped. Returns ``None`` when nothing
    is at risk.
    """
    result: Group | None = None
    highest = 0
    for candidate in find_endangered(board, groups):
        if not candidate.breakouts and candidate.dot_ids in exclude:
            continue
        if len(candidate.breakouts) < 2 and len(candidate.dots) > highest:
            highest = len(candidate.dots)
            result = candidate
    return result
