"""Same-color group clustering.

Groups are transient views rebuilt from the raw ownership lists in
``GameState.owned``. Two dots of one color belong to the same group when
they are grid neighbours and either share a row or column or are partners
(joined by a drawn line). Diagonal adjacency alone does not group dots.

The order of ``Group.dots`` is the insertion/merge order. It keeps dots
roughly in board order, which the encirclement builder relies on when it
walks a group's perimeter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterable

from .board_manager import BoardManager
from .models import BoardState, Dot, DotColor


@dataclass(eq=False)
class Group:
    """Maximal cluster of connected same-color dots."""
    color: DotColor
    dots: list[Dot] = field(default_factory=list)
    breakouts: list[Dot] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.dots)

    def __contains__(self, dot: Dot) -> bool:
        return any(d.id == dot.id for d in self.dots)

    @property
    def dot_ids(self) -> frozenset[int]:
        return frozenset(d.id for d in self.dots)

    def add_breakout(self, dot: Dot) -> None:
        if all(b.id != dot.id for b in self.breakouts):
            self.breakouts.append(dot)

    def should_be_first(self, other: Group) -> bool:
        """True if this group's dots go before ``other``'s when merging."""
        if not self.dots:
            return True
        return self.dots[0].position < other.dots[0].position

    def merge_with(self, other: Group) -> None:
        """Splice ``other``'s dots and breakouts into this group.

        If this group sorts first, ``other``'s dots are appended; otherwise
        they are inserted at the front, keeping their own relative order.
        Dots already present are skipped.
        """
        this_first = self.should_be_first(other)
        index = 0
        for dot in other.dots:
            if dot in self:
                continue
            if this_first:
                self.dots.append(dot)
            else:
                self.dots.insert(index, dot)
                index += 1
        for dot in other.breakouts:
            self.add_breakout(dot)


def _joins(dot: Dot, node: Dot) -> bool:
    return BoardManager.is_neighbour(dot, node) and (
        BoardManager.is_same_row_or_column(dot, node)
        or BoardManager.are_partners(node, dot)
    )


def assign_to_groups(groups: list[Group], dot: Dot) -> None:
    """Add ``dot`` to ``groups`` (all of ``dot``'s color), in place.

    The dot joins every group holding a member it connects to, placed just
    before or after that member depending on board order. If it bridges
    several groups they are merged into one; if it touches none it starts
    a singleton group.
    """
    matched: list[Group] = []
    for group in groups:
        if dot in group:
            continue
        for position, node in enumerate(group.dots):
            if _joins(dot, node):
                if dot.position < node.position:
                    group.dots.insert(position, dot)
                else:
                    group.dots.insert(position + 1, dot)
                matched.append(group)
                break

    if not matched:
        groups.append(Group(dot.color, [dot]))
    elif len(matched) > 1:
        merged = Group(dot.color)
        for group in matched:
            merged.merge_with(group)
            groups.remove(group)
        groups.append(merged)


def build_groups(board: BoardState, dot_ids: Iterable[int]) -> list[Group]:
    """Cluster the dots in ``dot_ids`` (one color, capture order).

    Encircled dots are skipped; they never appear in a group.
    """
    groups: list[Group] = []
    for dot_id in dot_ids:
        dot = BoardManager.dot_by_id(board, dot_id)
        if not dot.encircled:
            assign_to_groups(groups, dot)
    return groups


def prune_encircled(board: BoardState, dot_ids: list[int]) -> list[int]:
    """Drop encircled dots from a raw ownership list, in place."""
    dot_ids[:] = [i for i in dot_ids if not BoardManager.dot_by_id(board, i).encircled]
    return dot_ids
