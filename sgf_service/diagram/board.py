"""Replay the main line of a game tree into a board position for drawing.

Only what a diagram needs is modelled: stone placement, setup properties and
removal of captured groups. No legality checks are made; a move onto an
occupied point simply replaces the stone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..sgf.tree import GameNode

SGF_COORD = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

Point = tuple[int, int]


def sgf_to_point(value: str, board_size: int) -> Optional[Point]:
    """Decode an SGF point ("pd") to (column, row) with row 0 at the top.

    Returns None for passes ("" or "tt" on boards up to 19) and for points
    that fall outside the board.
    """
    value = value.strip()
    if value == "" or (value == "tt" and board_size <= 19):
        return None
    if len(value) != 2 or value[0] not in SGF_COORD or value[1] not in SGF_COORD:
        return None
    col, row = SGF_COORD.index(value[0]), SGF_COORD.index(value[1])
    if col >= board_size or row >= board_size:
        return None
    return col, row


def expand_points(values: tuple[str, ...], board_size: int) -> Iterator[Point]:
    """Decode point lists, including compressed rectangles ("aa:cc")."""
    for value in values:
        if ":" not in value:
            point = sgf_to_point(value, board_size)
            if point is not None:
                yield point
            continue
        first, second = value.split(":", 1)
        a, b = sgf_to_point(first, board_size), sgf_to_point(second, board_size)
        if a is None or b is None:
            continue
        for col in range(min(a[0], b[0]), max(a[0], b[0]) + 1):
            for row in range(min(a[1], b[1]), max(a[1], b[1]) + 1):
                yield col, row


@dataclass
class BoardPosition:
    """Stones and move labels after replaying part of a game."""
    size: int
    stones: dict[Point, str] = field(default_factory=dict)
    labels: dict[Point, int] = field(default_factory=dict)
    moves_played: int = 0
    last_move: Optional[Point] = None

    def neighbours(self, point: Point) -> Iterator[Point]:
        col, row = point
        for dc, dr in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            c, r = col + dc, row + dr
            if 0 <= c < self.size and 0 <= r < self.size:
                yield c, r

    def _group(self, start: Point) -> tuple[set[Point], bool]:
        """Connected group at ``start`` and whether it has a liberty."""
        color = self.stones[start]
        group = {start}
        frontier = [start]
        has_liberty = False
        while frontier:
            point = frontier.pop()
            for n in self.neighbours(point):
                occupant = self.stones.get(n)
                if occupant is None:
                    has_liberty = True
                elif occupant == color and n not in group:
                    group.add(n)
                    frontier.append(n)
        return group, has_liberty

    def _remove(self, points: set[Point]) -> None:
        for p in points:
            self.stones.pop(p, None)
            self.labels.pop(p, None)

    def apply_setup(self, node: GameNode) -> None:
        for point in expand_points(node.values("AE"), self.size):
            self._remove({point})
        for tag, color in (("AB", "B"), ("AW", "W")):
            for point in expand_points(node.values(tag), self.size):
                self.stones[point] = color
                self.labels.pop(point, None)

    def play(self, color: str, point: Optional[Point], label: Optional[int]) -> None:
        self.moves_played += 1
        self.last_move = point
        if point is None:
            return
        self.stones[point] = color
        self.labels.pop(point, None)
        if label is not None:
            self.labels[point] = label

        opponent = "W" if color == "B" else "B"
        for n in self.neighbours(point):
            if self.stones.get(n) == opponent:
                group, alive = self._group(n)
                if not alive:
                    self._remove(group)
        group, alive = self._group(point)
        if not alive:
            self._remove(group)


def replay_main_line(
    root: GameNode,
    board_size: int,
    move_limit: Optional[int] = None,
    first_numbered_move: int = 1,
    number_moves: bool = True,
) -> BoardPosition:
    """Replay setup and moves along the main line.

    Args:
        root: Root node of the game tree
        board_size: Board dimension
        move_limit: Stop after this many moves; None replays everything
        first_numbered_move: Moves with an ordinal below this get no label
        number_moves: Record move labels at all
    """
    position = BoardPosition(size=board_size)
    for node in root.main_line():
        is_move = node is not root and node.has_move
        if is_move and move_limit is not None and position.moves_played >= move_limit:
            break
        position.apply_setup(node)
        if not is_move:
            continue
        color = "B" if "B" in node.properties else "W"
        raw = node.get(color) or ""
        ordinal = position.moves_played + 1
        label = ordinal if number_moves and ordinal >= first_numbered_move else None
        position.play(color, sgf_to_point(raw, board_size), label)
    return position
