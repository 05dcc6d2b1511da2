"""Game tree types produced by the SGF parser.

Nodes are frozen once the parser has built them. A tree owns its whole
subtree through ``children``; there are no parent pointers because every
traversal in the service runs from the root downwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

MOVE_TAGS = ("B", "W")
SETUP_TAGS = ("AB", "AW", "AE")


@dataclass(frozen=True)
class GameNode:
    """One position in the game tree.

    Attributes:
        node_id: Pre-order creation index, unique within the tree (root is 0)
        properties: Tag -> raw (still escaped) values, in file order
        children: Variations; the first child is the main line
    """
    node_id: int
    properties: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    children: tuple["GameNode", ...] = ()

    def get(self, tag: str) -> str | None:
        """First raw value of ``tag`` or None."""
        values = self.properties.get(tag)
        if not values:
            return None
        return values[0]

    def values(self, tag: str) -> tuple[str, ...]:
        return self.properties.get(tag, ())

    @property
    def has_move(self) -> bool:
        return any(tag in self.properties for tag in MOVE_TAGS)

    def walk(self) -> Iterator["GameNode"]:
        """Yield this node and every descendant, depth first, main line first."""
        stack: list[GameNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def main_line(self) -> Iterator["GameNode"]:
        """Yield this node followed by the first child at every branch."""
        node: GameNode | None = self
        while node is not None:
            yield node
            node = node.children[0] if node.children else None


@dataclass(frozen=True)
class GameTree:
    """One parsed game record.

    Attributes:
        root: Root node holding the game-info properties
        ignored_trailing_content: True when more game records followed the
            first one in the same collection
    """
    root: GameNode
    ignored_trailing_content: bool = False
