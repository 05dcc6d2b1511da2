"""Count moves across every branch of a game tree."""

from __future__ import annotations

from .tree import GameNode, GameTree


def count_moves(tree: GameTree | GameNode) -> int:
    """Number of non-root nodes carrying a ``B`` or ``W`` property.

    Every variation is counted. Setup stones (``AB``/``AW``/``AE``) are not
    moves, and the root node is never counted even if it carries a move tag.
    """
    root = tree.root if isinstance(tree, GameTree) else tree
    return sum(1 for node in root.walk() if node is not root and node.has_move)

