"""
SGF tree parser.

Turns validated SGF text into a :class:`GameTree`. The parser is a single
left-to-right pass driven by an explicit stack of open game trees, so the
nesting depth of variations is limited by the input size only.

Grammar handled (FF[4], with FF[3] mixed-case property identifiers)::

    Collection = GameTree { GameTree }
    GameTree   = "(" Sequence { GameTree } ")"
    Sequence   = Node { Node }
    Node       = ";" { Property }
    Property   = PropIdent PropValue { PropValue }
    PropValue  = "[" CValueType "]"

Only the first game tree of a collection is returned. Later game trees are
skipped and flagged on the tree; anything else after the first one is an
error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType

from ..errors import ParsingError
from .tree import GameNode, GameTree

_IDENT_PAT = re.compile(r"[A-Za-z]+")
_VALUE_PAT = re.compile(r"\[((?:[^\]\\]|\\.)*)\]", flags=re.DOTALL)
_ESCAPE_PAT = re.compile(r"\\([\]\\])")
_WHITESPACE = frozenset(" \t\r\n\f\v")


def unescape_value(value: str) -> str:
    """Undo SGF escaping of ``]`` and ``\\`` inside a property value."""
    return _ESCAPE_PAT.sub(r"\1", value)


def _preview(text: str, offset: int, width: int = 25) -> str:
    return text[offset : offset + width]


@dataclass
class _OpenTree:
    """A game tree whose closing parenthesis has not been seen yet."""
    offset: int
    nodes: list[tuple[int, dict[str, list[str]]]] = field(default_factory=list)
    variations: list[GameNode] = field(default_factory=list)

    def close(self) -> GameNode:
        children: tuple[GameNode, ...] = tuple(self.variations)
        node: GameNode | None = None
        for node_id, props in reversed(self.nodes):
            node = GameNode(
                node_id=node_id,
                properties=MappingProxyType(
                    {tag: tuple(values) for tag, values in props.items()}
                ),
                children=children,
            )
            children = (node,)
        assert node is not None
        return node


class SgfParser:
    """Single-use parser over one SGF string."""

    def __init__(self, text: str):
        self.text = text
        self.ix = 0
        self._next_id = 0

    def _skip_whitespace(self) -> None:
        text = self.text
        while self.ix < len(text) and text[self.ix] in _WHITESPACE:
            self.ix += 1

    def parse(self) -> GameTree:
        self._skip_whitespace()
        if self.ix >= len(self.text) or self.text[self.ix] != "(":
            raise ParsingError(
                f"Expected '(' at start of game tree, found {_preview(self.text, self.ix)!r}",
                offset=self.ix,
            )

        stack: list[_OpenTree] = []
        while True:
            self._skip_whitespace()
            if self.ix >= len(self.text):
                raise ParsingError(
                    "Unexpected end of input: expected ')' to close game tree",
                    offset=stack[-1].offset if stack else self.ix,
                )

            char = self.text[self.ix]
            if char == "(":
                if stack and not stack[-1].nodes:
                    raise ParsingError(
                        "Game tree must start with a node (';') before any variation",
                        offset=self.ix,
                    )
                stack.append(_OpenTree(offset=self.ix))
                self.ix += 1
            elif char == ")":
                current = stack.pop()
                if not current.nodes:
                    raise ParsingError(
                        "Game tree contains no nodes",
                        offset=current.offset,
                    )
                self.ix += 1
                node = current.close()
                if stack:
                    stack[-1].variations.append(node)
                    continue
                ignored = self._skip_trailing_records()
                return GameTree(root=node, ignored_trailing_content=ignored)
            elif char == ";":
                current = stack[-1]
                if current.variations:
                    raise ParsingError(
                        "Unexpected node after variations; nodes must precede "
                        "sub-trees within a game tree",
                        offset=self.ix,
                    )
                current.nodes.append((self._next_id, {}))
                self._next_id += 1
                self.ix += 1
            elif char.isascii() and char.isalpha():
                self._parse_property(stack[-1])
            else:
                raise ParsingError(
                    f"Unexpected character {char!r} at {_preview(self.text, self.ix)!r}",
                    offset=self.ix,
                )

    def _skip_trailing_records(self) -> bool:
        """Step over further game trees after the first one without building them.

        Only whitespace and complete game trees may follow the first record.
        Returns True when at least one more game tree was present.
        """
        text = self.text
        depth = 0
        record_offset = self.ix
        found = False
        while True:
            self._skip_whitespace()
            if self.ix >= len(text):
                break
            char = text[self.ix]
            if char == "[" and depth:
                value_match = _VALUE_PAT.match(text, self.ix)
                if value_match is None:
                    raise ParsingError(
                        "Unterminated property value in a later game record",
                        offset=self.ix,
                    )
                self.ix = value_match.end()
                continue
            if char == "(":
                if not depth:
                    record_offset = self.ix
                    found = True
                depth += 1
            elif char == ")":
                if not depth:
                    raise ParsingError(
                        "Unbalanced parentheses: unexpected ')' after game tree",
                        offset=self.ix,
                    )
                depth -= 1
            elif not depth:
                raise ParsingError(
                    f"Unexpected content after game tree: {_preview(text, self.ix)!r}",
                    offset=self.ix,
                )
            self.ix += 1

        if depth:
            raise ParsingError(
                "Unexpected end of input: expected ')' to close game tree",
                offset=record_offset,
            )
        return found

    def _parse_property(self, current: _OpenTree) -> None:
        start = self.ix
        match = _IDENT_PAT.match(self.text, self.ix)
        assert match is not None
        raw_ident = match.group()
        # FF[3] allowed lowercase letters in identifiers: SiZe -> SZ
        tag = re.sub("[a-z]", "", raw_ident)
        if not tag:
            raise ParsingError(
                f"Invalid property identifier {raw_ident!r}",
                offset=start,
            )
        if not current.nodes:
            raise ParsingError(
                f"Property {tag!r} appears outside of a node",
                offset=start,
            )
        self.ix = match.end()

        values: list[str] = []
        while True:
            self._skip_whitespace()
            if self.ix >= len(self.text) or self.text[self.ix] != "[":
                break
            value_match = _VALUE_PAT.match(self.text, self.ix)
            if value_match is None:
                raise ParsingError(
                    f"Unterminated property value for {tag!r}",
                    offset=self.ix,
                )
            values.append(value_match.group(1))
            self.ix = value_match.end()

        if not values:
            raise ParsingError(
                f"Property {tag!r} has no value",
                offset=start,
            )
        _, props = current.nodes[-1]
        props.setdefault(tag, []).extend(values)


def parse_sgf(text: str) -> GameTree:
    """Parse the first game record in ``text``.

    Raises:
        ParsingError: malformed input, with the offending offset in details
    """
    return SgfParser(text).parse()
