"""
Game metadata extraction.

Reads the root node's game-info properties into a typed :class:`GameMetadata`
record. Known tags are translated to friendly field names through a fixed
table; any other root tag is kept verbatim under ``extraProperties`` so newer
or application-specific properties are not lost.

Defaulting and warning rules:

* ``SZ`` missing or not a number -> board size 19, with a warning.
* ``FF`` missing -> warning only.
* Numeric values that do not parse are treated as absent, except ``GM``:
  any game type that is not the number 1 is rejected.

Hard failures (raised, never downgraded to warnings):

* ``GM`` present and not 1 -> :class:`UnsupportedGameError`.
* Board size outside ``[1, MAX_BOARD_SIZE]`` -> :class:`InvalidParametersError`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import MAX_BOARD_SIZE
from ..errors import InvalidParametersError, UnsupportedGameError
from .parser import unescape_value
from .tree import MOVE_TAGS, SETUP_TAGS, GameNode, GameTree

DEFAULT_BOARD_SIZE = 19
GO_GAME_TYPE = 1

_INT_PAT = re.compile(r"[+-]?\d+")


class GameMetadata(BaseModel):
    """Game information from the root node of an SGF record."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    # Game identification
    game_name: Optional[str] = Field(None, alias="gameName")
    game_comment: Optional[str] = Field(None, alias="gameComment")
    event: Optional[str] = None
    round: Optional[str] = None
    date: Optional[str] = None
    place: Optional[str] = None
    source: Optional[str] = None
    user: Optional[str] = None
    annotator: Optional[str] = None
    copyright: Optional[str] = None

    # Players
    player_black: Optional[str] = Field(None, alias="playerBlack")
    player_white: Optional[str] = Field(None, alias="playerWhite")
    black_rank: Optional[str] = Field(None, alias="blackRank")
    white_rank: Optional[str] = Field(None, alias="whiteRank")
    black_team: Optional[str] = Field(None, alias="blackTeam")
    white_team: Optional[str] = Field(None, alias="whiteTeam")

    # Rules and setup
    rules: Optional[str] = None
    board_size: Optional[int] = Field(None, alias="boardSize")
    handicap: Optional[int] = None
    komi: Optional[float] = None
    time_limit: Optional[float] = Field(None, alias="timeLimit")
    overtime: Optional[str] = None

    result: Optional[str] = None

    # Application and file format
    application: Optional[str] = None
    charset: Optional[str] = None
    file_format: Optional[int] = Field(None, alias="fileFormat")
    game_type: Optional[int] = Field(None, alias="gameType")
    variation_style: Optional[int] = Field(None, alias="variationStyle")
    view: Optional[str] = None

    extra_properties: Dict[str, List[str]] = Field(
        default_factory=dict, alias="extraProperties"
    )


def _parse_int(value: str) -> Optional[int]:
    value = value.strip()
    if not _INT_PAT.fullmatch(value):
        return None
    return int(value)


def _parse_float(value: str) -> Optional[float]:
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def _parse_board_size(value: str) -> Optional[int]:
    # Rectangular boards are written "cols:rows"; use the larger side.
    if ":" in value:
        sides = [_parse_int(part) for part in value.split(":", 1)]
        if any(side is None for side in sides):
            return None
        return max(sides)  # type: ignore[type-var]
    return _parse_int(value)


_Converter = Callable[[str], object]

# SGF tag -> (GameMetadata field, converter)
KNOWN_TAGS: dict[str, tuple[str, _Converter]] = {
    "GN": ("game_name", unescape_value),
    "GC": ("game_comment", unescape_value),
    "EV": ("event", unescape_value),
    "RO": ("round", unescape_value),
    "DT": ("date", unescape_value),
    "PC": ("place", unescape_value),
    "SO": ("source", unescape_value),
    "US": ("user", unescape_value),
    "AN": ("annotator", unescape_value),
    "CP": ("copyright", unescape_value),
    "PB": ("player_black", unescape_value),
    "PW": ("player_white", unescape_value),
    "BR": ("black_rank", unescape_value),
    "WR": ("white_rank", unescape_value),
    "BT": ("black_team", unescape_value),
    "WT": ("white_team", unescape_value),
    "RU": ("rules", unescape_value),
    "SZ": ("board_size", _parse_board_size),
    "HA": ("handicap", _parse_int),
    "KM": ("komi", _parse_float),
    "TM": ("time_limit", _parse_float),
    "OT": ("overtime", unescape_value),
    "RE": ("result", unescape_value),
    "AP": ("application", unescape_value),
    "CA": ("charset", unescape_value),
    "FF": ("file_format", _parse_int),
    "GM": ("game_type", _parse_int),
    "ST": ("variation_style", _parse_int),
    "VW": ("view", unescape_value),
}

# Board content, reported through move counts rather than as metadata.
_CONTENT_TAGS = frozenset(MOVE_TAGS + SETUP_TAGS)


@dataclass(frozen=True)
class MetadataResult:
    """Extracted metadata plus the derived effective board size."""
    metadata: GameMetadata
    board_size: int
    warnings: list[str] = field(default_factory=list)


def extract_metadata(tree: GameTree | GameNode) -> MetadataResult:
    """Extract game information from the root node of ``tree``.

    Raises:
        UnsupportedGameError: GM is present and is not 1
        InvalidParametersError: board size outside [1, MAX_BOARD_SIZE]
    """
    root = tree.root if isinstance(tree, GameTree) else tree
    warnings: list[str] = []
    values: dict[str, object] = {}
    extra: dict[str, list[str]] = {}

    for tag, raw_values in root.properties.items():
        known = KNOWN_TAGS.get(tag)
        if known is None:
            if tag not in _CONTENT_TAGS:
                extra[tag] = [unescape_value(v) for v in raw_values]
            continue
        field_name, convert = known
        converted = convert(raw_values[0]) if raw_values else None
        if converted is None:
            warnings.append(
                f"Property {tag} has non-numeric value {raw_values[0]!r}; ignored"
            )
            continue
        values[field_name] = converted

    raw_game_type = unescape_value(root.properties.get("GM", ("",))[0]).strip()
    if raw_game_type and values.get("game_type") != GO_GAME_TYPE:
        game_type = values.get("game_type", raw_game_type)
        raise UnsupportedGameError(
            f"Unsupported game type: {game_type}. Only Go (GM[1]) is supported.",
            game_type=str(game_type),
        )

    board_size = values.get("board_size")
    if board_size is None:
        warnings.append("Board size (SZ) not specified, assuming 19x19")
        board_size = DEFAULT_BOARD_SIZE
    if not 1 <= board_size <= MAX_BOARD_SIZE:  # type: ignore[operator]
        raise InvalidParametersError(
            f"Invalid board size: {board_size}. Must be between 1 and {MAX_BOARD_SIZE}.",
            field="SZ",
            rule="board_size",
            details={"boardSize": board_size, "min": 1, "max": MAX_BOARD_SIZE},
        )

    if "file_format" not in values:
        warnings.append("File format (FF) not specified")

    if isinstance(tree, GameTree) and tree.ignored_trailing_content:
        warnings.append(
            "Only the first game record was used; additional content was ignored"
        )

    metadata = GameMetadata(**values, extra_properties=extra)
    return MetadataResult(
        metadata=metadata,
        board_size=int(board_size),  # type: ignore[arg-type]
        warnings=warnings,
    )
