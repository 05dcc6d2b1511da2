"""
Move selector resolution.

Turns a schema-validated diagram request plus the facts learned from parsing
(total move count, board size) into a :class:`ResolvedRenderInstruction`, or
raises :class:`InvalidParametersError` naming the violated rule.

Index convention
----------------
Every move index handled here is a 0-based *position index*: position ``k``
is the board after the first ``k`` moves, ``0`` is the setup position and
``total_moves`` is the final position. The only place that translates to the
renderer's own convention is :func:`position_to_renderer_move`.

Rules are applied in a fixed order so that the first violation reported is
deterministic:

1. board size above the renderer ceiling
2. single move together with a range
3. incomplete range
4. range start after range end
5. negative index, or index above the configured ceiling
6. any index outside ``[0, total_moves]``
7. width or height outside ``[MIN_DIMENSION, MAX_DIMENSION]``

Rules 2-4 live in :func:`check_selector_shape`, rule 5 in
:func:`check_move_bounds` and rule 7 in :func:`check_dimensions`. The argument
validator calls the same three functions, so both layers report identical
messages for the same violation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..config import (
    DEFAULT_DIMENSION,
    DEFAULT_MAX_MOVE_INDEX,
    MAX_BOARD_SIZE,
    MAX_DIMENSION,
    MIN_DIMENSION,
)
from ..errors import InvalidParametersError
from ..models import DiagramArguments, ImageFormat, Theme


class SelectorKind(str, Enum):
    FULL_GAME = "full_game"
    SINGLE_MOVE = "single_move"
    MOVE_RANGE = "move_range"


@dataclass(frozen=True)
class ResolvedRenderInstruction:
    """Fully defaulted, bounds-checked diagram request."""
    kind: SelectorKind
    move_number: Optional[int]
    start_move: Optional[int]
    end_move: Optional[int]
    width: int
    height: int
    coord_labels: bool
    move_numbers: bool
    theme: Theme
    image_format: ImageFormat
    moves_covered: int
    board_size: int
    total_moves: int

    @property
    def mime_type(self) -> str:
        return self.image_format.mime_type

    @property
    def target_position(self) -> int:
        """Position index the diagram shows."""
        if self.kind is SelectorKind.SINGLE_MOVE:
            assert self.move_number is not None
            return self.move_number
        if self.kind is SelectorKind.MOVE_RANGE:
            assert self.end_move is not None
            return self.end_move
        return self.total_moves

    def parameters(self) -> dict[str, Any]:
        """Effective parameters, echoed back to the caller."""
        params: dict[str, Any] = {
            "format": self.image_format.value,
            "theme": self.theme.value,
            "width": self.width,
            "height": self.height,
            "coordLabels": self.coord_labels,
            "moveNumbers": self.move_numbers,
        }
        if self.move_number is not None:
            params["moveNumber"] = self.move_number
        if self.start_move is not None:
            params["startMove"] = self.start_move
            params["endMove"] = self.end_move
        return params


def position_to_renderer_move(position: int) -> int:
    """Convert a position index to the renderer's "moves to replay" count.

    Position ``k`` is reached by replaying ``k`` moves, so the values
    coincide; keep every conversion going through here regardless.
    """
    if position < 0:
        raise ValueError(f"position must be non-negative, got {position}")
    return position


def check_selector_shape(
    move_number: Optional[int],
    start_move: Optional[int],
    end_move: Optional[int],
) -> SelectorKind:
    """Validate the mutually exclusive selector shapes (rules 2-4)."""
    if move_number is not None and (start_move is not None or end_move is not None):
        raise InvalidParametersError(
            "Cannot specify both moveNumber and move range (startMove/endMove)",
            field="moveNumber",
            rule="mutually_exclusive",
        )
    if (start_move is None) != (end_move is None):
        raise InvalidParametersError(
            "Both startMove and endMove must be specified for move range",
            field="startMove" if start_move is None else "endMove",
            rule="incomplete_range",
        )
    if start_move is not None and end_move is not None:
        if start_move > end_move:
            raise InvalidParametersError(
                f"Start move {start_move} cannot be greater than end move {end_move}",
                field="startMove",
                rule="range_order",
                details={"startMove": start_move, "endMove": end_move},
            )
        return SelectorKind.MOVE_RANGE
    if move_number is not None:
        return SelectorKind.SINGLE_MOVE
    return SelectorKind.FULL_GAME


def _check_index(label: str, field: str, value: Optional[int], total_moves: int) -> None:
    if value is None:
        return
    if value > total_moves:
        raise InvalidParametersError(
            f"{label} {value} is out of range (0-{total_moves})",
            field=field,
            rule="move_out_of_range",
            details={"value": value, "min": 0, "max": total_moves},
        )


def check_move_bounds(
    move_number: Optional[int],
    start_move: Optional[int],
    end_move: Optional[int],
    max_move_index: int = DEFAULT_MAX_MOVE_INDEX,
) -> None:
    """Reject negative indices and indices above the configured ceiling (rule 5)."""
    for label, field, value in (
        ("Move number", "moveNumber", move_number),
        ("Start move", "startMove", start_move),
        ("End move", "endMove", end_move),
    ):
        if value is None:
            continue
        if value < 0:
            raise InvalidParametersError(
                f"{label} must be non-negative",
                field=field,
                rule="non_negative",
                details={"value": value, "min": 0},
            )
        if value > max_move_index:
            raise InvalidParametersError(
                f"{label} too large (max {max_move_index})",
                field=field,
                rule="move_index_limit",
                details={"value": value, "max": max_move_index},
            )


def check_dimensions(width: Optional[int], height: Optional[int]) -> None:
    """Keep image dimensions within [MIN_DIMENSION, MAX_DIMENSION] (rule 7)."""
    for label, field, value in (("Width", "width", width), ("Height", "height", height)):
        if value is None:
            continue
        if value < MIN_DIMENSION:
            message = f"{label} must be at least {MIN_DIMENSION} pixels"
        elif value > MAX_DIMENSION:
            message = f"{label} must be at most {MAX_DIMENSION} pixels"
        else:
            continue
        raise InvalidParametersError(
            message,
            field=field,
            rule="dimension_out_of_range",
            details={"value": value, "min": MIN_DIMENSION, "max": MAX_DIMENSION},
        )


def resolve_selector(
    arguments: DiagramArguments,
    total_moves: int,
    board_size: int,
    max_board_size: int = MAX_BOARD_SIZE,
    max_move_index: int = DEFAULT_MAX_MOVE_INDEX,
) -> ResolvedRenderInstruction:
    """Resolve ``arguments`` against a parsed record.

    Raises:
        InvalidParametersError: the first violated rule, in rule order
    """
    if board_size > max_board_size:
        raise InvalidParametersError(
            f"Board size {board_size} exceeds maximum supported size of {max_board_size}",
            field="boardSize",
            rule="board_size_limit",
            details={"boardSize": board_size, "max": max_board_size},
        )

    kind = check_selector_shape(
        arguments.move_number, arguments.start_move, arguments.end_move
    )
    check_move_bounds(
        arguments.move_number, arguments.start_move, arguments.end_move, max_move_index
    )

    _check_index("Move number", "moveNumber", arguments.move_number, total_moves)
    _check_index("Start move", "startMove", arguments.start_move, total_moves)
    _check_index("End move", "endMove", arguments.end_move, total_moves)

    check_dimensions(arguments.width, arguments.height)

    if kind is SelectorKind.SINGLE_MOVE:
        assert arguments.move_number is not None
        moves_covered = arguments.move_number + 1
    elif kind is SelectorKind.MOVE_RANGE:
        assert arguments.start_move is not None and arguments.end_move is not None
        moves_covered = arguments.end_move - arguments.start_move + 1
    else:
        moves_covered = total_moves

    return ResolvedRenderInstruction(
        kind=kind,
        move_number=arguments.move_number,
        start_move=arguments.start_move,
        end_move=arguments.end_move,
        width=arguments.width if arguments.width is not None else DEFAULT_DIMENSION,
        height=arguments.height if arguments.height is not None else DEFAULT_DIMENSION,
        coord_labels=arguments.coord_labels is not False,
        move_numbers=arguments.move_numbers is not False,
        theme=arguments.theme or list(Theme)[0],
        image_format=arguments.format or list(ImageFormat)[0],
        moves_covered=moves_covered,
        board_size=board_size,
        total_moves=total_moves,
    )
