"""
SGF tool operations.

Two operations are exposed, each taking a JSON-like argument object and
returning a JSON-like result envelope:

* ``get-sgf-info``    -> ``{"success": true, "data": {gameInfo, metadata, warnings?}}``
* ``get-sgf-diagram`` -> ``{"success": true, "data": {imageData, mimeType, ...}}``

Failures are returned as ``{"success": false, "error": {type, message, details?}}``.
Every request builds its own tree, metadata and render instruction; nothing is
cached between calls.
"""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from pydantic import BaseModel

from .config import ServiceSettings, load_settings
from .diagram.renderer import BoardDiagramRenderer, DiagramRenderer, build_render_request
from .diagram.selector import resolve_selector
from .errors import SgfServiceError, UnexpectedError
from .metrics import RECORD_BYTES, RECORD_MOVES, observe_tool_result
from .models import (
    DiagramArguments,
    DiagramData,
    DiagramResponse,
    ErrorBody,
    ErrorResponse,
    InfoArguments,
    InfoData,
    InfoMetadata,
    InfoResponse,
)
from .sgf.metadata import MetadataResult, extract_metadata
from .sgf.move_counter import count_moves
from .sgf.parser import parse_sgf
from .sgf.text_validator import sanitize_sgf_text, validate_sgf_text
from .sgf.tree import GameTree
from .validation import validate_diagram_arguments, validate_info_arguments

logger = logging.getLogger(__name__)

GET_SGF_INFO = "get-sgf-info"
GET_SGF_DIAGRAM = "get-sgf-diagram"


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and argument schema advertised for a tool."""
    name: str
    description: str
    arguments_model: Type[BaseModel]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.arguments_model.model_json_schema(by_alias=True),
        }


TOOL_DEFINITIONS: Dict[str, ToolDefinition] = {
    GET_SGF_INFO: ToolDefinition(
        name=GET_SGF_INFO,
        description=(
            "Extract comprehensive game information from SGF (Smart Game Format) "
            "files. Returns all available metadata including player names, ranks, "
            "game details, rules, and result."
        ),
        arguments_model=InfoArguments,
    ),
    GET_SGF_DIAGRAM: ToolDefinition(
        name=GET_SGF_DIAGRAM,
        description=(
            "Generate visual board diagrams from SGF (Smart Game Format) files. "
            "Returns PNG or SVG images showing the board position at a specified "
            "move or move range, with optional themes and annotations."
        ),
        arguments_model=DiagramArguments,
    ),
}


@dataclass(frozen=True)
class ParsedGame:
    """Everything learned from one SGF payload."""
    sgf_content: str
    tree: GameTree
    info: MetadataResult
    total_moves: int


def load_game(raw_content: Any, settings: ServiceSettings) -> ParsedGame:
    """Validate, parse and summarise raw SGF text."""
    validate_sgf_text(raw_content, settings.max_sgf_bytes)
    sgf_content = sanitize_sgf_text(raw_content)
    RECORD_BYTES.observe(len(sgf_content.encode("utf-8")))

    tree = parse_sgf(sgf_content)
    info = extract_metadata(tree)
    total_moves = count_moves(tree)
    RECORD_MOVES.observe(total_moves)
    return ParsedGame(
        sgf_content=sgf_content,
        tree=tree,
        info=info,
        total_moves=total_moves,
    )


def get_sgf_info(args: Any, settings: Optional[ServiceSettings] = None) -> InfoResponse:
    """Run the info operation, raising :class:`SgfServiceError` on failure."""
    settings = settings or load_settings()
    arguments = validate_info_arguments(args)
    game = load_game(arguments.sgf_content, settings)
    return InfoResponse(
        data=InfoData(
            game_info=game.info.metadata,
            metadata=InfoMetadata(
                total_moves=game.total_moves,
                board_size=game.info.board_size,
                has_valid_structure=True,
            ),
            warnings=game.info.warnings or None,
        )
    )


async def render_diagram(
    args: Any,
    renderer: Optional[DiagramRenderer] = None,
    settings: Optional[ServiceSettings] = None,
) -> tuple[DiagramResponse, bytes]:
    """Run the diagram operation, returning the response and raw image bytes."""
    settings = settings or load_settings()
    renderer = renderer or BoardDiagramRenderer()
    arguments = validate_diagram_arguments(args, max_move_index=settings.max_move_index)
    game = load_game(arguments.sgf_content, settings)

    instruction = resolve_selector(
        arguments,
        total_moves=game.total_moves,
        board_size=game.info.board_size,
        max_board_size=settings.max_board_size,
        max_move_index=settings.max_move_index,
    )
    request = build_render_request(game.sgf_content, instruction)

    try:
        image_bytes = await renderer.render(request)
    except SgfServiceError:
        raise
    except Exception as e:
        raise UnexpectedError(
            f"Failed to generate diagram: {e}",
            details={"stage": "render"},
        ) from e
    if not isinstance(image_bytes, (bytes, bytearray)):
        raise UnexpectedError(
            "Renderer returned no image data",
            details={"stage": "render", "received": type(image_bytes).__name__},
        )

    response = DiagramResponse(
        data=DiagramData(
            image_data=base64.b64encode(bytes(image_bytes)).decode("ascii"),
            mime_type=instruction.mime_type,
            width=instruction.width,
            height=instruction.height,
            moves_covered=instruction.moves_covered,
            board_size=instruction.board_size,
            parameters=instruction.parameters(),
        )
    )
    return response, bytes(image_bytes)


def error_envelope(error: BaseException) -> Dict[str, Any]:
    """Convert any exception into the failure envelope."""
    if not isinstance(error, SgfServiceError):
        error = UnexpectedError(str(error) or "An unexpected error occurred")
    body = error.to_dict()
    return ErrorResponse(error=ErrorBody(**body)).model_dump(exclude_none=True)


def _log_failure(tool: str, error: BaseException) -> str:
    if isinstance(error, SgfServiceError):
        logger.warning("%s rejected: %s", tool, error)
        return error.kind.value
    logger.error("Unexpected error in %s: %s", tool, str(error), exc_info=True)
    return UnexpectedError.kind.value


def handle_get_sgf_info(
    args: Any,
    settings: Optional[ServiceSettings] = None,
) -> Dict[str, Any]:
    """Handle get-sgf-info, always returning an envelope."""
    start_time = time.time()
    try:
        response = get_sgf_info(args, settings)
    except Exception as e:
        outcome = _log_failure(GET_SGF_INFO, e)
        observe_tool_result(GET_SGF_INFO, outcome, time.time() - start_time)
        return error_envelope(e)

    observe_tool_result(GET_SGF_INFO, "success", time.time() - start_time)
    logger.info(
        "get-sgf-info: moves=%d, board=%d, warnings=%d",
        response.data.metadata.total_moves,
        response.data.metadata.board_size,
        len(response.data.warnings or []),
    )
    return response.model_dump(by_alias=True, exclude_none=True)


async def handle_get_sgf_diagram(
    args: Any,
    renderer: Optional[DiagramRenderer] = None,
    settings: Optional[ServiceSettings] = None,
) -> Dict[str, Any]:
    """Handle get-sgf-diagram, always returning an envelope."""
    start_time = time.time()
    try:
        response, _ = await render_diagram(args, renderer, settings)
    except Exception as e:
        outcome = _log_failure(GET_SGF_DIAGRAM, e)
        observe_tool_result(GET_SGF_DIAGRAM, outcome, time.time() - start_time)
        return error_envelope(e)

    data = response.data
    observe_tool_result(GET_SGF_DIAGRAM, "success", time.time() - start_time)
    logger.info(
        "get-sgf-diagram: %s %dx%d, moves_covered=%d, board=%d",
        data.mime_type,
        data.width,
        data.height,
        data.moves_covered,
        data.board_size,
    )
    return response.model_dump(by_alias=True, exclude_none=True)


async def _call_info(
    args: Any,
    renderer: Optional[DiagramRenderer],
    settings: Optional[ServiceSettings],
) -> Dict[str, Any]:
    return handle_get_sgf_info(args, settings)


_HANDLERS: Dict[
    str,
    Callable[[Any, Optional[DiagramRenderer], Optional[ServiceSettings]], Awaitable[Dict[str, Any]]],
] = {
    GET_SGF_INFO: _call_info,
    GET_SGF_DIAGRAM: handle_get_sgf_diagram,
}


async def call_tool(
    name: str,
    args: Any,
    renderer: Optional[DiagramRenderer] = None,
    settings: Optional[ServiceSettings] = None,
) -> Dict[str, Any]:
    """Dispatch a named operation.

    Raises:
        LookupError: ``name`` is not a known tool
    """
    handler = _HANDLERS.get(name)
    if handler is None:
        raise LookupError(f"Unknown tool: {name}")
    return await handler(args, renderer, settings)


def list_tools() -> list[Dict[str, Any]]:
    return [definition.to_dict() for definition in TOOL_DEFINITIONS.values()]
