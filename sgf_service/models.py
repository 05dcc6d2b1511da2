"""
Pydantic models for the SGF service operations.

Argument models are closed (``extra="forbid"``) and use strict scalar types so
that ``"5"`` is not silently accepted as a move number and ``1`` is not
accepted as a boolean flag. Numeric bounds are advertised in the JSON schema
but enforced by the shared checks in :mod:`sgf_service.diagram.selector`.
Response models serialise with camelCase aliases.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from .config import MAX_DIMENSION, MIN_DIMENSION
from .sgf.metadata import GameMetadata


class Theme(str, Enum):
    """Board theme enumeration (first member is the default)"""
    CLASSIC = "classic"
    MODERN = "modern"
    MINIMAL = "minimal"


class ImageFormat(str, Enum):
    """Output encoding enumeration (first member is the default)"""
    PNG = "png"
    SVG = "svg"

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self]


MIME_TYPES: Dict[ImageFormat, str] = {
    ImageFormat.PNG: "image/png",
    ImageFormat.SVG: "image/svg+xml",
}


class InfoArguments(BaseModel):
    """Arguments of the get-sgf-info operation"""
    model_config = ConfigDict(extra="forbid")

    sgf_content: StrictStr = Field(
        alias="sgfContent",
        description="The complete SGF file content as a string. Must be valid SGF format.",
    )


class DiagramArguments(BaseModel):
    """Arguments of the get-sgf-diagram operation.

    Move indices are 0-based positions: 0 is the setup position and the
    total move count is the final position.
    """
    model_config = ConfigDict(extra="forbid")

    sgf_content: StrictStr = Field(
        alias="sgfContent",
        description="The complete SGF file content as a string. Must be valid SGF format.",
    )
    move_number: Optional[StrictInt] = Field(
        None,
        alias="moveNumber",
        json_schema_extra={"minimum": 0},
        description="Position to display (0-based). If not specified, shows final position.",
    )
    start_move: Optional[StrictInt] = Field(
        None,
        alias="startMove",
        json_schema_extra={"minimum": 0},
        description="Start of move range to display (0-based). Use with endMove.",
    )
    end_move: Optional[StrictInt] = Field(
        None,
        alias="endMove",
        json_schema_extra={"minimum": 0},
        description="End of move range to display (0-based). Use with startMove.",
    )
    width: Optional[StrictInt] = Field(
        None,
        json_schema_extra={"minimum": MIN_DIMENSION, "maximum": MAX_DIMENSION},
        description="Image width in pixels (100-2000, default: 600).",
    )
    height: Optional[StrictInt] = Field(
        None,
        json_schema_extra={"minimum": MIN_DIMENSION, "maximum": MAX_DIMENSION},
        description="Image height in pixels (100-2000, default: 600).",
    )
    coord_labels: Optional[StrictBool] = Field(
        None,
        alias="coordLabels",
        description="Whether to show coordinate labels (default: true).",
    )
    move_numbers: Optional[StrictBool] = Field(
        None,
        alias="moveNumbers",
        description="Whether to show move numbers on stones (default: true).",
    )
    theme: Optional[Theme] = Field(
        None,
        description="Visual theme for the board (default: classic).",
    )
    format: Optional[ImageFormat] = Field(
        None,
        description="Output image format (default: png).",
    )


class InfoMetadata(BaseModel):
    """Structural facts about the parsed record"""
    model_config = ConfigDict(populate_by_name=True)

    total_moves: int = Field(alias="totalMoves")
    board_size: int = Field(alias="boardSize")
    has_valid_structure: bool = Field(True, alias="hasValidStructure")


class InfoData(BaseModel):
    """Successful get-sgf-info payload"""
    model_config = ConfigDict(populate_by_name=True)

    game_info: GameMetadata = Field(alias="gameInfo")
    metadata: InfoMetadata
    warnings: Optional[List[str]] = None


class DiagramData(BaseModel):
    """Successful get-sgf-diagram payload"""
    model_config = ConfigDict(populate_by_name=True)

    image_data: str = Field(alias="imageData")
    mime_type: str = Field(alias="mimeType")
    width: int
    height: int
    moves_covered: int = Field(alias="movesCovered")
    board_size: int = Field(alias="boardSize")
    parameters: Dict[str, Any]


class ErrorBody(BaseModel):
    """Structured failure"""
    type: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody


class InfoResponse(BaseModel):
    success: bool = True
    data: InfoData


class DiagramResponse(BaseModel):
    success: bool = True
    data: DiagramData
