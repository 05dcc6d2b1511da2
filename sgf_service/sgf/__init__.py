"""SGF ingestion: text validation, tree parsing, metadata and move counting."""

from .metadata import GameMetadata, MetadataResult, extract_metadata
from .move_counter import count_moves
from .parser import SgfParser, parse_sgf, unescape_value
from .text_validator import sanitize_sgf_text, validate_sgf_text
from .tree import GameNode, GameTree

__all__ = [
    "GameMetadata",
    "GameNode",
    "GameTree",
    "MetadataResult",
    "SgfParser",
    "count_moves",
    "extract_metadata",
    "parse_sgf",
    "sanitize_sgf_text",
    "unescape_value",
    "validate_sgf_text",
]
