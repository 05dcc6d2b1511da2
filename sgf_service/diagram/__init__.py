"""Diagram selection and rendering."""

from .renderer import (
    BoardDiagramRenderer,
    DiagramRenderer,
    RenderRequest,
    build_render_request,
)
from .selector import (
    ResolvedRenderInstruction,
    SelectorKind,
    check_selector_shape,
    position_to_renderer_move,
    resolve_selector,
)

__all__ = [
    "BoardDiagramRenderer",
    "DiagramRenderer",
    "RenderRequest",
    "ResolvedRenderInstruction",
    "SelectorKind",
    "build_render_request",
    "check_selector_shape",
    "position_to_renderer_move",
    "resolve_selector",
]
