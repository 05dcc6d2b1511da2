"""
Board diagram rendering.

The service only depends on the :class:`DiagramRenderer` capability: an
awaitable ``render(request) -> bytes``. :class:`BoardDiagramRenderer` is the
default implementation; it replays the main line and draws the resulting
position as PNG (Pillow) or SVG (svgwrite).

Usage:
    renderer = BoardDiagramRenderer()
    request = build_render_request(sgf_text, instruction)
    image_bytes = await renderer.render(request)
"""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import svgwrite
from PIL import Image, ImageDraw, ImageFont

from ..models import ImageFormat, Theme
from ..sgf.metadata import extract_metadata
from ..sgf.parser import parse_sgf
from .board import BoardPosition, Point, replay_main_line
from .selector import ResolvedRenderInstruction, SelectorKind, position_to_renderer_move

logger = logging.getLogger(__name__)

# Column letters skip "I"; boards above 25 continue with two-letter columns.
_GTP_COLUMNS = list("ABCDEFGHJKLMNOPQRSTUVWXYZ") + [
    a + b for a in "ABCDEFGH" for b in "ABCDEFGHJKLMNOPQRSTUVWXYZ"
]


@dataclass(frozen=True)
class RenderRequest:
    """Arguments handed to a renderer, in the renderer's move convention.

    ``move_number`` is the number of main-line moves to replay (None means
    the final position).
    """
    sgf_content: str
    move_number: Optional[int]
    first_numbered_move: int
    width: int
    height: int
    coord_labels: bool
    move_numbers: bool
    theme: str
    image_format: str


@runtime_checkable
class DiagramRenderer(Protocol):
    async def render(self, request: RenderRequest) -> bytes:
        ...


def build_render_request(
    sgf_content: str,
    instruction: ResolvedRenderInstruction,
) -> RenderRequest:
    """Translate a resolved instruction to the renderer's argument shape."""
    move_number: Optional[int] = None
    first_numbered = 1
    if instruction.kind is SelectorKind.SINGLE_MOVE:
        move_number = position_to_renderer_move(instruction.target_position)
    elif instruction.kind is SelectorKind.MOVE_RANGE:
        assert instruction.start_move is not None
        move_number = position_to_renderer_move(instruction.target_position)
        # Moves that lead from the start position to the end position.
        first_numbered = position_to_renderer_move(instruction.start_move) + 1

    return RenderRequest(
        sgf_content=sgf_content,
        move_number=move_number,
        first_numbered_move=first_numbered,
        width=instruction.width,
        height=instruction.height,
        coord_labels=instruction.coord_labels,
        move_numbers=instruction.move_numbers,
        theme=instruction.theme.value,
        image_format=instruction.image_format.value,
    )


@dataclass(frozen=True)
class ThemeColors:
    background: str
    line: str
    black_stone: str
    white_stone: str
    stone_outline: str
    label_on_black: str
    label_on_white: str
    coordinate: str


THEMES: dict[str, ThemeColors] = {
    Theme.CLASSIC.value: ThemeColors(
        background="#DCB35C",
        line="#000000",
        black_stone="#000000",
        white_stone="#FFFFFF",
        stone_outline="#000000",
        label_on_black="#FFFFFF",
        label_on_white="#000000",
        coordinate="#000000",
    ),
    Theme.MODERN.value: ThemeColors(
        background="#E8D6B0",
        line="#5A4A32",
        black_stone="#1E1E1E",
        white_stone="#F7F7F2",
        stone_outline="#3C3C3C",
        label_on_black="#F0F0F0",
        label_on_white="#1E1E1E",
        coordinate="#5A4A32",
    ),
    Theme.MINIMAL.value: ThemeColors(
        background="#FFFFFF",
        line="#9A9A9A",
        black_stone="#222222",
        white_stone="#FFFFFF",
        stone_outline="#222222",
        label_on_black="#FFFFFF",
        label_on_white="#222222",
        coordinate="#9A9A9A",
    ),
}


def star_points(size: int) -> list[Point]:
    """Hoshi positions for the usual board sizes."""
    if size < 7:
        return []
    edge = 2 if size < 13 else 3
    far = size - 1 - edge
    points = [(edge, edge), (edge, far), (far, edge), (far, far)]
    if size % 2 == 1:
        mid = size // 2
        points.append((mid, mid))
        if size >= 13:
            points += [(edge, mid), (far, mid), (mid, edge), (mid, far)]
    return points


@dataclass(frozen=True)
class _Layout:
    """Pixel geometry shared by both output formats."""
    size: int
    width: int
    height: int
    cell: float
    origin_x: float
    origin_y: float

    @classmethod
    def compute(cls, size: int, width: int, height: int, coord_labels: bool) -> "_Layout":
        padding = 1.2 if coord_labels else 0.7
        span = max(size - 1, 0) + 2 * padding
        cell = min(width, height) / span
        grid = cell * max(size - 1, 0)
        return cls(
            size=size,
            width=width,
            height=height,
            cell=cell,
            origin_x=(width - grid) / 2,
            origin_y=(height - grid) / 2,
        )

    def xy(self, point: Point) -> tuple[float, float]:
        col, row = point
        return self.origin_x + col * self.cell, self.origin_y + row * self.cell

    @property
    def far_edge_x(self) -> float:
        return self.origin_x + self.cell * (self.size - 1)

    @property
    def far_edge_y(self) -> float:
        return self.origin_y + self.cell * (self.size - 1)


def _column_label(col: int) -> str:
    return _GTP_COLUMNS[col] if col < len(_GTP_COLUMNS) else str(col + 1)


class BoardDiagramRenderer:
    """Default renderer drawing the main-line position."""

    async def render(self, request: RenderRequest) -> bytes:
        return await asyncio.to_thread(self.render_sync, request)

    def render_sync(self, request: RenderRequest) -> bytes:
        tree = parse_sgf(request.sgf_content)
        board_size = extract_metadata(tree).board_size
        position = replay_main_line(
            tree.root,
            board_size,
            move_limit=request.move_number,
            first_numbered_move=request.first_numbered_move,
            number_moves=request.move_numbers,
        )
        colors = THEMES.get(request.theme, THEMES[Theme.CLASSIC.value])
        layout = _Layout.compute(board_size, request.width, request.height, request.coord_labels)
        logger.debug(
            "Rendering %s diagram: size=%d moves=%d stones=%d",
            request.image_format,
            board_size,
            position.moves_played,
            len(position.stones),
        )
        if request.image_format == ImageFormat.SVG.value:
            return self._draw_svg(position, layout, colors, request.coord_labels)
        return self._draw_png(position, layout, colors, request.coord_labels)

    def _draw_png(
        self,
        position: BoardPosition,
        layout: _Layout,
        colors: ThemeColors,
        coord_labels: bool,
    ) -> bytes:
        image = Image.new("RGB", (layout.width, layout.height), colors.background)
        draw = ImageDraw.Draw(image)
        font_px = max(8, int(layout.cell * 0.45))
        font = ImageFont.load_default(size=font_px)
        line_width = max(1, int(layout.cell / 25))

        for i in range(layout.size):
            x, y = layout.xy((i, i))
            draw.line(
                [(x, layout.origin_y), (x, layout.far_edge_y)],
                fill=colors.line,
                width=line_width,
            )
            draw.line(
                [(layout.origin_x, y), (layout.far_edge_x, y)],
                fill=colors.line,
                width=line_width,
            )

        hoshi = max(2.0, layout.cell * 0.1)
        for point in star_points(layout.size):
            x, y = layout.xy(point)
            draw.ellipse([x - hoshi, y - hoshi, x + hoshi, y + hoshi], fill=colors.line)

        if coord_labels:
            offset = layout.cell * 0.75
            for i in range(layout.size):
                x, y = layout.xy((i, i))
                column = _column_label(i)
                row = str(layout.size - i)
                draw.text((x, layout.origin_y - offset), column, fill=colors.coordinate, font=font, anchor="mm")
                draw.text((x, layout.far_edge_y + offset), column, fill=colors.coordinate, font=font, anchor="mm")
                draw.text((layout.origin_x - offset, y), row, fill=colors.coordinate, font=font, anchor="mm")
                draw.text((layout.far_edge_x + offset, y), row, fill=colors.coordinate, font=font, anchor="mm")

        radius = layout.cell * 0.47
        for point, color in position.stones.items():
            x, y = layout.xy(point)
            fill = colors.black_stone if color == "B" else colors.white_stone
            draw.ellipse(
                [x - radius, y - radius, x + radius, y + radius],
                fill=fill,
                outline=colors.stone_outline,
                width=line_width,
            )
            label = position.labels.get(point)
            if label is not None:
                text_color = colors.label_on_black if color == "B" else colors.label_on_white
                draw.text((x, y), str(label), fill=text_color, font=font, anchor="mm")

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def _draw_svg(
        self,
        position: BoardPosition,
        layout: _Layout,
        colors: ThemeColors,
        coord_labels: bool,
    ) -> bytes:
        dwg = svgwrite.Drawing(size=(layout.width, layout.height), profile="full", debug=False)
        dwg.add(dwg.rect((0, 0), (layout.width, layout.height), fill=colors.background))

        line_style = {"stroke": colors.line, "stroke_width": max(1.0, layout.cell / 25)}
        for i in range(layout.size):
            x, y = layout.xy((i, i))
            dwg.add(dwg.line((x, layout.origin_y), (x, layout.far_edge_y), **line_style))
            dwg.add(dwg.line((layout.origin_x, y), (layout.far_edge_x, y), **line_style))

        for point in star_points(layout.size):
            dwg.add(dwg.circle(center=layout.xy(point), r=max(2.0, layout.cell * 0.1), fill=colors.line))

        font_size = f"{max(8.0, layout.cell * 0.45):.1f}px"
        text_style = {
            "text_anchor": "middle",
            "dominant_baseline": "central",
            "font_family": "sans-serif",
            "font_size": font_size,
        }
        if coord_labels:
            offset = layout.cell * 0.75
            for i in range(layout.size):
                x, y = layout.xy((i, i))
                column = _column_label(i)
                row = str(layout.size - i)
                for text, insert in (
                    (column, (x, layout.origin_y - offset)),
                    (column, (x, layout.far_edge_y + offset)),
                    (row, (layout.origin_x - offset, y)),
                    (row, (layout.far_edge_x + offset, y)),
                ):
                    dwg.add(dwg.text(text, insert=insert, fill=colors.coordinate, **text_style))

        radius = layout.cell * 0.47
        for point, color in position.stones.items():
            center = layout.xy(point)
            dwg.add(dwg.circle(
                center=center,
                r=radius,
                fill=colors.black_stone if color == "B" else colors.white_stone,
                stroke=colors.stone_outline,
                stroke_width=max(1.0, layout.cell / 25),
            ))
            label = position.labels.get(point)
            if label is not None:
                text_color = colors.label_on_black if color == "B" else colors.label_on_white
                dwg.add(dwg.text(str(label), insert=center, fill=text_color, **text_style))

        svg_string = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n' + dwg.tostring()
        return svg_string.encode("utf-8")
