"""Tests for render request construction and the default board renderer."""

import io

import pytest
from PIL import Image

from sgf_service.diagram.renderer import (
    BoardDiagramRenderer,
    DiagramRenderer,
    RenderRequest,
    build_render_request,
    star_points,
)
from sgf_service.diagram.selector import resolve_selector
from sgf_service.models import DiagramArguments
from tests.helpers import CAPTURE_GAME, HANDICAP_GAME, SIMPLE_GAME, RecordingRenderer


def _instruction(text, total_moves, board_size=19, **fields):
    arguments = DiagramArguments.model_validate({"sgfContent": text, **fields})
    return resolve_selector(arguments, total_moves=total_moves, board_size=board_size)


def _request(**overrides) -> RenderRequest:
    values = dict(
        sgf_content=CAPTURE_GAME,
        move_number=None,
        first_numbered_move=1,
        width=300,
        height=200,
        coord_labels=True,
        move_numbers=True,
        theme="classic",
        image_format="png",
    )
    values.update(overrides)
    return RenderRequest(**values)


class TestBuildRenderRequest:
    def test_full_game(self):
        request = build_render_request(SIMPLE_GAME, _instruction(SIMPLE_GAME, 2))
        assert request.move_number is None
        assert request.first_numbered_move == 1
        assert request.sgf_content == SIMPLE_GAME
        assert request.theme == "classic"
        assert request.image_format == "png"

    def test_single_move(self):
        request = build_render_request(
            SIMPLE_GAME, _instruction(SIMPLE_GAME, 2, moveNumber=1)
        )
        assert request.move_number == 1

    def test_range_uses_end_position(self):
        request = build_render_request(
            SIMPLE_GAME,
            _instruction(SIMPLE_GAME, 7, startMove=3, endMove=6, theme="modern", format="svg"),
        )
        assert request.move_number == 6
        assert request.first_numbered_move == 4
        assert request.theme == "modern"
        assert request.image_format == "svg"

    def test_flags_pass_through(self):
        request = build_render_request(
            SIMPLE_GAME,
            _instruction(SIMPLE_GAME, 2, coordLabels=False, moveNumbers=False, width=150),
        )
        assert request.coord_labels is False
        assert request.move_numbers is False
        assert request.width == 150
        assert request.height == 600


class TestRendererCapability:
    def test_default_renderer_satisfies_protocol(self):
        assert isinstance(BoardDiagramRenderer(), DiagramRenderer)

    def test_stub_satisfies_protocol(self):
        assert isinstance(RecordingRenderer(), DiagramRenderer)


class TestStarPoints:
    @pytest.mark.parametrize("size,count", [(19, 9), (13, 9), (9, 5), (5, 0), (10, 4)])
    def test_counts(self, size, count):
        assert len(star_points(size)) == count

    def test_19x19_corners(self):
        assert (3, 3) in star_points(19)
        assert (15, 15) in star_points(19)


class TestBoardDiagramRenderer:
    def test_png_output(self):
        data = BoardDiagramRenderer().render_sync(_request())
        assert data.startswith(b"\x89PNG\r\n\x1a\n")
        image = Image.open(io.BytesIO(data))
        assert image.size == (300, 200)

    def test_svg_output(self):
        data = BoardDiagramRenderer().render_sync(_request(image_format="svg"))
        text = data.decode("utf-8")
        assert text.startswith("<?xml")
        assert "<svg" in text
        assert 'width="300"' in text
        assert 'height="200"' in text

    def test_svg_move_numbers(self):
        data = BoardDiagramRenderer().render_sync(
            _request(image_format="svg", coord_labels=False)
        )
        text = data.decode("utf-8")
        # Move 2 was captured; its label disappears with the stone.
        assert ">7</text>" in text
        assert ">2</text>" not in text

    def test_svg_without_numbers_or_coordinates(self):
        data = BoardDiagramRenderer().render_sync(
            _request(image_format="svg", coord_labels=False, move_numbers=False)
        )
        assert b"<text" not in data

    def test_svg_coordinates_skip_i(self):
        data = BoardDiagramRenderer().render_sync(
            _request(sgf_content=HANDICAP_GAME, image_format="svg", move_numbers=False)
        )
        text = data.decode("utf-8")
        assert ">T</text>" in text
        assert ">I</text>" not in text
        assert ">19</text>" in text

    @pytest.mark.parametrize("theme", ["classic", "modern", "minimal"])
    def test_themes_change_background(self, theme):
        data = BoardDiagramRenderer().render_sync(_request(theme=theme))
        image = Image.open(io.BytesIO(data)).convert("RGB")
        corner = image.getpixel((0, 0))
        expected = {
            "classic": (0xDC, 0xB3, 0x5C),
            "modern": (0xE8, 0xD6, 0xB0),
            "minimal": (0xFF, 0xFF, 0xFF),
        }[theme]
        assert corner == expected

    def test_position_limit(self):
        full = BoardDiagramRenderer().render_sync(_request(image_format="svg"))
        start = BoardDiagramRenderer().render_sync(
            _request(image_format="svg", move_number=0)
        )
        assert full.count(b"<circle") > start.count(b"<circle")

    def test_large_board(self):
        data = BoardDiagramRenderer().render_sync(
            _request(sgf_content="(;FF[4]SZ[52];B[ZZ])", width=400, height=400)
        )
        assert Image.open(io.BytesIO(data)).size == (400, 400)

    @pytest.mark.asyncio
    async def test_render_is_awaitable(self):
        data = await BoardDiagramRenderer().render(_request())
        assert data.startswith(b"\x89PNG")
