"""Tests for the argument gate of both operations."""

import pytest

from sgf_service.errors import ErrorKind, InvalidParametersError
from sgf_service.models import ImageFormat, Theme
from sgf_service.validation import validate_diagram_arguments, validate_info_arguments
from tests.helpers import SIMPLE_GAME


def _diagram_error(**fields) -> InvalidParametersError:
    with pytest.raises(InvalidParametersError) as exc_info:
        validate_diagram_arguments({"sgfContent": SIMPLE_GAME, **fields})
    return exc_info.value


class TestInfoArguments:
    def test_valid(self):
        arguments = validate_info_arguments({"sgfContent": SIMPLE_GAME})
        assert arguments.sgf_content == SIMPLE_GAME

    def test_missing_content(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            validate_info_arguments({})
        error = exc_info.value
        assert error.kind == ErrorKind.INVALID_PARAMETERS
        assert error.message == "Missing required parameter: sgfContent"
        assert error.details["field"] == "sgfContent"

    def test_closed_schema(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            validate_info_arguments({"sgfContent": SIMPLE_GAME, "moveNumber": 1, "extra": True})
        error = exc_info.value
        assert error.message == "Unexpected properties: moveNumber, extra"
        assert error.details["extraKeys"] == ["moveNumber", "extra"]
        assert error.details["rule"] == "closed_schema"

    def test_missing_reported_before_extra(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            validate_info_arguments({"content": SIMPLE_GAME})
        assert exc_info.value.message == "Missing required parameter: sgfContent"
        assert exc_info.value.details["extraKeys"] == ["content"]

    def test_content_must_be_string(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            validate_info_arguments({"sgfContent": 12})
        assert exc_info.value.message == "SGF content must be a string"

    @pytest.mark.parametrize("args", [None, [], "(;FF[4])", 3])
    def test_arguments_must_be_object(self, args):
        with pytest.raises(InvalidParametersError) as exc_info:
            validate_info_arguments(args)
        assert exc_info.value.message == "Arguments must be an object"


class TestDiagramArguments:
    def test_full_argument_set(self):
        arguments = validate_diagram_arguments({
            "sgfContent": SIMPLE_GAME,
            "startMove": 0,
            "endMove": 2,
            "width": 300,
            "height": 200,
            "coordLabels": False,
            "moveNumbers": True,
            "theme": "modern",
            "format": "svg",
        })
        assert arguments.start_move == 0
        assert arguments.end_move == 2
        assert arguments.theme is Theme.MODERN
        assert arguments.format is ImageFormat.SVG

    def test_only_content(self):
        arguments = validate_diagram_arguments({"sgfContent": SIMPLE_GAME})
        assert arguments.move_number is None
        assert arguments.width is None

    def test_negative_move_number(self):
        error = _diagram_error(moveNumber=-1)
        assert error.message == "Move number must be non-negative"
        assert error.details["field"] == "moveNumber"

    def test_move_number_above_schema_ceiling(self):
        error = _diagram_error(moveNumber=1001)
        assert error.message == "Move number too large (max 1000)"

    def test_configured_schema_ceiling(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            validate_diagram_arguments(
                {"sgfContent": SIMPLE_GAME, "startMove": 0, "endMove": 51},
                max_move_index=50,
            )
        assert exc_info.value.message == "End move too large (max 50)"

    @pytest.mark.parametrize("value", ["5", 1.5, True])
    def test_move_number_must_be_integer(self, value):
        error = _diagram_error(moveNumber=value)
        assert error.message == "Move number must be an integer"

    def test_width_too_small(self):
        assert _diagram_error(width=99).message == "Width must be at least 100 pixels"

    def test_height_too_large(self):
        assert _diagram_error(height=2001).message == "Height must be at most 2000 pixels"

    def test_flag_must_be_boolean(self):
        assert _diagram_error(coordLabels=1).message == "coordLabels must be a boolean"

    def test_unknown_theme(self):
        error = _diagram_error(theme="neon")
        assert error.message == "Theme must be one of: classic, modern, minimal"

    def test_unknown_format(self):
        error = _diagram_error(format="jpeg")
        assert error.message == "Format must be either png or svg"

    def test_unknown_field(self):
        error = _diagram_error(moveNumber=1, zoom=2)
        assert error.message == "Unexpected properties: zoom"

    def test_all_issues_are_in_details(self):
        error = _diagram_error(width=5, height=5)
        fields = [issue["field"] for issue in error.details["issues"]]
        assert fields == ["width", "height"]


class TestSharedSelectorRules:
    """Shape violations give the same message the resolver gives"""

    def test_mutual_exclusion(self):
        error = _diagram_error(moveNumber=1, startMove=0, endMove=1)
        assert error.message == "Cannot specify both moveNumber and move range (startMove/endMove)"
        assert error.details["rule"] == "mutually_exclusive"

    def test_incomplete_range(self):
        error = _diagram_error(startMove=0)
        assert error.message == "Both startMove and endMove must be specified for move range"

    def test_reversed_range(self):
        error = _diagram_error(startMove=4, endMove=1)
        assert error.message == "Start move 4 cannot be greater than end move 1"
