"""
Argument validation for the operation entry points.

The argument models in :mod:`sgf_service.models` are closed and strictly
typed; this module runs them and converts pydantic's error list into a single
:class:`InvalidParametersError` with a caller-readable message. The diagram
selector shape, move-index bounds and image dimensions are delegated to the
checks in :mod:`sgf_service.diagram.selector`, so the schema layer and the
resolver report the same message for the same violation.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_MAX_MOVE_INDEX
from .diagram.selector import check_dimensions, check_move_bounds, check_selector_shape
from .errors import InvalidParametersError
from .models import DiagramArguments, ImageFormat, InfoArguments, Theme

ModelT = TypeVar("ModelT", bound=BaseModel)

FIELD_LABELS: dict[str, str] = {
    "sgfContent": "SGF content",
    "moveNumber": "Move number",
    "startMove": "Start move",
    "endMove": "End move",
    "width": "Width",
    "height": "Height",
    "coordLabels": "coordLabels",
    "moveNumbers": "moveNumbers",
    "theme": "Theme",
    "format": "Format",
}


def _issue_message(field: Optional[str], error_type: str, fallback: str) -> str:
    label = FIELD_LABELS.get(field or "", field or "Arguments")
    if error_type == "missing":
        return f"Missing required parameter: {field}"
    if error_type == "string_type":
        return f"{label} must be a string"
    if error_type in ("int_type", "int_parsing", "int_from_float"):
        return f"{label} must be an integer"
    if error_type == "bool_type":
        return f"{label} must be a boolean"
    if error_type == "enum":
        if field == "theme":
            return "Theme must be one of: " + ", ".join(t.value for t in Theme)
        if field == "format":
            return "Format must be either " + " or ".join(f.value for f in ImageFormat)
    return f"{label}: {fallback}"


def _convert_errors(error: PydanticValidationError) -> InvalidParametersError:
    issues: list[dict[str, Any]] = []
    extra_keys: list[str] = []
    for item in error.errors():
        loc = item.get("loc") or ()
        field = str(loc[0]) if loc else None
        if item["type"] == "extra_forbidden" and field is not None:
            extra_keys.append(field)
            continue
        issues.append({
            "field": field,
            "type": item["type"],
            "message": _issue_message(field, item["type"], item["msg"]),
        })

    missing = [issue for issue in issues if issue["type"] == "missing"]
    if missing:
        first = missing[0]
    elif extra_keys:
        return InvalidParametersError(
            f"Unexpected properties: {', '.join(extra_keys)}",
            rule="closed_schema",
            details={"extraKeys": extra_keys, "issues": issues},
        )
    else:
        first = issues[0]

    return InvalidParametersError(
        first["message"],
        field=first["field"],
        rule=first["type"],
        details={"issues": issues, **({"extraKeys": extra_keys} if extra_keys else {})},
    )


def _validate(model: Type[ModelT], args: Any) -> ModelT:
    if not isinstance(args, dict):
        raise InvalidParametersError(
            "Arguments must be an object",
            rule="type",
            details={"received": type(args).__name__},
        )
    try:
        return model.model_validate(args)
    except PydanticValidationError as e:
        raise _convert_errors(e) from None


def validate_info_arguments(args: Any) -> InfoArguments:
    """Validate get-sgf-info arguments.

    Raises:
        InvalidParametersError: wrong shape, missing or unexpected fields
    """
    return _validate(InfoArguments, args)


def validate_diagram_arguments(
    args: Any,
    max_move_index: int = DEFAULT_MAX_MOVE_INDEX,
) -> DiagramArguments:
    """Validate get-sgf-diagram arguments, including selector shape.

    Raises:
        InvalidParametersError: the first violation found
    """
    arguments = _validate(DiagramArguments, args)
    check_selector_shape(arguments.move_number, arguments.start_move, arguments.end_move)
    check_move_bounds(
        arguments.move_number, arguments.start_move, arguments.end_move, max_move_index
    )
    check_dimensions(arguments.width, arguments.height)
    return arguments
