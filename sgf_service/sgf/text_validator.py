"""Cheap structural pre-check of raw SGF text.

Runs before the tree parser so that obviously wrong payloads (wrong type,
oversized, unbalanced parentheses, no property at all) are rejected without
building anything.
"""

from __future__ import annotations

import re
from typing import Any

from ..errors import FileTooLargeError, InvalidFormatError, InvalidParametersError

# Control characters other than tab, LF and CR.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_PROPERTY_START_PAT = re.compile(r";\s*[A-Z]{1,2}\[")
# Bracketed values are matched whole so parentheses inside them are not counted.
_STRUCTURE_PAT = re.compile(r"\[(?:[^\]\\]|\\.)*\]|[()]", flags=re.DOTALL)


def _parentheses_balanced(text: str) -> bool:
    depth = 0
    for match in _STRUCTURE_PAT.finditer(text):
        token = match.group()
        if token == "(":
            depth += 1
        elif token == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def sanitize_sgf_text(text: str) -> str:
    """Strip NUL and other control characters that never belong in SGF."""
    return _CONTROL_CHARS.sub("", text)


def validate_sgf_text(text: Any, max_bytes: int) -> str:
    """Validate raw SGF content and return it unchanged.

    Raises:
        InvalidParametersError: not a string, or empty
        FileTooLargeError: UTF-8 size above ``max_bytes``
        InvalidFormatError: not wrapped in parentheses, unbalanced
            parentheses, or no property found
    """
    if not isinstance(text, str):
        raise InvalidParametersError(
            "SGF content must be a string",
            field="sgfContent",
            rule="type",
        )
    if not text:
        raise InvalidParametersError(
            "SGF content cannot be empty",
            field="sgfContent",
            rule="non_empty",
        )

    size = len(text.encode("utf-8"))
    if size > max_bytes:
        raise FileTooLargeError(
            f"SGF file exceeds maximum size of {max_bytes} bytes",
            size=size,
            limit=max_bytes,
        )

    trimmed = text.strip()
    if not (trimmed.startswith("(") and trimmed.endswith(")")):
        raise InvalidFormatError(
            'SGF content must start with "(" and end with ")"',
        )
    if not _parentheses_balanced(trimmed):
        raise InvalidFormatError("SGF content has unbalanced parentheses")
    match = _PROPERTY_START_PAT.search(trimmed)
    # A closing bracket anywhere after the first opener completes a property.
    if match is None or "]" not in trimmed[match.end() :]:
        raise InvalidFormatError(
            "SGF content must contain at least one valid property",
        )
    return text
