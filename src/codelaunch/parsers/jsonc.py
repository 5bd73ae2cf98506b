"""Reader for JSON with comments and trailing commas.

Editor settings files (``settings.json``) are JSONC: ``//`` line comments,
``/* */`` block comments and a trailing comma before a closing bracket are
all legal. The standard ``json`` module accepts none of them, so the text
is normalized first and then handed to ``json.loads``.

String literals are matched before comments so that a value such as
``"http://example.com"`` or ``"C:/*/tmp"`` is never mistaken for a comment.
"""

from __future__ import annotations

import json
import re
from typing import Any

# A JSON string literal, a line comment or a block comment.
_COMMENT_OR_STRING = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)

# A JSON string literal, or a comma followed only by whitespace and a closer.
_TRAILING_COMMA_OR_STRING = re.compile(r'"(?:\\.|[^"\\])*"|,(\s*[}\]])')


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments outside string literals."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.startswith('"'):
            return token
        # Block comments may separate tokens; keep them apart.
        return " " if token.startswith("/*") else ""

    return _COMMENT_OR_STRING.sub(_replace, text)


def strip_trailing_commas(text: str) -> str:
    """Remove commas that directly precede ``}`` or ``]``."""

    def _replace(match: re.Match[str]) -> str:
        closer = match.group(1)
        return match.group(0) if closer is None else closer

    return _TRAILING_COMMA_OR_STRING.sub(_replace, text)


def loads_jsonc(text: str) -> Any:
    """Parse JSONC text.

    Args:
        text: File content, possibly with comments and trailing commas.

    Returns:
        The decoded JSON value.

    Raises:
        json.JSONDecodeError: If the text is not valid once normalized.
    """
    return json.loads(strip_trailing_commas(strip_comments(text)))
