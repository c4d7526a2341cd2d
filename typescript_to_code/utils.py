"""
Utility functions for the TypeScript translator.
"""

import re

# Boundary between an acronym and the capitalized word that follows it ("HTTPResponse")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")

# Boundary between a lowercase letter or digit and an uppercase letter ("someName")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

_LINE_COMMENT_MARKER = re.compile(r"^//[ ]?", re.MULTILINE)
_BLOCK_COMMENT_OPEN = re.compile(r"^/\*+[ ]?")
_BLOCK_COMMENT_CLOSE = re.compile(r"[ ]?\*+/\s*$")
_BLOCK_COMMENT_LINE = re.compile(r"^[ \t]*\*(?!/)[ ]?", re.MULTILINE)


def starts_with_uppercase(text: str) -> bool:
    """Return True if the text starts with an uppercase ASCII letter."""
    return bool(text) and "A" <= text[0] <= "Z"


def camel_to_snake_case(text: str) -> str:
    """Convert camelCase text to snake_case.

    An underscore is inserted between a lowercase letter or digit and an
    uppercase letter, and between a run of capitals and a capital that starts
    a new lowercase word. The result is lowercased, so the conversion is
    idempotent on snake_case input.

    Examples:
        "callSomeFunction" -> "call_some_function"
        "parseHTTPResponse" -> "parse_http_response"
        "getX" -> "get_x"
        "already_snake" -> "already_snake"
        "_privateThing" -> "_private_thing"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    if not text:
        return ""
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    text = _WORD_BOUNDARY.sub(r"\1_\2", text)
    return text.lower()


def strip_comment_markers(comment: str, multiline: bool) -> str:
    """Remove comment delimiters, keeping the comment text.

    Args:
        comment: Comment text including its markers
        multiline: Whether this is a ``/* */`` comment

    Returns:
        The bare comment text, one line per source line
    """
    if multiline:
        comment = _BLOCK_COMMENT_OPEN.sub("", comment)
        comment = _BLOCK_COMMENT_CLOSE.sub("", comment)
        comment = _BLOCK_COMMENT_LINE.sub("", comment)
        return comment.strip("\n")
    return _LINE_COMMENT_MARKER.sub("", comment)


def convert_module_reference(ref: str) -> str:
    """Turn an npm-style module specifier into a dotted module path.

    Examples:
        "@aws-cdk/core" -> "aws_cdk.core"
        "./my-module" -> "my_module"
    """
    if ref.startswith("./"):
        ref = ref[2:]
    return ref.lstrip("@").replace("/", ".").replace("-", "_")
