"""
Canonical formatting of generated source.

Assembled text is checked against the Python grammar and then formatted with
black, so the same input always yields the same bytes. Failure here means an
earlier stage produced malformed code.
"""

import ast

import black

from sql2orm.core.errors import SynthesisError

# Fixed mode so output does not depend on any project-level black config.
BLACK_MODE = black.Mode(line_length=88)


def canonicalize(source: str) -> str:
    """
    Validate and format generated Python source.

    Args:
        source: Assembled module text

    Returns:
        The black-formatted text

    Raises:
        SynthesisError: The text is not valid Python
    """
    try:
        ast.parse(source)
    except (SyntaxError, ValueError) as exc:
        raise SynthesisError(f"Generated code is not valid Python: {exc}", source) from exc

    try:
        return black.format_str(source, mode=BLACK_MODE)
    except black.InvalidInput as exc:
        raise SynthesisError(f"Generated code could not be formatted: {exc}", source) from exc
