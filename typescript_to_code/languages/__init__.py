"""
Target language visitors.
"""

from __future__ import annotations

from ..config import TranslatorConfig
from ..errors import UnknownTargetError
from ..visitor import AstVisitor, VisualizeAstVisitor
from .python import PythonVisitor

TARGETS = ("python", "visualize")


def build_visitor(target: str, config: TranslatorConfig | None = None) -> AstVisitor:
    """
    Create the visitor for a target language.

    Args:
        target: Target name ("python" or "visualize")
        config: Translator configuration

    Returns:
        A visitor instance

    Raises:
        UnknownTargetError: If the target is not supported
    """
    config = config or TranslatorConfig()
    if target == "python":
        return PythonVisitor(builtin_functions=config.builtin_functions)
    if target == "visualize":
        return VisualizeAstVisitor()
    raise UnknownTargetError(f"Unsupported target '{target}'. Supported: {', '.join(TARGETS)}")


__all__ = [
    "TARGETS",
    "PythonVisitor",
    "build_visitor",
]
