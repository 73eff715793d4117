"""Diff renderers for terminal output."""

from .side_by_side import (
    SourceDimensions,
    display_single_column,
    print_side_by_side,
    render_side_by_side,
    side_by_side_lines,
)

__all__ = [
    "SourceDimensions",
    "display_single_column",
    "print_side_by_side",
    "render_side_by_side",
    "side_by_side_lines",
]
