# sidediff/__init__.py
"""Two-column terminal display for structural diffs.

Given an old and a new source, the matched token positions for each, and
the hunks of aligned line pairs produced by a structural matcher, renders
a line-aligned side-by-side comparison sized to the terminal.

Example:
    from sidediff import create_plugin

    formatter = create_plugin()
    formatter.set_console_width(140)
    output = formatter.format_output(
        hunks, "a/foo.py", "b/foo.py", old_src, new_src, old_mps, new_mps,
    )
"""

from .lines import LineNumber, expand_tabs, split_on_newlines
from .model import (
    AlignedLinePair,
    Hunk,
    MatchedPos,
    MatchKind,
    SingleLineSpan,
    TokenKind,
    lines_with_novel,
)
from .options import (
    BackgroundColor,
    ConfigValidationError,
    DisplayMode,
    DisplayOptions,
)
from .plugin import SideBySideFormatterPlugin, create_plugin
from .renderers.side_by_side import print_side_by_side, render_side_by_side

__all__ = [
    # Main plugin
    "SideBySideFormatterPlugin",
    "create_plugin",
    # Rendering
    "print_side_by_side",
    "render_side_by_side",
    # Input types
    "AlignedLinePair",
    "Hunk",
    "LineNumber",
    "MatchedPos",
    "MatchKind",
    "SingleLineSpan",
    "TokenKind",
    "expand_tabs",
    "lines_with_novel",
    "split_on_newlines",
    # Configuration
    "BackgroundColor",
    "ConfigValidationError",
    "DisplayMode",
    "DisplayOptions",
]
