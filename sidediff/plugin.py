# sidediff/plugin.py
"""Side-by-side diff formatter plugin.

Wraps the side-by-side renderer behind the formatter-plugin surface:
configuration, terminal width updates, color control, and output as a
string or straight to a stream.

Usage:
    from sidediff import create_plugin

    formatter = create_plugin()
    formatter.initialize({"display_width": 140, "background_color": "light"})
    output = formatter.format_output(
        hunks, "old/foo.py", "new/foo.py", old_src, new_src, old_mps, new_mps,
    )
"""

import logging
from dataclasses import replace
from typing import IO, Any, Dict, Optional, Sequence

from .lines import expand_tabs
from .model import Hunk, MatchedPos
from .options import BackgroundColor, DisplayOptions
from .renderers.side_by_side import print_side_by_side, render_side_by_side
from .syntax_highlight import language_name, novel_positions

logger = logging.getLogger(__name__)


class SideBySideFormatterPlugin:
    """Plugin that renders structural diffs as two terminal columns.

    Hunks where only one side changed collapse to that side's content
    unless the display mode asks for both columns. Whole-file additions
    and removals are shown as a single column.
    """

    def __init__(self):
        self._options = DisplayOptions()

    @property
    def name(self) -> str:
        """Unique identifier for this formatter."""
        return "side_by_side"

    @property
    def options(self) -> DisplayOptions:
        """Current display options."""
        return self._options

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the formatter with configuration.

        Args:
            config: Dict with optional settings:
                - display_width: Terminal width (default: 80)
                - use_color: Emit ANSI styling (default: True)
                - background_color: "dark" or "light" (default: "dark")
                - display_mode: "side-by-side" or
                  "side-by-side-always-show-both" (default: "side-by-side")
                - syntax_highlight: Highlight unchanged tokens (default: True)
                - in_vcs: Running as a VCS diff driver (default: False)
                - tab_width: Spaces each tab expands to (default: 8)

        Raises:
            ConfigValidationError: If any setting is invalid.
        """
        self._options = DisplayOptions.from_config(config)
        logger.debug("Initialized %s with %s", self.name, self._options)

    def shutdown(self) -> None:
        """Cleanup when plugin is disabled."""
        pass

    def set_console_width(self, width: int) -> None:
        """Update console width. Narrow widths are clamped to the minimum.

        Args:
            width: Terminal width in columns.
        """
        self._options = self._options.with_width(width)

    def set_background(self, background: BackgroundColor) -> None:
        """Set the terminal background brightness."""
        self._options = replace(self._options, background_color=background)

    def disable_colors(self) -> None:
        """Disable color output."""
        self._options = replace(self._options, use_color=False)

    def enable_colors(self) -> None:
        """Enable color output."""
        self._options = replace(self._options, use_color=True)

    def get_current_mode(self) -> str:
        """Get the current display mode name.

        Returns:
            One of: "side-by-side", "side-by-side-always-show-both"
        """
        return self._options.display_mode.value

    # ==================== Output ====================

    def _expand_tabs(self, src: str) -> str:
        return expand_tabs(src, self._options.tab_width)

    def format_output(
        self,
        hunks: Sequence[Hunk],
        lhs_display_path: str,
        rhs_display_path: str,
        lhs_src: str,
        rhs_src: str,
        lhs_mps: Sequence[MatchedPos],
        rhs_mps: Sequence[MatchedPos],
        lang_name: Optional[str] = None,
    ) -> str:
        """Render a comparison to a string.

        Args:
            hunks: Hunks from the matcher, in display order.
            lhs_display_path: Path shown for the old version.
            rhs_display_path: Path shown for the new version.
            lhs_src: Old source text. Tabs are expanded to `tab_width`
                spaces before rendering.
            rhs_src: New source text, expanded the same way.
            lhs_mps: Matched positions for the old source. Columns refer
                to the tab-expanded text.
            rhs_mps: Matched positions for the new source.
            lang_name: Language shown in headers. Detected from
                `rhs_display_path` when omitted.

        Returns:
            Rendered output, ANSI-escaped when color is enabled.
        """
        return render_side_by_side(
            hunks,
            self._options,
            lhs_display_path,
            rhs_display_path,
            lang_name or language_name(rhs_display_path),
            self._expand_tabs(lhs_src),
            self._expand_tabs(rhs_src),
            lhs_mps,
            rhs_mps,
        )

    def print_output(
        self,
        hunks: Sequence[Hunk],
        lhs_display_path: str,
        rhs_display_path: str,
        lhs_src: str,
        rhs_src: str,
        lhs_mps: Sequence[MatchedPos],
        rhs_mps: Sequence[MatchedPos],
        lang_name: Optional[str] = None,
        file: Optional[IO[str]] = None,
    ) -> None:
        """Print a comparison to `file` (standard output by default).

        Takes the same arguments as format_output().
        """
        print_side_by_side(
            hunks,
            self._options,
            lhs_display_path,
            rhs_display_path,
            lang_name or language_name(rhs_display_path),
            self._expand_tabs(lhs_src),
            self._expand_tabs(rhs_src),
            lhs_mps,
            rhs_mps,
            file=file,
        )

    def format_added_file(self, path: str, src: str) -> str:
        """Render a newly added file as a single column."""
        src = self._expand_tabs(src)
        return self.format_output(
            [], path, path, "", src, [], novel_positions(src, path),
        )

    def format_removed_file(self, path: str, src: str) -> str:
        """Render a removed file as a single column."""
        src = self._expand_tabs(src)
        return self.format_output(
            [], path, path, src, "", novel_positions(src, path), [],
        )


def create_plugin() -> SideBySideFormatterPlugin:
    """Factory function to create a SideBySideFormatterPlugin instance."""
    return SideBySideFormatterPlugin()
