# sidediff/options.py
"""Display configuration for the side-by-side renderer.

Options can be built directly, from a plugin config dict, or from the
environment:

    SIDEDIFF_WIDTH              Terminal width in columns
    SIDEDIFF_COLOR              always | never | auto (default: auto)
    SIDEDIFF_BACKGROUND         dark | light
    SIDEDIFF_DISPLAY            side-by-side | side-by-side-always-show-both
    SIDEDIFF_SYNTAX_HIGHLIGHT   on | off
    SIDEDIFF_TAB_WIDTH          Columns a tab expands to (default: 8)
    NO_COLOR                    Disables color when set to any value
"""

import logging
import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from . import terminal_caps

logger = logging.getLogger(__name__)

# Narrowest width the renderer is handed. Both number columns plus the
# spacer must fit with room left for content.
MIN_DISPLAY_WIDTH = 20

DEFAULT_DISPLAY_WIDTH = 80

DEFAULT_TAB_WIDTH = 8

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class DisplayMode(Enum):
    """How hunks with changes on only one side are shown."""
    # Show only the changed side when the other side is unchanged.
    SIDE_BY_SIDE = "side-by-side"
    # Always show both columns.
    SIDE_BY_SIDE_SHOW_BOTH = "side-by-side-always-show-both"


class BackgroundColor(Enum):
    """Terminal background, used to pick readable color variants."""
    DARK = "dark"
    LIGHT = "light"

    @property
    def is_dark(self) -> bool:
        return self is BackgroundColor.DARK


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


@dataclass(frozen=True)
class DisplayOptions:
    """Settings that shape the rendered output.

    Attributes:
        display_width: Terminal width in columns. Must leave room for both
            line number columns and the spacer; callers clamp it.
        use_color: Emit ANSI styling.
        background_color: Terminal background brightness.
        display_mode: Whether one-sided hunks collapse to one column.
        syntax_highlight: Style unchanged tokens by syntax category.
        in_vcs: Running as a version control diff driver (header only).
        tab_width: Spaces each tab is replaced with before rendering.
    """
    display_width: int = DEFAULT_DISPLAY_WIDTH
    use_color: bool = True
    background_color: BackgroundColor = BackgroundColor.DARK
    display_mode: DisplayMode = DisplayMode.SIDE_BY_SIDE
    syntax_highlight: bool = True
    in_vcs: bool = False
    tab_width: int = DEFAULT_TAB_WIDTH

    @property
    def show_both(self) -> bool:
        return self.display_mode is DisplayMode.SIDE_BY_SIDE_SHOW_BOTH

    def with_width(self, width: int) -> "DisplayOptions":
        """Copy with `width` clamped to MIN_DISPLAY_WIDTH."""
        return replace(self, display_width=max(MIN_DISPLAY_WIDTH, width))

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        base: Optional["DisplayOptions"] = None,
    ) -> "DisplayOptions":
        """Build options from a config dict.

        Args:
            config: Dict with optional keys:
                - display_width: Terminal width (int, clamped to the minimum)
                - use_color: Emit ANSI styling (bool)
                - background_color: "dark" or "light"
                - display_mode: "side-by-side" or
                  "side-by-side-always-show-both"
                - syntax_highlight: Highlight unchanged tokens (bool)
                - in_vcs: Running under version control (bool)
                - tab_width: Spaces per tab (positive int)
            base: Options supplying values for missing keys.

        Returns:
            New DisplayOptions.

        Raises:
            ConfigValidationError: If any value is invalid. All problems
                are reported together.
        """
        config = config or {}
        options = base or cls()
        errors: List[str] = []
        changes: Dict[str, Any] = {}

        if "display_width" in config:
            width = config["display_width"]
            if isinstance(width, bool) or not isinstance(width, int):
                errors.append(f"display_width must be an integer, got {width!r}")
            else:
                changes["display_width"] = max(MIN_DISPLAY_WIDTH, width)

        if "tab_width" in config:
            tab_width = config["tab_width"]
            if isinstance(tab_width, bool) or not isinstance(tab_width, int) or tab_width < 1:
                errors.append(f"tab_width must be a positive integer, got {tab_width!r}")
            else:
                changes["tab_width"] = tab_width

        for key in ("use_color", "syntax_highlight", "in_vcs"):
            if key in config:
                if isinstance(config[key], bool):
                    changes[key] = config[key]
                else:
                    errors.append(f"{key} must be a boolean, got {config[key]!r}")

        for key, enum_cls in (
            ("background_color", BackgroundColor),
            ("display_mode", DisplayMode),
        ):
            if key in config:
                try:
                    changes[key] = enum_cls(config[key])
                except ValueError:
                    allowed = ", ".join(member.value for member in enum_cls)
                    errors.append(f"{key} must be one of: {allowed}; got {config[key]!r}")

        if errors:
            raise ConfigValidationError(errors)

        return replace(options, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DisplayOptions":
        """Build options from environment variables and terminal detection.

        Unparsable values are logged and ignored rather than raised, so a
        stray variable never stops output.
        """
        env = os.environ if environ is None else environ
        caps = terminal_caps.detect()

        width = caps["width"]
        raw_width = env.get("SIDEDIFF_WIDTH")
        if raw_width:
            if raw_width.isdigit():
                width = int(raw_width)
            else:
                logger.warning("Ignoring SIDEDIFF_WIDTH=%r: not a number", raw_width)

        color_setting = env.get("SIDEDIFF_COLOR", "auto").lower()
        if color_setting == "always":
            use_color = True
        elif color_setting == "never":
            use_color = False
        else:
            if color_setting != "auto":
                logger.warning("Ignoring SIDEDIFF_COLOR=%r", color_setting)
            use_color = caps["color_depth"] != "none" and "NO_COLOR" not in env

        background = BackgroundColor.DARK
        raw_background = env.get("SIDEDIFF_BACKGROUND") or caps["background"]
        if raw_background:
            try:
                background = BackgroundColor(raw_background.lower())
            except ValueError:
                logger.warning("Ignoring background %r", raw_background)

        display_mode = DisplayMode.SIDE_BY_SIDE
        raw_mode = env.get("SIDEDIFF_DISPLAY")
        if raw_mode:
            try:
                display_mode = DisplayMode(raw_mode.lower())
            except ValueError:
                logger.warning("Ignoring SIDEDIFF_DISPLAY=%r", raw_mode)

        syntax_highlight = True
        raw_syntax = env.get("SIDEDIFF_SYNTAX_HIGHLIGHT")
        if raw_syntax:
            if raw_syntax.lower() in _FALSE_VALUES:
                syntax_highlight = False
            elif raw_syntax.lower() not in _TRUE_VALUES:
                logger.warning("Ignoring SIDEDIFF_SYNTAX_HIGHLIGHT=%r", raw_syntax)

        tab_width = DEFAULT_TAB_WIDTH
        raw_tab_width = env.get("SIDEDIFF_TAB_WIDTH")
        if raw_tab_width:
            if raw_tab_width.isdigit() and int(raw_tab_width) > 0:
                tab_width = int(raw_tab_width)
            else:
                logger.warning("Ignoring SIDEDIFF_TAB_WIDTH=%r: not a positive number", raw_tab_width)

        options = cls(
            display_width=max(MIN_DISPLAY_WIDTH, width),
            use_color=use_color,
            background_color=background,
            display_mode=display_mode,
            syntax_highlight=syntax_highlight,
            tab_width=tab_width,
        )
        logger.debug("Display options from environment: %s", options)
        return options
