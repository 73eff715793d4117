# sidediff/terminal_caps.py
"""Terminal capability detection with process-wide caching.

Supplies the defaults DisplayOptions.from_env() falls back on when no
explicit setting is given.

Usage:
    from sidediff.terminal_caps import detect

    caps = detect()
    caps["interactive"]    # True if stdout is a TTY
    caps["color_depth"]    # "24bit" | "256" | "basic" | "none"
    caps["width"]          # terminal width in columns
    caps["background"]     # "dark" | "light" | None
"""

import os
import shutil
import sys
from typing import Any, Dict, Optional

_cached: Optional[Dict[str, Any]] = None

# Used when the terminal size cannot be queried (e.g. output is piped).
FALLBACK_WIDTH = 80


def detect() -> Dict[str, Any]:
    """Detect terminal capabilities. Result is cached process-wide.

    Returns:
        Dict with keys: interactive, term, colorterm, color_depth,
        width, background.
    """
    global _cached
    if _cached is None:
        _cached = _detect()
    return _cached


def invalidate_cache() -> None:
    """Clear the cached result. Useful for testing or after env changes."""
    global _cached
    _cached = None


def _detect() -> Dict[str, Any]:
    """Perform full terminal capability detection."""
    is_interactive = sys.stdout.isatty()

    term = os.environ.get("TERM")
    colorterm = os.environ.get("COLORTERM")

    return {
        "interactive": is_interactive,
        "term": term,
        "colorterm": colorterm,
        "color_depth": _detect_color_depth(is_interactive, term, colorterm),
        "width": _detect_width(),
        "background": _detect_background(os.environ.get("COLORFGBG")),
    }


def _detect_color_depth(
    is_interactive: bool,
    term: Optional[str],
    colorterm: Optional[str],
) -> str:
    """Detect terminal color depth."""
    if not is_interactive:
        return "none"

    term_lower = (term or "").lower()
    colorterm_lower = (colorterm or "").lower()

    if colorterm_lower in ("truecolor", "24bit") or "truecolor" in colorterm_lower:
        return "24bit"
    if "256color" in term_lower or "256" in colorterm_lower:
        return "256"
    if term_lower and term_lower != "dumb":
        return "basic"
    return "none"


def _detect_width() -> int:
    """Current terminal width, honouring $COLUMNS."""
    return shutil.get_terminal_size((FALLBACK_WIDTH, 24)).columns


def _detect_background(colorfgbg: Optional[str]) -> Optional[str]:
    """Guess the background brightness from $COLORFGBG.

    The variable holds "fg;bg" (sometimes "fg;default;bg") palette
    indices, as set by rxvt, Konsole and others. Indices 0-6 and 8 are
    dark colors.
    """
    if not colorfgbg:
        return None
    bg = colorfgbg.split(";")[-1]
    if not bg.isdigit():
        return None
    return "dark" if int(bg) in (0, 1, 2, 3, 4, 5, 6, 8) else "light"
