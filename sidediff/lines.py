# sidediff/lines.py
"""Line tables and line numbers.

Both sides of a comparison are indexed by zero-based line numbers into a
table of line contents. Line numbers are displayed one-indexed.
"""

from typing import List


class LineNumber(int):
    """A zero-based index into one side's line table."""

    @property
    def one_indexed(self) -> int:
        """The number shown to the user."""
        return int(self) + 1

    def __repr__(self) -> str:
        return f"LineNumber({int(self)})"


def split_on_newlines(s: str) -> List[str]:
    """Split `s` on \\n or \\r\\n. Always returns a non-empty list.

    This differs from str.splitlines(), which considers "" to be zero
    lines and "foo\\n" to be one line. Here "" is one empty line and
    "foo\\n" is two lines, so every line number reported for a source
    indexes into the result.

    Args:
        s: Source text.

    Returns:
        Line contents with line endings stripped.
    """
    return [line[:-1] if line.endswith("\r") else line for line in s.split("\n")]


def content_lines(s: str) -> List[str]:
    """Split `s` into lines, ignoring a final line ending.

    "" yields no lines and "foo\\n" yields one. Used where a whole file is
    listed rather than indexed.
    """
    lines = split_on_newlines(s)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def format_line_num(line_num: LineNumber) -> str:
    """Line number as displayed, with its trailing separator."""
    return f"{line_num.one_indexed} "


def expand_tabs(s: str, tab_width: int) -> str:
    """Replace every tab with `tab_width` spaces.

    Widths are counted in characters, so sources are expanded before
    they are tokenised or rendered. Column offsets in matched positions
    refer to the expanded text.
    """
    return s.replace("\t", " " * tab_width)
