# sidediff/renderers/side_by_side.py
"""Side-by-side (two column) display of structural diffs.

Lays out an old and a new version of a file as two line-aligned columns
for a terminal. What changed is decided upstream; this module only
decides how to show it:

- per-hunk column widths (line number column + content column per side)
- line number cells, with dotted/blank placeholders for absent lines
- which lines count as changed for highlighting
- wrapping long lines while keeping style spans and both columns in step
- exact-width background fill for changed rows

Output format (color off, 40 columns, one hunk changing line 2):

    f.py --- 1/1 --- Python
    1 def f():          1 def f():
    2     return 1      2     return 2

Whole-file additions and removals are shown as a single column.
"""

import logging
from dataclasses import dataclass
from io import StringIO
from typing import (
    IO, Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple,
)

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ..lines import LineNumber, content_lines, format_line_num, split_on_newlines
from ..model import AlignedLinePair, Hunk, MatchedPos, lines_with_novel
from ..options import DisplayOptions
from ..style import (
    DIMMED, LHS_NOVEL_BACKGROUND, RHS_NOVEL_BACKGROUND, StyleSpan,
    apply_colors, color_positions, header, highlight_positions, novel_style,
    split_and_apply, styled_line, visible_width,
)

logger = logging.getLogger(__name__)

SPACER = " "

# Placeholder references used before a side has shown any line.
MISSING_LINE_REFERENCE = LineNumber(1)
CONTINUATION_REFERENCE = LineNumber(10)


def format_line_num_padded(line_num: LineNumber, column_width: int) -> str:
    """Right-align the one-indexed number, then a separator space."""
    return f"{line_num.one_indexed:>{column_width - 1}} "


@dataclass(frozen=True)
class SourceDimensions:
    """Sizes used when displaying a hunk.

    The two columns plus the spacer between them fill the terminal
    width exactly; an odd column goes to the right side.
    """
    lhs_content_width: int
    rhs_content_width: int
    lhs_line_nums_width: int
    rhs_line_nums_width: int
    lhs_max_line: LineNumber
    rhs_max_line: LineNumber

    @classmethod
    def new(
        cls,
        terminal_width: int,
        line_nums: Iterable[AlignedLinePair],
        prev_line_nums: AlignedLinePair = (None, None),
    ) -> "SourceDimensions":
        """Plan column widths for the rows of one hunk.

        `prev_line_nums` are the last lines shown on each side before the
        hunk. Placeholders refer to them, so the number columns are wide
        enough for them too. `terminal_width` must exceed both number
        columns plus the spacer.
        """
        lhs_max_line = MISSING_LINE_REFERENCE
        rhs_max_line = MISSING_LINE_REFERENCE
        for lhs_line_num, rhs_line_num in line_nums:
            if lhs_line_num is not None:
                lhs_max_line = LineNumber(max(lhs_max_line, lhs_line_num))
            if rhs_line_num is not None:
                rhs_max_line = LineNumber(max(rhs_max_line, rhs_line_num))

        prev_lhs, prev_rhs = prev_line_nums
        lhs_line_nums_width = _line_nums_width(lhs_max_line, prev_lhs)
        rhs_line_nums_width = _line_nums_width(rhs_max_line, prev_rhs)

        lhs_total_width = (terminal_width - len(SPACER)) // 2
        lhs_content_width = lhs_total_width - lhs_line_nums_width
        rhs_content_width = (
            terminal_width - lhs_total_width - len(SPACER) - rhs_line_nums_width
        )

        return cls(
            lhs_content_width=lhs_content_width,
            rhs_content_width=rhs_content_width,
            lhs_line_nums_width=lhs_line_nums_width,
            rhs_line_nums_width=rhs_line_nums_width,
            lhs_max_line=lhs_max_line,
            rhs_max_line=rhs_max_line,
        )

    def content_width(self, is_lhs: bool) -> int:
        return self.lhs_content_width if is_lhs else self.rhs_content_width

    def line_nums_width(self, is_lhs: bool) -> int:
        return self.lhs_line_nums_width if is_lhs else self.rhs_line_nums_width

    def max_line(self, is_lhs: bool) -> LineNumber:
        return self.lhs_max_line if is_lhs else self.rhs_max_line


def _line_nums_width(max_line: LineNumber, prev_line_num: Optional[LineNumber]) -> int:
    widest = max_line if prev_line_num is None else max(max_line, prev_line_num)
    return len(format_line_num(LineNumber(widest)))


def format_missing_line_num(
    prev_num: LineNumber,
    source_dims: SourceDimensions,
    is_lhs: bool,
    use_color: bool,
) -> Text:
    """Number cell for a row where this side has no line.

    Shows dots while more lines follow on this side and blanks once the
    side's last line has been passed, one glyph per digit of `prev_num`,
    never more than the column holds.
    """
    prev_num = LineNumber(prev_num)
    column_width = source_dims.line_nums_width(is_lhs)
    after_end = prev_num >= source_dims.max_line(is_lhs)

    num_digits = min(len(str(prev_num.one_indexed)), column_width - 1)
    glyphs = (" " if after_end else ".") * num_digits
    return Text(
        f"{glyphs:>{column_width - 1}} ",
        style=DIMMED if use_color else "",
        end="",
    )


def display_line_nums(
    lhs_line_num: Optional[LineNumber],
    rhs_line_num: Optional[LineNumber],
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
    lhs_has_novel: bool,
    rhs_has_novel: bool,
    prev_lhs_line_num: Optional[LineNumber],
    prev_rhs_line_num: Optional[LineNumber],
) -> Tuple[Text, Text]:
    """Number cells for both sides of a row."""
    return (
        _line_num_cell(
            True, lhs_line_num, lhs_has_novel, prev_lhs_line_num,
            source_dims, display_options,
        ),
        _line_num_cell(
            False, rhs_line_num, rhs_has_novel, prev_rhs_line_num,
            source_dims, display_options,
        ),
    )


def _line_num_cell(
    is_lhs: bool,
    line_num: Optional[LineNumber],
    has_novel: bool,
    prev_line_num: Optional[LineNumber],
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
) -> Text:
    if line_num is None:
        return format_missing_line_num(
            prev_line_num if prev_line_num is not None else MISSING_LINE_REFERENCE,
            source_dims,
            is_lhs,
            display_options.use_color,
        )

    cell = Text(
        format_line_num_padded(LineNumber(line_num), source_dims.line_nums_width(is_lhs)),
        end="",
    )
    if has_novel and display_options.use_color:
        cell.stylize(novel_style(Style(), is_lhs, display_options.background_color))
    return cell


def highlight_as_novel(
    line_num: Optional[LineNumber],
    lines: Sequence[str],
    opposite_line_num: Optional[LineNumber],
    lines_with_novel: Set[LineNumber],
) -> bool:
    """Should this side's line be highlighted as changed?"""
    if line_num is None:
        return False

    # If this line contains any novel tokens, highlight it.
    if line_num in lines_with_novel:
        return True

    # A blank line without a counterpart on the other side was added or
    # removed, even though it holds no novel token.
    return lines[line_num].strip() == "" and opposite_line_num is None


def display_single_column(
    lhs_display_path: str,
    rhs_display_path: str,
    lang_name: str,
    src: str,
    is_lhs: bool,
    display_options: DisplayOptions,
    mps: Iterable[MatchedPos] = (),
) -> List[Text]:
    """Display `src` in a single column (e.g. a file removal or addition)."""
    lines = content_lines(src)
    column_width = len(format_line_num(LineNumber(len(lines))))

    style = Style()
    highlights: Dict[LineNumber, List[StyleSpan]] = {}
    if display_options.use_color:
        style = novel_style(Style(), is_lhs, display_options.background_color)
        for span, span_style in color_positions(
            is_lhs,
            display_options.background_color,
            display_options.syntax_highlight,
            mps,
        ):
            highlights.setdefault(span.line, []).append((span, span_style))

    result = [header(
        lhs_display_path, rhs_display_path, 1, 1, lang_name, display_options,
    )]
    for i, line in enumerate(lines):
        line_num = LineNumber(i)
        result.append(Text.assemble(
            Text(format_line_num_padded(line_num, column_width), style=style, end=""),
            styled_line(line, highlights.get(line_num, ()), base=style),
        ))
    result.append(Text(end=""))
    return result


@dataclass(frozen=True)
class _Side:
    """Everything the row renderer needs to know about one side."""
    is_lhs: bool
    lines: List[str]
    colored_lines: List[Text]
    lines_with_novel: Set[LineNumber]
    highlights: Dict[LineNumber, List[StyleSpan]]

    @property
    def background(self) -> Style:
        return LHS_NOVEL_BACKGROUND if self.is_lhs else RHS_NOVEL_BACKGROUND

    def has_novel(self, line_num: Optional[LineNumber]) -> bool:
        return line_num is not None and line_num in self.lines_with_novel

    def pads(self, line_num: Optional[LineNumber], display_options: DisplayOptions) -> bool:
        """Whether fragments are padded to the full content width.

        The left column always is, to keep the right column aligned. The
        right column only needs it when its background is painted.
        """
        return self.is_lhs or (display_options.use_color and self.has_novel(line_num))


class _PrevLineNums(NamedTuple):
    """Last line number shown on each side, threaded through the rows."""
    lhs: Optional[LineNumber] = None
    rhs: Optional[LineNumber] = None

    def advance(self, row: AlignedLinePair) -> "_PrevLineNums":
        lhs_line_num, rhs_line_num = row
        return _PrevLineNums(
            lhs_line_num if lhs_line_num is not None else self.lhs,
            rhs_line_num if rhs_line_num is not None else self.rhs,
        )

    def get(self, is_lhs: bool) -> Optional[LineNumber]:
        return self.lhs if is_lhs else self.rhs


def _one_sided_row(
    side: _Side,
    line_num: Optional[LineNumber],
    cells: Tuple[Text, Text],
    same_lines: bool,
    display_options: DisplayOptions,
) -> Text:
    """Row for a hunk where the other side is unchanged: show this side only."""
    lhs_cell, rhs_cell = cells
    if line_num is None:
        # Context lines that only occur on the other side (e.g. extra
        # blank lines) have nothing to show here.
        return Text.assemble(lhs_cell, rhs_cell)

    own_cell = lhs_cell if side.is_lhs else rhs_cell
    content = side.colored_lines[line_num]
    # Both numbers are shown unless they agree on every row of the hunk.
    parts = (own_cell, content) if same_lines else (lhs_cell, rhs_cell, content)
    row = Text.assemble(*parts)

    if side.has_novel(line_num):
        row.pad_right(max(0, display_options.display_width - visible_width(*parts)))
        if display_options.use_color:
            row.stylize_before(side.background)
    return row


def _fragments(
    side: _Side,
    line_num: Optional[LineNumber],
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
) -> List[Text]:
    width = source_dims.content_width(side.is_lhs)
    pad = side.pads(line_num, display_options)
    if line_num is None:
        return [_blank_fragment(width, pad)]
    return split_and_apply(
        side.lines[line_num],
        width,
        display_options.use_color,
        side.highlights.get(line_num, ()),
        pad,
    )


def _blank_fragment(width: int, pad: bool) -> Text:
    return Text(" " * width if pad else "", end="")


def _continuation_cell(
    side: _Side,
    line_num: Optional[LineNumber],
    prev_line_num: Optional[LineNumber],
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
) -> Text:
    """Number cell for the second and later rows of a wrapped line."""
    if line_num is not None:
        reference = line_num
    elif prev_line_num is not None:
        reference = prev_line_num
    else:
        reference = CONTINUATION_REFERENCE

    cell = format_missing_line_num(
        reference, source_dims, side.is_lhs, display_options.use_color,
    )
    if display_options.use_color and side.has_novel(line_num):
        cell.stylize(novel_style(Style(), side.is_lhs, display_options.background_color))
    return cell


def _side_columns(
    side: _Side,
    line_num: Optional[LineNumber],
    prev_line_num: Optional[LineNumber],
    first_cell: Text,
    fragments: List[Text],
    height: int,
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
) -> List[Text]:
    """One side's column for each of the `height` printed rows of a line."""
    width = source_dims.content_width(side.is_lhs)
    pad = side.pads(line_num, display_options)
    painted = display_options.use_color and side.has_novel(line_num)

    columns = []
    for i in range(height):
        fragment = fragments[i] if i < len(fragments) else _blank_fragment(width, pad)
        if i == 0:
            cell = first_cell
        else:
            cell = _continuation_cell(
                side, line_num, prev_line_num, source_dims, display_options,
            )
        column = Text.assemble(cell, fragment)
        if painted:
            column.stylize_before(side.background)
        columns.append(column)
    return columns


def _wrapped_rows(
    lhs: _Side,
    rhs: _Side,
    row: AlignedLinePair,
    cells: Tuple[Text, Text],
    prev: _PrevLineNums,
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
) -> List[Text]:
    """Rows for a pair of lines shown in both columns, wrapping as needed.

    Each side wraps to its own width. The side with fewer fragments is
    padded with empty ones so the columns stay in step.
    """
    sides = (lhs, rhs)
    fragments = [
        _fragments(side, line_num, source_dims, display_options)
        for side, line_num in zip(sides, row)
    ]
    height = max(len(side_fragments) for side_fragments in fragments)

    lhs_columns, rhs_columns = (
        _side_columns(
            side, line_num, prev.get(side.is_lhs), cell, side_fragments,
            height, source_dims, display_options,
        )
        for side, line_num, cell, side_fragments in zip(sides, row, cells, fragments)
    )
    return [
        Text.assemble(lhs_column, SPACER, rhs_column)
        for lhs_column, rhs_column in zip(lhs_columns, rhs_columns)
    ]


def _render_row(
    lhs: _Side,
    rhs: _Side,
    row: AlignedLinePair,
    hunk: Hunk,
    same_lines: bool,
    prev: _PrevLineNums,
    source_dims: SourceDimensions,
    display_options: DisplayOptions,
) -> List[Text]:
    lhs_line_num, rhs_line_num = row
    lhs_line_novel = highlight_as_novel(
        lhs_line_num, lhs.lines, rhs_line_num, lhs.lines_with_novel,
    )
    rhs_line_novel = highlight_as_novel(
        rhs_line_num, rhs.lines, lhs_line_num, rhs.lines_with_novel,
    )
    cells = display_line_nums(
        lhs_line_num,
        rhs_line_num,
        source_dims,
        display_options,
        lhs_line_novel,
        rhs_line_novel,
        prev.lhs,
        prev.rhs,
    )

    if not display_options.show_both:
        if not hunk.novel_lhs:
            return [_one_sided_row(rhs, rhs_line_num, cells, same_lines, display_options)]
        if not hunk.novel_rhs:
            return [_one_sided_row(lhs, lhs_line_num, cells, same_lines, display_options)]

    return _wrapped_rows(lhs, rhs, row, cells, prev, source_dims, display_options)


def _render_hunk(
    lhs: _Side,
    rhs: _Side,
    hunk: Hunk,
    prev: _PrevLineNums,
    display_options: DisplayOptions,
) -> Tuple[List[Text], _PrevLineNums]:
    """Rows for one hunk, and the last shown line numbers after it."""
    source_dims = SourceDimensions.new(
        display_options.display_width, hunk.lines, (prev.lhs, prev.rhs)
    )
    same_lines = hunk.same_line_numbers
    logger.debug(
        "Hunk of %d rows: %s (lhs changed: %s, rhs changed: %s)",
        len(hunk.lines), source_dims, bool(hunk.novel_lhs), bool(hunk.novel_rhs),
    )

    rows: List[Text] = []
    for row in hunk.lines:
        rows.extend(_render_row(
            lhs, rhs, row, hunk, same_lines, prev, source_dims, display_options,
        ))
        prev = prev.advance(row)
    return rows, prev


def _build_side(
    is_lhs: bool,
    src: str,
    novel: Set[LineNumber],
    highlights: Dict[LineNumber, List[StyleSpan]],
) -> _Side:
    lines = split_on_newlines(src)
    return _Side(
        is_lhs=is_lhs,
        lines=lines,
        colored_lines=apply_colors(lines, highlights),
        lines_with_novel=novel,
        highlights=highlights,
    )


def side_by_side_lines(
    hunks: Sequence[Hunk],
    display_options: DisplayOptions,
    lhs_display_path: str,
    rhs_display_path: str,
    lang_name: str,
    lhs_src: str,
    rhs_src: str,
    lhs_mps: Sequence[MatchedPos],
    rhs_mps: Sequence[MatchedPos],
) -> Iterator[Text]:
    """Yield every printed line of the comparison, in order.

    Per hunk: a header, one or more rows per aligned line pair, and a
    blank line. If either source is empty the other is listed as a
    single column instead.
    """
    if lhs_src == "":
        yield from display_single_column(
            lhs_display_path, rhs_display_path, lang_name, rhs_src,
            False, display_options, rhs_mps,
        )
        return
    if rhs_src == "":
        yield from display_single_column(
            lhs_display_path, rhs_display_path, lang_name, lhs_src,
            True, display_options, lhs_mps,
        )
        return

    lhs_highlights: Dict[LineNumber, List[StyleSpan]] = {}
    rhs_highlights: Dict[LineNumber, List[StyleSpan]] = {}
    if display_options.use_color:
        lhs_highlights, rhs_highlights = highlight_positions(
            display_options.background_color,
            display_options.syntax_highlight,
            lhs_mps,
            rhs_mps,
        )

    lhs_lines_with_novel, rhs_lines_with_novel = lines_with_novel(lhs_mps, rhs_mps)
    lhs = _build_side(True, lhs_src, lhs_lines_with_novel, lhs_highlights)
    rhs = _build_side(False, rhs_src, rhs_lines_with_novel, rhs_highlights)

    prev = _PrevLineNums()
    for i, hunk in enumerate(hunks):
        yield header(
            lhs_display_path,
            rhs_display_path,
            i + 1,
            len(hunks),
            lang_name,
            display_options,
        )
        rows, prev = _render_hunk(lhs, rhs, hunk, prev, display_options)
        yield from rows
        yield Text(end="")


def make_console(display_options: DisplayOptions, file: Optional[IO[str]] = None) -> Console:
    """Console that prints rows as-is, never re-wrapping or cropping them."""
    if display_options.use_color:
        return Console(
            file=file,
            width=display_options.display_width,
            force_terminal=True,
            color_system="256",
            no_color=False,
            highlight=False,
            soft_wrap=True,
        )
    return Console(
        file=file,
        width=display_options.display_width,
        color_system=None,
        no_color=True,
        highlight=False,
        soft_wrap=True,
    )


def print_side_by_side(
    hunks: Sequence[Hunk],
    display_options: DisplayOptions,
    lhs_display_path: str,
    rhs_display_path: str,
    lang_name: str,
    lhs_src: str,
    rhs_src: str,
    lhs_mps: Sequence[MatchedPos],
    rhs_mps: Sequence[MatchedPos],
    file: Optional[IO[str]] = None,
) -> None:
    """Print the comparison to `file` (standard output by default)."""
    console = make_console(display_options, file)
    for line in side_by_side_lines(
        hunks,
        display_options,
        lhs_display_path,
        rhs_display_path,
        lang_name,
        lhs_src,
        rhs_src,
        lhs_mps,
        rhs_mps,
    ):
        console.print(line, crop=False)


def render_side_by_side(
    hunks: Sequence[Hunk],
    display_options: DisplayOptions,
    lhs_display_path: str,
    rhs_display_path: str,
    lang_name: str,
    lhs_src: str,
    rhs_src: str,
    lhs_mps: Sequence[MatchedPos],
    rhs_mps: Sequence[MatchedPos],
) -> str:
    """Render the comparison to a string (ANSI-escaped if color is on)."""
    buffer = StringIO()
    print_side_by_side(
        hunks,
        display_options,
        lhs_display_path,
        rhs_display_path,
        lang_name,
        lhs_src,
        rhs_src,
        lhs_mps,
        rhs_mps,
        file=buffer,
    )
    return buffer.getvalue()
