# sidediff/style.py
"""Style resolution, headers and width-bounded line splitting.

Turns matched positions into per-line style spans (syntax coloring
combined with added/removed coloring) and applies them to line contents
as rich Text objects. Text keeps styles as spans over plain characters,
so visible widths are plain lengths and splitting a line re-anchors its
spans instead of re-parsing escape sequences.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

from rich.style import Style
from rich.text import Text

from .lines import LineNumber
from .model import MatchedPos, MatchKind, SingleLineSpan, TokenKind
from .options import BackgroundColor, DisplayOptions

StyleSpan = Tuple[SingleLineSpan, Style]

# Whole-row backgrounds for changed lines (256-color palette).
LHS_NOVEL_BACKGROUND = Style(bgcolor="color(224)")
RHS_NOVEL_BACKGROUND = Style(bgcolor="color(194)")

DIMMED = Style(dim=True)


def novel_style(style: Style, is_lhs: bool, background: BackgroundColor) -> Style:
    """Add the removed (left) or added (right) color to `style`."""
    if is_lhs:
        color = "bright_red" if background.is_dark else "red"
    else:
        color = "bright_green" if background.is_dark else "green"
    return style + Style(color=color)


def _syntax_style(highlight: TokenKind) -> Style:
    """Styling for an unchanged token of the given category."""
    if highlight is TokenKind.KEYWORD:
        return Style(bold=True)
    if highlight is TokenKind.COMMENT:
        return Style(italic=True)
    if highlight is TokenKind.STRING:
        return Style(color="magenta")
    if highlight is TokenKind.TYPE:
        return Style(color="yellow")
    return Style()


def _position_style(
    mp: MatchedPos,
    is_lhs: bool,
    background: BackgroundColor,
    syntax_highlight: bool,
) -> Style:
    if mp.kind is MatchKind.UNCHANGED:
        return _syntax_style(mp.highlight) if syntax_highlight else Style()

    if mp.kind is MatchKind.NOVEL_WORD:
        return novel_style(Style(bold=True, underline=True), is_lhs, background)

    base = Style()
    if mp.kind is MatchKind.NOVEL and syntax_highlight:
        if mp.highlight in (TokenKind.KEYWORD, TokenKind.DELIMITER):
            base = Style(bold=True)
        elif mp.highlight is TokenKind.COMMENT:
            base = Style(italic=True)
    return novel_style(base, is_lhs, background)


def color_positions(
    is_lhs: bool,
    background: BackgroundColor,
    syntax_highlight: bool,
    mps: Iterable[MatchedPos],
) -> List[StyleSpan]:
    """Resolve each matched position to a style span."""
    return [
        (mp.pos, _position_style(mp, is_lhs, background, syntax_highlight))
        for mp in mps
    ]


def _bucket_by_line(spans: Iterable[StyleSpan]) -> Dict[LineNumber, List[StyleSpan]]:
    styles: Dict[LineNumber, List[StyleSpan]] = defaultdict(list)
    for span, style in spans:
        styles[span.line].append((span, style))
    return dict(styles)


def highlight_positions(
    background: BackgroundColor,
    syntax_highlight: bool,
    lhs_mps: Iterable[MatchedPos],
    rhs_mps: Iterable[MatchedPos],
) -> Tuple[Dict[LineNumber, List[StyleSpan]], Dict[LineNumber, List[StyleSpan]]]:
    """Style spans for both sides, keyed by line number."""
    return (
        _bucket_by_line(color_positions(True, background, syntax_highlight, lhs_mps)),
        _bucket_by_line(color_positions(False, background, syntax_highlight, rhs_mps)),
    )


def styled_line(line: str, styles: Iterable[StyleSpan], base: Style = Style()) -> Text:
    """Apply style spans to a single line of content."""
    text = Text(line, style=base, end="")
    for span, style in styles:
        text.stylize(style, span.start_col, span.end_col)
    return text


def apply_colors(
    lines: Sequence[str],
    highlights: Dict[LineNumber, List[StyleSpan]],
) -> List[Text]:
    """Fully colored line table: each line with all of its spans applied."""
    return [
        styled_line(line, highlights.get(LineNumber(i), ()))
        for i, line in enumerate(lines)
    ]


def split_and_apply(
    line: str,
    max_len: int,
    use_color: bool,
    styles: Iterable[StyleSpan],
    pad: bool,
) -> List[Text]:
    """Split `line` into fragments of at most `max_len` characters.

    Spans crossing a fragment boundary are clipped to each fragment and
    re-anchored at its start, so a span straddling the boundary colors
    both pieces.

    Args:
        line: Raw line content.
        max_len: Fragment width. Must be positive.
        use_color: Apply `styles`; when false fragments are plain.
        styles: Style spans for this line.
        pad: Right-pad every fragment with spaces to `max_len`.

    Returns:
        At least one fragment. An empty line yields one empty (or padded)
        fragment.
    """
    text = styled_line(line, styles if use_color else ())
    if len(text) <= max_len:
        fragments = [text]
    else:
        fragments = list(text.divide(range(max_len, len(text), max_len)))

    if pad:
        for fragment in fragments:
            fragment.pad_right(max_len - len(fragment))
    return fragments


def visible_width(*parts: Text) -> int:
    """Columns the parts occupy once printed, styles excluded."""
    return sum(len(part) for part in parts)


def _header_path_style(hunk_num: int, background: BackgroundColor) -> Style:
    if hunk_num != 1:
        return DIMMED
    if background.is_dark:
        return Style(bold=True, color="bright_yellow")
    return Style(bold=True)


def header(
    lhs_display_path: str,
    rhs_display_path: str,
    hunk_num: int,
    hunk_total: int,
    lang_name: str,
    display_options: DisplayOptions,
) -> Text:
    """Header line printed above each hunk.

    Format: "<path> --- <hunk_num>/<hunk_total> --- <language>". Under
    version control a rename is announced on a line of its own above
    the first hunk, since the old path is usually a temporary file.
    """
    path_style = Style()
    if display_options.use_color:
        path_style = _header_path_style(hunk_num, display_options.background_color)

    renamed = lhs_display_path != rhs_display_path
    result = Text(end="")
    if renamed and display_options.in_vcs:
        if hunk_num == 1:
            result.append("Renamed ")
            result.append(lhs_display_path, style=path_style)
            result.append(" to ")
            result.append(rhs_display_path, style=path_style)
            result.append("\n")
        result.append(rhs_display_path, style=path_style)
    elif renamed:
        result.append(f"{lhs_display_path} -> {rhs_display_path}", style=path_style)
    else:
        result.append(rhs_display_path, style=path_style)

    result.append(f" --- {hunk_num}/{hunk_total} --- {lang_name}")
    return result
