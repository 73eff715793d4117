# sidediff/model.py
"""Structured inputs consumed by the side-by-side renderer.

The matcher that decides what changed lives outside this package. It
hands over, for each side, a flat list of MatchedPos entries (one per
token occurrence) and an ordered list of Hunks whose rows pair line
numbers from both sides.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple

from .lines import LineNumber


class TokenKind(Enum):
    """Syntax category of a token, used for syntax highlighting."""
    NORMAL = "normal"
    STRING = "string"
    TYPE = "type"
    COMMENT = "comment"
    KEYWORD = "keyword"
    DELIMITER = "delimiter"


class MatchKind(Enum):
    """How a token relates to the other side."""
    UNCHANGED = "unchanged"
    NOVEL = "novel"
    # A changed word inside a comment or string that otherwise matched.
    NOVEL_WORD = "novel_word"
    # The unchanged remainder of a line holding a NOVEL_WORD.
    NOVEL_LINE_PART = "novel_line_part"

    @property
    def is_novel(self) -> bool:
        return self is not MatchKind.UNCHANGED


@dataclass(frozen=True)
class SingleLineSpan:
    """Half-open column range [start_col, end_col) on a single line."""
    line: LineNumber
    start_col: int
    end_col: int


@dataclass(frozen=True)
class MatchedPos:
    """One token occurrence with its position and classification."""
    kind: MatchKind
    pos: SingleLineSpan
    highlight: TokenKind = TokenKind.NORMAL


# One output row: (old line, new line). Either may be absent, never both.
AlignedLinePair = Tuple[Optional[LineNumber], Optional[LineNumber]]


@dataclass
class Hunk:
    """A contiguous run of aligned rows plus the novel lines within it."""
    lines: List[AlignedLinePair] = field(default_factory=list)
    novel_lhs: Set[LineNumber] = field(default_factory=set)
    novel_rhs: Set[LineNumber] = field(default_factory=set)

    @property
    def same_line_numbers(self) -> bool:
        """True if every row pairs equal line numbers (pure context)."""
        return all(lhs == rhs for lhs, rhs in self.lines)


def _novel_lines(mps: Iterable[MatchedPos]) -> Set[LineNumber]:
    return {mp.pos.line for mp in mps if mp.kind.is_novel}


def lines_with_novel(
    lhs_mps: Iterable[MatchedPos],
    rhs_mps: Iterable[MatchedPos],
) -> Tuple[Set[LineNumber], Set[LineNumber]]:
    """Line numbers on each side that hold at least one novel token."""
    return _novel_lines(lhs_mps), _novel_lines(rhs_mps)
