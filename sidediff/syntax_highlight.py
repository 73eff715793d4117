# sidediff/syntax_highlight.py
"""Language detection and tokenisation via Pygments.

Provides the language name shown in hunk headers and, for whole-file
additions and removals, a flat list of novel positions covering every
token of the file, classified by syntax category.
"""

import logging
import os
from functools import lru_cache
from typing import Iterator, List, Optional, Tuple

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.token import Comment, Keyword, Name, Operator, Punctuation, String, _TokenType
from pygments.util import ClassNotFound

from .lines import LineNumber
from .model import MatchedPos, MatchKind, SingleLineSpan, TokenKind

logger = logging.getLogger(__name__)

PLAIN_TEXT_NAME = "Text"

# File extension to Pygments lexer name mapping for common cases
EXTENSION_MAP = {
    '.py': 'python',
    '.js': 'javascript',
    '.ts': 'typescript',
    '.tsx': 'tsx',
    '.jsx': 'jsx',
    '.rb': 'ruby',
    '.go': 'go',
    '.rs': 'rust',
    '.java': 'java',
    '.c': 'c',
    '.cpp': 'cpp',
    '.h': 'c',
    '.hpp': 'cpp',
    '.cs': 'csharp',
    '.el': 'emacs-lisp',
    '.sh': 'bash',
    '.json': 'json',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.toml': 'toml',
    '.sql': 'sql',
}

# Lexers must not touch leading/trailing newlines, otherwise token
# offsets stop lining up with the source's line table.
_LEXER_OPTIONS = {"stripnl": False, "stripall": False, "ensurenl": False}


@lru_cache(maxsize=32)
def _get_lexer(filename: str) -> Optional[Lexer]:
    """Get Pygments lexer for a filename (cached).

    Args:
        filename: File path or name.

    Returns:
        Pygments lexer or None if not found.
    """
    _, ext = os.path.splitext(filename)
    if ext.lower() in EXTENSION_MAP:
        try:
            return get_lexer_by_name(EXTENSION_MAP[ext.lower()], **_LEXER_OPTIONS)
        except ClassNotFound:
            logger.debug("No lexer named %s for %s", EXTENSION_MAP[ext.lower()], filename)

    try:
        return get_lexer_for_filename(filename, **_LEXER_OPTIONS)
    except ClassNotFound:
        logger.debug("No lexer for %s, treating it as plain text", filename)
        return None


def language_name(filename: str) -> str:
    """Human readable language name for a file, e.g. "Python"."""
    lexer = _get_lexer(filename)
    return lexer.name if lexer else PLAIN_TEXT_NAME


def token_kind(ttype: _TokenType) -> TokenKind:
    """Map a Pygments token type to a syntax category."""
    if ttype in Comment:
        return TokenKind.COMMENT
    if ttype in String:
        return TokenKind.STRING
    if ttype in Keyword.Type or ttype in Name.Class:
        return TokenKind.TYPE
    if ttype in Keyword or ttype in Operator.Word:
        return TokenKind.KEYWORD
    if ttype in Punctuation:
        return TokenKind.DELIMITER
    return TokenKind.NORMAL


def _spans(src: str, lexer: Optional[Lexer]) -> Iterator[Tuple[int, int, int, TokenKind]]:
    """Yield (line, start_col, end_col, kind) for each non-blank token piece.

    Tokens spanning several lines (docstrings, block comments) are cut
    at each line ending.
    """
    if lexer is None:
        tokens = [(0, None, src)]
    else:
        tokens = lexer.get_tokens_unprocessed(src)

    line = 0
    line_start = 0
    for offset, ttype, value in tokens:
        kind = token_kind(ttype) if ttype is not None else TokenKind.NORMAL
        for i, piece in enumerate(value.split("\n")):
            if i > 0:
                line += 1
                line_start = offset
            start = offset - line_start
            content = piece[:-1] if piece.endswith("\r") else piece
            if content.strip():
                yield line, start, start + len(content), kind
            offset += len(piece) + 1


def novel_positions(src: str, filename: str) -> List[MatchedPos]:
    """Mark every token of `src` as novel, e.g. for an added file."""
    return [
        MatchedPos(
            kind=MatchKind.NOVEL,
            pos=SingleLineSpan(LineNumber(line), start, end),
            highlight=kind,
        )
        for line, start, end, kind in _spans(src, _get_lexer(filename))
    ]
