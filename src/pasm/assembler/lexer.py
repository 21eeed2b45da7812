"""
PASM Source Line Lexer
======================

This module splits one line of Pumpkin assembly source into words.

Line Structure
--------------
A source line holds at most five whitespace-delimited words:

    LABEL   DB  0  DUP  125     ; comment

- Words are separated by runs of spaces or tabs
- A double quote toggles a quoted state; whitespace inside quotes does not
  split words, so ``DB "Hello world",0`` is two words
- An unquoted ``;`` starts a comment that runs to the end of the line
- A word starting in column 1 is a label candidate; everything else must
  be indented

Number Formats
--------------
Numeric literals follow the C ``strtol`` base-0 rules:

| Format      | Prefix   | Example  | Value |
|-------------|----------|----------|-------|
| Decimal     | (none)   | 123      | 123   |
| Hexadecimal | 0x / 0X  | 0x7F     | 127   |
| Octal       | 0        | 0177     | 127   |

Example
-------
>>> from pasm.assembler.lexer import Lexer
>>> for token in Lexer("START LOAD #10 ; go", "demo.asm").tokenize():
...     print(token)
Token('START', 1:1)
Token('LOAD', 1:7)
Token('#10', 1:12)
"""

from dataclasses import dataclass
from typing import Optional
import re

from pasm.errors import AssemblySyntaxError, ErrorKind, SourceLocation


COMMENT_CHAR = ";"
QUOTE_CHAR = '"'

# C-locale whitespace; other control and Latin-1 characters are data
WHITESPACE = frozenset(" \t\n\r\x0b\x0c")

_INTEGER_RE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


def parse_integer(text: str) -> Optional[int]:
    """
    Parse an integer literal that must span the whole of text.

    Accepts an optional sign and decimal, 0x-hexadecimal or 0-octal digits.

    Returns:
        The value, or None if text is empty or has trailing characters
    """
    match = _INTEGER_RE.fullmatch(text)
    if match is None:
        return None

    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)

    return -value if sign == "-" else value


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    One whitespace-delimited word of a source line.

    Attributes:
        text: The word exactly as written (quotes included)
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    text: str
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        return f"Token({self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def in_first_column(self) -> bool:
        """True if the word starts at the very beginning of the line."""
        return self.column == 1


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Splits a single source line into Tokens.

    Usage:
        lexer = Lexer(line_text, filename, line_number=12)
        tokens = lexer.tokenize()

    Attributes:
        source: The line being tokenized (trailing newline allowed)
        filename: Name of the source file (for error reporting)
        line_number: Line number of this line (for error reporting)
        max_words: Maximum number of words allowed on the line
    """

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        line_number: int = 1,
        max_words: int = 5,
    ):
        self.source = source.rstrip("\r\n")
        self.filename = filename
        self.line_number = line_number
        self.max_words = max_words

    def tokenize(self) -> list[Token]:
        """
        Split the line into words.

        Returns:
            Tokens in source order (empty for blank and comment-only lines)

        Raises:
            AssemblySyntaxError: TOO_MANY_WORDS if the line holds more than
                max_words words, UNTERMINATED_QUOTE if a quote is left open
        """
        tokens: list[Token] = []
        quoted = False
        quote_column = 0
        start: Optional[int] = None
        end = len(self.source)

        for i, char in enumerate(self.source):
            if char == COMMENT_CHAR and not quoted:
                end = i
                break

            if char == QUOTE_CHAR:
                quoted = not quoted
                if quoted:
                    quote_column = i + 1

            if start is None:
                if char not in WHITESPACE:
                    if len(tokens) >= self.max_words:
                        raise self._error(
                            "too many words",
                            ErrorKind.TOO_MANY_WORDS,
                            column=i + 1,
                        )
                    start = i
            elif char in WHITESPACE and not quoted:
                tokens.append(self._make_token(start, i))
                start = None

        if start is not None:
            tokens.append(self._make_token(start, end))

        if quoted:
            raise self._error(
                'no closing "',
                ErrorKind.UNTERMINATED_QUOTE,
                column=quote_column,
            )

        return tokens

    def _make_token(self, start: int, end: int) -> Token:
        return Token(
            text=self.source[start:end],
            line=self.line_number,
            column=start + 1,
            filename=self.filename,
        )

    def _error(self, message: str, kind: ErrorKind, column: int = 0) -> AssemblySyntaxError:
        """Create a syntax error located on this line."""
        return AssemblySyntaxError(
            message,
            SourceLocation(self.filename, self.line_number, column),
            source_line=self.source,
            kind=kind,
        )
