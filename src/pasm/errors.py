"""
PASM Error Hierarchy
====================

This module defines the exception hierarchy for the whole toolchain.
All exceptions inherit from PasmError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
PasmError (base)
├── ConfigError - invalid assembler configuration (memory size etc.)
├── AssemblerError (assembler diagnostics, each tagged with an ErrorKind)
│   ├── AssemblySyntaxError - malformed line, word or operand
│   ├── SymbolError - label declaration / lookup problems
│   │   ├── ReservedWordError - mnemonic or directive used as a label
│   │   ├── DuplicateSymbolError - label declared twice
│   │   ├── LabelTooLongError - label longer than the name limit
│   │   └── UndefinedSymbolError - reference to an unknown label
│   ├── DirectiveError - bad ORG / DB / DW / DUP usage
│   ├── OperandError - wrong number of instruction operands
│   ├── CapacityError - label/immediate/memory limits exceeded
│   ├── AssemblyFailedError - summary raised after a failed run
│   └── TooManyErrors - error limit reached, run stopped
└── OutputError - cannot render or write an output file
    └── UnknownOutputFormatError - unsupported output extension

Error Kinds
-----------
Every AssemblerError carries an ErrorKind. The class says which component
complained; the kind says exactly what went wrong. Tests and tools should
match on the kind:

    except AssemblyFailedError as e:
        kinds = [err.kind for err in e.errors]

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class PasmError(Exception):
    """
    Base exception for all PASM errors.

        try:
            assembler.assemble_file("program.asm")
        except PasmError as e:
            print(f"Error: {e}")
    """
    pass


class ConfigError(PasmError):
    """Invalid assembler configuration (for example a bad memory size)."""
    pass


# =============================================================================
# Error Taxonomy
# =============================================================================

class ErrorKind(Enum):
    """Every distinct diagnostic the assembler can produce."""

    SYNTAX_ERROR = auto()
    TOO_MANY_WORDS = auto()
    UNTERMINATED_QUOTE = auto()
    RESERVED_WORD_AS_LABEL = auto()
    DUPLICATE_LABEL = auto()
    LABEL_TOO_LONG = auto()
    TOO_MANY_LABELS = auto()
    TOO_MANY_IMMEDIATES = auto()
    BACKWARD_ORG = auto()
    ORG_OUT_OF_RANGE = auto()
    BYTE_OUT_OF_RANGE = auto()
    WORD_OUT_OF_RANGE = auto()
    MULTIPLE_DUP_SOURCE = auto()
    DUP_EXCEEDS_MAXIMUM = auto()
    OUT_OF_MEMORY = auto()
    UNRESOLVED_LABEL = auto()
    MISSING_OPERAND = auto()
    UNEXPECTED_OPERAND = auto()
    PROGRAM_TOO_LARGE = auto()
    TOO_MANY_ERRORS = auto()


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when the whole line is meant)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(PasmError):
    """
    Base exception for all assembler diagnostics.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
        kind: The ErrorKind classifying this diagnostic
    """

    default_kind = ErrorKind.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        self.kind = kind if kind is not None else self.default_kind
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            demo.asm:3:13: error: label 'LOOP' already defined
                LOOP        ADD #1
                ^
            hint: 'LOOP' was first defined at demo.asm:1:1
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Covers lines that cannot be split into words (too many words, an
    unclosed quote) and words that do not form a valid statement or
    operand.
    """
    default_kind = ErrorKind.SYNTAX_ERROR


class SymbolError(AssemblerError):
    """Base class for label declaration and lookup problems."""
    default_kind = ErrorKind.SYNTAX_ERROR


class ReservedWordError(SymbolError):
    """A mnemonic or directive keyword was found where a label belongs."""

    default_kind = ErrorKind.RESERVED_WORD_AS_LABEL

    def __init__(
        self,
        word: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.word = word
        super().__init__(
            f"reserved word '{word}' found in column 1",
            location=location,
            hint="indent instructions and directives so they are not read as labels",
            source_line=source_line,
        )


class DuplicateSymbolError(SymbolError):
    """
    Label defined multiple times.

    The first declaration wins; the error points back at it when the
    original location is known.
    """

    default_kind = ErrorKind.DUPLICATE_LABEL

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"label '{symbol}' already defined",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class LabelTooLongError(SymbolError):
    """Label name exceeds the configured maximum length."""

    default_kind = ErrorKind.LABEL_TOO_LONG

    def __init__(
        self,
        symbol: str,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.limit = limit
        super().__init__(
            f"label too long ({len(symbol)} characters, maximum is {limit})",
            location=location,
            source_line=source_line,
        )


class UndefinedSymbolError(SymbolError):
    """
    Reference to an undefined label.

    Raised during the second pass when a label reference cannot be
    resolved. Similarly-named labels are offered as a hint to catch typos.
    """

    default_kind = ErrorKind.UNRESOLVED_LABEL

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
        kind: Optional[ErrorKind] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"failed to resolve label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
            kind=kind,
        )


class DirectiveError(AssemblerError):
    """
    Error in an assembler directive.

    Examples:
        - ORG moving backwards or past the end of memory
        - DB value > 255, DW value > 65535
        - DUP applied to more than one value
    """
    default_kind = ErrorKind.SYNTAX_ERROR


class OperandError(AssemblerError):
    """Instruction used with the wrong number of operands."""
    default_kind = ErrorKind.MISSING_OPERAND


class CapacityError(AssemblerError):
    """
    A fixed limit was exceeded.

    Raised when the label table or immediate pool is full, or when data
    or the whole program does not fit into the target memory.
    """
    default_kind = ErrorKind.OUT_OF_MEMORY


class AssemblyFailedError(AssemblerError):
    """
    Raised once at the end of a run that collected any errors.

    Attributes:
        errors: Every diagnostic collected during the run, in order
    """

    def __init__(self, errors: list[AssemblerError], report: str):
        self.errors = list(errors)
        self.report = report
        error_word = "error" if len(self.errors) == 1 else "errors"
        super().__init__(
            f"assembly failed with {len(self.errors)} {error_word}:\n\n{report}"
        )


class TooManyErrors(AssemblerError):
    """
    Raised when too many errors have been encountered.

    This stops the run when there are fundamental problems with the
    source code, rather than flooding the user with follow-on errors.
    """

    default_kind = ErrorKind.TOO_MANY_ERRORS

    def __init__(self, message: str = "Too many errors"):
        super().__init__(message)


# =============================================================================
# Output Exceptions
# =============================================================================

class OutputError(PasmError):
    """Base exception for output file rendering and writing errors."""
    pass


class UnknownOutputFormatError(OutputError):
    """
    The output file extension does not name a supported format.

    Supported extensions (case-insensitive): .vhd, .mif, .mem
    """

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"invalid output file extension for '{filename}' "
            f"(expected .vhd, .mif or .mem)"
        )


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The assembler uses this to continue processing after encountering
    an error, collecting all errors before reporting them together.
    This helps users fix multiple issues without repeated assembly runs.

    Example:
        collector = ErrorCollector(max_errors=100)

        try:
            # ... assembly process ...
            if error_found:
                collector.add(UndefinedSymbolError(...))
        except TooManyErrors:
            pass  # Already logged max_errors

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Args:
            error: The error to add

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"Too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def warning_count(self) -> int:
        """Return the number of collected warnings."""
        return len(self.warnings)

    def kinds(self) -> list[ErrorKind]:
        """Return the ErrorKind of every collected error, in order."""
        return [error.kind for error in self.errors]

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Returns:
            Formatted string with all errors and warnings
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()
