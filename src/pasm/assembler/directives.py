"""
PASM Directive Processing
=========================

Directives control where code goes and inject raw data:

    ORG  value              ; move the address cursor forward
    DB   list [DUP count]   ; bytes, packed two per word, high byte first
    DW   list [DUP count]   ; 16-bit words
    NOP                     ; BR to the next address

DB lists mix numbers (< 256) and double-quoted strings, separated by
commas with no spaces outside the quotes:

    MSG     DB  "Hello, world",13,10,0

DW lists mix numbers (< 65536) and label names. Label values are only
known in pass 2; pass 1 just counts them.

DUP repeats a single value:

    BUF     DB  0 DUP 64        ; 64 zero bytes = 32 words
    TABLE   DW  START DUP 8     ; 8 copies of START's address

Both passes run the same checks so that the address cursor advances
identically; only pass 2 writes to memory.
"""

from typing import Callable

from pasm.assembler.lexer import QUOTE_CHAR, parse_integer
from pasm.assembler.opcodes import encode_nop
from pasm.assembler.state import AssemblyState, Statement
from pasm.assembler.symbols import LABEL_START
from pasm.errors import (
    CapacityError,
    DirectiveError,
    ErrorKind,
    OperandError,
)


BYTE_LIMIT = 256
WORD_LIMIT = 65536


class DirectiveProcessor:
    """
    Handles ORG, DB, DW and NOP statements for one assembly run.

    Usage:
        processor = DirectiveProcessor(state)
        if processor.handles(stmt.name):
            processor.process(stmt)
    """

    def __init__(self, state: AssemblyState):
        self._state = state
        self._handlers: dict[str, Callable[[Statement], None]] = {
            "ORG": self._process_org,
            "DB": self._process_db,
            "DW": self._process_dw,
            "NOP": self._process_nop,
        }

    def handles(self, keyword: str) -> bool:
        return keyword in self._handlers

    def process(self, stmt: Statement) -> None:
        """
        Apply a directive, advancing the address cursor.

        Raises:
            AssemblerError: The statement is invalid; nothing was emitted
        """
        self._handlers[stmt.name](stmt)

    # =========================================================================
    # ORG
    # =========================================================================

    def _process_org(self, stmt: Statement) -> None:
        state = self._state

        if len(stmt.operands) != 1 or not stmt.operands[0].text[0].isdigit():
            raise self._error(stmt, "ORG expects a single numeric value")

        value = parse_integer(stmt.operands[0].text)
        if value is None:
            raise self._error(stmt, f"invalid number '{stmt.operands[0].text}'")

        if value < state.current_address:
            raise self._error(
                stmt,
                "ORG precedes current address",
                ErrorKind.BACKWARD_ORG,
                hint=f"current address is {state.current_address}; ORG can only move forward",
            )

        if value >= state.memory_size:
            raise self._error(
                stmt,
                "ORG exceeds memory size",
                ErrorKind.ORG_OUT_OF_RANGE,
                hint=f"memory holds {state.memory_size} words (0 to {state.memory_size - 1})",
            )

        state.current_address = value

    # =========================================================================
    # DB
    # =========================================================================

    def _process_db(self, stmt: Statement) -> None:
        state = self._state

        if not stmt.operands:
            raise self._error(stmt, "DB expects one or more values")

        count = self._parse_dup(stmt)
        values = self._parse_byte_list(stmt)
        values = self._expand_dup(stmt, values, count, "byte")
        self._check_buffer(stmt, values)

        if len(values) % 2:
            values.append(0)

        words = [(values[i] << 8) | values[i + 1] for i in range(0, len(values), 2)]

        if state.current_address + len(words) > state.memory_size:
            raise CapacityError(
                "DB exceeds remaining memory",
                stmt.location,
                source_line=stmt.source_line,
                kind=ErrorKind.OUT_OF_MEMORY,
            )

        self._emit(words)

    def _parse_byte_list(self, stmt: Statement) -> list[int]:
        """
        Parse ``1,2,"text",0x0D`` into byte values.
        """
        text = stmt.operands[0].text
        values: list[int] = []
        pos = 0

        while True:
            if pos < len(text) and text[pos].isdigit():
                end = _element_end(text, pos)
                value = parse_integer(text[pos:end])
                if value is None:
                    raise self._error(stmt, f"invalid number '{text[pos:end]}'")
                if value >= BYTE_LIMIT:
                    raise self._error(stmt, "DB value exceeds 255", ErrorKind.BYTE_OUT_OF_RANGE)
                values.append(value)
                if end == len(text):
                    break
                pos = end + 1
                continue

            if pos < len(text) and text[pos] == QUOTE_CHAR:
                close = text.find(QUOTE_CHAR, pos + 1)
                if close < 0:
                    raise self._error(stmt, "unterminated string")
                for char in text[pos + 1:close]:
                    if ord(char) >= BYTE_LIMIT:
                        raise self._error(
                            stmt,
                            f"character {char!r} does not fit in a byte",
                            ErrorKind.BYTE_OUT_OF_RANGE,
                        )
                    values.append(ord(char))
                pos = close + 1
                if pos == len(text):
                    break
                if text[pos] == ",":
                    pos += 1
                    continue

            raise self._error(stmt, "syntax", hint="DB values are numbers or \"strings\" separated by commas")

        if not values:
            raise self._error(stmt, "DB expects one or more values")

        return values

    # =========================================================================
    # DW
    # =========================================================================

    def _process_dw(self, stmt: Statement) -> None:
        state = self._state

        if not stmt.operands:
            raise self._error(stmt, "DW expects one or more values")

        count = self._parse_dup(stmt)
        values = self._parse_word_list(stmt)
        values = self._expand_dup(stmt, values, count, "word")
        self._check_buffer(stmt, values)

        if state.current_address + len(values) > state.memory_size:
            raise CapacityError(
                "DW exceeds remaining memory",
                stmt.location,
                source_line=stmt.source_line,
                kind=ErrorKind.OUT_OF_MEMORY,
            )

        self._emit(values)

    def _parse_word_list(self, stmt: Statement) -> list[int]:
        """
        Parse ``1,START,0xFFFF`` into word values.

        Label references resolve to 0 in pass 1.
        """
        state = self._state
        text = stmt.operands[0].text
        values: list[int] = []
        pos = 0

        while True:
            if pos < len(text) and text[pos].isdigit():
                end = _element_end(text, pos)
                value = parse_integer(text[pos:end])
                if value is None:
                    raise self._error(stmt, f"invalid number '{text[pos:end]}'")
                if value >= WORD_LIMIT:
                    raise self._error(stmt, "DW value exceeds 65535", ErrorKind.WORD_OUT_OF_RANGE)
                values.append(value)

            elif pos < len(text) and text[pos] in LABEL_START:
                end = _element_end(text, pos)
                name = text[pos:end]
                if state.emitting:
                    values.append(state.symbols.lookup(
                        name,
                        stmt.operands[0].location,
                        source_line=stmt.source_line,
                    ))
                else:
                    values.append(0)

            else:
                raise self._error(stmt, "syntax", hint="DW values are numbers or labels separated by commas")

            if end == len(text):
                break
            pos = end + 1

        return values

    # =========================================================================
    # NOP
    # =========================================================================

    def _process_nop(self, stmt: Statement) -> None:
        if stmt.operands:
            raise OperandError(
                "NOP does not take parameters",
                stmt.operands[0].location,
                source_line=stmt.source_line,
                kind=ErrorKind.UNEXPECTED_OPERAND,
            )

        self._emit([encode_nop(self._state.current_address)])

    # =========================================================================
    # Shared Helpers
    # =========================================================================

    def _parse_dup(self, stmt: Statement) -> int:
        """
        Return the DUP count of a DB/DW line, 0 when there is none.
        """
        operands = stmt.operands

        if len(operands) == 1:
            return 0

        if len(operands) == 3 and operands[1].text == "DUP":
            count = parse_integer(operands[2].text)
            if count is not None and count >= 0:
                if count > self._state.config.directive_buffer_size:
                    raise self._error(
                        stmt,
                        "DUP exceeds maximum",
                        ErrorKind.DUP_EXCEEDS_MAXIMUM,
                        hint=f"DUP count must not exceed {self._state.config.directive_buffer_size}",
                    )
                return count

        raise self._error(stmt, "syntax", hint=f"expected '{stmt.name} values' or '{stmt.name} value DUP count'")

    def _expand_dup(self, stmt: Statement, values: list[int], count: int, unit: str) -> list[int]:
        if count == 0:
            return values
        if len(values) > 1:
            raise self._error(
                stmt,
                f"can only duplicate a single {unit}",
                ErrorKind.MULTIPLE_DUP_SOURCE,
            )
        return values * count

    def _check_buffer(self, stmt: Statement, values: list[int]) -> None:
        limit = self._state.config.directive_buffer_size
        if len(values) > limit:
            raise CapacityError(
                f"too much data for {stmt.name}",
                stmt.location,
                hint=f"a single {stmt.name} may produce at most {limit} values",
                source_line=stmt.source_line,
                kind=ErrorKind.OUT_OF_MEMORY,
            )

    def _emit(self, words: list[int]) -> None:
        """Write words at the cursor (pass 2 only) and advance it."""
        state = self._state
        if state.emitting:
            state.memory.write_block(state.current_address, words)
        state.current_address += len(words)

    def _error(
        self,
        stmt: Statement,
        message: str,
        kind: ErrorKind = ErrorKind.SYNTAX_ERROR,
        hint: str | None = None,
    ) -> DirectiveError:
        return DirectiveError(
            message,
            stmt.location,
            hint=hint,
            source_line=stmt.source_line,
            kind=kind,
        )


def _element_end(text: str, pos: int) -> int:
    """Index of the comma ending the list element at pos, or len(text)."""
    comma = text.find(",", pos)
    return len(text) if comma < 0 else comma
