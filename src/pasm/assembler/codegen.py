"""
PASM Code Generator
===================

This module drives the two-pass assembly of Pumpkin CPU source.

Pass 1 (Symbol Collection)
--------------------------
- Split every line into words
- Declare column-1 labels at the current address
- Measure instructions and data, advancing the address cursor
- Validate directives (ORG range, DB/DW values, DUP counts)
- Nothing is written to memory

Pass 2 (Code Generation)
------------------------
Only runs when pass 1 found no errors.

- Freeze the code size measured by pass 1; the immediate pool starts there
- Zero the memory image and walk the source again from address 0
- Resolve operands against the symbol table and the immediate pool
- Write instructions and data into the memory image

Both passes must advance the cursor identically, otherwise labels would
point at the wrong words. The same directive checks therefore run in
both passes, and instructions always occupy exactly one word.

Errors
------
An error aborts the current statement only. The generator records it and
carries on with the next line so that one run reports as many problems
as possible. Any error at the end of the run raises AssemblyFailedError.
"""

import logging
from typing import Optional

from pasm.assembler.directives import DirectiveProcessor
from pasm.assembler.encoder import InstructionEncoder
from pasm.assembler.immediates import Immediate
from pasm.assembler.lexer import Lexer, Token
from pasm.assembler.memory import MemoryImage
from pasm.assembler.opcodes import get_opcode
from pasm.assembler.state import AssemblyState, Statement
from pasm.assembler.symbols import looks_like_label
from pasm.config import AssemblerConfig
from pasm.errors import (
    AssemblerError,
    AssemblyFailedError,
    AssemblySyntaxError,
    CapacityError,
    ErrorCollector,
    ErrorKind,
    TooManyErrors,
)


logger = logging.getLogger(__name__)


class CodeGenerator:
    """
    Two-pass assembler for Pumpkin CPU source.

    A fresh AssemblyState is built for every call to generate(), so one
    generator can assemble several sources one after another.

    Usage:
        codegen = CodeGenerator(AssemblerConfig(memory_size=32))
        memory = codegen.generate(source, "demo.asm")
        words = memory.words()
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config if config is not None else AssemblerConfig()
        self.config.validate()
        self._state: Optional[AssemblyState] = None

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(self, source: str, filename: str = "<input>") -> MemoryImage:
        """
        Assemble source into a memory image.

        Args:
            source: Complete assembly source text
            filename: Name used in diagnostics

        Returns:
            The memory image (memory_size words)

        Raises:
            AssemblyFailedError: If any error was found; carries every error
        """
        # Physical lines only: no other control character ends a statement
        lines = [line.rstrip("\r") for line in source.split("\n")]
        state = AssemblyState(self.config, filename)
        self._state = state

        try:
            logger.info("Pass 1")
            self._run_pass(lines)

            if not state.errors.has_errors():
                state.start_pass_two()
                logger.info("Pass 2")
                self._run_pass(lines)

            self._check_program_size()
        except TooManyErrors as e:
            state.errors.add_warning(str(e))

        if state.errors.has_errors():
            logger.info(f"Assembly failed with {state.errors.error_count()} errors")
            raise AssemblyFailedError(state.errors.errors, state.errors.report())

        logger.info(f"Assembly successful, {state.words_used()} memory words used")
        return state.memory

    def get_memory(self) -> Optional[MemoryImage]:
        """Return the memory image of the last run (None before any run)."""
        return self._state.memory if self._state else None

    def get_symbols(self) -> dict[str, int]:
        """Return label -> address for the last run, in declaration order."""
        return self._state.symbols.as_dict() if self._state else {}

    def get_immediates(self) -> list[Immediate]:
        """Return the pooled immediates of the last run."""
        if self._state is None or self._state.immediates is None:
            return []
        return self._state.immediates.entries()

    def get_end_address(self) -> int:
        """First address after code and data, as measured by pass 1."""
        return self._state.end_address if self._state else 0

    def words_used(self) -> int:
        """Memory words used by code, data and immediates."""
        return self._state.words_used() if self._state else 0

    def get_errors(self) -> ErrorCollector:
        """Return the error collector of the last run."""
        if self._state is None:
            return ErrorCollector(max_errors=self.config.max_errors)
        return self._state.errors

    def has_errors(self) -> bool:
        """Check if the last run produced errors."""
        return self._state is not None and self._state.errors.has_errors()

    def get_error_report(self) -> str:
        """Get formatted error report."""
        return self.get_errors().report()

    # =========================================================================
    # Pass Driver
    # =========================================================================

    def _run_pass(self, lines: list[str]) -> None:
        """Walk every source line once with the current pass semantics."""
        state = self._state
        state.current_address = 0
        directives = DirectiveProcessor(state)
        encoder = InstructionEncoder(state)

        for line_number, text in enumerate(lines, start=1):
            try:
                tokens = Lexer(
                    text,
                    state.filename,
                    line_number=line_number,
                    max_words=self.config.max_words_per_line,
                ).tokenize()
                if tokens:
                    self._assemble_line(tokens, text, directives, encoder)
            except TooManyErrors:
                raise
            except AssemblerError as e:
                self._record(e)

    def _assemble_line(
        self,
        tokens: list[Token],
        text: str,
        directives: DirectiveProcessor,
        encoder: InstructionEncoder,
    ) -> None:
        """Dispatch one non-empty line to the label, instruction or directive handler."""
        state = self._state
        first = tokens[0]

        if first.in_first_column and looks_like_label(first.text):
            if state.emitting:
                state.symbols.lookup(first.text, first.location, source_line=text)
            else:
                state.symbols.declare(
                    first.text, state.current_address, first.location, source_line=text
                )
            tokens = tokens[1:]
            if not tokens:
                return

        stmt = Statement(
            keyword=tokens[0],
            operands=tuple(tokens[1:]),
            source_line=text,
        )

        opcode = get_opcode(stmt.name)
        if opcode is not None:
            address = state.current_address
            state.current_address += 1
            if state.emitting:
                state.memory.write(address, encoder.encode(opcode, stmt))
            return

        if directives.handles(stmt.name):
            directives.process(stmt)
            return

        raise AssemblySyntaxError(
            f"unknown instruction or directive '{stmt.name}'",
            stmt.location,
            hint="labels must start in column 1; instructions must be indented"
            if not stmt.keyword.in_first_column else None,
            source_line=text,
        )

    def _check_program_size(self) -> None:
        state = self._state
        used = state.words_used()
        if used > state.memory_size:
            self._record(CapacityError(
                "program too big for memory",
                hint=f"{used} words needed, memory holds {state.memory_size}",
                kind=ErrorKind.PROGRAM_TOO_LARGE,
            ))

    def _record(self, error: AssemblerError) -> None:
        logger.debug(str(error))
        self._state.errors.add(error)
