"""
PASM Assembly State
===================

All mutable state of one assembly run lives in a single AssemblyState
value, created by the code generator and handed to the directive
processors and the instruction encoder. Nothing is kept between runs.
"""

from dataclasses import dataclass, field
from typing import Optional

from pasm.assembler.immediates import ImmediatePool
from pasm.assembler.lexer import Token
from pasm.assembler.memory import MemoryImage
from pasm.assembler.symbols import SymbolTable
from pasm.config import AssemblerConfig
from pasm.errors import ErrorCollector, SourceLocation


@dataclass(frozen=True)
class Statement:
    """
    One source line after label removal.

    Attributes:
        keyword: The mnemonic or directive word
        operands: Words following the keyword
        source_line: Full source text (for error context)
    """
    keyword: Token
    operands: tuple[Token, ...]
    source_line: str

    @property
    def location(self) -> SourceLocation:
        return self.keyword.location

    @property
    def name(self) -> str:
        return self.keyword.text


@dataclass
class AssemblyState:
    """
    Run-scoped assembler state.

    Attributes:
        config: Limits and memory size for the run
        filename: Source name used in diagnostics
        memory: Output memory image (zeroed when pass 2 starts)
        symbols: Labels declared in pass 1
        errors: Diagnostics collected over both passes
        immediates: Immediate pool, created when pass 2 starts
        pass_number: 1 or 2
        current_address: Address of the next word to emit
        end_address: First free address after pass 1 (start of the pool)
    """
    config: AssemblerConfig
    filename: str = "<input>"
    memory: MemoryImage = field(init=False)
    symbols: SymbolTable = field(init=False)
    errors: ErrorCollector = field(init=False)
    immediates: Optional[ImmediatePool] = None
    pass_number: int = 1
    current_address: int = 0
    end_address: int = 0

    def __post_init__(self) -> None:
        self.memory = MemoryImage(self.config.memory_size)
        self.symbols = SymbolTable(
            max_labels=self.config.max_labels,
            max_name_length=self.config.max_label_length,
        )
        self.errors = ErrorCollector(max_errors=self.config.max_errors)

    @property
    def emitting(self) -> bool:
        """True during pass 2, when code and data are written to memory."""
        return self.pass_number == 2

    @property
    def memory_size(self) -> int:
        return self.config.memory_size

    def start_pass_two(self) -> None:
        """
        Freeze the code size measured by pass 1 and prepare for emission.
        """
        self.end_address = self.current_address
        self.memory.clear()
        self.immediates = ImmediatePool(
            self.memory,
            base_address=self.end_address,
            errors=self.errors,
            capacity=self.config.max_immediates,
        )
        self.pass_number = 2
        self.current_address = 0

    def words_used(self) -> int:
        """Code, data and pooled immediates, in words."""
        if self.immediates is not None:
            return self.immediates.next_address
        return self.end_address
