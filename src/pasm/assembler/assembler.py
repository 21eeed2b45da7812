"""
PASM - Main Interface
=====================

This module provides the Assembler class, the primary interface for
assembling Pumpkin CPU source code. It wraps the two-pass code generator
and the memory image writers.

Example Usage
-------------
>>> from pasm.assembler import Assembler
>>>
>>> asm = Assembler(memory_size=32)
>>> asm.assemble_string('''
... START   LOAD    #10
...         STORE   @START
...         RETURN
... ''')
>>> asm.get_words()[:5]
[3, 4100, 61440, 10, 0]
>>>
>>> asm.write_output("demo.mif")

Command-Line Usage
------------------
    $ pasm demo.asm 256 demo.vhd
"""

import logging
from pathlib import Path
from typing import Optional

from pasm.assembler.codegen import CodeGenerator
from pasm.assembler.immediates import Immediate
from pasm.assembler.memory import MemoryImage
from pasm.config import DEFAULT_MEMORY_SIZE, AssemblerConfig
from pasm.errors import ErrorCollector, OutputError
from pasm.output.formats import OutputFormat, write_image


logger = logging.getLogger(__name__)


class Assembler:
    """
    Pumpkin CPU assembler.

    One instance can assemble any number of sources; each call starts
    from a clean state and the results of the last call stay available
    for inspection and output.

    Attributes:
        config: Memory size and limits used for every run
    """

    def __init__(
        self,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        config: Optional[AssemblerConfig] = None,
    ):
        """
        Initialize the assembler.

        Args:
            memory_size: Target memory size in words (power of two, 32..4096)
            config: Full configuration; overrides memory_size when given

        Raises:
            ConfigError: If the memory size is invalid
        """
        self.config = config if config is not None else AssemblerConfig(memory_size=memory_size)
        self._codegen = CodeGenerator(self.config)
        self._memory: Optional[MemoryImage] = None

    @property
    def memory_size(self) -> int:
        return self.config.memory_size

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(
        self,
        source: str,
        filename: str = "<input>",
        output_path: str | Path | None = None,
    ) -> list[int]:
        """
        Assemble source code and optionally write a memory image file.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages
            output_path: Optional .vhd, .mif or .mem output path

        Returns:
            The memory image as a list of memory_size words
        """
        words = self.assemble_string(source, filename)
        if output_path:
            self.write_output(output_path)
        return words

    def assemble_string(self, source: str, filename: str = "<input>") -> list[int]:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The memory image as a list of memory_size words

        Raises:
            AssemblyFailedError: If any error was found
        """
        self._memory = None
        self._memory = self._codegen.generate(source, filename)
        return self._memory.words()

    def assemble_file(self, filepath: str | Path) -> list[int]:
        """
        Assemble source code from a file.

        Raises:
            AssemblyFailedError: If any error was found
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="latin-1")
        return self.assemble_string(source, filepath.name)

    # =========================================================================
    # Results
    # =========================================================================

    def get_memory(self) -> Optional[MemoryImage]:
        """Return the memory image of the last successful run."""
        return self._memory

    def get_words(self) -> list[int]:
        """Return the memory words of the last successful run (empty before)."""
        return self._memory.words() if self._memory is not None else []

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping label names to addresses
        """
        return self._codegen.get_symbols()

    def get_immediates(self) -> list[Immediate]:
        return self._codegen.get_immediates()

    def get_end_address(self) -> int:
        return self._codegen.get_end_address()

    def words_used(self) -> int:
        """Words occupied by code, data and the immediate pool."""
        return self._codegen.words_used()

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_output(
        self,
        filepath: str | Path,
        fmt: Optional[OutputFormat] = None,
    ) -> None:
        """
        Write the memory image; the format follows the file extension.

        Args:
            filepath: Output file path (.vhd, .mif or .mem)
            fmt: Explicit format, overriding the extension

        Raises:
            OutputError: If nothing has been assembled yet
            UnknownOutputFormatError: If the extension is not recognised
        """
        if self._memory is None:
            raise OutputError("no assembled program to write")
        write_image(filepath, self._memory.words(), fmt)

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the symbol table, one ``ADDR  NAME`` line per label, by address.

        Args:
            filepath: Output file path
        """
        symbols = sorted(self.get_symbols().items(), key=lambda item: (item[1], item[0]))
        lines = [f"{address:03X}  {name}" for name, address in symbols]
        Path(filepath).write_text("\n".join(lines) + ("\n" if lines else ""))
        logger.info(f"Symbol file '{Path(filepath).name}' created.")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Check if the last run produced errors."""
        return self._codegen.has_errors()

    def get_errors(self) -> ErrorCollector:
        return self._codegen.get_errors()

    def get_error_report(self) -> str:
        """Get formatted error report."""
        return self._codegen.get_error_report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, memory_size: int = DEFAULT_MEMORY_SIZE) -> list[int]:
    """
    Assemble source code to a list of memory words.

    Raises:
        AssemblyFailedError: If any error was found
    """
    return Assembler(memory_size=memory_size).assemble_string(source)


def assemble_file(filepath: str | Path, memory_size: int = DEFAULT_MEMORY_SIZE) -> list[int]:
    """
    Assemble a source file to a list of memory words.

    Raises:
        AssemblyFailedError: If any error was found
        FileNotFoundError: If the source file does not exist
    """
    return Assembler(memory_size=memory_size).assemble_file(filepath)
