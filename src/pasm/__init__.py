"""
PASM - Assembler for the Pumpkin CPU
====================================

PASM turns Pumpkin CPU assembly source into a memory image and writes it
as a VHDL RAM model, an Altera MIF file or a MEM listing, ready to be
loaded into an FPGA design.

Quick Start
-----------
    >>> from pasm import Assembler
    >>> asm = Assembler(memory_size=256)
    >>> words = asm.assemble_file("blink.asm")
    >>> asm.write_output("blink.mif")

Or use the command-line tool:
    $ pasm blink.asm 256 blink.mif
"""

__version__ = "1.3"

from pasm.assembler import Assembler, assemble, assemble_file
from pasm.config import AssemblerConfig
from pasm.errors import (
    AssemblerError,
    AssemblyFailedError,
    ErrorKind,
    PasmError,
)
from pasm.output import OutputFormat

__all__ = [
    "__version__",
    "Assembler",
    "AssemblerConfig",
    "AssemblerError",
    "AssemblyFailedError",
    "ErrorKind",
    "OutputFormat",
    "PasmError",
    "assemble",
    "assemble_file",
]
