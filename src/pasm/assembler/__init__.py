"""
Pumpkin CPU Assembler
=====================

A two-pass assembler for the 16-instruction Pumpkin CPU.

Main Components
---------------
- **Assembler**: Main interface; assembles source and writes memory images
- **Lexer**: Splits source lines into words
- **SymbolTable**: Labels collected in pass 1
- **ImmediatePool**: Deduplicated literal words placed after the program
- **DirectiveProcessor**: ORG, DB, DW, NOP and DUP handling
- **InstructionEncoder**: Builds 16-bit instruction words
- **CodeGenerator**: Runs both passes over the source

Assembly Process
----------------
1. **Pass 1**: declare labels, measure code and data
2. **Pass 2**: resolve operands, fill the immediate pool, write memory

Example Usage
-------------
>>> from pasm.assembler import Assembler
>>> asm = Assembler(memory_size=256)
>>> words = asm.assemble_file("blink.asm")
>>> asm.write_output("blink.vhd")
"""

from pasm.assembler.assembler import Assembler, assemble, assemble_file
from pasm.assembler.codegen import CodeGenerator
from pasm.assembler.directives import DirectiveProcessor
from pasm.assembler.encoder import InstructionEncoder
from pasm.assembler.immediates import Immediate, ImmediatePool
from pasm.assembler.lexer import Lexer, Token, parse_integer
from pasm.assembler.memory import MemoryImage
from pasm.assembler.opcodes import Opcode, encode_instruction, encode_nop, get_opcode
from pasm.assembler.state import AssemblyState, Statement
from pasm.assembler.symbols import Label, SymbolTable, looks_like_label

__all__ = [
    "Assembler",
    "assemble",
    "assemble_file",
    "CodeGenerator",
    "DirectiveProcessor",
    "InstructionEncoder",
    "Immediate",
    "ImmediatePool",
    "Lexer",
    "Token",
    "parse_integer",
    "MemoryImage",
    "Opcode",
    "encode_instruction",
    "encode_nop",
    "get_opcode",
    "AssemblyState",
    "Statement",
    "Label",
    "SymbolTable",
    "looks_like_label",
]
