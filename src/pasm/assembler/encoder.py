"""
PASM Instruction Encoder
========================

Turns a mnemonic and its operand into a 16-bit instruction word during
pass 2. Operand forms, tried in this order:

    LOAD #10        ; literal: address of a pool word holding 10
    LOAD @TABLE     ; address-of: address of a pool word holding TABLE's address
    LOAD COUNT      ; direct: COUNT's own address

RETURN takes no operand; every other instruction takes exactly one.
"""

from typing import Optional

from pasm.assembler.lexer import Token, parse_integer
from pasm.assembler.opcodes import (
    NO_OPERAND_INSTRUCTIONS,
    WORD_MASK,
    Opcode,
    encode_instruction,
)
from pasm.assembler.state import AssemblyState, Statement
from pasm.assembler.symbols import looks_like_label
from pasm.errors import AssemblySyntaxError, ErrorKind, OperandError


IMMEDIATE_PREFIX = "#"
ADDRESS_OF_PREFIX = "@"

# #value accepts unsigned words and their negative two's-complement forms
IMMEDIATE_MIN = -0x8000
IMMEDIATE_MAX = 0xFFFF


class InstructionEncoder:
    """
    Encodes instruction statements against the pass-1 symbol table.

    Usage:
        encoder = InstructionEncoder(state)
        word = encoder.encode(Opcode.LOAD, stmt)
    """

    def __init__(self, state: AssemblyState):
        self._state = state

    def encode(self, opcode: Opcode, stmt: Statement) -> int:
        """
        Build the instruction word for stmt.

        Raises:
            OperandError: Wrong number of operands
            AssemblySyntaxError: The operand cannot be resolved
        """
        operands = stmt.operands

        if opcode in NO_OPERAND_INSTRUCTIONS:
            if operands:
                raise OperandError(
                    f"operand not valid for {opcode.name} instruction",
                    operands[0].location,
                    source_line=stmt.source_line,
                    kind=ErrorKind.UNEXPECTED_OPERAND,
                )
            return encode_instruction(opcode)

        if len(operands) != 1:
            raise OperandError(
                f"{opcode.name} expects a single operand",
                stmt.location,
                source_line=stmt.source_line,
                kind=ErrorKind.MISSING_OPERAND,
            )

        return encode_instruction(opcode, self.resolve_operand(operands[0], stmt))

    def resolve_operand(self, operand: Token, stmt: Statement) -> int:
        """
        Return the 12-bit address an operand refers to.
        """
        state = self._state
        text = operand.text

        if text.startswith(IMMEDIATE_PREFIX):
            value = parse_integer(text[1:])
            if value is not None:
                if not IMMEDIATE_MIN <= value <= IMMEDIATE_MAX:
                    raise AssemblySyntaxError(
                        f"immediate value {value} does not fit in 16 bits",
                        operand.location,
                        source_line=stmt.source_line,
                        kind=ErrorKind.WORD_OUT_OF_RANGE,
                    )
                return state.immediates.resolve(
                    value & WORD_MASK, operand.location, stmt.source_line
                )

        elif text.startswith(ADDRESS_OF_PREFIX):
            address = state.symbols.get(text[1:])
            if address is not None:
                return state.immediates.resolve(
                    address, operand.location, stmt.source_line
                )

        else:
            address = state.symbols.get(text)
            if address is not None:
                return address

        raise AssemblySyntaxError(
            f"cannot resolve operand '{text}'",
            operand.location,
            hint=self._hint(text),
            source_line=stmt.source_line,
        )

    def _hint(self, text: str) -> Optional[str]:
        name = text[1:] if text[:1] in (IMMEDIATE_PREFIX, ADDRESS_OF_PREFIX) else text
        if text.startswith(IMMEDIATE_PREFIX):
            return "immediate operands are #number (decimal, 0x hex or 0 octal)"
        if not looks_like_label(name):
            return "operands are #number, @label or label"
        similar = self._state.symbols.similar(name)
        if similar:
            suggestions = ", ".join(f"'{s}'" for s in similar)
            return f"undefined label '{name}'; did you mean {suggestions}?"
        return f"undefined label '{name}'"
