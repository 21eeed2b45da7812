"""
Pumpkin CPU Instruction Set Definition
======================================

The Pumpkin CPU has sixteen instructions, each encoded in one 16-bit
memory word:

    15      12 11                       0
    +---------+--------------------------+
    | opcode  |   operand address        |
    +---------+--------------------------+

Every instruction except RETURN takes exactly one operand: a 12-bit memory
address. Literal values cannot be embedded in the instruction word; the
assembler stores them in a pool of memory words and encodes the address of
the pooled word instead.

Instruction Summary
-------------------
| Opcode | Mnemonic | Operand |
|--------|----------|---------|
| 0      | LOAD     | address |
| 1      | STORE    | address |
| 2      | ADD      | address |
| 3      | SUB      | address |
| 4      | OR       | address |
| 5      | AND      | address |
| 6      | XOR      | address |
| 7      | ROR      | address |
| 8      | SWAP     | address |
| 9      | IN       | address |
| 10     | OUT      | address |
| 11     | BR       | address |
| 12     | BNC      | address |
| 13     | BNZ      | address |
| 14     | CALL     | address |
| 15     | RETURN   | none    |

Directives
----------
ORG, DB, DW and NOP are assembler directives; DUP is a modifier used
inside DB/DW lines. NOP is synthesised as ``BR`` to the next address.
"""

from enum import IntEnum
from typing import Optional


class Opcode(IntEnum):
    """Instruction opcodes, in encoding order."""
    LOAD = 0
    STORE = 1
    ADD = 2
    SUB = 3
    OR = 4
    AND = 5
    XOR = 6
    ROR = 7
    SWAP = 8
    IN = 9
    OUT = 10
    BR = 11
    BNC = 12
    BNZ = 13
    CALL = 14
    RETURN = 15


# Mnemonics in opcode order
MNEMONICS: tuple[str, ...] = tuple(op.name for op in Opcode)

OPCODE_SHIFT = 12
OPERAND_MASK = 0x0FFF
WORD_MASK = 0xFFFF

# Instructions that do not take an operand
NO_OPERAND_INSTRUCTIONS = frozenset({Opcode.RETURN})

# Assembler directives (plus the DUP modifier)
DIRECTIVES = frozenset({"ORG", "DUP", "DW", "DB", "NOP"})

# Words that can never be used as labels
RESERVED_WORDS = frozenset(MNEMONICS) | DIRECTIVES


def get_opcode(word: str) -> Optional[Opcode]:
    """
    Look up an instruction mnemonic.

    Mnemonics are case-sensitive, matching the upper-case names above.

    Returns:
        The Opcode, or None if word is not an instruction
    """
    return Opcode.__members__.get(word)


def is_reserved_word(word: str) -> bool:
    """Check if word is a mnemonic or a directive keyword."""
    return word in RESERVED_WORDS


def encode_instruction(opcode: int, operand_address: int = 0) -> int:
    """
    Build an instruction word.

    The operand address is truncated to the 12-bit operand field.
    """
    return ((opcode << OPCODE_SHIFT) | (operand_address & OPERAND_MASK)) & WORD_MASK


def encode_nop(address: int) -> int:
    """
    Encode NOP placed at address: a branch to the following word.
    """
    return encode_instruction(Opcode.BR, address + 1)
