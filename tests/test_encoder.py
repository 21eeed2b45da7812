# =============================================================================
# test_encoder.py - Instruction Encoding Tests
# =============================================================================
# Tests for mnemonic lookup, operand forms and operand count checks.
# =============================================================================

import pytest

from pasm.assembler.opcodes import (
    MNEMONICS,
    Opcode,
    encode_instruction,
    encode_nop,
    get_opcode,
    is_reserved_word,
)
from pasm.errors import ErrorKind


def lines(*source_lines: str) -> str:
    return "\n".join(source_lines) + "\n"


# =============================================================================
# Opcode Table Tests
# =============================================================================

class TestOpcodes:
    """Test the instruction set table."""

    def test_mnemonic_order(self):
        assert MNEMONICS == (
            "LOAD", "STORE", "ADD", "SUB", "OR", "AND", "XOR", "ROR",
            "SWAP", "IN", "OUT", "BR", "BNC", "BNZ", "CALL", "RETURN",
        )

    def test_lookup_is_case_sensitive(self):
        assert get_opcode("CALL") == Opcode.CALL
        assert get_opcode("call") is None
        assert get_opcode("DB") is None

    def test_reserved_words(self):
        assert is_reserved_word("SWAP")
        assert is_reserved_word("DUP")
        assert not is_reserved_word("swap")

    def test_encode_masks_operand(self):
        assert encode_instruction(Opcode.STORE, 0x123) == 0x1123
        assert encode_instruction(Opcode.ADD, 0x1FFF) == 0x2FFF
        assert encode_instruction(Opcode.RETURN) == 0xF000

    def test_encode_nop(self):
        assert encode_nop(0) == 0xB001
        assert encode_nop(0xFFF) == 0xB000


# =============================================================================
# Operand Form Tests
# =============================================================================

class TestOperandForms:
    """Test #value, @label and bare label operands."""

    @pytest.mark.parametrize("mnemonic,opcode", [(name, i) for i, name in enumerate(MNEMONICS[:-1])])
    def test_every_mnemonic(self, assemble_words, mnemonic, opcode):
        words = assemble_words(f"TARGET  {mnemonic} TARGET\n")
        assert words[0] == opcode << 12

    def test_immediate_pooled_after_code(self, assemble_words):
        words = assemble_words(lines(
            "        LOAD #10",
            "        RETURN",
        ))
        assert words[:3] == [0x0002, 0xF000, 10]

    def test_immediate_deduplicated(self, assemble_words):
        words = assemble_words(lines(
            "        LOAD #5",
            "        ADD #5",
            "        RETURN",
        ))
        assert words[:5] == [0x0003, 0x2003, 0xF000, 5, 0]

    def test_immediate_hex_and_octal_share_slot(self, assemble_words):
        words = assemble_words(lines(
            "        LOAD #0x10",
            "        ADD #020",
            "        SUB #16",
        ))
        assert words[:4] == [0x0003, 0x2003, 0x3003, 16]

    def test_negative_immediate(self, assemble_words):
        words = assemble_words("        LOAD #-1\n")
        assert words[:2] == [0x0001, 0xFFFF]

    def test_address_of_label(self, assemble_words):
        words = assemble_words(lines(
            "        LOAD @DATA",
            "        RETURN",
            "DATA    DW 0x1234",
        ))
        assert words[:4] == [0x0003, 0xF000, 0x1234, 2]

    def test_address_of_shares_slot_with_equal_literal(self, assemble_words):
        words = assemble_words(lines(
            "        ORG 2",
            "DATA    LOAD #2",
            "        STORE @DATA",
        ))
        assert words[2:5] == [0x0004, 0x1004, 2]

    def test_bare_label(self, assemble_words):
        words = assemble_words(lines(
            "LOOP    ADD #1",
            "        BR LOOP",
        ))
        assert words[:3] == [0x2002, 0xB000, 1]

    def test_immediate_out_of_range(self, assembly_errors):
        assert assembly_errors("        LOAD #65536\n") == [ErrorKind.WORD_OUT_OF_RANGE]
        assert assembly_errors("        LOAD #-32769\n") == [ErrorKind.WORD_OUT_OF_RANGE]

    def test_bad_immediate(self, assembly_errors):
        assert assembly_errors("        LOAD #abc\n") == [ErrorKind.SYNTAX_ERROR]

    def test_unknown_address_of(self, assembly_errors):
        assert assembly_errors("        LOAD @NOWHERE\n") == [ErrorKind.SYNTAX_ERROR]

    def test_unknown_label(self, assembly_errors):
        assert assembly_errors("        BR NOWHERE\n") == [ErrorKind.SYNTAX_ERROR]


# =============================================================================
# Operand Count Tests
# =============================================================================

class TestOperandCount:
    """Test operand count validation."""

    def test_return_without_operand(self, assemble_words):
        assert assemble_words("        RETURN\n")[0] == 0xF000

    def test_return_with_operand(self, assembly_errors):
        assert assembly_errors("        RETURN #1\n") == [ErrorKind.UNEXPECTED_OPERAND]

    def test_missing_operand(self, assembly_errors):
        assert assembly_errors("        LOAD\n") == [ErrorKind.MISSING_OPERAND]

    def test_two_operands(self, assembly_errors):
        assert assembly_errors("        LOAD #1 #2\n") == [ErrorKind.MISSING_OPERAND]

    def test_unknown_mnemonic(self, assembly_errors):
        assert assembly_errors("        JUMP X\n") == [ErrorKind.SYNTAX_ERROR]

    def test_lower_case_mnemonic(self, assembly_errors):
        assert assembly_errors("        load #1\n") == [ErrorKind.SYNTAX_ERROR]
