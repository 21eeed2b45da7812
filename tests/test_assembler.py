# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the two-pass assembler, from source text to memory
# image.
#
# Test coverage includes:
#   - Complete program assembly
#   - Label and immediate bookkeeping across both passes
#   - Error collection, reporting format and limits
#   - File input and symbol output
# =============================================================================

import logging

import pytest

from pasm import Assembler, AssemblerConfig, assemble, assemble_file
from pasm.assembler.codegen import CodeGenerator
from pasm.errors import (
    AssemblyFailedError,
    ConfigError,
    ErrorKind,
    OutputError,
)


def lines(*source_lines: str) -> str:
    return "\n".join(source_lines) + "\n"


SCENARIO = lines(
    "START   LOAD    #10",
    "        STORE   @START",
    "        RETURN",
)


# =============================================================================
# Full Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test complete programs."""

    def test_literal_and_label_operands(self):
        """LOAD #10 / STORE @START / RETURN in a 32-word memory."""
        asm = Assembler(memory_size=32)
        words = asm.assemble_string(SCENARIO)
        assert len(words) == 32
        assert words[:5] == [0x0003, 0x1004, 0xF000, 10, 0]
        assert words[5:] == [0] * 27
        assert [(i.value, i.address) for i in asm.get_immediates()] == [(10, 3), (0, 4)]
        assert asm.get_symbols() == {"START": 0}
        assert asm.get_end_address() == 3
        assert asm.words_used() == 5

    def test_empty_source(self):
        asm = Assembler(memory_size=32)
        assert asm.assemble_string("") == [0] * 32
        assert asm.words_used() == 0

    def test_comments_and_blank_lines(self):
        words = assemble(lines(
            "; counter demo",
            "",
            "START   LOAD COUNT   ; fetch",
            "        ADD #1",
            "        STORE COUNT",
            "        BR START",
            "COUNT   DW 0",
        ), memory_size=32)
        assert words[:6] == [0x0004, 0x2005, 0x1004, 0xB000, 0, 1]

    def test_label_alone_on_line(self):
        asm = Assembler(memory_size=32)
        words = asm.assemble_string(lines(
            "        RETURN",
            "HERE",
            "        BR HERE",
        ))
        assert asm.get_symbols() == {"HERE": 1}
        assert words[1] == 0xB001

    def test_labels_match_emitted_addresses(self):
        """Labels declared in pass 1 point at the words written in pass 2."""
        asm = Assembler(memory_size=64)
        words = asm.assemble_string(lines(
            "        BR MAIN",
            'MSG     DB "Hello",0',
            "TABLE   DW 1,2 ",
            "        NOP",
            "        ORG 20",
            "BUF     DB 0 DUP 7",
            "MAIN    LOAD @MSG",
            "        CALL SUB1",
            "        RETURN",
            "SUB1    RETURN",
        ))
        symbols = asm.get_symbols()
        assert symbols == {"MSG": 1, "TABLE": 4, "BUF": 20, "MAIN": 24, "SUB1": 27}
        assert words[0] == 0xB000 | symbols["MAIN"]
        assert words[symbols["MSG"]] == 0x4865
        assert words[symbols["TABLE"]:symbols["TABLE"] + 2] == [1, 2]
        assert words[6] == 0xB007
        assert words[symbols["MAIN"] + 1] == 0xE000 | symbols["SUB1"]
        assert words[28] == symbols["MSG"]

    def test_idempotent(self):
        asm = Assembler(memory_size=32)
        first = asm.assemble_string(SCENARIO)
        second = asm.assemble_string(SCENARIO)
        assert first == second
        assert len(asm.get_immediates()) == 2

    def test_assemble_with_output(self, tmp_path):
        output = tmp_path / "demo.mif"
        words = Assembler(memory_size=32).assemble(SCENARIO, output_path=output)
        assert words[0] == 0x0003
        assert "000 : 0003 ;" in output.read_text()

    def test_default_memory_size(self):
        assert len(assemble("        RETURN\n")) == 2048


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrorHandling:
    """Test error collection and reporting."""

    def test_reserved_word_as_label(self):
        asm = Assembler(memory_size=32)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string("LOAD DB 1\n")
        errors = exc_info.value.errors
        assert len(errors) == 1
        assert errors[0].kind == ErrorKind.RESERVED_WORD_AS_LABEL
        assert asm.get_symbols() == {}

    def test_duplicate_label(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble(lines("A       DW 1", "A       DW 2"), memory_size=32)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.DUPLICATE_LABEL]

    def test_label_too_long(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble("L" * 65 + " RETURN\n", memory_size=32)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.LABEL_TOO_LONG]

    def test_too_many_words(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble("X       DB 0 DUP 2 3\n", memory_size=32)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.TOO_MANY_WORDS]

    def test_all_pass_one_errors_collected(self):
        asm = Assembler(memory_size=32)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string(lines(
                "        ORG 99",
                "        DB 300",
                "        RETURN",
                "        FOO",
            ))
        kinds = [e.kind for e in exc_info.value.errors]
        assert kinds == [
            ErrorKind.ORG_OUT_OF_RANGE,
            ErrorKind.BYTE_OUT_OF_RANGE,
            ErrorKind.SYNTAX_ERROR,
        ]
        assert asm.has_errors()
        assert asm.get_words() == []

    def test_pass_two_skipped_after_pass_one_errors(self):
        """Unresolved labels are not reported when pass 1 already failed."""
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble(lines("        DW MISSING", "        FOO"), memory_size=32)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.SYNTAX_ERROR]

    def test_dup_exceeds_maximum_leaves_memory_untouched(self):
        codegen = CodeGenerator(AssemblerConfig(memory_size=32))
        with pytest.raises(AssemblyFailedError) as exc_info:
            codegen.generate("        DB 1 DUP 300\n")
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.DUP_EXCEEDS_MAXIMUM]
        assert codegen.get_memory().words() == [0] * 32

    def test_program_too_large_reported_once(self):
        source = "".join(f"        ADD #{n}\n" for n in range(1, 32))
        asm = Assembler(memory_size=32)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string(source)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.PROGRAM_TOO_LARGE]
        assert asm.words_used() == 62

    def test_code_past_end_of_memory(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble(lines("        ORG 31", "        RETURN", "        RETURN"), memory_size=32)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.PROGRAM_TOO_LARGE]

    def test_program_fills_memory_exactly(self):
        source = "".join(f"        ADD #{n}\n" for n in range(1, 17))
        words = assemble(source, memory_size=32)
        assert words[16:] == list(range(1, 17))

    def test_too_many_labels(self):
        config = AssemblerConfig(memory_size=32, max_labels=2)
        source = lines("A       RETURN", "B       RETURN", "C       RETURN")
        with pytest.raises(AssemblyFailedError) as exc_info:
            Assembler(config=config).assemble_string(source)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.TOO_MANY_LABELS]

    def test_too_many_immediates(self):
        config = AssemblerConfig(memory_size=32, max_immediates=2)
        source = lines("        LOAD #1", "        LOAD #2", "        LOAD #3", "        LOAD #1")
        with pytest.raises(AssemblyFailedError) as exc_info:
            Assembler(config=config).assemble_string(source)
        assert [e.kind for e in exc_info.value.errors] == [ErrorKind.TOO_MANY_IMMEDIATES]

    def test_error_limit_stops_run(self):
        config = AssemblerConfig(memory_size=32, max_errors=2)
        asm = Assembler(config=config)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string("        FOO\n" * 5)
        assert len(exc_info.value.errors) == 2
        assert asm.get_errors().warning_count() == 1

    def test_error_message_format(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            Assembler(memory_size=32).assemble_string(
                lines("        RETURN", "        ORG 0"), "demo.asm"
            )
        message = str(exc_info.value.errors[0])
        assert message.startswith("demo.asm:2:9: error: ORG precedes current address")
        assert "        ORG 0" in message
        assert "hint:" in message
        assert "1 error, 0 warnings" in exc_info.value.report

    def test_undefined_label_hint(self):
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble(lines("COUNTER DW 0", "        LOAD COUNTR"), memory_size=32)
        assert "did you mean 'COUNTER'?" in str(exc_info.value.errors[0])

    def test_invalid_memory_size(self):
        for size in (16, 100, 8192):
            with pytest.raises(ConfigError):
                Assembler(memory_size=size)

    def test_write_before_assembly(self, tmp_path):
        with pytest.raises(OutputError):
            Assembler().write_output(tmp_path / "out.vhd")

    def test_logging(self, caplog):
        with caplog.at_level(logging.INFO, logger="pasm"):
            Assembler(memory_size=32).assemble_string(SCENARIO)
        assert "Pass 1" in caplog.messages
        assert "Pass 2" in caplog.messages
        assert "Assembly successful, 5 memory words used" in caplog.messages


# =============================================================================
# File Tests
# =============================================================================

class TestFiles:
    """Test file input and symbol output."""

    def test_assemble_file(self, tmp_path):
        source = tmp_path / "demo.asm"
        source.write_text(SCENARIO)
        assert assemble_file(source, memory_size=32)[:3] == [0x0003, 0x1004, 0xF000]

    def test_error_location_uses_file_name(self, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("        FOO\n")
        with pytest.raises(AssemblyFailedError) as exc_info:
            Assembler(memory_size=32).assemble_file(source)
        assert exc_info.value.errors[0].location.filename == "bad.asm"

    def test_latin1_byte_inside_string(self, tmp_path):
        """Byte 0x85 is string data, not a line break."""
        source = tmp_path / "text.asm"
        source.write_bytes(b'        DB "a\x85b",0\n        RETURN\n')
        words = assemble_file(source, memory_size=32)
        assert words[:3] == [0x6185, 0x6200, 0xF000]

    def test_form_feed_is_whitespace(self):
        """A form feed separates words and does not start a new line."""
        with pytest.raises(AssemblyFailedError) as exc_info:
            assemble("        RETURN\x0cX\n        FOO\n", memory_size=32)
        errors = exc_info.value.errors
        assert [e.kind for e in errors] == [ErrorKind.SYNTAX_ERROR]
        assert errors[0].location.line == 2

    def test_crlf_line_endings(self):
        asm = Assembler(memory_size=32)
        words = asm.assemble_string("START   LOAD #1\r\n        BR START\r\n")
        assert words[:3] == [0x0002, 0xB000, 1]
        assert asm.get_symbols() == {"START": 0}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Assembler().assemble_file(tmp_path / "missing.asm")

    def test_write_symbols_sorted_by_address(self, tmp_path):
        asm = Assembler(memory_size=32)
        asm.assemble_string(lines(
            "        BR MAIN",
            "DATA    DW 5",
            "MAIN    LOAD DATA",
        ))
        path = tmp_path / "demo.sym"
        asm.write_symbols(path)
        assert path.read_text() == "001  DATA\n002  MAIN\n"
