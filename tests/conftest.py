# =============================================================================
# conftest.py - Shared Test Helpers
# =============================================================================

import pytest

from pasm.assembler import Assembler
from pasm.errors import AssemblyFailedError


@pytest.fixture
def assemble_words():
    """Assemble source and return the memory words."""
    def _assemble(source: str, memory_size: int = 32) -> list[int]:
        return Assembler(memory_size=memory_size).assemble_string(source, "test.asm")
    return _assemble


@pytest.fixture
def assembly_errors():
    """Assemble source that must fail and return its error kinds."""
    def _errors(source: str, memory_size: int = 32):
        asm = Assembler(memory_size=memory_size)
        with pytest.raises(AssemblyFailedError) as exc_info:
            asm.assemble_string(source, "test.asm")
        return [error.kind for error in exc_info.value.errors]
    return _errors
