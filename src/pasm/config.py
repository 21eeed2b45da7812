"""
PASM Assembler Configuration
============================

Limits and target settings for one assembly run. The defaults reproduce
the classic PASM tool: a 2048-word target memory, 500 labels, 500 pooled
immediates, 64-character label names, five words per source line and a
256-entry DB/DW buffer.

The target memory size must be a power of two between 32 and 4096 words
because the CPU has a 12-bit address bus.
"""

from dataclasses import dataclass

from pasm.errors import ConfigError


MIN_MEMORY_SIZE = 32
MAX_MEMORY_SIZE = 4096
DEFAULT_MEMORY_SIZE = 2048


def is_valid_memory_size(size: int) -> bool:
    """Return True if size is a power of two within [32, 4096]."""
    return (
        MIN_MEMORY_SIZE <= size <= MAX_MEMORY_SIZE
        and size & (size - 1) == 0
    )


@dataclass
class AssemblerConfig:
    """
    Configuration for a single assembly run.

    Attributes:
        memory_size: Target memory size in 16-bit words
        max_labels: Maximum number of labels in the symbol table
        max_immediates: Maximum number of pooled immediate values
        max_label_length: Maximum label name length in characters
        max_words_per_line: Maximum whitespace-delimited words per line
        directive_buffer_size: Maximum bytes/words one DB or DW may produce
        max_errors: Stop the run after this many errors
    """

    memory_size: int = DEFAULT_MEMORY_SIZE
    max_labels: int = 500
    max_immediates: int = 500
    max_label_length: int = 64
    max_words_per_line: int = 5   # eg: LABEL DB 0 DUP 125
    directive_buffer_size: int = 256
    max_errors: int = 100

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigError: If the memory size is not a power of two in range
        """
        if not is_valid_memory_size(self.memory_size):
            raise ConfigError(
                f"invalid memory size {self.memory_size}: must be a power of two "
                f"in the range {MIN_MEMORY_SIZE} to {MAX_MEMORY_SIZE}"
            )
        if self.max_errors < 1:
            raise ConfigError("max_errors must be at least 1")
