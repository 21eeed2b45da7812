"""
PASM Immediate Pool
===================

Instruction words have no room for a literal value: the low 12 bits
always hold an address. ``LOAD #10`` is therefore assembled as a LOAD from
a memory word that holds 10. Those words form the immediate pool, placed
directly after the program (starting at the end address measured in
pass 1, which stays fixed) and filled during pass 2.

Each distinct value is pooled once. ``ADD #1`` in ten places uses one
pool word. ``@LABEL`` operands pool the label's address the same way.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from pasm.assembler.memory import MemoryImage
from pasm.errors import (
    CapacityError,
    ErrorCollector,
    ErrorKind,
    SourceLocation,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Immediate:
    """
    A pooled value.

    Attributes:
        value: 16-bit value stored in memory
        address: Memory address of the pool word
    """
    value: int
    address: int


class ImmediatePool:
    """
    Value-deduplicating pool of literal words.

    Usage:
        pool = ImmediatePool(memory, base_address=3, errors=collector)
        address = pool.resolve(10)     # 3, memory[3] = 10
        address = pool.resolve(10)     # 3 again
    """

    def __init__(
        self,
        memory: MemoryImage,
        base_address: int,
        errors: ErrorCollector,
        capacity: int = 500,
    ):
        self._memory = memory
        self._errors = errors
        self._entries: list[Immediate] = []
        self.base_address = base_address
        self.next_address = base_address
        self.capacity = capacity

    def resolve(
        self,
        value: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Return the pool address holding value, adding it if needed.

        A full pool records TOO_MANY_IMMEDIATES and returns address 0
        without aborting the statement. A new entry outside the memory
        image is not written; the run reports the oversize program once,
        at the end.
        """
        for entry in self._entries:
            if entry.value == value:
                return entry.address

        if len(self._entries) >= self.capacity:
            error = CapacityError(
                "too many immediates",
                location,
                hint=f"a program may use at most {self.capacity} distinct immediate values",
                source_line=source_line,
                kind=ErrorKind.TOO_MANY_IMMEDIATES,
            )
            logger.debug(str(error))
            self._errors.add(error)
            return 0

        address = self.next_address
        self._entries.append(Immediate(value, address))
        self._memory.write(address, value)
        self.next_address += 1
        return address

    def find(self, value: int) -> Optional[int]:
        """Return the pool address of value without adding it."""
        for entry in self._entries:
            if entry.value == value:
                return entry.address
        return None

    def entries(self) -> list[Immediate]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Immediate]:
        return iter(list(self._entries))
