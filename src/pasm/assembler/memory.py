"""
PASM Memory Image
=================

The memory image is the assembler's output: one 16-bit word per target
address, 0 to memory_size - 1. It is zeroed at the start of pass 2;
addresses that nothing writes stay zero.
"""

from typing import Iterator

from pasm.assembler.opcodes import WORD_MASK


class MemoryImage:
    """
    Flat array of 16-bit words indexed by address.

    Writes outside the image are ignored; the code generator detects a
    program that does not fit and reports it once at the end of the run.
    """

    def __init__(self, size: int):
        self.size = size
        self._words = [0] * size

    def clear(self) -> None:
        """Zero every word."""
        self._words = [0] * self.size

    def contains(self, address: int) -> bool:
        return 0 <= address < self.size

    def write(self, address: int, value: int) -> bool:
        """
        Store value at address.

        Returns:
            True if written, False if address lies outside the image
        """
        if not self.contains(address):
            return False
        self._words[address] = value & WORD_MASK
        return True

    def write_block(self, address: int, values: list[int]) -> None:
        """Store consecutive words starting at address."""
        for offset, value in enumerate(values):
            self.write(address + offset, value)

    def read(self, address: int) -> int:
        """
        Return the word at address.

        Raises:
            IndexError: If address is outside the image
        """
        if not self.contains(address):
            raise IndexError(f"address {address} outside memory of {self.size} words")
        return self._words[address]

    def words(self) -> list[int]:
        """Return a copy of the whole image."""
        return list(self._words)

    def __getitem__(self, address: int) -> int:
        return self.read(address)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._words))
