"""
PASM Symbol Table
=================

Labels bind a name to a memory address. They are declared during pass 1,
at most once per name, and only looked up during pass 2.

Label Rules
-----------
- The label must start in column 1 (no trailing colon)
- First character alphabetic, remaining characters alphanumeric or '_'
- Case-sensitive: ``Loop`` and ``LOOP`` are different labels
- At most 64 characters
- Mnemonics and directive keywords (ORG, DUP, DW, DB, NOP) are reserved
"""

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Iterator, Optional
import string

from pasm.assembler.opcodes import is_reserved_word
from pasm.errors import (
    CapacityError,
    DuplicateSymbolError,
    ErrorKind,
    LabelTooLongError,
    ReservedWordError,
    SourceLocation,
    UndefinedSymbolError,
)


# Characters that can start a label
LABEL_START = string.ascii_letters

# Characters that can continue a label
LABEL_CHARS = string.ascii_letters + string.digits + "_"


def looks_like_label(word: str) -> bool:
    """
    Check whether a word has the shape of a label name.

    Length is not checked here; SymbolTable.declare reports long names.
    """
    if not word or word[0] not in LABEL_START:
        return False
    return all(char in LABEL_CHARS for char in word[1:])


@dataclass(frozen=True)
class Label:
    """
    Symbol table entry.

    Attributes:
        name: Label name, case preserved
        address: Memory address the label refers to
        location: Where the label was declared
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Ordered label -> address table for one assembly run.

    Usage:
        table = SymbolTable(max_labels=500)
        table.declare("START", 0, location)
        address = table.lookup("START")
    """

    def __init__(self, max_labels: int = 500, max_name_length: int = 64):
        self.max_labels = max_labels
        self.max_name_length = max_name_length
        self._labels: dict[str, Label] = {}

    def declare(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Label:
        """
        Add a new label.

        Raises:
            ReservedWordError: name is a mnemonic or directive keyword
            LabelTooLongError: name exceeds max_name_length
            DuplicateSymbolError: name was already declared
            CapacityError: the table already holds max_labels labels
        """
        if is_reserved_word(name):
            raise ReservedWordError(name, location, source_line=source_line)

        if len(name) > self.max_name_length:
            raise LabelTooLongError(
                name, self.max_name_length, location, source_line=source_line
            )

        existing = self._labels.get(name)
        if existing is not None:
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        if len(self._labels) >= self.max_labels:
            raise CapacityError(
                "too many labels",
                location,
                hint=f"a program may declare at most {self.max_labels} labels",
                source_line=source_line,
                kind=ErrorKind.TOO_MANY_LABELS,
            )

        label = Label(name, address, location)
        self._labels[name] = label
        return label

    def get(self, name: str) -> Optional[int]:
        """Return the address of name, or None if it is not declared."""
        label = self._labels.get(name)
        return label.address if label is not None else None

    def lookup(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ) -> int:
        """
        Return the address of a declared label.

        Raises:
            UndefinedSymbolError: name was never declared
        """
        address = self.get(name)
        if address is None:
            raise UndefinedSymbolError(
                name,
                location=location,
                source_line=source_line,
                similar_symbols=self.similar(name),
                kind=kind,
            )
        return address

    def similar(self, name: str) -> list[str]:
        """Return declared labels that look like name (for typo hints)."""
        return get_close_matches(name, self._labels.keys(), n=3)

    def clear(self) -> None:
        self._labels.clear()

    def as_dict(self) -> dict[str, int]:
        """Return a name -> address mapping in declaration order."""
        return {name: label.address for name, label in self._labels.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels.values())
