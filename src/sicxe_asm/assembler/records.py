"""
SIC/XE Object Program Records
=============================

This module defines the records of a SIC/XE object program and the
RecordAssembler that packs object code into them.

Object Program Format
---------------------
One record per line, fixed-width hexadecimal fields, uppercase:

```
Record        Col   Field
------------  ----  ------------------------------------------
Header        1     H
              2-7   Program name (left-justified, blank padded, cut at 6)
              8-13  Start address
              14-19 Program length
Text          1     T
              2-7   Start address of this record
              8-9   Length of object code in bytes
              10-69 Object code (at most 30 bytes)
Modification  1     M
              2-7   Address of the field to patch
              8-9   Length of the field in half-bytes
End           1     E
              2-7   Address of the first executable instruction
```

Records are emitted as: one Header, the Text records in address order,
all Modification records in the order they were found, one End record.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union


logger = logging.getLogger(__name__)


# =============================================================================
# Record Types
# =============================================================================

@dataclass(frozen=True)
class HeaderRecord:
    """H record: program name (first 6 characters), start address and length."""
    program_name: str
    start_address: int
    length: int

    def render(self) -> str:
        return f"H{self.program_name[:6]:<6s}{self.start_address:06X}{self.length:06X}"


@dataclass(frozen=True)
class TextRecord:
    """
    T record: a run of object code loaded at consecutive addresses.

    Attributes:
        start_address: Address of the first byte
        code: Object code as uppercase hex digits (at most 60)
    """
    start_address: int
    code: str

    @property
    def length(self) -> int:
        """Length in bytes."""
        return len(self.code) // 2

    @property
    def end_address(self) -> int:
        """Address just past the last byte."""
        return self.start_address + self.length

    def render(self) -> str:
        return f"T{self.start_address:06X}{self.length:02X}{self.code}"


@dataclass(frozen=True)
class ModificationRecord:
    """
    M record: an address field the loader must relocate.

    Attributes:
        address: Address of the byte holding the field's first half-byte
        length_half_bytes: Field width in half-bytes (5 for format 4)
    """
    address: int
    length_half_bytes: int = 5

    def render(self) -> str:
        return f"M{self.address:06X}{self.length_half_bytes:02X}"


@dataclass(frozen=True)
class EndRecord:
    """E record: where execution begins (None when there is no instruction)."""
    first_executable_address: Optional[int] = None

    def render(self) -> str:
        if self.first_executable_address is None:
            return "E"
        return f"E{self.first_executable_address:06X}"


Record = Union[HeaderRecord, TextRecord, ModificationRecord, EndRecord]


def render_records(records: list[Record]) -> str:
    """Render records as object program text, one per line."""
    return "".join(f"{record.render()}\n" for record in records)


# =============================================================================
# Record Assembler
# =============================================================================

class RecordAssembler:
    """
    Packs object code into Text records and orders all records.

    Object code is fed in address order through emit(). The open Text
    record is closed and a new one started only when the next code does
    not fit in the remaining capacity, or when it starts 0x1000 bytes or
    more past the last emitted byte. Smaller gaps (a few reserved words)
    stay inside the open record.

    Usage:
        records = RecordAssembler()
        records.set_header("COPY", 0x1000, 0x107A)
        records.emit(0x1000, "17202D")
        records.add_modification(0x1007)
        program = records.finish(first_executable_address=0x1000)
    """

    MAX_TEXT_BYTES = 30
    MAX_GAP = 0x1000

    def __init__(self):
        self._header: Optional[HeaderRecord] = None
        self._text_records: list[TextRecord] = []
        self._modifications: list[ModificationRecord] = []
        self._text_start: Optional[int] = None
        self._text_code = ""
        self._last_end: Optional[int] = None

    # =========================================================================
    # Header and Modification Records
    # =========================================================================

    def set_header(self, program_name: str, start_address: int, length: int) -> None:
        """Record the Header record (emitted when START is encoded)."""
        self._header = HeaderRecord(program_name, start_address, length)

    @property
    def header(self) -> Optional[HeaderRecord]:
        return self._header

    def add_modification(self, address: int, length_half_bytes: int = 5) -> None:
        """Queue a Modification record; they are emitted after all Text records."""
        self._modifications.append(ModificationRecord(address, length_half_bytes))

    # =========================================================================
    # Text Records
    # =========================================================================

    @property
    def is_open(self) -> bool:
        """True while a Text record is accepting code."""
        return self._text_start is not None

    @property
    def next_address(self) -> Optional[int]:
        """Address just past the last byte emitted into the open Text record."""
        if self._text_start is None:
            return None
        return self._last_end

    def open(self, address: int) -> None:
        """Flush any open Text record and start a new one at address."""
        self.flush()
        self._text_start = address
        self._last_end = address

    def _fits(self, code: str) -> bool:
        return len(self._text_code) + len(code) <= self.MAX_TEXT_BYTES * 2

    def add(self, code: str) -> bool:
        """
        Append object code to the open Text record.

        Returns:
            False (leaving the record unchanged) if no record is open or
            the code would exceed the record's 30-byte capacity
        """
        if self._text_start is None or not self._fits(code):
            return False
        self._text_code += code
        self._last_end += len(code) // 2
        return True

    def flush(self) -> None:
        """Close the open Text record, keeping it only if it holds code."""
        if self._text_start is not None and self._text_code:
            self._text_records.append(TextRecord(self._text_start, self._text_code))
        self._text_start = None
        self._text_code = ""
        self._last_end = None

    def emit(self, address: int, code: str) -> None:
        """
        Place object code at an address, opening Text records as needed.

        Code longer than one record's capacity is split over consecutive
        records.
        """
        if not code:
            return
        if (self.is_open and self._fits(code)
                and 0 <= address - self._last_end < self.MAX_GAP):
            self._last_end = address
            self.add(code)
            return

        capacity = self.MAX_TEXT_BYTES * 2
        while len(code) > capacity:
            self.open(address)
            self.add(code[:capacity])
            code = code[capacity:]
            address += self.MAX_TEXT_BYTES
        self.open(address)
        self.add(code)

    # =========================================================================
    # Completion
    # =========================================================================

    def finish(self, first_executable_address: Optional[int] = None) -> list[Record]:
        """
        Close the open Text record and return the records in emission order.

        A program without a START directive gets an unnamed Header at
        address 0 whose length covers the emitted Text records.
        """
        self.flush()

        header = self._header
        if header is None:
            end = max((t.end_address for t in self._text_records), default=0)
            header = HeaderRecord("", 0, end)

        records: list[Record] = [header]
        records.extend(self._text_records)
        records.extend(self._modifications)
        records.append(EndRecord(first_executable_address))

        logger.debug(
            f"records: {len(self._text_records)} text, "
            f"{len(self._modifications)} modification"
        )
        return records
