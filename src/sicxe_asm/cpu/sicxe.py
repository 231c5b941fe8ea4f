"""
SIC/XE Instruction Set Definitions
==================================

Static machine description for the SIC/XE teaching architecture:

- OPCODE_TABLE: every mnemonic with its opcode and instruction format
- REGISTERS: register mnemonics and their numeric identifiers
- DIRECTIVES: assembler directives, which have no opcode

Instruction Formats
-------------------
| Format | Size | Layout                                   |
|--------|------|------------------------------------------|
| 1      | 1    | op(8)                                    |
| 2      | 2    | op(8) r1(4) r2(4)                        |
| 3      | 3    | op(6) n i x b p e disp(12)               |
| 4      | 4    | op(6) n i x b p e address(20)            |

Formats 3 and 4 share one opcode; the '+' prefix in source selects
format 4. Opcodes of format 3/4 instructions always have their two low
bits clear, because those bits carry the n and i flags.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InstructionFormat(Enum):
    """Instruction format as listed in the operation table."""
    FORMAT_1 = "1"
    FORMAT_2 = "2"
    FORMAT_3_4 = "3/4"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InstructionInfo:
    """
    Operation table entry.

    Attributes:
        mnemonic: Instruction mnemonic (uppercase)
        opcode: Opcode as two uppercase hex digits
        format: Instruction format
    """
    mnemonic: str
    opcode: str
    format: InstructionFormat

    @property
    def opcode_value(self) -> int:
        """Opcode as an integer."""
        return int(self.opcode, 16)

    def size(self, extended: bool = False) -> int:
        """Size in bytes; extended only matters for format 3/4."""
        if self.format == InstructionFormat.FORMAT_1:
            return 1
        if self.format == InstructionFormat.FORMAT_2:
            return 2
        return 4 if extended else 3


def _table(*rows: tuple[str, str, str]) -> dict[str, InstructionInfo]:
    return {
        mnemonic: InstructionInfo(mnemonic, opcode, InstructionFormat(fmt))
        for mnemonic, opcode, fmt in rows
    }


OPCODE_TABLE: dict[str, InstructionInfo] = _table(
    ("ADD", "18", "3/4"),
    ("ADDF", "58", "3/4"),
    ("ADDR", "90", "2"),
    ("AND", "40", "3/4"),
    ("CLEAR", "B4", "2"),
    ("COMP", "28", "3/4"),
    ("COMPF", "88", "3/4"),
    ("COMPR", "A0", "2"),
    ("DIV", "24", "3/4"),
    ("DIVF", "64", "3/4"),
    ("DIVR", "9C", "2"),
    ("FIX", "C4", "1"),
    ("FLOAT", "C0", "1"),
    ("HIO", "F4", "1"),
    ("J", "3C", "3/4"),
    ("JEQ", "30", "3/4"),
    ("JGT", "34", "3/4"),
    ("JLT", "38", "3/4"),
    ("JSUB", "48", "3/4"),
    ("LDA", "00", "3/4"),
    ("LDB", "68", "3/4"),
    ("LDCH", "50", "3/4"),
    ("LDF", "70", "3/4"),
    ("LDL", "08", "3/4"),
    ("LDS", "6C", "3/4"),
    ("LDT", "74", "3/4"),
    ("LDX", "04", "3/4"),
    ("LPS", "D0", "3/4"),
    ("MUL", "20", "3/4"),
    ("MULF", "60", "3/4"),
    ("MULR", "98", "2"),
    ("NORM", "C8", "1"),
    ("OR", "44", "3/4"),
    ("RD", "D8", "3/4"),
    ("RMO", "AC", "2"),
    ("RSUB", "4C", "3/4"),
    ("SHIFTL", "A4", "2"),
    ("SHIFTR", "A8", "2"),
    ("SIO", "F0", "1"),
    ("SSK", "EC", "3/4"),
    ("STA", "0C", "3/4"),
    ("STB", "78", "3/4"),
    ("STCH", "54", "3/4"),
    ("STF", "80", "3/4"),
    ("STI", "D4", "3/4"),
    ("STL", "14", "3/4"),
    ("STS", "7C", "3/4"),
    ("STSW", "E8", "3/4"),
    ("STT", "84", "3/4"),
    ("STX", "10", "3/4"),
    ("SUB", "1C", "3/4"),
    ("SUBF", "5C", "3/4"),
    ("SUBR", "94", "2"),
    ("SVC", "B0", "2"),
    ("TD", "E0", "3/4"),
    ("TIO", "F8", "1"),
    ("TIX", "2C", "3/4"),
    ("TIXR", "B8", "2"),
    ("WD", "DC", "3/4"),
)

MNEMONICS = frozenset(OPCODE_TABLE)

REGISTERS: dict[str, int] = {
    "A": 0,
    "X": 1,
    "L": 2,
    "B": 3,
    "S": 4,
    "T": 5,
    "F": 6,
    "PC": 8,
    "SW": 9,
}

# Format 2 instructions whose second (or only) operand is a count, not a register
SHIFT_INSTRUCTIONS = frozenset({"SHIFTL", "SHIFTR"})
COUNT_ONLY_INSTRUCTIONS = frozenset({"SVC"})

# Format 3/4 instructions that never take an operand
NO_OPERAND_INSTRUCTIONS = frozenset({"RSUB"})

DIRECTIVES = frozenset({
    "START", "END",
    "BYTE", "WORD",
    "RESB", "RESW",
    "BASE", "NOBASE",
})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """Return the operation table entry for a mnemonic, or None."""
    return OPCODE_TABLE.get(mnemonic.upper())


def is_valid_instruction(mnemonic: str) -> bool:
    """Return True if the mnemonic is a machine instruction."""
    return mnemonic.upper() in OPCODE_TABLE


def is_directive(mnemonic: str) -> bool:
    """Return True if the mnemonic is an assembler directive."""
    return mnemonic.upper() in DIRECTIVES


def get_register_number(name: str) -> Optional[int]:
    """Return the numeric identifier of a register mnemonic, or None."""
    return REGISTERS.get(name.upper())


def takes_no_operand(mnemonic: str) -> bool:
    """
    Return True for instructions whose operand field is always empty.

    Anything written after such a mnemonic is a comment.
    """
    info = get_instruction_info(mnemonic)
    if info is None:
        return mnemonic.upper() == "NOBASE"
    return (info.format == InstructionFormat.FORMAT_1
            or info.mnemonic in NO_OPERAND_INSTRUCTIONS)
