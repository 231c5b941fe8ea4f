"""
SIC/XE Assembler - Pass 1
=========================

Pass 1 walks the statement stream once and:

- assigns every statement its address (the location counter value before
  the statement's own size is added)
- binds labels to those addresses in the symbol table
- computes the size of every instruction and storage directive
- records the start address, the program length and the address of the
  first machine instruction

Statement Sizes
---------------
| Statement        | Size                          |
|------------------|-------------------------------|
| START n          | resets the counter to n (hex) |
| END, BASE, NOBASE| 0                             |
| WORD n           | 3                             |
| RESW n           | 3 * n                         |
| RESB n           | n                             |
| BYTE C'text'     | len(text)                     |
| BYTE X'hex'      | len(hex) / 2                  |
| format 1/2/3/4   | 1 / 2 / 3 / 4                 |

A statement that fails (duplicate label, unknown operation, bad directive
operand) is skipped entirely: it gets no address, binds no label and does
not advance the location counter. The error is collected and pass 1 goes
on with the next line.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from sicxe_asm.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    ErrorCollector,
    UnknownOperationError,
)
from sicxe_asm.assembler.parser import Statement
from sicxe_asm.assembler.symbols import SymbolTable, find_similar
from sicxe_asm.cpu import (
    DIRECTIVES,
    MNEMONICS,
    InstructionFormat,
    get_instruction_info,
    is_directive,
    is_valid_instruction,
)


logger = logging.getLogger(__name__)

_BYTE_CONSTANT_RE = re.compile(r"([CcXx])'([^']*)'")
_HEX_DIGITS = frozenset("0123456789ABCDEFabcdef")


# =============================================================================
# Pass 1 Result
# =============================================================================

@dataclass
class Pass1Result:
    """
    Everything pass 2 needs from pass 1.

    Attributes:
        statements: Located statements in source order (comments and
                    skipped statements are not included)
        symbols: Frozen symbol table
        start_address: Operand of START (0 if there is none)
        program_length: Final location counter minus start address
        first_executable_address: Address of the first machine instruction,
                                  or None if the program has none
        program_name: Label of the START statement ("" if none)
        has_start: True when the source contained a START directive
    """
    statements: list[Statement] = field(default_factory=list)
    symbols: SymbolTable = field(default_factory=SymbolTable)
    start_address: int = 0
    program_length: int = 0
    first_executable_address: Optional[int] = None
    program_name: str = ""
    has_start: bool = False

    @property
    def end_address(self) -> int:
        """Final location counter value."""
        return self.start_address + self.program_length


# =============================================================================
# Directive Operand Helpers (shared with pass 2)
# =============================================================================

def byte_constant_hex(stmt: Statement) -> str:
    """
    Decode the operand of a BYTE directive into object code.

    C'EOF' becomes "454F46" (one byte per character);
    X'F1' becomes "F1" (digits copied verbatim).

    Raises:
        DirectiveError: If the operand is not a well-formed literal
    """
    operand = stmt.operand1
    if operand is None:
        raise DirectiveError(
            "BYTE requires a C'...' or X'...' operand",
            location=stmt.source,
            source_line=stmt.text,
        )

    match = _BYTE_CONSTANT_RE.fullmatch(operand)
    if match is None:
        raise DirectiveError(
            f"malformed BYTE operand '{operand}'",
            location=stmt.source,
            hint="use C'characters' or X'hexdigits'",
            source_line=stmt.text,
        )

    kind, text = match.group(1).upper(), match.group(2)
    if kind == "C":
        if any(ord(ch) > 0xFF for ch in text):
            raise DirectiveError(
                f"character constant '{text}' contains non 8-bit characters",
                location=stmt.source,
                source_line=stmt.text,
            )
        return "".join(f"{ord(ch):02X}" for ch in text)

    if len(text) % 2 or not set(text) <= _HEX_DIGITS:
        raise DirectiveError(
            f"hex constant '{text}' must be an even number of hex digits",
            location=stmt.source,
            source_line=stmt.text,
        )
    return text.upper()


def parse_count(stmt: Statement, directive: str) -> int:
    """
    Parse the decimal count operand of RESW/RESB.

    Raises:
        DirectiveError: If the operand is missing, not numeric or negative
    """
    try:
        value = int(stmt.operand1 or "")
    except ValueError:
        raise DirectiveError(
            f"{directive} requires a decimal count, got '{stmt.operand1 or ''}'",
            location=stmt.source,
            source_line=stmt.text,
        ) from None
    if value < 0:
        raise DirectiveError(
            f"{directive} count cannot be negative ({value})",
            location=stmt.source,
            source_line=stmt.text,
        )
    return value


def parse_start_address(stmt: Statement) -> int:
    """
    Parse the START operand, which is written in hexadecimal.

    Raises:
        DirectiveError: If the operand is not a hex number
    """
    if stmt.operand1 is None:
        return 0
    try:
        value = int(stmt.operand1, 16)
    except ValueError:
        raise DirectiveError(
            f"START address '{stmt.operand1}' is not a hexadecimal number",
            location=stmt.source,
            source_line=stmt.text,
        ) from None
    if value < 0:
        raise DirectiveError(
            f"START address cannot be negative ({stmt.operand1})",
            location=stmt.source,
            source_line=stmt.text,
        )
    return value


# =============================================================================
# Pass 1 Engine
# =============================================================================

class SymbolCollector:
    """
    Pass 1 of the assembler.

    Usage:
        errors = ErrorCollector()
        result = SymbolCollector(errors).run(statements)
        result.symbols.lookup("FIRST")
    """

    def __init__(self, errors: Optional[ErrorCollector] = None):
        self._errors = errors if errors is not None else ErrorCollector()
        self._locctr = 0

    @property
    def errors(self) -> ErrorCollector:
        return self._errors

    def run(self, statements: list[Statement]) -> Pass1Result:
        """
        Locate every statement and build the symbol table.

        Args:
            statements: Parsed statements in source order

        Returns:
            Pass1Result with a frozen symbol table
        """
        result = Pass1Result()
        self._locctr = 0

        for stmt in statements:
            if stmt.is_comment:
                continue
            try:
                address, size = self._measure(stmt)
                if stmt.label:
                    result.symbols.define(
                        stmt.label, address, stmt.source, source_line=stmt.text
                    )
            except AssemblerError as e:
                logger.info(f"pass 1: skipping line {stmt.source.line}: {e.message}")
                self._errors.add(e)
                continue

            result.statements.append(stmt.with_address(address))
            self._locctr = address + size

            if stmt.operation == "START":
                result.start_address = address
                result.program_name = stmt.label or ""
                result.has_start = True
            elif is_valid_instruction(stmt.operation) and result.first_executable_address is None:
                result.first_executable_address = address

        result.program_length = self._locctr - result.start_address
        result.symbols.freeze()

        logger.debug(
            f"pass 1: {len(result.statements)} statements, {len(result.symbols)} symbols, "
            f"start {result.start_address:06X}, length {result.program_length:06X}"
        )
        return result

    def _measure(self, stmt: Statement) -> tuple[int, int]:
        """
        Return (address, size) for a statement without changing any state.

        Raises:
            UnknownOperationError: If the mnemonic is not known
            DirectiveError: If a directive operand is malformed
            AssemblySyntaxError: If '+' is used where format 4 does not exist
        """
        operation = stmt.operation

        if is_directive(operation):
            if stmt.extended:
                raise AssemblySyntaxError(
                    f"'+' prefix is not allowed on directive {operation}",
                    location=stmt.source,
                    source_line=stmt.text,
                )
            if operation == "START":
                return parse_start_address(stmt), 0
            return self._locctr, self._directive_size(stmt)

        if not is_valid_instruction(operation):
            raise UnknownOperationError(
                operation,
                location=stmt.source,
                source_line=stmt.text,
                similar=find_similar(operation, sorted(MNEMONICS | DIRECTIVES)),
            )

        info = get_instruction_info(operation)

        if stmt.extended and info.format != InstructionFormat.FORMAT_3_4:
            raise AssemblySyntaxError(
                f"{operation} is a format {info.format} instruction and has no format 4 form",
                location=stmt.source,
                source_line=stmt.text,
            )

        return self._locctr, info.size(stmt.extended)

    def _directive_size(self, stmt: Statement) -> int:
        """Size in bytes of a storage directive (0 for the others)."""
        operation = stmt.operation
        if operation == "WORD":
            return 3
        if operation == "RESW":
            return 3 * parse_count(stmt, "RESW")
        if operation == "RESB":
            return parse_count(stmt, "RESB")
        if operation == "BYTE":
            return len(byte_constant_hex(stmt)) // 2
        return 0


def run_pass1(statements: list[Statement],
              errors: Optional[ErrorCollector] = None) -> Pass1Result:
    """Convenience function: run pass 1 over a statement list."""
    return SymbolCollector(errors).run(statements)
