"""
SIC/XE Code Generator - Pass 2
==============================

This module generates SIC/XE object code from the located statements and
the frozen symbol table produced by pass 1, and feeds it to the
RecordAssembler.

Format 3/4 Encoding
-------------------
```
 23      18 17 16 15 14 13 12 11                       0
+----------+--+--+--+--+--+--+--------------------------+
|  opcode  | n| i| x| b| p| e|  disp (12) / addr (20)   |
+----------+--+--+--+--+--+--+--------------------------+
```

| Operand     | n | i | x | Meaning                          |
|-------------|---|---|---|----------------------------------|
| (none)      | 1 | 1 | 0 | RSUB                             |
| #value      | 0 | 1 | 0 | immediate                        |
| @value      | 1 | 0 | 0 | indirect                         |
| value       | 1 | 1 | 0 | simple                           |
| value,X     | 1 | 1 | 1 | simple, indexed                  |

A symbolic operand is encoded pc-relative (p=1) when
target - (address + 3) lies in [-2048, 2047], otherwise base-relative
(b=1) from the register value set by the last BASE directive. An operand
that is not a symbol is an integer literal and is encoded as is.
Format 4 (e=1) always holds the absolute target address, and a symbolic
format 4 operand gets a Modification record so the loader can relocate it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sicxe_asm.errors import (
    AssemblerError,
    AssemblySyntaxError,
    DirectiveError,
    ErrorCollector,
    UnknownRegisterError,
    UnresolvedSymbolError,
)
from sicxe_asm.assembler.parser import Statement
from sicxe_asm.assembler.pass1 import Pass1Result, byte_constant_hex
from sicxe_asm.assembler.records import Record, RecordAssembler
from sicxe_asm.cpu import (
    COUNT_ONLY_INSTRUCTIONS,
    SHIFT_INSTRUCTIONS,
    InstructionFormat,
    InstructionInfo,
    get_instruction_info,
    get_register_number,
)


logger = logging.getLogger(__name__)

PC_RELATIVE_MIN = -2048
PC_RELATIVE_MAX = 2047

# Flag bits in the nibble that follows n and i
FLAG_X = 0x8
FLAG_B = 0x4
FLAG_P = 0x2
FLAG_E = 0x1


@dataclass(frozen=True)
class EncodedStatement:
    """
    Object code produced for one statement.

    Attributes:
        statement: The located statement
        object_code: Uppercase hex digits
    """
    statement: Statement
    object_code: str

    @property
    def address(self) -> int:
        return self.statement.address


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Pass 2 of the assembler.

    The generator owns the base register value, which only BASE and
    NOBASE change, in source order. Statements and the symbol table are
    read, never modified.

    Usage:
        codegen = CodeGenerator(pass1_result, errors)
        records = codegen.generate()
    """

    def __init__(self, program: Pass1Result, errors: Optional[ErrorCollector] = None):
        self._program = program
        self._symbols = program.symbols
        self._errors = errors if errors is not None else ErrorCollector()
        self._records = RecordAssembler()
        self._base_address = 0
        self._encoded: list[EncodedStatement] = []

    # =========================================================================
    # Public Interface
    # =========================================================================

    @property
    def base_address(self) -> int:
        return self._base_address

    @property
    def encoded(self) -> list[EncodedStatement]:
        """Object code per statement, in source order."""
        return list(self._encoded)

    def generate(self) -> list[Record]:
        """
        Encode every located statement and assemble the object records.

        Statements after END are not processed. A statement that fails
        to encode contributes no code; the error is collected.

        Returns:
            Records in emission order (Header, Text, Modification, End)
        """
        program = self._program
        self._records = RecordAssembler()
        self._base_address = 0
        self._encoded.clear()

        if not program.has_start:
            self._records.set_header("", program.start_address, program.program_length)

        for stmt in program.statements:
            if stmt.is_comment:
                continue
            if stmt.operation == "END":
                break
            try:
                code = self.encode(stmt)
            except AssemblerError as e:
                logger.info(f"pass 2: no code for line {stmt.source.line}: {e.message}")
                self._errors.add(e)
                continue
            if code:
                self._records.emit(stmt.address, code)
                self._encoded.append(EncodedStatement(stmt, code))

        records = self._records.finish(program.first_executable_address)
        logger.debug(f"pass 2: {len(self._encoded)} statements produced object code")
        return records

    def encode(self, stmt: Statement) -> str:
        """
        Return the object code for one located statement.

        Directives without object code return "" and may update state
        (the Header record for START, the base register for BASE/NOBASE).

        Raises:
            AssemblerError: If the statement cannot be encoded
        """
        operation = stmt.operation

        if operation == "START":
            self._records.set_header(
                self._program.program_name,
                self._program.start_address,
                self._program.program_length,
            )
            return ""
        if operation == "BYTE":
            return byte_constant_hex(stmt)
        if operation == "WORD":
            return self._encode_word(stmt)
        if operation == "BASE":
            self._base_address = self._resolve_base(stmt)
            return ""
        if operation == "NOBASE":
            self._base_address = 0
            return ""
        if operation in ("RESW", "RESB", "END"):
            return ""

        info = get_instruction_info(operation)
        if info is None:
            # pass 1 drops unknown operations, so only foreign input gets here
            raise AssemblySyntaxError(
                f"cannot encode '{operation}'",
                location=stmt.source,
                source_line=stmt.text,
            )

        if info.format == InstructionFormat.FORMAT_1:
            return info.opcode
        if info.format == InstructionFormat.FORMAT_2:
            return self._encode_format2(info, stmt)
        return self._encode_format34(info, stmt)

    # =========================================================================
    # Instruction Encoding
    # =========================================================================

    def _encode_format2(self, info: InstructionInfo, stmt: Statement) -> str:
        """Encode opcode + r1 + r2; a missing second register encodes as 0."""
        mnemonic = info.mnemonic

        if mnemonic in COUNT_ONLY_INSTRUCTIONS:
            n = self._parse_small_int(stmt, stmt.operand1, 0, 15)
            return f"{info.opcode}{n:X}0"

        if stmt.operand1 is None:
            raise AssemblySyntaxError(
                f"{mnemonic} requires a register operand",
                location=stmt.source,
                source_line=stmt.text,
            )
        r1 = self._register(stmt.operand1, stmt)

        if mnemonic in SHIFT_INSTRUCTIONS:
            n = self._parse_small_int(stmt, stmt.operand2, 1, 16)
            return f"{info.opcode}{r1:X}{n - 1:X}"

        r2 = 0 if stmt.operand2 is None else self._register(stmt.operand2, stmt)
        return f"{info.opcode}{r1:X}{r2:X}"

    def _encode_format34(self, info: InstructionInfo, stmt: Statement) -> str:
        """Encode a format 3 or format 4 instruction."""
        extended = stmt.extended
        flags = FLAG_E if extended else 0
        relocate = False

        if stmt.operand1 is None:
            n, i = 1, 1
            disp = 0
        else:
            operand = stmt.operand1
            if operand.startswith("#"):
                n, i = 0, 1
                operand = operand[1:]
            elif operand.startswith("@"):
                n, i = 1, 0
                operand = operand[1:]
            else:
                n, i = 1, 1
                if stmt.operand2 is not None:
                    flags |= FLAG_X

            target = self._symbols.lookup(operand)
            if target is None:
                disp = self._parse_literal(operand, stmt)
            elif extended:
                disp = target
                relocate = True
            else:
                disp = target - (stmt.address + 3)
                if PC_RELATIVE_MIN <= disp <= PC_RELATIVE_MAX:
                    flags |= FLAG_P
                else:
                    disp = target - self._base_address
                    flags |= FLAG_B
                    if not 0 <= disp <= 0xFFF:
                        message = (
                            f"{stmt.source}: base-relative displacement {disp} "
                            f"truncated to 12 bits"
                        )
                        logger.debug(message)
                        self._errors.add_warning(message)

        first = (info.opcode_value & 0xFC) | (n << 1) | i
        if extended:
            word = (first << 24) | (flags << 20) | (disp & 0xFFFFF)
            code = f"{word:08X}"
        else:
            word = (first << 16) | (flags << 12) | (disp & 0xFFF)
            code = f"{word:06X}"

        if relocate:
            self._records.add_modification(stmt.address + 1, 5)
        return code

    # =========================================================================
    # Directive Encoding
    # =========================================================================

    def _encode_word(self, stmt: Statement) -> str:
        """WORD n: the integer as 6 hex digits (24-bit two's complement)."""
        try:
            value = int(stmt.operand1 or "")
        except ValueError:
            raise DirectiveError(
                f"WORD requires an integer operand, got '{stmt.operand1 or ''}'",
                location=stmt.source,
                source_line=stmt.text,
            ) from None
        return f"{value & 0xFFFFFF:06X}"

    def _resolve_base(self, stmt: Statement) -> int:
        """Value loaded into the base register by BASE."""
        if stmt.operand1 is None:
            raise DirectiveError(
                "BASE requires an operand",
                location=stmt.source,
                source_line=stmt.text,
            )
        target = self._symbols.lookup(stmt.operand1)
        if target is not None:
            return target
        return self._parse_literal(stmt.operand1, stmt)

    # =========================================================================
    # Operand Helpers
    # =========================================================================

    def _register(self, name: str, stmt: Statement) -> int:
        number = get_register_number(name)
        if number is None:
            raise UnknownRegisterError(
                name,
                stmt.operation,
                location=stmt.source,
                source_line=stmt.text,
            )
        return number

    def _parse_literal(self, text: str, stmt: Statement) -> int:
        """Parse a non-symbol operand as a decimal integer."""
        try:
            return int(text)
        except ValueError:
            raise UnresolvedSymbolError(
                text,
                location=stmt.source,
                source_line=stmt.text,
                similar_symbols=self._symbols.similar(text) if text else None,
            ) from None

    def _parse_small_int(self, stmt: Statement, text: Optional[str],
                         low: int, high: int) -> int:
        try:
            value = int(text or "")
        except ValueError:
            raise AssemblySyntaxError(
                f"{stmt.operation} requires a number from {low} to {high}, "
                f"got '{text or ''}'",
                location=stmt.source,
                source_line=stmt.text,
            ) from None
        if not low <= value <= high:
            raise AssemblySyntaxError(
                f"{stmt.operation} count {value} is outside {low}..{high}",
                location=stmt.source,
                source_line=stmt.text,
            )
        return value


def generate_records(program: Pass1Result,
                     errors: Optional[ErrorCollector] = None) -> list[Record]:
    """Convenience function: run pass 2 and return the object records."""
    return CodeGenerator(program, errors).generate()
