"""
SIC/XE CPU Package
==================

Architecture definitions shared by the assembler passes: the operation
table, the register table, and the assembler directive names.

Usage:
    from sicxe_asm.cpu import (
        InstructionFormat,
        InstructionInfo,
        OPCODE_TABLE,
        get_instruction_info,
    )
"""

from sicxe_asm.cpu.sicxe import (
    # Core types
    InstructionFormat,
    InstructionInfo,
    # Static tables
    OPCODE_TABLE,
    MNEMONICS,
    REGISTERS,
    DIRECTIVES,
    SHIFT_INSTRUCTIONS,
    COUNT_ONLY_INSTRUCTIONS,
    NO_OPERAND_INSTRUCTIONS,
    # Lookup functions
    get_instruction_info,
    get_register_number,
    is_directive,
    is_valid_instruction,
    takes_no_operand,
)

__all__ = [
    "InstructionFormat",
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
    "REGISTERS",
    "DIRECTIVES",
    "SHIFT_INSTRUCTIONS",
    "COUNT_ONLY_INSTRUCTIONS",
    "NO_OPERAND_INSTRUCTIONS",
    "get_instruction_info",
    "get_register_number",
    "is_directive",
    "is_valid_instruction",
    "takes_no_operand",
]
