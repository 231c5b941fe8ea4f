"""
SIC/XE Assembler
================

This package provides a two-pass assembler for the SIC/XE teaching
architecture. It turns assembly source into a relocatable object
program made of Header, Text, Modification and End records.

Main Components
---------------
- **Assembler**: Orchestrates parsing, pass 1 and pass 2
- **parse_source**: Splits source lines into Statement objects
- **SymbolCollector**: Pass 1 - addresses, sizes, symbol table
- **CodeGenerator**: Pass 2 - instruction encoding, object records
- **RecordAssembler**: Packs object code into Text records
- **read_intermediate / write_intermediate**: Pass 1 results on disk

Assembly Process
----------------
1. **Parsing**: source lines -> statements (label, operation, operands,
   format 4 flag, comment flag)
2. **Pass 1**: assign addresses, build and freeze the symbol table,
   compute program length and the first executable address
3. **Pass 2**: encode instructions and data, choose pc-relative or
   base-relative displacements, emit Text and Modification records

Example Usage
-------------
>>> from sicxe_asm.assembler import Assembler
>>> asm = Assembler()
>>> program = asm.assemble_string('''
... PROG    START   0
...         +JSUB   SUBR
... SUBR    RSUB
...         END     PROG
... ''')
>>> asm.get_symbols()["SUBR"]
4

Supported Features
------------------
- Full SIC/XE instruction set, formats 1, 2, 3 and 4
- Immediate (#), indirect (@), simple and indexed (,X) addressing
- pc-relative and base-relative displacement selection (BASE/NOBASE)
- Directives START, END, BYTE, WORD, RESB, RESW, BASE, NOBASE
- Modification records for relocatable format 4 addresses
- Symbol table output and intermediate file round trip
"""

from sicxe_asm.assembler.assembler import Assembler, assemble, assemble_file
from sicxe_asm.assembler.parser import Statement, parse_line, parse_source
from sicxe_asm.assembler.symbols import Symbol, SymbolTable
from sicxe_asm.assembler.pass1 import Pass1Result, SymbolCollector, run_pass1
from sicxe_asm.assembler.codegen import CodeGenerator, EncodedStatement, generate_records
from sicxe_asm.assembler.records import (
    EndRecord,
    HeaderRecord,
    ModificationRecord,
    Record,
    RecordAssembler,
    TextRecord,
    render_records,
)
from sicxe_asm.assembler.intermediate import read_intermediate, write_intermediate
from sicxe_asm.cpu import (
    InstructionFormat,
    InstructionInfo,
    OPCODE_TABLE,
    REGISTERS,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Parser
    "Statement",
    "parse_line",
    "parse_source",
    # Symbol table
    "Symbol",
    "SymbolTable",
    # Pass 1
    "Pass1Result",
    "SymbolCollector",
    "run_pass1",
    # Pass 2
    "CodeGenerator",
    "EncodedStatement",
    "generate_records",
    # Records
    "EndRecord",
    "HeaderRecord",
    "ModificationRecord",
    "Record",
    "RecordAssembler",
    "TextRecord",
    "render_records",
    # Intermediate file
    "read_intermediate",
    "write_intermediate",
    # Machine tables
    "InstructionFormat",
    "InstructionInfo",
    "OPCODE_TABLE",
    "REGISTERS",
]
