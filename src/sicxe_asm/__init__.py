"""
sicxe-asm - Two-Pass Assembler for the SIC/XE Architecture
==========================================================

SIC/XE is the simplified teaching computer from Leland Beck's "System
Software". This package assembles SIC/XE source into the classic
relocatable object program format (H/T/M/E records).

Main Components
---------------
- **assembler**: Parser, pass 1, pass 2 and record assembly (sicasm)
- **cpu**: Operation table and register table
- **errors**: Exception hierarchy and error collection

Quick Start
-----------
Assemble a program:
    >>> from sicxe_asm import Assembler
    >>> asm = Assembler()
    >>> program = asm.assemble_file("copy.asm")
    >>> asm.write_object("copy.obj")

Or use the command-line tool:
    $ sicasm copy.asm -o copy.obj -s copy.sym
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from sicxe_asm.assembler import Assembler, assemble, assemble_file
from sicxe_asm.errors import (
    SicXeError,
    AssemblerError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    UnknownOperationError,
    UnknownRegisterError,
    UnresolvedSymbolError,
    DirectiveError,
    IntermediateFormatError,
    TooManyErrors,
    SourceLocation,
    ErrorCollector,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Errors
    "SicXeError",
    "AssemblerError",
    "AssemblySyntaxError",
    "DuplicateSymbolError",
    "UnknownOperationError",
    "UnknownRegisterError",
    "UnresolvedSymbolError",
    "DirectiveError",
    "IntermediateFormatError",
    "TooManyErrors",
    "SourceLocation",
    "ErrorCollector",
]
