"""
SIC/XE Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
turning SIC/XE source into an object program. It coordinates the parser,
pass 1 (SymbolCollector) and pass 2 (CodeGenerator).

Example Usage
-------------
>>> from sicxe_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> program = asm.assemble_string('''
... COPY    START   1000
... FIRST   LDA     #5
...         RSUB
...         END     FIRST
... ''')
>>> program.splitlines()
['HCOPY  001000000006', 'T001000060100054F0000', 'E001000']

Command-Line Usage
------------------
    $ sicasm copy.asm -o copy.obj -s copy.sym

Error Behaviour
---------------
Errors in individual statements (duplicate labels, unknown operations,
bad registers, undefined symbols) do not stop assembly. The failing
statement produces no object code and the rest of the program is still
assembled; check has_errors() and get_error_report() afterwards.
I/O failures and an unreadable intermediate file raise immediately.
"""

import logging
from pathlib import Path
from typing import Optional

from sicxe_asm.errors import AssemblerError, ErrorCollector
from sicxe_asm.assembler.parser import Statement, parse_source
from sicxe_asm.assembler.pass1 import Pass1Result, SymbolCollector
from sicxe_asm.assembler.codegen import CodeGenerator, EncodedStatement
from sicxe_asm.assembler.records import Record, render_records
from sicxe_asm.assembler.intermediate import read_intermediate, write_intermediate


logger = logging.getLogger(__name__)


class Assembler:
    """
    Main SIC/XE assembler class.

    Attributes:
        max_errors: Number of errors after which assembly is abandoned
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the assembler.

        Args:
            max_errors: Stop with TooManyErrors once this many errors
                        have been collected
        """
        self._errors = ErrorCollector(max_errors=max_errors)
        self._source_file: Optional[Path] = None
        self._pass1: Optional[Pass1Result] = None
        self._records: list[Record] = []
        self._encoded: list[EncodedStatement] = []

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>",
                 output_path: str | Path | None = None) -> str:
        """
        Assemble source code, optionally writing the object program.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages
            output_path: Optional object program file path

        Returns:
            Object program text
        """
        program = self.assemble_string(source, filename)
        if output_path:
            self.write_object(output_path)
        return program

    def assemble_string(self, source: str, filename: str = "<input>") -> str:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Object program text

        Raises:
            TooManyErrors: If the error limit is reached
        """
        self._errors.clear()
        statements = parse_source(source, filename, errors=self._errors)
        logger.debug(f"parsed {len(statements)} statements from {filename}")
        return self._assemble(statements)

    def assemble_file(self, filepath: str | Path) -> str:
        """
        Assemble source code from a file.

        Raises:
            FileNotFoundError: If the source file does not exist
            TooManyErrors: If the error limit is reached
        """
        filepath = Path(filepath)
        self._source_file = filepath
        logger.info(f"assembling {filepath}")
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    def assemble_statements(self, statements: list[Statement]) -> str:
        """
        Assemble statements produced by some other front end.

        Returns:
            Object program text
        """
        self._errors.clear()
        return self._assemble(statements)

    def assemble_intermediate(self, filepath: str | Path) -> str:
        """
        Run pass 2 on a previously written intermediate file.

        Raises:
            FileNotFoundError: If the file does not exist
            IntermediateFormatError: If the file cannot be decoded
        """
        self._errors.clear()
        self._pass1 = read_intermediate(filepath)
        return self._run_pass2()

    def _assemble(self, statements: list[Statement]) -> str:
        self._pass1 = SymbolCollector(self._errors).run(statements)
        return self._run_pass2()

    def _run_pass2(self) -> str:
        codegen = CodeGenerator(self._pass1, self._errors)
        self._records = codegen.generate()
        self._encoded = codegen.encoded

        if self._errors.has_errors():
            logger.info(f"assembly finished with {self._errors.error_count()} errors")
        return self.get_object_program()

    # =========================================================================
    # Results
    # =========================================================================

    def _require_pass1(self) -> Pass1Result:
        if self._pass1 is None:
            raise RuntimeError("nothing has been assembled yet")
        return self._pass1

    def get_object_program(self) -> str:
        """Return the object program text, one record per line."""
        return render_records(self._records)

    def get_records(self) -> list[Record]:
        """Return the object program records in emission order."""
        return list(self._records)

    def get_object_code(self) -> list[EncodedStatement]:
        """Return the object code of each statement that produced some."""
        return list(self._encoded)

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return self._require_pass1().symbols.as_dict()

    def get_statements(self) -> list[Statement]:
        """Return the statements located by pass 1."""
        return list(self._require_pass1().statements)

    def get_pass1_result(self) -> Pass1Result:
        return self._require_pass1()

    def get_start_address(self) -> int:
        return self._require_pass1().start_address

    def get_program_length(self) -> int:
        return self._require_pass1().program_length

    def get_first_executable_address(self) -> Optional[int]:
        return self._require_pass1().first_executable_address

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_object(self, filepath: str | Path) -> None:
        """Write the object program file."""
        with open(filepath, "w") as f:
            f.write(self.get_object_program())
        logger.info(f"wrote object program to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, address in hex)
        """
        symbols = self._require_pass1().symbols
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by sicasm\n")
            for sym in sorted(symbols, key=lambda s: s.name):
                f.write(f"{sym.name} {sym.value:06X}\n")
        logger.info(f"wrote symbols to {filepath}")

    def write_intermediate(self, filepath: str | Path) -> None:
        """Write the pass 1 intermediate file."""
        write_intermediate(self._require_pass1(), filepath)

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Return True if assembly produced errors."""
        return self._errors.has_errors()

    def get_errors(self) -> list[AssemblerError]:
        """Return the collected errors in the order they were found."""
        return list(self._errors.errors)

    def get_warnings(self) -> list[str]:
        """Return warnings (e.g. truncated base-relative displacements)."""
        return list(self._errors.warnings)

    def get_error_report(self) -> str:
        """Return the formatted error report."""
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> str:
    """
    Convenience function to assemble source code.

    Returns:
        Object program text

    Raises:
        AssemblerError: If any statement failed to assemble
    """
    asm = Assembler()
    program = asm.assemble_string(source, filename)
    if asm.has_errors():
        raise AssemblerError(
            f"assembly failed with {len(asm.get_errors())} errors:\n\n"
            f"{asm.get_error_report()}"
        )
    return program


def assemble_file(filepath: str | Path) -> str:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If any statement failed to assemble
        FileNotFoundError: If the file does not exist
    """
    asm = Assembler()
    program = asm.assemble_file(filepath)
    if asm.has_errors():
        raise AssemblerError(
            f"assembly failed with {len(asm.get_errors())} errors:\n\n"
            f"{asm.get_error_report()}"
        )
    return program
