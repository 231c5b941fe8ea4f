"""
SIC/XE Assembler Error Hierarchy
================================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from SicXeError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
SicXeError (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - source line cannot be split into fields
    ├── DuplicateSymbolError - label defined more than once
    ├── UnknownOperationError - mnemonic is neither an instruction nor a directive
    ├── UnknownRegisterError - format 2 operand is not a register
    ├── UnresolvedSymbolError - operand is neither a symbol nor an integer
    ├── DirectiveError - malformed directive operand
    ├── IntermediateFormatError - unreadable intermediate file
    └── TooManyErrors - error limit reached

Severity
--------
Most errors are per-statement: the offending statement is skipped (pass 1)
or produces no object code (pass 2) and assembly continues. They are
gathered by an ErrorCollector and reported together at the end.
IntermediateFormatError, TooManyErrors and operating-system I/O errors
abort the run.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SicXeError(Exception):
    """
    Base exception for all errors raised by this package.

        try:
            assembler.assemble_file("copy.asm")
        except SicXeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(SicXeError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            copy.asm:12:9: error: unknown operation 'LDZ'
                FIRST   LDZ     RETADR
                        ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Source line that cannot be split into label/operation/operand fields.

    Examples:
        - Label with no operation
        - '+' prefix on an instruction that has no format 4 encoding
    """
    pass


class DuplicateSymbolError(AssemblerError):
    """
    Label defined more than once.

    The first definition stays in the symbol table; the statement carrying
    the second definition is skipped entirely.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownOperationError(AssemblerError):
    """Mnemonic that is neither a SIC/XE instruction nor an assembler directive."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown operation '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownRegisterError(AssemblerError):
    """
    Format 2 operand that is not a register mnemonic.

    Example:
        COMPR   A,Q     ; Error: Q is not a register
    """

    def __init__(
        self,
        register: str,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.register = register
        self.mnemonic = mnemonic
        super().__init__(
            f"unknown register '{register}' in {mnemonic}",
            location=location,
            hint="registers are A, X, L, B, S, T, F, PC, SW",
            source_line=source_line,
        )


class UnresolvedSymbolError(AssemblerError):
    """
    Operand that is not in the symbol table and is not an integer literal.

    Raised during pass 2, after the symbol table is complete, so every
    forward reference has already had its chance to resolve.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = None
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DirectiveError(AssemblerError):
    """
    Error in an assembler directive.

    Examples:
        - RESW with a non-numeric count
        - BYTE X'ABC' (odd number of hex digits)
        - BYTE operand that is not a C'...' or X'...' literal
    """
    pass


class IntermediateFormatError(AssemblerError):
    """
    Intermediate file that cannot be decoded.

    The intermediate file carries pass 1 results to pass 2. A damaged file
    cannot be partially trusted, so this error aborts the run.
    """
    pass


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    Both passes keep going after a bad statement, collecting every error so
    the user can fix them all in one edit cycle.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(DuplicateSymbolError("LOOP", location))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"too many errors ({self.max_errors}), stopping")

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def warning_count(self) -> int:
        """Return the number of collected warnings."""
        return len(self.warnings)

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()


class TooManyErrors(AssemblerError):
    """Raised when the error limit is reached; aborts the run."""

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)
