"""
SIC/XE Assembly Language Parser
===============================

This module splits SIC/XE source lines into Statement objects that the
two assembler passes consume.

Source Format
-------------
SIC/XE source is field oriented:

```asm
COPY     START   1000          ; label, operation, operand
FIRST    STL     RETADR        ; trailing text is a comment
         +JSUB   RDREC         ; '+' selects format 4
         LDCH    BUFFER,X      ; second operand is the index marker
         COMPR   A,S           ; format 2 register pair
EOF      BYTE    C'EOF'        ; quoted literals may contain blanks
. whole-line comment
```

- A line that starts in column 1 carries a label; an indented line does not.
- A line whose first non-blank character is '.' is a comment.
- Blank lines produce no statement.
- The operand field is split on the first comma into operand1/operand2,
  except for C'...' and X'...' literals.
- For instructions that never take an operand (format 1, RSUB) and for
  NOBASE, everything after the operation is a comment.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional

from sicxe_asm.errors import (
    AssemblySyntaxError,
    ErrorCollector,
    SourceLocation,
)
from sicxe_asm.cpu import takes_no_operand


# A quoted C'...'/X'...' literal is a single field even when it holds blanks
_FIELD_RE = re.compile(r"[CcXx]'[^']*'?|\S+")
_LITERAL_RE = re.compile(r"^[CcXx]'")


# =============================================================================
# Statement Data Class
# =============================================================================

@dataclass(frozen=True)
class Statement:
    """
    One parsed source line.

    Statements are immutable. Pass 1 assigns the address through
    with_address(), which returns a located copy; pass 2 only reads it.

    Attributes:
        source: Where the line came from, for diagnostics
        text: The raw source line
        label: Label field, or None
        operation: Operation mnemonic (uppercase, without '+')
        operand1: First operand, or None
        operand2: Second operand (index marker or second register), or None
        extended: True when the line used the '+' (format 4) prefix
        is_comment: True for a whole-line comment
        address: Location counter value assigned by pass 1, or None
    """
    source: SourceLocation
    text: str = ""
    label: Optional[str] = None
    operation: str = ""
    operand1: Optional[str] = None
    operand2: Optional[str] = None
    extended: bool = False
    is_comment: bool = False
    address: Optional[int] = None

    def with_address(self, address: int) -> "Statement":
        """
        Return a copy of this statement located at the given address.

        Raises:
            RuntimeError: If the statement already has an address
        """
        if self.address is not None:
            raise RuntimeError(
                f"statement at {self.source} is already located at {self.address:06X}"
            )
        return replace(self, address=address)


# =============================================================================
# Line Parser
# =============================================================================

def parse_line(text: str, line: int = 1, filename: str = "<input>") -> Optional[Statement]:
    """
    Parse a single source line.

    Args:
        text: Source line (trailing newline allowed)
        line: Line number for diagnostics
        filename: Filename for diagnostics

    Returns:
        The parsed Statement, or None for a blank line

    Raises:
        AssemblySyntaxError: If a label is not followed by an operation
    """
    text = text.rstrip("\r\n")
    stripped = text.strip()
    if not stripped:
        return None

    if stripped.startswith("."):
        column = text.index(".") + 1
        return Statement(
            source=SourceLocation(filename, line, column),
            text=text,
            is_comment=True,
        )

    fields = [(m.group(0), m.start() + 1) for m in _FIELD_RE.finditer(text)]
    has_label = text[0] not in " \t"

    label = None
    if has_label:
        label, label_column = fields.pop(0)
        if not fields:
            raise AssemblySyntaxError(
                f"label '{label}' is not followed by an operation",
                location=SourceLocation(filename, line, label_column),
                source_line=text,
            )

    operation, op_column = fields.pop(0)
    extended = operation.startswith("+")
    if extended:
        operation = operation[1:]
    operation = operation.upper()
    if not operation:
        raise AssemblySyntaxError(
            "'+' prefix without an operation",
            location=SourceLocation(filename, line, op_column),
            source_line=text,
        )

    operand1 = operand2 = None
    if fields and not takes_no_operand(operation):
        operand, _ = fields.pop(0)
        # "A, S" arrives as two fields
        while operand.endswith(",") and fields:
            operand += fields.pop(0)[0]
        operand1, operand2 = _split_operand(operand)

    return Statement(
        source=SourceLocation(filename, line, op_column),
        text=text,
        label=label,
        operation=operation,
        operand1=operand1,
        operand2=operand2,
        extended=extended,
    )


def _split_operand(operand: str) -> tuple[Optional[str], Optional[str]]:
    """Split an operand field into its two comma-separated parts."""
    if _LITERAL_RE.match(operand):
        return operand, None
    first, _, second = operand.partition(",")
    return first.strip() or None, second.strip() or None


def parse_source(
    source: str,
    filename: str = "<input>",
    errors: Optional[ErrorCollector] = None,
) -> list[Statement]:
    """
    Parse a complete source text into statements.

    Args:
        source: Assembly source code
        filename: Filename for diagnostics
        errors: If given, syntax errors are collected here and the bad
                lines are dropped; otherwise the first error is raised

    Returns:
        List of statements, comments included, blank lines dropped

    Raises:
        AssemblySyntaxError: On a malformed line when no collector is given
    """
    statements = []
    for number, text in enumerate(source.splitlines(), start=1):
        try:
            stmt = parse_line(text, number, filename)
        except AssemblySyntaxError as e:
            if errors is None:
                raise
            errors.add(e)
            continue
        if stmt is not None:
            statements.append(stmt)
    return statements
