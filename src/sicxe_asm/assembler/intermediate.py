"""
SIC/XE Intermediate File
========================

Pass 1 results can be saved to disk and assembled by pass 2 later, the
way classic two-pass assemblers hand an intermediate file from one pass
to the next.

File Format
-----------
A JSON document:

```json
{
  "format": "sicxe-intermediate",
  "version": 1,
  "program_name": "COPY",
  "start_address": 4096,
  "program_length": 4218,
  "first_executable_address": 4096,
  "has_start": true,
  "symbols": [{"name": "FIRST", "value": 4096, "file": "copy.asm", "line": 2, "column": 10}],
  "statements": [{"address": 4096, "label": "FIRST", "operation": "STL", ...}]
}
```

Reading a file that is not a valid intermediate file raises
IntermediateFormatError; a missing file raises FileNotFoundError.
"""

import json
import logging
from pathlib import Path
from typing import Any

from sicxe_asm.errors import AssemblerError, IntermediateFormatError, SourceLocation
from sicxe_asm.assembler.parser import Statement
from sicxe_asm.assembler.pass1 import Pass1Result
from sicxe_asm.assembler.symbols import SymbolTable


logger = logging.getLogger(__name__)

FORMAT_NAME = "sicxe-intermediate"
FORMAT_VERSION = 1


# =============================================================================
# Encoding
# =============================================================================

def _statement_to_dict(stmt: Statement) -> dict[str, Any]:
    return {
        "address": stmt.address,
        "label": stmt.label,
        "operation": stmt.operation,
        "operand1": stmt.operand1,
        "operand2": stmt.operand2,
        "extended": stmt.extended,
        "file": stmt.source.filename,
        "line": stmt.source.line,
        "column": stmt.source.column,
        "text": stmt.text,
    }


def intermediate_to_dict(result: Pass1Result) -> dict[str, Any]:
    """Convert pass 1 results to a JSON-serializable dictionary."""
    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "program_name": result.program_name,
        "start_address": result.start_address,
        "program_length": result.program_length,
        "first_executable_address": result.first_executable_address,
        "has_start": result.has_start,
        "symbols": [
            {
                "name": sym.name,
                "value": sym.value,
                "file": sym.location.filename,
                "line": sym.location.line,
                "column": sym.location.column,
            }
            for sym in result.symbols
        ],
        "statements": [_statement_to_dict(stmt) for stmt in result.statements],
    }


def write_intermediate(result: Pass1Result, filepath: str | Path) -> None:
    """Write pass 1 results to an intermediate file."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(intermediate_to_dict(result), f, indent=2)
        f.write("\n")
    logger.debug(f"wrote {len(result.statements)} statements to {filepath}")


# =============================================================================
# Decoding
# =============================================================================

def intermediate_from_dict(data: Any) -> Pass1Result:
    """
    Rebuild pass 1 results from a decoded intermediate document.

    Raises:
        IntermediateFormatError: If the document is not a valid intermediate file
    """
    if not isinstance(data, dict) or data.get("format") != FORMAT_NAME:
        raise IntermediateFormatError("not a SIC/XE intermediate file")
    if data.get("version") != FORMAT_VERSION:
        raise IntermediateFormatError(
            f"unsupported intermediate file version {data.get('version')!r}"
        )

    try:
        symbols = SymbolTable()
        for entry in data["symbols"]:
            symbols.define(
                entry["name"],
                int(entry["value"]),
                SourceLocation(entry["file"], int(entry["line"]), int(entry["column"])),
            )
        symbols.freeze()

        statements = []
        for entry in data["statements"]:
            address = entry["address"]
            if not isinstance(address, int):
                raise IntermediateFormatError(
                    f"statement on line {entry.get('line')} has no address"
                )
            statements.append(Statement(
                source=SourceLocation(entry["file"], int(entry["line"]), int(entry["column"])),
                text=str(entry.get("text", "")),
                label=entry["label"],
                operation=str(entry["operation"]).upper(),
                operand1=entry["operand1"],
                operand2=entry["operand2"],
                extended=bool(entry["extended"]),
                address=address,
            ))

        first_exec = data["first_executable_address"]
        return Pass1Result(
            statements=statements,
            symbols=symbols,
            start_address=int(data["start_address"]),
            program_length=int(data["program_length"]),
            first_executable_address=None if first_exec is None else int(first_exec),
            program_name=str(data["program_name"]),
            has_start=bool(data["has_start"]),
        )
    except IntermediateFormatError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise IntermediateFormatError(f"malformed intermediate file: {e}") from e
    except (AssemblerError, RuntimeError) as e:
        # duplicate or unnamed symbols in a hand-edited file
        raise IntermediateFormatError(f"inconsistent intermediate file: {e}") from e


def read_intermediate(filepath: str | Path) -> Pass1Result:
    """
    Read pass 1 results from an intermediate file.

    Raises:
        FileNotFoundError: If the file does not exist
        IntermediateFormatError: If the file is not a valid intermediate file
    """
    with open(filepath, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise IntermediateFormatError(f"{filepath}: invalid JSON: {e}") from e
    result = intermediate_from_dict(data)
    logger.debug(f"read {len(result.statements)} statements from {filepath}")
    return result
