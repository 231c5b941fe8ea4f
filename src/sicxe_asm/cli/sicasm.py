"""
sicasm - SIC/XE Assembler Command-Line Interface
================================================

This module implements the command-line interface for the SIC/XE
assembler.

Usage Examples
--------------
Basic assembly:
    $ sicasm copy.asm

With output file:
    $ sicasm copy.asm -o copy.obj

Object program, symbol table and intermediate file:
    $ sicasm copy.asm -o copy.obj -s copy.sym -i copy.int

Run pass 2 only, from an intermediate file:
    $ sicasm --from-intermediate copy.int -o copy.obj

Verbose mode:
    $ sicasm -v copy.asm
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from sicxe_asm import __version__
from sicxe_asm.assembler import Assembler
from sicxe_asm.cli.errors import ExitCode, handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output object program file (default: input.obj)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol table file",
)
@click.option(
    "-i", "--intermediate",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the pass 1 intermediate file",
)
@click.option(
    "--from-intermediate",
    is_flag=True,
    help="INPUT_FILE is an intermediate file; run pass 2 only",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop after this many errors",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="sicasm")
def main(
    input_file: Path,
    output: Optional[Path],
    symbols: Optional[Path],
    intermediate: Optional[Path],
    from_intermediate: bool,
    max_errors: int,
    verbose: bool,
) -> None:
    """
    Assemble SIC/XE source code into an object program.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The object program holds one Header record, the Text records, the
    Modification records for relocatable addresses, and one End record.
    Statements with errors are reported and left out; the rest of the
    program is still assembled and written, and the exit code is 1.

    \b
    Examples:
        sicasm copy.asm              # Outputs copy.obj
        sicasm copy.asm -o out.obj   # Specify output file
        sicasm copy.asm -s copy.sym  # Also write the symbol table
    """
    setup_logging(verbose)
    output_file = output if output is not None else input_file.with_suffix(".obj")

    asm = Assembler(max_errors=max_errors)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        if from_intermediate:
            asm.assemble_intermediate(input_file)
        else:
            asm.assemble_file(input_file)

        asm.write_object(output_file)
        if verbose:
            click.echo(f"Wrote {len(asm.get_records())} records to {output_file}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if intermediate:
            asm.write_intermediate(intermediate)
            if verbose:
                click.echo(f"Wrote intermediate file to {intermediate}")

        if verbose:
            click.echo(
                f"Assembly complete: {asm.get_program_length()} bytes "
                f"at {asm.get_start_address():06X}"
            )
            click.echo(f"Defined {len(asm.get_symbols())} symbols")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")

    if asm.has_errors():
        click.echo(asm.get_error_report(), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    for warning in asm.get_warnings():
        click.echo(f"warning: {warning}", err=True)


if __name__ == "__main__":
    main()
