"""
pasm - Pumpkin CPU Assembler Command-Line Interface
===================================================

Usage Examples
--------------
Default 2048-word memory, VHDL RAM model:
    $ pasm blink.asm blink.vhd

256-word memory, Intel/Altera MIF file:
    $ pasm blink.asm 256 blink.mif

Lattice MEM file plus a symbol listing:
    $ pasm blink.asm 0x400 blink.mem -s blink.sym

Verbose mode (prints every diagnostic as it is found):
    $ pasm -v blink.asm blink.vhd
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from pasm import __version__
from pasm.assembler import Assembler
from pasm.assembler.lexer import parse_integer
from pasm.cli.errors import ExitCode, handle_cli_exception
from pasm.config import DEFAULT_MEMORY_SIZE, is_valid_memory_size


USAGE = """\
Usage:
       pasm source.asm [S] output.(vhd|mem|mif)

       Optional parameter S is the target memory size; a 2^n number
       in the range 32 to 4096 defaults to 2048
       The output file extension determines the output format:
          .vhd  creates a VHDL initialized RAM model
          .mif  creates an Intel/Altera MIF file
          .mem  creates a Lattice Semiconductor MEM file"""


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def parse_arguments(arguments: tuple[str, ...]) -> Optional[tuple[int, Path]]:
    """
    Split the positional arguments after SOURCE into (memory_size, output).

    Returns None if the count is wrong or the memory size is invalid.
    """
    if len(arguments) == 1:
        return DEFAULT_MEMORY_SIZE, Path(arguments[0])

    if len(arguments) == 2:
        memory_size = parse_integer(arguments[0])
        if memory_size is None or not is_valid_memory_size(memory_size):
            return None
        return memory_size, Path(arguments[1])

    return None


# =============================================================================
# CLI Definition
# =============================================================================

@click.command(context_settings={"ignore_unknown_options": True})
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("arguments", nargs=-1)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="pasm")
def main(
    source: Path,
    arguments: tuple[str, ...],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble Pumpkin CPU source code into a memory image.

    \b
    SOURCE is the assembly source file.
    MEMSIZE (optional) is the target memory size in words: a power of
    two from 32 to 4096, default 2048.
    OUTPUT is the memory image file; its extension selects the format
    (.vhd, .mif or .mem).

    \b
    Examples:
        pasm blink.asm blink.vhd
        pasm blink.asm 256 blink.mif
    """
    setup_logging(verbose)

    parsed = parse_arguments(arguments)
    if parsed is None:
        click.echo(USAGE, err=True)
        sys.exit(ExitCode.INVALID_ARGS)
    memory_size, output = parsed

    try:
        asm = Assembler(memory_size=memory_size)
        asm.assemble_file(source)
        asm.write_output(output)

        if symbols:
            asm.write_symbols(symbols)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Output")


if __name__ == "__main__":
    main()
