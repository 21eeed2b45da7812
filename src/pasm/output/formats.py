"""
PASM Memory Image Formats
=========================

Renders an assembled memory image for FPGA tool flows. The format is
chosen by the output file extension (case-insensitive):

| Extension | Format | Consumer                                      |
|-----------|--------|-----------------------------------------------|
| .vhd      | VHDL   | synthesisable RAM entity with initial content |
| .mif      | MIF    | Altera/Intel memory initialization file       |
| .mem      | MEM    | address/data hex listing                      |

Every file records the PASM version, the output file name (without
directories) and the build time. Addresses are written as three hex
digits and data as four.
"""

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from pasm import __version__
from pasm.errors import UnknownOutputFormatError


logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    """Supported memory image formats, keyed by file extension."""
    VHDL = "vhd"
    MIF = "mif"
    MEM = "mem"


def format_for_path(path: str | Path) -> OutputFormat:
    """
    Pick the output format from a file name's extension.

    Raises:
        UnknownOutputFormatError: If the extension is missing or unsupported
    """
    suffix = Path(path).suffix.lower().lstrip(".")
    for fmt in OutputFormat:
        if fmt.value == suffix:
            return fmt
    raise UnknownOutputFormatError(str(path))


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a build time as ``d-m-yyyy hh:mm:ss``."""
    if moment is None:
        moment = datetime.now()
    return (
        f"{moment.day}-{moment.month}-{moment.year} "
        f"{moment.hour:02}:{moment.minute:02}:{moment.second:02}"
    )


# =============================================================================
# VHDL
# =============================================================================

VHDL_HEADER = """\
---------------------------------------------------------------------
--
-- Built with PASM version {version}
-- File name: {filename}
-- {timestamp}
-- 
---------------------------------------------------------------------
library ieee;
use ieee.std_logic_1164.all;
use ieee.numeric_std.all;

entity {entity} is
port (
    clock        : in std_logic;
    clock_enable : in std_logic;
    address      : in std_logic_vector({address_high} downto 0);
    data_out     : out std_logic_vector(15 downto 0);
    data_in      : in std_logic_vector(15 downto 0);
    write_enable : in std_logic);
end entity;

architecture rtl of {entity} is

    type ram_type is array (0 to {last_address}) of std_logic_vector(15 downto 0);
    signal ram : ram_type := (
"""

VHDL_FOOTER = """\
begin

    process(clock)
    begin
        if rising_edge(clock) then
            if clock_enable = '1' then
                if write_enable = '1' then
                    ram(to_integer(unsigned(address))) <= data_in;
                else
                    data_out <= ram(to_integer(unsigned(address)));
                end if;
            end if;
        end if;
    end process;

end rtl;

--- End of file ---
"""

VHDL_WORDS_PER_LINE = 8
VHDL_INDENT = "\t\t\t"


def render_vhdl(words: Sequence[int], filename: str, timestamp: str) -> str:
    """
    Render a VHDL RAM entity named after the file, initialised with words.

    The address port is log2(len(words)) bits wide.
    """
    size = len(words)
    parts = [VHDL_HEADER.format(
        version=__version__,
        filename=filename,
        timestamp=timestamp,
        entity=Path(filename).stem,
        address_high=size.bit_length() - 2,
        last_address=size - 1,
    )]

    lines = []
    for start in range(0, size, VHDL_WORDS_PER_LINE):
        chunk = words[start:start + VHDL_WORDS_PER_LINE]
        lines.append(VHDL_INDENT + ",".join(f'X"{word:04X}"' for word in chunk))
    parts.append(",\n".join(lines) + ");\n")

    parts.append(VHDL_FOOTER)
    return "".join(parts)


# =============================================================================
# MIF
# =============================================================================

def render_mif(words: Sequence[int], filename: str, timestamp: str) -> str:
    lines = [
        f"-- Built with PASM version {__version__}",
        f"-- File name: {filename}",
        f"-- {timestamp}",
        "",
        f"DEPTH = {len(words)};",
        "WIDTH = 16;",
        "ADDRESS_RADIX = HEX;",
        "DATA_RADIX = HEX;",
        "CONTENT",
        "BEGIN",
    ]
    lines.extend(f"{address:03X} : {word:04X} ;" for address, word in enumerate(words))
    lines.append("END;")
    return "\n".join(lines) + "\n"


# =============================================================================
# MEM
# =============================================================================

def render_mem(words: Sequence[int], filename: str, timestamp: str) -> str:
    lines = [
        "#Format=AddrHex",
        f"#Depth={len(words)}",
        "#Width=16",
        "#AddrRadix=3",
        "#DataRadix=3",
        "#Data",
        f"#Built with PASM version {__version__}",
        f"#File name: {filename}",
        f"#{timestamp}",
    ]
    lines.extend(f"{address:03X} : {word:04X}" for address, word in enumerate(words))
    lines.append("# The end")
    return "\n".join(lines) + "\n"


# =============================================================================
# Public Interface
# =============================================================================

_RENDERERS = {
    OutputFormat.VHDL: render_vhdl,
    OutputFormat.MIF: render_mif,
    OutputFormat.MEM: render_mem,
}


def render_image(
    words: Sequence[int],
    fmt: OutputFormat,
    filename: str,
    timestamp: Optional[datetime] = None,
) -> str:
    """
    Render a memory image as text.

    Args:
        words: The full memory image
        fmt: Output format
        filename: Output file name recorded in the header (directories are dropped)
        timestamp: Build time (defaults to now)

    Returns:
        The complete file contents
    """
    return _RENDERERS[fmt](words, Path(filename).name, format_timestamp(timestamp))


def write_image(
    path: str | Path,
    words: Sequence[int],
    fmt: Optional[OutputFormat] = None,
    timestamp: Optional[datetime] = None,
) -> OutputFormat:
    """
    Write a memory image file.

    Args:
        path: Output file path
        words: The full memory image
        fmt: Output format (defaults to the one named by the extension)
        timestamp: Build time (defaults to now)

    Returns:
        The format that was written

    Raises:
        UnknownOutputFormatError: If fmt is None and the extension is unsupported
        OSError: If the file cannot be written
    """
    path = Path(path)
    if fmt is None:
        fmt = format_for_path(path)

    path.write_text(render_image(words, fmt, path.name, timestamp))
    logger.info(f"{fmt.name} file '{path}' created.")
    return fmt
