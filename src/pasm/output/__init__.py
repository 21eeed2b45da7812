"""
PASM Output Writers
===================

Memory image renderers for VHDL, MIF and MEM files.
"""

from pasm.output.formats import (
    OutputFormat,
    format_for_path,
    format_timestamp,
    render_image,
    write_image,
)

__all__ = [
    "OutputFormat",
    "format_for_path",
    "format_timestamp",
    "render_image",
    "write_image",
]
