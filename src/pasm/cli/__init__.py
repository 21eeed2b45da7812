"""
PASM Command-Line Interface
===========================

- **pasm**: Pumpkin CPU assembler

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["pasm"]
