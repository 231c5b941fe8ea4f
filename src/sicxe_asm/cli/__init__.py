"""
sicxe-asm Command-Line Interface
================================

- **sicasm**: SIC/XE assembler

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["sicasm"]
