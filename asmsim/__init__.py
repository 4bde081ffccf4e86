"""Two-pass assembler and object code simulator for a small teaching machine."""

__version__ = "0.1.0"
__all__ = ["mnemonics", "tables", "intermediate", "assembler", "simulator", "console"]