"""Mnemonic tables of the assembly language and lookups into them."""

from __future__ import annotations

OPCODES: tuple[str, ...] = (
    "STOP",
    "ADD",
    "SUB",
    "MULT",
    "MOVER",
    "MOVEM",
    "COMP",
    "BC",
    "DIV",
    "READ",
    "PRINT",
)
REGISTERS: tuple[str, ...] = ("AREG", "BREG", "CREG", "DREG")
DIRECTIVES: tuple[str, ...] = ("START", "END", "EQU", "ORIGIN", "LTORG")
STORAGE: tuple[str, ...] = ("DC", "DS")
CONDITIONS: tuple[str, ...] = ("LT", "LE", "EQ", "GT", "GE", "ANY")

_ALL_TABLES = (OPCODES, DIRECTIVES, REGISTERS, STORAGE, CONDITIONS)


def _contains(table: tuple[str, ...], token: str) -> bool:
    return token.upper() in table


def _position(table: tuple[str, ...], name: str) -> int:
    """Zero-based position of name in table; unknown names fall past the end."""
    key = name.upper()
    return next((pos for pos, entry in enumerate(table) if entry == key), len(table))


def is_register(token: str) -> bool:
    """True if token names a register."""
    return _contains(REGISTERS, token)


def is_opcode(token: str) -> bool:
    """True if token names an imperative instruction."""
    return _contains(OPCODES, token)


def is_directive(token: str) -> bool:
    """True if token names an assembler directive."""
    return _contains(DIRECTIVES, token)


def is_storage(token: str) -> bool:
    """True if token names a storage declaration."""
    return _contains(STORAGE, token)


def is_condition(token: str) -> bool:
    """True if token names a branch condition."""
    return _contains(CONDITIONS, token)


def is_reserved(token: str) -> bool:
    """True if token appears in any mnemonic table."""
    return any(_contains(table, token) for table in _ALL_TABLES)


def remove_commas(line: str) -> str:
    """Return line with every comma replaced by a blank."""
    return line.replace(",", " ")


def opcode_number(name: str) -> int:
    """Machine opcode of an instruction (its position in the opcode table)."""
    return _position(OPCODES, name)


def directive_number(name: str) -> int:
    """One-based number of an assembler directive."""
    return _position(DIRECTIVES, name) + 1


def register_code(name: str) -> int:
    """One-based code of a register."""
    return _position(REGISTERS, name) + 1


def condition_code(name: str) -> int:
    """One-based code of a branch condition."""
    return _position(CONDITIONS, name) + 1