"""Variant-I intermediate code records and the lookups that build them."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from asmsim.mnemonics import directive_number, opcode_number
from asmsim.tables import LiteralTable, SymbolTable


@dataclass
class IntermediateInstruction:
    """One line of intermediate code."""

    opcode: str = ""
    operand: str = ""
    register: int = 0
    address: int = -1

    def format(self) -> str:
        register = f"<{self.register}> " if self.register != 0 else ""
        return f"{self.address}\t{self.opcode} {register}{self.operand}"


def imperative_code(name: str) -> str:
    """Intermediate opcode of an imperative statement."""
    return f"<IS, {opcode_number(name)}>"


def directive_code(name: str) -> str:
    """Intermediate opcode of an assembler directive."""
    return f"<AD, {directive_number(name)}>"


def symbol_operand(symbols: SymbolTable, name: str) -> str:
    """Operand referring to a symbol, or an empty string if it is unknown."""
    index = symbols.index_of(name)
    return "" if index is None else f"<S, {index}>"


def literal_operand(literals: LiteralTable, value: str) -> str:
    """Operand referring to a literal, or an empty string if it is unknown."""
    index = literals.index_of(value)
    return "" if index is None else f"<L, {index}>"


def format_intermediate(instructions: Iterable[IntermediateInstruction]) -> str:
    """Listing of the intermediate code."""
    lines = "".join(f"{ins.format()}\n" for ins in instructions)
    return "\nThe variant-I intermediate code is:\n\n" + lines