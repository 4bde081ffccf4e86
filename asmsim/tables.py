"""Symbol, literal and pool tables built during the first pass."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

_UNDEFINED = "undefined"
_REDECLARED = "redeclared"
_UNUSED = "unused"


@dataclass
class Symbol:
    """A symbol with its address, used/defined flags and definition count."""

    name: str
    address: int = -1
    used: int = -1
    defined: int = -1
    count: int = 0


@dataclass(frozen=True)
class Diagnostic:
    """A problem found in the symbol table."""

    name: str
    kind: str

    @property
    def is_error(self) -> bool:
        return self.kind != _UNUSED

    @property
    def message(self) -> str:
        if self.kind == _UNDEFINED:
            return f"Error: Symbol {self.name} is used but not defined!"
        if self.kind == _REDECLARED:
            return f"Error: Redeclaration of symbol {self.name}!"
        return f"Warning: Symbol {self.name} is defined but not used!"

    def __str__(self) -> str:
        return self.message


class SymbolTable:
    """Ordered, case-insensitive table of symbols."""

    def __init__(self) -> None:
        self._symbols: list[Symbol] = []

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __getitem__(self, index: int) -> Symbol:
        return self._symbols[index]

    def _find(self, name: str) -> Symbol | None:
        key = name.upper()
        return next((s for s in self._symbols if s.name.upper() == key), None)

    def enter(self, name: str, is_label: bool, address: int = -1) -> Symbol:
        """Record a use of name as an operand, or its definition as a label at address."""
        symbol = self._find(name)
        if symbol is None:
            symbol = Symbol(name)
            if is_label:
                symbol.address = address
                symbol.defined = 1
                symbol.count += 1
            else:
                symbol.used = 1
            self._symbols.append(symbol)
        elif is_label:
            if symbol.address == -1:
                symbol.address = address
            symbol.count += 1
            symbol.defined = 1
        else:
            symbol.used = 1
        return symbol

    def index_of(self, name: str) -> int | None:
        """One-based position of name, or None if absent."""
        key = name.upper()
        return next(
            (pos for pos, s in enumerate(self._symbols, 1) if s.name.upper() == key),
            None,
        )

    def address_of(self, index: int) -> int:
        """Address of the symbol at a one-based position."""
        if not 1 <= index <= len(self._symbols):
            raise IndexError(f"no symbol number {index}")
        return self._symbols[index - 1].address

    def diagnostics(self) -> list[Diagnostic]:
        """Errors and warnings for the table, in table order."""
        found = []
        for symbol in self._symbols:
            if symbol.defined == 0 and symbol.used == 1:
                found.append(Diagnostic(symbol.name, _UNDEFINED))
            if symbol.count > 1:
                found.append(Diagnostic(symbol.name, _REDECLARED))
            if symbol.used == 0 and symbol.defined == 1:
                found.append(Diagnostic(symbol.name, _UNUSED))
        return found

    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics())

    def format(self) -> str:
        """The table listing followed by its diagnostics."""
        parts = [
            "\n\nSymbol Table",
            "\n\nS.No.\tName\tAddress\tUsed\tDefined\tCount\n" + "-" * 48 + "\n",
        ]
        parts.extend(
            f"{n}\t{s.name}\t{s.address}\t{s.used}\t{s.defined}\t{s.count}\n"
            for n, s in enumerate(self._symbols, 1)
        )
        parts.append("\n")
        for diagnostic in self.diagnostics():
            lead = "" if diagnostic.kind == _REDECLARED else "\n"
            parts.append(f"{lead}{diagnostic.message}\n")
        return "".join(parts)


@dataclass
class Literal:
    """A literal with its use count, address and pool number."""

    value: str
    count: int = 1
    address: int = -1
    pool: int = -1


class LiteralTable:
    """Ordered, case-insensitive table of literals grouped into pools."""

    def __init__(self) -> None:
        self._literals: list[Literal] = []

    def __iter__(self) -> Iterator[Literal]:
        return iter(self._literals)

    def __len__(self) -> int:
        return len(self._literals)

    def __getitem__(self, index: int) -> Literal:
        return self._literals[index]

    def enter(self, value: str) -> Literal:
        """Add a literal, or count one more use of an existing one."""
        key = value.upper()
        literal = next((lit for lit in self._literals if lit.value.upper() == key), None)
        if literal is None:
            literal = Literal(value)
            self._literals.append(literal)
        else:
            literal.count += 1
        return literal

    def index_of(self, value: str) -> int | None:
        """One-based position of value, or None if absent."""
        key = value.upper()
        return next(
            (pos for pos, lit in enumerate(self._literals, 1) if lit.value.upper() == key),
            None,
        )

    def address_of(self, index: int) -> int:
        """Address of the literal at a one-based position."""
        if not 1 <= index <= len(self._literals):
            raise IndexError(f"no literal number {index}")
        return self._literals[index - 1].address

    def create_pool(self, location: int) -> int:
        """Place every unplaced literal from location onward in a new pool.

        Returns how many literals were placed.
        """
        if not self._literals:
            return 0
        if self._literals[0].pool == -1:
            number = 1
        else:
            number = max(0, *(lit.pool for lit in self._literals)) + 1
        placed = 0
        for literal in self._literals:
            if literal.pool == -1:
                literal.pool = number
                literal.address = location + placed
                placed += 1
        return placed

    def pool_starts(self) -> list[int]:
        """Pool numbers listed in the pool table, starting with 1."""
        starts = [1]
        current = 1
        for literal in self._literals:
            if literal.pool != current:
                current = literal.pool
                starts.append(current)
        return starts

    def format(self) -> str:
        parts = [
            "\n\nLiteral Table",
            "\n\nL.No.\tLiteral\tAddress\tCount\n" + "-" * 40 + "\n",
        ]
        parts.extend(
            f"{n}\t{lit.value}\t{lit.address}\t{lit.count}\n"
            for n, lit in enumerate(self._literals, 1)
        )
        return "".join(parts)

    def format_pools(self) -> str:
        starts = self.pool_starts()
        body = str(starts[0]) + "".join(f"\n{n}" for n in starts[1:])
        return "\n\nPool Table\n\nLiteral No.\n------------\n" + body + "\n"