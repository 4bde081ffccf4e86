"""Two-pass assembler: syntax check, tables, intermediate and object code."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import NamedTuple

from asmsim.intermediate import (
    IntermediateInstruction,
    directive_code,
    format_intermediate,
    imperative_code,
    literal_operand,
    symbol_operand,
)
from asmsim.mnemonics import (
    condition_code,
    is_condition,
    is_opcode,
    is_register,
    is_reserved,
    is_storage,
    register_code,
    remove_commas,
)
from asmsim.tables import Diagnostic, LiteralTable, SymbolTable

MAX_ADDRESS = 999
_MAX_TOKENS = 4
_SEPARATOR = "\n" + "-" * 64 + "\n"
_INTEGER = re.compile(r"\s*([+-]?\d+)")
_ARITHMETIC = ("MOVER", "MOVEM", "ADD", "SUB", "DIV", "MULT")


class AssemblyError(Exception):
    """Base class for errors raised while assembling a program."""


class AssemblySyntaxError(AssemblyError):
    """A statement of the program is malformed."""

    def __init__(
        self, reason: str, line_number: int | None = None, line: str | None = None
    ) -> None:
        self.reason = reason
        self.line_number = line_number
        self.line = line
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason}")


class SymbolError(AssemblyError):
    """The symbol table holds errors, so no code can be generated."""

    def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.diagnostics = list(diagnostics)
        errors = "; ".join(d.message for d in self.diagnostics if d.is_error)
        super().__init__(f"Symbol error: {errors}" if errors else "Symbol error")


@dataclass(frozen=True)
class Statement:
    """A source line and the (at most four) tokens read from it."""

    text: str
    tokens: tuple[str, ...]

    @property
    def fields(self) -> tuple[str, str, str, str]:
        """The four token slots, with absent tokens as empty strings."""
        padded = (*self.tokens, "", "", "", "")
        return padded[0], padded[1], padded[2], padded[3]


class _Assembly(NamedTuple):
    statements: list[Statement]
    symbols: SymbolTable
    literals: LiteralTable
    intermediate: list[IntermediateInstruction]
    object_code: str


def _atoi(text: str) -> int:
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def _is(token: str, *names: str) -> bool:
    return token.upper() in names


def _fail(reason: str) -> None:
    raise AssemblySyntaxError(reason)


def tokenize(line: str) -> Statement:
    """Split a line into at most four tokens, commas counting as blanks."""
    return Statement(line, tuple(remove_commas(line).split()[:_MAX_TOKENS]))


def _check_two(t1: str, t2: str) -> None:
    if is_storage(t1) or _is(t1, "STOP", "END") or is_condition(t1):
        _fail("Invalid Statement!")
    if _is(t2, "STOP", "END", "LTORG") and is_reserved(t1):
        _fail("Invalid Label!")
    if _is(t1, "LTORG", "READ", "PRINT", "START") and is_reserved(t2):
        _fail("Invalid Symbol!")
    if _is(t1, "START") and not 0 < _atoi(t2) <= MAX_ADDRESS:
        _fail("Invalid Memory Location!")


def _check_three(t1: str, t2: str, t3: str) -> None:
    if _is(t2, "READ", "PRINT"):
        if is_reserved(t1):
            _fail("Invalid Label!")
        if is_reserved(t3):
            _fail("Invalid Symbol!")
    if _is(t1, *_ARITHMETIC):
        if not is_register(t2):
            _fail("Invalid Register!")
        if is_reserved(t3):
            _fail("Invalid Symbol!")
    if is_storage(t2):
        if is_reserved(t1):
            _fail("Invalid Symbol!")
        if _is(t2, "DS") and not 0 < _atoi(t3) <= MAX_ADDRESS:
            _fail("Invalid Memory Location!")
    if _is(t1, "BC"):
        if not is_condition(t2):
            _fail("Invalid Condition Code!")
        if is_reserved(t3):
            _fail("Invalid Symbol!")


def _check_four(t1: str, t2: str, t3: str, t4: str) -> None:
    if is_reserved(t1):
        _fail("Invalid Label!")
    if not is_opcode(t2):
        _fail("Invalid Statement!")
    if not is_register(t3):
        _fail("Invalid Register!")
    if is_reserved(t4):
        _fail("Invalid Symbol!")


def check_statement(tokens: Sequence[str]) -> None:
    """Raise AssemblySyntaxError if the tokens do not form a valid statement."""
    count = len(tokens)
    if count > _MAX_TOKENS:
        _fail("Invalid number of arguments!")
    if count == 0:
        return
    t1, t2, t3, t4 = (*tokens, "", "", "")[:4]
    if count == 1:
        if not _is(t1, "STOP", "END", "LTORG", "START"):
            _fail("Invalid Statement!")
    elif count == 2:
        _check_two(t1, t2)
    elif count == 3:
        _check_three(t1, t2, t3)
    else:
        _check_four(t1, t2, t3, t4)


def check_syntax(lines: Iterable[str]) -> list[Statement]:
    """Check every line, stopping at the first error; return the statements."""
    statements = []
    for number, line in enumerate(lines, 1):
        statement = tokenize(line)
        try:
            check_statement(statement.tokens)
        except AssemblySyntaxError as error:
            raise AssemblySyntaxError(error.reason, number, line) from None
        statements.append(statement)
    return statements


def _place_pool(literals: LiteralTable, lc: int) -> int:
    placed = literals.create_pool(lc)
    return lc + placed - 1 if len(literals) else lc


def build_tables(lines: Iterable[str]) -> tuple[SymbolTable, LiteralTable]:
    """First pass: build the symbol and literal tables with their addresses."""
    symbols = SymbolTable()
    literals = LiteralTable()
    lc = 0
    for line in lines:
        statement = tokenize(line)
        t1, t2, t3, t4 = statement.fields
        count = len(statement.tokens)
        if count == 1:
            if _is(t1, "LTORG", "END"):
                lc = _place_pool(literals, lc)
            lc += 1
        elif count == 2:
            if _is(t1, "START"):
                lc = _atoi(t2)
            elif is_opcode(t1):
                symbols.enter(t2, False)
                lc += 1
            elif _is(t2, "LTORG"):
                lc = _place_pool(literals, lc) + 1
                symbols.enter(t1, True, lc)
                lc += 1
            else:
                symbols.enter(t1, True, lc)
                lc += 1
        elif count == 3:
            if _is(t2, "DS"):
                symbols.enter(t1, True, lc)
                lc += _atoi(t3)
            elif _is(t2, "DC"):
                symbols.enter(t1, True, lc)
                lc += 1
            else:
                if is_opcode(t1):
                    if t3.startswith("="):
                        literals.enter(t3)
                    else:
                        symbols.enter(t3, False)
                else:
                    symbols.enter(t1, True, lc)
                    symbols.enter(t3, False)
                lc += 1
        elif count == 4:
            if t4.startswith("="):
                literals.enter(t4)
                symbols.enter(t1, True, lc)
            else:
                symbols.enter(t1, True, lc)
                symbols.enter(t4, False)
            lc += 1
    return symbols, literals


def _operand_for(
    symbols: SymbolTable, literals: LiteralTable, operand: str
) -> str:
    if operand.startswith("="):
        return literal_operand(literals, operand)
    return symbol_operand(symbols, operand)


def generate_intermediate(
    lines: Iterable[str], symbols: SymbolTable, literals: LiteralTable
) -> list[IntermediateInstruction]:
    """Second pass: the variant-I intermediate code of every non-blank line."""
    instructions = []
    location = 0
    for line in lines:
        statement = tokenize(line)
        t1, t2, t3, t4 = statement.fields
        count = len(statement.tokens)
        ins = IntermediateInstruction()
        if count == 1:
            if _is(t1, "STOP"):
                ins.opcode = imperative_code(t1)
                ins.address = location
                location += 1
            else:
                ins.opcode = directive_code(t1)
        elif count == 2:
            if _is(t1, "START"):
                ins.opcode = directive_code(t1)
                start = _atoi(t2)
                ins.operand = f"<C, {start}>"
                location = start
            elif is_opcode(t1):
                ins.opcode = imperative_code(t1)
                ins.address = location
                location += 1
                ins.operand = symbol_operand(symbols, t2)
            elif _is(t2, "LTORG"):
                ins.opcode = directive_code(t1)
            else:
                ins.opcode = imperative_code(t1)
                ins.address = location
                location += 1
        elif count == 3:
            if _is(t2, "DS"):
                size = _atoi(t3)
                ins.opcode = "<DL, 2>"
                ins.operand = f"<C, {size}>"
                ins.address = location
                location += size
            elif _is(t2, "DC"):
                ins.opcode = "<DL, 1>"
                ins.operand = f"<C, {_atoi(t3[1:])}>"
                ins.address = location
                location += 1
            else:
                if is_opcode(t1):
                    ins.opcode = imperative_code(t1)
                    if _is(t1, "BC"):
                        ins.register = condition_code(t2)
                        ins.operand = symbol_operand(symbols, t3)
                    else:
                        ins.register = register_code(t2)
                        ins.operand = _operand_for(symbols, literals, t3)
                else:
                    ins.opcode = imperative_code(t2)
                    ins.operand = symbol_operand(symbols, t3)
                ins.address = location
                location += 1
        elif count == 4:
            ins.opcode = imperative_code(t2)
            ins.register = register_code(t3)
            ins.operand = _operand_for(symbols, literals, t4)
            ins.address = location
            location += 1
        else:
            continue
        instructions.append(ins)
    return instructions


def _operand_value(
    operand: str, symbols: SymbolTable, literals: LiteralTable
) -> int:
    kind = operand[1:2]
    number = _atoi(operand[4:])
    table: SymbolTable | LiteralTable
    if kind == "S":
        table = symbols
    elif kind == "L":
        table = literals
    else:
        return number
    return table.address_of(number) if 1 <= number <= len(table) else -1


def generate_object(
    instructions: Iterable[IntermediateInstruction],
    symbols: SymbolTable,
    literals: LiteralTable,
) -> str:
    """Object code text: one 'address<TAB>word' line each, ending with -1."""
    lines = []
    for ins in instructions:
        value = _operand_value(ins.operand, symbols, literals)
        kind = ins.opcode[1:2]
        if kind == "D":
            lines.append(f"{ins.address}\t{value}")
            continue
        opcode = _atoi(ins.opcode[5:])
        if opcode == 0:
            lines.append(f"{ins.address}\t000000")
            continue
        if kind == "A":
            continue
        lines.append(f"{ins.address}\t{opcode:02d}{ins.register}{value}")
    return "".join(f"{line}\n" for line in lines) + "-1"


def object_path(source_path: str | os.PathLike[str]) -> str:
    """Path of the object file: the source path with its extension made '.obj'."""
    path = os.fspath(source_path)
    dot = path.rfind(".")
    if dot < 0:
        raise AssemblyError(f"source file name {path!r} has no extension")
    return path[:dot] + ".obj"


def assemble(lines: Iterable[str]) -> _Assembly:
    """Assemble a program given as lines of text."""
    lines = list(lines)
    statements = check_syntax(lines)
    symbols, literals = build_tables(lines)
    if symbols.has_errors():
        raise SymbolError(symbols.diagnostics())
    intermediate = generate_intermediate(lines, symbols, literals)
    code = generate_object(intermediate, symbols, literals)
    return _Assembly(statements, symbols, literals, intermediate, code)


def assemble_file(source_path: str | os.PathLike[str]) -> str:
    """Assemble a source file and write its object file; return that file's path."""
    with open(source_path, encoding="utf-8") as source:
        lines = source.readlines()
    result = assemble(lines)
    target = object_path(source_path)
    with open(target, "w", encoding="utf-8") as out:
        out.write(result.object_code)
    return target


def _say(text: str) -> None:
    print(text, end="")


def _report_syntax(lines: list[str]) -> bool:
    for line in lines:
        _say(f"\n{line}")
        statement = tokenize(line)
        t1, t2, t3, t4 = statement.fields
        _say(
            f"\t---> t1: {t1}\tt2: {t2}\tt3: {t3}\tt4: {t4}\n"
            f"\tNumber of arguments: {len(statement.tokens)}\n"
        )
        try:
            check_statement(statement.tokens)
        except AssemblySyntaxError as error:
            _say(f"\n***{error.reason}***\n")
            return False
        if statement.tokens:
            _say("\nNo error.\n")
    return True


def main(argv: Sequence[str] | None = None) -> int:
    """Assemble the file named on the command line and report every pass."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        _say("\nInvalid number of arguments!\nExiting program!\n")
        return 0
    source_path = args[0]
    try:
        with open(source_path, encoding="utf-8") as source:
            lines = source.readlines()
    except OSError:
        _say("\nFile does not exist!!\nExiting program!\n")
        return 0

    ok = _report_syntax(lines)
    _say(_SEPARATOR)
    if not ok:
        _say(
            "\nSyntax Error! Cannot print symbol table and literal table!"
            "\nExiting program!\n"
        )
        return 0

    _say("".join(lines))
    symbols, literals = build_tables(lines)
    _say(symbols.format())
    _say(literals.format())
    _say(literals.format_pools())
    _say(_SEPARATOR)

    if symbols.has_errors():
        _say("\nSymbol error! Cannot print intermediate code!\nExiting Program!\n")
        _say("\n")
        return 0

    _say("".join(lines))
    intermediate = generate_intermediate(lines, symbols, literals)
    _say(format_intermediate(intermediate))
    code = generate_object(intermediate, symbols, literals)
    try:
        target = object_path(source_path)
        with open(target, "w", encoding="utf-8") as out:
            out.write(code)
    except (OSError, AssemblyError):
        _say("\nFailed to open file!\nExiting program!\n")
        return 0
    _say(f"\nObject file '{target}' created successfully!\n")
    _say("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())