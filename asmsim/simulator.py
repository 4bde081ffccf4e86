"""Machine that loads object code into memory and runs it."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Callable, Iterable
from typing import NamedTuple, Optional

from asmsim.mnemonics import REGISTERS

MEMORY_SIZE = 1000
REGISTER_COUNT = len(REGISTERS)
_SEPARATOR = "\n" + "-" * 64 + "\n"
_DELIMITERS = re.compile(r"[ \t\r\n,]+")
_INTEGER = re.compile(r"\s*([+-]?\d+)")

NumberReader = Callable[[], Optional[int]]
Writer = Callable[[str], object]


class _Decoded(NamedTuple):
    opcode: int
    register: int
    address: int


def _atoi(text: str) -> int:
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _cmod(a: int, b: int) -> int:
    return a - _cdiv(a, b) * b


def _fields(line: str) -> tuple[str, str]:
    tokens = [tok for tok in _DELIMITERS.split(line) if tok][:2]
    padded = (*tokens, "", "")
    return padded[0], padded[1]


def parse_object(lines: Iterable[str]) -> list[tuple[int, int]]:
    """Read (location, word) pairs from object-code lines, one per line."""
    pairs = []
    for line in lines:
        location, word = _fields(line)
        pairs.append((_atoi(location), _atoi(word)))
    return pairs


def _read_number_from_stdin() -> int | None:
    match = _INTEGER.match(input())
    return int(match.group(1)) if match else None


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)


class Machine:
    """A memory of words, four registers and a program counter."""

    def __init__(self) -> None:
        self.memory: list[int] = [0] * MEMORY_SIZE
        self.registers: list[int] = [0] * REGISTER_COUNT
        self.pc: int = -1
        self.lines: list[str] = []
        self._compare: tuple[int, int] = (0, 0)

    def load(self, lines: Iterable[str]) -> None:
        """Place object code in a fresh memory; the first location becomes the pc."""
        self.lines = list(lines)
        self.memory = [0] * MEMORY_SIZE
        start = -1
        for location, word in parse_object(self.lines):
            if start < 0 and location >= 0:
                start = location
            if 0 <= location < MEMORY_SIZE:
                self.memory[location] = word
        self.pc = start

    def load_file(self, path: str | os.PathLike[str]) -> None:
        """Load an object file."""
        with open(path, encoding="utf-8") as source:
            self.load(source.readlines())

    def listing(self) -> str:
        """The loaded object code as location and word columns."""
        body = "".join(
            "\n{}\t{}".format(*_fields(line)) for line in self.lines
        )
        return body + _SEPARATOR

    def decode(self, word: int) -> _Decoded:
        """Split a word into opcode, register (or condition) code and address."""
        address = _cmod(word, 1000)
        rest = _cdiv(word, 1000)
        return _Decoded(_cdiv(rest, 10), _cmod(rest, 10), address)

    def _cell(self, address: int) -> int:
        if not 0 <= address < MEMORY_SIZE:
            raise IndexError(f"memory address {address} out of range")
        return address

    def _register(self, code: int) -> int:
        if not 1 <= code <= REGISTER_COUNT:
            raise IndexError(f"invalid register code {code}")
        return code - 1

    def _branch_taken(self, condition: int) -> bool:
        left, right = self._compare
        tests = {
            1: left < right,
            2: left <= right,
            3: left == right,
            4: left > right,
            5: left >= right,
            6: True,
        }
        return tests.get(condition, False)

    def step(
        self,
        pc: int,
        read_number: NumberReader | None = None,
        write: Writer | None = None,
    ) -> int | None:
        """Execute the word at pc; return the next pc, or None on halt."""
        read_number = read_number or _read_number_from_stdin
        write = write or _write_stdout
        word = self.memory[self._cell(pc)]
        opcode, reg, address = self.decode(word)
        if opcode == 0:
            if address == 0 and reg == 0:
                return None
            return pc + 1
        if opcode in (1, 2, 3, 4, 5, 6, 8):
            slot = self._register(reg)
            cell = self._cell(address)
            value = self.memory[cell]
            if opcode == 1:
                self.registers[slot] += value
            elif opcode == 2:
                self.registers[slot] -= value
            elif opcode == 3:
                self.registers[slot] *= value
            elif opcode == 4:
                self.registers[slot] = value
            elif opcode == 5:
                self.memory[cell] = self.registers[slot]
            elif opcode == 6:
                self._compare = (self.registers[slot], value)
            elif value == 0:
                write("\nZero Division Error!\n")
            else:
                self.registers[slot] = _cdiv(self.registers[slot], value)
        elif opcode == 7:
            if self._branch_taken(reg):
                return address
        elif opcode == 9:
            cell = self._cell(address)
            write("\nEnter a number: ")
            number = read_number()
            if number is not None:
                self.memory[cell] = number
        elif opcode == 10:
            write(f"\n---> Output: {self.memory[self._cell(address)]}\n")
        return pc + 1

    def execute(
        self, read_number: NumberReader | None = None, write: Writer | None = None
    ) -> None:
        """Run from the loaded pc until a STOP word."""
        self._compare = (0, 0)
        pc: int | None = self.pc
        while pc is not None:
            pc = self.step(pc, read_number, write)

    def trace(
        self, read_number: NumberReader | None = None, write: Writer | None = None
    ) -> None:
        """Run like execute, reporting every instruction and its effect."""
        write = write or _write_stdout
        self._compare = (0, 0)
        pc: int | None = self.pc
        while pc is not None:
            opcode, reg, address = self.decode(self.memory[self._cell(pc)])
            write(f"\nOpcode: {opcode}\nRegister: {reg}\nAddress: {address}\n")
            pc = self.step(pc, read_number, write)
            if pc is None:
                return
            if address != 0 and opcode != 0 and reg != 0:
                write(f"Value at address {address}: {self.memory[address]}\n")
            if 1 <= reg <= REGISTER_COUNT:
                write(
                    f"Value at register {REGISTERS[reg - 1]}: "
                    f"{self.registers[reg - 1]}\n"
                )