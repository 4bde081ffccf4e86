# asmsim

asmsim has two parts. The first is a two-pass assembler for a small teaching machine. The
machine has four registers (`AREG`, `BREG`, `CREG`, `DREG`) and 1000 words of memory. The
second part is an interactive simulator. It loads the object files the assembler writes and
runs them.

## Installation

```
pip install .
```

## Assembling a program

Write a source file such as `sum.asm`:

```
START 100
READ A
READ B
MOVER AREG, A
ADD AREG, B
MOVEM AREG, C
PRINT C
STOP
A DS 1
B DS 1
C DS 1
END
```

Then assemble it:

```
asmsim-assemble sum.asm
```

The assembler echoes each statement with its tokens and reports the first syntax error it
finds. If the syntax is correct, it prints the symbol table, the literal table and the pool
table, followed by any symbol errors and warnings. If there are no symbol errors, it prints
the variant-I intermediate code. It then writes the object file next to the source, with the
source's extension replaced by `.obj` (here `sum.obj`).

A statement has at most four fields: an optional label, a mnemonic, and up to two operands.
Commas count as blanks. The mnemonics are:

- Imperative: `STOP ADD SUB MULT MOVER MOVEM COMP BC DIV READ PRINT`
- Directives: `START END LTORG`
- Declarative: `DC DS`
- Condition codes for `BC`: `LT LE EQ GT GE ANY`

`EQU` and `ORIGIN` are reserved words, so they cannot be used as labels or symbols. The
assembler gives them no meaning of their own.

An operand that starts with `=` is a literal. Literals are assigned addresses in a new pool at
each `LTORG` and at `END`.

## Running an object file

```
asmsim-run
```

The simulator shows a menu:

1. Load a `.obj` file. It asks again while the name is invalid. Entering `exit` quits.
2. Print the program as location and word columns.
3. Execute the program from its first location until a `STOP` word. `READ` asks for a number,
   and `PRINT` shows a value.
4. Trace the program. Before each instruction it shows the opcode, register and address, and
   after it the values at that address and in that register.
5. Exit.

Only one file can be loaded per session. A division by zero prints `Zero Division Error!` and
execution continues with the next instruction.

## Using it from Python

```python
import sys

from asmsim.assembler import assemble, assemble_file
from asmsim.simulator import Machine

with open("sum.asm") as source:
    result = assemble(source.readlines())
print(result.object_code)

path = assemble_file("sum.asm")  # writes sum.obj and returns its path

machine = Machine()
machine.load_file(path)
machine.execute(read_number=lambda: 4, write=sys.stdout.write)
print(machine.registers, machine.memory[100:110])
```

`assemble` returns the parsed statements, the symbol table, the literal table, the intermediate
code and the object code text as the fields `statements`, `symbols`, `literals`,
`intermediate` and `object_code`. It does not write any file.

The module `asmsim.assembler` also runs each pass on its own:

- `tokenize`
- `check_statement` and `check_syntax`
- `build_tables`
- `generate_intermediate`
- `generate_object`
- `object_path`

All of these raise exceptions derived from `AssemblyError`. `AssemblySyntaxError` carries the
reason, line number and line. `SymbolError` carries the symbol table diagnostics.

`Machine` offers the following methods:

- `load`, which takes lines of object code, and `load_file`
- `listing`
- `decode`, which splits a word into opcode, register code and address
- `step`, `execute` and `trace`

The last three take an optional `read_number` callable and an optional `write` callable. When
these are omitted, they use standard input and standard output. `asmsim.console.Console` is the
menu loop itself. It accepts custom `read_line` and `write` callables.

## Running the tests

```
pip install .[test]
pytest
```