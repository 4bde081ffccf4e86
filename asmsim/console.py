"""Interactive menu for loading, listing, running and tracing object files."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable, Sequence

from asmsim.simulator import Machine

_MENU = (
    "\n\n1. Load .obj file\n2. Print Program\n3. Execute Program\n4. Trace \n"
    "5. Exit\n\n---> Enter your choice: "
)
_INTEGER = re.compile(r"\s*([+-]?\d+)")


def _first_int(text: str) -> int | None:
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else None


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)


class Console:
    """Menu loop over a Machine; reading past the end of input ends the loop."""

    def __init__(
        self,
        read_line: Callable[[], str] | None = None,
        write: Callable[[str], object] | None = None,
        machine: Machine | None = None,
    ) -> None:
        self.read_line = read_line or input
        self.write = write or _write_stdout
        self.machine = machine or Machine()
        self.loaded = False

    def _read_number(self) -> int | None:
        return _first_int(self.read_line())

    def run(self) -> None:
        """Show the menu and handle choices until exit or end of input."""
        try:
            while True:
                self.write(_MENU)
                choice = _first_int(self.read_line())
                if not self.handle(choice):
                    return
        except EOFError:
            return

    def _load(self) -> bool:
        while True:
            self.write("\nEnter file name: ")
            words = self.read_line().split()
            name = words[0] if words else ""
            if name.lower() == "exit":
                self.write("\nExiting Program...\n")
                return False
            try:
                self.machine.load_file(name)
            except OSError:
                self.write("\nInvalid file name!\nEnter again!\n")
                continue
            self.write("\nFile loaded successfully!\n")
            self.loaded = True
            return True

    def handle(self, choice: int | None) -> bool:
        """Carry out one menu choice; return False when the program should end."""
        if choice == 1:
            if self.loaded:
                self.write("\nFile already loaded!\n")
                return True
            return self._load()
        if choice == 2:
            if not self.loaded:
                self.write("\nFile not loaded!")
                return True
            self.write("\n")
            self.write(self.machine.listing())
            return True
        if choice in (3, 4):
            if not self.loaded:
                self.write("\nFile not loaded!\n")
                return True
            self.write("\n")
            run = self.machine.execute if choice == 3 else self.machine.trace
            run(self._read_number, self.write)
            return True
        if choice == 5:
            if self.loaded:
                self.write("\nFile closed successfully! Exiting program...\n\n")
            return False
        self.write("\nEnter a valid choice!\n")
        return True


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive simulator."""
    Console().run()
    return 0


if __name__ == "__main__":
    sys.exit(main())