from asmsim.console import Console

PROGRAM = (
    "100\t090106\n101\t041106\n102\t011107\n103\t051108\n"
    "104\t100108\n105\t000000\n106\t0\n107\t5\n108\t0\n-1"
)


def _console(lines):
    it = iter(lines)

    def read_line():
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    out = []
    return Console(read_line, out.append), out


def _program(tmp_path):
    path = tmp_path / "prog.obj"
    path.write_text(PROGRAM, encoding="utf-8")
    return str(path)


def test_print_before_load_reports():
    console, out = _console(["2", "5"])
    console.run()
    assert "\nFile not loaded!" in out
    assert console.loaded is False


def test_invalid_choice_reported():
    console, out = _console(["9"])
    console.run()
    assert "\nEnter a valid choice!\n" in out


def test_load_execute_and_exit(tmp_path):
    console, out = _console(["1", _program(tmp_path), "3", "7", "5"])
    console.run()
    assert "\nFile loaded successfully!\n" in out
    assert "\n---> Output: 12\n" in out
    assert out[-1] == "\nFile closed successfully! Exiting program...\n\n"


def test_load_twice_reports_already_loaded(tmp_path):
    console, out = _console(["1", _program(tmp_path), "1"])
    console.run()
    assert "\nFile already loaded!\n" in out


def test_bad_file_name_then_exit(tmp_path):
    console, out = _console(["1", str(tmp_path / "missing.obj"), "exit", "2"])
    console.run()
    assert "\nInvalid file name!\nEnter again!\n" in out
    assert "\nFile not loaded!" not in out
    assert console.loaded is False


def test_handle_exit_returns_false():
    console, _ = _console([])
    assert console.handle(5) is False
    assert console.handle(None) is True


def test_listing_after_load(tmp_path):
    console, out = _console(["1", _program(tmp_path), "2"])
    console.run()
    listing = [chunk for chunk in out if chunk.startswith("\n100\t090106")]
    assert len(listing) == 1


def test_trace_through_console(tmp_path):
    console, out = _console(["1", _program(tmp_path), "4", "7"])
    console.run()
    assert "Value at register AREG: 7\n" in out