import pytest

from asmsim.assembler import (
    AssemblyError,
    AssemblySyntaxError,
    Statement,
    SymbolError,
    assemble,
    assemble_file,
    build_tables,
    check_statement,
    check_syntax,
    generate_intermediate,
    generate_object,
    main,
    object_path,
    tokenize,
)
from asmsim.intermediate import literal_operand, symbol_operand

PROGRAM = [
    "START 100\n",
    "READ A\n",
    "MOVER AREG, A\n",
    "ADD AREG, ='5'\n",
    "MOVEM AREG, B\n",
    "PRINT B\n",
    "STOP\n",
    "A DS 1\n",
    "B DS 1\n",
    "END\n",
]


def test_tokenize_removes_commas():
    statement = tokenize("MOVER AREG, A\n")
    assert statement.tokens == ("MOVER", "AREG", "A")
    assert statement.fields == ("MOVER", "AREG", "A", "")


def test_tokenize_keeps_at_most_four_tokens():
    assert tokenize("A B C D E").tokens == ("A", "B", "C", "D")


def test_tokenize_blank_line():
    assert tokenize("   \n") == Statement("   \n", ())


@pytest.mark.parametrize(
    "tokens, reason",
    [
        (["FOO"], "Invalid Statement!"),
        (["STOP", "X"], "Invalid Statement!"),
        (["START", "0"], "Invalid Memory Location!"),
        (["READ", "AREG"], "Invalid Symbol!"),
        (["MOVER", "XREG", "A"], "Invalid Register!"),
        (["BC", "XX", "A"], "Invalid Condition Code!"),
        (["A", "DS", "1000"], "Invalid Memory Location!"),
        (["ADD", "X", "MOVER", "AREG"], "Invalid Label!"),
        (["L", "FOO", "AREG", "A"], "Invalid Statement!"),
        (["L", "MOVER", "AREG", "ADD"], "Invalid Symbol!"),
        (["A", "B", "C", "D", "E"], "Invalid number of arguments!"),
    ],
)
def test_check_statement_errors(tokens, reason):
    with pytest.raises(AssemblySyntaxError) as info:
        check_statement(tokens)
    assert info.value.reason == reason


def test_check_syntax_returns_statements():
    statements = check_syntax(PROGRAM)
    assert [s.tokens for s in statements] == [tokenize(line).tokens for line in PROGRAM]


def test_check_syntax_reports_first_bad_line():
    with pytest.raises(AssemblySyntaxError) as info:
        check_syntax(["START 100\n", "FOO\n", "BAR\n"])
    assert info.value.line_number == 2
    assert info.value.line == "FOO\n"


def test_build_tables_addresses():
    symbols, literals = build_tables(PROGRAM)
    names = [s.name for s in symbols]
    assert names == ["A", "B"]
    a, b = symbols[0], symbols[1]
    assert b.address == a.address + 1
    assert [lit.value for lit in literals] == ["='5'"]
    assert literals[0].address == b.address + 1
    assert not symbols.has_errors()


def test_literal_pools_split_by_ltorg():
    lines = ["START 100\n", "MOVER AREG, ='1'\n", "LTORG\n", "ADD AREG, ='2'\n", "STOP\n", "END\n"]
    _, literals = build_tables(lines)
    assert [lit.pool for lit in literals] == [1, 2]
    assert literals.pool_starts() == [lit.pool for lit in literals]


def test_intermediate_addresses_and_operands():
    symbols, literals = build_tables(PROGRAM)
    code = generate_intermediate(PROGRAM, symbols, literals)
    assert len(code) == len(PROGRAM)
    imperative = [ins for ins in code if ins.opcode.startswith("<IS")]
    assert [ins.address for ins in imperative] == list(range(100, 100 + len(imperative)))
    assert code[1].operand == symbol_operand(symbols, "A")
    assert code[3].operand == literal_operand(literals, "='5'")
    assert code[7].address == symbols[0].address
    assert code[0].address == -1 and code[-1].address == -1


def test_intermediate_skips_blank_lines_and_reads_dc():
    lines = ["START 200\n", "\n", "PRINT X\n", "STOP\n", "X DC '5'\n", "END\n"]
    symbols, literals = build_tables(lines)
    code = generate_intermediate(lines, symbols, literals)
    assert len(code) == 5
    assert code[3].operand == "<C, 5>"


def test_object_code_worked_example():
    result = assemble(PROGRAM)
    assert result.object_code == (
        "100\t090106\n101\t041106\n102\t011108\n103\t051107\n"
        "104\t100107\n105\t000000\n106\t1\n107\t1\n-1"
    )


def test_generate_object_matches_assemble():
    symbols, literals = build_tables(PROGRAM)
    code = generate_intermediate(PROGRAM, symbols, literals)
    text = generate_object(code, symbols, literals)
    assert text == assemble(PROGRAM).object_code
    assert text.endswith("\n-1")
    stop = next(ins for ins in code if ins.opcode == "<IS, 0>")
    assert f"{stop.address}\t000000" in text.splitlines()


def test_redeclared_symbol_raises_symbol_error():
    lines = ["START 100\n", "READ A\n", "STOP\n", "A DS 1\n", "A DS 1\n", "END\n"]
    with pytest.raises(SymbolError) as info:
        assemble(lines)
    assert any(d.name == "A" and d.is_error for d in info.value.diagnostics)


def test_assemble_raises_syntax_error():
    with pytest.raises(AssemblySyntaxError):
        assemble(["START 100\n", "MOVER XREG, A\n"])


def test_object_path():
    assert object_path("prog.asm") == "prog.obj"
    with pytest.raises(AssemblyError):
        object_path("program")


def test_assemble_file_writes_object(tmp_path):
    source = tmp_path / "prog.asm"
    source.write_text("".join(PROGRAM))
    target = assemble_file(source)
    assert target == str(tmp_path / "prog.obj")
    assert (tmp_path / "prog.obj").read_text() == assemble(PROGRAM).object_code


def test_main_writes_object_and_reports(tmp_path, capsys):
    source = tmp_path / "prog.asm"
    source.write_text("".join(PROGRAM))
    assert main([str(source)]) == 0
    out = capsys.readouterr().out
    assert "created successfully" in out
    assert "Symbol Table" in out
    assert (tmp_path / "prog.obj").read_text() == assemble(PROGRAM).object_code


def test_main_wrong_argument_count(capsys):
    assert main([]) == 0
    assert "Invalid number of arguments!" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "none.asm")]) == 0
    assert "File does not exist!!" in capsys.readouterr().out


def test_main_syntax_error_writes_nothing(tmp_path, capsys):
    source = tmp_path / "bad.asm"
    source.write_text("START 100\nFOO\nEND\n")
    main([str(source)])
    out = capsys.readouterr().out
    assert "***Invalid Statement!***" in out
    assert "Syntax Error!" in out
    assert not (tmp_path / "bad.obj").exists()


def test_main_symbol_error_writes_nothing(tmp_path, capsys):
    source = tmp_path / "dup.asm"
    source.write_text("START 100\nREAD A\nSTOP\nA DS 1\nA DS 1\nEND\n")
    main([str(source)])
    out = capsys.readouterr().out
    assert "Symbol error!" in out
    assert not (tmp_path / "dup.obj").exists()