"""CLI tests for the mathsh entry point (file mode and interactive session)."""

import io
import json
import logging
from pathlib import Path

import pytest

from mathsh.cli import USAGE, main


@pytest.fixture
def script(tmp_path: Path):
    def write(source: str) -> str:
        path = tmp_path / "prog.math"
        path.write_text(source)
        return str(path)

    return write


def test_help(capsys):
    assert main(["--help"]) == 0
    assert capsys.readouterr().out == USAGE


def test_unknown_flag(capsys):
    assert main(["--nope"]) == 2
    assert "unknown flag '--nope'" in capsys.readouterr().err


def test_too_many_arguments(capsys):
    assert main(["a.math", "b.math"]) == 2
    assert "unexpected argument 'b.math'" in capsys.readouterr().err


def test_run_file_prints_only_print_output(script, capsys):
    path = script("let x = 2\nprint x * 3\nx\n")
    assert main([path]) == 0
    captured = capsys.readouterr()
    assert captured.out == "6\n"
    assert captured.err == ""


def test_run_file_ast(script, capsys):
    path = script("let x = 2\nprint x\n")
    assert main(["--ast", path]) == 0
    trees = json.loads(capsys.readouterr().out)
    assert [t["kind"] for t in trees] == ["VarDecl", "Print"]
    assert trees[0]["init"] == {"kind": "IntLit", "offset": 8, "value": 2}


def test_ast_does_not_evaluate(script, capsys):
    path = script("print 1 / 0")
    assert main([path, "--ast"]) == 0
    out = capsys.readouterr().out
    assert json.loads(out)[0]["kind"] == "Print"


def test_parse_error(script, capsys):
    path = script("1 +")
    assert main([path]) == 1
    err = capsys.readouterr().err
    assert "mathsh: parse error: unexpected end of input" in err
    assert "1| 1 +" in err


def test_runtime_error_after_output(script, capsys):
    path = script("print 1\nprint y\n")
    assert main([path]) == 1
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert "mathsh: runtime error: unbound variable 'y'" in captured.err
    assert "2| print y" in captured.err


def test_division_by_zero(script, capsys):
    path = script("10 / (5 - 5)")
    assert main([path]) == 1
    assert "integer division by zero" in capsys.readouterr().err


def test_oversized_literal(script, capsys):
    path = script("1 + " + "9" * 5000)
    assert main([path]) == 1
    assert "malformed number" in capsys.readouterr().err


def test_empty_file(script, capsys):
    path = script("\n\n")
    assert main([path]) == 1
    assert "no input to parse" in capsys.readouterr().err


def test_deeply_nested_file(script, capsys):
    depth = 5000
    path = script("(" * depth + "1" + ")" * depth)
    assert main([path]) == 1
    assert "nested too deeply" in capsys.readouterr().err


def test_missing_file(tmp_path: Path, capsys):
    path = str(tmp_path / "missing.math")
    assert main([path]) == 1
    assert "No such file or directory" in capsys.readouterr().err


def test_invalid_utf8(tmp_path: Path, capsys):
    path = tmp_path / "bad.math"
    path.write_bytes(b"1 + \xff\xfe")
    assert main([str(path)]) == 1
    assert "invalid utf-8" in capsys.readouterr().err


def test_verbose_logs_bindings(script, caplog):
    caplog.set_level(logging.DEBUG, logger="mathsh")
    path = script("let x = 2")
    assert main(["-v", path]) == 0
    assert "bind x = 2" in caplog.text


# ---------------------------------------------------------------------------
# Interactive session
# ---------------------------------------------------------------------------


def _session(monkeypatch, capsys, text: str, argv: list[str] | None = None):
    monkeypatch.setattr("sys.stdin", io.StringIO(text))
    code = main(argv or [])
    return code, capsys.readouterr()


def test_repl_keeps_environment(monkeypatch, capsys):
    code, captured = _session(monkeypatch, capsys, "let x = 4\nx * 2\n")
    assert code == 0
    assert captured.out == "math> 4\nmath> 8\nmath> \n"


def test_repl_survives_errors(monkeypatch, capsys):
    code, captured = _session(
        monkeypatch, capsys, "let x = 4\n\n1 +\ny\n7 / 0\nx\n"
    )
    assert code == 0
    assert captured.out == "math> 4\nmath> math> math> math> math> 4\nmath> \n"
    assert "unexpected end of input" in captured.err
    assert "unbound variable 'y'" in captured.err
    assert "integer division by zero" in captured.err


def test_repl_several_expressions_per_line(monkeypatch, capsys):
    code, captured = _session(monkeypatch, capsys, "1 2.5 true\n")
    assert code == 0
    assert captured.out == "math> 1\n2.5\ntrue\nmath> \n"


def test_repl_print_shows_value_twice(monkeypatch, capsys):
    code, captured = _session(monkeypatch, capsys, "print 3\n")
    assert captured.out == "math> 3\n3\nmath> \n"


def test_repl_ast(monkeypatch, capsys):
    code, captured = _session(monkeypatch, capsys, "x\n", ["--ast"])
    assert code == 0
    body = captured.out[len("math> ") : -len("math> \n")]
    assert json.loads(body) == [{"kind": "Var", "offset": 0, "name": "x"}]


def test_repl_oversized_literal_keeps_session(monkeypatch, capsys):
    code, captured = _session(monkeypatch, capsys, "9" * 5000 + "\n2\n")
    assert code == 0
    assert captured.out == "math> math> 2\nmath> \n"
    assert "malformed number" in captured.err


def test_repl_interrupt_during_evaluation(monkeypatch, capsys):
    def interrupted(env, line, dump_ast):
        raise KeyboardInterrupt

    monkeypatch.setattr("mathsh.cli._interact", interrupted)
    code, captured = _session(monkeypatch, capsys, "1 + 2\n")
    assert code == 130
    assert captured.out == "math> \n"
