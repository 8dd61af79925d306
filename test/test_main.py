"""
Driver tests for the Monkey interpreter
Tests the submission pipeline, script mode and the interactive loop
"""

import sys
import pytest
import main
from environment import Environment
from main import run_interactive_mode, run_source
from objects import NULL


def run_cli(*args):
  """Call main() without changing the host recursion limit"""
  main.main(list(args) + ["--recursion-limit", str(sys.getrecursionlimit())])


def feed_input(monkeypatch, lines):
  """Replace input() with a scripted session ending in EOF"""
  pending = iter(lines)

  def fake_input(prompt=""):
    try:
      return next(pending)
    except StopIteration:
      raise EOFError

  monkeypatch.setattr("builtins.input", fake_input)
  monkeypatch.setattr(main, "READLINE_AVAILABLE", False)


class TestRunSource:
  """Test the single submission pipeline"""

  def test_displays_result(self, env):
    output = []
    result = run_source("1 + 2", env, write=output.append)
    assert result.value == 3
    assert output == ["3"]

  def test_null_result_is_not_displayed(self, env):
    output = []
    assert run_source("let a = 1;", env, write=output.append) is NULL
    assert output == []

  def test_parse_errors_skip_evaluation(self, env):
    output = []
    assert run_source("let a 1; let b = 2;", env, write=output.append) is None
    assert output == ["parser errors:\n\texpected next token to be =, got INT instead"]
    assert "b" not in env

  def test_runtime_error_is_displayed(self, env):
    output = []
    run_source("foobar", env, write=output.append)
    assert output == ["ERROR: identifier not found: foobar"]

  def test_environment_is_shared(self):
    env = Environment.new()
    run_source("let greet = fn(n) { \"hi \" + n };", env, write=lambda _: None)
    output = []
    run_source('greet("bob")', env, write=output.append)
    assert output == ["hi bob"]


class TestScriptMode:
  """Test running files from the command line"""

  def test_runs_script(self, tmp_path, capsys):
    script = tmp_path / "prog.mk"
    script.write_text("let double = fn(x) { x * 2 };\nputs(double(2));\ndouble(21)\n")
    run_cli(str(script))
    assert capsys.readouterr().out == "4\n42\n"

  def test_parse_errors_exit_nonzero(self, tmp_path, capsys):
    script = tmp_path / "bad.mk"
    script.write_text("let x 5;\n")
    with pytest.raises(SystemExit) as exc_info:
      run_cli(str(script))
    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "expected next token to be =, got INT instead" in out

  def test_runtime_error_exits_nonzero(self, tmp_path, capsys):
    script = tmp_path / "boom.mk"
    script.write_text("1 / 0")
    with pytest.raises(SystemExit) as exc_info:
      run_cli(str(script))
    assert exc_info.value.code == 1
    assert "ERROR: division by zero: 1 / 0" in capsys.readouterr().out

  def test_missing_script(self, tmp_path, capsys):
    with pytest.raises(SystemExit):
      run_cli(str(tmp_path / "nope.mk"))
    assert "does not exist" in capsys.readouterr().out

  def test_parse_flag(self, tmp_path, capsys):
    script = tmp_path / "prog.mk"
    script.write_text("let a = 1 + 2 * 3;\n-a")
    run_cli("--parse", str(script))
    lines = capsys.readouterr().out.splitlines()
    assert "let a = (1 + (2 * 3))" in lines
    assert "(-a)" in lines

  def test_tokens_flag(self, tmp_path, capsys):
    script = tmp_path / "prog.mk"
    script.write_text("let a")
    run_cli("--tokens", str(script))
    assert capsys.readouterr().out.splitlines() == [
        "1:1\tLET\t'let'",
        "1:5\tIDENT\t'a'",
        "1:6\tEOF\t''",
    ]

  def test_version(self, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main(["--version"])
    assert exc_info.value.code == 0
    assert "Monkey v" in capsys.readouterr().out


class TestInteractiveMode:
  """Test the read-eval-print loop"""

  def test_session_keeps_bindings(self, monkeypatch, capsys):
    feed_input(monkeypatch, ["let a = 2", "a * 21", "exit"])
    run_interactive_mode()
    assert "42" in capsys.readouterr().out.splitlines()

  def test_errors_do_not_end_session(self, monkeypatch, capsys):
    feed_input(monkeypatch, ["let x 5", "foobar", "1 + 1"])
    run_interactive_mode()
    lines = capsys.readouterr().out.splitlines()
    assert "\texpected next token to be =, got INT instead" in lines
    assert "ERROR: identifier not found: foobar" in lines
    assert "2" in lines
    assert lines[-1] == "Goodbye!"

  def test_commands(self, monkeypatch, capsys):
    feed_input(monkeypatch, ["let a = [1, 2]", ":env", ":parse 1 + 2 * 3", ":help"])
    run_interactive_mode()
    out = capsys.readouterr().out
    assert "  a = [1, 2]" in out.splitlines()
    assert "(1 + (2 * 3))" in out.splitlines()
    assert "REPL Commands:" in out

  def test_runaway_recursion_is_reported(self, monkeypatch, capsys):
    feed_input(monkeypatch, ["let f = fn(x) { f(x) }; f(1)", "7"])
    run_interactive_mode()
    lines = capsys.readouterr().out.splitlines()
    assert "Error: Maximum call depth exceeded" in lines
    assert "7" in lines
