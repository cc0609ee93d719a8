"""
Command line tests for Paren
Script execution, debugging flags, exit status and the REPL
"""

import pytest
import main
from main import is_incomplete


@pytest.fixture
def script(tmp_path):
  """Write program text to a script file and return its path"""
  def write_script(source, name="prog.paren"):
    path = tmp_path / name
    path.write_text(source)
    return str(path)
  return write_script


@pytest.fixture
def repl_input(monkeypatch):
  """Feed lines to the REPL in place of the terminal"""
  monkeypatch.setattr(main, "READLINE_AVAILABLE", False)

  def feed(*lines):
    remaining = iter(lines)

    def fake_input(prompt=""):
      try:
        return next(remaining)
      except StopIteration:
        raise EOFError
    monkeypatch.setattr("builtins.input", fake_input)
  return feed


class TestScriptExecution:
  """Test running script files"""

  def test_run_script(self, script, capsys):
    main.main([script('=(x 2)\nprint(*(x 21))\nprint("done")')])
    assert capsys.readouterr().out == "42\ndone\n"

  def test_missing_file(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main([str(tmp_path / "missing.paren")])
    assert exc_info.value.code == 1
    assert "not found" in capsys.readouterr().out

  def test_parse_error_exit_status(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main([script("print(1)\nprint(2")])
    assert exc_info.value.code == 1
    assert "Parse error at line 2" in capsys.readouterr().out

  def test_runtime_error_exit_status(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main([script("print(1)\nprint(nope)")])
    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert out.startswith("1\n")
    assert "Runtime error (UndeclaredVariable)" in out

  def test_recursion_error_reported(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main([script("=(loop func(n loop(n)))\nloop(1)")])
    assert exc_info.value.code == 1
    assert "maximum recursion depth" in capsys.readouterr().out

  def test_debug_flag(self, script, capsys):
    main.main(["--debug", script("print(1)")])
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert "[run] statement 1" in captured.err


class TestDebuggingFlags:
  """Test --tokens, --parse and --version"""

  def test_tokens(self, script, capsys):
    main.main(["--tokens", script("print(1)")])
    assert capsys.readouterr().out.splitlines() == ["IDENTIFIER('print')", "(", "INT(1)", ")"]

  def test_parse(self, script, capsys):
    main.main(["--parse", script("print(1)")])
    out = capsys.readouterr().out
    assert "Parsed 1 top-level statements" in out
    assert "Call(print)" in out

  def test_parse_error(self, script, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main(["--parse", script("42")])
    assert exc_info.value.code == 1

  def test_version(self, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main(["--version"])
    assert exc_info.value.code == 0
    assert main.VERSION in capsys.readouterr().out


class TestInteractiveMode:
  """Test the REPL loop"""

  def test_evaluates_lines(self, repl_input, capsys):
    repl_input("=(x 5)", "print(+(x 1))", "exit")
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "=> 5" in out
    assert "6\n=> 6" in out

  def test_accumulates_open_parentheses(self, repl_input, capsys):
    repl_input("print(", '"a (b"', ")", "exit")
    main.main(["-i"])
    assert "a (b\n=> a (b" in capsys.readouterr().out

  def test_errors_do_not_end_session(self, repl_input, capsys):
    repl_input("print(nope)", "print(1)", "exit")
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "UndeclaredVariable" in out
    assert "=> 1" in out

  def test_env_command(self, repl_input, capsys):
    repl_input(":env", "=(x 3)", ":env", "exit")
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "(no user-defined bindings)" in out
    assert "  x = 3" in out

  def test_tokens_and_parse_commands(self, repl_input, capsys):
    repl_input(":tokens f(1)", ":parse f(1)", ":parse f(", "exit")
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "INT(1)" in out
    assert "Call(f)" in out
    assert "Missing closing parenthesis" in out

  def test_end_of_input(self, repl_input, capsys):
    repl_input()
    main.main(["-i"])
    assert "Goodbye!" in capsys.readouterr().out


class TestIncompleteInput:
  """Test REPL continuation detection"""

  @pytest.mark.parametrize("code,expected", [
    ("print(1)", False),
    ("print(", True),
    ("f(g(1)", True),
    ('print("(")', False),
    ('print(")"', True),
    ("", False),
  ])
  def test_is_incomplete(self, code, expected):
    assert is_incomplete(code) == expected
