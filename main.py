"""
Paren Programming Language - Main Entry Point
A minimal call-tree scripting language
"""

import sys
import argparse
import os
from typing import List, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import ParenError, ParenErrorHandler, ParenParseError
from expressions import is_literal
from parsing import create_parser, create_debug_parser, load_source, pretty_print_ast
from interpreter import create_interpreter, create_debug_interpreter
from stdlib import list_builtin_functions, to_display_string


VERSION = "Paren v0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='paren',
      description='Paren Programming Language - call-tree scripting',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.paren            # Run a Paren script
  %(prog)s -i                      # Interactive mode
  %(prog)s --tokens script.paren   # Tokenize file and list tokens
  %(prog)s --parse script.paren    # Parse file and show call trees
  %(prog)s --debug script.paren    # Run with debug output on stderr
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Paren script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and list tokens (for debugging)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show call trees (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def fail(error: BaseException, script_path: str) -> None:
  """Print an error report and exit with status 1"""
  print(ParenErrorHandler(script_path).report(error))
  sys.exit(1)


def tokenize_file(script_path: str, debug: bool = False) -> None:
  """Tokenize a Paren script file and list the tokens"""
  parser = create_debug_parser() if debug else create_parser()
  try:
    tokens = parser.tokenize(load_source(script_path))
  except ParenError as e:
    fail(e, script_path)

  for token in tokens:
    print(token)


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Paren script file and show the call trees"""
  parser = create_debug_parser() if debug else create_parser()
  try:
    exprs = parser.parse_file(script_path)
  except ParenError as e:
    fail(e, script_path)

  print(f"Parsed {len(exprs)} top-level statements:")
  print("=" * 50)
  for i, expr in enumerate(exprs, 1):
    print(f"\nStatement {i}:")
    print(pretty_print_ast(expr), end='')


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Paren script file"""
  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  try:
    exprs = parser.parse_file(script_path)
    if debug:
      print(f"Parsed {len(exprs)} statements", file=sys.stderr)
    interpreter.interpret_program(exprs)
  except (ParenError, RecursionError) as e:
    fail(e, script_path)


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.paren_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First run, no history yet

  readline.set_history_length(1000)

  completions = list_builtin_functions() + [":env", ":help", ":parse", ":tokens", "exit"]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def is_incomplete(code: str) -> bool:
  """True while the accumulated input has unclosed parentheses outside strings"""
  depth = 0
  in_string = False
  for char in code:
    if char == '"':
      in_string = not in_string
    elif not in_string and char == '(':
      depth += 1
    elif not in_string and char == ')':
      depth -= 1
  return depth > 0


def describe_value(value) -> str:
  if is_literal(value):
    return to_display_string(value)
  return str(value)


def print_help() -> None:
  print("REPL Commands:")
  print("  :tokens <code>    - Show tokens")
  print("  :parse <code>     - Show parsed call trees")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  =(x 5)                           - Bind a variable")
  print("  =(double func(n *(n 2)))         - Define a function")
  print("  print(double(21))                - Call and print")
  print("  ifElse(>(x 3) \"big\" \"small\")     - Lazy conditional")


def run_interactive_mode(debug: bool = False) -> None:
  """Run Paren in interactive mode with one shared environment"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  pending: List[str] = []

  while True:
    try:
      line = input("...   " if pending else "paren> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if not pending:
      command = line.strip()
      if command == "exit":
        break
      if not command:
        continue

      if command == ":help":
        print_help()
        continue

      if command == ":env":
        bindings = interpreter.bindings
        if bindings:
          for name, value in bindings.items():
            print(f"  {name} = {describe_value(value)}")
        else:
          print("  (no user-defined bindings)")
        continue

      if command.startswith(":tokens "):
        for token in parser.tokenize(command[len(":tokens "):]):
          print(token)
        continue

      if command.startswith(":parse "):
        try:
          for expr in parser.parse_string(command[len(":parse "):]):
            print(pretty_print_ast(expr), end='')
        except ParenParseError as e:
          print(e)
        continue

    pending.append(line)
    code = "\n".join(pending)
    if is_incomplete(code):
      continue
    pending = []

    try:
      for expr in parser.parse_string(code):
        result = interpreter.evaluate(expr)
        print(f"=> {describe_value(result)}")
    except (ParenError, RecursionError) as e:
      print(ParenErrorHandler("<repl>").report(e))


def show_language_info() -> None:
  """Show Paren language information"""
  print("Paren Programming Language")
  print("=" * 50)
  print("Every statement is a call: name(arg arg ...)")
  print(f"Built-ins: {' '.join(list_builtin_functions())}")
  print()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Paren"""
  if argv is None:
    argv = sys.argv[1:]
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  # No arguments - show info and start interactive mode
  if not argv:
    show_language_info()
    print("Starting interactive mode...")
    print()
    run_interactive_mode(debug=False)
    return

  if args.script:
    if args.tokens:
      tokenize_file(args.script, debug=args.debug)
    elif args.parse:
      parse_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, debug=args.debug)

  elif args.interactive:
    run_interactive_mode(debug=args.debug)

  else:
    arg_parser.print_help()
    print()
    show_language_info()


if __name__ == "__main__":
  main()
