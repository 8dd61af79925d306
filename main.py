"""
Monkey Programming Language - Main Entry Point
Runs script files or an interactive read-eval-print loop
"""

import sys
import argparse
from pathlib import Path
from typing import Callable, List, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from ast_nodes import pretty_print_ast
from environment import Environment
from error_handling import (
    MonkeyParseError, MonkeyRuntimeError, format_parse_errors, parse_or_raise,
    raise_for_error
)
from interpreter import create_interpreter
from objects import NULL, Object
from parsing import Tokenizer, parse
from stdlib import list_builtin_functions
from tokens import KEYWORDS


VERSION = "0.1.0"
PROMPT = ">> "
HISTORY_FILE = "~/.monkey_history"
DEFAULT_RECURSION_LIMIT = 10000


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='monkey',
      description='Monkey Programming Language - Pratt parser and tree-walking interpreter',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.mk            # Run a Monkey script
  %(prog)s -i                   # Interactive mode
  %(prog)s --parse script.mk    # Parse and show the canonical rendering
  %(prog)s --tokens script.mk   # Show the token stream
  %(prog)s --debug script.mk    # Run with parser and evaluator tracing
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Monkey script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the AST (for debugging)'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and show the tokens (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--recursion-limit',
      type=int,
      default=DEFAULT_RECURSION_LIMIT,
      help='Host recursion limit, bounds the depth of Monkey calls (default: %(default)s)'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=f'Monkey v{VERSION}'
  )

  return parser


# ============================================================================
# SUBMISSION PIPELINE
# ============================================================================

def run_source(source: str, env: Environment, debug: bool = False,
               filename: str = "<input>", write: Callable[[str], None] = print) -> Optional[Object]:
  """
  Parse and evaluate one submission in `env`.
  Diagnostics are written and evaluation skipped; a null result is not shown.
  """
  program, errors = parse(source, filename, debug)
  if errors:
    write(format_parse_errors(errors))
    return None

  result = create_interpreter(debug, env).eval(program)
  if result is not NULL:
    write(result.render())
  return result


def read_script(script_path: str) -> str:
  with open(script_path, 'r', encoding='utf-8') as f:
    return f.read()


# ============================================================================
# FILE COMMANDS
# ============================================================================

def tokens_file(script_path: str) -> None:
  """Tokenize a Monkey script file and show the tokens"""
  try:
    source = read_script(script_path)
  except (OSError, UnicodeDecodeError) as e:
    print(f"Error: Cannot read '{script_path}': {e}")
    sys.exit(1)

  for token in Tokenizer(source, script_path).tokenize():
    print(f"{token.line}:{token.column}\t{token.kind}\t{token.literal!r}")


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Monkey script file and show the AST"""
  try:
    source = read_script(script_path)
    print(f"Parsing {script_path}...")
    program = parse_or_raise(source, script_path, debug)
  except (OSError, UnicodeDecodeError) as e:
    print(f"Error: Cannot read '{script_path}': {e}")
    sys.exit(1)
  except MonkeyParseError as e:
    print(e)
    sys.exit(1)

  print(f"\nParsed {len(program.statements)} top-level statements:")
  print("=" * 50)
  for i, statement in enumerate(program.statements, 1):
    if debug:
      print(f"\nStatement {i}:")
      print(pretty_print_ast(statement))
    else:
      print(statement.render())


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Monkey script file, printing its final value unless it is null"""
  try:
    source = read_script(script_path)
    program = parse_or_raise(source, script_path, debug)
    interpreter = create_interpreter(debug)
    result = raise_for_error(interpreter.interpret_program(program), script_path)
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)
  except MonkeyParseError as e:
    print(e)
    sys.exit(1)
  except MonkeyRuntimeError as e:
    print(e)
    sys.exit(1)
  except RecursionError:
    print(f"Error: Maximum call depth exceeded while running '{script_path}'")
    print(f"  Hint: Check for unbounded recursion or raise --recursion-limit")
    sys.exit(1)

  if result is not NULL:
    print(result.render())


# ============================================================================
# INTERACTIVE MODE
# ============================================================================

def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied
  readline.set_history_length(1000)

  completions = sorted(KEYWORDS) + list_builtin_functions() + [":parse", ":env", ":help", "exit"]

  def completer(text, state):
    options = [word for word in completions if word.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit

  def save_history():
    try:
      readline.write_history_file(history_file)
    except OSError:
      pass

  atexit.register(save_history)


def show_environment(env: Environment) -> None:
  print("Current environment:")
  bindings = list(env.bindings())
  if not bindings:
    print("  (no user-defined bindings)")
    return
  for name, value in bindings:
    val_str = value.render()
    if len(val_str) > 60:
      val_str = val_str[:57] + "..."
    print(f"  {name} = {val_str}")


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <code>     - Show the canonical, fully parenthesized rendering")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  let x = 5;                          - Binding")
  print("  let add = fn(a, b) { a + b };       - Function")
  print("  if (x > 1) { x } else { 0 }         - Conditional")
  print("  [1, 2, 3][0]                        - Array index")
  print("  {\"one\": 1}[\"one\"]                   - Hash index")
  print(f"  builtins: {', '.join(list_builtin_functions())}")


def handle_command(line: str, env: Environment, debug: bool = False) -> bool:
  """Run a REPL command; False when the line is ordinary Monkey code"""
  if line.startswith(":parse "):
    program, errors = parse(line[len(":parse "):], debug=debug)
    if errors:
      print(format_parse_errors(errors))
    else:
      print(program.render())
    return True

  if line == ":env":
    show_environment(env)
    return True

  if line == ":help":
    show_help()
    return True

  return False


def run_interactive_mode(debug: bool = False, env: Optional[Environment] = None) -> None:
  """Run Monkey in interactive mode; bindings persist across submissions"""
  print(f"Monkey v{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()
  session_env = env if env is not None else Environment.new()

  while True:
    try:
      line = input(PROMPT).strip()
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if not line:
      continue
    if line == "exit":
      break
    if handle_command(line, session_env, debug):
      continue

    try:
      run_source(line, session_env, debug)
    except RecursionError:
      print("Error: Maximum call depth exceeded")
      print("  Hint: Check for unbounded recursion or raise --recursion-limit")
    except KeyboardInterrupt:
      print("\nInterrupted")


def show_language_info() -> None:
  """Show Monkey language information"""
  print("Monkey Programming Language")
  print("=" * 50)
  print("A small dynamically typed expression language with:")
  print("• Integers, booleans, strings, arrays and hashes")
  print("• First-class functions and closures")
  print("• Lexically scoped let bindings")
  print()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Monkey"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)
  sys.setrecursionlimit(args.recursion_limit)

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.tokens:
      tokens_file(args.script)
    elif args.parse:
      parse_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, debug=args.debug)
    return

  if not args.interactive:
    show_language_info()
  run_interactive_mode(debug=args.debug)


if __name__ == "__main__":
  main()
