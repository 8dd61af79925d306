"""
Error handling for the Monkey interpreter
Formatting of parse diagnostics and runtime errors, plus the host exceptions
the driver raises when a whole script has to fail
"""

from typing import List, Optional

from ast_nodes import Program
from objects import Error, Object
from parsing import parse


# ============================================================================
# FORMATTING (Pure Functions)
# ============================================================================

def format_parse_errors(errors: List[str], filename: Optional[str] = None) -> str:
    """Format parse diagnostics, one per line, under a header"""
    header = "parser errors:" if filename is None else f"parser errors in '{filename}':"
    lines = [header]
    lines.extend(f"\t{error}" for error in errors)
    return "\n".join(lines)


def format_runtime_error(error: Error, filename: Optional[str] = None) -> str:
    """Format a runtime Error object the way results are displayed"""
    if filename is None:
        return error.render()
    return f"{error.render()} (in '{filename}')"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class MonkeyParseError(Exception):
    """A source text produced parse diagnostics"""

    def __init__(self, errors: List[str], filename: Optional[str] = None):
        self.errors = list(errors)
        self.filename = filename
        super().__init__(self.errors[0] if self.errors else "parse error")

    def __str__(self) -> str:
        return format_parse_errors(self.errors, self.filename)


class MonkeyRuntimeError(Exception):
    """Evaluation of a whole script ended in a runtime Error object"""

    def __init__(self, error: Error, filename: Optional[str] = None):
        self.error = error
        self.message = error.message
        self.filename = filename
        super().__init__(self.message)

    def __str__(self) -> str:
        return format_runtime_error(self.error, self.filename)


# ============================================================================
# STRICT HELPERS
# ============================================================================

def parse_or_raise(source: str, filename: str = "<input>", debug: bool = False) -> Program:
    """Parse `source`, raising MonkeyParseError if there is any diagnostic"""
    program, errors = parse(source, filename, debug)
    if errors:
        raise MonkeyParseError(errors, filename)
    return program


def raise_for_error(result: Object, filename: Optional[str] = None) -> Object:
    """Return `result` unchanged unless it is an Error, which is raised"""
    if isinstance(result, Error):
        raise MonkeyRuntimeError(result, filename)
    return result
