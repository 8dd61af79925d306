"""
Monkey Standard Library
Built-in functions resolvable by name from any scope
"""

from typing import Dict, List, Optional

from objects import (
    ARRAY_OBJ, NULL, Array, Builtin, BuiltinFunction, Error, Integer, Object,
    String
)
from utilities import arity_error, unsupported_argument_error


# ============================================================================
# HELPERS
# ============================================================================

def _array_argument(name: str, args: List[Object]) -> Object:
  """Validate a single ARRAY argument, returning it or an Error"""
  if len(args) != 1:
    return arity_error(len(args), 1)
  if not isinstance(args[0], Array):
    return Error(f"argument to `{name}` must be {ARRAY_OBJ}, got {args[0].type_name}")
  return args[0]


# ============================================================================
# PRINT FUNCTIONS
# ============================================================================

def monkey_puts(*args: Object) -> Object:
  """Print each argument on its own line"""
  for arg in args:
    print(arg.render())
  return NULL


# ============================================================================
# COLLECTION FUNCTIONS
# ============================================================================

def monkey_len(*args: Object) -> Object:
  """Get length of a string or an array"""
  if len(args) != 1:
    return arity_error(len(args), 1)
  arg = args[0]
  if isinstance(arg, String):
    return Integer(len(arg.value))
  if isinstance(arg, Array):
    return Integer(len(arg.elements))
  return unsupported_argument_error("len", arg)


def monkey_first(*args: Object) -> Object:
  """Get first element of an array, null when empty"""
  array = _array_argument("first", list(args))
  if not isinstance(array, Array):
    return array
  return array.elements[0] if array.elements else NULL


def monkey_last(*args: Object) -> Object:
  """Get last element of an array, null when empty"""
  array = _array_argument("last", list(args))
  if not isinstance(array, Array):
    return array
  return array.elements[-1] if array.elements else NULL


def monkey_rest(*args: Object) -> Object:
  """Get a new array holding all but the first element, null when empty"""
  array = _array_argument("rest", list(args))
  if not isinstance(array, Array):
    return array
  if not array.elements:
    return NULL
  return Array(list(array.elements[1:]))


def monkey_push(*args: Object) -> Object:
  """Get a new array with the value appended; the original is untouched"""
  if len(args) != 2:
    return arity_error(len(args), 2)
  array, value = args
  if not isinstance(array, Array):
    return Error(f"argument to `push` must be {ARRAY_OBJ}, got {array.type_name}")
  return Array(array.elements + [value])


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

def make_builtin_function(name: str, func: BuiltinFunction) -> Builtin:
  """Create a built-in function value"""
  return Builtin(name, func)


BUILTIN_FUNCTIONS: Dict[str, Builtin] = {
    "len": make_builtin_function("len", monkey_len),
    "first": make_builtin_function("first", monkey_first),
    "last": make_builtin_function("last", monkey_last),
    "rest": make_builtin_function("rest", monkey_rest),
    "push": make_builtin_function("push", monkey_push),
    "puts": make_builtin_function("puts", monkey_puts),
}


def get_builtin_function(name: str) -> Optional[Builtin]:
  """Get a built-in function by name, None when there is none"""
  return BUILTIN_FUNCTIONS.get(name)


def list_builtin_functions() -> List[str]:
  """List all available built-in functions"""
  return list(BUILTIN_FUNCTIONS.keys())
