"""
Utilities module for the Monkey interpreter
Contains common helpers shared by the evaluator and the builtins
"""

from typing import Callable, Dict
import operator

from objects import Error, Integer, Object, native_bool


INT64_BITS = 64
INT64_MASK = (1 << INT64_BITS) - 1
INT64_SIGN = 1 << (INT64_BITS - 1)


# ==================== INTEGER ARITHMETIC ====================

def wrap_int64(value: int) -> int:
  """
  Wrap an arbitrary Python int into the signed 64-bit range

  Examples:
    wrap_int64(2 ** 63) -> -(2 ** 63)
    wrap_int64(-1) -> -1
  """
  value &= INT64_MASK
  return value - (1 << INT64_BITS) if value & INT64_SIGN else value


def truncating_div(left: int, right: int) -> int:
  """Integer division rounding toward zero, as 64-bit machine division does"""
  quotient = abs(left) // abs(right)
  return quotient if (left < 0) == (right < 0) else -quotient


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(left: Object, op: str, right: Object) -> Error:
  """
  Generate type mismatch error

  Args:
    left: Left operand
    op: Operator text
    right: Right operand

  Returns:
    Error with formatted message
  """
  return Error(f"type mismatch: {left.type_name} {op} {right.type_name}")


def unknown_infix_operator_error(left: Object, op: str, right: Object) -> Error:
  """Generate error for an operator the operand types do not support"""
  return Error(f"unknown operator: {left.type_name} {op} {right.type_name}")


def unknown_prefix_operator_error(op: str, right: Object) -> Error:
  """Generate error for a prefix operator the operand type does not support"""
  return Error(f"unknown operator: {op}{right.type_name}")


def arity_error(got: int, want: int) -> Error:
  """
  Generate arity mismatch error

  Args:
    got: Actual number of arguments
    want: Expected number of arguments

  Returns:
    Error with formatted message
  """
  return Error(f"wrong number of arguments. got={got}, want={want}")


def unsupported_argument_error(func_name: str, arg: Object) -> Error:
  """Generate error for a builtin argument of the wrong type"""
  return Error(f"argument to `{func_name}` not supported, got {arg.type_name}")


# ==================== BINARY OPERATION FACTORIES ====================

IntegerOp = Callable[[Integer, Integer], Object]


def binary_arithmetic_op(op: Callable[[int, int], int], symbol: str) -> IntegerOp:
  """
  Factory for integer arithmetic operations

  Args:
    op: Python operator function (e.g., operator.add)
    symbol: Operator text for error messages

  Returns:
    Function combining two Integer objects, wrapping at 64 bits

  Examples:
    add = binary_arithmetic_op(operator.add, "+")
    add(Integer(1), Integer(2)) -> Integer(3)
  """
  def arithmetic(left: Integer, right: Integer) -> Object:
    if op is truncating_div and right.value == 0:
      return Error(f"division by zero: {left.value} {symbol} 0")
    return Integer(wrap_int64(op(left.value, right.value)))

  return arithmetic


def binary_comparison_op(op: Callable[[int, int], bool]) -> IntegerOp:
  """
  Factory for integer comparison operations

  Args:
    op: Python operator function (e.g., operator.lt)

  Returns:
    Function comparing two Integer objects into TRUE or FALSE
  """
  def comparison(left: Integer, right: Integer) -> Object:
    return native_bool(op(left.value, right.value))

  return comparison


INTEGER_OPERATORS: Dict[str, IntegerOp] = {
    '+': binary_arithmetic_op(operator.add, '+'),
    '-': binary_arithmetic_op(operator.sub, '-'),
    '*': binary_arithmetic_op(operator.mul, '*'),
    '/': binary_arithmetic_op(truncating_div, '/'),
    '<': binary_comparison_op(operator.lt),
    '>': binary_comparison_op(operator.gt),
    '==': binary_comparison_op(operator.eq),
    '!=': binary_comparison_op(operator.ne),
}
