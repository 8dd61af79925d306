"""
Monkey Interpreter - Tree Walking Evaluator
Evaluates AST nodes against a lexically scoped environment.
Runtime errors and `return` are ordinary values, never host exceptions.
"""

from typing import Callable, Dict, List, Optional, Union

from ast_nodes import (
    ArrayLiteral, BlockStatement, BooleanLiteral, CallExpression,
    ExpressionStatement, FunctionLiteral, HashLiteral, Identifier, IfExpression,
    IndexExpression, InfixExpression, IntegerLiteral, LetStatement, Node,
    PrefixExpression, Program, ReturnStatement, StringLiteral
)
from environment import Environment
from objects import (
    NULL, Array, Builtin, Error, Function, Hash, Hashable, HashPair, Integer,
    Object, ReturnValue, String, is_error, is_truthy, native_bool
)
from stdlib import get_builtin_function
from utilities import (
    INTEGER_OPERATORS, type_mismatch_error, unknown_infix_operator_error,
    unknown_prefix_operator_error, wrap_int64
)


# ============================================================================
# EVALUATION ENTRY POINT
# ============================================================================

def eval_node(node: Node, env: Environment, debug: bool = False) -> Object:
  """
  Evaluate an AST node in `env` and return the resulting object.
  The only side effects are the bindings made by `let` and by calls.
  """
  if debug:
    print(f"Evaluating: {type(node).__name__}")

  evaluator = NODE_EVALUATORS.get(type(node))
  if evaluator is None:
    raise TypeError(f"Unknown node type: {type(node).__name__}")
  return evaluator(node, env, debug)


# ============================================================================
# STATEMENTS
# ============================================================================

def eval_program(node: Program, env: Environment, debug: bool = False) -> Object:
  """Evaluate top-level statements; a top-level `return` ends the program"""
  result: Object = NULL
  for statement in node.statements:
    result = eval_node(statement, env, debug)
    if isinstance(result, ReturnValue):
      return result.value
    if isinstance(result, Error):
      return result
  return result


def eval_block_statement(node: BlockStatement, env: Environment, debug: bool = False) -> Object:
  """Evaluate a block; ReturnValue and Error leave the block still wrapped"""
  result: Object = NULL
  for statement in node.statements:
    result = eval_node(statement, env, debug)
    if isinstance(result, (ReturnValue, Error)):
      return result
  return result


def eval_expression_statement(node: ExpressionStatement, env: Environment, debug: bool = False) -> Object:
  return eval_node(node.expression, env, debug)


def eval_let_statement(node: LetStatement, env: Environment, debug: bool = False) -> Object:
  """Evaluate value binding and bind in the innermost scope"""
  value = eval_node(node.value, env, debug)
  if isinstance(value, (Error, ReturnValue)):
    return value
  env.set(node.name.value, value)
  return NULL


def eval_return_statement(node: ReturnStatement, env: Environment, debug: bool = False) -> Object:
  if node.return_value is None:
    return ReturnValue(NULL)
  value = eval_node(node.return_value, env, debug)
  if isinstance(value, (Error, ReturnValue)):
    return value
  return ReturnValue(value)


# ============================================================================
# LITERALS
# ============================================================================

def eval_integer_literal(node: IntegerLiteral, env: Environment, debug: bool = False) -> Object:
  return Integer(node.value)


def eval_boolean_literal(node: BooleanLiteral, env: Environment, debug: bool = False) -> Object:
  return native_bool(node.value)


def eval_string_literal(node: StringLiteral, env: Environment, debug: bool = False) -> Object:
  return String(node.value)


def eval_array_literal(node: ArrayLiteral, env: Environment, debug: bool = False) -> Object:
  elements = eval_expressions(node.elements, env, debug)
  if isinstance(elements, Error):
    return elements
  return Array(elements)


def eval_hash_literal(node: HashLiteral, env: Environment, debug: bool = False) -> Object:
  """Evaluate key then value for each pair, in source order"""
  pairs = {}
  for key_node, value_node in node.pairs:
    key = eval_node(key_node, env, debug)
    if is_error(key):
      return key
    if not isinstance(key, Hashable):
      return Error(f"unusable as hash key: {key.type_name}")

    value = eval_node(value_node, env, debug)
    if is_error(value):
      return value

    pairs[key.hash_key()] = HashPair(key, value)
  return Hash(pairs)


def eval_function_literal(node: FunctionLiteral, env: Environment, debug: bool = False) -> Object:
  """Create a closure over the current environment; the body is not evaluated"""
  return Function(node.parameters, node.body, env)


# ============================================================================
# IDENTIFIERS
# ============================================================================

def eval_identifier(node: Identifier, env: Environment, debug: bool = False) -> Object:
  """Look up a name in the scope chain, then among the builtins"""
  value = env.get(node.value)
  if value is not None:
    return value

  builtin = get_builtin_function(node.value)
  if builtin is not None:
    return builtin

  return Error(f"identifier not found: {node.value}")


# ============================================================================
# OPERATORS
# ============================================================================

def eval_prefix_expression(node: PrefixExpression, env: Environment, debug: bool = False) -> Object:
  right = eval_node(node.right, env, debug)
  if is_error(right):
    return right
  return apply_prefix_operator(node.operator, right)


def apply_prefix_operator(operator: str, right: Object) -> Object:
  if operator == "!":
    return native_bool(not is_truthy(right))
  if operator == "-":
    if not isinstance(right, Integer):
      return unknown_prefix_operator_error("-", right)
    return Integer(wrap_int64(-right.value))
  return unknown_prefix_operator_error(operator, right)


def eval_infix_expression(node: InfixExpression, env: Environment, debug: bool = False) -> Object:
  left = eval_node(node.left, env, debug)
  if is_error(left):
    return left

  right = eval_node(node.right, env, debug)
  if is_error(right):
    return right

  return apply_infix_operator(node.operator, left, right)


def apply_infix_operator(operator: str, left: Object, right: Object) -> Object:
  if isinstance(left, Integer) and isinstance(right, Integer):
    return apply_integer_operator(operator, left, right)
  if isinstance(left, String) and isinstance(right, String):
    return apply_string_operator(operator, left, right)

  # TRUE, FALSE and NULL are singletons, so identity is value equality here
  if operator == "==":
    return native_bool(left is right)
  if operator == "!=":
    return native_bool(left is not right)

  if left.type_name != right.type_name:
    return type_mismatch_error(left, operator, right)
  return unknown_infix_operator_error(left, operator, right)


def apply_integer_operator(operator: str, left: Integer, right: Integer) -> Object:
  op = INTEGER_OPERATORS.get(operator)
  if op is None:
    return unknown_infix_operator_error(left, operator, right)
  return op(left, right)


def apply_string_operator(operator: str, left: String, right: String) -> Object:
  if operator == "+":
    return String(left.value + right.value)
  if operator == "==":
    return native_bool(left.value == right.value)
  if operator == "!=":
    return native_bool(left.value != right.value)
  return unknown_infix_operator_error(left, operator, right)


# ============================================================================
# CONDITIONALS
# ============================================================================

def eval_if_expression(node: IfExpression, env: Environment, debug: bool = False) -> Object:
  condition = eval_node(node.condition, env, debug)
  if is_error(condition):
    return condition

  if is_truthy(condition):
    return eval_node(node.consequence, env, debug)
  if node.alternative is not None:
    return eval_node(node.alternative, env, debug)
  return NULL


# ============================================================================
# FUNCTION APPLICATION
# ============================================================================

def eval_expressions(nodes, env: Environment, debug: bool = False) -> Union[List[Object], Error]:
  """Evaluate left to right, stopping at the first Error"""
  results = []
  for node in nodes:
    evaluated = eval_node(node, env, debug)
    if is_error(evaluated):
      return evaluated
    results.append(evaluated)
  return results


def eval_call_expression(node: CallExpression, env: Environment, debug: bool = False) -> Object:
  function = eval_node(node.function, env, debug)
  if is_error(function):
    return function

  args = eval_expressions(node.arguments, env, debug)
  if isinstance(args, Error):
    return args

  return apply_function(function, args, debug)


def apply_function(function: Object, args: List[Object], debug: bool = False) -> Object:
  """Call a user function or a builtin with already evaluated arguments"""
  if isinstance(function, Function):
    call_env = extend_function_env(function, args)
    evaluated = eval_node(function.body, call_env, debug)
    return unwrap_return_value(evaluated)

  if isinstance(function, Builtin):
    return function.fn(*args)

  return Error(f"not a function: {function.type_name}")


def extend_function_env(function: Function, args: List[Object]) -> Environment:
  """
  New scope enclosed by the function's defining scope, not the caller's.
  Missing arguments bind to null; extra arguments are ignored.
  """
  env = Environment.child_of(function.env)
  for i, param in enumerate(function.parameters):
    env.set(param.value, args[i] if i < len(args) else NULL)
  return env


def unwrap_return_value(obj: Object) -> Object:
  if isinstance(obj, ReturnValue):
    return obj.value
  return obj


# ============================================================================
# INDEXING
# ============================================================================

def eval_index_expression(node: IndexExpression, env: Environment, debug: bool = False) -> Object:
  left = eval_node(node.left, env, debug)
  if is_error(left):
    return left

  index = eval_node(node.index, env, debug)
  if is_error(index):
    return index

  if isinstance(left, Array) and isinstance(index, Integer):
    return index_array(left, index)
  if isinstance(left, Hash):
    return index_hash(left, index)
  return Error(f"index operator not supported: {left.type_name}")


def index_array(array: Array, index: Integer) -> Object:
  """Out of range (including negative) indexes give null"""
  if 0 <= index.value < len(array.elements):
    return array.elements[index.value]
  return NULL


def index_hash(hash_obj: Hash, key: Object) -> Object:
  if not isinstance(key, Hashable):
    return Error(f"unusable as hash key: {key.type_name}")
  value = hash_obj.get(key)
  return NULL if value is None else value


# ============================================================================
# DISPATCH TABLE
# ============================================================================

NODE_EVALUATORS: Dict[type, Callable[[Node, Environment, bool], Object]] = {
    Program: eval_program,
    BlockStatement: eval_block_statement,
    ExpressionStatement: eval_expression_statement,
    LetStatement: eval_let_statement,
    ReturnStatement: eval_return_statement,
    IntegerLiteral: eval_integer_literal,
    BooleanLiteral: eval_boolean_literal,
    StringLiteral: eval_string_literal,
    ArrayLiteral: eval_array_literal,
    HashLiteral: eval_hash_literal,
    FunctionLiteral: eval_function_literal,
    Identifier: eval_identifier,
    PrefixExpression: eval_prefix_expression,
    InfixExpression: eval_infix_expression,
    IfExpression: eval_if_expression,
    CallExpression: eval_call_expression,
    IndexExpression: eval_index_expression,
}


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

class Interpreter:
  """Evaluator bound to a session environment that persists across calls"""

  def __init__(self, debug: bool = False, env: Optional[Environment] = None):
    self.debug = debug
    self.global_env = env if env is not None else Environment.new()

  def eval(self, node: Node, env: Optional[Environment] = None) -> Object:
    return eval_node(node, self.global_env if env is None else env, self.debug)

  def interpret_program(self, program: Program) -> Object:
    """Evaluate a whole program in the session environment"""
    return self.eval(program)


def create_interpreter(debug: bool = False, env: Optional[Environment] = None) -> Interpreter:
  """Factory function returning an interpreter"""
  return Interpreter(debug, env)


def create_debug_interpreter(env: Optional[Environment] = None) -> Interpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True, env=env)
