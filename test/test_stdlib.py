"""
Standard library tests for the Monkey interpreter
Tests builtins called directly with runtime objects
"""

import pytest
from objects import NULL, Array, Builtin, Error, Integer, String
from stdlib import (
    BUILTIN_FUNCTIONS, get_builtin_function, list_builtin_functions,
    monkey_first, monkey_last, monkey_len, monkey_push, monkey_puts,
    monkey_rest
)


class TestRegistry:
  """Test builtin lookup"""

  def test_available_builtins(self):
    assert list_builtin_functions() == ["len", "first", "last", "rest", "push", "puts"]

  def test_lookup(self):
    builtin = get_builtin_function("len")
    assert isinstance(builtin, Builtin)
    assert builtin.name == "len"
    assert builtin is BUILTIN_FUNCTIONS["len"]

  def test_unknown_builtin(self):
    assert get_builtin_function("nope") is None


class TestCollectionFunctions:
  """Test array and string builtins"""

  @pytest.fixture
  def numbers(self):
    return Array([Integer(1), Integer(2), Integer(3)])

  def test_len(self, numbers):
    assert monkey_len(String("four")) == Integer(4)
    assert monkey_len(numbers) == Integer(3)

  def test_len_errors(self):
    assert monkey_len(Integer(1)) == Error("argument to `len` not supported, got INTEGER")
    assert monkey_len() == Error("wrong number of arguments. got=0, want=1")

  def test_first_and_last(self, numbers):
    assert monkey_first(numbers) == Integer(1)
    assert monkey_last(numbers) == Integer(3)
    assert monkey_first(Array([])) is NULL
    assert monkey_last(Array([])) is NULL

  def test_rest_returns_new_array(self, numbers):
    rest = monkey_rest(numbers)
    assert rest.elements == [Integer(2), Integer(3)]
    assert rest is not numbers
    assert len(numbers.elements) == 3

  def test_push_returns_new_array(self, numbers):
    pushed = monkey_push(numbers, Integer(4))
    assert pushed.render() == "[1, 2, 3, 4]"
    assert numbers.render() == "[1, 2, 3]"

  def test_array_argument_errors(self):
    assert monkey_rest(String("x")) == Error("argument to `rest` must be ARRAY, got STRING")
    assert monkey_first(Array([]), Array([])) == Error("wrong number of arguments. got=2, want=1")


class TestPrintFunctions:
  """Test output builtins"""

  def test_puts_prints_each_argument(self, capsys):
    assert monkey_puts(String("a"), Integer(1), Array([])) is NULL
    assert capsys.readouterr().out == "a\n1\n[]\n"

  def test_puts_without_arguments(self, capsys):
    assert monkey_puts() is NULL
    assert capsys.readouterr().out == ""
