"""
Test configuration for Monkey parser and interpreter tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from environment import Environment
from interpreter import create_interpreter
from parsing import parse


def run_monkey(source, env=None):
  """Parse and evaluate `source`, failing the test on any diagnostic"""
  program, errors = parse(source)
  assert errors == [], f"unexpected parser errors: {errors}"
  return create_interpreter(env=env).eval(program)


@pytest.fixture
def env():
  """Provide a fresh top-level environment for each test"""
  return Environment.new()


@pytest.fixture
def evaluate():
  """Provide the parse-then-evaluate helper"""
  return run_monkey
