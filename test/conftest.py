"""
Test configuration for Paren tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import parse
from interpreter import create_interpreter, run


@pytest.fixture
def output():
  """Collects everything `print` writes"""
  return []


@pytest.fixture
def interpreter(output):
  """Fresh interpreter writing to the output list"""
  return create_interpreter(sink=output.append)


@pytest.fixture
def run_paren():
  """Run program text in a fresh environment and return the printed lines"""
  def run_source(source):
    lines = []
    run(parse(source), sink=lines.append)
    return lines
  return run_source


@pytest.fixture
def evaluate(interpreter):
  """Evaluate the first statement of program text against the shared interpreter"""
  def evaluate_source(source):
    return interpreter.evaluate(parse(source)[0])
  return evaluate_source
