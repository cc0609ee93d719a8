"""
Paren Interpreter
Tree-walking evaluator over call trees, with one mutable environment per program run

Function calls evaluate their body in a derived environment: a copy of the
caller's bindings plus the parameter bindings. Writes made during the call
never reach the caller.
"""

from contextlib import contextmanager
from typing import Callable, Dict, List, Optional
import sys

from error_handling import (
  UndeclaredVariable,
  UndeclaredFunction,
  ArityMismatch,
  NotAFunction,
  UnsupportedOperation
)
from expressions import Expression, Identifier, Call, is_function_value
from stdlib import BUILTIN_FUNCTIONS, builtin_func, stdout_sink


# Each level of Paren call nesting costs several Python frames
RECURSION_LIMIT = 10000


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def make_runtime_env(
  bindings: Optional[Dict[str, Expression]] = None,
  sink: Optional[Callable[[str], None]] = None,
  debug: bool = False
) -> Dict:
  """Create a runtime environment"""
  return {
      'bindings': dict(bindings or {}),
      'builtins': BUILTIN_FUNCTIONS,
      'sink': sink or stdout_sink,
      'debug': debug
  }


def env_bind_value(env: Dict, name: str, value: Expression) -> None:
  """Bind name to value in place; last write wins"""
  env['bindings'][name] = value


def env_lookup_value(env: Dict, name: str) -> Optional[Expression]:
  return env['bindings'].get(name)


def env_derive(env: Dict) -> Dict:
  """Copy of env whose binding writes stay local"""
  return {
      **env,
      'bindings': dict(env['bindings'])
  }


def _trace(env: Dict, message: str) -> None:
  if env['debug']:
    print(message, file=sys.stderr)


@contextmanager
def recursion_limit(limit: int = RECURSION_LIMIT):
  """Raise the interpreter recursion limit to at least limit for the duration of the block"""
  previous = sys.getrecursionlimit()
  sys.setrecursionlimit(max(previous, limit))
  try:
    yield
  finally:
    sys.setrecursionlimit(previous)


# ============================================================================
# EVALUATION
# ============================================================================

def eval_expression(expr: Expression, env: Dict) -> Expression:
  """Fully evaluate expr to a literal or a function value"""
  evaluator = EVALUATORS.get(type(expr))
  if evaluator is None:
    # Literals evaluate to themselves
    return expr
  return evaluator(expr, env)


def eval_identifier(expr: Identifier, env: Dict) -> Expression:
  """Look up a name and evaluate its bound value"""
  value = env_lookup_value(env, expr.name)
  if value is None:
    raise UndeclaredVariable(f"Undeclared variable: {expr.name}")
  return eval_expression(value, env)


def eval_call(expr: Call, env: Dict) -> Expression:
  """Resolve a call: function literal, user-defined function, then built-in"""
  if expr.is_function_literal:
    return builtin_func(env, expr.args, eval_expression)

  bound = env_lookup_value(env, expr.name)
  if bound is not None:
    return call_user_function(expr.name, bound, expr.args, env)

  builtin = env['builtins'].get(expr.name)
  if builtin is not None:
    result = builtin['func'](env, expr.args, eval_expression)
    return eval_expression(result, env)

  raise UndeclaredFunction(f"Undeclared function: {expr.name}")


def call_user_function(name: str, func_value: Expression, args, env: Dict) -> Expression:
  """Invoke a `func` value: bind evaluated arguments to parameters and evaluate the body"""
  if not is_function_value(func_value):
    raise NotAFunction(f"{name} is not a function")

  *params, body = func_value.args
  if len(params) != len(args):
    raise ArityMismatch(
      f"{name}: wrong number of arguments; expected {len(params)}, got {len(args)}"
    )

  call_env = env_derive(env)
  for param, arg in zip(params, args):
    # Arguments are evaluated eagerly in the caller's environment
    env_bind_value(call_env, param.name, eval_expression(arg, env))

  _trace(env, f"[call] {name}({', '.join(str(call_env['bindings'][p.name]) for p in params)})")
  return eval_expression(body, call_env)


EVALUATORS = {
    Identifier: eval_identifier,
    Call: eval_call,
}


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def eval_program(exprs: List[Expression], env: Optional[Dict] = None) -> Dict:
  """
  Execute top-level expressions in order against one shared environment.
  Returns the final environment. The first error aborts the run.
  """
  if env is None:
    env = make_runtime_env()

  with recursion_limit():
    for index, expr in enumerate(exprs, 1):
      if not isinstance(expr, Call):
        raise UnsupportedOperation(f"Unsupported operation: top-level statement {index} is not a call")
      _trace(env, f"[run] statement {index}: {expr}")
      eval_expression(expr, env)

  return env


def run(program: List[Expression], sink: Optional[Callable[[str], None]] = None) -> None:
  """Run a parsed program, writing `print` output to sink"""
  eval_program(program, make_runtime_env(sink=sink))


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

class ParenInterpreter:
  """Interpreter holding one environment across successive programs (used by the REPL)"""

  def __init__(self, debug: bool = False, sink: Optional[Callable[[str], None]] = None):
    self.debug = debug
    self.sink = sink
    self.environment = make_runtime_env(sink=sink, debug=debug)

  def interpret_program(self, exprs: List[Expression]) -> Dict[str, Expression]:
    """Run exprs and return the user bindings afterwards"""
    eval_program(exprs, self.environment)
    return self.bindings

  def evaluate(self, expr: Expression) -> Expression:
    with recursion_limit():
      return eval_expression(expr, self.environment)

  @property
  def bindings(self) -> Dict[str, Expression]:
    return dict(self.environment['bindings'])

  def reset(self) -> None:
    self.environment = make_runtime_env(sink=self.sink, debug=self.debug)


def create_interpreter(debug: bool = False, sink: Optional[Callable[[str], None]] = None) -> ParenInterpreter:
  """Factory function returning an interpreter"""
  return ParenInterpreter(debug=debug, sink=sink)


def create_debug_interpreter(sink: Optional[Callable[[str], None]] = None) -> ParenInterpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True, sink=sink)
