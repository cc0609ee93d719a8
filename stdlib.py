"""
Paren Standard Library
The fixed table of built-in operators, display conversion and the default output sink

Built-ins receive their arguments unevaluated together with the environment
and an evaluate callback, and decide themselves which arguments to evaluate.
"""

from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence
import math
import operator

from error_handling import TypeMismatch
from expressions import (
  Expression, Identifier, Call, StringLiteral, IntLiteral, LongLiteral,
  DoubleLiteral, BooleanLiteral, FUNC_KEYWORD
)
from utilities import (
  Evaluate,
  require_exact_args,
  require_min_args,
  type_mismatch_error,
  numeric_fold_op,
  numeric_compare,
  chained_comparison_op,
  ieee_divide
)


# ============================================================================
# OUTPUT AND DISPLAY
# ============================================================================

def stdout_sink(text: str) -> None:
  """Default sink: write a line to standard output"""
  print(text)


def format_double(value: float) -> str:
  """Shortest round-trip decimal digits, never in exponent form; integral values have no fraction"""
  if math.isnan(value):
    return "NaN"
  if math.isinf(value):
    return "inf" if value > 0 else "-inf"

  text = format(Decimal(repr(value)), "f")
  if "." in text:
    text = text.rstrip("0").rstrip(".")
  return text


def to_display_string(value: Expression) -> str:
  """Convert a literal to its display text"""
  if isinstance(value, StringLiteral):
    return value.value
  if isinstance(value, BooleanLiteral):
    return "true" if value.value else "false"
  if isinstance(value, (IntLiteral, LongLiteral)):
    return str(value.value)
  if isinstance(value, DoubleLiteral):
    return format_double(value.value)
  raise TypeMismatch("Cannot convert identifier or function to string")


# ============================================================================
# BINDING AND FUNCTIONS
# ============================================================================

def builtin_assign(env: Dict, args: Sequence[Expression], evaluate: Evaluate) -> Expression:
  """Bind a name to the evaluated value; returns the value"""
  require_exact_args("=", args, 2)
  target = args[0]
  if not isinstance(target, Identifier):
    raise type_mismatch_error("=", "argument 0", "an identifier", target)

  value = evaluate(args[1], env)
  env['bindings'][target.name] = value
  return value


def builtin_func(env: Dict, args: Sequence[Expression], evaluate: Evaluate) -> Expression:
  """Function literal: parameter identifiers followed by a body call. Returns itself, the body is not run"""
  require_min_args(FUNC_KEYWORD, args, 1)
  *params, body = args
  for index, param in enumerate(params):
    if not isinstance(param, Identifier):
      raise type_mismatch_error(FUNC_KEYWORD, f"argument {index}", "an identifier", param)
  if not isinstance(body, Call):
    raise type_mismatch_error(FUNC_KEYWORD, f"argument {len(args) - 1}", "a function call", body)
  return Call(FUNC_KEYWORD, tuple(args))


def builtin_print(env: Dict, args: Sequence[Expression], evaluate: Evaluate) -> Expression:
  """Write the display text of the evaluated argument to the sink"""
  require_exact_args("print", args, 1)
  text = to_display_string(evaluate(args[0], env))
  env['sink'](text)
  return StringLiteral(text)


def builtin_if_else(env: Dict, args: Sequence[Expression], evaluate: Evaluate) -> Expression:
  """Pick a branch without evaluating it; the caller evaluates the chosen branch"""
  require_exact_args("ifElse", args, 3)
  condition = evaluate(args[0], env)
  if not isinstance(condition, BooleanLiteral):
    raise type_mismatch_error("ifElse", "argument 0", "a boolean", condition)
  return args[1] if condition.value else args[2]


# ============================================================================
# ARITHMETIC AND COMPARISON
# ============================================================================

builtin_add = numeric_fold_op("+", operator.add, 0.0)
builtin_mul = numeric_fold_op("*", operator.mul, 1.0)
builtin_sub = numeric_fold_op("-", operator.sub)
builtin_div = numeric_fold_op("/", ieee_divide)

builtin_eq = chained_comparison_op(
  "==",
  numeric_compare(operator.eq),
  {StringLiteral: operator.eq, BooleanLiteral: operator.eq}
)
builtin_gt = chained_comparison_op(">", numeric_compare(operator.gt))
# Strings only pass through `<` when equal; `>` rejects strings outright
builtin_lt = chained_comparison_op(
  "<",
  numeric_compare(operator.lt),
  {StringLiteral: operator.eq}
)


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

class BuiltinOp(Enum):
  """Closed set of built-in operators, keyed by their source name"""
  ASSIGN = "="
  FUNC = FUNC_KEYWORD
  PRINT = "print"
  ADD = "+"
  SUB = "-"
  MUL = "*"
  DIV = "/"
  EQ = "=="
  GT = ">"
  LT = "<"
  IF_ELSE = "ifElse"


BuiltinImpl = Callable[[Dict, Sequence[Expression], Evaluate], Expression]


def make_builtin_function(op: BuiltinOp, func: BuiltinImpl, signature: str = "") -> Dict:
  """Create a built-in function entry"""
  return {
      'type': 'builtin_function',
      'name': op.value,
      'op': op,
      'func': func,
      'signature': signature
  }


BUILTIN_FUNCTIONS: Dict[str, Dict] = {
  entry['name']: entry for entry in (
    make_builtin_function(BuiltinOp.ASSIGN, builtin_assign, "=(name value)"),
    make_builtin_function(BuiltinOp.FUNC, builtin_func, "func(param... body)"),
    make_builtin_function(BuiltinOp.PRINT, builtin_print, "print(value)"),
    make_builtin_function(BuiltinOp.ADD, builtin_add, "+(number...)"),
    make_builtin_function(BuiltinOp.SUB, builtin_sub, "-(seed number...)"),
    make_builtin_function(BuiltinOp.MUL, builtin_mul, "*(number...)"),
    make_builtin_function(BuiltinOp.DIV, builtin_div, "/(seed number...)"),
    make_builtin_function(BuiltinOp.EQ, builtin_eq, "==(value...)"),
    make_builtin_function(BuiltinOp.GT, builtin_gt, ">(number...)"),
    make_builtin_function(BuiltinOp.LT, builtin_lt, "<(value...)"),
    make_builtin_function(BuiltinOp.IF_ELSE, builtin_if_else, "ifElse(condition then else)"),
  )
}


def get_builtin_function(name: str) -> Optional[Dict]:
  """Get a built-in function by name, or None"""
  return BUILTIN_FUNCTIONS.get(name)


def list_builtin_functions() -> List[str]:
  """List all available built-in functions"""
  return list(BUILTIN_FUNCTIONS.keys())
