"""
Utilities module for the Paren interpreter
Argument validation, numeric promotion and operator factories shared by the built-ins
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Type
import math

from error_handling import ArityMismatch, TypeMismatch, IncomparableTypes
from expressions import (
  Expression, IntLiteral, LongLiteral, DoubleLiteral, BooleanLiteral,
  INT_MIN, INT_MAX, LONG_MIN, LONG_MAX, is_numeric, kind_name
)


# Evaluator callback handed to built-ins: evaluate(expr, env) -> Expression
Evaluate = Callable[[Expression, Dict], Expression]

# Narrowest to widest
NUMERIC_RANK = {IntLiteral: 0, LongLiteral: 1, DoubleLiteral: 2}


# ==================== ERROR MESSAGE BUILDERS ====================

def arity_error(func_name: str, expected: str, got: int) -> ArityMismatch:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    expected: Expected number of arguments, e.g. "2" or "1 or more"
    got: Actual number of arguments

  Returns:
    ArityMismatch with formatted message
  """
  return ArityMismatch(
    f"{func_name}: wrong number of arguments; expected {expected}, got {got}"
  )


def type_mismatch_error(
  func_name: str,
  param_name: str,
  expected: str,
  actual: Expression
) -> TypeMismatch:
  """
  Generate type mismatch error

  Args:
    func_name: Function name
    param_name: Parameter name, e.g. "argument 0"
    expected: Expected kind
    actual: Offending expression

  Returns:
    TypeMismatch with formatted message
  """
  return TypeMismatch(
    f"{func_name} requires {expected} for {param_name}, got {kind_name(actual)}"
  )


# ==================== VALIDATION UTILITIES ====================

def require_exact_args(func_name: str, args: Sequence[Expression], count: int) -> None:
  """Raise ArityMismatch unless exactly count arguments were given"""
  if len(args) != count:
    raise arity_error(func_name, str(count), len(args))


def require_min_args(func_name: str, args: Sequence[Expression], count: int) -> None:
  """Raise ArityMismatch unless at least count arguments were given"""
  if len(args) < count:
    raise arity_error(func_name, f"{count} or more", len(args))


def require_numeric(func_name: str, index: int, value: Expression) -> Expression:
  if not is_numeric(value):
    raise type_mismatch_error(func_name, f"argument {index}", "a numeric value", value)
  return value


# ==================== NUMERIC PROMOTION ====================

def widest_kind(kinds: List[Type]) -> Type:
  """Widest numeric kind among kinds, Int < Long < Double. No operands means Int"""
  widest = IntLiteral
  for kind in kinds:
    if NUMERIC_RANK[kind] > NUMERIC_RANK[widest]:
      widest = kind
  return widest


def saturating_truncate(value: float, lower: int, upper: int) -> int:
  """Truncate toward zero, clamping to [lower, upper]; NaN becomes 0"""
  if math.isnan(value):
    return 0
  if value <= lower:
    return lower
  if value >= upper:
    return upper
  return int(value)


def narrow(kind: Type, value: float) -> Expression:
  """Convert a floating-point result to the given numeric literal kind"""
  if kind is DoubleLiteral:
    return DoubleLiteral(value)
  if kind is LongLiteral:
    return LongLiteral(saturating_truncate(value, LONG_MIN, LONG_MAX))
  return IntLiteral(saturating_truncate(value, INT_MIN, INT_MAX))


def ieee_divide(dividend: float, divisor: float) -> float:
  """Floating-point division with IEEE 754 results for a zero divisor"""
  if divisor == 0:
    if dividend == 0 or math.isnan(dividend):
      return math.nan
    sign = math.copysign(1.0, dividend) * math.copysign(1.0, divisor)
    return sign * math.inf
  return dividend / divisor


# ==================== OPERATOR FACTORIES ====================

def numeric_fold_op(
  op_name: str,
  op: Callable[[float, float], float],
  identity: Optional[float] = None
) -> Callable[[Dict, Sequence[Expression], Evaluate], Expression]:
  """
  Factory for variadic arithmetic built-ins

  Arithmetic is always carried out in floating point; the result is narrowed
  to the widest kind among all consumed operands.

  Args:
    op: Binary float operation folded over the operands
    op_name: Name for error messages
    identity: Starting value; when None the first operand is the seed and
      at least one argument is required

  Returns:
    Built-in implementation taking (env, args, evaluate)

  Examples:
    builtin_add = numeric_fold_op("+", operator.add, 0.0)
    builtin_add(env, (IntLiteral(1), DoubleLiteral(2.5)), eval_expression) -> DoubleLiteral(3.5)
  """

  def arithmetic(env: Dict, args: Sequence[Expression], evaluate: Evaluate) -> Expression:
    kinds = []
    operands = list(args)

    if identity is None:
      require_min_args(op_name, args, 1)
      seed = require_numeric(op_name, 0, evaluate(operands.pop(0), env))
      kinds.append(type(seed))
      total = float(seed.value)
      offset = 1
    else:
      total = identity
      offset = 0

    for index, arg in enumerate(operands, offset):
      value = require_numeric(op_name, index, evaluate(arg, env))
      kinds.append(type(value))
      total = op(total, float(value.value))

    return narrow(widest_kind(kinds), total)

  return arithmetic


def numeric_compare(op: Callable[[Any, Any], bool]) -> Callable[[Expression, Expression], bool]:
  """Compare two numeric literals: integer kinds exactly, anything involving a double as floats"""

  def compare(left: Expression, right: Expression) -> bool:
    if isinstance(left, DoubleLiteral) or isinstance(right, DoubleLiteral):
      return op(float(left.value), float(right.value))
    return op(left.value, right.value)

  return compare


def chained_comparison_op(
  op_name: str,
  numeric_test: Callable[[Expression, Expression], bool],
  same_kind_tests: Optional[Dict[Type, Callable[[Any, Any], bool]]] = None
) -> Callable[[Dict, Sequence[Expression], Evaluate], Expression]:
  """
  Factory for chained comparison built-ins

  Every adjacent pair of arguments must pass; the first failing pair yields
  false and later arguments are not evaluated. Each argument is evaluated at
  most once.

  Args:
    op_name: Name for error messages
    numeric_test: Test applied when the left operand is numeric
    same_kind_tests: Tests on raw values for non-numeric left operands,
      keyed by literal kind; the right operand must have the same kind

  Returns:
    Built-in implementation taking (env, args, evaluate)
  """
  if same_kind_tests is None:
    same_kind_tests = {}

  def compare_pair(left: Expression, right: Expression) -> bool:
    if is_numeric(left):
      if not is_numeric(right):
        raise TypeMismatch(
          f"{op_name}: arguments are not the same type ({kind_name(left)} and {kind_name(right)})"
        )
      return numeric_test(left, right)

    test = same_kind_tests.get(type(left))
    if test is None:
      raise IncomparableTypes(f"{op_name}: cannot compare {kind_name(left)} values")
    if type(right) is not type(left):
      raise TypeMismatch(
        f"{op_name}: arguments are not the same type ({kind_name(left)} and {kind_name(right)})"
      )
    return test(left.value, right.value)

  def comparison(env: Dict, args: Sequence[Expression], evaluate: Evaluate) -> Expression:
    require_min_args(op_name, args, 1)
    left = evaluate(args[0], env)
    for arg in args[1:]:
      right = evaluate(arg, env)
      if not compare_pair(left, right):
        return BooleanLiteral(False)
      left = right
    return BooleanLiteral(True)

  return comparison
