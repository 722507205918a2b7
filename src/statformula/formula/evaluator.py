"""Restricted arithmetic evaluator for substituted formulas.

Formulas use Python expression syntax, checked node by node against a
whitelist before evaluation. Conventions follow common calculator syntax:
``^`` is exponentiation, division by zero yields ``inf`` or ``nan``, and a
small table of math functions and constants is available.
"""

import ast
import logging
import math
import operator
from typing import Any, Callable, Optional, Union

from ..config import settings

logger = logging.getLogger(__name__)

Number = Union[int, float]


class EvaluationError(Exception):
    """Raised when a formula cannot be evaluated."""

    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message


def _divide(a: Number, b: Number) -> Number:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1, b)
    return a / b


def _floor_divide(a: Number, b: Number) -> Number:
    if b == 0:
        return _divide(a, b)
    return a // b


def _mod(a: Number, b: Number) -> Number:
    if b == 0:
        return a
    return a % b


def _sign(x: Number) -> Number:
    if math.isnan(x):
        return math.nan
    return (x > 0) - (x < 0)


def _log(x: Number, base: Optional[Number] = None) -> float:
    return math.log(x) if base is None else math.log(x, base)


MAX_ROUND_DIGITS = 15


def _round(x: Number, digits: Number = 0) -> float:
    if not float(digits).is_integer() or not 0 <= digits <= MAX_ROUND_DIGITS:
        raise EvaluationError(
            "ValueError", f"number of decimals must be an integer from 0 to {MAX_ROUND_DIGITS}, got {digits}"
        )
    # Half away from zero, like most calculators
    factor = 10.0 ** int(digits)
    rounded = math.floor(abs(x) * factor + 0.5) / factor
    return math.copysign(rounded, x)


class SafeEvaluator:
    """Evaluates arithmetic expressions using AST parsing with a node whitelist."""

    BINARY_OPERATORS: dict[type, Callable[[Number, Number], Number]] = {
        ast.Add: operator.add,
        ast.Sub: operator.sub,
        ast.Mult: operator.mul,
        ast.Div: _divide,
        ast.FloorDiv: _floor_divide,
        ast.Mod: _mod,
        ast.Pow: operator.pow,
    }

    UNARY_OPERATORS: dict[type, Callable[[Number], Number]] = {
        ast.UAdd: operator.pos,
        ast.USub: operator.neg,
    }

    FUNCTIONS: dict[str, Callable[..., Number]] = {
        "abs": abs,
        "ceil": math.ceil,
        "floor": math.floor,
        "round": _round,
        "sqrt": math.sqrt,
        "cbrt": lambda x: math.copysign(abs(x) ** (1 / 3), x),
        "exp": math.exp,
        "log": _log,
        "log2": math.log2,
        "log10": math.log10,
        "min": min,
        "max": max,
        "pow": math.pow,
        "sign": _sign,
        "sin": math.sin,
        "cos": math.cos,
        "tan": math.tan,
        "mod": _mod,
    }

    CONSTANTS: dict[str, Number] = {
        "pi": math.pi,
        "e": math.e,
        "tau": math.tau,
        "Infinity": math.inf,
        "inf": math.inf,
        "NaN": math.nan,
        "nan": math.nan,
    }

    def __init__(self, max_length: Optional[int] = None, max_exponent: Optional[int] = None):
        self.max_length = max_length if max_length is not None else settings.max_formula_length
        self.max_exponent = max_exponent if max_exponent is not None else settings.max_exponent

    def evaluate(self, expression: str) -> Number:
        """
        Evaluate an arithmetic expression.

        Args:
            expression: The fully substituted formula

        Returns:
            The numeric result (may be ``nan`` or ``inf``)

        Raises:
            EvaluationError: If the expression is malformed, uses an unknown
                symbol or exceeds the configured limits
        """
        if not isinstance(expression, str):
            raise EvaluationError("TypeError", f"expected a string, got {type(expression).__name__}")

        if len(expression) > self.max_length:
            raise EvaluationError(
                "LimitExceeded",
                f"formula length {len(expression)} exceeds maximum of {self.max_length}",
            )

        source = expression.strip().replace("^", "**")
        logger.debug(f"Evaluating {source!r}")
        try:
            tree = ast.parse(source, mode="eval")
        except SyntaxError as e:
            raise EvaluationError("SyntaxError", f"{e.msg} in {expression!r}") from e

        try:
            return self._eval_node(tree.body)
        except EvaluationError:
            raise
        except (ArithmeticError, ValueError, TypeError) as e:
            raise EvaluationError(type(e).__name__, str(e)) from e

    def _eval_node(self, node: ast.AST) -> Number:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise EvaluationError("TypeError", f"unsupported literal {node.value!r}")
            # All arithmetic is double precision
            return float(node.value)

        if isinstance(node, ast.Name):
            if node.id not in self.CONSTANTS:
                raise EvaluationError("UnknownSymbol", f'Undefined symbol "{node.id}"')
            return self.CONSTANTS[node.id]

        if isinstance(node, ast.UnaryOp) and type(node.op) in self.UNARY_OPERATORS:
            return self.UNARY_OPERATORS[type(node.op)](self._eval_node(node.operand))

        if isinstance(node, ast.BinOp) and type(node.op) in self.BINARY_OPERATORS:
            left = self._eval_node(node.left)
            right = self._eval_node(node.right)
            if isinstance(node.op, ast.Pow):
                return self._power(left, right)
            return self.BINARY_OPERATORS[type(node.op)](left, right)

        if isinstance(node, ast.Call):
            return self._call(node)

        raise EvaluationError("UnsupportedExpression", f"{type(node).__name__} is not allowed")

    def _power(self, base: Number, exponent: Number) -> Number:
        if math.isfinite(exponent) and abs(exponent) > self.max_exponent:
            raise EvaluationError(
                "LimitExceeded", f"exponent {exponent} exceeds maximum of {self.max_exponent}"
            )
        if base == 0 and exponent < 0:
            return math.inf
        try:
            result: Any = base**exponent
        except OverflowError:
            negative = base < 0 and float(exponent).is_integer() and exponent % 2 == 1
            return math.copysign(math.inf, -1.0 if negative else 1.0)
        if isinstance(result, complex):
            return math.nan
        return result

    def _call(self, node: ast.Call) -> Number:
        if not isinstance(node.func, ast.Name) or node.func.id not in self.FUNCTIONS:
            name = node.func.id if isinstance(node.func, ast.Name) else type(node.func).__name__
            raise EvaluationError("UnknownSymbol", f'Undefined function "{name}"')
        if node.keywords or any(isinstance(arg, ast.Starred) for arg in node.args):
            raise EvaluationError("UnsupportedExpression", "only positional arguments are allowed")

        args = [self._eval_node(arg) for arg in node.args]
        result = self.FUNCTIONS[node.func.id](*args)
        # floor/ceil/sign return int; keep everything a float
        return float(result)


def evaluate(expression: str) -> Number:
    """Evaluate ``expression`` with the limits from the current settings."""
    return SafeEvaluator().evaluate(expression)
