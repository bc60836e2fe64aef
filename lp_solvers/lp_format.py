"""
Writing problems in the .lp file format.

The serializer only relies on three small capability interfaces, so any
object exposing the right attributes can be rendered:

- LpExpression: renders itself as an .lp sub-expression
- AsVariable: name, integrality and bounds of one variable
- LpProblem: name, sense, objective, variables and constraints

Iteration order of variables and constraints is significant: constraints are
labelled c0, c1, ... by position, and bounds and Generals follow the variable
order.

Usage:
    from lp_solvers.lp_format import render
    text = render(problem)
"""

import logging
import math
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Protocol, Union, runtime_checkable

import numpy as np

logger = logging.getLogger(__name__)


class Sense(str, Enum):
    """Optimization direction."""

    MINIMIZE = "Minimize"
    MAXIMIZE = "Maximize"

    @classmethod
    def parse(cls, value: Union["Sense", str]) -> "Sense":
        """Accept a Sense or a case-insensitive name ("min", "maximize", ...)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("min", "minimize", "minimise"):
            return cls.MINIMIZE
        if text in ("max", "maximize", "maximise"):
            return cls.MAXIMIZE
        raise ValueError(f"Unknown optimization sense: {value!r}")


class Operator(str, Enum):
    """Comparison operator of a constraint."""

    LE = "<="
    EQ = "="
    GE = ">="

    @classmethod
    def parse(cls, value: Union["Operator", str]) -> "Operator":
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        aliases = {"<=": cls.LE, "=<": cls.LE, "<": cls.LE,
                   "=": cls.EQ, "==": cls.EQ,
                   ">=": cls.GE, "=>": cls.GE, ">": cls.GE}
        if text not in aliases:
            raise ValueError(f"Unknown constraint operator: {value!r}")
        return aliases[text]


@runtime_checkable
class LpExpression(Protocol):
    """Anything that can be written as an expression in an .lp file."""

    def to_lp_file_format(self) -> str:
        ...


@runtime_checkable
class AsVariable(Protocol):
    """
    A variable as seen by the serializer.

    The name must be unique in the problem and accepted by the solver;
    see lp_solvers.util.UniqueNameGenerator. Infinite bounds mean unbounded.
    """

    @property
    def name(self) -> str: ...

    @property
    def is_integer(self) -> bool: ...

    @property
    def lower_bound(self) -> float: ...

    @property
    def upper_bound(self) -> float: ...


@runtime_checkable
class LpProblem(Protocol):
    """A problem that can be written in the .lp format."""

    @property
    def name(self) -> str: ...

    @property
    def sense(self) -> Sense: ...

    @property
    def objective(self) -> Any: ...

    @property
    def variables(self) -> Iterable[AsVariable]: ...

    @property
    def constraints(self) -> Iterable[Any]: ...


def format_number(value: float) -> str:
    """
    Format a number the way the solvers read it back.

    Shortest decimal that round-trips, never in exponent notation, and
    without a fractional part for integral values: 5, -10, 16.5, 0.0001.
    """
    return np.format_float_positional(float(value), trim="-")


def expression_text(expression: Any) -> str:
    """Render an LpExpression, or pass a plain string through unchanged."""
    if isinstance(expression, str):
        return expression
    return expression.to_lp_file_format()


def constraint_text(constraint: Any) -> str:
    """Render `lhs op rhs` for any object with lhs, operator and rhs."""
    operator = Operator.parse(constraint.operator)
    return f"{expression_text(constraint.lhs)} {operator.value} {format_number(constraint.rhs)}"


def render(problem: LpProblem) -> str:
    """
    Render a problem as .lp text.

    Args:
        problem: Any object satisfying the LpProblem interface

    Returns:
        The complete document, ending with a lone "End" line
    """
    parts = [f"\\ {problem.name}\n\n"]

    parts.append(f"{Sense.parse(problem.sense).value}\n")
    parts.append(f"  obj: {expression_text(problem.objective)}\n\n")

    wrote_header = False
    for index, constraint in enumerate(problem.constraints):
        if not wrote_header:
            parts.append("Subject To\n")
            wrote_header = True
        parts.append(f"  c{index}: {constraint_text(constraint)}\n")
    if wrote_header:
        parts.append("\n")

    integers = []
    parts.append("Bounds\n")
    for variable in problem.variables:
        low = variable.lower_bound
        up = variable.upper_bound
        line = "  "
        if low > -math.inf:
            line += f"{format_number(low)} <= "
        line += variable.name
        if up < math.inf:
            line += f" <= {format_number(up)}"
        if math.isinf(low) and math.isinf(up):
            line += " free"
        parts.append(line + "\n")
        if variable.is_integer:
            integers.append(variable.name)

    if integers:
        parts.append("\nGenerals\n")
        for name in integers:
            parts.append(f"  {name}\n")

    parts.append("\nEnd\n")
    return "".join(parts)


def write_tmp_file(problem: LpProblem) -> Path:
    """
    Write the problem to a new uniquely named temporary .lp file.

    The caller owns the file and is responsible for deleting it.
    """
    text = render(problem)
    with tempfile.NamedTemporaryFile(
        mode="w",
        prefix=problem.name,
        suffix=".lp",
        delete=False,
        encoding="utf-8",
    ) as f:
        f.write(text)
    path = Path(f.name)
    logger.debug(f"Wrote problem {problem.name!r} to {path}")
    return path
